"""Tests for configuration helpers."""

import pytest

from video_kyc.config import Settings, parse_verifier_command


def test_parse_verifier_command_splits_arguments() -> None:
    command = parse_verifier_command("python3 'ml service/face_matching.py' --quiet")

    assert command == ["python3", "ml service/face_matching.py", "--quiet"]


def test_parse_verifier_command_rejects_blank() -> None:
    with pytest.raises(ValueError):
        parse_verifier_command("   ")


def test_settings_defaults_keep_test_mode_off(monkeypatch) -> None:
    monkeypatch.delenv("VERIFIER_TEST_MODE", raising=False)

    settings = Settings()

    assert settings.verifier_test_mode is False
    assert settings.verifier_timeout_seconds > 0


def test_settings_read_environment(monkeypatch) -> None:
    monkeypatch.setenv("VERIFIER_TIMEOUT_SECONDS", "12.5")
    monkeypatch.setenv("VERIFIER_COMMAND", "/opt/verifier/bin/run")

    settings = Settings()

    assert settings.verifier_timeout_seconds == 12.5
    assert parse_verifier_command(settings.verifier_command) == ["/opt/verifier/bin/run"]
