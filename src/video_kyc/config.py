"""Application configuration."""

import os
import shlex
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    upload_dir: Path = Path("uploads")
    verifier_command: str = "python3 ml-service/face_matching.py"
    verifier_timeout_seconds: float = 60.0
    verifier_test_mode: bool = False
    supabase_url: str | None = None
    supabase_service_key: str | None = None
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_verifier_command(raw: str) -> list[str]:
    """Split the configured verifier command into argv parts."""
    parts = shlex.split(raw.strip())
    if not parts:
        raise ValueError("verifier_command must not be empty")
    return parts
