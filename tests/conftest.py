"""Shared test fixtures."""

import asyncio
import sys
import textwrap
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from video_kyc.adapters.local_artifact_store import LocalArtifactStore
from video_kyc.adapters.memory_session_repository import InMemorySessionRepository
from video_kyc.config import Settings
from video_kyc.services.kyc import KycService
from video_kyc.services.registry import SessionRegistry
from video_kyc.services.verification import VerificationService, VerifierClient

JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"fake-jpeg-body"
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"fake-png-body"
VIDEO_BYTES = b"\x1a\x45\xdf\xa3" + b"fake-webm-body"

WELL_FORMED_RECORD = (
    '{"verified": true, "matchScore": 0.85, "confidence": "HIGH", '
    '"livenessCheck": true}'
)


@dataclass
class FakeVerifierClient(VerifierClient):
    """Fake verifier returning canned output or raising a canned error."""

    output: str = WELL_FORMED_RECORD
    error: Exception | None = None
    delay: float = 0.0
    calls: list[tuple[str, str, float]] = field(default_factory=list)

    async def invoke(self, document_ref: str, video_ref: str, timeout: float) -> str:
        self.calls.append((document_ref, video_ref, timeout))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.output


def write_verifier_script(directory: Path, body: str) -> list[str]:
    """Write a Python verifier script and return the command to run it."""
    script = directory / "verifier.py"
    script.write_text(textwrap.dedent(body))
    return [sys.executable, str(script)]


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        upload_dir=tmp_path / "uploads",
        verifier_command="python3 verifier.py",
        verifier_timeout_seconds=5.0,
    )


@pytest.fixture
def session_repository() -> InMemorySessionRepository:
    return InMemorySessionRepository()


@pytest.fixture
def registry(session_repository: InMemorySessionRepository) -> SessionRegistry:
    return SessionRegistry(session_repository)


@pytest.fixture
def artifact_store(tmp_path: Path) -> LocalArtifactStore:
    return LocalArtifactStore.create(tmp_path / "uploads")


@pytest.fixture
def verifier() -> FakeVerifierClient:
    return FakeVerifierClient()


@pytest.fixture
def verification_service(
    registry: SessionRegistry, verifier: FakeVerifierClient
) -> VerificationService:
    return VerificationService(registry=registry, verifier=verifier, timeout_seconds=5.0)


@pytest.fixture
def kyc_service(
    registry: SessionRegistry,
    artifact_store: LocalArtifactStore,
    verification_service: VerificationService,
) -> KycService:
    return KycService(
        registry=registry,
        artifact_store=artifact_store,
        verification_service=verification_service,
    )
