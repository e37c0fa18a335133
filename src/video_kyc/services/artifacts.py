"""Artifact storage interface and upload validation."""

from typing import Protocol
from uuid import UUID

from video_kyc.domain.sessions import ArtifactKind
from video_kyc.errors import ValidationError

ALLOWED_EXTENSIONS: dict[ArtifactKind, frozenset[str]] = {
    ArtifactKind.DOCUMENT: frozenset({"jpg", "jpeg", "png"}),
    ArtifactKind.VIDEO: frozenset({"webm", "mp4"}),
}


class ArtifactStore(Protocol):
    """Persistence interface for uploaded artifact bytes."""

    def store(
        self,
        session_id: UUID,
        kind: ArtifactKind,
        data: bytes,
        declared_extension: str,
    ) -> str:
        """Persist artifact bytes and return a stable reference."""

    def open(self, ref: str) -> bytes:
        """Return the bytes stored under a reference."""

    def delete(self, ref: str) -> None:
        """Remove a stored artifact, if present."""


def sanitize_extension(kind: ArtifactKind, declared_extension: str | None) -> str:
    """Normalise an extension and check it against the allow-list for its kind."""
    cleaned = (declared_extension or "").strip().lower().removeprefix(".")
    if cleaned not in ALLOWED_EXTENSIONS[kind]:
        allowed = ", ".join(sorted(ALLOWED_EXTENSIONS[kind]))
        raise ValidationError(f"Unsupported {kind.value} extension; use one of {allowed}")
    return cleaned


def artifact_filename(session_id: UUID, kind: ArtifactKind, extension: str) -> str:
    """Build the deterministic file name for a session artifact."""
    return f"{session_id}_{kind.value}.{extension}"


def detect_image_type(data: bytes) -> str | None:
    """Infer a document image type from file signatures."""
    if data.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if data.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    return None
