"""Filesystem-backed artifact store."""

import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from uuid import UUID

from video_kyc.domain.sessions import ArtifactKind
from video_kyc.errors import StorageError, ValidationError
from video_kyc.services.artifacts import (
    ArtifactStore,
    artifact_filename,
    sanitize_extension,
)

logger = logging.getLogger(__name__)

_DIRECTORIES = {
    ArtifactKind.DOCUMENT: "documents",
    ArtifactKind.VIDEO: "videos",
}


@dataclass
class LocalArtifactStore(ArtifactStore):
    """Stores artifacts under ``<root>/documents`` and ``<root>/videos``.

    Writes land in a temporary sibling and are renamed over the target, so a
    retry for the same session and kind replaces the earlier file whole.
    """

    root: Path

    @classmethod
    def create(cls, root: Path) -> "LocalArtifactStore":
        """Create a store and its upload directories."""
        store = cls(root=root.resolve())
        try:
            for directory in _DIRECTORIES.values():
                (store.root / directory).mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageError("Failed to prepare upload directories") from exc
        return store

    def store(
        self,
        session_id: UUID,
        kind: ArtifactKind,
        data: bytes,
        declared_extension: str,
    ) -> str:
        """Write artifact bytes atomically and return the file path."""
        if not data:
            raise ValidationError(f"Empty {kind.value} upload")
        extension = sanitize_extension(kind, declared_extension)
        directory = self.root / _DIRECTORIES[kind]
        target = directory / artifact_filename(session_id, kind, extension)

        tmp_name: str | None = None
        try:
            directory.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                dir=directory, prefix=f".{target.name}.", delete=False
            ) as handle:
                tmp_name = handle.name
                handle.write(data)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, target)
        except OSError as exc:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)
            logger.error("Failed to write %s for session %s: %s", kind, session_id, exc)
            raise StorageError() from exc

        logger.info("Stored %s (%d bytes) for session %s", kind, len(data), session_id)
        return str(target)

    def open(self, ref: str) -> bytes:
        """Read back a stored artifact."""
        path = self._resolve(ref)
        try:
            return path.read_bytes()
        except OSError as exc:
            raise StorageError("Failed to read artifact") from exc

    def delete(self, ref: str) -> None:
        """Remove a stored artifact; missing files are ignored."""
        try:
            self._resolve(ref).unlink(missing_ok=True)
        except OSError as exc:
            raise StorageError("Failed to delete artifact") from exc

    def _resolve(self, ref: str) -> Path:
        path = Path(ref).resolve()
        if not path.is_relative_to(self.root):
            raise ValidationError("Artifact reference is outside the store")
        return path
