"""Domain models for verification sessions."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from uuid import UUID


class SessionStatus(StrEnum):
    """Lifecycle status of a session."""

    PENDING = "PENDING"
    VERIFIED = "VERIFIED"
    FAILED = "FAILED"

    @property
    def is_terminal(self) -> bool:
        return self is not SessionStatus.PENDING


class ArtifactKind(StrEnum):
    """Kinds of uploaded artifacts."""

    DOCUMENT = "document"
    VIDEO = "video"


@dataclass(frozen=True)
class Session:
    """Represents one document + video submission."""

    id: UUID
    document_type: str
    created_at: datetime
    status: SessionStatus = SessionStatus.PENDING
    document_ref: str | None = None
    video_ref: str | None = None

    @property
    def is_complete(self) -> bool:
        """Return True once both artifacts are attached."""
        return self.document_ref is not None and self.video_ref is not None

    def to_dict(self) -> dict[str, object]:
        """Serialize using the public field names."""
        return {
            "id": str(self.id),
            "documentType": self.document_type,
            "documentRef": self.document_ref,
            "videoRef": self.video_ref,
            "createdAt": self.created_at.isoformat(),
            "status": self.status.value,
        }
