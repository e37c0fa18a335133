"""Entry points used by the transport layer."""

import logging
from dataclasses import dataclass
from uuid import UUID

from video_kyc.domain.sessions import ArtifactKind, Session
from video_kyc.domain.verification import VerificationOutcome
from video_kyc.errors import DuplicateAttachment, ValidationError
from video_kyc.services.artifacts import (
    ArtifactStore,
    detect_image_type,
    sanitize_extension,
)
from video_kyc.services.registry import SessionRegistry
from video_kyc.services.verification import VerificationService

logger = logging.getLogger(__name__)


@dataclass
class KycService:
    """Application service for the document, video and verify steps.

    Session ids are accepted as ``UUID`` or as the string form that
    ``Session.to_dict()`` produces.
    """

    registry: SessionRegistry
    artifact_store: ArtifactStore
    verification_service: VerificationService

    def create_session(
        self, document_type: str, document_bytes: bytes, extension: str
    ) -> Session:
        """Store an identity document and open a session for it."""
        if not document_type or not document_type.strip():
            raise ValidationError("Document type is required")
        if not document_bytes:
            raise ValidationError("No document uploaded")
        if detect_image_type(document_bytes) is None:
            raise ValidationError("Invalid file type. Only JPG, JPEG, PNG allowed")
        extension = sanitize_extension(ArtifactKind.DOCUMENT, extension)

        session = self.registry.create(document_type.strip())
        ref: str | None = None
        with self.registry.lock(session.id):
            try:
                ref = self.artifact_store.store(
                    session.id, ArtifactKind.DOCUMENT, document_bytes, extension
                )
                session = self.registry.attach_document(session.id, ref)
            except Exception:
                self._roll_back(session.id, ref)
                raise
        logger.info("Document stored for session %s", session.id)
        return session

    def attach_video(
        self, session_id: UUID | str, video_bytes: bytes, extension: str = "webm"
    ) -> Session:
        """Store the liveness video for an existing session."""
        session_id = parse_session_id(session_id)
        if not video_bytes:
            raise ValidationError("No video uploaded")
        extension = sanitize_extension(ArtifactKind.VIDEO, extension)
        with self.registry.lock(session_id):
            session = self.registry.require(session_id)
            if session.video_ref is not None:
                raise DuplicateAttachment("Video already attached to this session")
            ref = self.artifact_store.store(
                session_id, ArtifactKind.VIDEO, video_bytes, extension
            )
            session = self.registry.attach_video(session_id, ref)
        logger.info("Video stored for session %s", session_id)
        return session

    async def verify(self, session_id: UUID | str) -> VerificationOutcome:
        """Run verification for a session."""
        return await self.verification_service.verify(parse_session_id(session_id))

    def get_session(self, session_id: UUID | str) -> Session:
        """Return a session or raise if it does not exist."""
        return self.registry.require(parse_session_id(session_id))

    def _roll_back(self, session_id: UUID, ref: str | None) -> None:
        logger.warning(
            "Rolling back session %s after a failed document upload", session_id
        )
        if ref is not None:
            try:
                self.artifact_store.delete(ref)
            except Exception:
                logger.exception("Failed to delete document for session %s", session_id)
        self.registry.discard(session_id)


def parse_session_id(value: UUID | str) -> UUID:
    """Accept a session id as a UUID or its string form."""
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value).strip())
    except ValueError:
        raise ValidationError("Session id is not a valid UUID") from None
