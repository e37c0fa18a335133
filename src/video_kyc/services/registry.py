"""Concurrency-safe registry of verification sessions."""

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID, uuid4

from video_kyc.domain.sessions import Session, SessionStatus
from video_kyc.errors import DuplicateAttachment, InvalidTransition, SessionNotFound

logger = logging.getLogger(__name__)


class SessionRepository(Protocol):
    """Persistence interface for sessions."""

    def create_session(self, session: Session) -> None:
        """Persist a new session."""

    def get_session(self, session_id: UUID) -> Session | None:
        """Return a session by id, if present."""

    def update_session(self, session: Session) -> None:
        """Replace the stored state of an existing session."""

    def delete_session(self, session_id: UUID) -> None:
        """Remove a session."""


@dataclass
class SessionRegistry:
    """Owns session creation, lookup and status transitions.

    Every mutation of a session runs under that session's own re-entrant lock,
    so writers on different sessions never wait for each other. The guard lock
    is held only long enough to find or create a per-session lock.
    """

    repository: SessionRepository
    _locks: dict[UUID, threading.RLock] = field(default_factory=dict, init=False)
    _guard: threading.Lock = field(default_factory=threading.Lock, init=False)

    def create(self, document_type: str) -> Session:
        """Allocate a new PENDING session."""
        session = Session(
            id=uuid4(),
            document_type=document_type,
            created_at=datetime.now(tz=UTC),
        )
        with self.lock(session.id):
            self.repository.create_session(session)
        logger.info("Created session %s (%s)", session.id, document_type)
        return session

    def get(self, session_id: UUID) -> Session | None:
        """Return a session snapshot, if present."""
        return self.repository.get_session(session_id)

    def attach_document(self, session_id: UUID, ref: str) -> Session:
        """Set the document reference exactly once."""
        with self.lock(session_id):
            session = self.require(session_id)
            if session.document_ref is not None:
                raise DuplicateAttachment("Document already attached to this session")
            updated = replace(session, document_ref=ref)
            self.repository.update_session(updated)
        return updated

    def attach_video(self, session_id: UUID, ref: str) -> Session:
        """Set the video reference exactly once."""
        with self.lock(session_id):
            session = self.require(session_id)
            if session.video_ref is not None:
                raise DuplicateAttachment("Video already attached to this session")
            updated = replace(session, video_ref=ref)
            self.repository.update_session(updated)
        return updated

    def set_status(self, session_id: UUID, status: SessionStatus) -> Session:
        """Move a PENDING session into a terminal status."""
        with self.lock(session_id):
            session = self.require(session_id)
            if session.status.is_terminal or not status.is_terminal:
                raise InvalidTransition(
                    f"Cannot move session from {session.status} to {status}"
                )
            updated = replace(session, status=status)
            self.repository.update_session(updated)
        self._forget_lock(session_id)
        logger.info("Session %s is now %s", session_id, status)
        return updated

    def discard(self, session_id: UUID) -> None:
        """Drop a session that never received its document."""
        with self.lock(session_id):
            self.repository.delete_session(session_id)
        self._forget_lock(session_id)

    @contextmanager
    def lock(self, session_id: UUID) -> Iterator[None]:
        """Hold the per-session lock; re-entrant for the owning thread."""
        with self._guard:
            session_lock = self._locks.setdefault(session_id, threading.RLock())
        with session_lock:
            yield

    def require(self, session_id: UUID) -> Session:
        """Return a session or raise SessionNotFound."""
        session = self.repository.get_session(session_id)
        if session is None:
            self._forget_lock(session_id)
            raise SessionNotFound(session_id)
        return session

    def _forget_lock(self, session_id: UUID) -> None:
        # Terminal, discarded and unknown sessions reject every mutation.
        with self._guard:
            self._locks.pop(session_id, None)
