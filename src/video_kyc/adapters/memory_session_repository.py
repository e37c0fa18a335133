"""In-process session repository."""

from dataclasses import dataclass, field
from uuid import UUID

from video_kyc.domain.sessions import Session
from video_kyc.services.registry import SessionRepository


@dataclass
class InMemorySessionRepository(SessionRepository):
    """Keeps sessions in a dict; the registry serialises writers."""

    sessions: dict[UUID, Session] = field(default_factory=dict)

    def create_session(self, session: Session) -> None:
        self.sessions[session.id] = session

    def get_session(self, session_id: UUID) -> Session | None:
        return self.sessions.get(session_id)

    def update_session(self, session: Session) -> None:
        self.sessions[session.id] = session

    def delete_session(self, session_id: UUID) -> None:
        self.sessions.pop(session_id, None)
