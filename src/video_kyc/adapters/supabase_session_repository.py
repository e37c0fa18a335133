"""Supabase-backed session repository."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from video_kyc.domain.sessions import Session, SessionStatus
from video_kyc.services.registry import SessionRepository

_COLUMNS = "id, document_type, document_ref, video_ref, status, created_at"


@dataclass
class SupabaseSessionRepository(SessionRepository):
    """Supabase implementation for verification sessions."""

    client: Client
    table_name: str = "kyc_sessions"

    def create_session(self, session: Session) -> None:
        """Insert a session row."""
        response = (
            self.client.table(self.table_name)
            .insert(
                {
                    "id": str(session.id),
                    "document_type": session.document_type,
                    "document_ref": session.document_ref,
                    "video_ref": session.video_ref,
                    "status": session.status.value,
                    "created_at": session.created_at.isoformat(),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create session")

    def get_session(self, session_id: UUID) -> Session | None:
        """Return a session by id, if present."""
        response = (
            self.client.table(self.table_name)
            .select(_COLUMNS)
            .eq("id", str(session_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _row_to_session(response.data[0])

    def update_session(self, session: Session) -> None:
        """Update refs and status of a session row."""
        self.client.table(self.table_name).update(
            {
                "document_ref": session.document_ref,
                "video_ref": session.video_ref,
                "status": session.status.value,
                "updated_at": datetime.now(tz=UTC).isoformat(),
            }
        ).eq("id", str(session.id)).execute()

    def delete_session(self, session_id: UUID) -> None:
        """Delete a session row."""
        self.client.table(self.table_name).delete().eq("id", str(session_id)).execute()


def _row_to_session(row: dict[str, object]) -> Session:
    return Session(
        id=UUID(str(row["id"])),
        document_type=str(row["document_type"]),
        document_ref=row.get("document_ref"),  # type: ignore[arg-type]
        video_ref=row.get("video_ref"),  # type: ignore[arg-type]
        status=SessionStatus(str(row["status"])),
        created_at=datetime.fromisoformat(str(row["created_at"])),
    )
