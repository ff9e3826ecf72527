"""Supabase-backed session repository."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from planning_poker.domain.sessions import SessionRecord, SessionStatus
from planning_poker.services.sessions import SessionRepository

SESSION_COLUMNS = (
    "id, share_token, owner_token, name, is_revealed, status, "
    "final_estimate, created_at"
)


@dataclass
class SupabaseSessionRepository(SessionRepository):
    """Supabase implementation for estimation sessions."""

    client: Client

    def create_session(
        self, share_token: str, owner_token: str, name: str | None
    ) -> SessionRecord:
        """Create a session row and return it."""
        response = (
            self.client.table("estimation_sessions")
            .insert(
                {
                    "share_token": share_token,
                    "owner_token": owner_token,
                    "name": name,
                    "is_revealed": False,
                    "status": SessionStatus.ACTIVE.value,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create session")
        return session_from_row(response.data[0])

    def get_by_share_token(self, share_token: str) -> SessionRecord | None:
        """Return a session by share token, if present."""
        response = (
            self.client.table("estimation_sessions")
            .select(SESSION_COLUMNS)
            .eq("share_token", share_token)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return session_from_row(response.data[0])

    def update_session(
        self,
        session_id: UUID,
        is_revealed: bool,
        status: SessionStatus,
        final_estimate: float | None,
    ) -> SessionRecord:
        """Update visibility, status and final estimate."""
        response = (
            self.client.table("estimation_sessions")
            .update(
                {
                    "is_revealed": is_revealed,
                    "status": status.value,
                    "final_estimate": final_estimate,
                }
            )
            .eq("id", str(session_id))
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to update session")
        return session_from_row(response.data[0])

    def delete_session(self, session_id: UUID) -> None:
        """Delete a session row; estimates are removed by the FK cascade."""
        self.client.table("estimation_sessions").delete().eq(
            "id", str(session_id)
        ).execute()


def session_from_row(row: dict[str, object]) -> SessionRecord:
    """Build a session record from a Supabase row."""
    final_estimate = row.get("final_estimate")
    created_at = row.get("created_at")
    return SessionRecord(
        id=UUID(str(row["id"])),
        share_token=str(row["share_token"]),
        owner_token=str(row["owner_token"]),
        name=row.get("name"),
        is_revealed=bool(row.get("is_revealed", False)),
        status=SessionStatus(row["status"]),
        final_estimate=float(final_estimate) if final_estimate is not None else None,
        created_at=(
            datetime.fromisoformat(created_at)
            if isinstance(created_at, str) and created_at
            else None
        ),
    )
