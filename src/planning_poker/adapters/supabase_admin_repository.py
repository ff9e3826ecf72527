"""Supabase admin data access."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from planning_poker.adapters.supabase_session_repository import (
    SESSION_COLUMNS,
    session_from_row,
)
from planning_poker.domain.sessions import SessionRecord
from planning_poker.services.admin import AdminRepository


@dataclass
class SupabaseAdminRepository(AdminRepository):
    """Supabase implementation for admin queries."""

    client: Client

    def list_recent_sessions(self, limit: int) -> list[SessionRecord]:
        """Return sessions ordered by creation time, newest first."""
        response = (
            self.client.table("estimation_sessions")
            .select(SESSION_COLUMNS)
            .order("created_at", desc=True)
            .limit(limit)
            .execute()
        )
        return [session_from_row(row) for row in response.data or []]

    def list_session_events(
        self, session_id: UUID, limit: int
    ) -> list[dict[str, object]]:
        """Return recent lifecycle events for a session."""
        response = (
            self.client.table("session_events")
            .select("id, session_id, event_type, payload, created_at")
            .eq("session_id", str(session_id))
            .order("created_at", desc=True)
            .limit(limit)
            .execute()
        )
        return response.data or []
