"""Supabase repository for session events."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from planning_poker.services.audit import AuditRepository


@dataclass
class SupabaseAuditRepository(AuditRepository):
    """Supabase-backed audit repository."""

    client: Client

    def create_event(
        self,
        session_id: UUID,
        event_type: str,
        payload: dict[str, object],
    ) -> None:
        """Create a session event row."""
        self.client.table("session_events").insert(
            {
                "session_id": str(session_id),
                "event_type": event_type,
                "payload": payload,
            }
        ).execute()
