"""Admin service for reporting."""

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from planning_poker.domain.sessions import SessionRecord
from planning_poker.services.aggregation import summarize
from planning_poker.services.sessions import EstimateRepository


class AdminRepository(Protocol):
    """Persistence interface for admin data."""

    def list_recent_sessions(self, limit: int) -> list[SessionRecord]:
        """Return the most recently created sessions."""

    def list_session_events(
        self, session_id: UUID, limit: int
    ) -> list[dict[str, object]]:
        """Return recent lifecycle events for a session."""


@dataclass
class AdminService:
    """Service for admin dashboards."""

    admin_repository: AdminRepository
    estimate_repository: EstimateRepository

    def list_sessions(self, limit: int = 20) -> list[dict[str, object]]:
        """Return recent sessions with participation summaries."""
        summaries = []
        for session in self.admin_repository.list_recent_sessions(limit):
            estimates = self.estimate_repository.list_estimates(session.id)
            submitted = [e.value for e in estimates if e.has_estimated]
            stats = summarize(submitted)
            summaries.append(
                {
                    **_serialize_session(session),
                    "participants": len(estimates),
                    "submitted": stats.count,
                    "average": stats.average,
                }
            )
        return summaries

    def list_session_events(
        self, session_id: UUID, limit: int = 50
    ) -> list[dict[str, object]]:
        """Return lifecycle events for a session."""
        return self.admin_repository.list_session_events(session_id, limit)


def _serialize_session(session: SessionRecord) -> dict[str, object]:
    return {
        "id": str(session.id),
        "share_token": session.share_token,
        "name": session.name,
        "status": session.status.value,
        "is_revealed": session.is_revealed,
        "final_estimate": session.final_estimate,
        "created_at": session.created_at.isoformat() if session.created_at else None,
    }
