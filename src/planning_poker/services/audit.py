"""Audit trail for session lifecycle events."""

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID


class AuditRepository(Protocol):
    """Persistence interface for session events."""

    def create_event(
        self,
        session_id: UUID,
        event_type: str,
        payload: dict[str, object],
    ) -> None:
        """Create a session event row."""


@dataclass
class AuditService:
    """Service for recording session lifecycle events."""

    repository: AuditRepository

    def record_event(
        self,
        session_id: UUID,
        event_type: str,
        payload: dict[str, object] | None = None,
    ) -> None:
        """Persist a lifecycle event for a session."""
        self.repository.create_event(
            session_id=session_id,
            event_type=event_type,
            payload=payload or {},
        )
