"""Domain models for estimation sessions."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID


class SessionStatus(str, Enum):
    """Lifecycle status of an estimation session."""

    ACTIVE = "ACTIVE"
    FINALIZED = "FINALIZED"


@dataclass(frozen=True)
class SessionRecord:
    """Represents a persisted estimation session."""

    id: UUID
    share_token: str
    owner_token: str
    name: str | None
    is_revealed: bool
    status: SessionStatus
    final_estimate: float | None
    created_at: datetime | None = None

    @property
    def is_finalized(self) -> bool:
        """Return true once the session has been finalized."""
        return self.status == SessionStatus.FINALIZED

    def is_owned_by(self, owner_token: str | None) -> bool:
        """Return true when the token controls this session."""
        return owner_token is not None and owner_token == self.owner_token


@dataclass(frozen=True)
class EstimateRecord:
    """A participant's estimate within a session.

    A value of 0 means the participant has joined but not submitted yet.
    """

    id: UUID
    session_id: UUID
    nickname: str
    value: float
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def has_estimated(self) -> bool:
        """Return true when a non-zero value was submitted."""
        return self.value > 0
