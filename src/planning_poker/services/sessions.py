"""Lifecycle of an estimation session: create, estimate, reveal, finalize."""

import logging
import math
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol
from uuid import UUID

from planning_poker.domain.errors import (
    AuthenticationRequiredError,
    InternalError,
    InvalidStateError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from planning_poker.domain.sessions import EstimateRecord, SessionRecord, SessionStatus
from planning_poker.domain.tokens import generate_owner_token, generate_share_token
from planning_poker.services.audit import AuditService

MAX_TOKEN_ATTEMPTS = 5
_NOT_OWNER_MESSAGE = "You do not have permission to control this session"

logger = logging.getLogger(__name__)


class SessionRepository(Protocol):
    """Persistence interface for estimation sessions."""

    def create_session(
        self, share_token: str, owner_token: str, name: str | None
    ) -> SessionRecord:
        """Create a new ACTIVE, unrevealed session and return it."""

    def get_by_share_token(self, share_token: str) -> SessionRecord | None:
        """Return a session by share token, if present."""

    def update_session(
        self,
        session_id: UUID,
        is_revealed: bool,
        status: SessionStatus,
        final_estimate: float | None,
    ) -> SessionRecord:
        """Update the mutable session fields and return the new row."""

    def delete_session(self, session_id: UUID) -> None:
        """Delete a session; its estimates cascade."""


class EstimateRepository(Protocol):
    """Persistence interface for participant estimates."""

    def upsert_estimate(
        self, session_id: UUID, nickname: str, value: float
    ) -> EstimateRecord:
        """Insert or update the estimate keyed by (session_id, nickname)."""

    def list_estimates(self, session_id: UUID) -> list[EstimateRecord]:
        """Return a session's estimates, oldest first."""


@dataclass(frozen=True)
class EstimateView:
    """Estimate as shown to a caller; value is None while hidden."""

    nickname: str
    has_estimated: bool
    value: float | None
    updated_at: datetime | None


@dataclass(frozen=True)
class SessionView:
    """A session with its estimates, masked for the caller."""

    session: SessionRecord
    estimates: list[EstimateView]
    values_visible: bool


@dataclass
class SessionService:
    """State machine for an estimation session."""

    session_repository: SessionRepository
    estimate_repository: EstimateRepository
    audit_service: AuditService
    share_token_factory: Callable[[], str] = generate_share_token
    owner_token_factory: Callable[[], str] = generate_owner_token

    def create_session(self, nickname: str, name: str | None = None) -> SessionRecord:
        """Create a session and the creator's placeholder estimate."""
        cleaned = _clean_nickname(nickname)
        session = self.session_repository.create_session(
            share_token=self._unique_share_token(),
            owner_token=self.owner_token_factory(),
            name=_clean_name(name),
        )
        self.estimate_repository.upsert_estimate(session.id, cleaned, 0)
        self.audit_service.record_event(session.id, "created", {"nickname": cleaned})
        logger.info(
            "Created estimation session",
            extra={"session_id": str(session.id), "share_token": session.share_token},
        )
        return session

    def submit_estimate(
        self, share_token: str, nickname: str, value: float
    ) -> EstimateRecord:
        """Create or replace a participant's estimate."""
        cleaned = _clean_nickname(nickname)
        _validate_value(value, "Estimate")
        session = self._get_session(share_token)
        if session.is_finalized:
            raise InvalidStateError("Session is already finalized")
        return self.estimate_repository.upsert_estimate(session.id, cleaned, value)

    def toggle_reveal(
        self, share_token: str, is_revealed: bool | None, owner_token: str | None
    ) -> SessionRecord:
        """Show or hide the cards. None flips the current state."""
        session = self._get_owned_session(share_token, owner_token)
        if session.is_finalized:
            raise InvalidStateError("Session is already finalized")
        revealed = not session.is_revealed if is_revealed is None else is_revealed
        updated = self.session_repository.update_session(
            session.id,
            is_revealed=revealed,
            status=session.status,
            final_estimate=session.final_estimate,
        )
        self.audit_service.record_event(
            session.id, "revealed" if revealed else "hidden"
        )
        return updated

    def finalize(
        self,
        share_token: str,
        final_estimate: float,
        owner_token: str | None = None,
    ) -> SessionRecord:
        """Lock in the agreed value. Finalized sessions are always revealed."""
        _validate_value(final_estimate, "Final estimate")
        session = self._get_session(share_token)
        if owner_token is not None and not session.is_owned_by(owner_token):
            raise UnauthorizedError(_NOT_OWNER_MESSAGE)
        if session.is_finalized:
            raise InvalidStateError("Session is already finalized")
        updated = self.session_repository.update_session(
            session.id,
            is_revealed=True,
            status=SessionStatus.FINALIZED,
            final_estimate=final_estimate,
        )
        self.audit_service.record_event(
            session.id, "finalized", {"final_estimate": final_estimate}
        )
        logger.info(
            "Finalized estimation session",
            extra={"session_id": str(session.id), "final_estimate": final_estimate},
        )
        return updated

    def fetch(self, share_token: str, owner_token: str | None = None) -> SessionView:
        """Return the session with estimates masked unless revealed or owner."""
        session = self._get_session(share_token)
        visible = session.is_revealed or session.is_owned_by(owner_token)
        estimates = self.estimate_repository.list_estimates(session.id)
        return SessionView(
            session=session,
            estimates=[
                EstimateView(
                    nickname=estimate.nickname,
                    has_estimated=estimate.has_estimated,
                    value=estimate.value if visible else None,
                    updated_at=estimate.updated_at,
                )
                for estimate in estimates
            ],
            values_visible=visible,
        )

    def delete_session(self, share_token: str, owner_token: str | None) -> None:
        """Delete a session owned by the caller."""
        session = self._get_owned_session(share_token, owner_token)
        self.session_repository.delete_session(session.id)
        self.audit_service.record_event(session.id, "deleted")

    def _get_session(self, share_token: str) -> SessionRecord:
        session = self.session_repository.get_by_share_token(share_token)
        if session is None:
            raise NotFoundError("Session not found")
        return session

    def _get_owned_session(
        self, share_token: str, owner_token: str | None
    ) -> SessionRecord:
        if not owner_token:
            raise AuthenticationRequiredError("Owner token is required")
        session = self._get_session(share_token)
        if not session.is_owned_by(owner_token):
            raise UnauthorizedError(_NOT_OWNER_MESSAGE)
        return session

    def _unique_share_token(self) -> str:
        for _ in range(MAX_TOKEN_ATTEMPTS):
            token = self.share_token_factory()
            if self.session_repository.get_by_share_token(token) is None:
                return token
        raise InternalError("Failed to generate a unique share token")


def _clean_nickname(nickname: str) -> str:
    cleaned = nickname.strip()
    if not cleaned:
        raise ValidationError("Nickname is required")
    return cleaned


def _validate_value(value: float, label: str) -> None:
    if not math.isfinite(value) or value < 0:
        raise ValidationError(f"{label} must be a non-negative number")


def _clean_name(name: str | None) -> str | None:
    if name is None:
        return None
    return name.strip() or None
