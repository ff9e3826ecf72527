"""FastAPI application factory."""

import logging
from datetime import datetime

from fastapi import FastAPI, Header, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from planning_poker.api.admin import router as admin_router
from planning_poker.api.models import (
    CreateSessionRequest,
    FinalizeRequest,
    RevealRequest,
    SubmitEstimateRequest,
)
from planning_poker.app_logging import configure_logging
from planning_poker.config import build_share_url
from planning_poker.containers import AppContainer
from planning_poker.domain.errors import InternalError, PokerError
from planning_poker.domain.sessions import EstimateRecord, SessionRecord
from planning_poker.services.aggregation import EstimateStatistics, summarize
from planning_poker.services.sessions import EstimateView, SessionView

_INTERNAL_ERROR_MESSAGE = "Internal server error"


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    app = FastAPI()
    app.state.container = container

    app.include_router(admin_router)

    @app.exception_handler(PokerError)
    async def poker_error_handler(request: Request, exc: PokerError) -> JSONResponse:
        if isinstance(exc, InternalError):
            logger.error(
                "Internal error: %s",
                exc.message,
                exc_info=exc,
                extra={"path": request.url.path},
            )
            return JSONResponse(
                status_code=exc.status_code, content={"error": _INTERNAL_ERROR_MESSAGE}
            )
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=400, content={"error": _describe_validation_error(exc)}
        )

    @app.exception_handler(Exception)
    async def unexpected_error_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        logger.error(
            "Unhandled error",
            exc_info=exc,
            extra={"path": request.url.path},
        )
        return JSONResponse(status_code=500, content={"error": _INTERNAL_ERROR_MESSAGE})

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/sessions")
    async def create_session(
        body: CreateSessionRequest, request: Request
    ) -> dict[str, object]:
        """Start a session and return the share link and owner token."""
        state_container: AppContainer = request.app.state.container
        session = state_container.session_service.create_session(
            nickname=body.nickname, name=body.name
        )
        base_url = state_container.settings.public_base_url or _request_base_url(
            request
        )
        return {
            "sessionId": str(session.id),
            "shareToken": session.share_token,
            "ownerToken": session.owner_token,
            "shareUrl": build_share_url(base_url, session.share_token),
        }

    @app.get("/sessions/{share_token}")
    async def get_session(
        share_token: str,
        request: Request,
        x_owner_token: str | None = Header(default=None),
    ) -> dict[str, object]:
        """Return the session and its estimates, masked until revealed."""
        state_container: AppContainer = request.app.state.container
        view = state_container.session_service.fetch(share_token, x_owner_token)
        return _serialize_view(view)

    @app.delete("/sessions/{share_token}")
    async def delete_session(
        share_token: str,
        request: Request,
        x_owner_token: str | None = Header(default=None),
    ) -> dict[str, object]:
        """Delete a session owned by the caller."""
        state_container: AppContainer = request.app.state.container
        state_container.session_service.delete_session(share_token, x_owner_token)
        return {"success": True}

    @app.post("/sessions/{share_token}/estimates")
    async def submit_estimate(
        share_token: str, body: SubmitEstimateRequest, request: Request
    ) -> dict[str, object]:
        """Create or update the caller's estimate."""
        state_container: AppContainer = request.app.state.container
        estimate = state_container.session_service.submit_estimate(
            share_token, nickname=body.nickname, value=body.value
        )
        return {"success": True, "estimate": _serialize_estimate(estimate)}

    @app.patch("/sessions/{share_token}/reveal")
    async def toggle_reveal(
        share_token: str, body: RevealRequest, request: Request
    ) -> dict[str, object]:
        """Show or hide all estimates."""
        state_container: AppContainer = request.app.state.container
        session = state_container.session_service.toggle_reveal(
            share_token, is_revealed=body.is_revealed, owner_token=body.owner_token
        )
        return {"success": True, "session": _serialize_session(session)}

    @app.post("/sessions/{share_token}/finalize")
    async def finalize_session(
        share_token: str, body: FinalizeRequest, request: Request
    ) -> dict[str, object]:
        """Store the agreed estimate and close the session."""
        state_container: AppContainer = request.app.state.container
        session = state_container.session_service.finalize(
            share_token,
            final_estimate=body.final_estimate,
            owner_token=body.owner_token,
        )
        return {"success": True, "session": _serialize_session(session)}

    return app


def _request_base_url(request: Request) -> str:
    """Derive the public origin from proxy headers."""
    protocol = request.headers.get("x-forwarded-proto", "http")
    host = request.headers.get("host", "localhost:8000")
    return f"{protocol}://{host}"


def _describe_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "invalid value")
    return f"Invalid request: {location}: {message}" if location else message


def _isoformat(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def _serialize_session(session: SessionRecord) -> dict[str, object]:
    return {
        "id": str(session.id),
        "name": session.name,
        "shareToken": session.share_token,
        "isRevealed": session.is_revealed,
        "status": session.status.value,
        "finalEstimate": session.final_estimate,
        "createdAt": _isoformat(session.created_at),
    }


def _serialize_estimate(estimate: EstimateRecord) -> dict[str, object]:
    return {
        "nickname": estimate.nickname,
        "value": estimate.value,
        "updatedAt": _isoformat(estimate.updated_at),
    }


def _serialize_estimate_view(estimate: EstimateView) -> dict[str, object]:
    payload: dict[str, object] = {
        "nickname": estimate.nickname,
        "hasEstimated": estimate.has_estimated,
        "updatedAt": _isoformat(estimate.updated_at),
    }
    if estimate.value is not None:
        payload["value"] = estimate.value
    return payload


def _serialize_statistics(stats: EstimateStatistics) -> dict[str, object]:
    return {
        "average": stats.average,
        "median": stats.median,
        "min": stats.minimum,
        "max": stats.maximum,
        "count": stats.count,
    }


def _serialize_view(view: SessionView) -> dict[str, object]:
    """Build the session payload; statistics only when values are visible."""
    statistics = None
    if view.values_visible:
        submitted = [
            estimate.value
            for estimate in view.estimates
            if estimate.has_estimated and estimate.value is not None
        ]
        statistics = _serialize_statistics(summarize(submitted))
    return {
        "session": _serialize_session(view.session),
        "estimates": [_serialize_estimate_view(e) for e in view.estimates],
        "statistics": statistics,
    }
