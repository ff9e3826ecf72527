"""Domain errors raised by the session services."""


class PokerError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(PokerError):
    """Malformed or out-of-range input."""


class InvalidStateError(PokerError):
    """Operation not allowed in the session's current state."""


class AuthenticationRequiredError(PokerError):
    """An owner token was required but not supplied."""

    status_code = 401


class UnauthorizedError(PokerError):
    """The supplied owner token does not control the session."""

    status_code = 403


class NotFoundError(PokerError):
    """No session exists for the given token."""

    status_code = 404


class InternalError(PokerError):
    """Unexpected failure; details stay server-side."""

    status_code = 500
