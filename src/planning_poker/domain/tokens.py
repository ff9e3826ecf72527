"""Token generation for session links."""

import secrets

SHARE_TOKEN_LENGTH = 16
OWNER_TOKEN_LENGTH = 32


def generate_share_token() -> str:
    """Return a 16-character URL-safe token for the share link."""
    return secrets.token_urlsafe(12)[:SHARE_TOKEN_LENGTH]


def generate_owner_token() -> str:
    """Return a 32-character URL-safe token that authorizes owner actions."""
    return secrets.token_urlsafe(24)[:OWNER_TOKEN_LENGTH]
