"""Shared-secret header check."""

from __future__ import annotations

from starlette.datastructures import Headers

AUTH_HEADER = "x-auth"


def verify_auth(secret: str, headers: Headers) -> bool:
    """True when the x-auth header is present and equals ``secret``."""
    value = headers.get(AUTH_HEADER)
    if value is None:
        return False
    return value == secret
