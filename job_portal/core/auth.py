"""
Authorization Gate - cookie-based JWT authentication for protected routes.

Provides:
- get_current_principal: FastAPI dependency (the gate itself)
- require_owner: per-route owner-match check used by handlers

The gate only answers "who are you". Whether the principal may touch a given
resource is decided by each handler, since the owner field differs per
resource (hr_email on jobs, applicant_email on applications).
"""

from typing import Optional

from fastapi import Request

from job_portal.core import cookies
from job_portal.core.errors import Unauthenticated, Forbidden, TokenError
from job_portal.core.log import get_logger
from job_portal.core.security import TokenCodec

logger = get_logger(__name__)


def get_codec(request: Request) -> TokenCodec:
    return request.app.state.codec


def get_current_principal(request: Request) -> dict:
    """
    FastAPI dependency - Get the authenticated principal's claims.

    Usage:
        @router.get("/protected")
        def route(principal: dict = Depends(get_current_principal)):
            return principal
    """
    cookie_name = request.app.state.settings.cookie_name
    token = cookies.read(request, cookie_name)
    if token is None:
        logger.info("No session cookie on %s %s", request.method, request.url.path)
        raise Unauthenticated()

    try:
        claims = get_codec(request).verify(token)
    except TokenError as e:
        logger.info(
            "Rejected credential on %s %s: %s", request.method, request.url.path, type(e).__name__
        )
        raise Unauthenticated()

    request.state.principal = claims
    return claims


def require_owner(principal: dict, owner_email: Optional[str]) -> None:
    """Raise Forbidden unless the principal's email matches the resource owner."""
    email = principal.get("email")
    if not email or not owner_email or email != owner_email:
        logger.info("Owner mismatch: principal=%s owner=%s", email, owner_email)
        raise Forbidden()
