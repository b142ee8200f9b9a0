"""
Authentication Routes

POST /jwt    - Sign the posted principal claims into the session cookie
POST /logout - Clear the session cookie

There is no password check here: the front-end signs users in with its
identity provider first and then posts the user's claims. Logout only clears
the cookie; the token itself stays valid until it expires.
"""

from fastapi import APIRouter, Request, Response

from job_portal.core import cookies
from job_portal.core.auth import get_codec
from job_portal.core.log import get_logger
from job_portal.schemas.schemas import TokenRequest, SuccessResponse

logger = get_logger(__name__)

router = APIRouter(tags=["Authentication"])


@router.post("/jwt", response_model=SuccessResponse)
def issue_token(claims: TokenRequest, request: Request, response: Response):
    """Issue a credential for the posted claims and set it as the `token` cookie."""
    settings = request.app.state.settings
    token = get_codec(request).issue(claims.model_dump())
    cookies.attach(
        response,
        token,
        is_secure=cookies.channel_is_secure(request),
        max_age=settings.token_ttl_seconds,
        name=settings.cookie_name,
    )
    logger.info("Issued token for %s", claims.email)
    return SuccessResponse()


@router.post("/logout", response_model=SuccessResponse)
def logout(request: Request, response: Response):
    """Clear the session cookie (same attributes it was set with)."""
    cookies.detach(
        response,
        is_secure=cookies.channel_is_secure(request),
        name=request.app.state.settings.cookie_name,
    )
    return SuccessResponse()
