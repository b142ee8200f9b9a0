"""
Credential Transport - the session cookie.

The cookie is httpOnly everywhere. On a secure channel it is also Secure and
SameSite=None so a front-end on another origin can send it; on plain HTTP it
falls back to SameSite=Strict. Secure=False with SameSite=None is never sent.
"""

from typing import Optional

from fastapi import Request, Response

DEFAULT_COOKIE_NAME = "token"


def cookie_attributes(is_secure: bool) -> dict:
    """Attribute set shared by attach() and detach()."""
    return {
        "httponly": True,
        "secure": is_secure,
        "samesite": "none" if is_secure else "strict",
        "path": "/",
    }


def attach(
    response: Response,
    token: str,
    is_secure: bool,
    max_age: Optional[int] = None,
    name: str = DEFAULT_COOKIE_NAME,
) -> None:
    response.set_cookie(name, token, max_age=max_age, **cookie_attributes(is_secure))


def detach(response: Response, is_secure: bool, name: str = DEFAULT_COOKIE_NAME) -> None:
    # Browsers only drop the cookie when the attributes match the ones it was set with
    response.delete_cookie(name, **cookie_attributes(is_secure))


def read(request: Request, name: str = DEFAULT_COOKIE_NAME) -> Optional[str]:
    """Raw token from the Cookie header, or None when absent/blank."""
    token = request.cookies.get(name)
    return token or None


def is_secure_request(request: Request, trust_forwarded_proto: bool = True) -> bool:
    """
    True when the request arrived over HTTPS, either directly or (behind a
    reverse proxy) as declared by X-Forwarded-Proto.
    """
    if request.url.scheme == "https":
        return True
    if trust_forwarded_proto:
        forwarded = request.headers.get("x-forwarded-proto", "")
        # Proxies chain values: "https, http" - the first hop is the client's
        return forwarded.split(",")[0].strip().lower() == "https"
    return False


def channel_is_secure(request: Request) -> bool:
    """Classification stored by the channel middleware (computed once per request)."""
    secure = getattr(request.state, "is_secure", None)
    if secure is None:
        secure = is_secure_request(request)
        request.state.is_secure = secure
    return secure


def channel_middleware(trust_forwarded_proto: bool = True):
    """
    Build an HTTP middleware that classifies the channel once per request and
    exposes it as request.state.is_secure / request.state.runtime_env.
    """
    async def classify_channel(request: Request, call_next):
        secure = is_secure_request(request, trust_forwarded_proto)
        request.state.is_secure = secure
        request.state.runtime_env = "production" if secure else "development"
        return await call_next(request)

    return classify_channel
