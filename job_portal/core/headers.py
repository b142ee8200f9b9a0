"""
Security response headers.

A fixed set of hardening headers on every response. Strict-Transport-Security
is only sent over a secure channel, as classified by the channel middleware.
"""

from fastapi import Request

HSTS_VALUE = "max-age=15552000; includeSubDomains"

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
    "X-DNS-Prefetch-Control": "off",
    "X-Download-Options": "noopen",
    "Cross-Origin-Opener-Policy": "same-origin",
}


def security_headers_middleware():
    """Build an HTTP middleware that stamps SECURITY_HEADERS on each response."""
    async def add_security_headers(request: Request, call_next):
        response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        if getattr(request.state, "is_secure", False):
            response.headers.setdefault("Strict-Transport-Security", HSTS_VALUE)
        return response

    return add_security_headers
