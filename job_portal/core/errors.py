"""
Error taxonomy shared by the gate and the route handlers.

Every AppError carries the HTTP status it maps to; the handlers registered
in main.py render them as {"message": ..., "status": ...}.
Token failures are their own family so the codec stays free of HTTP concerns.
"""

from fastapi import status


class AppError(Exception):
    """Base class for errors that terminate a request with a known status."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "internal server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthenticated(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "unauthorized access"


class Forbidden(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "forbidden access"


class InvalidArgument(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "invalid argument"


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "not found"


class Unavailable(AppError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = "document store unavailable"


# ============================================================
# TOKEN ERRORS (raised by TokenCodec.verify)
# ============================================================

class TokenError(Exception):
    """Credential failed verification."""


class MalformedToken(TokenError):
    pass


class InvalidSignature(TokenError):
    pass


class TokenExpired(TokenError):
    pass
