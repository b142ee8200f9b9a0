"""
Token Codec - signed, time-limited credentials (JWT).

Signing and signature checks are delegated to python-jose; the codec adds
the issue/expiry claims and maps jose failures onto the TokenError family:

- MalformedToken    token is not a decodable JWT
- InvalidSignature  signature does not verify against our secret
- TokenExpired      now >= exp
"""

import time
from datetime import timedelta
from typing import Callable, Union

from jose import JWTError, jwt

from job_portal.core.config import Settings, get_settings
from job_portal.core.errors import MalformedToken, InvalidSignature, TokenExpired

# Claims added by the codec itself; stripped again on verify
RESERVED_CLAIMS = ("iat", "exp")

# Signature is the only thing jose validates; exp is checked here so
# that the boundary (now == exp) is ours to define.
_DECODE_OPTIONS = {
    "verify_signature": True,
    "verify_exp": False,
    "verify_nbf": False,
    "verify_iat": False,
    "verify_aud": False,
    "verify_iss": False,
    "verify_sub": False,
    "verify_jti": False,
    "verify_at_hash": False,
}


class TokenCodec:
    """
    Issue and verify credentials with a server-held secret.

    Usage:
        codec = TokenCodec("s3cret", ttl=timedelta(hours=10))
        token = codec.issue({"email": "a@x.com"})
        claims = codec.verify(token)   # {"email": "a@x.com"}
    """

    def __init__(
        self,
        secret: str,
        ttl: Union[timedelta, int] = timedelta(hours=10),
        algorithm: str = "HS256",
        clock: Callable[[], float] = time.time,
    ):
        if not secret:
            raise ValueError("token secret must not be empty")
        self.secret = secret
        self.ttl = _seconds(ttl)
        self.algorithm = algorithm
        self.clock = clock

    def issue(self, claims: dict, ttl: Union[timedelta, int, None] = None) -> str:
        """Sign a copy of the claims plus iat/exp."""
        now = self.clock()
        lifetime = self.ttl if ttl is None else _seconds(ttl)
        to_encode = dict(claims)
        to_encode.update({"iat": int(now), "exp": int(now + lifetime)})
        return jwt.encode(to_encode, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> dict:
        """Return the principal claims or raise a TokenError subclass."""
        try:
            jwt.get_unverified_claims(token)
        except (JWTError, AttributeError, TypeError) as e:
            raise MalformedToken(str(e)) from e

        try:
            payload = jwt.decode(
                token, self.secret, algorithms=[self.algorithm], options=_DECODE_OPTIONS
            )
        except JWTError as e:
            raise InvalidSignature(str(e)) from e

        exp = payload.get("exp")
        if isinstance(exp, bool) or not isinstance(exp, (int, float)):
            raise MalformedToken("token carries no numeric exp claim")
        if self.clock() >= exp:
            raise TokenExpired("token expired")

        return {k: v for k, v in payload.items() if k not in RESERVED_CLAIMS}


def _seconds(ttl: Union[timedelta, int]) -> int:
    if isinstance(ttl, timedelta):
        return int(ttl.total_seconds())
    return int(ttl)


def codec_from_settings(settings: Settings = None) -> TokenCodec:
    """Build the codec from app settings."""
    settings = settings or get_settings()
    return TokenCodec(
        settings.access_token_secret,
        ttl=settings.token_ttl_seconds,
        algorithm=settings.jwt_algorithm,
    )
