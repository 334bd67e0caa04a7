"""Signed, time-bound bearer tokens (JWT).

Session tokens live for a day, password-reset tokens for an hour. Every
failure mode of verify() surfaces as the same InvalidTokenError so callers
cannot tell a forged token from an expired one.
"""

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt

from domain.model.errors import InvalidTokenError

logger = logging.getLogger(__name__)

DEFAULT_ALGORITHM = "HS256"
SESSION_TOKEN_TTL = timedelta(days=1)
RESET_TOKEN_TTL = timedelta(hours=1)

_RESERVED_CLAIMS = {"exp", "iat", "jti"}


class TokenService:
    def __init__(self, secret: str, algorithm: str = DEFAULT_ALGORITHM):
        if not secret:
            raise ValueError("Token signing secret must not be empty")
        self._secret = secret
        self.algorithm = algorithm

    def issue(self, claims: dict[str, Any], ttl: timedelta, now: datetime | None = None) -> str:
        """Sign claims with an absolute expiry of now + ttl.

        A random jti makes tokens issued in the same second distinct.
        """
        clash = _RESERVED_CLAIMS & set(claims)
        if clash:
            raise ValueError(f"Reserved claims cannot be overridden: {sorted(clash)}")

        issued_at = now or datetime.now(timezone.utc)
        payload = {
            **claims,
            "iat": issued_at,
            "exp": issued_at + ttl,
            "jti": secrets.token_hex(16),
        }
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def verify(self, token: str) -> dict[str, Any]:
        """Verify signature and expiry, returning the claims.

        Raises:
            InvalidTokenError: bad signature, malformed token, or expired
        """
        if not token:
            raise InvalidTokenError("Invalid or expired token")
        try:
            return jwt.decode(token, self._secret, algorithms=[self.algorithm])
        except JWTError as e:
            logger.debug(f"JWT verification failed: {e}")
            raise InvalidTokenError("Invalid or expired token") from e
