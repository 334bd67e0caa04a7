"""Typed token claims and the per-request auth context."""

from dataclasses import dataclass
from typing import Any

from domain.model.user import User


@dataclass(frozen=True)
class SessionClaims:
    """Subject carried by a session token."""
    user_id: str
    email: str

    def to_payload(self) -> dict[str, Any]:
        return {'userId': self.user_id, 'email': self.email}

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> 'SessionClaims | None':
        """Return None when the payload lacks the session subject."""
        user_id = payload.get('userId')
        email = payload.get('email')
        if not isinstance(user_id, str) or not isinstance(email, str):
            return None
        return cls(user_id=user_id, email=email)


@dataclass(frozen=True)
class ResetClaims:
    """Subject carried by a password-reset token."""
    user_id: str
    email: str

    def to_payload(self) -> dict[str, Any]:
        return {'id': self.user_id, 'email': self.email}

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> 'ResetClaims | None':
        user_id = payload.get('id')
        email = payload.get('email')
        if not isinstance(user_id, str) or not isinstance(email, str):
            return None
        return cls(user_id=user_id, email=email)


@dataclass(frozen=True)
class AuthContext:
    """Request context threaded through authenticate -> authorize -> handler.

    `user` is only set once the caller record has been re-resolved from the
    directory by the authorization guard.
    """
    claims: SessionClaims
    user: User | None = None
