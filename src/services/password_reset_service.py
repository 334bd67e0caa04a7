"""Password reset: single-use, time-bound reset tokens.

A user has at most one outstanding reset token: issuing a new one overwrites
the stored token, so earlier links stop working even while their signature
is still valid.

Redemption reads the user and then clears the token in a second directory
call. Two concurrent redemptions of the same token can both pass the checks.
"""

import logging
from datetime import datetime, timezone

from domain.model.errors import (
    DomainError,
    InvalidTokenError,
    NotFoundError,
    TokenExpiredError,
)
from domain.model.session import ResetClaims
from port.mailer import MailerPort
from port.user_repository import UserRepository
from services.auth_service import validate_password
from services.password_hasher import PasswordHasher
from services.token_service import RESET_TOKEN_TTL, TokenService

logger = logging.getLogger(__name__)


def build_reset_url(frontend_url: str, token: str) -> str:
    return f"{frontend_url.rstrip('/')}/reset-password?token={token}"


def request_reset(
    repo: UserRepository,
    tokens: TokenService,
    mailer: MailerPort,
    email: str,
    frontend_url: str,
    now: datetime | None = None,
) -> None:
    """Issue a reset token, store it on the user and mail the link.

    The mail outcome does not affect the result.

    Raises:
        NotFoundError: no account for this email
    """
    user = repo.get_by_email(email)
    if not user:
        raise NotFoundError("User not found")

    now = now or datetime.now(timezone.utc)
    claims = ResetClaims(user_id=user.id, email=user.email)
    token = tokens.issue(claims.to_payload(), RESET_TOKEN_TTL, now=now)

    updated = repo.update(user.id, {
        "reset_token": token,
        "reset_token_expires": now + RESET_TOKEN_TTL,
    })
    if not updated:
        raise DomainError("Failed to store reset token")

    mailer.send_reset_link(user.email, build_reset_url(frontend_url, token))
    logger.info("Password reset requested", extra={"userId": user.id})


def redeem(
    repo: UserRepository,
    hasher: PasswordHasher,
    tokens: TokenService,
    token: str,
    new_password: str,
    now: datetime | None = None,
) -> None:
    """Set a new password using a reset token.

    Raises:
        ValidationError: new password does not meet the policy
        InvalidTokenError: token forged, expired, stale or superseded
        TokenExpiredError: stored expiry has passed
    """
    validate_password(new_password)

    payload = tokens.verify(token)

    claims = ResetClaims.from_payload(payload)
    if claims is None:
        raise InvalidTokenError("Invalid or expired token")

    user = repo.get_by_id(claims.user_id)
    if not user or user.email != claims.email:
        raise InvalidTokenError("Invalid token. User does not exist")

    if user.reset_token != token:
        raise InvalidTokenError("Invalid token")

    now = now or datetime.now(timezone.utc)
    if user.reset_token_expires and now > user.reset_token_expires:
        raise TokenExpiredError("Token expired")

    updated = repo.update(user.id, {
        "password_hash": hasher.hash(new_password),
        "reset_token": None,
        "reset_token_expires": None,
    })
    if not updated:
        raise DomainError("Failed to update password")

    logger.info("Password reset completed", extra={"userId": user.id})
