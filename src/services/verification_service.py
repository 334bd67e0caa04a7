"""Email verification with one-time numeric codes."""

import logging
import secrets

from domain.model.errors import DomainError, InvalidCredentialsError
from domain.model.user import User
from port.user_repository import UserRepository

logger = logging.getLogger(__name__)

OTP_MIN = 100_000
OTP_MAX = 999_999


def generate_otp() -> str:
    """Return a uniformly random 6-digit code."""
    return str(OTP_MIN + secrets.randbelow(OTP_MAX - OTP_MIN + 1))


def verify_email(repo: UserRepository, email: str, otp: str) -> User:
    """Mark the account verified when email and code both match.

    Wrong email, wrong code and an already-consumed code all raise the same
    error.

    Raises:
        InvalidCredentialsError: no pending code matches
    """
    user = repo.get_by_email_and_otp(email, otp)
    if not user or user.otp is None or user.otp != otp:
        raise InvalidCredentialsError("Invalid email or OTP")

    updated = repo.update(user.id, {"is_verified": True, "otp": None})
    if not updated:
        raise DomainError("Failed to verify user")

    logger.info("User verified", extra={"userId": user.id})
    return updated
