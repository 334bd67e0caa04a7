"""Auth service: registration, login and session authentication.

Pure business logic with no HTTP dependencies.
Raises domain errors that route handlers map to HTTP status codes.

Login keeps distinct errors for an unknown email and a wrong password, so
the response reveals whether an account exists.
"""

import logging

from domain.model.errors import (
    AuthenticationError,
    DUPLICATE_EMAIL_MESSAGE,
    DomainError,
    DuplicateError,
    InvalidCredentialsError,
    InvalidTokenError,
    NotFoundError,
    UnverifiedError,
    ValidationError,
)
from domain.model.session import SessionClaims
from domain.model.user import User
from port.mailer import MailerPort
from port.user_repository import UserRepository
from services.password_hasher import PasswordHasher
from services.token_service import SESSION_TOKEN_TTL, TokenService
from services.verification_service import generate_otp

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6
# bcrypt ignores (or rejects) input past 72 bytes
MAX_PASSWORD_BYTES = 72


def validate_password(password: str, min_length: int = MIN_PASSWORD_LENGTH) -> None:
    if len(password) < min_length:
        raise ValidationError(f"Password must be at least {min_length} characters long")
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes long")


def register(
    repo: UserRepository,
    hasher: PasswordHasher,
    mailer: MailerPort,
    email: str,
    password: str,
    full_name: str,
) -> User:
    """Register a new, unverified user and send the OTP email.

    Raises:
        ValidationError: password does not meet the policy
        DuplicateError: email already registered
    """
    if not full_name.strip():
        raise ValidationError("Full Name is required")
    validate_password(password)

    if repo.get_by_email(email):
        raise DuplicateError(DUPLICATE_EMAIL_MESSAGE)

    otp = generate_otp()
    user = repo.create(
        email=email,
        password_hash=hasher.hash(password),
        full_name=full_name,
        otp=otp,
    )
    if not user:
        raise DomainError("Failed to create user")

    mailer.send_otp_email(user.email, otp)
    logger.info("User registered", extra={"userId": user.id})
    return user


def login(
    repo: UserRepository,
    hasher: PasswordHasher,
    tokens: TokenService,
    email: str,
    password: str,
) -> tuple[User, str]:
    """Check credentials and issue a session token.

    Returns the User and the signed session token.

    Raises:
        NotFoundError: no account for this email
        InvalidCredentialsError: wrong password
        UnverifiedError: email not verified yet
    """
    user = repo.get_by_email(email)
    if not user:
        raise NotFoundError("User not found.")

    if not hasher.verify(password, user.password_hash):
        raise InvalidCredentialsError("Invalid password.")

    if not user.is_verified:
        raise UnverifiedError("Please verify your email address.")

    claims = SessionClaims(user_id=user.id, email=user.email)
    token = tokens.issue(claims.to_payload(), SESSION_TOKEN_TTL)

    logger.info("User logged in", extra={"userId": user.id})
    return user, token


def authenticate_session(tokens: TokenService, token: str | None) -> SessionClaims:
    """Resolve a session token to its claims.

    Raises:
        AuthenticationError: token missing, invalid, expired or incomplete
    """
    if not token:
        raise AuthenticationError("No token provided")

    try:
        payload = tokens.verify(token)
    except InvalidTokenError as e:
        raise AuthenticationError("Invalid or expired token") from e

    claims = SessionClaims.from_payload(payload)
    if claims is None:
        raise AuthenticationError("Invalid or expired token")
    return claims
