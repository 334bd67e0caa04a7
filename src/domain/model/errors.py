"""Domain-level exceptions.

Services raise these errors to express business rule violations.
The API layer maps each class to an HTTP status code and the JSON envelope.
"""


class DomainError(Exception):
    """Base class for all domain errors."""


class NotFoundError(DomainError):
    """Requested entity does not exist."""


class DuplicateError(DomainError):
    """Entity with the same unique key already exists."""


class PermissionDeniedError(DomainError):
    """Caller is authenticated but lacks permission for the requested action."""


class ValidationError(DomainError):
    """Input violates a business validation rule."""


class AuthenticationError(DomainError):
    """Session credential is missing, malformed or expired."""


class InvalidCredentialsError(DomainError):
    """Password, OTP or token does not match."""


class InvalidTokenError(InvalidCredentialsError):
    """Bearer token failed signature, structure or expiry checks."""


class TokenExpiredError(InvalidTokenError):
    """Stored reset token is past its expiry timestamp."""


class UnverifiedError(DomainError):
    """Account email has not been verified yet."""


DUPLICATE_EMAIL_MESSAGE = "User with this email already exists."
