from typing import Any, Protocol
from domain.model.user import User


class UserRepository(Protocol):
    """Protocol defining the interface for the user directory.

    Each call is atomic on its own; callers do not get multi-call transactions.
    """
    def create(self, email: str, password_hash: str, full_name: str, otp: str | None = None) -> User | None:
        """Create a new user. Return User, or None if the store failed.

        Raises DuplicateError when the email is already registered.
        """
        ...

    def get_by_email(self, email: str) -> User | None:
        """Find a user by email. Return User or None if not found."""
        ...

    def get_by_id(self, user_id: str) -> User | None:
        """Find a user by ID. Return User or None if not found."""
        ...

    def get_by_reset_token(self, token: str) -> User | None:
        """Find the user holding an outstanding reset token."""
        ...

    def get_by_email_and_otp(self, email: str, otp: str) -> User | None:
        """Find a user whose email and pending OTP both match exactly."""
        ...

    def list_all(self) -> list[User]:
        """Return every user. Credential fields are not populated."""
        ...

    def update(self, user_id: str, fields: dict[str, Any]) -> User | None:
        """Apply a partial update. Return the updated User, or None if missing or the store failed.

        Raises DuplicateError when a new email belongs to another user.
        """
        ...

    def delete(self, user_id: str) -> bool:
        """Delete a user. Return True if a record was removed."""
        ...
