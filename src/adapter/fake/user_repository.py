"""In-memory implementation of UserRepository for testing."""

import uuid
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any

from domain.model.errors import DUPLICATE_EMAIL_MESSAGE, DuplicateError
from domain.model.user import Role, User

_UPDATABLE_FIELDS = {
    'email', 'full_name', 'password_hash', 'role', 'is_verified',
    'otp', 'reset_token', 'reset_token_expires',
}


class FakeUserRepository:
    def __init__(self):
        self.store: dict[str, User] = {}

    # ── write operations ─────────────────────────────────────

    def create(self, email: str, password_hash: str, full_name: str, otp: str | None = None) -> User | None:
        if any(u.email == email for u in self.store.values()):
            raise DuplicateError(DUPLICATE_EMAIL_MESSAGE)

        user_id = uuid.uuid4().hex
        now = datetime.now(timezone.utc)

        user = User(
            id=user_id,
            email=email,
            full_name=full_name,
            created_at=now,
            updated_at=now,
            password_hash=password_hash,
            otp=otp,
        )
        self.store[user_id] = user
        return user

    def update(self, user_id: str, fields: dict[str, Any]) -> User | None:
        user = self.store.get(user_id)
        if not user:
            return None

        unknown = set(fields) - _UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Unknown user fields: {sorted(unknown)}")

        new_email = fields.get('email')
        if new_email is not None and any(
            u.email == new_email and u.id != user_id for u in self.store.values()
        ):
            raise DuplicateError(DUPLICATE_EMAIL_MESSAGE)

        for key, value in fields.items():
            if key == 'role' and value is not None:
                value = Role(value)
            setattr(user, key, value)
        user.updated_at = datetime.now(timezone.utc)
        return user

    def delete(self, user_id: str) -> bool:
        return self.store.pop(user_id, None) is not None

    # ── read operations ──────────────────────────────────────

    def get_by_email(self, email: str) -> User | None:
        for user in self.store.values():
            if user.email == email:
                return user
        return None

    def get_by_id(self, user_id: str) -> User | None:
        return self.store.get(user_id)

    def get_by_reset_token(self, token: str) -> User | None:
        for user in self.store.values():
            if user.reset_token is not None and user.reset_token == token:
                return user
        return None

    def get_by_email_and_otp(self, email: str, otp: str) -> User | None:
        for user in self.store.values():
            if user.email == email and user.otp is not None and user.otp == otp:
                return user
        return None

    def list_all(self) -> list[User]:
        return [
            replace(u, password_hash=None, otp=None, reset_token=None, reset_token_expires=None)
            for u in self.store.values()
        ]
