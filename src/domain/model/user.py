from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class Role(str, Enum):
    USER = 'USER'
    ADMIN = 'ADMIN'


@dataclass
class User:
    """Domain model representing an account."""
    id: str
    email: str
    full_name: str
    created_at: datetime
    updated_at: datetime
    role: Role = Role.USER
    is_verified: bool = False
    password_hash: str | None = None
    otp: str | None = None
    reset_token: str | None = None
    reset_token_expires: datetime | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN
