"""Pydantic models for API request/response.

JSON uses camelCase (fullName, isVerified); Python attributes stay snake_case.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

from domain.model.user import Role, User


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ── Requests ─────────────────────────────────────────────────


class RegisterRequest(CamelModel):
    """Request model for user registration."""
    email: EmailStr
    password: str = Field(..., min_length=6, description="At least 6 characters")
    full_name: str = Field(..., min_length=1, description="Display name")


class LoginRequest(CamelModel):
    """Request model for user login."""
    email: EmailStr
    password: str = Field(..., min_length=1)


class ForgotPasswordRequest(CamelModel):
    email: EmailStr


class SetNewPasswordRequest(CamelModel):
    token: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6)


class VerifyRequest(CamelModel):
    email: EmailStr
    otp: str = Field(..., min_length=1, max_length=12)


class UserUpdateRequest(CamelModel):
    """Partial update. Unknown fields are rejected."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")

    full_name: Optional[str] = Field(None, min_length=1)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=8)
    role: Optional[Role] = None
    is_verified: Optional[bool] = None

    def changes(self) -> dict[str, Any]:
        """Fields the client actually sent, keyed by domain name. Nulls are dropped."""
        return {k: v for k, v in self.model_dump(exclude_unset=True).items() if v is not None}


# ── Responses ────────────────────────────────────────────────


class UserSummary(CamelModel):
    """Returned by register and login."""
    id: str
    email: str
    full_name: str

    @classmethod
    def from_domain(cls, user: User) -> "UserSummary":
        return cls(id=user.id, email=user.email, full_name=user.full_name)


class UserResponse(CamelModel):
    """Outward view of a user. Credential fields are never included."""
    id: str = Field(..., description="User ID")
    email: str
    full_name: str
    role: Role
    is_verified: bool
    created_at: datetime
    updated_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            email=user.email,
            full_name=user.full_name,
            role=user.role,
            is_verified=user.is_verified,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class Envelope(BaseModel):
    """Uniform response body: {success, message, data} or {success, message, error}."""
    success: bool
    message: str
    data: Optional[Any] = None
    error: Optional[Any] = None
