"""Profile CRUD behind the self-or-admin guard."""

import logging
from typing import Any

from domain.model.errors import (
    DUPLICATE_EMAIL_MESSAGE,
    DomainError,
    DuplicateError,
    NotFoundError,
    ValidationError,
)
from domain.model.user import User
from port.user_repository import UserRepository
from services.access_control import check_update_fields
from services.auth_service import validate_password
from services.password_hasher import PasswordHasher

logger = logging.getLogger(__name__)

MIN_UPDATE_PASSWORD_LENGTH = 8


def get_user(repo: UserRepository, user_id: str) -> User:
    user = repo.get_by_id(user_id)
    if not user:
        raise NotFoundError("User not found.")
    return user


def list_users(repo: UserRepository) -> list[User]:
    return repo.list_all()


def update_user(
    repo: UserRepository,
    hasher: PasswordHasher,
    caller: User,
    user_id: str,
    changes: dict[str, Any],
) -> User:
    """Apply a partial update to a user.

    `changes` uses domain field names; a plaintext `password` is hashed
    before it reaches the directory.

    Raises:
        NotFoundError: target does not exist
        PermissionDeniedError: non-admin changing role or verification
        DuplicateError: new email belongs to another account
        ValidationError: blank name or a password that misses the policy
    """
    target = get_user(repo, user_id)
    check_update_fields(caller, changes)

    fields = dict(changes)
    if "full_name" in fields and not fields["full_name"].strip():
        raise ValidationError("Full Name is required")

    new_email = fields.get("email")
    if new_email is not None and new_email != target.email:
        existing = repo.get_by_email(new_email)
        if existing and existing.id != target.id:
            raise DuplicateError(DUPLICATE_EMAIL_MESSAGE)

    password = fields.pop("password", None)
    if password is not None:
        validate_password(password, min_length=MIN_UPDATE_PASSWORD_LENGTH)
        fields["password_hash"] = hasher.hash(password)

    if not fields:
        return target

    updated = repo.update(target.id, fields)
    if not updated:
        raise DomainError("Failed to update user")

    logger.info("User updated", extra={
        "userId": target.id,
        "callerId": caller.id,
        "fields": sorted(changes),
    })
    return updated


def delete_user(repo: UserRepository, user_id: str) -> None:
    get_user(repo, user_id)
    if not repo.delete(user_id):
        raise DomainError("Failed to delete user")
    logger.info("User deleted", extra={"userId": user_id})
