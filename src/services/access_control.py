"""Self-or-admin authorization for per-user resources.

Token claims only identify the caller. The caller's role is always read
from the directory, because it may have changed since the token was issued.
"""

import logging
from typing import Any

from domain.model.errors import NotFoundError, PermissionDeniedError
from domain.model.session import SessionClaims
from domain.model.user import Role, User
from port.user_repository import UserRepository

logger = logging.getLogger(__name__)

PRIVILEGED_FIELDS = frozenset({"role", "is_verified"})


def can_access(caller: User, target_id: str) -> bool:
    """Admins may access any user; everyone else only themselves."""
    return caller.role == Role.ADMIN or caller.id == target_id


def authorize(repo: UserRepository, claims: SessionClaims, target_id: str) -> User:
    """Resolve the caller and check access to target_id.

    Returns the caller's current User record.

    Raises:
        NotFoundError: caller no longer exists
        PermissionDeniedError: caller is neither admin nor the target
    """
    caller = repo.get_by_id(claims.user_id)
    if not caller:
        raise NotFoundError("User not found")

    if not can_access(caller, target_id):
        logger.warning("Access denied", extra={"userId": caller.id, "targetId": target_id})
        raise PermissionDeniedError("Access denied: Admins only or self-access only")

    return caller


def check_update_fields(caller: User, changes: dict[str, Any]) -> None:
    """Reject changes to privileged fields unless the caller is an admin.

    Raises:
        PermissionDeniedError: non-admin tried to change role or verification
    """
    touched = PRIVILEGED_FIELDS & set(changes)
    if touched and not caller.is_admin:
        raise PermissionDeniedError(
            f"Access denied: only admins may change {', '.join(sorted(touched))}"
        )
