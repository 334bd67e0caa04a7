"""User profile routes.

Endpoints:
- GET /api/users/me: the caller's own record
- GET /api/users/: every user (summary fields)
- GET|PUT|DELETE /api/users/{user_id}: self-or-admin access
"""

import logging

from fastapi import APIRouter, Depends

from api.dependencies import get_password_hasher, get_user_repo
from api.models import UserResponse, UserUpdateRequest
from api.responses import success_response
from api.security import authenticate, authorize_self_or_admin
from domain.model.session import AuthContext
from port.user_repository import UserRepository
from services import user_service
from services.password_hasher import PasswordHasher

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("/me")
def get_me(
    ctx: AuthContext = Depends(authenticate),
    repo: UserRepository = Depends(get_user_repo),
):
    user = user_service.get_user(repo, ctx.claims.user_id)
    return success_response("User fetched successfully.", {"user": UserResponse.from_domain(user)})


@router.get("", include_in_schema=False)
@router.get("/")
def list_users(
    ctx: AuthContext = Depends(authenticate),
    repo: UserRepository = Depends(get_user_repo),
):
    users = [UserResponse.from_domain(u) for u in user_service.list_users(repo)]
    return success_response("Users fetched successfully.", {"users": users})


@router.get("/{user_id}")
def get_user(
    user_id: str,
    ctx: AuthContext = Depends(authorize_self_or_admin),
    repo: UserRepository = Depends(get_user_repo),
):
    user = user_service.get_user(repo, user_id)
    return success_response("User fetched successfully.", {"user": UserResponse.from_domain(user)})


@router.put("/{user_id}")
def update_user(
    user_id: str,
    request: UserUpdateRequest,
    ctx: AuthContext = Depends(authorize_self_or_admin),
    repo: UserRepository = Depends(get_user_repo),
    hasher: PasswordHasher = Depends(get_password_hasher),
):
    updated = user_service.update_user(repo, hasher, ctx.user, user_id, request.changes())
    return success_response("User updated successfully.", {"id": updated.id})


@router.delete("/{user_id}")
def delete_user(
    user_id: str,
    ctx: AuthContext = Depends(authorize_self_or_admin),
    repo: UserRepository = Depends(get_user_repo),
):
    user_service.delete_user(repo, user_id)
    return success_response("User deleted successfully.")
