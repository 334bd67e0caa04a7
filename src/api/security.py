"""Session cookie handling and the authenticate / authorize guards.

Guards are FastAPI dependencies that hand a typed AuthContext down the
chain: authenticate -> authorize_self_or_admin -> route handler.
"""

import logging
from dataclasses import replace
from typing import Optional

from fastapi import Depends, Request, Response
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from api.dependencies import get_settings, get_token_service, get_user_repo
from domain.model.session import AuthContext
from port.user_repository import UserRepository
from services.access_control import authorize
from services.auth_service import authenticate_session
from services.token_service import TokenService
from utils.settings import Settings

logger = logging.getLogger(__name__)

SESSION_COOKIE_NAME = "token"
# Cookie lifetime is configured independently of the 1-day token TTL
SESSION_COOKIE_MAX_AGE = 7 * 24 * 60 * 60

security = HTTPBearer(auto_error=False)


def set_session_cookie(response: Response, token: str, settings: Settings) -> None:
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=token,
        max_age=SESSION_COOKIE_MAX_AGE,
        path="/",
        httponly=True,
        samesite="lax",
        secure=not settings.is_development,
    )


def clear_session_cookie(response: Response, settings: Settings) -> None:
    response.delete_cookie(
        key=SESSION_COOKIE_NAME,
        path="/",
        httponly=True,
        samesite="lax",
        secure=not settings.is_development,
    )


def get_session_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[str]:
    """Session token from the cookie, or from an Authorization: Bearer header."""
    token = request.cookies.get(SESSION_COOKIE_NAME)
    if token:
        return token
    if credentials:
        return credentials.credentials
    return None


def authenticate(
    token: Optional[str] = Depends(get_session_token),
    tokens: TokenService = Depends(get_token_service),
) -> AuthContext:
    """Require a valid session. Raises AuthenticationError (401) otherwise."""
    claims = authenticate_session(tokens, token)
    return AuthContext(claims=claims)


def authorize_self_or_admin(
    user_id: str,
    ctx: AuthContext = Depends(authenticate),
    repo: UserRepository = Depends(get_user_repo),
) -> AuthContext:
    """Require the caller to be an admin or the user named in the path.

    Returns the context with the caller's current record attached.
    """
    caller = authorize(repo, ctx.claims, user_id)
    return replace(ctx, user=caller)
