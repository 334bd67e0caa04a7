"""Account lifecycle routes: register, verify, login, logout, password reset.

Responses differ between an unknown email and a wrong password at login,
and forgot-password reports unknown emails, so both reveal whether an
account exists.
"""

import logging

from fastapi import APIRouter, Depends, status

from api.dependencies import (
    get_mailer,
    get_password_hasher,
    get_settings,
    get_token_service,
    get_user_repo,
)
from api.models import (
    ForgotPasswordRequest,
    LoginRequest,
    RegisterRequest,
    SetNewPasswordRequest,
    UserSummary,
    VerifyRequest,
)
from api.responses import success_response
from api.security import authenticate, clear_session_cookie, set_session_cookie
from domain.model.session import AuthContext
from port.mailer import MailerPort
from port.user_repository import UserRepository
from services import auth_service, password_reset_service, verification_service
from services.password_hasher import PasswordHasher
from services.token_service import TokenService
from utils.settings import Settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["auth"])


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(
    request: RegisterRequest,
    repo: UserRepository = Depends(get_user_repo),
    hasher: PasswordHasher = Depends(get_password_hasher),
    mailer: MailerPort = Depends(get_mailer),
):
    """Create an unverified account and email its OTP."""
    user = auth_service.register(
        repo, hasher, mailer,
        email=request.email,
        password=request.password,
        full_name=request.full_name,
    )
    return success_response(
        "User registered successfully.",
        UserSummary.from_domain(user),
        status_code=status.HTTP_201_CREATED,
    )


@router.post("/login")
def login(
    request: LoginRequest,
    repo: UserRepository = Depends(get_user_repo),
    hasher: PasswordHasher = Depends(get_password_hasher),
    tokens: TokenService = Depends(get_token_service),
    settings: Settings = Depends(get_settings),
):
    """Check credentials and set the session cookie."""
    user, token = auth_service.login(repo, hasher, tokens, request.email, request.password)
    response = success_response("User logged in successfully.", UserSummary.from_domain(user))
    set_session_cookie(response, token, settings)
    return response


@router.post("/logout")
def logout(
    ctx: AuthContext = Depends(authenticate),
    settings: Settings = Depends(get_settings),
):
    """Clear the session cookie. Already-issued tokens stay valid until expiry."""
    response = success_response("User logged out successfully.")
    clear_session_cookie(response, settings)
    logger.info("User logged out", extra={"userId": ctx.claims.user_id})
    return response


@router.post("/forgot-password")
def forgot_password(
    request: ForgotPasswordRequest,
    repo: UserRepository = Depends(get_user_repo),
    tokens: TokenService = Depends(get_token_service),
    mailer: MailerPort = Depends(get_mailer),
    settings: Settings = Depends(get_settings),
):
    password_reset_service.request_reset(
        repo, tokens, mailer, request.email, settings.frontend_url,
    )
    return success_response("Password reset link sent to email.")


@router.post("/set-new-password")
def set_new_password(
    request: SetNewPasswordRequest,
    repo: UserRepository = Depends(get_user_repo),
    hasher: PasswordHasher = Depends(get_password_hasher),
    tokens: TokenService = Depends(get_token_service),
):
    password_reset_service.redeem(repo, hasher, tokens, request.token, request.new_password)
    return success_response("Password reset successful")


@router.post("/verify")
def verify(
    request: VerifyRequest,
    repo: UserRepository = Depends(get_user_repo),
):
    verification_service.verify_email(repo, request.email, request.otp)
    return success_response("User verified successfully.")
