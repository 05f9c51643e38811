import logging

from fastapi import APIRouter, Depends, Form, HTTPException, Response, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.exc import SQLAlchemyError

from jobquest.core.auth_dependency import get_auth_context
from jobquest.core.config import SESSION_COOKIE_NAME
from jobquest.core.errors import IdentityProviderError, MailDeliveryError
from jobquest.core.gating import require_user
from jobquest.schemas.auth import (
    AuthResponse,
    GoogleSignInRequest,
    MessageResponse,
    PasswordResetConfirm,
    PasswordResetRequest,
    ProfileUpdateRequest,
    SignupRequest,
    UserState,
)
from jobquest.services import identity_service
from jobquest.services.auth_context import AuthContext
from jobquest.services.identity_service import SessionToken

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


def _start_session(response: Response, session: SessionToken, ctx: AuthContext) -> AuthResponse:
    """Set the session cookie: durable for LOCAL persistence, browser-session otherwise."""
    response.set_cookie(
        SESSION_COOKIE_NAME,
        session.access_token,
        max_age=session.max_age,
        httponly=True,
        samesite="lax",
    )
    return AuthResponse(
        access_token=session.access_token,
        persistence=session.persistence.value,
        user=ctx.user,
    )


def _provider_failure(e: IdentityProviderError) -> HTTPException:
    return HTTPException(status_code=e.status_code, detail=e.message)


# ✅ SIGNUP: identity + profile document (admin flag always false)
@router.post("/signup", status_code=status.HTTP_201_CREATED, response_model=AuthResponse)
def signup(
    request: SignupRequest,
    response: Response,
    ctx: AuthContext = Depends(get_auth_context),
):
    try:
        session = ctx.signup(request.email, request.password, request.username)
    except IdentityProviderError as e:
        raise _provider_failure(e)
    except SQLAlchemyError as e:
        ctx.db.rollback()
        logger.error(f"Signup failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to create account")

    return _start_session(response, session, ctx)


# ✅ LOGIN: OAuth2 form (username = email) plus "remember me"
@router.post("/login", response_model=AuthResponse)
def login(
    response: Response,
    form_data: OAuth2PasswordRequestForm = Depends(),
    remember: bool = Form(False),
    ctx: AuthContext = Depends(get_auth_context),
):
    if not form_data.username or not form_data.password:
        raise HTTPException(status_code=422, detail="Please enter both email and password.")
    try:
        session = ctx.login(form_data.username.strip(), form_data.password, remember)
    except IdentityProviderError as e:
        raise _provider_failure(e)

    return _start_session(response, session, ctx)


@router.post("/google", response_model=AuthResponse)
def google_sign_in(
    request: GoogleSignInRequest,
    response: Response,
    ctx: AuthContext = Depends(get_auth_context),
):
    try:
        session = ctx.sign_in_with_google(request.id_token, request.remember)
    except IdentityProviderError as e:
        raise _provider_failure(e)

    return _start_session(response, session, ctx)


@router.post("/logout", response_model=MessageResponse)
def logout(response: Response, ctx: AuthContext = Depends(get_auth_context)):
    ctx.logout()
    response.delete_cookie(SESSION_COOKIE_NAME)
    return MessageResponse(message="Logged out")


@router.post("/reset-password", response_model=MessageResponse)
def reset_password(request: PasswordResetRequest, ctx: AuthContext = Depends(get_auth_context)):
    try:
        ctx.reset_password(request.email)
    except IdentityProviderError as e:
        raise _provider_failure(e)
    except MailDeliveryError as e:
        raise HTTPException(status_code=502, detail=e.message)

    return MessageResponse(message="Password reset email sent")


@router.post("/reset-password/confirm", response_model=MessageResponse)
def confirm_reset_password(request: PasswordResetConfirm, ctx: AuthContext = Depends(get_auth_context)):
    try:
        identity_service.confirm_password_reset(ctx.db, request.token, request.new_password)
    except IdentityProviderError as e:
        raise _provider_failure(e)

    return MessageResponse(message="Password updated")


@router.get("/me", response_model=UserState)
def me(user: UserState = Depends(require_user)):
    return user


@router.patch("/profile", response_model=UserState)
def update_profile(
    request: ProfileUpdateRequest,
    ctx: AuthContext = Depends(get_auth_context),
):
    try:
        return ctx.update_profile(display_name=request.display_name, photo_url=request.photo_url)
    except IdentityProviderError as e:
        raise _provider_failure(e)
