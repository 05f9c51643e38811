from typing import Optional

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from jobquest.core.config import SESSION_COOKIE_NAME
from jobquest.db.session import SessionLocal
from jobquest.schemas.auth import UserState
from jobquest.services import identity_service
from jobquest.services.auth_context import AuthContext

# Optional: pages are readable by guests, so a missing token is not an error here
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)


def get_db():
    """Database session dependency."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_session_token(
    request: Request,
    bearer: Optional[str] = Depends(oauth2_scheme),
) -> Optional[str]:
    """Bearer token if sent, else the session cookie."""
    return bearer or request.cookies.get(SESSION_COOKIE_NAME)


def get_auth_context(
    token: Optional[str] = Depends(get_session_token),
    db: Session = Depends(get_db),
):
    """Auth context bound to this request; its profile subscription ends with the request."""
    ctx = AuthContext(db)
    try:
        ctx.on_identity_changed(identity_service.resolve_session(db, token))
        yield ctx
    finally:
        ctx.close()


def get_current_user(ctx: AuthContext = Depends(get_auth_context)) -> Optional[UserState]:
    """Merged user state, or None for guests and invalid/expired tokens."""
    return ctx.user
