"""
Role gating.

Pages branch at render time on the resolved user: a failed gate renders a
placeholder view instead of the page data. API endpoints use the
``require_user``, ``require_job_seeker`` and ``require_admin`` dependencies
and fail with 401 or 403.
"""
import enum
import logging
from typing import Optional

from fastapi import Depends, HTTPException, status

from jobquest.core.auth_dependency import get_current_user
from jobquest.schemas.auth import Role, UserState

logger = logging.getLogger(__name__)


class PageAccess(str, enum.Enum):
    PUBLIC = "public"
    SIGNED_IN = "signed_in"
    ADMIN = "admin"
    GUEST_ONLY = "guest_only"


class GateStatus(str, enum.Enum):
    OK = "ok"
    SIGN_IN_REQUIRED = "sign_in_required"
    ACCESS_DENIED = "access_denied"
    REDIRECT = "redirect"


def is_admin(user: Optional[UserState]) -> bool:
    return user is not None and user.role == Role.ADMIN


def gate_page(user: Optional[UserState], access: PageAccess) -> GateStatus:
    """Decide what a page renders for this user."""
    if access == PageAccess.GUEST_ONLY:
        return GateStatus.REDIRECT if user is not None else GateStatus.OK
    if access == PageAccess.PUBLIC:
        return GateStatus.OK
    if user is None:
        return GateStatus.SIGN_IN_REQUIRED
    if access == PageAccess.ADMIN and not is_admin(user):
        return GateStatus.ACCESS_DENIED
    return GateStatus.OK


def require_user(user: Optional[UserState] = Depends(get_current_user)) -> UserState:
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="You must be logged in.",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def require_admin(user: UserState = Depends(require_user)) -> UserState:
    if not is_admin(user):
        logger.warning(f"Admin access denied: uid={user.uid}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You do not have permission to perform this action.",
        )
    return user


def require_job_seeker(user: UserState = Depends(require_user)) -> UserState:
    """Applying and withdrawing belong to standard users; admins only review."""
    if is_admin(user):
        logger.warning(f"Admin tried to act as applicant: uid={user.uid}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admins cannot apply to jobs.",
        )
    return user
