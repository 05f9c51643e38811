"""
Page views on the application's URL surface.

Every page answers 200 with a ``PageView``; gating only changes what the
view contains. Guest-only pages send signed-in users home, and any other
unknown path renders the access-denied view.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from jobquest.core.auth_dependency import get_current_user, get_db
from jobquest.core.gating import GateStatus, PageAccess, gate_page
from jobquest.schemas.auth import UserState
from jobquest.schemas.page import PageView
from jobquest.services import page_service

router = APIRouter(tags=["Pages"])


@router.get("/", response_model=PageView)
@router.get("/home", response_model=PageView)
def home(user: Optional[UserState] = Depends(get_current_user)):
    return page_service.home_page(user)


@router.get("/jobs", response_model=PageView)
def jobs(
    search: str = Query("", description="Kept in the URL so a search can be shared"),
    user: Optional[UserState] = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return page_service.jobs_page(db, user, search)


@router.get("/profile", response_model=PageView)
def profile(user: Optional[UserState] = Depends(get_current_user)):
    return page_service.profile_page(user)


@router.get("/applied", response_model=PageView)
def applied(
    user: Optional[UserState] = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return page_service.applied_page(db, user)


@router.get("/admin", response_model=PageView)
def admin(user: Optional[UserState] = Depends(get_current_user)):
    return page_service.admin_page(user)


@router.get("/applicants", response_model=PageView)
def applicants(
    user: Optional[UserState] = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return page_service.applicants_page(db, user)


@router.get("/login", response_model=PageView)
def login(user: Optional[UserState] = Depends(get_current_user)):
    if gate_page(user, PageAccess.GUEST_ONLY) == GateStatus.REDIRECT:
        return RedirectResponse(url="/", status_code=303)
    return page_service.login_page(user)


@router.get("/signup", response_model=PageView)
def signup(user: Optional[UserState] = Depends(get_current_user)):
    if gate_page(user, PageAccess.GUEST_ONLY) == GateStatus.REDIRECT:
        return RedirectResponse(url="/", status_code=303)
    return page_service.signup_page(user)


# Must stay the last route registered on the app
@router.get("/{path:path}", response_model=PageView)
def access_denied(path: str, user: Optional[UserState] = Depends(get_current_user)):
    return page_service.access_denied_page(user)
