"""
Page views and the shared chrome (navigation bar, footer).

Each ``*_page`` function renders one URL of the application for the given
user. Gated pages check the user first and return a placeholder view
without touching the store when the gate fails.
"""
import logging
from typing import List, Optional
from urllib.parse import quote

from sqlalchemy.orm import Session

from jobquest.core.gating import GateStatus, PageAccess, gate_page, is_admin
from jobquest.schemas.auth import UserState
from jobquest.schemas.job import ApplicantRecord, ApplicationStatus, JobResponse, JobType
from jobquest.schemas.page import NavLink, PageView
from jobquest.services import job_service
from jobquest.services.job_search import filter_jobs

logger = logging.getLogger(__name__)

SIGN_IN_MESSAGE = "You must be logged in to view this page."
ACCESS_DENIED_MESSAGE = "Access denied."
NO_PERMISSION_MESSAGE = "You do not have permission to view this page."

AVATAR_FALLBACK_URL = "https://ui-avatars.com/api/?name={name}&background=4F46E5&color=fff&size=128"


def build_nav(user: Optional[UserState]) -> List[NavLink]:
    if user is None:
        return [NavLink(to="/login", label="Login"), NavLink(to="/signup", label="Sign up")]

    links = [
        NavLink(to="/", label="Home"),
        NavLink(to="/jobs", label="Jobs"),
        NavLink(to="/profile", label="Profile"),
    ]
    if is_admin(user):
        links.append(NavLink(to="/admin", label="Admin Dashboard"))
        links.append(NavLink(to="/applicants", label="Applicants"))
    else:
        links.append(NavLink(to="/applied", label="Applied Jobs"))
    links.append(NavLink(to="/auth/logout", label="Logout", method="POST"))
    return links


def render(page: str, user: Optional[UserState], status: GateStatus = GateStatus.OK,
           data: Optional[dict] = None, message: Optional[str] = None) -> PageView:
    return PageView(page=page, status=status, message=message, user=user, nav=build_nav(user), data=data)


def _placeholder(page: str, user: Optional[UserState], status: GateStatus, sign_in_message: str = SIGN_IN_MESSAGE) -> PageView:
    message = sign_in_message if status == GateStatus.SIGN_IN_REQUIRED else ACCESS_DENIED_MESSAGE
    logger.debug(f"Page gated: page={page}, status={status.value}, uid={user.uid if user else None}")
    return render(page, user, status=status, message=message)


def _dump(model) -> dict:
    return model.model_dump(by_alias=True, mode="json")


def home_page(user: Optional[UserState]) -> PageView:
    if user is None:
        cta = {"label": "Get started", "to": "/signup"}
    elif is_admin(user):
        cta = {"label": "Post a Job Today", "to": "/admin"}
    else:
        cta = {"label": "Apply now", "to": "/jobs"}

    return render("home", user, data={
        "headline": "Discover the Right Talent in Time",
        "search_action": "/jobs?search=",
        "call_to_action": cta,
    })


def job_actions(user: Optional[UserState], record: Optional[ApplicantRecord]) -> List[str]:
    """Buttons shown on a job card."""
    if user is None:
        return []
    if is_admin(user):
        return ["delete"]
    if record is None:
        return ["apply"]
    if record.status == ApplicationStatus.PENDING:
        return ["withdraw"]
    return []


def jobs_page(db: Session, user: Optional[UserState], search: str = "") -> PageView:
    jobs = filter_jobs(job_service.list_jobs(db), search)

    cards = []
    for job in jobs:
        record = job_service.find_application(job, user.uid) if user else None
        cards.append({
            "job": _dump(JobResponse.from_job(job)),
            "application": _dump(record) if record else None,
            "actions": job_actions(user, record),
        })

    return render("jobs", user, data={
        "search": search,
        "jobs": cards,
        "total": len(cards),
        "empty_message": f"No jobs match “{search}”." if search and not cards else None,
    })


def profile_page(user: Optional[UserState]) -> PageView:
    status = gate_page(user, PageAccess.SIGNED_IN)
    if status != GateStatus.OK:
        return _placeholder("profile", user, status)

    display_name = user.display_name or user.username or ""
    avatar = user.photo_url or AVATAR_FALLBACK_URL.format(name=quote(display_name or "User"))
    return render("profile", user, data={
        "display_name": display_name,
        "email": user.email,
        "email_read_only": True,
        "avatar_url": avatar,
    })


def applied_page(db: Session, user: Optional[UserState]) -> PageView:
    status = gate_page(user, PageAccess.SIGNED_IN)
    if status != GateStatus.OK:
        return _placeholder("applied", user, status, "You must be logged in to view your applications.")

    entries = [
        {
            "job": _dump(JobResponse.from_job(job)),
            "application": _dump(record),
            "actions": ["withdraw"] if record.status == ApplicationStatus.PENDING else [],
        }
        for job, record in job_service.list_applied_jobs(db, user.uid)
    ]
    return render("applied", user, data={
        "applications": entries,
        "empty_message": None if entries else "You haven’t applied to any jobs yet.",
    })


def admin_page(user: Optional[UserState]) -> PageView:
    status = gate_page(user, PageAccess.ADMIN)
    if status != GateStatus.OK:
        return _placeholder("admin", user, status)

    return render("admin", user, data={
        "form": {
            "title": "",
            "description": "",
            "salary": "",
            "jobType": JobType.FULL_TIME.value,
            "keywords": "",
        },
        "job_types": [job_type.value for job_type in JobType],
        "submit_to": "/api/jobs",
    })


def applicants_page(db: Session, user: Optional[UserState]) -> PageView:
    status = gate_page(user, PageAccess.ADMIN)
    if status != GateStatus.OK:
        return _placeholder("applicants", user, status)

    return render("applicants", user, data=_dump(job_service.applicant_review(db)))


def login_page(user: Optional[UserState]) -> PageView:
    return render("login", user, data={"submit_to": "/auth/login", "google": "/auth/google"})


def signup_page(user: Optional[UserState]) -> PageView:
    return render("signup", user, data={"submit_to": "/auth/signup"})


def access_denied_page(user: Optional[UserState]) -> PageView:
    return render("access_denied", user, status=GateStatus.ACCESS_DENIED, message=NO_PERMISSION_MESSAGE)
