"""
Job board endpoints.

Listing is public; applying and withdrawing need a signed-in standard user;
posting, deleting and reviewing applicants need an admin. Every mutation
answers with the posting as stored after the write.
"""
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from jobquest.core.auth_dependency import get_db
from jobquest.core.errors import ApplicantNotFoundError, JobNotFoundError
from jobquest.core.gating import require_admin, require_job_seeker, require_user
from jobquest.schemas.auth import UserState
from jobquest.schemas.job import (
    ApplicantRecord,
    ApplicantsResponse,
    AppliedJobResponse,
    ApplicationStatus,
    JobCreate,
    JobCreatedResponse,
    JobListResponse,
    JobResponse,
    StatusUpdateRequest,
    WithdrawRequest,
)
from jobquest.services import job_service
from jobquest.services.job_search import filter_jobs

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Jobs"])


def _job_not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Job not found")


@router.get("/jobs", response_model=JobListResponse)
def list_jobs(
    search: str = Query("", description="Case-insensitive match on title, description and keywords"),
    db: Session = Depends(get_db),
):
    """Full collection, filtered locally by ``search``."""
    jobs = filter_jobs(job_service.list_jobs(db), search)
    return JobListResponse(
        jobs=[JobResponse.from_job(job) for job in jobs],
        total=len(jobs),
        search=search,
    )


@router.post("/jobs", status_code=status.HTTP_201_CREATED, response_model=JobCreatedResponse)
def create_job(
    job_data: JobCreate,
    admin: UserState = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Admin posting form. Keywords may be comma-separated text."""
    try:
        job = job_service.create_job(db, admin.uid, job_data)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to post job: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to post job"
        )

    return JobCreatedResponse(message="Job posted successfully!", job=JobResponse.from_job(job))


@router.get("/jobs/applied", response_model=List[AppliedJobResponse])
def list_applied_jobs(
    user: UserState = Depends(require_user),
    db: Session = Depends(get_db),
):
    """Postings the caller has a record on, with that record."""
    return [
        AppliedJobResponse(
            job=JobResponse.from_job(job),
            application=record,
            can_withdraw=record.status == ApplicationStatus.PENDING,
        )
        for job, record in job_service.list_applied_jobs(db, user.uid)
    ]


@router.get("/jobs/{job_id}", response_model=JobResponse)
def get_job(job_id: str, db: Session = Depends(get_db)):
    try:
        return JobResponse.from_job(job_service.get_job(db, job_id))
    except JobNotFoundError:
        raise _job_not_found()


@router.delete("/jobs/{job_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_job(
    job_id: str,
    admin: UserState = Depends(require_admin),
    db: Session = Depends(get_db),
):
    try:
        job_service.delete_job(db, job_id)
    except JobNotFoundError:
        raise _job_not_found()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to delete job: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete job"
        )
    return None


@router.post("/jobs/{job_id}/apply", response_model=JobResponse)
def apply_to_job(
    job_id: str,
    user: UserState = Depends(require_job_seeker),
    db: Session = Depends(get_db),
):
    try:
        job = job_service.apply_to_job(db, job_id, user.uid)
    except JobNotFoundError:
        raise _job_not_found()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to apply: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to apply"
        )
    return JobResponse.from_job(job)


@router.post("/jobs/{job_id}/withdraw", response_model=JobResponse)
def withdraw_application(
    job_id: str,
    request: WithdrawRequest,
    user: UserState = Depends(require_job_seeker),
    db: Session = Depends(get_db),
):
    """
    Remove the caller's record, matched by value against the copy sent.

    A copy that no longer equals the stored record is accepted and removes
    nothing; the response shows the stored applicants either way.
    """
    if request.status != ApplicationStatus.PENDING:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only pending applications can be withdrawn"
        )

    record = ApplicantRecord(
        id=user.uid,
        status=request.status,
        applied_at=request.applied_at,
        updated_at=request.updated_at,
    )
    try:
        job, _ = job_service.withdraw_application(db, job_id, record)
    except JobNotFoundError:
        raise _job_not_found()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to withdraw: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to withdraw application"
        )
    return JobResponse.from_job(job)


@router.put("/jobs/{job_id}/applicants/{applicant_id}", response_model=JobResponse)
def set_applicant_status(
    job_id: str,
    applicant_id: str,
    request: StatusUpdateRequest,
    admin: UserState = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Accept or reject: one keyed replace of the applicant's record."""
    try:
        job = job_service.set_applicant_status(db, job_id, applicant_id, request.status, request.applied_at)
    except JobNotFoundError:
        raise _job_not_found()
    except ApplicantNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Applicant not found")
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to update applicant status: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update applicant status"
        )
    return JobResponse.from_job(job)


@router.get("/applicants", response_model=ApplicantsResponse)
def list_applicants(
    admin: UserState = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return job_service.applicant_review(db)


@router.get("/users", response_model=dict)
def user_directory(
    admin: UserState = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """uid -> display name for every profile."""
    return job_service.applicant_directory(db)
