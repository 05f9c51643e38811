"""
Job postings and the applicant records embedded in them.

Every mutation is a single-document read-modify-write committed in one
transaction, and returns the document as stored afterwards so callers never
have to patch their own copy.
"""
import logging
from typing import Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from jobquest.core.errors import ApplicantNotFoundError, JobNotFoundError
from jobquest.db.models.job_posting import JobPosting
from jobquest.db.models.user import UserProfile
from jobquest.schemas.job import (
    ApplicantEntry,
    ApplicantRecord,
    ApplicantReviewJob,
    ApplicantsResponse,
    ApplicationStatus,
    JobCreate,
)
from jobquest.services.document_store import (
    array_remove_write,
    array_union_write,
    get_collection,
    get_document,
    iso_now,
    write_array,
)

logger = logging.getLogger(__name__)

APPLICANTS = "applicants"


def list_jobs(db: Session) -> List[JobPosting]:
    """The whole collection, newest first."""
    return get_collection(db, JobPosting, JobPosting.created_at.desc(), JobPosting.id)


def get_job(db: Session, job_id: str, for_update: bool = False) -> JobPosting:
    job = get_document(db, JobPosting, job_id, for_update=for_update)
    if job is None:
        raise JobNotFoundError(job_id)
    return job


def create_job(db: Session, posted_by: str, job_data: JobCreate) -> JobPosting:
    job = JobPosting(
        title=job_data.title,
        description=job_data.description,
        salary=float(job_data.salary),
        job_type=job_data.job_type.value,
        keywords=list(job_data.keywords),
        posted_by=posted_by,
        applicants=[],
    )
    db.add(job)
    db.commit()
    db.refresh(job)

    logger.info(f"Job posted: job_id={job.id}, posted_by={posted_by}, keywords={job.keywords}")
    return job


def delete_job(db: Session, job_id: str) -> None:
    job = get_job(db, job_id)
    db.delete(job)
    db.commit()
    logger.info(f"Job deleted: job_id={job_id}")


def find_application(job: JobPosting, applicant_id: str) -> Optional[ApplicantRecord]:
    """First record of the applicant on this job, if any."""
    for record in job.applicants or []:
        if record.get("id") == applicant_id:
            return ApplicantRecord.model_validate(record)
    return None


def apply_to_job(db: Session, job_id: str, applicant_id: str) -> JobPosting:
    """
    Add a pending record for the applicant.

    There is no duplicate guard: applying again adds a second record that
    differs only by ``appliedAt``.
    """
    job = get_job(db, job_id, for_update=True)
    record = ApplicantRecord(id=applicant_id, status=ApplicationStatus.PENDING, applied_at=iso_now())
    array_union_write(db, job, APPLICANTS, record.to_document())
    db.refresh(job)

    logger.info(f"Application submitted: job_id={job_id}, applicant_id={applicant_id}")
    return job


def withdraw_application(db: Session, job_id: str, record: ApplicantRecord) -> Tuple[JobPosting, bool]:
    """
    Remove exactly ``record`` from the job.

    The match is by value, so a copy that drifted from the stored record
    (another ``appliedAt``, a changed status) removes nothing. Returns the
    stored job and whether a record was removed.
    """
    job = get_job(db, job_id, for_update=True)
    removed = array_remove_write(db, job, APPLICANTS, record.to_document())
    db.refresh(job)

    if removed:
        logger.info(f"Application withdrawn: job_id={job_id}, applicant_id={record.id}")
    else:
        logger.info(f"Withdraw matched no record: job_id={job_id}, applicant_id={record.id}")
    return job, bool(removed)


def set_applicant_status(
    db: Session,
    job_id: str,
    applicant_id: str,
    status: ApplicationStatus,
    applied_at: Optional[str] = None,
) -> JobPosting:
    """
    Replace the applicant's records on this job with one carrying ``status``.

    The original ``appliedAt`` is kept (from the record matching
    ``applied_at`` when given, else the first one). Every other record of the
    applicant on the job is dropped in the same write, so exactly one remains.
    """
    job = get_job(db, job_id, for_update=True)
    records = list(job.applicants or [])

    mine = [r for r in records if r.get("id") == applicant_id]
    if applied_at is not None:
        matched = [r for r in mine if r.get("appliedAt") == applied_at]
    else:
        matched = mine
    if not matched:
        db.rollback()
        raise ApplicantNotFoundError(applicant_id)

    replacement = ApplicantRecord(
        id=applicant_id,
        status=status,
        applied_at=matched[0]["appliedAt"],
        updated_at=iso_now(),
    )
    others = [r for r in records if r.get("id") != applicant_id]
    write_array(job, APPLICANTS, others + [replacement.to_document()])
    db.commit()
    db.refresh(job)

    logger.info(
        f"Applicant status set: job_id={job_id}, applicant_id={applicant_id}, "
        f"status={status.value}, replaced={len(mine)}"
    )
    return job


def list_applied_jobs(db: Session, applicant_id: str) -> List[Tuple[JobPosting, ApplicantRecord]]:
    applied = []
    for job in list_jobs(db):
        record = find_application(job, applicant_id)
        if record is not None:
            applied.append((job, record))
    return applied


def applicant_directory(db: Session) -> Dict[str, str]:
    """uid -> username, falling back to email."""
    return {
        profile.uid: profile.username or profile.email or profile.uid
        for profile in get_collection(db, UserProfile)
    }


def applicant_review(db: Session) -> ApplicantsResponse:
    """All postings with their applicants resolved to names, for the admin review list."""
    users = applicant_directory(db)
    review = []
    for job in list_jobs(db):
        entries = []
        for raw in job.applicants or []:
            record = ApplicantRecord.model_validate(raw)
            actions = ["accept", "reject"] if record.status == ApplicationStatus.PENDING else []
            entries.append(ApplicantEntry(record=record, name=users.get(record.id, record.id), actions=actions))
        review.append(ApplicantReviewJob(id=job.id, title=job.title, applicants=entries))
    return ApplicantsResponse(jobs=review, users=users)
