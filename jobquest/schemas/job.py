"""
Pydantic schemas for job postings and applicant records.
"""
import enum
from typing import Dict, List, Optional, Union
from datetime import datetime
from pydantic import BaseModel, Field, field_validator

from jobquest.services.job_search import parse_keywords


class JobType(str, enum.Enum):
    FULL_TIME = "full-time"
    PART_TIME = "part-time"


class ApplicationStatus(str, enum.Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class ApplicantRecord(BaseModel):
    """
    One user's application on one posting, in stored (wire) form.

    ``updatedAt`` is omitted from the stored document until an admin changes
    the status, so equality against the stored copy holds.
    """
    id: str = Field(..., description="Applicant uid")
    status: ApplicationStatus = ApplicationStatus.PENDING
    applied_at: str = Field(..., alias="appliedAt", description="ISO-8601 timestamp")
    updated_at: Optional[str] = Field(None, alias="updatedAt", description="ISO-8601 timestamp")

    class Config:
        populate_by_name = True

    def to_document(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class JobCreate(BaseModel):
    """Admin posting form."""
    title: str = Field(..., max_length=255, description="Job title")
    description: str = Field(..., description="Job description")
    salary: float = Field(..., ge=0, description="Salary")
    job_type: JobType = Field(JobType.FULL_TIME, alias="jobType")
    keywords: List[str] = Field(default_factory=list, description="Comma-separated text or a list")

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "title": "Frontend Engineer",
                "description": "Build the candidate-facing UI.",
                "salary": 50000,
                "jobType": "full-time",
                "keywords": "react, ui, frontend"
            }
        }

    @field_validator("title", "description")
    @classmethod
    def validate_required_text(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("This field is required.")
        return v.strip()

    @field_validator("keywords", mode="before")
    @classmethod
    def split_keywords(cls, v: Union[str, List[str], None]) -> List[str]:
        if v is None:
            return []
        if isinstance(v, str):
            return parse_keywords(v)
        return parse_keywords(",".join(str(k) for k in v))


class JobResponse(BaseModel):
    id: str
    title: str
    description: str
    salary: float
    job_type: JobType = Field(..., alias="jobType")
    keywords: List[str] = Field(default_factory=list)
    posted_by: Optional[str] = Field(None, alias="postedBy")
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    applicants: List[ApplicantRecord] = Field(default_factory=list)

    class Config:
        populate_by_name = True

    @classmethod
    def from_job(cls, job) -> "JobResponse":
        return cls(
            id=job.id,
            title=job.title,
            description=job.description,
            salary=job.salary,
            job_type=job.job_type,
            keywords=list(job.keywords or []),
            posted_by=job.posted_by,
            created_at=job.created_at,
            applicants=[ApplicantRecord.model_validate(a) for a in (job.applicants or [])],
        )


class JobListResponse(BaseModel):
    jobs: List[JobResponse]
    total: int
    search: str = ""


class JobCreatedResponse(BaseModel):
    message: str
    job: JobResponse


class WithdrawRequest(BaseModel):
    """The caller's copy of their record; the applicant id comes from the session."""
    status: ApplicationStatus = ApplicationStatus.PENDING
    applied_at: str = Field(..., alias="appliedAt")
    updated_at: Optional[str] = Field(None, alias="updatedAt")

    class Config:
        populate_by_name = True


class StatusUpdateRequest(BaseModel):
    status: ApplicationStatus
    applied_at: Optional[str] = Field(None, alias="appliedAt", description="Pick one record when several exist")

    class Config:
        populate_by_name = True

    @field_validator("status")
    @classmethod
    def validate_decision(cls, v: ApplicationStatus) -> ApplicationStatus:
        if v == ApplicationStatus.PENDING:
            raise ValueError("Status must be accepted or rejected")
        return v


class AppliedJobResponse(BaseModel):
    job: JobResponse
    application: ApplicantRecord
    can_withdraw: bool = Field(..., alias="canWithdraw")

    class Config:
        populate_by_name = True


class ApplicantEntry(BaseModel):
    record: ApplicantRecord
    name: str
    actions: List[str] = Field(default_factory=list)


class ApplicantReviewJob(BaseModel):
    id: str
    title: str
    applicants: List[ApplicantEntry] = Field(default_factory=list)


class ApplicantsResponse(BaseModel):
    jobs: List[ApplicantReviewJob]
    users: Dict[str, str]
