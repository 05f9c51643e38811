"""
JobPosting model: a posted job with its applicants embedded as a JSON array.
"""
from sqlalchemy import Column, String, Text, Float, DateTime, ForeignKey, JSON, Index
from sqlalchemy.sql import func
from jobquest.db.base import Base
from jobquest.services.document_store import new_document_id


class JobPosting(Base):
    """
    Job posting document.

    ``applicants`` holds ApplicantRecord dicts in wire format
    (``id``, ``status``, ``appliedAt``, optional ``updatedAt``). It is only
    ever rewritten as a whole list through the array helpers in
    ``jobquest.services.document_store``.
    """
    __tablename__ = "jobs"

    id = Column(String(20), primary_key=True, index=True, default=new_document_id)
    title = Column(String, nullable=False, index=True)
    description = Column(Text, nullable=False)
    salary = Column(Float, nullable=False)
    job_type = Column(String, nullable=False, default="full-time")
    keywords = Column(JSON, nullable=False, default=list)
    posted_by = Column(String(28), ForeignKey("users.uid"), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    applicants = Column(JSON, nullable=False, default=list)

    __table_args__ = (
        Index("idx_jobs_poster_created", "posted_by", "created_at"),
    )

    def __repr__(self):
        return f"<JobPosting(id='{self.id}', title='{self.title}', applicants={len(self.applicants or [])})>"
