"""
Database models module.

This module imports all database models to ensure they are registered with SQLAlchemy's Base.metadata
before table creation.

All models must be imported here to be included in database migrations and table creation.
"""
from jobquest.db.models.identity import Identity
from jobquest.db.models.user import UserProfile
from jobquest.db.models.job_posting import JobPosting

__all__ = [
    "Identity",
    "UserProfile",
    "JobPosting",
]
