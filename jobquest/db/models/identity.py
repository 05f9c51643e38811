"""
Identity model: the accounts known to the identity provider.

Kept separate from UserProfile, which is the application's own profile document.
"""
from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func
from jobquest.db.base import Base


class Identity(Base):
    __tablename__ = "identities"

    uid = Column(String(28), primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=True)  # None for federated accounts
    display_name = Column(String, nullable=True)
    photo_url = Column(String, nullable=True)
    provider = Column(String, nullable=False, default="password")
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<Identity(uid='{self.uid}', email='{self.email}', provider='{self.provider}')>"
