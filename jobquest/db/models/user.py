from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey
from sqlalchemy.sql import func, false
from jobquest.db.base import Base


class UserProfile(Base):
    __tablename__ = "users"

    uid = Column(String(28), ForeignKey("identities.uid", ondelete="CASCADE"), primary_key=True, index=True)
    username = Column(String, nullable=False, default="")
    email = Column(String, index=True)
    # Only changed out of band (scripts/make_user_admin.py)
    is_admin = Column(Boolean, nullable=False, default=False, server_default=false())
    photo_url = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<UserProfile(uid='{self.uid}', username='{self.username}', is_admin={self.is_admin})>"
