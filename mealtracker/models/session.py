from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship

from mealtracker.db.base import Base


class UserSession(Base):
    """Server-side login session. Expiry is checked on read, rows are purged by the sweeper."""

    __tablename__ = "sessions"

    id = Column(String, primary_key=True)
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    # naive UTC
    expires_at = Column(DateTime, nullable=False, index=True)
    created_at = Column(DateTime, server_default=func.now())

    user = relationship("User", back_populates="sessions")
