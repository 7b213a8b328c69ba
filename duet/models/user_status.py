"""User presence model."""

from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, String

from duet.database import Base


class UserStatus(Base):
    """Last reported presence for a user. No row means offline."""

    __tablename__ = "user_status"

    user_id = Column(String(36), primary_key=True)
    is_online = Column(Boolean, nullable=False, default=False)
    last_seen = Column(DateTime, nullable=False, default=datetime.utcnow)
