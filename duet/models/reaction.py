"""Reaction model."""

from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, String
from sqlalchemy.orm import relationship

from duet.database import Base
from duet.models.account import new_id


class Reaction(Base):
    """Emoji reaction to a recording."""

    __tablename__ = "reactions"

    id = Column(String(36), primary_key=True, default=new_id)
    recording_id = Column(String(36), ForeignKey("recordings.id"), nullable=False, index=True)
    user_id = Column(String(36), nullable=False)
    emoji = Column(String(32), nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    recording = relationship("Recording", back_populates="reactions")
