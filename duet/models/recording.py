"""Recording model."""

from datetime import datetime

from sqlalchemy import Column, DateTime, String
from sqlalchemy.orm import relationship

from duet.database import Base
from duet.models.account import new_id


class Recording(Base):
    """Uploaded voice message. Rows are never edited or deleted."""

    __tablename__ = "recordings"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), nullable=False, index=True)
    user_email = Column(String(256), nullable=False)
    audio_url = Column(String(1024), nullable=False)
    caption = Column(String(100), nullable=True)
    mood = Column(String(64), nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)

    reactions = relationship("Reaction", back_populates="recording", order_by="Reaction.created_at")
