"""Account model."""

import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, String

from duet.database import Base


def new_id() -> str:
    return str(uuid.uuid4())


class Account(Base):
    """Provider-side login account."""

    __tablename__ = "account"

    id = Column(String(36), primary_key=True, default=new_id)
    email = Column(String(256), unique=True, nullable=False, index=True)
    password_hash = Column(String(256), nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    last_sign_in_at = Column(DateTime, nullable=True)
