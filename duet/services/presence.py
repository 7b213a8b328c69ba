"""Presence service: upsert and read user_status rows."""

import logging
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from duet.errors import ProviderError
from duet.models.user_status import UserStatus

logger = logging.getLogger("duet")


class PresenceService:
    """Tracks the coarse online/offline state of the two users."""

    def set_status(self, db: Session, user_id: str, is_online: bool) -> UserStatus:
        """Upsert the status row for user_id, stamping last_seen with the current time."""
        try:
            status = db.get(UserStatus, user_id)
            if status is None:
                status = UserStatus(user_id=user_id)
                db.add(status)
            status.is_online = is_online
            status.last_seen = datetime.utcnow()
            db.commit()
            db.refresh(status)
        except SQLAlchemyError as e:
            db.rollback()
            raise ProviderError(str(e)) from e
        return status

    def get_partner_status(self, db: Session, user_id: str) -> UserStatus | None:
        """Return the status row of some user other than user_id, or None.

        Correct only while exactly two users exist. With more candidates the
        most recently seen one wins and a warning is logged.
        """
        try:
            rows = (
                db.query(UserStatus)
                .filter(UserStatus.user_id != user_id)
                .order_by(UserStatus.last_seen.desc())
                .limit(2)
                .all()
            )
        except SQLAlchemyError as e:
            db.rollback()
            raise ProviderError(str(e)) from e

        if len(rows) > 1:
            logger.warning("Partner status for %s is ambiguous: more than one other user has a status row", user_id)
        return rows[0] if rows else None


_presence_service: PresenceService | None = None


def get_presence_service() -> PresenceService:
    """Get singleton presence service instance."""
    global _presence_service
    if _presence_service is None:
        _presence_service = PresenceService()
    return _presence_service
