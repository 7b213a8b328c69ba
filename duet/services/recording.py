"""Recording service: the upload flow, the timeline and reactions."""

import logging
import time
from pathlib import Path

from fastapi import UploadFile
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from duet.config import get_settings
from duet.errors import ProviderError
from duet.models.reaction import Reaction
from duet.models.recording import Recording
from duet.services.storage import get_storage_service

logger = logging.getLogger("duet")

MOODS = [
    ("😘", "Loving"),
    ("🥰", "Sweet"),
    ("😊", "Happy"),
    ("🤗", "Warm"),
    ("😴", "Sleepy"),
    ("🎵", "Musical"),
]
MOOD_LABELS = [f"{emoji} {label}" for emoji, label in MOODS]
DEFAULT_MOOD = MOOD_LABELS[0]

REACTION_EMOJI = ["❤️", "💕", "💖", "😘", "🥰", "😍"]


class RecordingService:
    """Handles voice message uploads, listing and reactions."""

    def validate_upload_metadata(self, content_type: str | None, caption: str | None) -> str | None:
        """Validate upload metadata before anything is stored. Returns error message or None if valid."""
        if not content_type or not content_type.startswith("audio/"):
            return "Please upload an audio file"

        max_caption = get_settings().MAX_CAPTION_LENGTH
        if caption and len(caption) > max_caption:
            return f"Caption is too long ({len(caption)} characters). Maximum: {max_caption}"

        return None

    def storage_key(self, user_id: str, filename: str) -> str:
        """Build `<prefix>/<user_id>-<epoch ms><ext>` for a new object."""
        ext = Path(filename or "audio.bin").suffix.lower()
        return f"{get_settings().STORAGE_PREFIX}/{user_id}-{int(time.time() * 1000)}{ext}"

    async def upload(
        self,
        db: Session,
        user_id: str,
        user_email: str,
        file: UploadFile,
        caption: str | None,
        mood: str | None,
    ) -> Recording:
        """Store the audio bytes, then insert the metadata row.

        Raises ValueError for rejected input (nothing stored) and ProviderError
        when storage or the insert fails. A failed insert leaves the stored
        object behind.
        """
        error = self.validate_upload_metadata(file.content_type, caption)
        if error:
            raise ValueError(error)

        settings = get_settings()
        storage = get_storage_service()
        key = self.storage_key(user_id, file.filename or "")
        await storage.put(settings.STORAGE_BUCKET, key, file, settings.MAX_UPLOAD_SIZE_MB * 1024 * 1024)
        audio_url = storage.public_url(settings.STORAGE_BUCKET, key)

        recording = Recording(
            user_id=user_id,
            user_email=user_email,
            audio_url=audio_url,
            caption=caption or None,
            mood=mood or DEFAULT_MOOD,
        )
        try:
            db.add(recording)
            db.commit()
            db.refresh(recording)
        except SQLAlchemyError as e:
            db.rollback()
            logger.warning("Recording insert failed, stored object %s/%s is orphaned", settings.STORAGE_BUCKET, key)
            raise ProviderError(str(e)) from e

        logger.info("Stored recording %s for %s", recording.id, user_id)
        return recording

    def list_recordings(self, db: Session) -> list[Recording]:
        """All recordings of every user with their reactions, newest first."""
        try:
            return (
                db.query(Recording)
                .options(selectinload(Recording.reactions))
                .order_by(Recording.created_at.desc())
                .all()
            )
        except SQLAlchemyError as e:
            db.rollback()
            raise ProviderError(str(e)) from e

    def get_recording(self, db: Session, recording_id: str) -> Recording | None:
        try:
            return db.get(Recording, recording_id)
        except SQLAlchemyError as e:
            db.rollback()
            raise ProviderError(str(e)) from e

    def add_reaction(self, db: Session, recording: Recording, user_id: str, emoji: str) -> Reaction:
        """Append a reaction row. Existing rows are left untouched."""
        reaction = Reaction(recording_id=recording.id, user_id=user_id, emoji=emoji)
        try:
            db.add(reaction)
            db.commit()
            db.refresh(reaction)
        except SQLAlchemyError as e:
            db.rollback()
            raise ProviderError(str(e)) from e
        return reaction


_recording_service: RecordingService | None = None


def get_recording_service() -> RecordingService:
    """Get singleton recording service instance."""
    global _recording_service
    if _recording_service is None:
        _recording_service = RecordingService()
    return _recording_service
