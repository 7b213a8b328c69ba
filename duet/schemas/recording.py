"""Pydantic schemas for recording and reaction endpoints."""

from datetime import datetime

from pydantic import BaseModel


class ReactionRequest(BaseModel):
    emoji: str


class ReactionResponse(BaseModel):
    id: str
    recording_id: str
    user_id: str
    emoji: str
    created_at: datetime

    model_config = {"from_attributes": True}


class RecordingResponse(BaseModel):
    id: str
    user_id: str
    user_email: str
    audio_url: str
    caption: str | None
    mood: str
    created_at: datetime
    reactions: list[ReactionResponse] = []

    model_config = {"from_attributes": True}
