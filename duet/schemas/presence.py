"""Pydantic schemas for presence endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class UserStatusRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(alias="userId")
    is_online: bool = Field(alias="isOnline")


class UserStatusResponse(BaseModel):
    user_id: str | None = None
    is_online: bool = False
    last_seen: datetime | None = None

    model_config = {"from_attributes": True}
