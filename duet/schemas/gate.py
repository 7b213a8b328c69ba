"""Pydantic schemas for the gate endpoints."""

from pydantic import BaseModel, ConfigDict, Field


class PasswordRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    shared_password: str | None = Field(default=None, alias="sharedPassword")


class EmailRequest(BaseModel):
    email: str | None = None


class SuccessResponse(BaseModel):
    success: bool = True
