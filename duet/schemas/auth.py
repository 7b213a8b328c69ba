"""Pydantic schemas for authentication endpoints."""

from pydantic import BaseModel


class CredentialsRequest(BaseModel):
    email: str
    password: str


class TokenResponse(BaseModel):
    token: str
    user_id: str
    email: str
