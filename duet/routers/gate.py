"""Shared passphrase and allow-list endpoints."""

import logging

from fastapi import APIRouter, HTTPException

from duet.schemas.gate import EmailRequest, PasswordRequest, SuccessResponse
from duet.services.gate import get_gate_service

logger = logging.getLogger("duet")

router = APIRouter(prefix="/api", tags=["Gate"])


@router.post("/validate-password", response_model=SuccessResponse)
def validate_password(body: PasswordRequest) -> SuccessResponse:
    """Check a candidate against the shared passphrase."""
    if not get_gate_service().validate_passphrase(body.shared_password):
        raise HTTPException(status_code=401, detail="Invalid shared password")
    return SuccessResponse()


@router.post("/validate-email", response_model=SuccessResponse)
def validate_email(body: EmailRequest) -> SuccessResponse:
    """Check that an email is on the allow-list."""
    if not get_gate_service().validate_email(body.email):
        logger.info("Rejected email outside the allow-list")
        raise HTTPException(status_code=403, detail="Email not authorized for this app")
    return SuccessResponse()
