"""Presence endpoints proxying the user_status table."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from duet.database import get_db
from duet.dependencies import CurrentUser, get_optional_user
from duet.errors import ProviderError
from duet.schemas.gate import SuccessResponse
from duet.schemas.presence import UserStatusRequest, UserStatusResponse
from duet.services.presence import get_presence_service

router = APIRouter(prefix="/api", tags=["Presence"])


@router.post("/user-status", response_model=SuccessResponse)
def set_user_status(
    body: UserStatusRequest,
    user: CurrentUser | None = Depends(get_optional_user),
    db: Session = Depends(get_db),
) -> SuccessResponse:
    """Record whether a user is online. Credentials, when sent, must belong to that user."""
    if user and user.user_id != body.user_id:
        raise HTTPException(status_code=403, detail="Cannot set status for another user")

    try:
        get_presence_service().set_status(db, body.user_id, body.is_online)
    except ProviderError as e:
        raise HTTPException(status_code=500, detail=str(e)) from None
    return SuccessResponse()


@router.get("/partner-status/{user_id}", response_model=UserStatusResponse, response_model_exclude_none=True)
def get_partner_status(user_id: str, db: Session = Depends(get_db)) -> UserStatusResponse:
    """Return the other user's status, or an offline placeholder when they have none."""
    try:
        status = get_presence_service().get_partner_status(db, user_id)
    except ProviderError as e:
        raise HTTPException(status_code=500, detail=str(e)) from None

    if status is None:
        return UserStatusResponse(is_online=False)
    return UserStatusResponse.model_validate(status)
