"""Recording, upload and reaction endpoints."""

from fastapi import APIRouter, Depends, Form, HTTPException, UploadFile
from sqlalchemy.orm import Session

from duet.database import get_db
from duet.dependencies import CurrentUser, get_current_user
from duet.errors import ProviderError
from duet.schemas.recording import ReactionRequest, ReactionResponse, RecordingResponse
from duet.services.recording import get_recording_service

router = APIRouter(prefix="/api/recordings", tags=["Recordings"])


@router.get("/{user_id}", response_model=list[RecordingResponse])
def list_recordings(user_id: str, db: Session = Depends(get_db)) -> list[RecordingResponse]:
    """List every recording, newest first.

    The user id in the path is not used for filtering; both users see the
    whole timeline.
    """
    try:
        recordings = get_recording_service().list_recordings(db)
    except ProviderError as e:
        raise HTTPException(status_code=500, detail=str(e)) from None
    return [RecordingResponse.model_validate(r) for r in recordings]


@router.post("", response_model=RecordingResponse)
async def upload_recording(
    file: UploadFile,
    caption: str | None = Form(None),
    mood: str | None = Form(None),
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> RecordingResponse:
    """Upload one audio file and record its metadata."""
    try:
        recording = await get_recording_service().upload(db, user.user_id, user.email, file, caption, mood)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from None
    except ProviderError as e:
        raise HTTPException(status_code=500, detail=str(e)) from None
    return RecordingResponse.model_validate(recording)


@router.post("/{recording_id}/reactions", response_model=ReactionResponse)
def add_reaction(
    recording_id: str,
    body: ReactionRequest,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ReactionResponse:
    """React to a recording with an emoji."""
    service = get_recording_service()
    try:
        recording = service.get_recording(db, recording_id)
        if not recording:
            raise HTTPException(status_code=404, detail="Recording not found")
        reaction = service.add_reaction(db, recording, user.user_id, body.emoji)
    except ProviderError as e:
        raise HTTPException(status_code=500, detail=str(e)) from None
    return ReactionResponse.model_validate(reaction)
