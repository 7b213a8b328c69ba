"""Public, unauthenticated reads from object storage."""

from fastapi import APIRouter, HTTPException
from fastapi.responses import FileResponse

from duet.services.storage import PUBLIC_PATH, get_storage_service

router = APIRouter(prefix=PUBLIC_PATH, tags=["Storage"])


@router.get("/{bucket}/{key:path}")
def get_public_object(bucket: str, key: str) -> FileResponse:
    """Serve a stored object by bucket and key."""
    path = get_storage_service().resolve(bucket, key)
    if path is None:
        raise HTTPException(status_code=404, detail="Object not found")
    return FileResponse(path)
