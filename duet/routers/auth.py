"""Account API endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from duet.database import get_db
from duet.errors import ProviderError
from duet.rate_limit import limiter
from duet.schemas.auth import CredentialsRequest, TokenResponse
from duet.services.auth import AuthResult, get_auth_service
from duet.services.gate import get_gate_service
from duet.services.jwt import get_jwt_service

router = APIRouter(prefix="/api/auth", tags=["Authentication"])


def _require_allowed_email(email: str) -> None:
    if not get_gate_service().validate_email(email):
        raise HTTPException(status_code=403, detail="Email not authorized for this app")


def _token_response(result: AuthResult) -> TokenResponse:
    token = get_jwt_service().create_token(user_id=result.user_id, email=result.email)  # type: ignore[arg-type]
    return TokenResponse(token=token, user_id=result.user_id, email=result.email)  # type: ignore[arg-type]


@router.post("/signup", response_model=TokenResponse)
@limiter.limit("5/minute")
def sign_up(request: Request, body: CredentialsRequest, db: Session = Depends(get_db)) -> TokenResponse:
    """Create an account and receive a session token."""
    _require_allowed_email(body.email)
    try:
        result = get_auth_service().sign_up(db, body.email, body.password)
    except ProviderError as e:
        raise HTTPException(status_code=500, detail=str(e)) from None

    if not result.success:
        raise HTTPException(status_code=400, detail=result.error)
    return _token_response(result)


@router.post("/login", response_model=TokenResponse)
@limiter.limit("10/minute")
def login(request: Request, body: CredentialsRequest, db: Session = Depends(get_db)) -> TokenResponse:
    """Authenticate and receive a session token."""
    _require_allowed_email(body.email)
    try:
        result = get_auth_service().sign_in(db, body.email, body.password)
    except ProviderError as e:
        raise HTTPException(status_code=500, detail=str(e)) from None

    if not result.success:
        raise HTTPException(status_code=401, detail=result.error)
    return _token_response(result)
