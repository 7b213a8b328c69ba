"""Authentication and session dependencies for FastAPI routes."""

from dataclasses import dataclass

from fastapi import HTTPException, Request, Response

from duet.services.jwt import get_jwt_service

AUTH_COOKIE_NAME = "duet_auth_token"
GATE_COOKIE_NAME = "duet_gate"
COOKIE_MAX_AGE = 8 * 60 * 60  # 8 hours


@dataclass
class CurrentUser:
    """Authenticated user context."""

    user_id: str
    email: str


@dataclass
class SessionState:
    """What the browser session has proven so far. Decides which screen is shown."""

    passphrase_ok: bool
    user: CurrentUser | None = None


def _user_from_token(token: str | None) -> CurrentUser | None:
    if not token:
        return None
    payload = get_jwt_service().decode_token(token)
    if not payload or "email" not in payload:
        return None
    return CurrentUser(user_id=payload["sub"], email=payload["email"])


def get_optional_user(request: Request) -> CurrentUser | None:
    """Extract user from Bearer token or cookie, None if missing or invalid."""
    token: str | None = None

    # Check Authorization header first
    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.startswith("Bearer "):
        token = auth_header[7:]

    # Fall back to cookie
    if not token:
        token = request.cookies.get(AUTH_COOKIE_NAME)

    return _user_from_token(token)


def get_current_user(request: Request) -> CurrentUser:
    """Extract and validate user from Bearer token or cookie. Raises 401 if invalid."""
    user = get_optional_user(request)
    if not user:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return user


def get_session_state(request: Request) -> SessionState:
    """Build the session state from the gate and auth cookies."""
    gate_token = request.cookies.get(GATE_COOKIE_NAME)
    passphrase_ok = bool(gate_token) and get_jwt_service().is_gate_token(gate_token)
    return SessionState(
        passphrase_ok=passphrase_ok,
        user=_user_from_token(request.cookies.get(AUTH_COOKIE_NAME)),
    )


def require_main_screen(request: Request) -> SessionState:
    """Require a fully unlocked, signed-in session for web routes. Raises 401 to trigger redirect."""
    state = get_session_state(request)
    if not state.passphrase_ok or not state.user:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return state


def set_auth_cookie(response: Response, token: str) -> None:
    """Set the authentication cookie."""
    response.set_cookie(
        key=AUTH_COOKIE_NAME,
        value=token,
        httponly=True,
        samesite="lax",
        secure=False,
        max_age=COOKIE_MAX_AGE,
    )


def set_gate_cookie(response: Response, token: str) -> None:
    """Remember that the shared passphrase was accepted."""
    response.set_cookie(
        key=GATE_COOKIE_NAME,
        value=token,
        httponly=True,
        samesite="lax",
        secure=False,
        max_age=COOKIE_MAX_AGE,
    )


def clear_auth_cookie(response: Response) -> None:
    """Clear the authentication cookie."""
    response.delete_cookie(key=AUTH_COOKIE_NAME)
