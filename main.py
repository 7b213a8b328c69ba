"""Duet - a private two-person voice message space."""

import logging
import time

from fastapi import Depends, FastAPI, Form, HTTPException, Request, UploadFile
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from slowapi.errors import RateLimitExceeded
from sqlalchemy.orm import Session
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from duet import __version__
from duet.config import get_settings
from duet.database import get_db
from duet.dependencies import (
    SessionState,
    clear_auth_cookie,
    get_session_state,
    require_main_screen,
    set_auth_cookie,
    set_gate_cookie,
)
from duet.errors import ProviderError
from duet.rate_limit import limiter
from duet.routers import auth_router, gate_router, presence_router, recordings_router, storage_router
from duet.services.auth import get_auth_service
from duet.services.gate import get_gate_service
from duet.services.jwt import get_jwt_service
from duet.services.presence import get_presence_service
from duet.services.recording import MOOD_LABELS, REACTION_EMOJI, get_recording_service

# Logging
logger = logging.getLogger("duet")
logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

settings = get_settings()
for warning in settings.validate():
    logger.warning(warning)

app = FastAPI(title="Duet", version=__version__)
app.state.limiter = limiter


# --- Security headers middleware ---
class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response.headers["Content-Security-Policy"] = (
            "default-src 'self'; "
            "script-src 'self' 'unsafe-inline' https://cdn.tailwindcss.com https://unpkg.com; "
            "style-src 'self' 'unsafe-inline'; "
            "img-src 'self' data:; "
            "media-src 'self' blob:; "
            "connect-src 'self'; "
            "font-src 'self'"
        )
        return response


# --- Request size limit middleware ---
class RequestSizeLimitMiddleware(BaseHTTPMiddleware):
    MAX_BODY_SIZE = (settings.MAX_UPLOAD_SIZE_MB + 1) * 1024 * 1024  # slightly above max upload

    async def dispatch(self, request: Request, call_next) -> Response:
        content_length = request.headers.get("content-length")
        if content_length and int(content_length) > self.MAX_BODY_SIZE:
            return JSONResponse(status_code=413, content={"error": "Request body too large"})
        return await call_next(request)


# --- Audit logging middleware ---
class AuditLogMiddleware(BaseHTTPMiddleware):
    AUDIT_PATHS = {
        "/api/validate-password",
        "/api/validate-email",
        "/api/auth/",
        "/api/recordings",
        "/unlock",
        "/auth",
        "/upload",
    }

    async def dispatch(self, request: Request, call_next) -> Response:
        start = time.time()
        response = await call_next(request)
        duration_ms = (time.time() - start) * 1000

        path = request.url.path
        if request.method == "POST" and any(path.startswith(p) for p in self.AUDIT_PATHS):
            logger.info(
                "AUDIT %s %s -> %d (%.0fms) from %s",
                request.method,
                path,
                response.status_code,
                duration_ms,
                request.client.host if request.client else "unknown",
            )

        return response


app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestSizeLimitMiddleware)
app.add_middleware(AuditLogMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Templates
templates = Jinja2Templates(directory="templates")

# API routers
app.include_router(gate_router)
app.include_router(presence_router)
app.include_router(recordings_router)
app.include_router(auth_router)
app.include_router(storage_router)


# --- Rate limit error handler ---
@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> Response:
    """Handle rate limit exceeded."""
    if request.url.path.startswith("/api/"):
        return JSONResponse(status_code=429, content={"error": "Rate limit exceeded. Try again later."})
    return HTMLResponse(content="<h1>429</h1><p>Too many requests. Please try again later.</p>", status_code=429)


# --- Exception handler: {"error": ...} for the API, redirect or HTML for the web ---
@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> Response:
    """Handle HTTP exceptions. Web 401s go back to the screen picker."""
    if request.url.path.startswith("/api/"):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})
    if exc.status_code == 401:
        if request.headers.get("HX-Request"):
            response = HTMLResponse(content="", status_code=200)
            response.headers["HX-Redirect"] = "/"
            return response
        return RedirectResponse(url="/", status_code=302)
    return HTMLResponse(
        content=f"<h1>{exc.status_code}</h1><p>{exc.detail}</p>",
        status_code=exc.status_code,
    )


@app.exception_handler(ProviderError)
async def provider_error_handler(request: Request, exc: ProviderError) -> Response:
    """Provider failures that escape a route are reported verbatim."""
    logger.error("Provider failure on %s: %s", request.url.path, exc)
    if request.url.path.startswith("/api/"):
        return JSONResponse(status_code=500, content={"error": str(exc)})
    return HTMLResponse(content=f"<h1>500</h1><p>{exc}</p>", status_code=500)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> Response:
    """Keep the {"error": ...} shape for malformed bodies."""
    return JSONResponse(
        status_code=422,
        content={"error": "Invalid request", "details": jsonable_encoder(exc.errors())},
    )


# --- Health check ---
@app.get("/api/health")
def health_check() -> dict:
    """Health check endpoint."""
    return {"status": "ok", "app": "duet", "version": __version__}


# --- Web routes ---
def _render_main(request: Request, state: SessionState, db: Session, error: str | None = None) -> HTMLResponse:
    recordings = get_recording_service().list_recordings(db)
    return templates.TemplateResponse(
        request,
        "main.html",
        {
            "user": state.user,
            "recordings": recordings,
            "moods": MOOD_LABELS,
            "reaction_emoji": REACTION_EMOJI,
            "poll_seconds": settings.PRESENCE_POLL_SECONDS,
            "max_caption": settings.MAX_CAPTION_LENGTH,
            "error": error,
        },
    )


def _mark_online(db: Session, user_id: str) -> None:
    try:
        get_presence_service().set_status(db, user_id, True)
    except ProviderError as e:
        logger.warning("Error updating status: %s", e)


@app.get("/", response_class=HTMLResponse)
def index(
    request: Request,
    mode: str = "signin",
    state: SessionState = Depends(get_session_state),
    db: Session = Depends(get_db),
) -> HTMLResponse:
    """Pick the screen for this session: passphrase, sign-in, or the main space."""
    if not state.passphrase_ok:
        return templates.TemplateResponse(request, "passphrase.html", {})
    if not state.user:
        return templates.TemplateResponse(request, "auth.html", {"mode": mode})

    # Mounting the main screen marks the viewer online
    _mark_online(db, state.user.user_id)
    return _render_main(request, state, db)


@app.post("/unlock", response_class=HTMLResponse)
def unlock(request: Request, password: str = Form("")) -> HTMLResponse:
    """Handle the shared passphrase form."""
    if not get_gate_service().validate_passphrase(password):
        return templates.TemplateResponse(
            request,
            "passphrase.html",
            {"error": "Wrong password, try again"},
            status_code=401,
        )

    response = RedirectResponse(url="/", status_code=302)
    set_gate_cookie(response, get_jwt_service().create_gate_token())
    return response  # type: ignore[return-value]


@app.post("/auth", response_class=HTMLResponse)
def auth_submit(
    request: Request,
    email: str = Form(...),
    password: str = Form(...),
    mode: str = Form("signin"),
    state: SessionState = Depends(get_session_state),
    db: Session = Depends(get_db),
) -> HTMLResponse:
    """Handle the sign-in / sign-up form. The allow-list is checked before the account store."""
    if not state.passphrase_ok:
        return RedirectResponse(url="/", status_code=302)  # type: ignore[return-value]

    context = {"email": email, "mode": mode}
    if not get_gate_service().validate_email(email):
        return templates.TemplateResponse(
            request,
            "auth.html",
            {**context, "error": "This email is not authorized for this app"},
            status_code=403,
        )

    auth_service = get_auth_service()
    if mode == "signup":
        result = auth_service.sign_up(db, email, password)
    else:
        result = auth_service.sign_in(db, email, password)

    if not result.success:
        return templates.TemplateResponse(request, "auth.html", {**context, "error": result.error})

    token = get_jwt_service().create_token(user_id=result.user_id, email=result.email)  # type: ignore[arg-type]
    response = RedirectResponse(url="/", status_code=302)
    set_auth_cookie(response, token)
    return response  # type: ignore[return-value]


@app.get("/logout")
def logout(
    state: SessionState = Depends(get_session_state),
    db: Session = Depends(get_db),
) -> RedirectResponse:
    """Mark the viewer offline, clear the auth cookie and go back to sign-in."""
    if state.user:
        try:
            get_presence_service().set_status(db, state.user.user_id, False)
        except ProviderError as e:
            logger.warning("Error updating status on sign out: %s", e)
    response = RedirectResponse(url="/", status_code=302)
    clear_auth_cookie(response)
    return response


@app.post("/upload", response_class=HTMLResponse)
async def upload_submit(
    request: Request,
    file: UploadFile,
    caption: str = Form(""),
    mood: str = Form(""),
    state: SessionState = Depends(require_main_screen),
    db: Session = Depends(get_db),
) -> HTMLResponse:
    """Handle the upload form, then show the refreshed timeline."""
    user = state.user
    try:
        await get_recording_service().upload(db, user.user_id, user.email, file, caption, mood)  # type: ignore[union-attr]
    except (ValueError, ProviderError) as e:
        return _render_main(request, state, db, error=str(e) or "Upload failed")
    return RedirectResponse(url="/", status_code=302)  # type: ignore[return-value]


@app.post("/recordings/{recording_id}/react")
def react_submit(
    recording_id: str,
    emoji: str = Form(...),
    state: SessionState = Depends(require_main_screen),
    db: Session = Depends(get_db),
) -> RedirectResponse:
    """Add a reaction and re-fetch the whole timeline."""
    service = get_recording_service()
    recording = service.get_recording(db, recording_id)
    if not recording:
        raise HTTPException(status_code=404, detail="Recording not found")
    service.add_reaction(db, recording, state.user.user_id, emoji)  # type: ignore[union-attr]
    return RedirectResponse(url="/", status_code=302)


@app.get("/partials/partner-status", response_class=HTMLResponse)
def partner_status_partial(
    request: Request,
    state: SessionState = Depends(require_main_screen),
    db: Session = Depends(get_db),
) -> HTMLResponse:
    """HTMX polling partial for the partner's presence. Each poll also refreshes the viewer's own status."""
    _mark_online(db, state.user.user_id)  # type: ignore[union-attr]
    status = get_presence_service().get_partner_status(db, state.user.user_id)  # type: ignore[union-attr]
    return templates.TemplateResponse(
        request,
        "partials/partner_status.html",
        {"partner_online": bool(status and status.is_online), "status": status},
    )
