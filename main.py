"""Eventreel - event invitations with invitee video uploads."""

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from eventreel.config import get_settings
from eventreel.rate_limit import limiter
from eventreel.results import AppError
from eventreel.routers import auth_router, events_router, password_router
from eventreel.services.email import build_email_client
from eventreel.services.storage import build_storage, storage_mount_path

# Logging
logger = logging.getLogger("eventreel")
logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Build the external clients once per process and close them on shutdown."""
    settings = get_settings()
    for warning in settings.validate():
        logger.warning(warning)
    app.state.storage = build_storage(settings)
    app.state.email_client = build_email_client(settings)
    try:
        yield
    finally:
        app.state.email_client.close()


app = FastAPI(title="Eventreel", version="0.1.0", lifespan=lifespan)
app.state.limiter = limiter


# --- Security headers middleware ---
class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        return response


# --- Request size limit middleware ---
class RequestSizeLimitMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        max_body_size = (get_settings().MAX_UPLOAD_SIZE_MB + 5) * 1024 * 1024  # slightly above max upload
        content_length = request.headers.get("content-length")
        if content_length and content_length.isdigit() and int(content_length) > max_body_size:
            return JSONResponse(status_code=413, content={"message": "Request body too large"})
        return await call_next(request)


# --- Audit logging middleware ---
class AuditLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        start = time.time()
        response = await call_next(request)
        duration_ms = (time.time() - start) * 1000

        method = request.method
        if method in ("POST", "DELETE"):
            logger.info(
                "AUDIT %s %s -> %d (%.0fms) from %s",
                method,
                request.url.path,
                response.status_code,
                duration_ms,
                request.client.host if request.client else "unknown",
            )

        return response


app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestSizeLimitMiddleware)
app.add_middleware(AuditLogMiddleware)

# API routers
app.include_router(auth_router)
app.include_router(password_router)
app.include_router(events_router)

# Stored videos, at the paths LocalObjectStorage.object_url hands out
settings = get_settings()
Path(settings.STORAGE_DIR).mkdir(parents=True, exist_ok=True)
app.mount(storage_mount_path(settings.STORAGE_URL), StaticFiles(directory=settings.STORAGE_DIR), name="storage")


# --- Application errors: echo kind's status code and message ---
@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s on %s %s: %s", exc.kind.value, request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report the first validation problem as a 400."""
    errors = exc.errors()
    message = "Invalid request"
    if errors:
        first = errors[0]
        ctx_error = first.get("ctx", {}).get("error")
        message = str(ctx_error) if ctx_error else first.get("msg", message)
        field = ".".join(str(part) for part in first.get("loc", ())[1:])
        if field and not ctx_error:
            message = f"{field}: {message}"
    return JSONResponse(status_code=400, content={"message": message})


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"message": exc.detail}, headers=exc.headers)


# --- Rate limit error handler ---
@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Handle rate limit exceeded."""
    return JSONResponse(status_code=429, content={"message": "Rate limit exceeded. Try again later."})


# --- Unhandled errors ---
@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"message": "Internal Server Error"})


# --- Health check ---
@app.get("/api/health")
def health_check() -> dict:
    """Health check endpoint."""
    return {"status": "ok", "app": "eventreel", "version": "0.1.0"}
