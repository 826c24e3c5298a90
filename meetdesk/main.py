"""
Main application entry point - FastAPI app instance and configuration.
Run with: uvicorn meetdesk.main:app --reload
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from meetdesk.core.config import settings
from meetdesk.core.errors import AppError
from meetdesk.core.logging_config import configure_logging
from meetdesk.environments.google.auth import normalize_base_url
from meetdesk.routers import (
    google_auth,
    google_data,
    integrations,
    meetings,
    notes,
    summaries,
    users,
)


configure_logging()
logger = logging.getLogger("meetdesk.main")


app = FastAPI(
    title=settings.APP_NAME,
    docs_url="/docs",
    redoc_url="/redoc",
)

# ---------------------------------------------------------------------------
# CORS MIDDLEWARE
# ---------------------------------------------------------------------------
# Session cookies need credentialed requests, which browsers refuse with a
# wildcard origin. Allowed: the app itself and the capture extension.
app.add_middleware(
    CORSMiddleware,
    allow_origins=[normalize_base_url(settings.APP_URL)] if settings.APP_URL else [],
    allow_origin_regex=r"chrome-extension://.*|http://localhost(:\d+)?",
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------------------------------------------------------
# EXCEPTION HANDLERS
# ---------------------------------------------------------------------------
@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message} ({exc.error})")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Internal server error"},
    )


# ---------------------------------------------------------------------------
# REGISTER ROUTERS
# ---------------------------------------------------------------------------
# google_auth.router:  /api/auth/google, /api/auth/google/callback
# integrations.router: /api/integrations
# google_data.router:  /api/google/*, /api/gmail/reports
# summaries.router:    /api/summarize, /api/meetings/save-to-notion
# meetings.router:     /api/meetings
# notes.router:        /api/notes
# users.router:        /api/users/me
app.include_router(google_auth.router)
app.include_router(integrations.router)
app.include_router(google_data.router)
app.include_router(summaries.router)
app.include_router(meetings.router)
app.include_router(notes.router)
app.include_router(users.router)


@app.get("/health", tags=["health"])
def health_check():
    """
    Liveness probe. Does NOT check database connectivity.

    Returns:
        {"status": "ok"}
    """
    return {"status": "ok"}
