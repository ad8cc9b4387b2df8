"""Main FastAPI application for MyTube."""

from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.sessions import SessionMiddleware
from prometheus_client import make_asgi_app
from app.config import settings
from app.db import init_db, close_db
from app.errors import AppError
from app.logging_config import logger, redact_sensitive_data
from app.schemas import failure
from app.youtube.gateway import YouTubeGateway
# Import routers
from app.auth.routes import router as auth_router
from app.videos.routes import router as videos_router
from app.playlists.routes import router as playlists_router
from app.notes.routes import router as notes_router
from app.history.routes import router as history_router
from app.tags.routes import router as tags_router
from app.youtube.routes import router as youtube_router

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    logger.info("Starting MyTube API", version=VERSION, environment=settings.environment)
    await init_db()
    app.state.youtube = YouTubeGateway(
        settings.youtube_api_key,
        base_url=settings.youtube_api_base_url,
        timeout=settings.youtube_timeout_seconds,
    )
    logger.info("Application startup complete")

    yield

    # Shutdown
    logger.info("Shutting down MyTube API")
    await app.state.youtube.close()
    await close_db()
    logger.info("Application shutdown complete")


# Initialize rate limiter
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[settings.rate_limit],
    enabled=settings.rate_limit_enabled,
)

# Create FastAPI app
app = FastAPI(
    title="MyTube API",
    description="Personal YouTube library: saved videos, playlists, notes and watch history",
    version=VERSION,
    docs_url="/docs" if settings.is_development else None,
    redoc_url="/redoc" if settings.is_development else None,
    lifespan=lifespan,
)

# Add rate limiter to app state
app.state.limiter = limiter
app.add_middleware(SlowAPIMiddleware)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_url],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Session cookie carries the OAuth state between redirect and callback
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.session_secret_key,
    max_age=settings.session_max_age_seconds,
    https_only=not settings.is_development and settings.environment != "test",
)


# Exception handlers
@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    """Translate application errors into the response envelope."""
    if exc.status_code >= 500:
        logger.error("Request failed", path=request.url.path, error=exc.message, detail=exc.detail)
    else:
        logger.info("Request rejected", path=request.url.path, status_code=exc.status_code, error=exc.message)

    return JSONResponse(
        status_code=exc.status_code,
        content=failure(
            exc.message,
            message=exc.detail if settings.is_development else None,
            data=exc.data,
        ),
    )


def describe_validation_errors(errors: list) -> str:
    parts = []
    for error in errors:
        location = ".".join(str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path"))
        parts.append(f"{location}: {error.get('msg')}" if location else error.get("msg", "Invalid value"))
    return "; ".join(parts) or "Invalid request"


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle validation errors."""
    logger.warning(
        "Validation error",
        path=request.url.path,
        errors=[{"loc": error.get("loc"), "msg": error.get("msg")} for error in exc.errors()],
        body=redact_sensitive_data(exc.body),
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=failure("Validation failed", message=describe_validation_errors(exc.errors())),
    )


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    logger.warning("Rate limit exceeded", path=request.url.path, client=get_remote_address(request))
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content=failure("Too many requests, please try again later"),
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=failure(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle uncaught exceptions."""
    logger.error(
        "Unhandled exception",
        path=request.url.path,
        error=str(exc),
        exc_info=True,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=failure(
            "Internal server error",
            message=str(exc) if settings.is_development else None,
        ),
    )


# Health check endpoint
@app.get("/api/health")
async def health_check():
    """Health check endpoint for container orchestration."""
    return {
        "status": "OK",
        "version": VERSION,
        "environment": settings.environment,
        "features": {
            "youtube": bool(settings.youtube_api_key),
            "googleOAuth": settings.google_oauth_configured,
        },
    }


# Mount Prometheus metrics endpoint
if settings.enable_prometheus:
    metrics_app = make_asgi_app()
    app.mount("/metrics", metrics_app)


# Include routers
app.include_router(auth_router, prefix="/api/auth", tags=["Authentication"])
app.include_router(videos_router, prefix="/api/videos", tags=["Videos"])
app.include_router(playlists_router, prefix="/api/playlists", tags=["Playlists"])
app.include_router(notes_router, prefix="/api/notes", tags=["Notes"])
app.include_router(history_router, prefix="/api/history", tags=["History"])
app.include_router(tags_router, prefix="/api/tags", tags=["Tags"])
app.include_router(youtube_router, prefix="/api/youtube", tags=["YouTube"])


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=settings.port,
        reload=settings.reload,
        log_level=settings.log_level.lower(),
    )
