"""File Storage API - Main Application Module.

This module initializes the FastAPI application with its configuration,
middleware, routing and lifecycle management, and serves a pre-built client
bundle when one is present.
"""

import logging
import sys
import uuid
from contextlib import asynccontextmanager
from datetime import timedelta
from pathlib import Path

# Add the project root to Python path if running directly
if __name__ == "__main__":
    project_root = Path(__file__).parent.parent
    sys.path.insert(0, str(project_root))

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import Settings, get_config_summary, settings as default_settings
from app.core.logging_config import setup_logging
from app.core.security import PasswordHasher, TokenManager
from app.database import Database
from app.exceptions.base import NotFoundError
from app.schemas.base import HealthResponse
from app.services.blob_store import BlobStore

logger = logging.getLogger(__name__)

UPLOAD_PATH = "/api/files/upload"
# Room for multipart boundaries and part headers around the file bytes
MULTIPART_OVERHEAD = 16 * 1024


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle events."""
    settings: Settings = app.state.settings

    # Startup
    setup_logging(settings)
    logger.info("🚀 Starting %s...", settings.app_name)
    logger.info("Configuration: %s", get_config_summary(settings))
    if not settings.secret_key_configured:
        logger.warning("⚠️ SECRET_KEY is not set, sessions will not survive a restart")

    app.state.blob_store.prepare()

    database = Database(settings.database_url_resolved, echo=settings.debug, ssl=settings.db_ssl)
    app.state.database = database
    try:
        await database.create_tables()
        logger.info("✅ Database initialized successfully")
    except Exception:
        # Serving continues on the assumption that the tables already exist
        logger.exception("❌ Database initialization failed")

    yield

    # Shutdown
    logger.info("🛑 Shutting down %s...", settings.app_name)
    await database.dispose()
    logger.info("✅ Database connections closed")


def create_app(settings: Settings = default_settings) -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title=settings.app_name,
        description="Multi-user file storage with Hebrew filename support",
        version=settings.version,
        lifespan=lifespan,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
    )

    app.state.settings = settings
    app.state.password_hasher = PasswordHasher(rounds=settings.bcrypt_rounds)
    app.state.token_manager = TokenManager(
        secret_key=settings.secret_key,
        algorithm=settings.algorithm,
        expires_in=timedelta(hours=settings.access_token_expire_hours),
    )
    app.state.blob_store = BlobStore(settings.upload_dir, max_size=settings.max_upload_size)

    # Add middleware
    setup_middleware(app, settings)

    # Add exception handlers
    setup_exception_handlers(app)

    # Include routers
    setup_routers(app)

    # Client bundle goes last so its catch-all route never shadows the API
    setup_frontend(app, Path(settings.frontend_build_dir))

    return app


def setup_middleware(app: FastAPI, settings: Settings):
    """Configure application middleware."""
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Content-Disposition", "X-Request-ID"],
    )

    # Refuse uploads whose declared length already exceeds the limit, before the body is spooled
    upload_limit = settings.max_upload_size + MULTIPART_OVERHEAD

    @app.middleware("http")
    async def reject_oversized_upload(request: Request, call_next):
        if request.method == "POST" and request.url.path == UPLOAD_PATH:
            content_length = request.headers.get("content-length", "")
            if content_length.isdigit() and int(content_length) > upload_limit:
                logger.info("Rejected upload declaring %s bytes", content_length)
                return error_response(request, 413, "File too large", "PAYLOAD_TOO_LARGE")
        return await call_next(request)

    # Request ID middleware
    @app.middleware("http")
    async def add_request_id(request: Request, call_next):
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response


def error_response(request: Request, status_code: int, message: str, error_code: str, headers=None):
    return JSONResponse(
        status_code=status_code,
        content={
            "error": message,
            "error_code": error_code,
            "request_id": getattr(request.state, "request_id", None),
        },
        headers=headers,
    )


def setup_exception_handlers(app: FastAPI):
    """Configure global exception handlers."""

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        # Handle custom exceptions that have structured detail
        if isinstance(exc.detail, dict) and "message" in exc.detail:
            message = exc.detail["message"]
            error_code = exc.detail.get("error_code", "HTTP_ERROR")
        else:
            message = str(exc.detail) if exc.detail else "An error occurred"
            error_code = "HTTP_ERROR"

        return error_response(
            request, exc.status_code, message, error_code, headers=getattr(exc, "headers", None)
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        for error in exc.errors():
            logger.debug("Request validation failed at %s: %s", error.get("loc"), error.get("msg"))
        return error_response(request, 400, "Invalid request", "VALIDATION_ERROR")

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return error_response(request, 500, "Internal server error", "INTERNAL_ERROR")


def setup_routers(app: FastAPI):
    """Configure application routers."""
    from app.domains.file.controller import router as file_router
    from app.domains.user.controller import router as user_router

    @app.get("/health", response_model=HealthResponse)
    @app.get("/api/health", response_model=HealthResponse)
    async def health_check():
        """Liveness marker."""
        return HealthResponse()

    app.include_router(user_router)
    app.include_router(file_router)


def setup_frontend(app: FastAPI, build_dir: Path):
    """Serve a single-page client bundle for every non-API path, if one is present."""
    index_file = build_dir / "index.html"
    if not index_file.is_file():
        return

    build_root = build_dir.resolve()
    logger.info("Serving client bundle from %s", build_root)

    @app.get("/{full_path:path}", include_in_schema=False)
    async def serve_frontend(full_path: str):
        if full_path == "api" or full_path.startswith("api/"):
            raise NotFoundError("Not found")

        if full_path:
            candidate = (build_root / full_path).resolve()
            if candidate.is_relative_to(build_root) and candidate.is_file():
                return FileResponse(candidate)

        return FileResponse(index_file)


# Create the application instance
app = create_app()


def main():
    """Entry point for running the application directly."""
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=default_settings.host,
        port=default_settings.port,
        reload=default_settings.is_development and default_settings.debug,
        log_level=default_settings.log_level.value.lower(),
    )


if __name__ == "__main__":
    main()
