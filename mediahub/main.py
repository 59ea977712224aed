"""Main FastAPI application entry point."""

import logging
import time
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from mediahub.api.v1.endpoints.auth.routes import router as auth_router
from mediahub.api.v1.endpoints.channels.routes import router as channels_router
from mediahub.api.v1.endpoints.comments.routes import router as comments_router
from mediahub.api.v1.endpoints.health.routes import router as health_router
from mediahub.api.v1.endpoints.likes.routes import router as likes_router
from mediahub.api.v1.endpoints.playlists.routes import router as playlists_router
from mediahub.api.v1.endpoints.subscriptions.routes import router as subscriptions_router
from mediahub.api.v1.endpoints.tweets.routes import router as tweets_router
from mediahub.api.v1.endpoints.videos.routes import router as videos_router
from mediahub.config import get_settings
from mediahub.core.auth.exceptions import AuthenticationException
from mediahub.core.exceptions import DomainException, UpstreamFailureException
from mediahub.infrastructure.database.init_db import init_database
from mediahub.infrastructure.database.session import close_db_connections
from mediahub.utils.logging import setup_logging

ROUTERS = (
    health_router,
    auth_router,
    channels_router,
    videos_router,
    tweets_router,
    comments_router,
    likes_router,
    subscriptions_router,
    playlists_router,
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup and shutdown events."""
    logger = logging.getLogger("mediahub")

    setup_logging()
    logger.info("Starting MediaHub...")

    try:
        await init_database()
    except Exception:
        logger.exception("Startup failed")
        raise

    logger.info("MediaHub started successfully")

    yield

    logger.info("Shutting down MediaHub...")
    await close_db_connections()
    logger.info("Database connections closed")


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="MediaHub",
        description="Media-sharing backend: videos, tweets, comments, likes, playlists and subscriptions",
        version=settings.app_version,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    for router in ROUTERS:
        app.include_router(router, prefix=settings.api_v1_prefix)

    if settings.media_base_url.startswith("/"):
        app.mount(
            settings.media_base_url,
            StaticFiles(directory=settings.media_root, check_dir=False),
            name="media",
        )

    register_exception_handlers(app)

    register_middleware(app)

    return app


def register_exception_handlers(app: FastAPI) -> None:
    """Register custom exception handlers."""

    @app.exception_handler(AuthenticationException)
    async def authentication_exception_handler(request: Request, exc: AuthenticationException):
        """Handle authentication failures."""
        return JSONResponse(
            status_code=exc.status_code,
            content=exc.to_payload(),
            headers={"WWW-Authenticate": "Bearer"},
        )

    @app.exception_handler(DomainException)
    async def domain_exception_handler(request: Request, exc: DomainException):
        """Handle custom domain exceptions."""
        if exc.status_code >= 500:
            logging.getLogger("mediahub").warning(
                f"{exc.code} on {request.method} {request.url.path}: {exc.details}"
            )
        return JSONResponse(status_code=exc.status_code, content=exc.to_payload())

    @app.exception_handler(SQLAlchemyError)
    async def storage_exception_handler(request: Request, exc: SQLAlchemyError):
        """Handle database failures that escaped the repositories."""
        logging.getLogger("mediahub").error(
            f"Storage failure on {request.method} {request.url.path}: {exc}"
        )
        failure = UpstreamFailureException("Storage unavailable", type(exc).__name__)
        return JSONResponse(status_code=failure.status_code, content=failure.to_payload())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        """Handle malformed request bodies and parameters."""
        return JSONResponse(
            status_code=422,
            content={
                "error": "Request validation failed",
                "type": "RequestValidationError",
                "details": jsonable_encoder(exc.errors()),
            },
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Handle framework HTTP exceptions."""
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail, "type": "HTTPException"},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle general exceptions."""
        logger = logging.getLogger("mediahub")
        logger.error(f"Unhandled exception: {exc}", exc_info=True)

        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "type": "InternalError"},
        )


def register_middleware(app: FastAPI) -> None:
    """Register custom middleware."""

    @app.middleware("http")
    async def logging_middleware(request: Request, call_next):
        """Log all HTTP requests."""
        logger = logging.getLogger("mediahub.http")

        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"

        logger.info(f"Request started: {request.method} {request.url.path} from {client_ip}")

        response = await call_next(request)

        process_time = time.perf_counter() - start_time
        logger.info(
            f"Request completed: {request.method} {request.url.path} "
            f"status={response.status_code} time={process_time:.3f}s"
        )

        return response

    @app.middleware("http")
    async def security_headers_middleware(request: Request, call_next):
        """Add security headers to responses."""
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["X-XSS-Protection"] = "1; mode=block"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

        return response


app = create_app()


@app.get("/", include_in_schema=False)
async def root():
    """Root endpoint."""
    return {
        "message": "MediaHub API",
        "version": get_settings().app_version,
        "docs": "/docs",
    }


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "mediahub.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
