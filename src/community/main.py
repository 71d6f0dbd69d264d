"""FastAPI application entry point."""

import asyncio
import logging
from contextlib import asynccontextmanager

import firebase_admin
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from community.api.router import api_router
from community.config import Settings, get_settings
from community.dependencies import get_background_tasks
from community.exceptions import ServiceError, ValidationError
from community.logging_config import setup_logging
from community.middleware.rate_limit import limiter

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging and Firebase on startup; flush notifications on shutdown."""
    settings = get_settings()
    setup_logging(settings)
    logger.info(f"Starting {settings.app_name}" + (" in debug mode" if settings.debug else ""))

    # Admin SDK backs account creation; Application Default Credentials on Cloud Run
    if not firebase_admin._apps:
        options = {"projectId": settings.gcp_project_id} if settings.gcp_project_id else None
        firebase_admin.initialize_app(options=options)

    yield

    pending = get_background_tasks()
    if pending:
        logger.info(f"Waiting for {len(pending)} background notification(s)")
        await asyncio.gather(*pending, return_exceptions=True)


def request_field_errors(exc: RequestValidationError) -> dict[str, str]:
    """Map request validation errors to {field: message}, dropping the body/query prefix."""
    errors: dict[str, str] = {}
    for err in exc.errors():
        loc = [str(part) for part in err["loc"]]
        field = ".".join(loc[1:]) or loc[0]
        errors.setdefault(field, err["msg"])
    return errors


def register_exception_handlers(app: FastAPI, settings: Settings) -> None:
    """Translate errors into JSON responses with a ``detail`` message."""

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        if exc.status_code >= 500:
            logger.error(
                f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}"
            )

        content = {"detail": exc.message}
        if isinstance(exc, ValidationError):
            content["errors"] = exc.errors
        headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
        return JSONResponse(status_code=exc.status_code, content=content, headers=headers)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = request_field_errors(exc)
        logger.warning(f"Rejected {request.method} {request.url.path}: {errors}")
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": "Invalid request", "errors": errors},
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail},
            headers=exc.headers,
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.error(
            f"Unhandled {type(exc).__name__} on {request.method} {request.url.path}",
            exc_info=exc,
        )
        # Details only leave the process in debug mode
        content = (
            {"detail": str(exc), "type": type(exc).__name__}
            if settings.debug
            else {"detail": "An internal error occurred. Please contact support."}
        )
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        version="0.1.0",
        description="Community site backend: accounts, role approval and articles",
        lifespan=lifespan,
    )

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "Accept", "Origin"],
        max_age=3600,
    )

    register_exception_handlers(app, settings)
    app.include_router(api_router, prefix=settings.api_prefix)

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy"}

    return app


app = create_app()
