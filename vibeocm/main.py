"""
FastAPI application entry point.
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from vibeocm import __version__
from vibeocm.api.deps import container
from vibeocm.api.v1 import artifacts, config, health, wizard
from vibeocm.core.config import settings
from vibeocm.core.constants import API_PREFIX, CONFIG_PREFIX
from vibeocm.core.exceptions import ValidationError, VibeOCMError
from vibeocm.core.logging import clear_context, get_logger, setup_logging

# Initialize logging
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Application lifespan manager.
    Handles startup and shutdown events.
    """
    # Startup
    logger.info(
        "Starting VibeOCM",
        app_name=settings.app_name,
        env=settings.app_env,
        trial_available=settings.trial.available,
        analytics_enabled=settings.analytics.enabled,
    )
    container.initialize()

    yield

    # Shutdown
    logger.info("Shutting down VibeOCM")
    await container.shutdown()


# Create FastAPI application
app = FastAPI(
    title="VibeOCM API",
    description="Wizard that turns project details into organizational change management artifacts",
    version=__version__,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
    openapi_url="/openapi.json" if settings.debug else None,
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.security.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition"],
)


@app.middleware("http")
async def reset_log_context(request: Request, call_next: Any) -> Any:
    """Keep per-request log context from leaking between requests."""
    clear_context()
    return await call_next(request)


def _field_path(loc: tuple[Any, ...]) -> str:
    """('body', 'stakeholders', 0, 'role') -> 'stakeholders[0].role'"""
    path = ""
    for part in loc:
        if part == "body" and not path:
            continue
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path += f".{part}" if path else str(part)
    return path or "body"


# Exception handlers
@app.exception_handler(VibeOCMError)
async def vibeocm_error_handler(
    request: Request,
    exc: VibeOCMError,
) -> JSONResponse:
    """Handle custom application errors."""
    logger.error(
        "Application error",
        error_code=exc.code,
        error_message=exc.message,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
    )


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Render form validation failures as field -> message."""
    details: dict[str, str] = {}
    for error in exc.errors():
        message = str(error.get("msg", "Invalid value")).removeprefix("Value error, ")
        details.setdefault(_field_path(tuple(error.get("loc", ()))), message)

    first = next(iter(details.values()), "Invalid request")
    error = ValidationError(message=first, details=details)
    logger.info("Request validation failed", path=request.url.path, fields=list(details))
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


@app.exception_handler(Exception)
async def general_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Handle unexpected errors."""
    logger.exception(
        "Unexpected error",
        error=str(exc),
        path=request.url.path,
    )
    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred",
            }
        },
    )


# Include routers
app.include_router(config.router, prefix=CONFIG_PREFIX, tags=["Config"])
app.include_router(health.router, prefix=API_PREFIX, tags=["Health"])
app.include_router(wizard.router, prefix=API_PREFIX, tags=["Wizard"])
app.include_router(artifacts.router, prefix=API_PREFIX, tags=["Artifacts"])


# Root endpoint
@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {
        "name": settings.app_name,
        "version": __version__,
        "docs": "/docs" if settings.debug else "Disabled in production",
    }


# API info endpoint
@app.get("/api")
async def api_info() -> dict[str, Any]:
    """API information endpoint."""
    return {
        "name": "VibeOCM API",
        "version": __version__,
        "prefix": API_PREFIX,
        "endpoints": {
            "health": f"{API_PREFIX}/health",
            "sessions": f"{API_PREFIX}/sessions",
            "artifact_types": f"{API_PREFIX}/artifact-types",
            "env": f"{CONFIG_PREFIX}/env",
        },
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "vibeocm.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development,
    )
