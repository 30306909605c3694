"""FastAPI application setup with lifespan and exception handlers."""

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from adreel import __version__
from adreel.api.routes import router
from adreel.config import settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager.

    Startup:
        - Report whether the server-side credential is configured
    """
    logger.info("Starting AdReel relay API...")
    if settings.api_key_value() is None:
        logger.warning("No Gemini API key configured; relay calls will return 400")
    logger.info("API startup complete")

    yield

    logger.info("AdReel relay API shut down")


app = FastAPI(
    title="AdReel Relay API",
    version=__version__,
    lifespan=lifespan,
)

# CORS for the front-end dev server
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.server.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies are client errors, reported like missing input."""
    logger.warning(f"Invalid request body for {request.method} {request.url.path}")
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request body", "details": str(exc.errors())},
    )


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    """Catch-all exception handler to prevent stack traces in API responses."""
    logger.error(f"Unhandled exception in {request.method} {request.url.path}: {type(exc).__name__}: {str(exc)}")
    return JSONResponse(
        status_code=500,
        content={
            "error": "Server failure",
            "details": str(exc),
        }
    )
