"""Relay endpoints and their request schemas.

The relay keeps the Gemini key server-side: the browser (or a RelayGateway)
posts a prompt or an image here and receives the model's raw JSON response.

Status conventions:
- 200: raw model response
- 400: server credential missing, or prompt/image missing
- 500: {"error", "details"} for any other failure
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from adreel import __version__
from adreel.config import settings
from adreel.exceptions import ConfigurationError, GenerationError
from adreel.services import prompt_builder
from adreel.services.llm.base import ModelGateway
from adreel.services.llm.gemini_adapter import GeminiGateway

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


# ============================================================================
# Pydantic Schemas
# ============================================================================

class GenerateRequest(BaseModel):
    """Request schema for POST /api/generate."""
    prompt: Optional[str] = None


class VisionRequest(BaseModel):
    """Request schema for POST /api/vision.

    base64Image may carry a data-URL prefix; it is stripped before the call.
    prompt overrides the built-in product analysis instruction.
    """
    model_config = ConfigDict(populate_by_name=True)

    base64_image: Optional[str] = Field(default=None, alias="base64Image")
    prompt: Optional[str] = None


class HealthResponse(BaseModel):
    status: str
    version: str
    has_credential: bool


# ============================================================================
# Dependencies
# ============================================================================

def get_server_gateway() -> ModelGateway:
    """Direct Gemini gateway using the server-held key."""
    return GeminiGateway(
        settings.api_key_value(),
        model_id=settings.gemini.text_model,
        vision_model_id=settings.gemini.vision_model,
        temperature=settings.gemini.temperature,
        timeout_seconds=settings.gateway.timeout_seconds,
    )


def _bad_request(error: ConfigurationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": str(error)})


def _server_failure(label: str, error: Exception) -> JSONResponse:
    return JSONResponse(status_code=500, content={"error": label, "details": str(error)})


# ============================================================================
# Endpoints
# ============================================================================

@router.post("/generate")
async def generate(
    request: Optional[GenerateRequest] = None,
    gateway: ModelGateway = Depends(get_server_gateway),
):
    """Forward a text prompt to the model and return its raw response."""
    prompt = request.prompt if request else None
    try:
        return await gateway.generate(prompt)
    except ConfigurationError as e:
        logger.warning("/api/generate rejected: %s", e)
        return _bad_request(e)
    except GenerationError as e:
        logger.error("SERVER ERROR /api/generate: %s", e)
        return _server_failure("Server failure", e)


@router.post("/vision")
async def vision(
    request: Optional[VisionRequest] = None,
    gateway: ModelGateway = Depends(get_server_gateway),
):
    """Forward a product image for analysis and return the raw response."""
    base64_image = request.base64_image if request else None
    custom_prompt = request.prompt if request else None

    if custom_prompt:
        prompt, schema = custom_prompt, None
    else:
        built = prompt_builder.build_vision_prompt()
        prompt, schema = built.text, built.schema

    try:
        return await gateway.analyze_image(base64_image, prompt, response_schema=schema)
    except ConfigurationError as e:
        logger.warning("/api/vision rejected: %s", e)
        return _bad_request(e)
    except GenerationError as e:
        logger.error("Vision API ERROR: %s", e)
        return _server_failure("Vision Server Error", e)


@router.get("/health", response_model=HealthResponse)
async def health():
    """Liveness probe; reports whether a credential is configured, never its value."""
    return HealthResponse(
        status="ok",
        version=__version__,
        has_credential=settings.api_key_value() is not None,
    )
