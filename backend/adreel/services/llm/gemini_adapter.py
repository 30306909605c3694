"""Direct transport: calls the Gemini API from this process with a local key.

Wraps the google-genai client with JSON output, optional structured schema
and tenacity-driven retries (one attempt unless configured otherwise).
"""

import base64
import binascii
import logging
from typing import Any, Optional

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types as genai_types
from pydantic import TypeAdapter
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from adreel.exceptions import ConfigurationError, TransportError
from adreel.services.llm.base import ModelGateway, require_image, require_prompt

logger = logging.getLogger(__name__)

IMAGE_MIME_TYPE = "image/jpeg"


class GeminiGateway(ModelGateway):
    """Gateway backed by the Gemini Developer API (google-genai SDK).

    The API key is passed in explicitly and only handed to the SDK client;
    it is never logged.
    """

    retry_wait = wait_exponential(multiplier=1, min=2, max=30)

    def __init__(
        self,
        api_key: Optional[str],
        model_id: str = "gemini-2.5-flash",
        vision_model_id: Optional[str] = None,
        *,
        temperature: float = 0.8,
        timeout_seconds: Optional[float] = None,
        max_attempts: int = 1,
        client: Optional[genai.Client] = None,
    ) -> None:
        """Initialize the gateway.

        Args:
            api_key: Gemini API key. May be None; calls then fail with
                ConfigurationError without touching the network.
            model_id: Model used for text prompts.
            vision_model_id: Model used for image analysis. Defaults to model_id.
            temperature: Sampling temperature.
            timeout_seconds: Optional HTTP timeout per request.
            max_attempts: Total attempts per call on TransportError.
            client: Pre-built genai.Client, mainly for tests.
        """
        self._api_key = api_key
        self._model_id = model_id
        self._vision_model_id = vision_model_id or model_id
        self._temperature = temperature
        self._timeout_seconds = timeout_seconds
        self._max_attempts = max_attempts
        self._client = client

    @property
    def name(self) -> str:
        return "direct"

    @property
    def client(self) -> genai.Client:
        """Lazy-load client on first use."""
        if self._client is None:
            http_options = None
            if self._timeout_seconds:
                http_options = genai_types.HttpOptions(timeout=int(self._timeout_seconds * 1000))
            self._client = genai.Client(api_key=self._api_key, http_options=http_options)
        return self._client

    def _require_credential(self) -> None:
        if not self._api_key:
            raise ConfigurationError("Missing Gemini API key (set GEMINI_API_KEY)")

    def _content_config(self, response_schema: Any) -> genai_types.GenerateContentConfig:
        if response_schema is None:
            return genai_types.GenerateContentConfig(
                temperature=self._temperature,
                response_mime_type="application/json",
            )
        return genai_types.GenerateContentConfig(
            temperature=self._temperature,
            response_mime_type="application/json",
            response_json_schema=TypeAdapter(response_schema).json_schema(),
        )

    async def generate(self, prompt: str, *, response_schema: Any = None) -> dict:
        self._require_credential()
        require_prompt(prompt)
        logger.debug("Gemini generate: model=%s prompt_chars=%d", self._model_id, len(prompt))
        return await self._send(self._model_id, prompt, self._content_config(response_schema))

    async def analyze_image(
        self,
        base64_image: str,
        prompt: str,
        *,
        response_schema: Any = None,
    ) -> dict:
        self._require_credential()
        data = require_image(base64_image)
        require_prompt(prompt)
        try:
            image_bytes = base64.b64decode(data, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ConfigurationError(f"Image is not valid base64: {e}") from e

        image_part = genai_types.Part.from_bytes(data=image_bytes, mime_type=IMAGE_MIME_TYPE)
        logger.debug(
            "Gemini analyze_image: model=%s image_bytes=%d", self._vision_model_id, len(image_bytes)
        )
        return await self._send(
            self._vision_model_id,
            [image_part, prompt],
            self._content_config(response_schema),
        )

    async def _send(
        self,
        model_id: str,
        contents: Any,
        config: genai_types.GenerateContentConfig,
    ) -> dict:
        @retry(
            stop=stop_after_attempt(self._max_attempts),
            wait=self.retry_wait,
            retry=retry_if_exception_type(TransportError),
            before_sleep=lambda retry_state: logger.warning(
                f"Gemini retry {retry_state.attempt_number}/{self._max_attempts}: "
                f"{retry_state.outcome.exception()}"
            ),
            reraise=True,
        )
        async def _call() -> dict:
            try:
                response = await self.client.aio.models.generate_content(
                    model=model_id,
                    contents=contents,
                    config=config,
                )
            except genai_errors.APIError as e:
                raise TransportError(f"Gemini API error: {e}", status_code=e.code) from e
            except httpx.HTTPError as e:
                raise TransportError(f"Gemini request failed: {e}") from e
            return response.model_dump(mode="json", exclude_none=True)

        return await _call()
