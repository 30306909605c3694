"""Relay transport: forwards prompts to the same-origin backend.

The backend (``adreel.api``) holds the Gemini key and performs the call,
so this side needs no credential at all.
"""

import logging
from typing import Any, Optional

import httpx
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from adreel.exceptions import ConfigurationError, TransportError
from adreel.services.llm.base import ModelGateway, require_image, require_prompt

logger = logging.getLogger(__name__)

GENERATE_PATH = "/api/generate"
VISION_PATH = "/api/vision"


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(body, dict):
        parts = [str(body[key]) for key in ("error", "details") if body.get(key)]
        if parts:
            return ": ".join(parts)
    return f"HTTP {response.status_code}"


class RelayGateway(ModelGateway):
    """Gateway that posts to the relay's /api/generate and /api/vision."""

    retry_wait = wait_exponential(multiplier=1, min=2, max=30)

    def __init__(
        self,
        base_url: str,
        *,
        timeout_seconds: Optional[float] = None,
        max_attempts: int = 1,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        """Initialize the gateway.

        Args:
            base_url: Relay origin, e.g. "http://localhost:8000".
            timeout_seconds: Optional HTTP timeout; None waits indefinitely.
            max_attempts: Total attempts per call on TransportError.
            http_client: Shared AsyncClient (tests inject a MockTransport one).
        """
        self._base_url = base_url.rstrip("/")
        self._timeout_seconds = timeout_seconds
        self._max_attempts = max_attempts
        self._http_client = http_client

    @property
    def name(self) -> str:
        return "relay"

    async def generate(self, prompt: str, *, response_schema: Any = None) -> dict:
        require_prompt(prompt)
        logger.debug("Relay generate: prompt_chars=%d", len(prompt))
        return await self._post(GENERATE_PATH, {"prompt": prompt})

    async def analyze_image(
        self,
        base64_image: str,
        prompt: str,
        *,
        response_schema: Any = None,
    ) -> dict:
        data = require_image(base64_image)
        payload = {"base64Image": data}
        if prompt:
            payload["prompt"] = prompt
        return await self._post(VISION_PATH, payload)

    async def _request(self, path: str, payload: dict) -> httpx.Response:
        url = f"{self._base_url}{path}"
        if self._http_client is not None:
            return await self._http_client.post(url, json=payload)
        async with httpx.AsyncClient(timeout=self._timeout_seconds) as client:
            return await client.post(url, json=payload)

    async def _post(self, path: str, payload: dict) -> dict:
        @retry(
            stop=stop_after_attempt(self._max_attempts),
            wait=self.retry_wait,
            retry=retry_if_exception_type(TransportError),
            reraise=True,
        )
        async def _call() -> dict:
            try:
                response = await self._request(path, payload)
            except httpx.HTTPError as e:
                raise TransportError(f"Relay request to {path} failed: {e}") from e

            if response.status_code == 400:
                raise ConfigurationError(_error_message(response))
            if response.status_code >= 400:
                raise TransportError(
                    f"Relay {path} returned {response.status_code}: {_error_message(response)}",
                    status_code=response.status_code,
                )
            try:
                return response.json()
            except ValueError as e:
                raise TransportError(f"Relay {path} returned a non-JSON body") from e

        return await _call()
