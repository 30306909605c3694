"""Abstract base class for model gateways.

A gateway sends one prompt (optionally with an image) to the hosted model
and returns the raw response unmodified, as a dict shaped like the Gemini
REST response::

    {"candidates": [{"content": {"parts": [{"text": "..."}]}}]}

Parsing is left to ``adreel.services.response_parser``.  Gateways never
cache: identical calls issue independent requests.
"""

import base64
import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional

from adreel.exceptions import ConfigurationError

_DATA_URL_PREFIX = re.compile(r"^data:image/[\w.+-]+;base64,")


def strip_data_url_prefix(base64_image: str) -> str:
    """Remove a leading ``data:image/...;base64,`` prefix if present."""
    return _DATA_URL_PREFIX.sub("", base64_image.strip(), count=1)


def encode_image_file(path: Path) -> str:
    """Read an image file and return its contents as plain base64."""
    return base64.b64encode(Path(path).read_bytes()).decode("ascii")


def require_prompt(prompt: Optional[str]) -> str:
    if not prompt or not prompt.strip():
        raise ConfigurationError("Missing prompt")
    return prompt


def require_image(base64_image: Optional[str]) -> str:
    data = strip_data_url_prefix(base64_image or "")
    if not data:
        raise ConfigurationError("Missing image Base64 data")
    return data


class ModelGateway(ABC):
    """Interface shared by the direct and relayed transports.

    Both methods fail with ConfigurationError before any network call when
    a credential or an input is missing, with TransportError when the call
    itself fails.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Short transport name for logs."""
        ...

    @abstractmethod
    async def generate(
        self,
        prompt: str,
        *,
        response_schema: Any = None,
    ) -> dict:
        """Send a text prompt and return the raw model response.

        Args:
            prompt: Instruction text.
            response_schema: Optional type the answer should follow. Transports
                without a structured-output channel ignore it.

        Returns:
            Raw response dict.
        """
        ...

    @abstractmethod
    async def analyze_image(
        self,
        base64_image: str,
        prompt: str,
        *,
        response_schema: Any = None,
    ) -> dict:
        """Send an image together with an instruction and return the raw response.

        Args:
            base64_image: Base64 image data; a data-URL prefix is stripped.
            prompt: Analysis instruction.
            response_schema: Optional type the answer should follow.

        Returns:
            Raw response dict.
        """
        ...
