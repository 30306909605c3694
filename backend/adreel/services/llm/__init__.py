"""Model gateway layer.

Two interchangeable transports reach the hosted model: a direct Gemini
client holding the key locally, and a relay that posts to the backend
which holds the key server-side.

Usage:
    from adreel.services.llm import get_gateway

    gateway = get_gateway()
    raw = await gateway.generate(prompt, response_schema=list[Script])
"""

from adreel.services.llm.base import ModelGateway, encode_image_file, strip_data_url_prefix
from adreel.services.llm.registry import get_gateway

__all__ = ["ModelGateway", "encode_image_file", "get_gateway", "strip_data_url_prefix"]
