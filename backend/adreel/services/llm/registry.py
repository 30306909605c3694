"""Gateway registry.

Picks the transport named in settings.gateway.transport:
- "direct" → GeminiGateway with the locally configured key
- "relay"  → RelayGateway pointed at settings.gateway.relay_url
"""

from __future__ import annotations

import logging
from typing import Optional

from adreel.config import Settings, settings as default_settings
from adreel.services.llm.base import ModelGateway

logger = logging.getLogger(__name__)


def get_gateway(settings: Optional[Settings] = None) -> ModelGateway:
    """Return the configured model gateway.

    Args:
        settings: Settings to read; defaults to the module singleton.

    Returns:
        A ModelGateway ready for use.
    """
    cfg = settings or default_settings
    gateway_cfg = cfg.gateway

    if gateway_cfg.transport == "relay":
        from adreel.services.llm.relay_adapter import RelayGateway

        logger.debug("Using RelayGateway (relay_url=%s)", gateway_cfg.relay_url)
        return RelayGateway(
            gateway_cfg.relay_url,
            timeout_seconds=gateway_cfg.timeout_seconds,
            max_attempts=gateway_cfg.max_attempts,
        )

    from adreel.services.llm.gemini_adapter import GeminiGateway

    api_key = cfg.api_key_value()
    logger.debug(
        "Using GeminiGateway (model=%s, has_key=%s)", cfg.gemini.text_model, bool(api_key)
    )
    return GeminiGateway(
        api_key,
        model_id=cfg.gemini.text_model,
        vision_model_id=cfg.gemini.vision_model,
        temperature=cfg.gemini.temperature,
        timeout_seconds=gateway_cfg.timeout_seconds,
        max_attempts=gateway_cfg.max_attempts,
    )
