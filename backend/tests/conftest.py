"""Shared fakes for gateway, wizard and relay tests.

No test here talks to the network: the genai client is replaced by a
recording fake and the relay by httpx.MockTransport.
"""

import asyncio
import json
from types import SimpleNamespace
from typing import Any, Optional

import pytest

from adreel.services.llm.base import ModelGateway


# ---------------------------------------------------------------------------
# Raw response builders
# ---------------------------------------------------------------------------

def raw_response(payload: Any) -> dict:
    """Wrap a JSON-serialisable payload (or a literal string) as a raw model response."""
    text = payload if isinstance(payload, str) else json.dumps(payload, ensure_ascii=False)
    return {"candidates": [{"content": {"parts": [{"text": text}], "role": "model"}}]}


def scene_dict(index: int) -> dict:
    return {
        "time": f"{index * 10}-{index * 10 + 10}s",
        "action": f"Model walks through scene {index}",
        "dialogue_or_text": f"Line {index}",
        "camera_angle": "Slow dolly-in",
        "visual_prompt": f"A woman in a linen dress, scene {index}",
        "music": "Soft lo-fi beat",
    }


def script_dict(index: int, scene_count: int = 3) -> dict:
    return {
        "id": f"script-{index}",
        "title": f"Script {index}",
        "hook": "Summer starts here",
        "rationale": "Emotional opening",
        "benefits_highlighted": ["Breathable", "Easy care"],
        "cta_overlay": "Shop now",
        "cta_voice": "Order today",
        "scenes": [scene_dict(i) for i in range(scene_count)],
    }


def scripts_payload(count: int = 5, scene_count: int = 3) -> list[dict]:
    return [script_dict(i, scene_count) for i in range(count)]


def scene_prompt_dict(index: int) -> dict:
    return {
        "description": f"Scene {index} description",
        "style": "Fashion magazine editorial look, 8k",
        "camera": "Low-angle tracking shot",
        "lighting": "Golden hour rim-light",
        "environment": "Seaside boardwalk",
        "characters": [
            {
                "name": "Linh",
                "age": "25",
                "gender": "female",
                "ethnicity": "Vietnamese",
                "appearance": {"hair": "long black", "expression": "confident", "outfit": "linen dress"},
            }
        ],
        "motion": "fingers gently tracing the fabric",
        "dialogue": [],
        "ending": "Freeze on the logo",
        "text": "New collection",
        "keywords": ["linen", "summer"],
        "aspect_ratio": "9:16",
    }


def veo_payload(prompt_count: int = 3) -> dict:
    return {
        "scenePrompts": [scene_prompt_dict(i) for i in range(prompt_count)],
        "adsCaption": "Mùa hè nhẹ nhàng cùng váy linen",
        "hashtags": ["#linen", "#summer"],
        "ctaVariations": ["Mua ngay", "Đặt hàng hôm nay"],
    }


# ---------------------------------------------------------------------------
# Fake genai client (direct transport)
# ---------------------------------------------------------------------------

class FakeGenaiModels:
    """Stands in for ``client.aio.models``; records every call.

    With ``fail_times`` set, ``error`` is raised only on the first N calls.
    """

    def __init__(
        self,
        response: Any = None,
        error: Optional[Exception] = None,
        fail_times: Optional[int] = None,
    ) -> None:
        self.calls: list[dict] = []
        self._response = response
        self._error = error
        self._fail_times = fail_times

    async def generate_content(self, *, model, contents, config):
        self.calls.append({"model": model, "contents": contents, "config": config})
        failing = self._fail_times is None or len(self.calls) <= self._fail_times
        if self._error is not None and failing:
            raise self._error
        return self._response


def fake_genai_client(
    response: Any = None, error: Optional[Exception] = None, fail_times: Optional[int] = None
):
    models = FakeGenaiModels(response, error, fail_times)
    return SimpleNamespace(aio=SimpleNamespace(models=models)), models


class DumpableResponse:
    """Minimal object exposing ``model_dump`` like a GenerateContentResponse."""

    def __init__(self, raw: dict) -> None:
        self._raw = raw

    def model_dump(self, **kwargs) -> dict:
        return self._raw


# ---------------------------------------------------------------------------
# Scripted gateway (wizard tests)
# ---------------------------------------------------------------------------

class ScriptedGateway(ModelGateway):
    """Gateway returning queued results (dicts) or raising queued exceptions.

    If ``gate`` is set, each call waits on it, so tests can hold a call
    in flight.
    """

    def __init__(self, *results: Any) -> None:
        self.results = list(results)
        self.calls: list[dict] = []
        self.gate: Optional[asyncio.Event] = None
        self.entered = asyncio.Event()

    @property
    def name(self) -> str:
        return "scripted"

    async def _next(self) -> dict:
        self.entered.set()
        if self.gate is not None:
            await self.gate.wait()
        result = self.results.pop(0)
        if isinstance(result, Exception):
            raise result
        return result

    async def generate(self, prompt, *, response_schema=None):
        self.calls.append({"kind": "generate", "prompt": prompt, "schema": response_schema})
        return await self._next()

    async def analyze_image(self, base64_image, prompt, *, response_schema=None):
        self.calls.append(
            {"kind": "vision", "image": base64_image, "prompt": prompt, "schema": response_schema}
        )
        return await self._next()


@pytest.fixture
def notifications() -> list[str]:
    return []
