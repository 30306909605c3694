"""Direct transport: GeminiGateway against a recording fake genai client."""

import base64

import httpx
import pytest
from tenacity import wait_none
from google.genai import errors as genai_errors
from google.genai import types as genai_types

from adreel.config import Settings
from adreel.exceptions import ConfigurationError, TransportError
from adreel.schemas import Script, VisionAnalysis
from adreel.services.llm import get_gateway, strip_data_url_prefix
from adreel.services.llm.gemini_adapter import GeminiGateway
from adreel.services.llm.relay_adapter import RelayGateway
from adreel.services.response_parser import parse_model_output

from conftest import DumpableResponse, fake_genai_client, raw_response, scripts_payload

IMAGE_BYTES = b"\xff\xd8\xff\xe0fake-jpeg"
IMAGE_B64 = base64.b64encode(IMAGE_BYTES).decode()


def _gateway(api_key="test-key", response=None, error=None, **kwargs):
    client, models = fake_genai_client(response or DumpableResponse(raw_response({})), error)
    return GeminiGateway(api_key, client=client, **kwargs), models


# ---------------------------------------------------------------------------
# Fail-fast checks (no network call)
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
@pytest.mark.parametrize("api_key", [None, ""])
async def test_01_missing_key_fails_before_any_call(api_key):
    gateway, models = _gateway(api_key=api_key)

    with pytest.raises(ConfigurationError):
        await gateway.generate("Write five scripts")
    with pytest.raises(ConfigurationError):
        await gateway.analyze_image(IMAGE_B64, "Analyze")

    assert models.calls == []


@pytest.mark.asyncio
@pytest.mark.parametrize("prompt", [None, "", "   "])
async def test_02_missing_prompt_fails_before_any_call(prompt):
    gateway, models = _gateway()
    with pytest.raises(ConfigurationError):
        await gateway.generate(prompt)
    assert models.calls == []


@pytest.mark.asyncio
@pytest.mark.parametrize("image", [None, "", "data:image/jpeg;base64,", "not base64 !!"])
async def test_03_missing_or_bad_image_fails_before_any_call(image):
    gateway, models = _gateway()
    with pytest.raises(ConfigurationError):
        await gateway.analyze_image(image, "Analyze")
    assert models.calls == []


# ---------------------------------------------------------------------------
# Successful calls
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_04_returns_raw_response_of_real_sdk_type():
    sdk_response = genai_types.GenerateContentResponse(
        candidates=[
            genai_types.Candidate(
                content=genai_types.Content(
                    role="model",
                    parts=[genai_types.Part(text='[{"title": "Linen mornings"}]')],
                )
            )
        ]
    )
    gateway, models = _gateway(response=sdk_response, model_id="gemini-2.5-flash")

    raw = await gateway.generate("Write five scripts", response_schema=list[Script])

    assert raw["candidates"][0]["content"]["parts"][0]["text"] == '[{"title": "Linen mornings"}]'
    scripts = parse_model_output(raw, list[Script])
    assert scripts[0].title == "Linen mornings"
    assert models.calls[0]["model"] == "gemini-2.5-flash"
    assert models.calls[0]["contents"] == "Write five scripts"


@pytest.mark.asyncio
async def test_05_schema_and_json_mime_type_are_sent():
    gateway, models = _gateway(temperature=0.3)

    await gateway.generate("Write five scripts", response_schema=list[Script])
    config = models.calls[0]["config"]
    assert config.response_mime_type == "application/json"
    assert config.response_json_schema["type"] == "array"
    assert config.temperature == 0.3

    await gateway.generate("Free-form")
    assert models.calls[1]["config"].response_json_schema is None


@pytest.mark.asyncio
async def test_06_identical_calls_are_not_cached():
    gateway, models = _gateway(response=DumpableResponse(raw_response(scripts_payload())))

    first = await gateway.generate("Same prompt")
    second = await gateway.generate("Same prompt")

    assert len(models.calls) == 2
    assert first == second


@pytest.mark.asyncio
async def test_07_image_is_sent_inline_without_data_url_prefix():
    gateway, models = _gateway(vision_model_id="gemini-2.5-pro")

    await gateway.analyze_image(
        f"data:image/png;base64,{IMAGE_B64}", "Analyze", response_schema=VisionAnalysis
    )

    call = models.calls[0]
    assert call["model"] == "gemini-2.5-pro"
    image_part, prompt = call["contents"]
    assert image_part.inline_data.data == IMAGE_BYTES
    assert image_part.inline_data.mime_type == "image/jpeg"
    assert prompt == "Analyze"


def test_08_strip_data_url_prefix():
    assert strip_data_url_prefix(f"data:image/jpeg;base64,{IMAGE_B64}") == IMAGE_B64
    assert strip_data_url_prefix(f"data:image/svg+xml;base64,{IMAGE_B64}") == IMAGE_B64
    assert strip_data_url_prefix(IMAGE_B64) == IMAGE_B64


# ---------------------------------------------------------------------------
# Failures after the call
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_09_api_error_becomes_transport_error():
    error = genai_errors.ServerError(503, {"error": {"code": 503, "message": "overloaded", "status": "UNAVAILABLE"}})
    gateway, models = _gateway(error=error)

    with pytest.raises(TransportError) as exc_info:
        await gateway.generate("Write five scripts")

    assert exc_info.value.status_code == 503
    assert len(models.calls) == 1


@pytest.mark.asyncio
async def test_10_connection_error_becomes_transport_error():
    gateway, _ = _gateway(error=httpx.ConnectError("connection refused"))
    with pytest.raises(TransportError):
        await gateway.generate("Write five scripts")


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

def test_11_registry_picks_transport_from_settings():
    direct = get_gateway(Settings(gemini_api_key="abc", gateway={"transport": "direct"}))
    relay = get_gateway(Settings(gateway={"transport": "relay", "relay_url": "http://relay:9000"}))

    assert isinstance(direct, GeminiGateway)
    assert direct.name == "direct"
    assert isinstance(relay, RelayGateway)
    assert relay.name == "relay"


def test_12_settings_never_print_the_key():
    cfg = Settings(gemini_api_key="super-secret-key")
    assert "super-secret-key" not in repr(cfg)
    assert cfg.api_key_value() == "super-secret-key"
    assert Settings(gemini_api_key="   ").api_key_value() is None


# ---------------------------------------------------------------------------
# Retries
# ---------------------------------------------------------------------------

def _overloaded() -> genai_errors.ServerError:
    return genai_errors.ServerError(503, {"error": {"code": 503, "message": "overloaded", "status": "UNAVAILABLE"}})


@pytest.mark.asyncio
async def test_13_transport_error_is_retried_up_to_max_attempts():
    client, models = fake_genai_client(
        DumpableResponse(raw_response(scripts_payload())), _overloaded(), fail_times=1
    )
    gateway = GeminiGateway("test-key", client=client, max_attempts=2)
    gateway.retry_wait = wait_none()

    raw = await gateway.generate("Write five scripts")

    assert len(models.calls) == 2
    assert len(parse_model_output(raw, list[Script])) == 5


@pytest.mark.asyncio
async def test_14_retries_stop_after_max_attempts():
    client, models = fake_genai_client(error=_overloaded())
    gateway = GeminiGateway("test-key", client=client, max_attempts=3)
    gateway.retry_wait = wait_none()

    with pytest.raises(TransportError) as exc_info:
        await gateway.generate("Write five scripts")

    assert exc_info.value.status_code == 503
    assert len(models.calls) == 3


@pytest.mark.asyncio
async def test_15_configuration_error_is_not_retried():
    client, models = fake_genai_client(error=_overloaded())
    gateway = GeminiGateway(None, client=client, max_attempts=3)
    gateway.retry_wait = wait_none()

    with pytest.raises(ConfigurationError):
        await gateway.generate("Write five scripts")
    assert models.calls == []
