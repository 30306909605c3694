"""Turn raw model responses into typed results.

Policy: a response without generated text raises NoContentError; text that
is not JSON, or JSON whose top-level type is not the expected array or
object, raises ParseError.  Inside that top level the output is taken as
it comes: nulls fall back to defaults and scalar/list mix-ups are
normalised by the schema types.
The raw response is never returned in place of a parsed result.
"""

import json
import logging
import re
from typing import Any, Optional, TypeVar, get_origin

from pydantic import BaseModel, TypeAdapter, ValidationError

from adreel.exceptions import NoContentError, ParseError
from adreel.schemas import GeneratedVeoData, Script
from adreel.services.prompt_builder import SCENES_PER_SCRIPT, SCRIPT_COUNT

logger = logging.getLogger(__name__)

T = TypeVar("T")

_JSON_NAMES = {list: "array", dict: "object"}

_CODE_FENCE = re.compile(r"^\s*```(?:[A-Za-z][\w-]*)?[ \t]*\n?(.*?)\n?\s*(?:```)?\s*$", re.DOTALL)


def extract_text(raw: Any) -> str:
    """Return the generated text at ``candidates[0].content.parts[*].text``.

    Text of multiple parts is concatenated in order.

    Raises:
        NoContentError: If the path is missing or holds no text.
    """
    try:
        parts = raw["candidates"][0]["content"]["parts"]
    except (KeyError, IndexError, TypeError) as e:
        raise NoContentError("Model response contained no content") from e

    texts = [part["text"] for part in parts or [] if isinstance(part, dict) and part.get("text")]
    if not texts:
        raise NoContentError("Model response contained no text")
    return "".join(texts)


def _strip_code_fence(text: str) -> str:
    # Some models wrap JSON in markdown code fences despite instructions
    match = _CODE_FENCE.match(text)
    return match.group(1).strip() if match else text.strip()


def _top_level_type(schema: Any) -> Optional[type]:
    if get_origin(schema) is list:
        return list
    if isinstance(schema, type) and issubclass(schema, BaseModel):
        return dict
    return None


def parse_model_output(raw: Any, schema: type[T]) -> T:
    """Extract the text payload of a raw response and parse it into ``schema``.

    Args:
        raw: Raw response dict returned by a ModelGateway.
        schema: Target type (a Pydantic model or e.g. ``list[Script]``).

    Returns:
        Parsed instance of ``schema``.

    Raises:
        NoContentError: No generated text in the response.
        ParseError: Malformed model output.
    """
    text = _strip_code_fence(extract_text(raw))
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        logger.warning("Model output is not valid JSON (%d chars): %s", len(text), e)
        raise ParseError(f"Malformed model output: {e}") from e

    expected = _top_level_type(schema)
    if expected is not None and not isinstance(data, expected):
        logger.warning("Model output is a JSON %s, expected %s", type(data).__name__, expected.__name__)
        raise ParseError(
            f"Malformed model output: expected a JSON {_JSON_NAMES[expected]}, got {type(data).__name__}"
        )

    try:
        return TypeAdapter(schema).validate_python(data)
    except ValidationError as e:
        logger.warning("Model output does not match %s: %s", schema, e.error_count())
        raise ParseError(f"Malformed model output: {e}") from e


def script_shape_problems(scripts: list[Script]) -> list[str]:
    """List deviations from the 5-scripts-of-3-scenes shape (empty if none)."""
    problems = []
    if len(scripts) != SCRIPT_COUNT:
        problems.append(f"expected {SCRIPT_COUNT} scripts, got {len(scripts)}")
    for index, script in enumerate(scripts):
        if len(script.scenes) != SCENES_PER_SCRIPT:
            problems.append(
                f"script {index + 1} has {len(script.scenes)} scenes, expected {SCENES_PER_SCRIPT}"
            )
    return problems


def scene_prompt_problems(script: Script, veo_data: GeneratedVeoData) -> list[str]:
    """List deviations from one scene prompt per script scene (empty if none)."""
    expected = len(script.scenes)
    actual = len(veo_data.scene_prompts)
    if actual != expected:
        return [f"expected {expected} scene prompts, got {actual}"]
    return []


def check_script_shape(scripts: list[Script]) -> None:
    """Raise ParseError if the script list breaks the 5x3 shape."""
    problems = script_shape_problems(scripts)
    if problems:
        raise ParseError("Unexpected script shape: " + "; ".join(problems))


def check_scene_prompt_alignment(script: Script, veo_data: GeneratedVeoData) -> None:
    """Raise ParseError if scene prompts do not match the script's scenes one-to-one."""
    problems = scene_prompt_problems(script, veo_data)
    if problems:
        raise ParseError("Unexpected scene prompt count: " + "; ".join(problems))
