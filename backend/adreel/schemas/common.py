"""Shared field types and base model for model-output schemas.

Model output is parsed, not validated: nulls fall back to field defaults
and scalar/list mix-ups are normalised, so one odd field never discards
the rest of a response.
"""

from typing import Annotated, Any, TypeVar

from pydantic import BaseModel, BeforeValidator, model_validator


def _coerce_to_str(v: Any) -> str:
    """Coerce list/non-str values to a string.

    The model sometimes returns arrays (or numbers, or null) for fields
    declared as string in the JSON schema.  This validator normalises them
    so Pydantic validation succeeds regardless of those quirks.
    """
    if v is None:
        return ""
    if isinstance(v, list):
        return ", ".join(str(item) for item in v if item is not None)
    if isinstance(v, str):
        return v
    return str(v)


def _coerce_to_list(v: Any) -> list:
    """Wrap a bare value in a list; null becomes an empty list."""
    if v is None:
        return []
    if isinstance(v, (list, tuple)):
        return list(v)
    if isinstance(v, str) and not v.strip():
        return []
    return [v]


def _coerce_to_int(v: Any) -> int:
    """Round floats and numeric strings; anything unreadable scores 0."""
    if v is None or isinstance(v, bool):
        return 0
    if isinstance(v, int):
        return v
    try:
        return round(float(str(v).strip().rstrip("%")))
    except (ValueError, OverflowError):
        return 0


T = TypeVar("T")

CoercedStr = Annotated[str, BeforeValidator(_coerce_to_str)]
CoercedList = Annotated[list[T], BeforeValidator(_coerce_to_list)]
CoercedStrList = CoercedList[CoercedStr]
CoercedInt = Annotated[int, BeforeValidator(_coerce_to_int)]


class LenientModel(BaseModel):
    """Base for model-output objects.

    Null fields take their defaults, and a nested value that is not an
    object at all becomes an empty (all-default) instance.
    """

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, BaseModel):
            return data
        if not isinstance(data, dict):
            return {}
        return {key: value for key, value in data.items() if value is not None}
