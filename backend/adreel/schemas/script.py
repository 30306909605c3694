"""Pydantic schemas for the candidate video scripts.

A script is three timed scenes plus the hook and calls to action around
them.  Counts (5 scripts, 3 scenes) are requested in the prompt and checked
separately in ``adreel.services.response_parser``; they are not enforced here.
"""

from pydantic import Field

from adreel.schemas.common import CoercedList, CoercedStr, CoercedStrList, LenientModel


class Scene(LenientModel):
    """One timed segment of a script."""

    time: CoercedStr = Field(default="", description="Time range, e.g. '0-10s'")
    action: CoercedStr = Field(default="", description="What happens on screen")
    dialogue_or_text: CoercedStr = Field(
        default="",
        description="Spoken line, or for non-verbal videos only overlay text / music notes",
    )
    camera_angle: CoercedStr = Field(default="", description="Shot type and camera movement")
    visual_prompt: CoercedStr = Field(
        default="",
        description="Short visual description for the video model, written in English",
    )
    music: CoercedStr = Field(default="", description="Music or sound direction")


class Script(LenientModel):
    """A 30-second video script candidate."""

    id: CoercedStr = ""
    title: CoercedStr = ""
    hook: CoercedStr = ""
    rationale: CoercedStr = Field(default="", description="Why this script works")
    benefits_highlighted: CoercedStrList = Field(default_factory=list)
    cta_overlay: CoercedStr = ""
    cta_voice: CoercedStr = ""
    scenes: CoercedList[Scene] = Field(
        default_factory=list,
        description="Exactly 3 scenes",
    )
