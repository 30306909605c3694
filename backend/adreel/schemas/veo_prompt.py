"""Pydantic schemas for the per-scene text-to-video prompt package.

Wire names of ``GeneratedVeoData`` are camelCase (scenePrompts, adsCaption,
...); Python code uses the snake_case attributes.  Dump with
``by_alias=True`` when handing the package to a front end.
"""

from pydantic import ConfigDict, Field

from adreel.schemas.common import CoercedList, CoercedStr, CoercedStrList, LenientModel

VEO_ASPECT_RATIO = "9:16"


class CharacterAppearance(LenientModel):
    hair: CoercedStr = ""
    expression: CoercedStr = ""
    outfit: CoercedStr = ""


class VeoCharacter(LenientModel):
    name: CoercedStr = ""
    age: CoercedStr = ""
    gender: CoercedStr = ""
    ethnicity: CoercedStr = ""
    appearance: CharacterAppearance = Field(default_factory=CharacterAppearance)


class VeoScenePrompt(LenientModel):
    """Structured English description of one scene for the video model."""

    description: CoercedStr = ""
    style: CoercedStr = ""
    camera: CoercedStr = ""
    lighting: CoercedStr = ""
    environment: CoercedStr = ""
    characters: CoercedList[VeoCharacter] = Field(default_factory=list)
    motion: CoercedStr = ""
    dialogue: CoercedStrList = Field(default_factory=list)
    ending: CoercedStr = ""
    text: CoercedStr = Field(default="", description="On-screen text")
    keywords: CoercedStrList = Field(default_factory=list)
    aspect_ratio: CoercedStr = VEO_ASPECT_RATIO


class GeneratedVeoData(LenientModel):
    """Scene prompts (one per script scene, same order) plus ad copy."""

    model_config = ConfigDict(populate_by_name=True)

    scene_prompts: CoercedList[VeoScenePrompt] = Field(
        default_factory=list, alias="scenePrompts"
    )
    ads_caption: CoercedStr = Field(default="", alias="adsCaption")
    hashtags: CoercedStrList = Field(default_factory=list)
    cta_variations: CoercedStrList = Field(default_factory=list, alias="ctaVariations")
