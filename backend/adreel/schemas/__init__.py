"""Pydantic schemas for wizard configuration and model outputs."""

from adreel.schemas.campaign import Accent, CampaignConfig, Language, VideoStyle, VideoType
from adreel.schemas.script import Scene, Script
from adreel.schemas.veo_prompt import (
    VEO_ASPECT_RATIO,
    CharacterAppearance,
    GeneratedVeoData,
    VeoCharacter,
    VeoScenePrompt,
)
from adreel.schemas.vision import ToneScore, VisionAnalysis

__all__ = [
    "Accent",
    "CampaignConfig",
    "CharacterAppearance",
    "GeneratedVeoData",
    "Language",
    "Scene",
    "Script",
    "ToneScore",
    "VEO_ASPECT_RATIO",
    "VeoCharacter",
    "VeoScenePrompt",
    "VideoStyle",
    "VideoType",
    "VisionAnalysis",
]
