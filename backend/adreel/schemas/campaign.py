"""Wizard configuration: the product and the video settings chosen by the user."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict

from adreel.schemas.vision import VisionAnalysis


class VideoStyle(str, Enum):
    WITH_DIALOGUE = "with-dialogue"
    NON_VERBAL = "non-verbal"


class VideoType(str, Enum):
    SINGLE_NARRATION = "single-narration"
    TWO_PERSON_DIALOGUE = "two-person-dialogue"
    VOICEOVER_LOOKBOOK = "voiceover-lookbook"
    UNBOXING_REVIEW = "unboxing-review"


class Language(str, Enum):
    VIETNAMESE = "Vietnamese"
    ENGLISH = "English"


class Accent(str, Enum):
    NORTHERN = "northern"
    CENTRAL = "central"
    SOUTHERN = "southern"
    NEUTRAL = "neutral"


class CampaignConfig(BaseModel):
    """Everything the prompts are built from.

    Frozen: a generation call always sees the exact values the user had set
    when it was issued.  Use ``model_copy(update=...)`` to change a field.
    """

    model_config = ConfigDict(frozen=True)

    product_name: str = ""
    product_description: str = ""
    video_style: VideoStyle = VideoStyle.WITH_DIALOGUE
    video_type: VideoType = VideoType.SINGLE_NARRATION
    language: Language = Language.VIETNAMESE
    accent: Accent = Accent.NORTHERN
    vision_data: Optional[VisionAnalysis] = None

    @property
    def is_non_verbal(self) -> bool:
        return self.video_style is VideoStyle.NON_VERBAL
