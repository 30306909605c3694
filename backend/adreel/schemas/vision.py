"""Pydantic schema for product-photo vision analysis.

Every field is optional: the model output is parsed, not validated, so a
partially filled analysis still reaches the script prompt.
"""

from typing import Optional

from pydantic import Field

from adreel.schemas.common import CoercedInt, CoercedList, CoercedStr, CoercedStrList, LenientModel


class ToneScore(LenientModel):
    """One brand-tone axis with an integer strength score."""

    name: CoercedStr = Field(default="", description="Tone attribute, e.g. 'Luxurious', 'Comfortable'")
    value: CoercedInt = Field(default=0, description="Integer score 0-100")


class VisionAnalysis(LenientModel):
    """Structured attributes extracted from a fashion product photo."""

    category: Optional[CoercedStr] = Field(
        default=None, description="Product type, e.g. 'Summer dress', 'Office blazer'"
    )
    fabric: Optional[CoercedStr] = Field(default=None, description="Apparent fabric or material")
    color_tone: Optional[CoercedStr] = Field(default=None, description="Dominant color palette")
    style: Optional[CoercedStr] = Field(
        default=None, description="Fashion style, e.g. 'Minimalist', 'Vintage', 'Streetwear'"
    )
    target_age: Optional[CoercedStr] = Field(default=None, description="Estimated target customer age range")
    brand_tone: Optional[CoercedStr] = Field(
        default=None, description="Suggested brand voice, e.g. 'Luxurious', 'Playful'"
    )
    usp_highlights: CoercedStrList = Field(
        default_factory=list,
        description="Exactly 5 unique selling points or visual highlights",
    )
    tone_scores: CoercedList[ToneScore] = Field(
        default_factory=list,
        description="Tone attributes with integer scores 0-100",
    )
