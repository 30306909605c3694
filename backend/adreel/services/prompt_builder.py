"""Instruction builders for the three model calls.

Each builder turns wizard state into a single natural-language instruction
that embeds every configured value literally, states the required counts
as numbers, and ends with the JSON schema the answer must follow.  The
schema text travels inside the prompt so the relay transport (which only
forwards a prompt string) carries it too.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any

from pydantic import TypeAdapter

from adreel.schemas import CampaignConfig, GeneratedVeoData, Script, VisionAnalysis
from adreel.schemas.veo_prompt import VEO_ASPECT_RATIO

logger = logging.getLogger(__name__)

SCRIPT_COUNT = 5
SCENES_PER_SCRIPT = 3
VIDEO_SECONDS = 30
USP_COUNT = 5
TONE_AXES = ("Luxurious", "Comfortable", "Bold", "Elegant", "Trendy")

NON_VERBAL_CLAUSE = (
    "SPECIAL REQUIREMENT: this is a NON-VERBAL video.\n"
    "   - Do NOT write any dialogue or spoken lines for characters.\n"
    "   - The 'dialogue_or_text' field may ONLY contain on-screen text overlays "
    "or notes about music and sound.\n"
    "   - Focus on describing actions and facial expressions."
)

NON_VERBAL_SCENE_CLAUSE = (
    "NON-VERBAL VIDEO: no character speaks. The 'dialogue' field of every scene "
    "prompt must be an empty array [], and on-screen text belongs in 'text' only."
)


@dataclass(frozen=True)
class FormattedPrompt:
    """An instruction string and the type its JSON answer should parse into."""

    text: str
    schema: Any


def _schema_instruction(schema: Any) -> str:
    """Build a concise JSON schema instruction appended to every prompt."""
    schema_json = json.dumps(TypeAdapter(schema).json_schema(), indent=2, ensure_ascii=False)
    return (
        "\n\nIMPORTANT: Respond with JSON only (no markdown, no commentary, "
        "no code fences). The JSON must conform to this schema:\n"
        f"```json\n{schema_json}\n```\n"
        "Return ONLY the JSON value."
    )


def _vision_json(config: CampaignConfig) -> str:
    if config.vision_data is None:
        return "Not provided"
    return config.vision_data.model_dump_json(exclude_none=True)


def dialogue_clause(config: CampaignConfig) -> str:
    """Return the dialogue rule for the configured video style."""
    if config.is_non_verbal:
        return NON_VERBAL_CLAUSE
    return (
        "REQUIREMENT: write natural, engaging dialogue that suits a "
        f"{config.accent.value} accent voice."
    )


def build_vision_prompt() -> FormattedPrompt:
    """Instruction for analysing a product photo."""
    axes = ", ".join(f"'{axis}'" for axis in TONE_AXES)
    text = f"""You are a Fashion AI Product Analyst.
Analyze this fashion product image to support writing marketing video scripts.
Extract the following details as JSON:
- category: product type (e.g. summer dress, office blazer).
- fabric: apparent fabric or material.
- color_tone: dominant color palette.
- style: fashion style (e.g. minimalist, vintage, streetwear).
- target_age: estimated target customer age range.
- brand_tone: suggested brand voice (e.g. luxurious, playful).
- usp_highlights: exactly {USP_COUNT} unique selling points or visual highlights.
- tone_scores: an array of objects with 'name' (one of {axes}) and 'value' (integer score 0-100)."""
    return FormattedPrompt(text + _schema_instruction(VisionAnalysis), VisionAnalysis)


def build_scripts_prompt(config: CampaignConfig) -> FormattedPrompt:
    """Instruction for the five candidate scripts."""
    language = config.language.value
    text = f"""Act as a professional fashion video director.
Create {SCRIPT_COUNT} distinct {VIDEO_SECONDS}-second video scripts for the product below.
Write all script content in {language}, except 'visual_prompt' which must always be in English.

Product: {config.product_name}
Description: {config.product_description}
Vision analysis data: {_vision_json(config)}

Settings:
- Style: {config.video_style.value}
- Type: {config.video_type.value}
- Language: {language}
- Accent: {config.accent.value}

MANDATORY REQUIREMENTS (FOLLOW STRICTLY):
1. SCENE COUNT: every script must have EXACTLY {SCENES_PER_SCRIPT} SCENES. Not more, not fewer than {SCENES_PER_SCRIPT}.
2. {dialogue_clause(config)}
3. Total duration about {VIDEO_SECONDS} seconds.
4. The scripts should differ in angle (e.g. one emotional, one fast-paced, one focused on product features).

Return a JSON array of exactly {SCRIPT_COUNT} scripts."""
    return FormattedPrompt(text + _schema_instruction(list[Script]), list[Script])


def build_veo_prompt(script: Script, config: CampaignConfig) -> FormattedPrompt:
    """Instruction for the per-scene video prompts of the selected script."""
    count = len(script.scenes)
    script_json = script.model_dump_json()
    speech_rule = f"\n4. {NON_VERBAL_SCENE_CLAUSE}" if config.is_non_verbal else ""
    text = f"""Based on the selected video script with {count} scenes, create {count} separate JSON prompts, one for each scene, for generating video with the Veo-3 model.
All content inside the scene prompts (description, style, characters, etc.) must be written in standard English.

Input:
- Script title: {script.title}
- Product: {config.product_name}
- Vision data: {_vision_json(config)}
- Script content: {script_json}

QUALITY ENRICHMENT:
Add the following professional details to every prompt even when the script does not state them:
1. CAMERA: specific cinematic language (e.g. "Slow cinematic dolly-in", "Low-angle tracking shot", "Smooth pan revealing details", "Rack focus from blurry foreground"). Avoid static, dull angles.
2. LIGHTING: direction and quality of light (e.g. "Soft volumetric lighting", "Golden hour rim-light emphasizing texture", "Studio fashion lighting with softbox", "Moody chiaroscuro").
3. MOTION: micro-movements that bring characters to life (e.g. "fingers gently tracing the fabric", "subtle shift in weight", "hair blowing softly in wind").
4. STYLE: high-quality keywords (e.g. "8k", "photorealistic", "highly detailed texture", "fashion magazine editorial look").

IMPORTANT:
1. Return a "scenePrompts" array containing EXACTLY {count} objects.
2. Each object corresponds to one scene of the script, in the same order.
3. Every object uses the fields description, style, camera, lighting, environment, characters, motion, dialogue, ending, text, keywords and aspect_ratio, with aspect_ratio always "{VEO_ASPECT_RATIO}".{speech_rule}

Also create marketing assets (adsCaption, hashtags, ctaVariations) written in {config.language.value}."""
    return FormattedPrompt(text + _schema_instruction(GeneratedVeoData), GeneratedVeoData)
