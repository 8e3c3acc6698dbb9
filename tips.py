"""AI-generated health tips for a BMI result.

One Gemini call per request, no retries. Any failure (no client, network
error, empty or malformed output) is logged and answered with FALLBACK_TIPS,
so callers always receive a well-formed HealthTips.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any

from google import genai
from google.genai import types

from bmi import BmiCategory
from config import GEMINI_MODEL

log = logging.getLogger(__name__)

TIPS_COUNT = 3


@dataclass(frozen=True)
class HealthTips:
    summary: str
    tips: tuple[str, ...]

    def as_dict(self) -> dict:
        return {"summary": self.summary, "tips": list(self.tips)}


FALLBACK_TIPS = HealthTips(
    summary="We couldn't generate personalized tips at this moment.",
    tips=(
        "Consult with a healthcare provider for personalized advice.",
        "Maintain a balanced diet rich in whole foods.",
        "Aim for regular physical activity.",
    ),
)

RESPONSE_SCHEMA = types.Schema(
    type=types.Type.OBJECT,
    properties={
        "summary": types.Schema(
            type=types.Type.STRING,
            description="A 1-2 sentence summary of the user's BMI status.",
        ),
        "tips": types.Schema(
            type=types.Type.ARRAY,
            items=types.Schema(type=types.Type.STRING),
            description="3 actionable health tips.",
        ),
    },
    required=["summary", "tips"],
)


def make_client(api_key: str | None) -> Any:
    """Create a Gemini client, or None when no API key is configured."""
    if not api_key:
        log.info("No Gemini API key configured; health tips will use the fallback")
        return None
    return genai.Client(api_key=api_key)


def build_prompt(bmi: float, category: BmiCategory) -> str:
    return (
        f"The user has a BMI of {bmi:.1f}, which falls into the category: "
        f"{BmiCategory(category).value}.\n"
        "Provide a brief, encouraging summary of what this means, and 3 specific, "
        "actionable, and scientific health tips to help them maintain or improve "
        "their health.\n"
        "Keep the tone professional yet empathetic."
    )


def strip_code_fences(text: str) -> str:
    """Remove markdown code fences the model sometimes wraps JSON in."""
    lines = [line for line in text.strip().split("\n") if not line.strip().startswith("```")]
    return "\n".join(lines).strip()


def parse_tips(text: str) -> HealthTips | None:
    """Parse model output into HealthTips. Returns None on any contract failure."""
    if not text:
        return None

    try:
        parsed = json.loads(strip_code_fences(text))
    except json.JSONDecodeError:
        log.warning("Health tips: JSON parse failed. Raw: %s", text[:200])
        return None

    if not isinstance(parsed, dict):
        log.warning("Health tips: expected object, got %s", type(parsed).__name__)
        return None

    summary = parsed.get("summary")
    tips = parsed.get("tips")
    if not isinstance(summary, str) or not summary.strip():
        log.warning("Health tips: missing summary")
        return None
    if not isinstance(tips, list) or not all(isinstance(tip, str) for tip in tips):
        log.warning("Health tips: tips is not a list of strings")
        return None
    if len(tips) < TIPS_COUNT:
        log.warning("Health tips: expected %d tips, got %d", TIPS_COUNT, len(tips))
        return None

    return HealthTips(summary=summary.strip(), tips=tuple(tips[:TIPS_COUNT]))


def get_health_tips(bmi: float, category: BmiCategory, client: Any = None) -> HealthTips:
    """Ask Gemini for a summary and three tips for this BMI."""
    if client is None:
        return FALLBACK_TIPS

    try:
        response = client.models.generate_content(
            model=GEMINI_MODEL,
            contents=build_prompt(bmi, category),
            config=types.GenerateContentConfig(
                response_mime_type="application/json",
                response_schema=RESPONSE_SCHEMA,
            ),
        )
        text = response.text
    except Exception as exc:
        log.warning("Health tips LLM call failed: %s", exc)
        return FALLBACK_TIPS

    if not text:
        log.warning("Health tips: empty response from model")
        return FALLBACK_TIPS

    tips = parse_tips(text)
    if tips is None:
        return FALLBACK_TIPS

    log.debug("Health tips generated for BMI %.1f (%s)", bmi, category)
    return tips
