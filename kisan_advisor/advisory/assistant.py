"""
Scripted farm assistant.

A keyword-routed responder that stitches together irrigation advice, the
top crop recommendation, and a canned leaf-photo hint.  There is no model
behind it; replies are deterministic for a given transcript and readings.

Routing (all matching rules contribute, in this order)
------------------------------------------------------
    image attached              → fungal-spot hint
    /irrigat|water/i            → irrigation_advice()
    /crop|plant|what.*grow/i    → top recommendation summary
    nothing matched             → capabilities blurb

Replies are joined by blank lines and then tagged for the selected
language (``translate``).  Speech input/output is left to the front end.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal, Optional

from kisan_advisor.advisory.irrigation import irrigation_advice
from kisan_advisor.models.readings import SoilReading, WeatherReading
from kisan_advisor.models.recommendation import CropRecommendation
from kisan_advisor.utils.number_format import format_fixed

logger = logging.getLogger(__name__)

GREETING = (
    "Namaste! Ask about your crop, soil, weather, or upload a leaf photo for disease hints."
)
IMAGE_ONLY_PROMPT = "Please analyze this image."

IMAGE_HINT = (
    "Analyzed the photo: signs of possible fungal spots. Suggest removing affected "
    "leaves and applying a copper-based fungicide. Re-check in 3–4 days."
)
CAPABILITIES = (
    "I can help with soil health, irrigation timing, disease ID (via photo), "
    "and which crop to sow now."
)

# language code → reply prefix ("" = no tag)
_LANGUAGE_TAGS: dict[str, str] = {
    "en-IN": "",
    "hi-IN": "[हिंदी] ",
    "mr-IN": "[मराठी] ",
    "te-IN": "[తెలుగు] ",
    "ta-IN": "[தமிழ்] ",
    "bn-IN": "[বাংলা] ",
}
SUPPORTED_LANGUAGES = frozenset(_LANGUAGE_TAGS)

_IRRIGATION_PATTERN = re.compile(r"irrigat|water", re.IGNORECASE)
_CROP_PATTERN = re.compile(r"crop|plant|what.*grow", re.IGNORECASE)


def translate(text: str, lang: str) -> str:
    """Prefix ``text`` with the language tag for ``lang``; unknown codes pass through."""
    return _LANGUAGE_TAGS.get(lang, "") + text


def analyze_query(
    query:           str,
    soil:            SoilReading,
    weather:         WeatherReading,
    recommendations: list[CropRecommendation],
    has_image:       bool = False,
    lang:            str = "en-IN",
) -> str:
    """Build the assistant's reply to one user message.

    Args:
        query:           The user's text (may be empty when only an image is sent).
        soil:            Current soil reading.
        weather:         Current weather reading.
        recommendations: Ranked recommendations; the first is quoted for crop questions.
        has_image:       True if a photo accompanied the message.
        lang:            Reply language code.

    Returns:
        Non-empty reply string.
    """
    parts: list[str] = []

    if has_image:
        parts.append(IMAGE_HINT)

    if _IRRIGATION_PATTERN.search(query):
        parts.append(irrigation_advice(soil, weather))

    if _CROP_PATTERN.search(query) and recommendations:
        top = recommendations[0]
        parts.append(
            f"Top recommendation now: {top.crop_name} "
            f"(yield ~{format_fixed(top.expected_yield_t_per_ha, 1)} t/ha, "
            f"profit ~${format_fixed(top.profit_usd_per_ha)}/ha)."
        )

    if not parts:
        parts.append(CAPABILITIES)

    return translate("\n\n".join(parts), lang)


@dataclass(frozen=True)
class ChatMessage:
    """One transcript entry."""

    role:      Literal["user", "assistant"]
    content:   str
    image:     Optional[Path] = None

    @property
    def has_image(self) -> bool:
        return self.image is not None


@dataclass
class Assistant:
    """Stateful chat session over a fixed set of readings.

    Usage::

        bot = Assistant(soil, weather, recommendations, lang="hi-IN")
        reply = bot.ask("Should I water today?")
        bot.messages      # greeting, user message, reply
    """

    soil:            SoilReading
    weather:         WeatherReading
    recommendations: list[CropRecommendation]
    lang:            str = "en-IN"
    messages:        list[ChatMessage] = field(
        default_factory=lambda: [ChatMessage(role="assistant", content=GREETING)]
    )

    def __post_init__(self) -> None:
        if self.lang not in SUPPORTED_LANGUAGES:
            raise ValueError(
                f"Unsupported language '{self.lang}'. "
                f"Must be one of {sorted(SUPPORTED_LANGUAGES)}."
            )

    def ask(self, query: str, image: Optional[Path] = None) -> Optional[str]:
        """Record a user message and the assistant's reply.

        An empty query with no image is ignored and returns ``None``.  An
        empty query with an image is recorded as "Please analyze this image."
        Any other text, whitespace included, is recorded as typed.
        """
        if not query and image is None:
            return None

        user_msg = ChatMessage(role="user", content=query or IMAGE_ONLY_PROMPT, image=image)
        self.messages.append(user_msg)

        reply = analyze_query(
            user_msg.content,
            self.soil,
            self.weather,
            self.recommendations,
            has_image=user_msg.has_image,
            lang=self.lang,
        )
        self.messages.append(ChatMessage(role="assistant", content=reply))
        logger.debug("Assistant replied to %r (%d chars)", user_msg.content, len(reply))
        return reply
