"""Weather phenomenon categories and the free-text classifier.

The observations feed publishes phenomena as free text ("Light snow shower",
"Heavy rain", "Thunderstorm"), sometimes combined with extra qualifiers.
``classify`` maps any such text to exactly one category and never fails.
"""

from __future__ import annotations

import re
from enum import Enum
from types import MappingProxyType

_WHITESPACE = re.compile(r"\s+")


class PhenomenonCategory(str, Enum):
    SNOW = "SNOW"
    SLEET = "SLEET"
    RAIN = "RAIN"
    FORBIDDEN = "FORBIDDEN"
    NORMAL = "NORMAL"

    @property
    def phenomena(self) -> frozenset[str]:
        return CANONICAL_PHENOMENA[self]

    @property
    def is_usage_forbidden(self) -> bool:
        return self is PhenomenonCategory.FORBIDDEN


CANONICAL_PHENOMENA = MappingProxyType(
    {
        PhenomenonCategory.SNOW: frozenset(
            {
                "light snow shower",
                "moderate snow shower",
                "heavy snow shower",
                "light snowfall",
                "moderate snowfall",
                "heavy snowfall",
            }
        ),
        PhenomenonCategory.SLEET: frozenset({"light sleet", "moderate sleet"}),
        PhenomenonCategory.RAIN: frozenset(
            {
                "light shower",
                "moderate shower",
                "heavy shower",
                "light rain",
                "moderate rain",
                "heavy rain",
            }
        ),
        PhenomenonCategory.FORBIDDEN: frozenset({"glaze", "hail", "thunder", "thunderstorm"}),
        PhenomenonCategory.NORMAL: frozenset(
            {
                "clear",
                "few clouds",
                "variable clouds",
                "cloudy with clear spells",
                "overcast",
                "mist",
                "fog",
            }
        ),
    }
)

# Hazardous categories first so a weaker match never masks them.
SUBSTRING_PRIORITY: tuple[PhenomenonCategory, ...] = (
    PhenomenonCategory.FORBIDDEN,
    PhenomenonCategory.SNOW,
    PhenomenonCategory.SLEET,
    PhenomenonCategory.RAIN,
)


def normalize(text: str) -> str:
    collapsed = _WHITESPACE.sub(" ", text.strip().lower())
    return collapsed.replace("-", " ")


def classify(text: str | None) -> PhenomenonCategory:
    if text is None or not text.strip():
        return PhenomenonCategory.NORMAL

    normalized = normalize(text)

    for category, phenomena in CANONICAL_PHENOMENA.items():
        if normalized in phenomena:
            return category

    for category in SUBSTRING_PRIORITY:
        if any(p in normalized for p in CANONICAL_PHENOMENA[category]):
            return category

    return PhenomenonCategory.NORMAL
