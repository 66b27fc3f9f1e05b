"""Lightweight colour helpers for deterministic outfit scoring."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional

from models.taxonomy import NEUTRAL_COLORS, normalize_color_name

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PaletteSummary:
    """Colour statistics for a group of items."""

    colors: List[str]
    neutral_count: int
    distinct_count: int

    @property
    def neutral_ratio(self) -> float:
        if not self.colors:
            return 0.0
        return self.neutral_count / len(self.colors)


def _normalise_colors(colors: Iterable[Optional[str]]) -> List[str]:
    normalised = [normalize_color_name(color) for color in colors]
    return [color for color in normalised if color]


def is_neutral(color: Optional[str]) -> bool:
    return normalize_color_name(color) in NEUTRAL_COLORS


def neutral_pair(color1: Optional[str], color2: Optional[str]) -> bool:
    """Return True when both colours belong to the neutral set."""

    result = is_neutral(color1) and is_neutral(color2)
    logger.debug("neutral pair check (%s, %s) -> %s", color1, color2, result)
    return result


def either_is(color: str, color1: Optional[str], color2: Optional[str]) -> bool:
    """Return True when either colour normalises to ``color``."""

    target = normalize_color_name(color)
    return normalize_color_name(color1) == target or normalize_color_name(color2) == target


def summarize_palette(colors: Iterable[Optional[str]]) -> PaletteSummary:
    """Count known, neutral and distinct colours, ignoring blanks."""

    normalised = _normalise_colors(colors)
    summary = PaletteSummary(
        colors=normalised,
        neutral_count=sum(1 for color in normalised if color in NEUTRAL_COLORS),
        distinct_count=len(set(normalised)),
    )
    logger.debug("palette summary %s", summary)
    return summary


__all__ = [
    "PaletteSummary",
    "either_is",
    "is_neutral",
    "neutral_pair",
    "summarize_palette",
]
