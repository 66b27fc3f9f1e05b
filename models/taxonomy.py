"""Canonical taxonomy definitions for outfit slots and scoring defaults.

This module centralises the closed set of outfit slots, the single lookup
from free-form category labels to slots, and the named defaults that let
scoring degrade gracefully when optional item fields are missing.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, FrozenSet, Optional, Tuple


class CategorySlot(str, Enum):
    """One named position in an outfit, holding at most one item."""

    JACKET = "jacket"
    OVERSHIRT = "overshirt"
    SHIRT = "shirt"
    UNDERSHIRT = "undershirt"
    PANTS = "pants"
    SHOES = "shoes"
    BELT = "belt"
    WATCH = "watch"

    @property
    def label(self) -> str:
        """Display label used by the wardrobe store for this slot's category."""

        return self.value.capitalize()


# Outer to inner, then accessories. Iteration order everywhere follows this.
SLOT_ORDER: Tuple[CategorySlot, ...] = tuple(CategorySlot)

GARMENT_SLOTS: FrozenSet[CategorySlot] = frozenset(
    {
        CategorySlot.JACKET,
        CategorySlot.OVERSHIRT,
        CategorySlot.SHIRT,
        CategorySlot.UNDERSHIRT,
        CategorySlot.PANTS,
        CategorySlot.SHOES,
    }
)
ACCESSORY_SLOTS: FrozenSet[CategorySlot] = frozenset({CategorySlot.BELT, CategorySlot.WATCH})

# A saveable outfit needs a top layer and a bottom layer.
REQUIRED_SLOTS: Tuple[CategorySlot, ...] = (CategorySlot.SHIRT, CategorySlot.PANTS)

# No accessory slot is excluded from formality in the current rule set.
FORMALITY_SLOTS: FrozenSet[CategorySlot] = frozenset(CategorySlot)
COLOR_SLOTS: FrozenSet[CategorySlot] = frozenset(CategorySlot) - {CategorySlot.WATCH}

_CATEGORY_TO_SLOT: Dict[str, CategorySlot] = {slot.value: slot for slot in CategorySlot}

# Labels from before the Jacket/Overshirt split. Items carrying them are
# resolved through the classifier rather than the lookup table.
LEGACY_OUTER_LAYER_LABELS: FrozenSet[str] = frozenset({"jacket/overshirt", "outerwear"})

JACKET_LABEL = "Jacket"
OVERSHIRT_LABEL = "Overshirt"

SEASON_ALL = "All"
SEASON_LABELS: Tuple[str, ...] = ("Spring", "Summer", "Fall", "Winter", SEASON_ALL)

NEUTRAL_COLORS: FrozenSet[str] = frozenset(
    {"white", "black", "grey", "gray", "navy", "cream", "beige", "khaki", "brown"}
)

MIN_FORMALITY = 1
MAX_FORMALITY = 10
DEFAULT_FORMALITY = 5

BASE_COMPATIBILITY = 50
BASIC_COMPATIBILITY_REASON = "Basic compatibility"

EMPTY_FORMALITY_SCORE = 50
SINGLE_ITEM_COLOR_SCORE = 80
UNKNOWN_COLOR_SCORE = 70
BASE_COLOR_SCORE = 60
NO_GARMENT_BASELINE = 80

SCORE_WEIGHTS: Dict[str, float] = {
    "formality": 0.3,
    "color_harmony": 0.3,
    "seasonal_appropriateness": 0.2,
    "style_consistency": 0.2,
}


def normalize_label(value: Optional[str]) -> str:
    """Normalise a free-form label for case-insensitive comparisons."""

    return (value or "").strip().lower()


def normalize_color_name(raw_string: Optional[str]) -> Optional[str]:
    """Lower-case a colour string, mapping blanks to ``None``."""

    key = normalize_label(raw_string)
    return key or None


def slot_for_category(label: Optional[str]) -> Optional[CategorySlot]:
    """Map a category label to its slot.

    Unmapped labels, including the legacy combined outer-layer label, return
    ``None`` and are dropped by callers.
    """

    return _CATEGORY_TO_SLOT.get(normalize_label(label))


def is_legacy_outer_layer(label: Optional[str]) -> bool:
    return normalize_label(label) in LEGACY_OUTER_LAYER_LABELS


def clamp_score(value: float, low: int = 0, high: int = 100) -> float:
    return max(low, min(high, value))


__all__ = [
    "ACCESSORY_SLOTS",
    "BASE_COLOR_SCORE",
    "BASE_COMPATIBILITY",
    "BASIC_COMPATIBILITY_REASON",
    "COLOR_SLOTS",
    "CategorySlot",
    "DEFAULT_FORMALITY",
    "EMPTY_FORMALITY_SCORE",
    "FORMALITY_SLOTS",
    "GARMENT_SLOTS",
    "JACKET_LABEL",
    "LEGACY_OUTER_LAYER_LABELS",
    "MAX_FORMALITY",
    "MIN_FORMALITY",
    "NEUTRAL_COLORS",
    "NO_GARMENT_BASELINE",
    "OVERSHIRT_LABEL",
    "REQUIRED_SLOTS",
    "SCORE_WEIGHTS",
    "SEASON_ALL",
    "SEASON_LABELS",
    "SINGLE_ITEM_COLOR_SCORE",
    "SLOT_ORDER",
    "UNKNOWN_COLOR_SCORE",
    "clamp_score",
    "is_legacy_outer_layer",
    "normalize_color_name",
    "normalize_label",
    "slot_for_category",
]
