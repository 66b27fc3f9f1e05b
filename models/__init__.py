"""Model package exports."""

from models.taxonomy import *  # noqa: F401,F403
from models.outfit import (
    CandidateScore,
    CompatibilityResult,
    OutfitSelection,
    ScoreBreakdown,
    TuckStyle,
)
from models.wardrobe_item import WardrobeItem, from_raw_metadata

__all__ = [
    "CandidateScore",
    "CompatibilityResult",
    "OutfitSelection",
    "ScoreBreakdown",
    "TuckStyle",
    "WardrobeItem",
    "from_raw_metadata",
]
