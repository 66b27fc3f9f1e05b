"""Deterministic scoring for a whole outfit selection."""

from __future__ import annotations

import logging
import math
from typing import Callable, List, Optional

from models.color_theory import summarize_palette
from models.outfit import EMPTY_BREAKDOWN, OutfitSelection, ScoreBreakdown, TuckStyle
from models.taxonomy import (
    BASE_COLOR_SCORE,
    COLOR_SLOTS,
    DEFAULT_FORMALITY,
    EMPTY_FORMALITY_SCORE,
    FORMALITY_SLOTS,
    GARMENT_SLOTS,
    NO_GARMENT_BASELINE,
    SCORE_WEIGHTS,
    SEASON_ALL,
    SINGLE_ITEM_COLOR_SCORE,
    UNKNOWN_COLOR_SCORE,
    CategorySlot,
    clamp_score,
)
from models.wardrobe_item import WardrobeItem

logger = logging.getLogger(__name__)

SubScorer = Callable[[OutfitSelection], int]

NEUTRAL_MAJORITY = 0.7


def round_half_up(value: float) -> int:
    # Trim float noise so weighted sums like 92.49999999 still land on .5 correctly.
    return int(math.floor(round(value, 6) + 0.5))


def _to_score(value: float) -> int:
    return int(clamp_score(round_half_up(value)))


def _formality_values(items: List[WardrobeItem]) -> List[int]:
    return [item.formality_score if item.formality_score is not None else DEFAULT_FORMALITY for item in items]


def formality_consistency(selection: OutfitSelection) -> int:
    """Lower variance in formality across the outfit scores higher."""

    items = selection.items_for(FORMALITY_SLOTS)
    if not items:
        return EMPTY_FORMALITY_SCORE
    values = _formality_values(items)
    mean = sum(values) / len(values)
    variance = sum((value - mean) ** 2 for value in values) / len(values)
    return _to_score(max(0.0, 100 - variance * 10))


def color_harmony(selection: OutfitSelection) -> int:
    items = selection.items_for(COLOR_SLOTS)
    if len(items) < 2:
        return SINGLE_ITEM_COLOR_SCORE
    palette = summarize_palette(item.color for item in items)
    if len(palette.colors) < 2:
        return UNKNOWN_COLOR_SCORE

    score = BASE_COLOR_SCORE
    if palette.neutral_count >= len(palette.colors) * NEUTRAL_MAJORITY:
        score += 20
    if palette.distinct_count <= 2:
        score += 15
    return _to_score(min(100, score))


def seasonal_scorer(target_season: str = SEASON_ALL) -> SubScorer:
    """Share of garments wearable in ``target_season``, as a percentage."""

    def _score(selection: OutfitSelection) -> int:
        garments = selection.items_for(GARMENT_SLOTS)
        if not garments:
            return NO_GARMENT_BASELINE
        suitable = sum(1 for item in garments if item.fits_season(target_season))
        return _to_score(suitable / len(garments) * 100)

    return _score


def style_consistency(selection: OutfitSelection) -> int:
    garments = selection.items_for(GARMENT_SLOTS)
    if not garments:
        return NO_GARMENT_BASELINE

    score = 70
    if all(selection.get(slot) for slot in (CategorySlot.SHIRT, CategorySlot.PANTS, CategorySlot.SHOES)):
        score += 10

    values = _formality_values(garments)
    if len(values) >= 2:
        spread = max(values) - min(values)
        if spread <= 2:
            score += 15
        elif spread <= 4:
            score += 5

    if (
        selection.tuck_style is TuckStyle.TUCKED
        and selection.get(CategorySlot.SHIRT)
        and selection.get(CategorySlot.PANTS)
        and sum(values) / len(values) >= 6
    ):
        score += 5
    return _to_score(min(100, score))


def constant_scorer(value: int) -> SubScorer:
    """Sub-scorer returning a fixed baseline, for when no richer data is wired in."""

    baseline = _to_score(value)
    return lambda _selection: baseline


class OutfitScorer:
    """Aggregates four sub-scores into a weighted 0-100 total.

    Seasonal and style sub-scores are pluggable; the defaults use item season
    labels and formality spread. Scoring is pure: the same selection always
    yields the same breakdown.
    """

    def __init__(
        self,
        seasonal_scorer_fn: Optional[SubScorer] = None,
        style_scorer_fn: Optional[SubScorer] = None,
        target_season: str = SEASON_ALL,
    ) -> None:
        self.target_season = target_season
        self._seasonal = seasonal_scorer_fn or seasonal_scorer(target_season)
        self._style = style_scorer_fn or style_consistency

    def score(self, selection: OutfitSelection) -> ScoreBreakdown:
        if selection.is_empty():
            return EMPTY_BREAKDOWN

        formality = formality_consistency(selection)
        harmony = color_harmony(selection)
        seasonal = _to_score(self._seasonal(selection))
        style = _to_score(self._style(selection))
        total = _to_score(
            formality * SCORE_WEIGHTS["formality"]
            + harmony * SCORE_WEIGHTS["color_harmony"]
            + seasonal * SCORE_WEIGHTS["seasonal_appropriateness"]
            + style * SCORE_WEIGHTS["style_consistency"]
        )
        breakdown = ScoreBreakdown(
            formality=formality,
            color_harmony=harmony,
            seasonal_appropriateness=seasonal,
            style_consistency=style,
            total=total,
        )
        logger.debug("scored selection %s -> %s", selection.to_payload(), breakdown)
        return breakdown


def score_outfit(selection: OutfitSelection, target_season: str = SEASON_ALL) -> ScoreBreakdown:
    """Score a selection with the default sub-scorers."""

    return OutfitScorer(target_season=target_season).score(selection)


__all__ = [
    "OutfitScorer",
    "SubScorer",
    "color_harmony",
    "constant_scorer",
    "formality_consistency",
    "round_half_up",
    "score_outfit",
    "seasonal_scorer",
    "style_consistency",
]
