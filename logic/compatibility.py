"""Pairwise compatibility between an anchor item and a candidate item.

Scores start from a neutral base and collect additive adjustments, each with a
human-readable reason. Order matters: category pairing bonuses are keyed on the
anchor's category, so callers always pass ``(anchor, candidate)``.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Tuple

from models.color_theory import either_is, neutral_pair
from models.outfit import CandidateScore, CompatibilityResult
from models.taxonomy import BASE_COMPATIBILITY, clamp_score, normalize_label
from models.wardrobe_item import WardrobeItem

logger = logging.getLogger(__name__)

SAME_ITEM = CompatibilityResult(score=0, reasons=("Same item",))
SAME_CATEGORY = CompatibilityResult(score=0, reasons=("Same category",))

# (max distance, adjustment, reason); anything beyond the last row is a mismatch.
FORMALITY_BANDS: Tuple[Tuple[int, int, str], ...] = (
    (1, 25, "Perfect formality match"),
    (2, 15, "Good formality match"),
    (3, 5, "Acceptable formality match"),
)
FORMALITY_MISMATCH = (-10, "Formality mismatch")

# anchor substrings -> ordered (candidate substring, bonus, reason); first candidate hit wins per group.
CATEGORY_PAIRINGS: Tuple[Tuple[Tuple[str, ...], Tuple[Tuple[str, int, str], ...]], ...] = (
    (("jacket", "overshirt"), (("shirt", 8, "Jacket-shirt pairing"), ("pants", 6, "Jacket-pants pairing"))),
    (("shirt",), (("pants", 10, "Shirt-pants core pairing"), ("shoes", 5, "Shirt-shoes pairing"))),
    (("pants",), (("shoes", 8, "Pants-shoes pairing"), ("belt", 6, "Pants-belt pairing"))),
)


def _formality_adjustment(anchor: WardrobeItem, candidate: WardrobeItem) -> Optional[Tuple[int, str]]:
    if anchor.formality_score is None or candidate.formality_score is None:
        return None
    distance = abs(anchor.formality_score - candidate.formality_score)
    for max_distance, adjustment, reason in FORMALITY_BANDS:
        if distance <= max_distance:
            return adjustment, reason
    return FORMALITY_MISMATCH


def _color_adjustment(anchor: WardrobeItem, candidate: WardrobeItem) -> Optional[Tuple[int, str]]:
    anchor_color, candidate_color = anchor.color_key, candidate.color_key
    if not anchor_color or not candidate_color:
        return None
    if anchor_color == candidate_color:
        return 15, "Matching colors"
    # White outranks the neutral pair; navy only applies against non-neutrals.
    if either_is("white", anchor_color, candidate_color):
        return 12, "White versatility"
    if neutral_pair(anchor_color, candidate_color):
        return 20, "Neutral color harmony"
    if either_is("navy", anchor_color, candidate_color):
        return 8, "Navy versatility"
    return 2, "Color contrast"


def _category_adjustments(anchor: WardrobeItem, candidate: WardrobeItem) -> List[Tuple[int, str]]:
    anchor_category = normalize_label(anchor.category_name)
    candidate_category = normalize_label(candidate.category_name)
    adjustments: List[Tuple[int, str]] = []
    for anchor_keys, pairings in CATEGORY_PAIRINGS:
        if not any(key in anchor_category for key in anchor_keys):
            continue
        for candidate_key, bonus, reason in pairings:
            if candidate_key in candidate_category:
                adjustments.append((bonus, reason))
                break
    return adjustments


def compatibility(anchor: WardrobeItem, candidate: WardrobeItem) -> CompatibilityResult:
    """Score how well ``candidate`` works with ``anchor`` on a 0-100 scale."""

    if anchor.id == candidate.id:
        return SAME_ITEM
    # Exact label equality: Jacket and Overshirt are distinct categories.
    if anchor.category_name == candidate.category_name:
        return SAME_CATEGORY

    adjustments: List[Tuple[int, str]] = []
    for adjustment in (_formality_adjustment(anchor, candidate), _color_adjustment(anchor, candidate)):
        if adjustment is not None:
            adjustments.append(adjustment)
    adjustments.extend(_category_adjustments(anchor, candidate))

    score = int(clamp_score(BASE_COMPATIBILITY + sum(value for value, _ in adjustments)))
    result = CompatibilityResult(score=score, reasons=tuple(reason for _, reason in adjustments))
    logger.debug("compatibility %s -> %s = %s %s", anchor.id, candidate.id, result.score, result.reasons)
    return result


def rank_candidates(
    anchor: Optional[WardrobeItem],
    candidates: Iterable[WardrobeItem],
    min_score: int = 0,
    limit: Optional[int] = None,
) -> List[CandidateScore]:
    """Score and order candidates by compatibility, best first.

    Ties are broken by item name, then id, so the order is stable across calls.
    Without an anchor there is nothing to score against and candidates are
    returned in name order.
    """

    if anchor is None:
        ranked = [CandidateScore(item=item) for item in sorted(candidates, key=lambda i: (i.name, i.id))]
    else:
        scored = [CandidateScore(item=item, compatibility=compatibility(anchor, item)) for item in candidates]
        ranked = sorted(
            (entry for entry in scored if entry.score >= min_score),
            key=lambda entry: (-entry.score, entry.item.name, entry.item.id),
        )
    if limit is not None:
        ranked = ranked[: max(0, limit)]
    return ranked


__all__ = ["CATEGORY_PAIRINGS", "FORMALITY_BANDS", "compatibility", "rank_candidates"]
