"""Pairwise compatibility scoring and candidate ranking tests."""

import itertools
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

import pytest

from logic.compatibility import compatibility, rank_candidates
from models.wardrobe_item import WardrobeItem


def _item(item_id: str, category: str, color=None, formality=None, name=None) -> WardrobeItem:
    return WardrobeItem(
        id=item_id,
        name=name or f"{category} {item_id}",
        category_name=category,
        color=color,
        formality_score=formality,
    )


def test_navy_jacket_with_white_shirt_scores_95() -> None:
    jacket = _item("j1", "Jacket", color="Navy", formality=8)
    shirt = _item("s1", "Shirt", color="White", formality=7)

    result = compatibility(jacket, shirt)

    assert result.score == 95
    assert result.reasons == ("Perfect formality match", "White versatility", "Jacket-shirt pairing")


def test_same_item_and_same_category_score_zero() -> None:
    shirt = _item("s1", "Shirt", color="White", formality=7)
    other_shirt = _item("s2", "Shirt", color="Blue", formality=7)

    assert compatibility(shirt, shirt).score == 0
    assert compatibility(shirt, shirt).reasons == ("Same item",)
    assert compatibility(shirt, other_shirt).score == 0
    assert compatibility(shirt, other_shirt).reasons == ("Same category",)


def test_jacket_and_overshirt_are_distinct_categories() -> None:
    jacket = _item("j1", "Jacket", formality=6)
    overshirt = _item("o1", "Overshirt", formality=6)

    result = compatibility(jacket, overshirt)

    assert result.score > 0
    assert "Same category" not in result.reasons


def test_formality_bands_and_mismatch() -> None:
    anchor = _item("a", "Belt", formality=5)

    assert compatibility(anchor, _item("b", "Watch", formality=5)).score == 75
    assert compatibility(anchor, _item("c", "Watch", formality=7)).score == 65
    assert compatibility(anchor, _item("d", "Watch", formality=8)).score == 55
    mismatch = compatibility(anchor, _item("e", "Watch", formality=10))
    assert mismatch.score == 40
    assert mismatch.reasons == ("Formality mismatch",)


def test_missing_formality_skips_the_formality_step() -> None:
    anchor = _item("a", "Belt", formality=5)
    result = compatibility(anchor, _item("b", "Watch"))

    assert result.score == 50
    assert result.reasons == ("Basic compatibility",)


def test_color_rules_first_match_wins() -> None:
    anchor = _item("a", "Belt", color="Black")

    assert compatibility(anchor, _item("b", "Watch", color="black")).reasons == ("Matching colors",)
    assert compatibility(anchor, _item("c", "Watch", color="White")).reasons == ("White versatility",)
    assert compatibility(anchor, _item("e", "Watch", color="Grey")).score == 70
    assert compatibility(anchor, _item("f", "Watch", color="Red")).reasons == ("Color contrast",)


def test_navy_with_a_neutral_is_neutral_harmony() -> None:
    black = _item("a", "Belt", color="Black")
    navy = _item("n", "Belt", color="Navy")

    with_navy = compatibility(black, _item("d", "Watch", color="Navy"))
    assert with_navy.reasons == ("Neutral color harmony",)
    assert with_navy.score == 70
    assert compatibility(navy, _item("g", "Watch", color="Grey")).reasons == ("Neutral color harmony",)
    assert compatibility(navy, _item("k", "Watch", color="khaki")).score == 70


def test_navy_versatility_only_against_non_neutrals() -> None:
    navy = _item("n", "Belt", color="Navy")

    result = compatibility(navy, _item("r", "Watch", color="Red"))

    assert result.reasons == ("Navy versatility",)
    assert result.score == 58


def test_white_outranks_neutral_pair() -> None:
    navy = _item("n", "Belt", color="Navy")

    assert compatibility(navy, _item("w", "Watch", color="White")).reasons == ("White versatility",)


def test_category_pairings_follow_anchor_direction() -> None:
    shirt = _item("s1", "Shirt")
    pants = _item("p1", "Pants")
    shoes = _item("sh1", "Shoes")

    assert compatibility(shirt, pants).reasons == ("Shirt-pants core pairing",)
    assert compatibility(shirt, pants).score == 60
    # Pants anchor has no rule for a shirt candidate.
    assert compatibility(pants, shirt).score == 50
    assert compatibility(pants, shoes).reasons == ("Pants-shoes pairing",)


def test_score_is_clamped_to_100() -> None:
    # Overshirt matches both the outer-layer and shirt pairing groups.
    overshirt = _item("o1", "Overshirt", color="Grey", formality=6)
    pants = _item("p1", "Pants", color="Grey", formality=6)

    result = compatibility(overshirt, pants)

    assert result.score == 100
    assert result.reasons == (
        "Perfect formality match",
        "Matching colors",
        "Jacket-pants pairing",
        "Shirt-pants core pairing",
    )


def test_mismatched_formality_and_contrasting_colors() -> None:
    anchor = _item("a", "Belt", color="Red", formality=1)
    candidate = _item("b", "Watch", color="Green", formality=10)

    assert compatibility(anchor, candidate).score == 42


def test_rank_candidates_orders_by_score_then_name() -> None:
    anchor = _item("j1", "Jacket", color="Navy", formality=8)
    candidates = [
        _item("s2", "Shirt", color="White", formality=7, name="Oxford"),
        _item("s1", "Shirt", color="White", formality=7, name="Broadcloth"),
        _item("p1", "Pants", color="Red", formality=2, name="Chinos"),
    ]

    ranked = rank_candidates(anchor, candidates)

    assert [entry.item.id for entry in ranked] == ["s1", "s2", "p1"]
    assert ranked[0].score == 95


def test_rank_candidates_applies_floor_and_limit() -> None:
    anchor = _item("j1", "Jacket", color="Navy", formality=8)
    candidates = [
        _item("s1", "Shirt", color="White", formality=7),
        _item("p1", "Pants", color="Red", formality=2),
        _item("sh1", "Shoes", color="Brown", formality=8),
    ]

    ranked = rank_candidates(anchor, candidates, min_score=60)
    assert all(entry.score >= 60 for entry in ranked)
    assert "p1" not in [entry.item.id for entry in ranked]

    assert len(rank_candidates(anchor, candidates, limit=1)) == 1


def test_rank_without_anchor_lists_by_name() -> None:
    candidates = [_item("b", "Shirt", name="Zed"), _item("a", "Shirt", name="Alpha")]

    ranked = rank_candidates(None, candidates)

    assert [entry.item.name for entry in ranked] == ["Alpha", "Zed"]
    assert ranked[0].compatibility is None
    assert ranked[0].to_dict()["reasons"] == []


CATEGORY_LABELS = ["Jacket", "Overshirt", "Shirt", "Undershirt", "Pants", "Shoes", "Belt", "Watch"]


@pytest.mark.parametrize("anchor_category,candidate_category", list(itertools.permutations(CATEGORY_LABELS, 2)))
@pytest.mark.parametrize("formalities", [(1, 10), (10, 1), (5, 5), (None, 7)])
@pytest.mark.parametrize(
    "colors", [("Navy", "White"), ("Grey", "Grey"), ("Navy", "Black"), ("Red", "Green"), (None, "Navy")]
)
def test_compatibility_score_stays_in_range(anchor_category, candidate_category, formalities, colors) -> None:
    anchor = _item("a", anchor_category, color=colors[0], formality=formalities[0])
    candidate = _item("b", candidate_category, color=colors[1], formality=formalities[1])

    score = compatibility(anchor, candidate).score

    assert isinstance(score, int)
    assert 0 <= score <= 100
