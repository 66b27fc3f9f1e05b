"""Evaluation scenarios exercising compatibility, scoring and the selection lifecycle."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple


@dataclass
class EvaluationScenario:
    name: str
    description: str
    wardrobe_items: List[Dict[str, object]]
    anchor_item_id: Optional[str] = None
    # (slot, item id or None) applied in order to a selection session.
    selections: List[Tuple[str, Optional[str]]] = field(default_factory=list)
    tuck_style: str = "Untucked"
    target_season: str = "All"
    expectations: Dict[str, object] = field(default_factory=dict)


def _wardrobe_fixtures() -> List[Dict[str, object]]:
    return [
        {
            "id": "jacket_navy",
            "name": "Navy Unstructured Jacket",
            "categories": {"name": "Jacket"},
            "color": "Navy",
            "formality_score": 8,
            "season": ["Fall", "Winter", "Spring"],
        },
        {
            "id": "shirt_ocbd",
            "name": "White OCBD",
            "categories": {"name": "Shirt"},
            "color": "White",
            "formality_score": 7,
        },
        {
            "id": "shirt_tee",
            "name": "Red Graphic Tee",
            "categories": {"name": "Shirt"},
            "color": "Red",
            "formality_score": 2,
            "season": ["Summer"],
        },
        {
            "id": "pants_flannel",
            "name": "Grey Flannel Trousers",
            "categories": {"name": "Pants"},
            "color": "Grey",
            "formality_score": 7,
            "season": ["Fall", "Winter"],
        },
        {
            "id": "shoes_loafer",
            "name": "Brown Suede Loafers",
            "categories": {"name": "Shoes"},
            "color": "Brown",
            "formality_score": 7,
        },
        {
            "id": "belt_leather",
            "name": "Brown Leather Belt",
            "categories": {"name": "Belt"},
            "color": "Brown",
            "formality_score": 6,
        },
        {
            "id": "cardigan_a",
            "name": "Cardigan",
            "categories": {"name": "Overshirt"},
            "color": "Cream",
            "formality_score": 5,
        },
        {
            "id": "cardigan_b",
            "name": "Cardigan",
            "categories": {"name": "Overshirt"},
            "color": "Grey",
            "formality_score": 5,
        },
        {
            "id": "legacy_shacket",
            "name": "Olive Wool Shacket",
            "categories": {"name": "Jacket/Overshirt"},
            "color": "Olive",
            "formality_score": 4,
        },
    ]


SCENARIOS: List[EvaluationScenario] = [
    EvaluationScenario(
        name="navy_jacket_anchor",
        description="A navy jacket anchor scores the white OCBD at 95 and puts grey trousers on top.",
        wardrobe_items=_wardrobe_fixtures(),
        anchor_item_id="jacket_navy",
        expectations={
            "top_candidate": "pants_flannel",
            "candidate": "shirt_ocbd",
            "candidate_score": 95,
            "candidate_reasons": ["Perfect formality match", "White versatility", "Jacket-shirt pairing"],
        },
    ),
    EvaluationScenario(
        name="same_category_cardigans",
        description="Two cardigans in the same category never pair with each other.",
        wardrobe_items=_wardrobe_fixtures(),
        anchor_item_id="cardigan_a",
        expectations={"excluded_candidate": "cardigan_b", "excluded_reasons": ["Same category"]},
    ),
    EvaluationScenario(
        name="empty_selection",
        description="Nothing selected scores zero on every axis.",
        wardrobe_items=_wardrobe_fixtures(),
        expectations={"total": 0, "valid": False},
    ),
    EvaluationScenario(
        name="shirt_only",
        description="A shirt without pants is not saveable.",
        wardrobe_items=_wardrobe_fixtures(),
        anchor_item_id="jacket_navy",
        selections=[("shirt", "shirt_ocbd")],
        expectations={"valid": False},
    ),
    EvaluationScenario(
        name="shirt_and_pants",
        description="Shirt and pants alone make a saveable outfit.",
        wardrobe_items=_wardrobe_fixtures(),
        selections=[("shirt", "shirt_tee"), ("pants", "pants_flannel")],
        expectations={"valid": True},
    ),
    EvaluationScenario(
        name="tucked_smart_casual",
        description="A full smart-casual outfit around the jacket, with a locked anchor slot.",
        wardrobe_items=_wardrobe_fixtures(),
        anchor_item_id="jacket_navy",
        selections=[
            ("shirt", "shirt_ocbd"),
            ("pants", "pants_flannel"),
            ("shoes", "shoes_loafer"),
            ("belt", "belt_leather"),
            ("jacket", None),
        ],
        tuck_style="Tucked",
        target_season="Fall",
        expectations={"valid": True, "min_total": 90, "refused": ["jacket"]},
    ),
    EvaluationScenario(
        name="legacy_outer_layer",
        description="A legacy combined-category item is classified into the overshirt slot.",
        wardrobe_items=_wardrobe_fixtures(),
        selections=[("overshirt", "legacy_shacket")],
        expectations={"slot_filled": "overshirt"},
    ),
]


__all__ = ["EvaluationScenario", "SCENARIOS"]
