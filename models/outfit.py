"""Outfit selection and scoring result schemas."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple

from models.taxonomy import BASIC_COMPATIBILITY_REASON, REQUIRED_SLOTS, SLOT_ORDER, CategorySlot
from models.wardrobe_item import WardrobeItem


class TuckStyle(str, Enum):
    TUCKED = "Tucked"
    UNTUCKED = "Untucked"


@dataclass(frozen=True)
class CompatibilityResult:
    score: int
    reasons: Tuple[str, ...] = (BASIC_COMPATIBILITY_REASON,)

    def __post_init__(self) -> None:
        if not self.reasons:
            object.__setattr__(self, "reasons", (BASIC_COMPATIBILITY_REASON,))
        else:
            object.__setattr__(self, "reasons", tuple(self.reasons))


@dataclass(frozen=True)
class CandidateScore:
    """A candidate item with its compatibility against the current anchor."""

    item: WardrobeItem
    compatibility: Optional[CompatibilityResult] = None

    @property
    def score(self) -> int:
        return self.compatibility.score if self.compatibility else 0

    def to_dict(self) -> Dict[str, object]:
        return {
            "item": self.item.to_dict(),
            "compatibility_score": self.score,
            "reasons": list(self.compatibility.reasons) if self.compatibility else [],
        }


@dataclass(frozen=True)
class ScoreBreakdown:
    formality: int = 0
    color_harmony: int = 0
    seasonal_appropriateness: int = 0
    style_consistency: int = 0
    total: int = 0

    def as_dict(self) -> Dict[str, int]:
        return {
            "formality": self.formality,
            "color_harmony": self.color_harmony,
            "seasonal_appropriateness": self.seasonal_appropriateness,
            "style_consistency": self.style_consistency,
            "total": self.total,
        }


EMPTY_BREAKDOWN = ScoreBreakdown()


@dataclass
class OutfitSelection:
    """Slot map for an outfit in progress.

    Holds at most one item per slot; assigning to an occupied slot replaces the
    previous occupant.
    """

    slots: Dict[CategorySlot, WardrobeItem] = field(default_factory=dict)
    tuck_style: TuckStyle = TuckStyle.UNTUCKED

    def get(self, slot: CategorySlot) -> Optional[WardrobeItem]:
        return self.slots.get(slot)

    def assign(self, slot: CategorySlot, item: WardrobeItem) -> Optional[WardrobeItem]:
        previous = self.slots.get(slot)
        self.slots[slot] = item
        return previous

    def clear_slot(self, slot: CategorySlot) -> Optional[WardrobeItem]:
        return self.slots.pop(slot, None)

    def is_empty(self) -> bool:
        return not self.slots

    def occupied(self) -> List[Tuple[CategorySlot, WardrobeItem]]:
        """Occupied slots in canonical slot order."""

        return [(slot, self.slots[slot]) for slot in SLOT_ORDER if slot in self.slots]

    def items_for(self, slots: Iterable[CategorySlot]) -> List[WardrobeItem]:
        wanted = set(slots)
        return [item for slot, item in self.occupied() if slot in wanted]

    def has_required_slots(self) -> bool:
        return all(slot in self.slots for slot in REQUIRED_SLOTS)

    def copy(self) -> "OutfitSelection":
        return OutfitSelection(slots=dict(self.slots), tuck_style=self.tuck_style)

    def to_payload(self, score: Optional[int] = None) -> Dict[str, object]:
        """Flatten to ``{category label: item id}`` plus tuck style and score."""

        payload: Dict[str, object] = {slot.label: item.id for slot, item in self.occupied()}
        payload["tuck_style"] = self.tuck_style.value
        if score is not None:
            payload["score"] = score
        return payload


__all__ = [
    "CandidateScore",
    "CompatibilityResult",
    "EMPTY_BREAKDOWN",
    "OutfitSelection",
    "ScoreBreakdown",
    "TuckStyle",
]
