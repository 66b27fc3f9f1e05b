"""Outfit-in-progress state: slot map, anchor lock and debounced scoring."""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Union

from logic.classifier import ItemClassifier, resolve_slot
from logic.compatibility import rank_candidates
from logic.outfit_scoring import OutfitScorer
from memory.debounce import Debouncer, TimerFactory
from models.outfit import EMPTY_BREAKDOWN, CandidateScore, OutfitSelection, ScoreBreakdown, TuckStyle
from models.taxonomy import SLOT_ORDER, CategorySlot
from models.wardrobe_item import WardrobeItem
from outfit_app.logging_config import log_event

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_SECONDS = 0.15


class SelectionState(str, Enum):
    EMPTY = "empty"
    ANCHORED = "anchored"
    BUILDING = "building"


class SelectionStatus(str, Enum):
    APPLIED = "applied"
    NO_OP = "no_op"
    LOCKED = "locked"
    CATEGORY_MISMATCH = "category_mismatch"


@dataclass(frozen=True)
class SelectionOutcome:
    """Result of a mutation request. Refusals leave the selection unchanged."""

    status: SelectionStatus
    slot: Optional[CategorySlot] = None
    message: str = ""
    previous: Optional[WardrobeItem] = None

    @property
    def changed(self) -> bool:
        return self.status is SelectionStatus.APPLIED

    @property
    def rejected(self) -> bool:
        return self.status in {SelectionStatus.LOCKED, SelectionStatus.CATEGORY_MISMATCH}


SlotLike = Union[CategorySlot, str]


class SelectionSession:
    """Owns one outfit selection for the lifetime of a building session.

    Every mutation runs under a re-entrant lock so readers never see a slot map
    mid-update. Candidate lists are recomputed synchronously after each
    mutation; the aggregate score is marked dirty and refreshed once the
    debounce window passes, or immediately via :meth:`flush`. The refresh and
    the ``on_score`` callback run outside the lock.
    """

    def __init__(
        self,
        anchor: Optional[WardrobeItem] = None,
        wardrobe: Iterable[WardrobeItem] = (),
        tuck_style: Union[TuckStyle, str] = TuckStyle.UNTUCKED,
        scorer: Optional[OutfitScorer] = None,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        timer_factory: Optional[TimerFactory] = None,
        on_score: Optional[Callable[[ScoreBreakdown], None]] = None,
        classifier: Optional[ItemClassifier] = None,
    ) -> None:
        self._lock = threading.RLock()
        self._classifier = classifier
        self._scorer = scorer or OutfitScorer()
        self._selection = OutfitSelection(tuck_style=TuckStyle(tuck_style))
        self._anchor: Optional[WardrobeItem] = None
        self._anchor_slot: Optional[CategorySlot] = None
        self._wardrobe: List[WardrobeItem] = list(wardrobe)
        self._candidates: Dict[CategorySlot, List[CandidateScore]] = {}
        self._committed: ScoreBreakdown = EMPTY_BREAKDOWN
        self._dirty = False
        self._on_score = on_score
        self._debouncer = Debouncer(debounce_seconds, self._commit_score, timer_factory)

        if anchor is not None:
            slot = resolve_slot(anchor, self._classifier)
            if slot is None:
                raise ValueError(
                    f"Anchor item {anchor.id} has category {anchor.category_name!r} with no outfit slot"
                )
            self._anchor, self._anchor_slot = anchor, slot
            self._selection.assign(slot, anchor)
            logger.info("Anchored selection on item %s in slot %s", anchor.id, slot.value)

        self._refresh_candidates()
        self._committed = self._scorer.score(self._selection)

    # -- read side -----------------------------------------------------------------

    @property
    def anchor(self) -> Optional[WardrobeItem]:
        return self._anchor

    @property
    def anchor_slot(self) -> Optional[CategorySlot]:
        return self._anchor_slot

    @property
    def state(self) -> SelectionState:
        with self._lock:
            if self._anchor is not None:
                return SelectionState.ANCHORED
            if self._selection.is_empty():
                return SelectionState.EMPTY
            return SelectionState.BUILDING

    @property
    def tuck_style(self) -> TuckStyle:
        return self._selection.tuck_style

    @property
    def dirty(self) -> bool:
        return self._dirty

    @property
    def breakdown(self) -> ScoreBreakdown:
        """Last committed breakdown; may lag the slot map while dirty."""

        return self._committed

    @property
    def score(self) -> int:
        return self._committed.total

    def get(self, slot: SlotLike) -> Optional[WardrobeItem]:
        with self._lock:
            return self._selection.get(CategorySlot(slot))

    def snapshot(self) -> OutfitSelection:
        with self._lock:
            return self._selection.copy()

    def is_valid(self) -> bool:
        """True when the outfit has both a shirt and pants, whatever else it holds."""

        with self._lock:
            return self._selection.has_required_slots()

    def current_breakdown(self) -> ScoreBreakdown:
        """Score the current slot map directly, bypassing the debounce."""

        with self._lock:
            return self._scorer.score(self._selection)

    def candidates(self, slot: SlotLike) -> List[CandidateScore]:
        with self._lock:
            return list(self._candidates.get(CategorySlot(slot), []))

    def candidate_lists(self) -> Dict[CategorySlot, List[CandidateScore]]:
        with self._lock:
            return {slot: list(entries) for slot, entries in self._candidates.items()}

    # -- mutations -----------------------------------------------------------------

    def select(self, slot: SlotLike, item: Optional[WardrobeItem]) -> SelectionOutcome:
        """Place ``item`` in ``slot`` (replacing any occupant) or clear it with ``None``."""

        slot = CategorySlot(slot)
        with self._lock:
            outcome = self._select_locked(slot, item)
        self._schedule(outcome.changed)
        return outcome

    def toggle(self, slot: SlotLike, item: WardrobeItem) -> SelectionOutcome:
        """Deselect on re-click of the current occupant, otherwise select."""

        slot = CategorySlot(slot)
        with self._lock:
            current = self._selection.get(slot)
            if current is not None and item is not None and current.id == item.id:
                item = None
            outcome = self._select_locked(slot, item)
        self._schedule(outcome.changed)
        return outcome

    def clear(self) -> int:
        """Empty every slot except the anchor's. Returns how many were cleared."""

        with self._lock:
            cleared = [slot for slot in list(self._selection.slots) if slot is not self._anchor_slot]
            for slot in cleared:
                self._selection.clear_slot(slot)
            if cleared:
                self._mark_dirty()
        self._schedule(bool(cleared))
        return len(cleared)

    def set_tuck_style(self, tuck_style: Union[TuckStyle, str]) -> SelectionOutcome:
        style = TuckStyle(tuck_style)
        with self._lock:
            if style is self._selection.tuck_style:
                return SelectionOutcome(SelectionStatus.NO_OP, message="Tuck style unchanged")
            self._selection.tuck_style = style
            self._mark_dirty()
        self._schedule(True)
        return SelectionOutcome(SelectionStatus.APPLIED, message=f"Tuck style set to {style.value}")

    def update_wardrobe(self, wardrobe: Iterable[WardrobeItem]) -> None:
        """Swap in a fresh wardrobe listing and re-rank candidates."""

        with self._lock:
            self._wardrobe = list(wardrobe)
            self._refresh_candidates()

    # -- scoring -------------------------------------------------------------------

    def flush(self) -> ScoreBreakdown:
        """Cancel any pending refresh and commit the score now."""

        self._debouncer.cancel()
        with self._lock:
            if not self._dirty:
                return self._committed
            breakdown = self._commit_locked()
        self._notify(breakdown)
        return breakdown

    def cancel_pending(self) -> bool:
        """Drop a scheduled refresh without committing; the session stays dirty."""

        return self._debouncer.cancel()

    def to_payload(self) -> Dict[str, object]:
        """Flat structure for an external saver; only valid outfits qualify."""

        committed: Optional[ScoreBreakdown] = None
        with self._lock:
            if not self._selection.has_required_slots():
                raise ValueError("Outfit needs both a shirt and pants before it can be saved")
            self._debouncer.cancel()
            if self._dirty:
                committed = self._commit_locked()
            payload = self._selection.to_payload(score=self._committed.total)
            payload["anchor_item_id"] = self._anchor.id if self._anchor else None
        if committed is not None:
            self._notify(committed)
        return payload

    # -- internals -----------------------------------------------------------------
    # Helpers ending in _locked expect the caller to hold self._lock. The debouncer
    # and on_score are only ever invoked after it is released.

    def _select_locked(self, slot: CategorySlot, item: Optional[WardrobeItem]) -> SelectionOutcome:
        if slot is self._anchor_slot:
            return self._refuse(SelectionStatus.LOCKED, slot, f"Slot {slot.value} holds the anchor item")

        if item is None:
            if self._selection.get(slot) is None:
                return SelectionOutcome(SelectionStatus.NO_OP, slot, "Slot already empty")
            previous = self._selection.clear_slot(slot)
            self._mark_dirty()
            return SelectionOutcome(SelectionStatus.APPLIED, slot, "Slot cleared", previous)

        target = resolve_slot(item, self._classifier)
        if target is not slot:
            expected = target.value if target else "no slot"
            return self._refuse(
                SelectionStatus.CATEGORY_MISMATCH,
                slot,
                f"Item {item.id} ({item.category_name}) belongs in {expected}, not {slot.value}",
            )

        current = self._selection.get(slot)
        if current is not None and current == item:
            return SelectionOutcome(SelectionStatus.NO_OP, slot, "Item already selected")
        previous = self._selection.assign(slot, item)
        self._mark_dirty()
        return SelectionOutcome(SelectionStatus.APPLIED, slot, "Item selected", previous)

    def _refuse(self, status: SelectionStatus, slot: CategorySlot, message: str) -> SelectionOutcome:
        log_event(logger, logging.INFO, "selection_refused", status=status.value, slot=slot.value, reason=message)
        return SelectionOutcome(status, slot, message)

    def _mark_dirty(self) -> None:
        self._refresh_candidates()
        self._dirty = True

    def _schedule(self, changed: bool) -> None:
        if changed:
            self._debouncer.trigger()

    def _refresh_candidates(self) -> None:
        by_slot: Dict[CategorySlot, List[WardrobeItem]] = {slot: [] for slot in SLOT_ORDER}
        for item in self._wardrobe:
            if not item.active or (self._anchor is not None and item.id == self._anchor.id):
                continue
            slot = resolve_slot(item, self._classifier)
            if slot is not None:
                by_slot[slot].append(item)
        self._candidates = {
            slot: rank_candidates(self._anchor, items)
            for slot, items in by_slot.items()
            if slot is not self._anchor_slot
        }

    def _commit_locked(self) -> ScoreBreakdown:
        breakdown = self._scorer.score(self._selection)
        self._committed = breakdown
        self._dirty = False
        logger.debug("Committed outfit score %s", breakdown.total)
        return breakdown

    def _commit_score(self) -> None:
        with self._lock:
            breakdown = self._commit_locked()
        self._notify(breakdown)

    def _notify(self, breakdown: ScoreBreakdown) -> None:
        if self._on_score is not None:
            self._on_score(breakdown)


__all__ = [
    "DEFAULT_DEBOUNCE_SECONDS",
    "SelectionOutcome",
    "SelectionSession",
    "SelectionState",
    "SelectionStatus",
]
