"""Selection session state machine: anchor lock, slot mutations and debounced scoring."""

import sys
import threading
from pathlib import Path
from typing import Callable, List

sys.path.append(str(Path(__file__).resolve().parents[1]))

import pytest

from memory.selection_session import SelectionSession, SelectionState, SelectionStatus
from models.outfit import TuckStyle
from models.taxonomy import CategorySlot
from models.wardrobe_item import WardrobeItem


class ManualTimer:
    def __init__(self, interval: float, callback: Callable[[], None]) -> None:
        self.interval = interval
        self.callback = callback
        self.started = False
        self.cancelled = False

    def start(self) -> None:
        self.started = True

    def cancel(self) -> None:
        self.cancelled = True

    def fire(self) -> None:
        if not self.cancelled:
            self.callback()


class ManualTimerFactory:
    def __init__(self) -> None:
        self.timers: List[ManualTimer] = []

    def __call__(self, interval: float, callback: Callable[[], None]) -> ManualTimer:
        timer = ManualTimer(interval, callback)
        self.timers.append(timer)
        return timer

    def fire_latest(self) -> None:
        self.timers[-1].fire()


def _item(item_id, category, color=None, formality=None, name=None, active=True) -> WardrobeItem:
    return WardrobeItem(
        id=item_id,
        name=name or f"{category} {item_id}",
        category_name=category,
        color=color,
        formality_score=formality,
        active=active,
    )


JACKET = _item("j1", "Jacket", "Navy", 8, name="Navy Jacket")
SHIRT = _item("s1", "Shirt", "White", 7, name="White OCBD")
SHIRT_2 = _item("s2", "Shirt", "Blue", 6, name="Blue Oxford")
PANTS = _item("p1", "Pants", "Grey", 7, name="Grey Trousers")
SHOES = _item("sh1", "Shoes", "Brown", 8, name="Brown Loafers")
WARDROBE = [JACKET, SHIRT, SHIRT_2, PANTS, SHOES, _item("x1", "Shirt", "Red", 3, active=False)]


@pytest.fixture
def timers() -> ManualTimerFactory:
    return ManualTimerFactory()


@pytest.fixture
def session(timers: ManualTimerFactory) -> SelectionSession:
    return SelectionSession(anchor=JACKET, wardrobe=WARDROBE, timer_factory=timers)


def test_anchor_is_placed_and_locked(session: SelectionSession) -> None:
    assert session.state is SelectionState.ANCHORED
    assert session.anchor_slot is CategorySlot.JACKET
    assert session.get("jacket") == JACKET

    outcome = session.select(CategorySlot.JACKET, None)

    assert outcome.status is SelectionStatus.LOCKED
    assert outcome.rejected
    assert session.get(CategorySlot.JACKET) == JACKET


def test_initial_score_is_committed_synchronously(session: SelectionSession) -> None:
    assert not session.dirty
    assert session.breakdown == session.current_breakdown()
    assert session.score > 0


def test_select_replaces_previous_occupant(session: SelectionSession) -> None:
    first = session.select(CategorySlot.SHIRT, SHIRT)
    second = session.select(CategorySlot.SHIRT, SHIRT_2)

    assert first.status is SelectionStatus.APPLIED
    assert second.previous == SHIRT
    assert session.get(CategorySlot.SHIRT) == SHIRT_2


def test_category_mismatch_is_rejected(session: SelectionSession) -> None:
    outcome = session.select(CategorySlot.PANTS, SHIRT)

    assert outcome.status is SelectionStatus.CATEGORY_MISMATCH
    assert session.get(CategorySlot.PANTS) is None
    assert not session.dirty


def test_anchor_item_cannot_fill_another_slot(session: SelectionSession) -> None:
    outcome = session.select(CategorySlot.OVERSHIRT, JACKET)

    assert outcome.status is SelectionStatus.CATEGORY_MISMATCH


def test_clearing_empty_slot_and_reselecting_same_item_are_no_ops(session: SelectionSession) -> None:
    assert session.select(CategorySlot.SHOES, None).status is SelectionStatus.NO_OP

    session.select(CategorySlot.SHOES, SHOES)
    assert session.select(CategorySlot.SHOES, SHOES).status is SelectionStatus.NO_OP


def test_toggle_deselects_current_occupant(session: SelectionSession) -> None:
    assert session.toggle(CategorySlot.SHIRT, SHIRT).status is SelectionStatus.APPLIED
    assert session.get(CategorySlot.SHIRT) == SHIRT

    outcome = session.toggle(CategorySlot.SHIRT, SHIRT)

    assert outcome.status is SelectionStatus.APPLIED
    assert outcome.previous == SHIRT
    assert session.get(CategorySlot.SHIRT) is None


def test_clear_keeps_the_anchor(session: SelectionSession) -> None:
    session.select(CategorySlot.SHIRT, SHIRT)
    session.select(CategorySlot.PANTS, PANTS)

    assert session.clear() == 2
    assert session.get(CategorySlot.JACKET) == JACKET
    assert session.snapshot().occupied() == [(CategorySlot.JACKET, JACKET)]


def test_validity_requires_shirt_and_pants(session: SelectionSession) -> None:
    session.select(CategorySlot.SHIRT, SHIRT)
    assert not session.is_valid()

    session.select(CategorySlot.PANTS, PANTS)
    assert session.is_valid()


def test_mutation_marks_dirty_until_debounce_fires(session: SelectionSession, timers: ManualTimerFactory) -> None:
    committed = session.breakdown
    session.select(CategorySlot.SHIRT, SHIRT)

    assert session.dirty
    assert session.breakdown == committed
    assert timers.timers[-1].interval == pytest.approx(0.15)

    timers.fire_latest()

    assert not session.dirty
    assert session.breakdown == session.current_breakdown()


def test_burst_of_mutations_commits_once(timers: ManualTimerFactory) -> None:
    commits = []
    session = SelectionSession(anchor=JACKET, wardrobe=WARDROBE, timer_factory=timers, on_score=commits.append)

    session.select(CategorySlot.SHIRT, SHIRT)
    session.select(CategorySlot.PANTS, PANTS)
    session.select(CategorySlot.SHOES, SHOES)

    # Superseded timers were cancelled and do nothing when fired.
    for timer in timers.timers[:-1]:
        assert timer.cancelled
        timer.fire()
    assert commits == []

    timers.fire_latest()
    assert len(commits) == 1
    assert commits[0] == session.current_breakdown()


def test_flush_commits_immediately(session: SelectionSession, timers: ManualTimerFactory) -> None:
    session.select(CategorySlot.SHIRT, SHIRT)

    breakdown = session.flush()

    assert not session.dirty
    assert breakdown == session.current_breakdown()
    assert timers.timers[-1].cancelled


def test_tuck_style_change_rescored(session: SelectionSession) -> None:
    assert session.set_tuck_style("Untucked").status is SelectionStatus.NO_OP

    outcome = session.set_tuck_style(TuckStyle.TUCKED)

    assert outcome.changed
    assert session.tuck_style is TuckStyle.TUCKED
    assert session.dirty


def test_to_payload_requires_valid_outfit(session: SelectionSession) -> None:
    session.select(CategorySlot.SHIRT, SHIRT)
    with pytest.raises(ValueError):
        session.to_payload()

    session.select(CategorySlot.PANTS, PANTS)
    payload = session.to_payload()

    assert payload["Jacket"] == "j1"
    assert payload["Shirt"] == "s1"
    assert payload["Pants"] == "p1"
    assert payload["tuck_style"] == "Untucked"
    assert payload["anchor_item_id"] == "j1"
    assert payload["score"] == session.current_breakdown().total


def test_candidate_lists_skip_anchor_slot_and_inactive_items(session: SelectionSession) -> None:
    lists = session.candidate_lists()

    assert CategorySlot.JACKET not in lists
    shirt_ids = [entry.item.id for entry in lists[CategorySlot.SHIRT]]
    assert shirt_ids == ["s1", "s2"]
    assert lists[CategorySlot.SHIRT][0].score == 95
    assert session.candidates(CategorySlot.WATCH) == []


def test_update_wardrobe_rebuilds_candidates(session: SelectionSession) -> None:
    belt = _item("b1", "Belt", "Brown", 7)
    session.update_wardrobe(WARDROBE + [belt])

    assert [entry.item.id for entry in session.candidates(CategorySlot.BELT)] == ["b1"]


def test_session_without_anchor_starts_empty(timers: ManualTimerFactory) -> None:
    session = SelectionSession(wardrobe=WARDROBE, timer_factory=timers)

    assert session.state is SelectionState.EMPTY
    assert session.score == 0

    session.select(CategorySlot.SHIRT, SHIRT)
    assert session.state is SelectionState.BUILDING
    assert session.candidates(CategorySlot.SHIRT)[0].compatibility is None


def test_anchor_without_slot_is_rejected() -> None:
    with pytest.raises(ValueError):
        SelectionSession(anchor=_item("h1", "Hat"))


def test_zero_debounce_scores_inline() -> None:
    session = SelectionSession(anchor=JACKET, wardrobe=WARDROBE, debounce_seconds=0)

    session.select(CategorySlot.SHIRT, SHIRT)

    assert not session.dirty
    assert session.breakdown == session.current_breakdown()


def test_cancel_pending_drops_refresh_and_stays_dirty(session: SelectionSession, timers: ManualTimerFactory) -> None:
    committed = session.breakdown
    session.select(CategorySlot.SHIRT, SHIRT)

    assert session.cancel_pending() is True
    assert timers.timers[-1].cancelled
    assert session.dirty
    assert session.breakdown == committed

    timers.fire_latest()
    assert session.breakdown == committed
    assert session.cancel_pending() is False

    # A later flush still commits the pending change.
    assert session.flush() == session.current_breakdown()
    assert not session.dirty


def _lock_is_free(session: SelectionSession) -> bool:
    acquired = []

    def attempt() -> None:
        got = session._lock.acquire(blocking=False)
        if got:
            session._lock.release()
        acquired.append(got)

    worker = threading.Thread(target=attempt)
    worker.start()
    worker.join()
    return acquired[0]


def test_zero_debounce_callback_runs_outside_lock() -> None:
    observed = []
    session = SelectionSession(
        anchor=JACKET,
        wardrobe=WARDROBE,
        debounce_seconds=0,
        on_score=lambda breakdown: observed.append(_lock_is_free(session)),
    )

    session.select(CategorySlot.SHIRT, SHIRT)
    session.toggle(CategorySlot.PANTS, PANTS)
    session.set_tuck_style(TuckStyle.TUCKED)
    session.clear()

    assert observed == [True, True, True, True]


def test_debounced_and_flushed_callbacks_run_outside_lock(timers: ManualTimerFactory) -> None:
    observed = []
    session = SelectionSession(
        anchor=JACKET,
        wardrobe=WARDROBE,
        timer_factory=timers,
        on_score=lambda breakdown: observed.append(_lock_is_free(session)),
    )

    session.select(CategorySlot.SHIRT, SHIRT)
    timers.fire_latest()
    session.select(CategorySlot.PANTS, PANTS)
    session.flush()
    session.select(CategorySlot.SHOES, SHOES)
    session.to_payload()

    assert observed == [True, True, True]
