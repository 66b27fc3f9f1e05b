"""Tool wrappers exposing outfit scoring and anchor filtering over a wardrobe store."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from logic.classifier import resolve_slot
from logic.compatibility import rank_candidates
from logic.outfit_scoring import OutfitScorer
from logic.validation import FilterByAnchorRequest, ScoreOutfitRequest, validation_failure
from memory.selection_session import SelectionSession
from models.outfit import OutfitSelection, TuckStyle
from outfit_app.config import EngineConfig
from outfit_app.logging_config import get_logger, log_event
from tools.observability import instrument_tool
from tools.wardrobe_store import WardrobeStore

LOGGER = get_logger(__name__)


def _not_found(message: str) -> Dict[str, Any]:
    return {"status": "not_found", "error": message}


class OutfitTools:
    """Thin wrapper turning store lookups into scoring and ranking calls."""

    def __init__(self, store: WardrobeStore, config: Optional[EngineConfig] = None) -> None:
        self.store = store
        self.config = config or EngineConfig()

    @instrument_tool(
        "score_outfit",
        input_model=ScoreOutfitRequest,
        on_validation_error=lambda exc: validation_failure("Invalid score_outfit request", exc),
    )
    def score_outfit(
        self, item_ids: List[str], tuck_style: str = "Untucked", target_season: str = "All"
    ) -> Dict[str, Any]:
        items = self.store.get_items(item_ids)
        if not items:
            return _not_found("No valid items found")

        selection = OutfitSelection(tuck_style=TuckStyle(tuck_style))
        dropped: List[str] = []
        for item in items:
            slot = resolve_slot(item)
            if slot is None:
                dropped.append(item.id)
                continue
            selection.assign(slot, item)
        if dropped:
            log_event(LOGGER, logging.INFO, "items_without_slot", item_ids=dropped)

        breakdown = OutfitScorer(target_season=target_season).score(selection)
        return {
            "status": "ok",
            "score": breakdown.total,
            "breakdown": breakdown.as_dict(),
            "selection": selection.to_payload(),
        }

    @instrument_tool(
        "filter_by_anchor",
        input_model=FilterByAnchorRequest,
        on_validation_error=lambda exc: validation_failure("Invalid filter_by_anchor request", exc),
    )
    def filter_by_anchor(
        self,
        anchor_item_id: str,
        target_categories: Optional[List[str]] = None,
        min_compatibility_score: Optional[int] = None,
        limit: Optional[int] = None,
        target_season: str = "All",
    ) -> Dict[str, Any]:
        anchor = self.store.get_item(anchor_item_id)
        if anchor is None:
            return _not_found("Anchor item not found")
        if min_compatibility_score is None:
            min_compatibility_score = self.config.min_compatibility_score
        if limit is None:
            limit = self.config.candidate_limit

        candidates = [
            item for item in self.store.list_items(target_categories) if item.id != anchor.id
        ]
        ranked = rank_candidates(anchor, candidates, min_score=min_compatibility_score, limit=limit)
        return {
            "status": "ok",
            "anchor_item": anchor.to_dict(),
            "compatible_items": [entry.to_dict() for entry in ranked],
            "total_candidates": len(candidates),
            "filtered_count": len(ranked),
            "min_compatibility_score": min_compatibility_score,
            "target_season": target_season,
        }

    def start_session(self, anchor_item_id: Optional[str] = None, **overrides: Any) -> SelectionSession:
        """Open a selection session over the active wardrobe.

        Raises ``LookupError`` when ``anchor_item_id`` is not an active item.
        """

        anchor = None
        if anchor_item_id is not None:
            anchor = self.store.get_item(anchor_item_id)
            if anchor is None:
                raise LookupError(f"Anchor item {anchor_item_id} not found")
        options: Dict[str, Any] = {
            "tuck_style": self.config.default_tuck_style,
            "scorer": OutfitScorer(target_season=self.config.target_season),
            "debounce_seconds": self.config.debounce_seconds,
        }
        options.update(overrides)
        return SelectionSession(anchor=anchor, wardrobe=self.store.list_items(), **options)


__all__ = ["OutfitTools"]
