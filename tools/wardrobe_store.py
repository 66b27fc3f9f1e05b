"""Wardrobe store boundary and an in-memory implementation."""
from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from models.taxonomy import normalize_label
from models.wardrobe_item import WardrobeItem, from_raw_metadata


class WardrobeStore:
    """Read-only view of the wardrobe the engine scores against."""

    def get_item(self, item_id: str) -> Optional[WardrobeItem]:
        raise NotImplementedError

    def get_items(self, item_ids: Iterable[str]) -> List[WardrobeItem]:
        raise NotImplementedError

    def list_items(self, categories: Optional[Iterable[str]] = None) -> List[WardrobeItem]:
        raise NotImplementedError


class InMemoryWardrobeStore(WardrobeStore):
    """Dictionary-backed store, loaded once from items or raw rows."""

    def __init__(self, items: Iterable[WardrobeItem] = ()) -> None:
        self._items: Dict[str, WardrobeItem] = {}
        for item in items:
            self.add_item(item)

    @classmethod
    def from_rows(cls, rows: Iterable[Dict[str, object]]) -> "InMemoryWardrobeStore":
        return cls(from_raw_metadata(row) for row in rows)

    def add_item(self, item: WardrobeItem) -> WardrobeItem:
        self._items[item.id] = item
        return item

    def get_item(self, item_id: str) -> Optional[WardrobeItem]:
        item = self._items.get(item_id)
        return item if item and item.active else None

    def get_items(self, item_ids: Iterable[str]) -> List[WardrobeItem]:
        """Active items for the given ids, in request order, skipping unknown ids."""

        found = []
        seen = set()
        for item_id in item_ids:
            item = self.get_item(item_id)
            if item is not None and item.id not in seen:
                found.append(item)
                seen.add(item.id)
        return found

    def list_items(self, categories: Optional[Iterable[str]] = None) -> List[WardrobeItem]:
        wanted = {normalize_label(category) for category in categories} if categories else None
        items = [item for item in self._items.values() if item.active]
        if wanted is not None:
            items = [item for item in items if normalize_label(item.category_name) in wanted]
        return sorted(items, key=lambda item: item.id)


__all__ = ["InMemoryWardrobeStore", "WardrobeStore"]
