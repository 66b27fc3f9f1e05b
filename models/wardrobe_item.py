"""Wardrobe item data model and helpers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, List, Optional

from models.taxonomy import (
    MAX_FORMALITY,
    MIN_FORMALITY,
    SEASON_ALL,
    normalize_color_name,
)


def _ensure_list(value: Any) -> List[Any]:
    """Coerce a scalar or iterable into a list."""

    if value is None:
        return []
    if isinstance(value, (list, tuple, set, frozenset)):
        return list(value)
    return [value]


def _normalise_tags(values: Iterable[Any]) -> FrozenSet[str]:
    return frozenset(str(value).strip() for value in values if str(value).strip())


def _normalise_seasons(values: Iterable[Any]) -> FrozenSet[str]:
    """Absent or empty season data means the item suits every season."""

    seasons = _normalise_tags(values)
    return seasons or frozenset({SEASON_ALL})


def coerce_formality(value: Any) -> Optional[int]:
    """Return a formality score in range, or ``None`` for anything unusable."""

    if value is None or isinstance(value, bool):
        return None
    try:
        score = int(value)
    except (TypeError, ValueError):
        return None
    if isinstance(value, float) and score != value:
        return None
    if not MIN_FORMALITY <= score <= MAX_FORMALITY:
        return None
    return score


@dataclass(frozen=True)
class WardrobeItem:
    """Represents an item in the user's wardrobe.

    Items are immutable once loaded; the engine only borrows them for scoring
    and filtering.
    """

    id: str
    name: str
    category_name: str
    color: Optional[str] = None
    formality_score: Optional[int] = None
    capsule_tags: FrozenSet[str] = field(default_factory=frozenset)
    season: FrozenSet[str] = field(default_factory=lambda: frozenset({SEASON_ALL}))
    material: Optional[str] = None
    brand: Optional[str] = None
    active: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "formality_score", coerce_formality(self.formality_score))
        color = str(self.color).strip() if self.color is not None else ""
        object.__setattr__(self, "color", color or None)
        object.__setattr__(self, "capsule_tags", _normalise_tags(_ensure_list(self.capsule_tags)))
        object.__setattr__(self, "season", _normalise_seasons(_ensure_list(self.season)))

    @property
    def color_key(self) -> Optional[str]:
        """Lower-cased colour used for every colour comparison."""

        return normalize_color_name(self.color)

    def fits_season(self, target_season: str) -> bool:
        return SEASON_ALL in self.season or target_season in self.season

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "category_name": self.category_name,
            "color": self.color,
            "formality_score": self.formality_score,
            "capsule_tags": sorted(self.capsule_tags),
            "season": sorted(self.season),
            "material": self.material,
            "brand": self.brand,
            "active": self.active,
        }


def from_raw_metadata(metadata: Dict[str, Any]) -> WardrobeItem:
    """Factory to build a :class:`WardrobeItem` from a loose store row.

    Accepts the nested ``categories: {"name": ...}`` shape returned by the
    wardrobe store as well as a flat ``category_name``.
    """

    raw = dict(metadata)
    category = raw.get("categories")
    if not raw.get("category_name") and isinstance(category, dict):
        raw["category_name"] = category.get("name")

    required_fields = ["id", "name", "category_name"]
    missing = [key for key in required_fields if not raw.get(key)]
    if missing:
        raise ValueError(f"Missing required fields for WardrobeItem: {missing}")

    color = raw.get("color")
    return WardrobeItem(
        id=str(raw["id"]),
        name=str(raw["name"]),
        category_name=str(raw["category_name"]),
        color=str(color) if isinstance(color, str) else None,
        formality_score=raw.get("formality_score"),
        capsule_tags=_ensure_list(raw.get("capsule_tags")),
        season=_ensure_list(raw.get("season")),
        material=raw.get("material") if isinstance(raw.get("material"), str) else None,
        brand=raw.get("brand") if isinstance(raw.get("brand"), str) else None,
        active=bool(raw.get("active", True)),
    )


__all__ = ["WardrobeItem", "coerce_formality", "from_raw_metadata"]
