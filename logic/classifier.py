"""Rule-based classification of outer layers into Jacket or Overshirt.

Rules are evaluated in descending priority and the first match wins, so
priority encodes specificity. The same rule set resolves an anchor item's own
slot during outfit building and reclassifies legacy combined-category items in
bulk during migration.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional

from models.taxonomy import (
    JACKET_LABEL,
    OVERSHIRT_LABEL,
    CategorySlot,
    is_legacy_outer_layer,
    slot_for_category,
)
from models.wardrobe_item import WardrobeItem

logger = logging.getLogger(__name__)

DEFAULT_RULE_NAME = "default_fallback"
DEFAULT_CONFIDENCE = 0.1


@dataclass(frozen=True)
class GarmentTraits:
    """The attributes classification rules look at."""

    name: str
    formality_score: Optional[int] = None
    material: Optional[str] = None

    @property
    def formality(self) -> int:
        # Missing formality compares as 0: never formal, always casual.
        return self.formality_score or 0

    @classmethod
    def from_item(cls, item: WardrobeItem) -> "GarmentTraits":
        return cls(name=item.name or "", formality_score=item.formality_score, material=item.material)


@dataclass(frozen=True)
class ClassificationRule:
    name: str
    priority: int
    category: str
    matches: Callable[[GarmentTraits], bool]


@dataclass(frozen=True)
class ClassificationResult:
    category: str
    reason: str
    rule: str
    confidence: float


def _words(*patterns: str) -> "re.Pattern[str]":
    return re.compile(r"\b(" + "|".join(patterns) + r")\b", re.IGNORECASE)


_STRUCTURED_OUTERWEAR = _words("coat", "blazer", "sportcoat", r"pea[\s-]?coat", "trench", r"mac[\s-]coat")
_HEAVY_OUTERWEAR = _words(r"moto[\s-]jacket", r"leather[\s-]jacket", "bomber", "gilet", "vest")
_JACKET = re.compile("jacket", re.IGNORECASE)
_STRUCTURED_JACKET = _words(
    r"suit[\s-]jacket", r"dinner[\s-]jacket", "tuxedo", r"smoking[\s-]jacket"
)
_KNITWEAR = _words("cardigan", "sweater", "knit", "pullover", "hoodie", "sweatshirt")
_CASUAL_LAYER = _words("shacket", "overshirt", r"shirt[\s-]jacket", "flannel", "chambray")
_LIGHT_LAYER = _words("layer", "light", "casual")
_LIGHT_MATERIAL = _words("denim", "corduroy", "cotton")


def default_rules() -> List[ClassificationRule]:
    return [
        ClassificationRule(
            "structured_outerwear", 10, JACKET_LABEL, lambda t: bool(_STRUCTURED_OUTERWEAR.search(t.name))
        ),
        ClassificationRule("heavy_outerwear", 9, JACKET_LABEL, lambda t: bool(_HEAVY_OUTERWEAR.search(t.name))),
        ClassificationRule(
            "formal_outerwear", 8, JACKET_LABEL, lambda t: t.formality >= 7 and bool(_JACKET.search(t.name))
        ),
        ClassificationRule(
            "structured_jacket_keywords", 7, JACKET_LABEL, lambda t: bool(_STRUCTURED_JACKET.search(t.name))
        ),
        ClassificationRule("knit_outerwear", 5, OVERSHIRT_LABEL, lambda t: bool(_KNITWEAR.search(t.name))),
        ClassificationRule("casual_layering", 4, OVERSHIRT_LABEL, lambda t: bool(_CASUAL_LAYER.search(t.name))),
        ClassificationRule(
            "light_layers",
            3,
            OVERSHIRT_LABEL,
            lambda t: t.formality <= 6
            and (bool(_LIGHT_LAYER.search(t.name)) or bool(_LIGHT_MATERIAL.search(t.material or ""))),
        ),
        ClassificationRule("casual_formality_score", 2, OVERSHIRT_LABEL, lambda t: t.formality <= 5),
    ]


class ItemClassifier:
    """Classifies outer layers with a priority-ordered, editable rule list."""

    def __init__(self, rules: Optional[Iterable[ClassificationRule]] = None) -> None:
        self._rules: List[ClassificationRule] = []
        for rule in default_rules() if rules is None else rules:
            self.add_rule(rule)

    @property
    def rules(self) -> List[ClassificationRule]:
        return list(self._rules)

    def add_rule(self, rule: ClassificationRule) -> None:
        self._rules.append(rule)
        # Stable sort keeps insertion order among equal priorities.
        self._rules.sort(key=lambda r: -r.priority)

    def remove_rule(self, rule_name: str) -> None:
        self._rules = [rule for rule in self._rules if rule.name != rule_name]

    def _match(self, traits: GarmentTraits) -> Optional[ClassificationRule]:
        for rule in self._rules:
            if rule.matches(traits):
                return rule
        return None

    def classify(
        self, item_name: str, formality_score: Optional[int] = None, material: Optional[str] = None
    ) -> str:
        traits = GarmentTraits(name=item_name or "", formality_score=formality_score, material=material)
        rule = self._match(traits)
        return rule.category if rule else OVERSHIRT_LABEL

    def classify_item(self, item: WardrobeItem) -> str:
        return self.classification_result(item).category

    def classification_result(self, item: WardrobeItem) -> ClassificationResult:
        """Classify an item and explain which rule decided it."""

        rule = self._match(GarmentTraits.from_item(item))
        if rule is None:
            result = ClassificationResult(
                category=OVERSHIRT_LABEL,
                reason=f"Classified as {OVERSHIRT_LABEL} by default fallback",
                rule=DEFAULT_RULE_NAME,
                confidence=DEFAULT_CONFIDENCE,
            )
        else:
            result = ClassificationResult(
                category=rule.category,
                reason=f"Classified as {rule.category} by rule: {rule.name}",
                rule=rule.name,
                confidence=rule.priority / 10,
            )
        logger.debug("classified %s -> %s via %s", item.id, result.category, result.rule)
        return result

    def classify_items(self, items: Iterable[WardrobeItem]) -> List[ClassificationResult]:
        """Bulk classification used by the category migration."""

        results = [self.classification_result(item) for item in items]
        logger.info("Classified %s items", len(results))
        return results

    def rule_statistics(self) -> Dict[str, float]:
        jacket_rules = sum(1 for rule in self._rules if rule.category == JACKET_LABEL)
        overshirt_rules = sum(1 for rule in self._rules if rule.category == OVERSHIRT_LABEL)
        average = sum(rule.priority for rule in self._rules) / len(self._rules) if self._rules else 0.0
        return {
            "total_rules": len(self._rules),
            "jacket_rules": jacket_rules,
            "overshirt_rules": overshirt_rules,
            "average_priority": average,
        }


default_classifier = ItemClassifier()


def classify(item_name: str, formality_score: Optional[int] = None, material: Optional[str] = None) -> str:
    """Classify a garment name with the default rule set. Never fails."""

    return default_classifier.classify(item_name, formality_score, material)


def resolve_slot(item: WardrobeItem, classifier: Optional[ItemClassifier] = None) -> Optional[CategorySlot]:
    """Locate the slot an item belongs in.

    Known labels go through the lookup table. Items still carrying the legacy
    combined outer-layer label are classified by name. Anything else has no
    slot and returns ``None``.
    """

    slot = slot_for_category(item.category_name)
    if slot is not None:
        return slot
    if is_legacy_outer_layer(item.category_name):
        label = (classifier or default_classifier).classify_item(item)
        return slot_for_category(label)
    logger.debug("No slot for category %r on item %s", item.category_name, item.id)
    return None


__all__ = [
    "ClassificationResult",
    "ClassificationRule",
    "GarmentTraits",
    "ItemClassifier",
    "classify",
    "default_classifier",
    "default_rules",
    "resolve_slot",
]
