"""Pydantic schemas and helpers for validating outfit tool payloads."""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from models.taxonomy import SEASON_LABELS


class _SeasonedRequest(BaseModel):
    target_season: str = "All"

    @field_validator("target_season")
    @classmethod
    def _validate_season(cls, value: str) -> str:
        normalised = value.strip().capitalize()
        if normalised not in SEASON_LABELS:
            raise ValueError(f"target_season must be one of {list(SEASON_LABELS)}")
        return normalised


class ScoreOutfitRequest(_SeasonedRequest):
    """Input contract for scoring a set of wardrobe items as one outfit."""

    item_ids: List[str] = Field(min_length=1)
    tuck_style: Literal["Tucked", "Untucked"] = "Untucked"


class FilterByAnchorRequest(_SeasonedRequest):
    """Input contract for ranking candidates against an anchor item."""

    anchor_item_id: str = Field(min_length=1)
    target_categories: Optional[List[str]] = None
    min_compatibility_score: Optional[int] = Field(default=None, ge=0, le=100)
    limit: Optional[int] = Field(default=None, ge=1)


class ValidationResult(BaseModel):
    """Wrapper returned to callers when validation fails."""

    status: Literal["needs_review"] = "needs_review"
    message: str
    details: List[Dict[str, Any]]


def validation_failure(message: str, exc: ValidationError) -> Dict[str, Any]:
    """Translate Pydantic errors into a consistent review payload."""

    details = [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg", ""), "type": error.get("type", "")}
        for error in exc.errors()
    ]
    return ValidationResult(message=message, details=details).model_dump()


__all__ = [
    "FilterByAnchorRequest",
    "ScoreOutfitRequest",
    "ValidationResult",
    "validation_failure",
]
