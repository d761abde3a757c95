"""Pydantic schemas for validating AI replies and API payloads."""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

from models.analysis import AICategorization, AnalysisResult, TransformationGuide
from models.taxonomy import Difficulty, SuggestedAction, coerce_category


class CategorizationPayload(BaseModel):
    """Reply contract for image categorization.

    Blank or missing attributes are filled with neutral defaults rather than
    failing the upload; a reply that is not an object is still rejected.
    """

    name: Optional[str] = None
    category: Optional[str] = None
    color: Optional[str] = None
    material: Optional[str] = None

    def to_domain(self) -> AICategorization:
        return AICategorization(
            name=(self.name or "").strip() or "New Item",
            category=coerce_category(self.category),
            color=(self.color or "").strip() or "Unknown",
            material=(self.material or "").strip() or "Unknown",
        )


class AnalysisResultPayload(BaseModel):
    """Reply contract for one usage-analysis entry."""

    model_config = ConfigDict(populate_by_name=True)

    item_id: str = Field(alias="itemId", min_length=1)
    reasoning: str
    suggested_action: SuggestedAction = Field(alias="suggestedAction")
    wear_probability: float = Field(alias="wearProbability")

    @field_validator("suggested_action", mode="before")
    @classmethod
    def _upper_action(cls, value: Any) -> Any:
        return value.strip().upper() if isinstance(value, str) else value

    @field_validator("wear_probability")
    @classmethod
    def _clamp_probability(cls, value: float) -> float:
        return min(1.0, max(0.0, value))

    def to_domain(self) -> AnalysisResult:
        return AnalysisResult(
            item_id=self.item_id,
            reasoning=self.reasoning,
            suggested_action=self.suggested_action,
            wear_probability=self.wear_probability,
        )


AnalysisBatch = TypeAdapter(List[AnalysisResultPayload])


class TransformationGuidePayload(BaseModel):
    """Reply contract for DIY guide generation."""

    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(min_length=1)
    difficulty: Difficulty
    tools_needed: List[str] = Field(alias="toolsNeeded", default_factory=list)
    steps: List[str] = Field(min_length=1)

    @field_validator("difficulty", mode="before")
    @classmethod
    def _title_case_difficulty(cls, value: Any) -> Any:
        return value.strip().capitalize() if isinstance(value, str) else value

    def to_domain(self) -> TransformationGuide:
        return TransformationGuide(
            title=self.title,
            difficulty=self.difficulty,
            tools_needed=list(self.tools_needed),
            steps=list(self.steps),
        )


class ItemUpdateRequest(BaseModel):
    """User edits to an item's descriptive attributes."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    name: Optional[str] = Field(None, min_length=1)
    category: Optional[str] = Field(None, min_length=1)
    color: Optional[str] = Field(None, min_length=1)
    material: Optional[str] = Field(None, min_length=1)


class ProfileEntryRequest(BaseModel):
    """A single style, color or disliked element to add or remove."""

    value: str = Field(min_length=1)


class DecisionRequest(BaseModel):
    decision: Literal["DONATE", "TRANSFORM", "RESERVE", "KEEP"]


class SwipeRequest(BaseModel):
    """Card drag offset in pixels; negative y is upwards."""

    offset_x: float = 0.0
    offset_y: float = 0.0


class ValidationResult(BaseModel):
    """Wrapper returned when validation fails."""

    status: Literal["needs_review"] = "needs_review"
    message: str
    details: List[Dict[str, Any]]


def validation_failure(message: str, exc: ValidationError) -> Dict[str, Any]:
    """Translate Pydantic errors into a consistent review payload."""

    return ValidationResult(message=message, details=exc.errors(include_url=False)).model_dump()


__all__ = [
    "CategorizationPayload",
    "AnalysisResultPayload",
    "AnalysisBatch",
    "TransformationGuidePayload",
    "ItemUpdateRequest",
    "ProfileEntryRequest",
    "DecisionRequest",
    "SwipeRequest",
    "ValidationResult",
    "validation_failure",
]
