"""Transient results produced by the AI gateway."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List

from models.taxonomy import Difficulty, SuggestedAction


@dataclass(frozen=True)
class AICategorization:
    """Attributes suggested for a freshly photographed item."""

    name: str
    category: str
    color: str
    material: str


@dataclass(frozen=True)
class AnalysisResult:
    """One usage-analysis suggestion for an ACTIVE item.

    ``wear_probability`` is advisory and not used by any decision logic.
    """

    item_id: str
    reasoning: str
    suggested_action: SuggestedAction
    wear_probability: float

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["suggested_action"] = self.suggested_action.value
        return data


@dataclass(frozen=True)
class TransformationGuide:
    """A DIY upcycling guide; steps are sequential."""

    title: str
    difficulty: Difficulty
    tools_needed: List[str] = field(default_factory=list)
    steps: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["difficulty"] = self.difficulty.value
        return data


__all__ = ["AICategorization", "AnalysisResult", "TransformationGuide"]
