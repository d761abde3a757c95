"""Style profile model."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List

DEFAULT_STYLES = ["Minimalist", "Casual"]
DEFAULT_COLORS = ["Beige", "Black", "White"]


@dataclass
class StyleProfile:
    """The user's curated style preferences."""

    preferred_styles: List[str] = field(default_factory=list)
    preferred_colors: List[str] = field(default_factory=list)
    disliked_elements: List[str] = field(default_factory=list)

    @classmethod
    def default(cls) -> "StyleProfile":
        return cls(
            preferred_styles=list(DEFAULT_STYLES),
            preferred_colors=list(DEFAULT_COLORS),
            disliked_elements=[],
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StyleProfile":
        return cls(
            preferred_styles=[str(v) for v in data.get("preferred_styles") or []],
            preferred_colors=[str(v) for v in data.get("preferred_colors") or []],
            disliked_elements=[str(v) for v in data.get("disliked_elements") or []],
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


__all__ = ["StyleProfile", "DEFAULT_STYLES", "DEFAULT_COLORS"]
