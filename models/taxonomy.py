"""Canonical taxonomy definitions for wardrobe items.

This module centralises the enumerations shared by the stores, the AI gateway
and the triage flow, together with the table of legal status transitions.
"""

from enum import Enum
from typing import Dict, FrozenSet, Optional


class ItemStatus(str, Enum):
    ACTIVE = "ACTIVE"
    RESERVED = "RESERVED"
    DONATED = "DONATED"
    TRANSFORMED = "TRANSFORMED"


class SuggestedAction(str, Enum):
    DONATE = "DONATE"
    TRANSFORM = "TRANSFORM"
    RESERVE = "RESERVE"


class TriageDecision(str, Enum):
    """What the user chose for one analysis card."""

    DONATE = "DONATE"
    TRANSFORM = "TRANSFORM"
    RESERVE = "RESERVE"
    KEEP = "KEEP"


class Difficulty(str, Enum):
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"


CATEGORIES = [
    "Shirts",
    "Skirts",
    "Jeans",
    "Pajamas",
    "Socks",
    "Shoes",
    "Dresses",
    "Outerwear",
    "Other",
]
ALL_CATEGORIES = "All"
FALLBACK_CATEGORY = "Other"

DECISION_STATUS: Dict[TriageDecision, ItemStatus] = {
    TriageDecision.DONATE: ItemStatus.DONATED,
    TriageDecision.TRANSFORM: ItemStatus.TRANSFORMED,
    TriageDecision.RESERVE: ItemStatus.RESERVED,
    TriageDecision.KEEP: ItemStatus.RESERVED,
}

# Re-applying the current status is always legal and not listed here.
ALLOWED_TRANSITIONS: Dict[ItemStatus, FrozenSet[ItemStatus]] = {
    ItemStatus.ACTIVE: frozenset({ItemStatus.RESERVED, ItemStatus.DONATED, ItemStatus.TRANSFORMED}),
    ItemStatus.RESERVED: frozenset({ItemStatus.ACTIVE, ItemStatus.DONATED, ItemStatus.TRANSFORMED}),
    ItemStatus.DONATED: frozenset(),
    ItemStatus.TRANSFORMED: frozenset(),
}


def _normalize_key(value: str) -> str:
    return value.strip().lower()


_CATEGORY_LOOKUP = {_normalize_key(name): name for name in CATEGORIES}


def validate_category(value: str) -> str:
    """Validate and normalise a category value.

    Matching is case-insensitive; the canonical spelling is returned. Raises a
    :class:`ValueError` if the category is not part of the taxonomy.
    """

    key = _normalize_key(str(value))
    if key not in _CATEGORY_LOOKUP:
        raise ValueError(f"Unsupported category '{value}'. Allowed: {CATEGORIES}")
    return _CATEGORY_LOOKUP[key]


def coerce_category(value: Optional[str]) -> str:
    """Like :func:`validate_category` but falls back to ``Other``."""

    if not value:
        return FALLBACK_CATEGORY
    try:
        return validate_category(value)
    except ValueError:
        return FALLBACK_CATEGORY


def coerce_status(value: "ItemStatus | str") -> ItemStatus:
    if isinstance(value, ItemStatus):
        return value
    try:
        return ItemStatus(str(value).strip().upper())
    except ValueError as exc:
        raise ValueError(f"Unsupported status '{value}'. Allowed: {[s.value for s in ItemStatus]}") from exc


def is_transition_allowed(current: ItemStatus, target: ItemStatus) -> bool:
    """Return True when ``current`` may move to ``target``."""

    return current == target or target in ALLOWED_TRANSITIONS[current]


__all__ = [
    "ItemStatus",
    "SuggestedAction",
    "TriageDecision",
    "Difficulty",
    "CATEGORIES",
    "ALL_CATEGORIES",
    "FALLBACK_CATEGORY",
    "DECISION_STATUS",
    "ALLOWED_TRANSITIONS",
    "validate_category",
    "coerce_category",
    "coerce_status",
    "is_transition_allowed",
]
