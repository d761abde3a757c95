"""Exception types shared across the EcoWardrobe packages."""


class WardrobeError(Exception):
    """Base class for EcoWardrobe errors."""


class GatewayError(WardrobeError):
    """The AI service failed or returned an empty or malformed reply."""


class CategorizationError(GatewayError):
    """Image categorization produced no usable result."""


class NotFoundError(WardrobeError, LookupError):
    """An operation referenced an item id that is not in the store."""

    def __init__(self, item_id: str) -> None:
        super().__init__(f"Unknown wardrobe item {item_id}")
        self.item_id = item_id


class StatusTransitionError(WardrobeError, ValueError):
    """A status change is not permitted from the item's current status."""

    def __init__(self, item_id: str, current: str, target: str) -> None:
        super().__init__(f"Item {item_id} cannot move from {current} to {target}")
        self.item_id = item_id
        self.current = current
        self.target = target


class TriageStateError(WardrobeError):
    """A triage operation was requested from the wrong workflow state."""


class GuideUnavailableError(WardrobeError):
    """A transformation guide was requested for an item that is not transformed."""


__all__ = [
    "WardrobeError",
    "GatewayError",
    "CategorizationError",
    "NotFoundError",
    "StatusTransitionError",
    "TriageStateError",
    "GuideUnavailableError",
]
