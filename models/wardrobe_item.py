"""Wardrobe item data model and helpers."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

from models.taxonomy import ItemStatus, coerce_status, validate_category


@dataclass
class WardrobeItem:
    """One physical clothing item."""

    id: str
    name: str
    category: str
    color: str
    material: str
    image_url: str
    purchase_date: str
    last_worn_date: Optional[str] = None
    wear_count: int = 0
    status: ItemStatus = ItemStatus.ACTIVE
    reserve_reason: Optional[str] = None

    def __post_init__(self) -> None:
        self.category = validate_category(self.category)
        self.status = coerce_status(self.status)
        self.wear_count = int(self.wear_count)
        if self.wear_count < 0:
            raise ValueError(f"wear_count cannot be negative: {self.wear_count}")

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["status"] = self.status.value
        return data


def from_raw_metadata(metadata: Dict[str, Any]) -> WardrobeItem:
    """Factory to build a :class:`WardrobeItem` from a persisted record."""

    required_fields = ["id", "name", "category", "purchase_date"]
    missing = [field for field in required_fields if not metadata.get(field)]
    if missing:
        raise ValueError(f"Missing required fields for WardrobeItem: {missing}")

    return WardrobeItem(
        id=str(metadata["id"]),
        name=str(metadata["name"]),
        category=str(metadata["category"]),
        color=str(metadata.get("color") or "Unknown"),
        material=str(metadata.get("material") or "Unknown"),
        image_url=str(metadata.get("image_url") or ""),
        purchase_date=str(metadata["purchase_date"]),
        last_worn_date=metadata.get("last_worn_date"),
        wear_count=metadata.get("wear_count", 0) or 0,
        status=metadata.get("status", ItemStatus.ACTIVE.value),
        reserve_reason=metadata.get("reserve_reason"),
    )


__all__ = ["WardrobeItem", "from_raw_metadata"]
