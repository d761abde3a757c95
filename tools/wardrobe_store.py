"""Wardrobe item collection persisted as a single key-value record."""
from __future__ import annotations

import logging
import threading
from dataclasses import replace
from datetime import date
from typing import Any, Callable, Dict, List, Mapping, Optional
from uuid import uuid4

from eco_app.config import ITEMS_KEY
from eco_app.logging_config import get_logger, log_event
from models.errors import NotFoundError, StatusTransitionError
from models.taxonomy import (
    ALL_CATEGORIES,
    ItemStatus,
    coerce_status,
    is_transition_allowed,
    validate_category,
)
from models.wardrobe_item import WardrobeItem, from_raw_metadata
from tools.kv_storage import KeyValueStorage

LOGGER = get_logger(__name__)
EDITABLE_FIELDS = {"name", "category", "color", "material"}


class WardrobeStore:
    """In-memory item collection flushed in full after every mutation.

    Insertion order is preserved. Lookups by unknown id are silent no-ops for
    mutations and return ``None``; :meth:`require_item` raises instead.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        key: str = ITEMS_KEY,
        today: Callable[[], date] = date.today,
        id_factory: Callable[[], str] = lambda: str(uuid4()),
    ) -> None:
        self.storage = storage
        self.key = key
        self._today = today
        self._id_factory = id_factory
        self._lock = threading.RLock()
        self._items: List[WardrobeItem] = []
        self._unreadable: List[Any] = []
        self.load()

    def load(self) -> None:
        """Replace the in-memory collection with the persisted record.

        Records that cannot be parsed are left out of the collection but kept
        verbatim and written back on every flush.
        """

        raw = self.storage.get(self.key)
        items: List[WardrobeItem] = []
        unreadable: List[Any] = []
        for record in raw or []:
            try:
                items.append(from_raw_metadata(record))
            except (AttributeError, TypeError, ValueError) as exc:
                unreadable.append(record)
                log_event(
                    LOGGER,
                    logging.WARNING,
                    "wardrobe_record_skipped",
                    reason=str(exc),
                    item_id=record.get("id") if isinstance(record, dict) else None,
                )
        with self._lock:
            self._items = items
            self._unreadable = unreadable

    def flush(self) -> None:
        with self._lock:
            self.storage.put(self.key, [item.to_dict() for item in self._items] + self._unreadable)

    def _index(self, item_id: str) -> Optional[int]:
        for idx, item in enumerate(self._items):
            if item.id == item_id:
                return idx
        return None

    def add_item(self, attrs: Mapping[str, Any]) -> WardrobeItem:
        """Create an ACTIVE item from descriptive attributes and append it."""

        item = WardrobeItem(
            id=self._id_factory(),
            name=str(attrs.get("name") or "New Item"),
            category=str(attrs.get("category") or "Other"),
            color=str(attrs.get("color") or "Unknown"),
            material=str(attrs.get("material") or "Unknown"),
            image_url=str(attrs.get("image_url") or ""),
            purchase_date=self._today().isoformat(),
        )
        with self._lock:
            self._items.append(item)
            self.flush()
        log_event(LOGGER, logging.INFO, "wardrobe_item_added", item_id=item.id, category=item.category)
        return replace(item)

    def get_item(self, item_id: str) -> Optional[WardrobeItem]:
        with self._lock:
            idx = self._index(item_id)
            return replace(self._items[idx]) if idx is not None else None

    def require_item(self, item_id: str) -> WardrobeItem:
        item = self.get_item(item_id)
        if item is None:
            raise NotFoundError(item_id)
        return item

    def record_worn(self, item_id: str) -> Optional[WardrobeItem]:
        """Count one wear today; unknown ids are ignored."""

        with self._lock:
            idx = self._index(item_id)
            if idx is None:
                return None
            current = self._items[idx]
            updated = replace(
                current,
                wear_count=current.wear_count + 1,
                last_worn_date=self._today().isoformat(),
            )
            self._items[idx] = updated
            self.flush()
        log_event(LOGGER, logging.INFO, "wardrobe_item_worn", item_id=item_id, wear_count=updated.wear_count)
        return replace(updated)

    def set_status(
        self,
        item_id: str,
        status: ItemStatus | str,
        reserve_reason: Optional[str] = None,
    ) -> Optional[WardrobeItem]:
        """Move an item to ``status``.

        Raises :class:`StatusTransitionError` for transitions outside the
        taxonomy table. Re-applying the current status changes nothing.
        """

        target = coerce_status(status)
        with self._lock:
            idx = self._index(item_id)
            if idx is None:
                return None
            current = self._items[idx]
            if not is_transition_allowed(current.status, target):
                raise StatusTransitionError(item_id, current.status.value, target.value)
            if current.status == target and (reserve_reason is None or reserve_reason == current.reserve_reason):
                return replace(current)

            if target == ItemStatus.RESERVED:
                reason = reserve_reason if reserve_reason is not None else current.reserve_reason
            else:
                reason = None
            updated = replace(current, status=target, reserve_reason=reason)
            self._items[idx] = updated
            self.flush()
        log_event(
            LOGGER,
            logging.INFO,
            "wardrobe_status_changed",
            item_id=item_id,
            previous=current.status.value,
            status=target.value,
        )
        return replace(updated)

    def restore(self, item_id: str) -> Optional[WardrobeItem]:
        """Return a reserved item to the active closet."""

        return self.set_status(item_id, ItemStatus.ACTIVE)

    def update_item(self, item_id: str, updated_fields: Dict[str, Any]) -> Optional[WardrobeItem]:
        """Edit descriptive attributes; ids, counters and status are not editable."""

        unknown = set(updated_fields) - EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"Fields not editable: {sorted(unknown)}")

        changes = {key: str(value).strip() for key, value in updated_fields.items() if value is not None}
        blank = sorted(key for key, value in changes.items() if not value)
        if blank:
            raise ValueError(f"Fields cannot be blank: {blank}")
        if "category" in changes:
            changes["category"] = validate_category(changes["category"])

        with self._lock:
            idx = self._index(item_id)
            if idx is None:
                return None
            updated = replace(self._items[idx], **changes)
            self._items[idx] = updated
            self.flush()
        log_event(LOGGER, logging.INFO, "wardrobe_item_updated", item_id=item_id, fields=sorted(changes))
        return replace(updated)

    def list_items(self) -> List[WardrobeItem]:
        with self._lock:
            return [replace(item) for item in self._items]

    def list_by_status(self, status: ItemStatus | str) -> List[WardrobeItem]:
        target = coerce_status(status)
        return [item for item in self.list_items() if item.status == target]

    def list_by_category(self, category: str) -> List[WardrobeItem]:
        if category == ALL_CATEGORIES:
            return self.list_items()
        key = validate_category(category)
        return [item for item in self.list_items() if item.category == key]

    def list_active_by_category(self, category: str = ALL_CATEGORIES) -> List[WardrobeItem]:
        """Items shown in the closet view: ACTIVE and in ``category``."""

        return [item for item in self.list_by_category(category) if item.status == ItemStatus.ACTIVE]

    def count_by_status(self) -> Dict[str, int]:
        counts = {status.value: 0 for status in ItemStatus}
        for item in self.list_items():
            counts[item.status.value] += 1
        return counts


__all__ = ["WardrobeStore", "EDITABLE_FIELDS"]
