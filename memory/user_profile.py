"""Style profile store persisted as a single key-value record."""

import logging
import threading
from dataclasses import replace
from typing import List

from eco_app.config import PROFILE_KEY
from eco_app.logging_config import get_logger, log_event
from models.style_profile import StyleProfile
from tools.kv_storage import KeyValueStorage

LOGGER = get_logger(__name__)

_FIELDS = {
    "styles": "preferred_styles",
    "colors": "preferred_colors",
    "disliked": "disliked_elements",
}


class StyleProfileStore:
    """Holds the singleton style profile and persists it on every change.

    Lists keep insertion order. Duplicates are not rejected here; removing a
    value drops every occurrence of it.
    """

    def __init__(self, storage: KeyValueStorage, key: str = PROFILE_KEY) -> None:
        self.storage = storage
        self.key = key
        self._lock = threading.RLock()
        self._profile = StyleProfile.default()
        self.load()

    def load(self) -> None:
        data = self.storage.get(self.key)
        profile = StyleProfile.from_dict(data) if isinstance(data, dict) else StyleProfile.default()
        with self._lock:
            self._profile = profile

    def flush(self) -> None:
        with self._lock:
            self.storage.put(self.key, self._profile.to_dict())

    @property
    def profile(self) -> StyleProfile:
        with self._lock:
            return StyleProfile.from_dict(self._profile.to_dict())

    def _add(self, kind: str, value: str) -> StyleProfile:
        entry = value.strip()
        if not entry:
            return self.profile
        field_name = _FIELDS[kind]
        with self._lock:
            values: List[str] = list(getattr(self._profile, field_name))
            values.append(entry)
            self._profile = replace(self._profile, **{field_name: values})
            self.flush()
        log_event(LOGGER, logging.INFO, "style_profile_updated", field=field_name, op="add")
        return self.profile

    def _remove(self, kind: str, value: str) -> StyleProfile:
        field_name = _FIELDS[kind]
        with self._lock:
            values = [v for v in getattr(self._profile, field_name) if v != value]
            self._profile = replace(self._profile, **{field_name: values})
            self.flush()
        log_event(LOGGER, logging.INFO, "style_profile_updated", field=field_name, op="remove")
        return self.profile

    def add_style(self, tag: str) -> StyleProfile:
        return self._add("styles", tag)

    def remove_style(self, tag: str) -> StyleProfile:
        return self._remove("styles", tag)

    def add_color(self, color: str) -> StyleProfile:
        return self._add("colors", color)

    def remove_color(self, color: str) -> StyleProfile:
        return self._remove("colors", color)

    def add_disliked(self, element: str) -> StyleProfile:
        return self._add("disliked", element)

    def remove_disliked(self, element: str) -> StyleProfile:
        return self._remove("disliked", element)
