"""Navigation and detail-panel state for one app session."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from models.analysis import TransformationGuide
from models.taxonomy import ALL_CATEGORIES, ItemStatus
from models.wardrobe_item import WardrobeItem


class Tab(str, Enum):
    WARDROBE = "wardrobe"
    ANALYSIS = "analysis"
    FOLDERS = "folders"
    PROFILE = "profile"


@dataclass
class ViewState:
    """What the user is currently looking at.

    ``detail_item`` is a snapshot and must be refreshed whenever the store
    changes the item it shows.
    """

    active_tab: Tab = Tab.WARDROBE
    selected_category: str = ALL_CATEGORIES
    selected_folder: ItemStatus = ItemStatus.ACTIVE
    detail_item: Optional[WardrobeItem] = None
    transformation: Optional[TransformationGuide] = None

    def show_detail(self, item: WardrobeItem) -> None:
        self.detail_item = item
        self.transformation = None

    def close_detail(self) -> None:
        self.detail_item = None
        self.transformation = None

    def refresh_detail(self, item: WardrobeItem) -> None:
        if self.detail_item is not None and self.detail_item.id == item.id:
            self.detail_item = item


__all__ = ["Tab", "ViewState"]
