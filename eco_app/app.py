"""EcoWardrobe app session: wires stores, the AI gateway and triage together."""

from __future__ import annotations

import base64
import logging
from datetime import date
from typing import Any, Callable, Dict, List, Optional

from eco_app.config import EcoConfig
from eco_app.logging_config import configure_logging, get_logger, log_event, operation_context
from eco_app.view_state import Tab, ViewState
from logic.triage import TriageState, TriageWorkflow, decision_for_swipe
from memory.user_profile import StyleProfileStore
from models.analysis import TransformationGuide
from models.errors import GatewayError, GuideUnavailableError
from models.taxonomy import ALL_CATEGORIES, ItemStatus, TriageDecision, coerce_status, validate_category
from models.wardrobe_item import WardrobeItem
from tools.ai_gateway import GeminiClient, GenerativeClient, WardrobeGateway
from tools.kv_storage import KeyValueStorage, build_storage
from tools.wardrobe_store import WardrobeStore

LOGGER = get_logger(__name__)


def image_data_url(image_bytes: bytes, mime_type: str) -> str:
    return f"data:{mime_type};base64,{base64.b64encode(image_bytes).decode('ascii')}"


class EcoWardrobeApp:
    """One user's session over the persisted wardrobe.

    Construction loads both records (or their defaults); :meth:`close` flushes
    them. Every user action runs under its own correlation id.
    """

    def __init__(
        self,
        config: EcoConfig | None = None,
        client: GenerativeClient | None = None,
        storage: KeyValueStorage | None = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        self.config = config or EcoConfig.from_env()
        configure_logging(self.config.log_level)

        self.storage = storage or build_storage(self.config.storage_backend, self.config.storage_path)
        self.store = WardrobeStore(self.storage, key=self.config.items_key, today=today)
        self.profile_store = StyleProfileStore(self.storage, key=self.config.profile_key)
        self.client = client or GeminiClient(model=self.config.model, api_key=self.config.api_key)
        self.gateway = WardrobeGateway(self.client)
        self.triage = TriageWorkflow(self.store, self.gateway)
        self.view = ViewState()

    def close(self) -> None:
        self.store.flush()
        self.profile_store.flush()

    # Closet

    def add_item_from_image(self, image_bytes: bytes, mime_type: str = "image/jpeg") -> WardrobeItem:
        """Categorize a photo and add it as a new ACTIVE item.

        A :class:`CategorizationError` propagates to the caller and leaves the
        store unchanged.
        """

        with operation_context("app:add_item_from_image"):
            categorization = self.gateway.categorize_image(image_bytes, mime_type=mime_type)
            return self.store.add_item(
                {
                    "name": categorization.name,
                    "category": categorization.category,
                    "color": categorization.color,
                    "material": categorization.material,
                    "image_url": image_data_url(image_bytes, mime_type),
                }
            )

    def record_worn(self, item_id: str) -> Optional[WardrobeItem]:
        with operation_context("app:record_worn"):
            updated = self.store.record_worn(item_id)
            if updated is not None:
                self.view.refresh_detail(updated)
            return updated

    def update_item(self, item_id: str, fields: Dict[str, Any]) -> Optional[WardrobeItem]:
        with operation_context("app:update_item"):
            updated = self.store.update_item(item_id, fields)
            if updated is not None:
                self.view.refresh_detail(updated)
            return updated

    def restore_item(self, item_id: str) -> Optional[WardrobeItem]:
        with operation_context("app:restore_item"):
            updated = self.store.restore(item_id)
            if updated is not None:
                self.view.refresh_detail(updated)
            return updated

    def switch_tab(self, tab: Tab | str) -> Tab:
        self.view.active_tab = Tab(tab)
        return self.view.active_tab

    def select_category(self, category: str) -> str:
        self.view.selected_category = category if category == ALL_CATEGORIES else validate_category(category)
        return self.view.selected_category

    def select_folder(self, status: ItemStatus | str) -> ItemStatus:
        self.view.selected_folder = coerce_status(status)
        return self.view.selected_folder

    def closet_items(self) -> List[WardrobeItem]:
        return self.store.list_active_by_category(self.view.selected_category)

    def folder_items(self) -> List[WardrobeItem]:
        return self.store.list_by_status(self.view.selected_folder)

    # Detail panel

    def open_detail(self, item_id: str) -> WardrobeItem:
        item = self.store.require_item(item_id)
        self.view.show_detail(item)
        return item

    def close_detail(self) -> None:
        self.view.close_detail()

    def request_guide(self, item_id: str) -> Optional[TransformationGuide]:
        """Generate a DIY guide for a transformed item.

        Gateway failures are logged and leave no guide shown.
        """

        with operation_context("app:request_guide") as correlation_id:
            item = self.store.require_item(item_id)
            if item.status != ItemStatus.TRANSFORMED:
                raise GuideUnavailableError(
                    f"Guides are only available for transformed items; {item_id} is {item.status.value}"
                )
            if self.view.detail_item is None or self.view.detail_item.id != item_id:
                self.view.show_detail(item)
            try:
                guide = self.gateway.generate_guide(item, self.profile_store.profile)
            except GatewayError as exc:
                log_event(
                    LOGGER,
                    logging.ERROR,
                    "guide_generation_failed",
                    item_id=item_id,
                    reason=str(exc),
                    correlation_id=correlation_id,
                )
                self.view.transformation = None
                return None
            self.view.transformation = guide
            return guide

    # Triage

    def start_analysis(self) -> TriageState:
        """Kick off usage analysis; failures are logged and leave triage idle."""

        with operation_context("app:start_analysis") as correlation_id:
            self.view.active_tab = Tab.ANALYSIS
            try:
                return self.triage.start(self.profile_store.profile)
            except GatewayError as exc:
                log_event(
                    LOGGER,
                    logging.ERROR,
                    "analysis_failed",
                    reason=str(exc),
                    correlation_id=correlation_id,
                )
                return self.triage.state

    def current_card(self) -> Optional[Dict[str, Any]]:
        result = self.triage.current()
        if result is None:
            return None
        return {
            "analysis": result,
            "item": self.store.get_item(result.item_id),
            "remaining": self.triage.remaining,
        }

    def decide(self, decision: TriageDecision | str) -> TriageState:
        with operation_context("app:decide"):
            current = self.triage.current()
            state = self.triage.decide(decision)
            if current is not None:
                updated = self.store.get_item(current.item_id)
                if updated is not None:
                    self.view.refresh_detail(updated)
            if state == TriageState.DONE:
                self.view.active_tab = Tab.FOLDERS
            return state

    def swipe(self, offset_x: float, offset_y: float = 0.0) -> Optional[TriageState]:
        """Apply the decision implied by a card drag, if it passed the threshold."""

        decision = decision_for_swipe(offset_x, offset_y)
        if decision is None:
            return None
        return self.decide(decision)


__all__ = ["EcoWardrobeApp", "image_data_url"]
