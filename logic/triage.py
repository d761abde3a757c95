"""Triage workflow: one AI suggestion at a time, each mapped to a status change."""

from __future__ import annotations

import logging
import threading
from enum import Enum
from typing import List, Optional, Set

from eco_app.logging_config import get_logger, log_event
from models.analysis import AnalysisResult
from models.errors import StatusTransitionError, TriageStateError
from models.style_profile import StyleProfile
from models.taxonomy import DECISION_STATUS, ItemStatus, TriageDecision
from models.wardrobe_item import WardrobeItem
from tools.ai_gateway import WardrobeGateway
from tools.wardrobe_store import WardrobeStore

LOGGER = get_logger(__name__)
SWIPE_THRESHOLD = 100.0


class TriageState(str, Enum):
    IDLE = "IDLE"
    LOADING = "LOADING"
    PRESENTING = "PRESENTING"
    DONE = "DONE"


def decision_for_swipe(
    offset_x: float, offset_y: float = 0.0, threshold: float = SWIPE_THRESHOLD
) -> Optional[TriageDecision]:
    """Map a card drag offset to a decision.

    Left donates, right transforms, up reserves. Offsets within the threshold
    snap back and return ``None``. Horizontal movement wins when both axes pass
    the threshold.
    """

    if offset_x < -threshold:
        return TriageDecision.DONATE
    if offset_x > threshold:
        return TriageDecision.TRANSFORM
    if offset_y < -threshold:
        return TriageDecision.RESERVE
    return None


class TriageWorkflow:
    """Cursor over an ordered list of analysis results.

    The cursor only ever moves forward. A decision is applied only to items
    that were ACTIVE when the analysis ran and are still ACTIVE; any other id
    leaves the store untouched and still advances.

    State changes happen under a lock; the gateway call runs outside it.
    """

    def __init__(self, store: WardrobeStore, gateway: WardrobeGateway) -> None:
        self.store = store
        self.gateway = gateway
        self._lock = threading.RLock()
        self.state = TriageState.IDLE
        self.results: List[AnalysisResult] = []
        self.analyzed_ids: Set[str] = set()
        self.index = 0

    def reset(self) -> None:
        with self._lock:
            self.state = TriageState.IDLE
            self.results = []
            self.analyzed_ids = set()
            self.index = 0

    def start(self, profile: StyleProfile) -> TriageState:
        """Run usage analysis over the ACTIVE items and present the first card."""

        with self._lock:
            if self.state == TriageState.DONE:
                self.reset()
            if self.state != TriageState.IDLE:
                raise TriageStateError(f"Cannot start analysis while {self.state.value}")

            active_items = self.store.list_by_status(ItemStatus.ACTIVE)
            if not active_items:
                log_event(LOGGER, logging.INFO, "triage_skipped", reason="no_active_items")
                return self.state
            self.state = TriageState.LOADING

        try:
            results = self.gateway.analyze_usage(active_items, profile)
        except Exception:
            self.reset()
            raise

        with self._lock:
            if self.state != TriageState.LOADING:
                log_event(LOGGER, logging.INFO, "triage_results_discarded", state=self.state.value)
                return self.state
            self.results = list(results)
            self.analyzed_ids = {item.id for item in active_items}
            self.index = 0
            self.state = TriageState.PRESENTING if self.results else TriageState.DONE
            log_event(
                LOGGER,
                logging.INFO,
                "triage_started",
                result_count=len(self.results),
                active_count=len(active_items),
                state=self.state.value,
            )
            return self.state

    def current(self) -> Optional[AnalysisResult]:
        with self._lock:
            if self.state != TriageState.PRESENTING:
                return None
            return self.results[self.index]

    def current_item(self) -> Optional[WardrobeItem]:
        result = self.current()
        return self.store.get_item(result.item_id) if result else None

    @property
    def remaining(self) -> int:
        with self._lock:
            if self.state != TriageState.PRESENTING:
                return 0
            return len(self.results) - self.index

    def _apply(self, result: AnalysisResult, choice: TriageDecision) -> Optional[WardrobeItem]:
        if result.item_id not in self.analyzed_ids:
            log_event(LOGGER, logging.INFO, "triage_item_missing", item_id=result.item_id, decision=choice.value)
            return None

        item = self.store.get_item(result.item_id)
        if item is None or item.status != ItemStatus.ACTIVE:
            log_event(
                LOGGER,
                logging.INFO,
                "triage_item_not_active",
                item_id=result.item_id,
                decision=choice.value,
                status=item.status.value if item else None,
            )
            return None

        target = DECISION_STATUS[choice]
        reason = result.reasoning if target == ItemStatus.RESERVED else None
        try:
            return self.store.set_status(result.item_id, target, reserve_reason=reason)
        except StatusTransitionError as exc:
            log_event(
                LOGGER,
                logging.WARNING,
                "triage_transition_rejected",
                item_id=result.item_id,
                decision=choice.value,
                reason=str(exc),
            )
            return None

    def decide(self, decision: TriageDecision | str) -> TriageState:
        """Apply ``decision`` to the current card's item and advance."""

        with self._lock:
            if self.state != TriageState.PRESENTING:
                raise TriageStateError(f"No card to decide on while {self.state.value}")

            choice = TriageDecision(decision)
            result = self.results[self.index]
            updated = self._apply(result, choice)

            if self.index >= len(self.results) - 1:
                self.state = TriageState.DONE
                self.index = len(self.results)
            else:
                self.index += 1

            log_event(
                LOGGER,
                logging.INFO,
                "triage_decided",
                item_id=result.item_id,
                decision=choice.value,
                applied=updated is not None,
                state=self.state.value,
            )
            return self.state


__all__ = ["TriageState", "TriageWorkflow", "decision_for_swipe", "SWIPE_THRESHOLD"]
