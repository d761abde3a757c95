"""Gateway translating wardrobe requests into Gemini calls and back."""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from collections import deque
from typing import Any, Dict, Iterable, List, Optional, Type

import google.generativeai as genai
from google.api_core import exceptions as google_exceptions
from pydantic import ValidationError

from eco_app.logging_config import get_logger, log_event
from logic.prompts import (
    ANALYSIS_SCHEMA,
    CATEGORIZATION_SCHEMA,
    GUIDE_SCHEMA,
    analysis_prompt,
    categorization_prompt,
    guide_prompt,
    system_instruction,
)
from logic.validation import (
    AnalysisBatch,
    CategorizationPayload,
    TransformationGuidePayload,
    validation_failure,
)
from models.analysis import AICategorization, AnalysisResult, TransformationGuide
from models.errors import CategorizationError, GatewayError
from models.style_profile import StyleProfile
from models.taxonomy import ItemStatus
from models.wardrobe_item import WardrobeItem
from tools.observability import instrument_call

LOGGER = get_logger(__name__)


class GenerativeClient(ABC):
    """Black-box model call: contents plus a JSON schema in, reply text out."""

    @abstractmethod
    def generate_json(
        self,
        contents: List[Any],
        response_schema: Dict[str, Any],
        system_instruction: Optional[str] = None,
    ) -> Optional[str]:
        """Return the raw reply text, or ``None`` when the model produced none."""


class GeminiClient(GenerativeClient):
    """google-generativeai backed client using JSON-constrained generation."""

    def __init__(self, model: str, api_key: Optional[str] = None) -> None:
        self.model = model
        self.api_key = api_key
        if api_key:
            genai.configure(api_key=api_key)

    def generate_json(
        self,
        contents: List[Any],
        response_schema: Dict[str, Any],
        system_instruction: Optional[str] = None,
    ) -> Optional[str]:
        if not self.api_key:
            raise GatewayError("GOOGLE_API_KEY is not configured")

        model = genai.GenerativeModel(self.model, system_instruction=system_instruction)
        try:
            response = model.generate_content(
                contents,
                generation_config=genai.GenerationConfig(
                    response_mime_type="application/json",
                    response_schema=response_schema,
                ),
            )
        except google_exceptions.GoogleAPIError as exc:
            raise GatewayError(f"Gemini request failed: {exc}") from exc

        try:
            return response.text
        except ValueError:
            # Raised when the candidate was blocked or carries no text parts.
            return None


class ScriptedGenerativeClient(GenerativeClient):
    """Offline client replaying queued replies; records every request."""

    def __init__(self, replies: Iterable[Any] | None = None) -> None:
        self.replies: deque = deque(replies or [])
        self.requests: List[Dict[str, Any]] = []

    def queue(self, reply: Any) -> None:
        self.replies.append(reply)

    def generate_json(
        self,
        contents: List[Any],
        response_schema: Dict[str, Any],
        system_instruction: Optional[str] = None,
    ) -> Optional[str]:
        self.requests.append(
            {"contents": contents, "schema": response_schema, "system_instruction": system_instruction}
        )
        if not self.replies:
            raise GatewayError("No scripted reply queued")
        reply = self.replies.popleft()
        if isinstance(reply, Exception):
            raise reply
        if reply is None or isinstance(reply, str):
            return reply
        return json.dumps(reply)


class WardrobeGateway:
    """The three AI operations used by the app.

    Every reply is parsed as JSON and validated before it becomes a domain
    object; nothing partial is ever returned.
    """

    def __init__(self, client: GenerativeClient) -> None:
        self.client = client

    def _request_json(
        self,
        call: str,
        contents: List[Any],
        schema: Dict[str, Any],
        role_hint: str,
        error_cls: Type[GatewayError] = GatewayError,
    ) -> Any:
        try:
            text = self.client.generate_json(contents, schema, system_instruction=system_instruction(role_hint))
        except GatewayError as exc:
            if isinstance(exc, error_cls):
                raise
            raise error_cls(str(exc)) from exc
        if not text or not text.strip():
            raise error_cls(f"{call}: empty reply from model")
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise error_cls(f"{call}: reply is not valid JSON") from exc

    def _reject(self, call: str, exc: ValidationError, error_cls: Type[GatewayError]) -> GatewayError:
        log_event(
            LOGGER,
            logging.WARNING,
            "gateway_reply_invalid",
            call=call,
            details=validation_failure(f"{call} reply failed schema checks", exc),
        )
        return error_cls(f"{call}: reply failed schema checks")

    @instrument_call("categorize_image")
    def categorize_image(self, image_bytes: bytes, mime_type: str = "image/jpeg") -> AICategorization:
        """Suggest name, category, color and material for a photographed item."""

        if not image_bytes:
            raise CategorizationError("categorize_image: no image data")
        payload = self._request_json(
            "categorize_image",
            [{"mime_type": mime_type, "data": image_bytes}, categorization_prompt()],
            CATEGORIZATION_SCHEMA,
            "clothing cataloguer",
            error_cls=CategorizationError,
        )
        if not isinstance(payload, dict):
            raise CategorizationError("categorize_image: reply is not an object")
        try:
            return CategorizationPayload.model_validate(payload).to_domain()
        except ValidationError as exc:
            raise self._reject("categorize_image", exc, CategorizationError) from exc

    def analyze_usage(self, active_items: List[WardrobeItem], profile: StyleProfile) -> List[AnalysisResult]:
        """Suggest donate/transform/reserve for each ACTIVE item.

        Non-active items are ignored. With nothing to analyze the model is not
        called at all. The returned order is the model's order.
        """

        items = [item for item in active_items if item.status == ItemStatus.ACTIVE]
        if not items:
            log_event(LOGGER, logging.INFO, "analysis_skipped", reason="no_active_items")
            return []
        return self._analyze(items, profile)

    @instrument_call("analyze_usage")
    def _analyze(self, items: List[WardrobeItem], profile: StyleProfile) -> List[AnalysisResult]:
        payload = self._request_json(
            "analyze_usage",
            [analysis_prompt(items, profile)],
            ANALYSIS_SCHEMA,
            "sustainable fashion analyst",
        )
        try:
            batch = AnalysisBatch.validate_python(payload)
        except ValidationError as exc:
            raise self._reject("analyze_usage", exc, GatewayError) from exc
        return [entry.to_domain() for entry in batch]

    @instrument_call("generate_guide")
    def generate_guide(self, item: WardrobeItem, profile: StyleProfile) -> TransformationGuide:
        """Produce a DIY upcycling guide for ``item`` in the user's style."""

        payload = self._request_json(
            "generate_guide",
            [guide_prompt(item, profile)],
            GUIDE_SCHEMA,
            "upcycling coach",
        )
        try:
            return TransformationGuidePayload.model_validate(payload).to_domain()
        except ValidationError as exc:
            raise self._reject("generate_guide", exc, GatewayError) from exc


__all__ = ["GenerativeClient", "GeminiClient", "ScriptedGenerativeClient", "WardrobeGateway"]
