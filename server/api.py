"""FastAPI server exposing the EcoWardrobe session over HTTP.

Routes that call the generative model are plain functions so FastAPI runs
them in its threadpool instead of on the event loop.
"""

import contextlib
import logging
from typing import Any, AsyncIterator, Dict, Optional

from fastapi import Depends, FastAPI, File, HTTPException, Request, UploadFile
from fastapi.responses import JSONResponse

from eco_app.app import EcoWardrobeApp
from eco_app.logging_config import configure_logging, get_logger, log_event
from logic.triage import TriageState
from logic.validation import DecisionRequest, ItemUpdateRequest, ProfileEntryRequest, SwipeRequest
from models.errors import (
    CategorizationError,
    GuideUnavailableError,
    NotFoundError,
    StatusTransitionError,
    TriageStateError,
)
from models.taxonomy import ALL_CATEGORIES, ItemStatus

LOGGER = get_logger(__name__)
PROFILE_KINDS = {"styles", "colors", "disliked"}


def _wardrobe(request: Request) -> EcoWardrobeApp:
    return request.app.state.wardrobe


def _card_payload(wardrobe: EcoWardrobeApp) -> Optional[Dict[str, Any]]:
    card = wardrobe.current_card()
    if card is None:
        return None
    return {
        "analysis": card["analysis"].to_dict(),
        "item": card["item"].to_dict() if card["item"] else None,
        "remaining": card["remaining"],
    }


def _triage_payload(wardrobe: EcoWardrobeApp, state: TriageState) -> Dict[str, Any]:
    return {
        "state": state.value,
        "card": _card_payload(wardrobe),
        "active_tab": wardrobe.view.active_tab.value,
    }


def _register_error_handlers(api: FastAPI) -> None:
    async def not_found(_: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    async def categorization_failed(_: Request, exc: CategorizationError) -> JSONResponse:
        log_event(LOGGER, logging.WARNING, "categorization_failed", reason=str(exc))
        return JSONResponse(
            status_code=502,
            content={"detail": "Could not recognise the clothing item. Please try another photo."},
        )

    async def conflict(_: Request, exc: Exception) -> JSONResponse:
        return JSONResponse(status_code=409, content={"detail": str(exc)})

    async def invalid_value(_: Request, exc: ValueError) -> JSONResponse:
        return JSONResponse(status_code=422, content={"detail": str(exc)})

    api.add_exception_handler(NotFoundError, not_found)
    api.add_exception_handler(CategorizationError, categorization_failed)
    api.add_exception_handler(GuideUnavailableError, conflict)
    api.add_exception_handler(TriageStateError, conflict)
    api.add_exception_handler(StatusTransitionError, conflict)
    api.add_exception_handler(ValueError, invalid_value)


def create_app(wardrobe: EcoWardrobeApp | None = None) -> FastAPI:
    """Build the FastAPI instance around a wardrobe session."""

    @contextlib.asynccontextmanager
    async def lifespan(api: FastAPI) -> AsyncIterator[None]:
        yield
        api.state.wardrobe.close()

    api = FastAPI(title="EcoWardrobe", version="0.1.0", lifespan=lifespan)
    api.state.wardrobe = wardrobe or EcoWardrobeApp()
    _register_error_handlers(api)

    @api.get("/healthz")
    async def healthcheck(wardrobe: EcoWardrobeApp = Depends(_wardrobe)) -> dict:
        """Lightweight readiness probe."""

        return {
            "status": "ok",
            "service": "eco-wardrobe",
            "environment": wardrobe.config.environment or "local",
            "model": wardrobe.config.model,
        }

    @api.get("/items")
    async def list_items(
        status: Optional[str] = None,
        category: str = ALL_CATEGORIES,
        wardrobe: EcoWardrobeApp = Depends(_wardrobe),
    ) -> dict:
        """List items, optionally narrowed by status and category."""

        items = wardrobe.store.list_by_category(category)
        if status:
            target = ItemStatus(status.upper())
            items = [item for item in items if item.status == target]
        return {"items": [item.to_dict() for item in items]}

    @api.get("/closet")
    async def closet(
        category: str = ALL_CATEGORIES, wardrobe: EcoWardrobeApp = Depends(_wardrobe)
    ) -> dict:
        """ACTIVE items in the selected category."""

        wardrobe.select_category(category)
        return {
            "category": wardrobe.view.selected_category,
            "items": [item.to_dict() for item in wardrobe.closet_items()],
        }

    @api.post("/items", status_code=201)
    def upload_item(
        image: UploadFile = File(...), wardrobe: EcoWardrobeApp = Depends(_wardrobe)
    ) -> dict:
        """Categorize an uploaded photo and add it to the closet."""

        data = image.file.read()
        if not data:
            raise HTTPException(status_code=400, detail="Empty image upload")
        item = wardrobe.add_item_from_image(data, mime_type=image.content_type or "image/jpeg")
        return {"item": item.to_dict()}

    @api.get("/items/{item_id}")
    async def get_item(item_id: str, wardrobe: EcoWardrobeApp = Depends(_wardrobe)) -> dict:
        item = wardrobe.open_detail(item_id)
        return {"item": item.to_dict()}

    @api.patch("/items/{item_id}")
    async def update_item(
        item_id: str, request: ItemUpdateRequest, wardrobe: EcoWardrobeApp = Depends(_wardrobe)
    ) -> dict:
        item = wardrobe.update_item(item_id, request.model_dump(exclude_none=True))
        if item is None:
            raise NotFoundError(item_id)
        return {"item": item.to_dict()}

    @api.post("/items/{item_id}/worn")
    async def worn_today(item_id: str, wardrobe: EcoWardrobeApp = Depends(_wardrobe)) -> dict:
        """Count a wear; unknown ids are ignored."""

        item = wardrobe.record_worn(item_id)
        if item is None:
            return {"status": "ignored", "item": None}
        return {"status": "ok", "item": item.to_dict()}

    @api.post("/items/{item_id}/restore")
    async def restore_item(item_id: str, wardrobe: EcoWardrobeApp = Depends(_wardrobe)) -> dict:
        item = wardrobe.restore_item(item_id)
        if item is None:
            raise NotFoundError(item_id)
        return {"item": item.to_dict()}

    @api.post("/items/{item_id}/guide")
    def transformation_guide(item_id: str, wardrobe: EcoWardrobeApp = Depends(_wardrobe)) -> dict:
        guide = wardrobe.request_guide(item_id)
        return {"guide": guide.to_dict() if guide else None}

    @api.get("/folders")
    async def folders(wardrobe: EcoWardrobeApp = Depends(_wardrobe)) -> dict:
        return {"counts": wardrobe.store.count_by_status()}

    @api.get("/folders/{status}")
    async def folder_items(status: str, wardrobe: EcoWardrobeApp = Depends(_wardrobe)) -> dict:
        wardrobe.select_folder(status)
        return {
            "status": wardrobe.view.selected_folder.value,
            "items": [item.to_dict() for item in wardrobe.folder_items()],
        }

    @api.get("/profile")
    async def get_profile(wardrobe: EcoWardrobeApp = Depends(_wardrobe)) -> dict:
        return {"profile": wardrobe.profile_store.profile.to_dict()}

    @api.post("/profile/{kind}")
    async def add_profile_entry(
        kind: str, request: ProfileEntryRequest, wardrobe: EcoWardrobeApp = Depends(_wardrobe)
    ) -> dict:
        if kind not in PROFILE_KINDS:
            raise HTTPException(status_code=404, detail=f"Unknown profile list '{kind}'")
        store = wardrobe.profile_store
        adders = {"styles": store.add_style, "colors": store.add_color, "disliked": store.add_disliked}
        return {"profile": adders[kind](request.value).to_dict()}

    @api.delete("/profile/{kind}/{value}")
    async def remove_profile_entry(
        kind: str, value: str, wardrobe: EcoWardrobeApp = Depends(_wardrobe)
    ) -> dict:
        if kind not in PROFILE_KINDS:
            raise HTTPException(status_code=404, detail=f"Unknown profile list '{kind}'")
        store = wardrobe.profile_store
        removers = {"styles": store.remove_style, "colors": store.remove_color, "disliked": store.remove_disliked}
        return {"profile": removers[kind](value).to_dict()}

    @api.post("/analysis")
    def start_analysis(wardrobe: EcoWardrobeApp = Depends(_wardrobe)) -> dict:
        """Run usage analysis and return the first triage card."""

        state = wardrobe.start_analysis()
        return _triage_payload(wardrobe, state)

    @api.get("/analysis/current")
    async def current_card(wardrobe: EcoWardrobeApp = Depends(_wardrobe)) -> dict:
        return _triage_payload(wardrobe, wardrobe.triage.state)

    @api.post("/analysis/decision")
    async def decide(request: DecisionRequest, wardrobe: EcoWardrobeApp = Depends(_wardrobe)) -> dict:
        state = wardrobe.decide(request.decision)
        return _triage_payload(wardrobe, state)

    @api.post("/analysis/swipe")
    async def swipe(request: SwipeRequest, wardrobe: EcoWardrobeApp = Depends(_wardrobe)) -> dict:
        state = wardrobe.swipe(request.offset_x, request.offset_y)
        payload = _triage_payload(wardrobe, wardrobe.triage.state)
        payload["applied"] = state is not None
        return payload

    @api.delete("/analysis")
    async def reset_analysis(wardrobe: EcoWardrobeApp = Depends(_wardrobe)) -> dict:
        wardrobe.triage.reset()
        return _triage_payload(wardrobe, wardrobe.triage.state)

    return api


def get_app() -> FastAPI:
    """Expose a configured FastAPI instance for ASGI servers."""

    configure_logging()
    return create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("server.api:get_app", factory=True, host="0.0.0.0", port=8080, reload=False)
