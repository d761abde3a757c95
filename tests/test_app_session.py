"""End-to-end tests for the EcoWardrobe app session."""

from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest

from eco_app.app import EcoWardrobeApp, image_data_url
from eco_app.config import EcoConfig
from eco_app.view_state import Tab
from logic.triage import TriageState
from models.errors import CategorizationError, GuideUnavailableError, NotFoundError
from models.taxonomy import ItemStatus, TriageDecision
from tools.ai_gateway import ScriptedGenerativeClient
from tools.kv_storage import JSONFileStorage

TODAY = date(2026, 10, 19)
BLUE_SHIRT = {"name": "Blue Shirt", "category": "Shirts", "color": "Blue", "material": "Cotton"}


@pytest.fixture()
def client() -> ScriptedGenerativeClient:
    return ScriptedGenerativeClient()


@pytest.fixture()
def wardrobe(tmp_path: Path, client: ScriptedGenerativeClient) -> EcoWardrobeApp:
    config = EcoConfig(storage_path=str(tmp_path))
    return EcoWardrobeApp(config=config, client=client, storage=JSONFileStorage(tmp_path), today=lambda: TODAY)


def test_add_worn_donate_flow(wardrobe: EcoWardrobeApp, client: ScriptedGenerativeClient) -> None:
    client.queue(BLUE_SHIRT)
    item = wardrobe.add_item_from_image(b"jpeg-bytes")

    items = wardrobe.store.list_items()
    assert len(items) == 1
    assert items[0].status == ItemStatus.ACTIVE
    assert items[0].wear_count == 0
    assert items[0].last_worn_date is None
    assert (items[0].name, items[0].category, items[0].color, items[0].material) == (
        "Blue Shirt",
        "Shirts",
        "Blue",
        "Cotton",
    )
    assert items[0].image_url == image_data_url(b"jpeg-bytes", "image/jpeg")

    worn = wardrobe.record_worn(item.id)
    assert worn.wear_count == 1
    assert worn.last_worn_date == TODAY.isoformat()

    client.queue([{"itemId": item.id, "reasoning": "Rarely worn", "suggestedAction": "DONATE", "wearProbability": 0.1}])
    assert wardrobe.start_analysis() == TriageState.PRESENTING
    assert wardrobe.view.active_tab == Tab.ANALYSIS
    card = wardrobe.current_card()
    assert card["item"].id == item.id
    assert card["remaining"] == 1

    assert wardrobe.decide(TriageDecision.DONATE) == TriageState.DONE
    assert wardrobe.store.list_by_status(ItemStatus.ACTIVE) == []
    assert [i.id for i in wardrobe.store.list_by_status(ItemStatus.DONATED)] == [item.id]
    assert wardrobe.view.active_tab == Tab.FOLDERS


def test_failed_categorization_leaves_store_unchanged(
    wardrobe: EcoWardrobeApp, client: ScriptedGenerativeClient
) -> None:
    client.queue("")
    with pytest.raises(CategorizationError):
        wardrobe.add_item_from_image(b"jpeg-bytes")
    assert wardrobe.store.list_items() == []


def test_record_worn_refreshes_open_detail(wardrobe: EcoWardrobeApp, client: ScriptedGenerativeClient) -> None:
    client.queue(BLUE_SHIRT)
    item = wardrobe.add_item_from_image(b"img")
    wardrobe.open_detail(item.id)

    wardrobe.record_worn(item.id)
    wardrobe.record_worn(item.id)

    assert wardrobe.view.detail_item.wear_count == 2
    assert wardrobe.record_worn("missing") is None


def test_open_detail_unknown_item(wardrobe: EcoWardrobeApp) -> None:
    with pytest.raises(NotFoundError):
        wardrobe.open_detail("missing")


def test_analysis_failure_is_logged_not_raised(wardrobe: EcoWardrobeApp, client: ScriptedGenerativeClient) -> None:
    client.queue(BLUE_SHIRT)
    wardrobe.add_item_from_image(b"img")
    client.queue("{broken")

    assert wardrobe.start_analysis() == TriageState.IDLE
    assert wardrobe.current_card() is None


def test_swipe_applies_decision_past_threshold(wardrobe: EcoWardrobeApp, client: ScriptedGenerativeClient) -> None:
    client.queue(BLUE_SHIRT)
    item = wardrobe.add_item_from_image(b"img")
    client.queue([{"itemId": item.id, "reasoning": "Crop it", "suggestedAction": "TRANSFORM", "wearProbability": 0.4}])
    wardrobe.start_analysis()

    assert wardrobe.swipe(40, 0) is None
    assert wardrobe.swipe(180, 0) == TriageState.DONE
    assert wardrobe.store.get_item(item.id).status == ItemStatus.TRANSFORMED


def test_guide_only_for_transformed_items(wardrobe: EcoWardrobeApp, client: ScriptedGenerativeClient) -> None:
    client.queue(BLUE_SHIRT)
    item = wardrobe.add_item_from_image(b"img")

    with pytest.raises(GuideUnavailableError):
        wardrobe.request_guide(item.id)

    wardrobe.store.set_status(item.id, ItemStatus.TRANSFORMED)
    client.queue({"title": "Tote Bag", "difficulty": "Medium", "toolsNeeded": ["Scissors"], "steps": ["Cut", "Sew"]})
    guide = wardrobe.request_guide(item.id)

    assert guide.title == "Tote Bag"
    assert wardrobe.view.detail_item.id == item.id
    assert wardrobe.view.transformation == guide


def test_guide_failure_shows_no_guide(wardrobe: EcoWardrobeApp, client: ScriptedGenerativeClient) -> None:
    client.queue(BLUE_SHIRT)
    item = wardrobe.add_item_from_image(b"img")
    wardrobe.store.set_status(item.id, ItemStatus.TRANSFORMED)
    client.queue(None)

    assert wardrobe.request_guide(item.id) is None
    assert wardrobe.view.transformation is None


def test_closet_and_folder_views(wardrobe: EcoWardrobeApp, client: ScriptedGenerativeClient) -> None:
    client.queue(BLUE_SHIRT)
    shirt = wardrobe.add_item_from_image(b"img")
    client.queue({"name": "Jeans", "category": "Jeans", "color": "Indigo", "material": "Denim"})
    jeans = wardrobe.add_item_from_image(b"img")
    wardrobe.store.set_status(jeans.id, ItemStatus.RESERVED)

    wardrobe.select_category("shirts")
    assert [i.id for i in wardrobe.closet_items()] == [shirt.id]
    wardrobe.select_category("All")
    assert [i.id for i in wardrobe.closet_items()] == [shirt.id]

    wardrobe.select_folder("RESERVED")
    assert [i.id for i in wardrobe.folder_items()] == [jeans.id]

    restored = wardrobe.restore_item(jeans.id)
    assert restored.status == ItemStatus.ACTIVE


def test_state_survives_close_and_reload(tmp_path: Path, client: ScriptedGenerativeClient) -> None:
    storage = JSONFileStorage(tmp_path)
    config = EcoConfig(storage_path=str(tmp_path))
    first = EcoWardrobeApp(config=config, client=client, storage=storage)
    client.queue(BLUE_SHIRT)
    item = first.add_item_from_image(b"img")
    first.profile_store.add_style("Vintage")
    first.close()

    second = EcoWardrobeApp(config=config, client=client, storage=JSONFileStorage(tmp_path))
    assert [i.id for i in second.store.list_items()] == [item.id]
    assert "Vintage" in second.profile_store.profile.preferred_styles
