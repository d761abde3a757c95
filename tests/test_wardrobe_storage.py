"""Wardrobe item model, taxonomy and store tests."""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Dict, Iterator

import pytest

from models import taxonomy
from models.errors import NotFoundError, StatusTransitionError
from models.taxonomy import ItemStatus
from models.wardrobe_item import WardrobeItem, from_raw_metadata
from tools.kv_storage import JSONFileStorage, SQLiteStorage, build_storage
from tools.wardrobe_store import WardrobeStore

TODAY = date(2026, 10, 19)


def _ids() -> Iterator[str]:
    counter = 0
    while True:
        counter += 1
        yield f"item-{counter}"


@pytest.fixture()
def storage(tmp_path: Path) -> JSONFileStorage:
    return JSONFileStorage(tmp_path / "storage")


@pytest.fixture()
def store(storage: JSONFileStorage) -> WardrobeStore:
    ids = _ids()
    return WardrobeStore(storage, today=lambda: TODAY, id_factory=lambda: next(ids))


@pytest.fixture()
def shirt_attrs() -> Dict[str, str]:
    return {"name": "Blue Shirt", "category": "Shirts", "color": "Blue", "material": "Cotton"}


def test_taxonomy_lists_the_nine_categories() -> None:
    assert taxonomy.CATEGORIES == [
        "Shirts",
        "Skirts",
        "Jeans",
        "Pajamas",
        "Socks",
        "Shoes",
        "Dresses",
        "Outerwear",
        "Other",
    ]
    assert taxonomy.validate_category("jeans") == "Jeans"
    with pytest.raises(ValueError):
        taxonomy.validate_category("Hats")
    assert taxonomy.coerce_category("Hats") == "Other"
    assert taxonomy.coerce_category(None) == "Other"


def test_transition_table_is_enforced() -> None:
    assert taxonomy.is_transition_allowed(ItemStatus.ACTIVE, ItemStatus.DONATED)
    assert taxonomy.is_transition_allowed(ItemStatus.RESERVED, ItemStatus.ACTIVE)
    assert taxonomy.is_transition_allowed(ItemStatus.DONATED, ItemStatus.DONATED)
    assert not taxonomy.is_transition_allowed(ItemStatus.DONATED, ItemStatus.ACTIVE)
    assert not taxonomy.is_transition_allowed(ItemStatus.TRANSFORMED, ItemStatus.RESERVED)


def test_from_raw_metadata_rejects_missing_fields() -> None:
    with pytest.raises(ValueError):
        from_raw_metadata({"id": "x", "name": "Shirt"})


def test_wardrobe_item_rejects_negative_wear_count() -> None:
    with pytest.raises(ValueError):
        WardrobeItem(
            id="x",
            name="Sock",
            category="Socks",
            color="White",
            material="Wool",
            image_url="",
            purchase_date="2026-01-01",
            wear_count=-1,
        )


def test_add_item_defaults(store: WardrobeStore, shirt_attrs: Dict[str, str]) -> None:
    item = store.add_item(shirt_attrs)

    assert item.id == "item-1"
    assert item.status == ItemStatus.ACTIVE
    assert item.wear_count == 0
    assert item.last_worn_date is None
    assert item.purchase_date == "2026-10-19"
    assert (item.name, item.category, item.color, item.material) == ("Blue Shirt", "Shirts", "Blue", "Cotton")


def test_add_item_appends_in_insertion_order(store: WardrobeStore, shirt_attrs: Dict[str, str]) -> None:
    first = store.add_item(shirt_attrs)
    second = store.add_item({**shirt_attrs, "name": "Red Skirt", "category": "Skirts"})

    assert [item.id for item in store.list_items()] == [first.id, second.id]


def test_record_worn_counts_and_dates(store: WardrobeStore, shirt_attrs: Dict[str, str]) -> None:
    item = store.add_item(shirt_attrs)
    for _ in range(3):
        store.record_worn(item.id)

    current = store.get_item(item.id)
    assert current is not None
    assert current.wear_count == 3
    assert current.last_worn_date == "2026-10-19"


def test_record_worn_unknown_id_is_noop(store: WardrobeStore, shirt_attrs: Dict[str, str]) -> None:
    store.add_item(shirt_attrs)
    before = store.list_items()

    assert store.record_worn("missing") is None
    assert store.list_items() == before


def test_set_status_is_idempotent(store: WardrobeStore, shirt_attrs: Dict[str, str]) -> None:
    item = store.add_item(shirt_attrs)

    once = store.set_status(item.id, ItemStatus.DONATED)
    twice = store.set_status(item.id, ItemStatus.DONATED)

    assert once == twice
    assert store.list_items() == [twice]


def test_set_status_rejects_leaving_terminal_state(store: WardrobeStore, shirt_attrs: Dict[str, str]) -> None:
    item = store.add_item(shirt_attrs)
    store.set_status(item.id, "TRANSFORMED")

    with pytest.raises(StatusTransitionError):
        store.set_status(item.id, ItemStatus.ACTIVE)
    assert store.get_item(item.id).status == ItemStatus.TRANSFORMED


def test_reserve_reason_is_cleared_on_restore(store: WardrobeStore, shirt_attrs: Dict[str, str]) -> None:
    item = store.add_item(shirt_attrs)
    reserved = store.set_status(item.id, ItemStatus.RESERVED, reserve_reason="Seasonal")
    assert reserved.reserve_reason == "Seasonal"

    restored = store.restore(item.id)
    assert restored.status == ItemStatus.ACTIVE
    assert restored.reserve_reason is None


def test_set_status_unknown_id_returns_none(store: WardrobeStore) -> None:
    assert store.set_status("missing", ItemStatus.DONATED) is None


def test_require_item_raises_not_found(store: WardrobeStore) -> None:
    with pytest.raises(NotFoundError):
        store.require_item("missing")


def test_list_by_status_and_category(store: WardrobeStore, shirt_attrs: Dict[str, str]) -> None:
    shirt = store.add_item(shirt_attrs)
    jeans = store.add_item({**shirt_attrs, "name": "Old Jeans", "category": "Jeans"})
    socks = store.add_item({**shirt_attrs, "name": "Socks", "category": "Socks"})
    store.set_status(jeans.id, ItemStatus.DONATED)

    for status in ItemStatus:
        expected = [item for item in store.list_items() if item.status == status]
        assert store.list_by_status(status) == expected

    assert [i.id for i in store.list_by_status(ItemStatus.ACTIVE)] == [shirt.id, socks.id]
    assert [i.id for i in store.list_by_category("Jeans")] == [jeans.id]
    assert len(store.list_by_category("All")) == 3
    assert [i.id for i in store.list_active_by_category("All")] == [shirt.id, socks.id]
    assert store.count_by_status() == {"ACTIVE": 2, "RESERVED": 0, "DONATED": 1, "TRANSFORMED": 0}


def test_update_item_edits_descriptive_fields(store: WardrobeStore, shirt_attrs: Dict[str, str]) -> None:
    item = store.add_item(shirt_attrs)

    updated = store.update_item(item.id, {"name": "Navy Shirt", "category": "outerwear"})
    assert updated.name == "Navy Shirt"
    assert updated.category == "Outerwear"

    with pytest.raises(ValueError):
        store.update_item(item.id, {"wear_count": 10})
    assert store.update_item("missing", {"name": "x"}) is None


def test_update_item_rejects_blank_values(store: WardrobeStore, shirt_attrs: Dict[str, str]) -> None:
    item = store.add_item(shirt_attrs)

    for field in ("name", "color", "material"):
        with pytest.raises(ValueError):
            store.update_item(item.id, {field: "   "})
    assert store.get_item(item.id) == item


def test_every_mutation_is_persisted(storage: JSONFileStorage, store: WardrobeStore, shirt_attrs: Dict[str, str]) -> None:
    item = store.add_item(shirt_attrs)
    store.record_worn(item.id)
    store.set_status(item.id, ItemStatus.RESERVED)

    reopened = WardrobeStore(storage)
    assert reopened.list_items() == store.list_items()
    assert storage.get(store.key)[0]["status"] == "RESERVED"


def test_load_defaults_to_empty(tmp_path: Path) -> None:
    store = WardrobeStore(JSONFileStorage(tmp_path / "fresh"))
    assert store.list_items() == []


def test_unreadable_records_survive_later_writes(storage: JSONFileStorage, shirt_attrs: Dict[str, str]) -> None:
    bad = {"id": "bad", "name": "Hat", "category": "Hats", "purchase_date": "2026-01-01"}
    storage.put(
        "eco-wardrobe-items-v2",
        [{"id": "ok", "purchase_date": "2026-01-01", **shirt_attrs}, bad, "garbage"],
    )

    store = WardrobeStore(storage, today=lambda: TODAY, id_factory=lambda: "new")
    assert [item.id for item in store.list_items()] == ["ok"]

    store.add_item(shirt_attrs)
    persisted = storage.get(store.key)
    assert [record["id"] for record in persisted[:2]] == ["ok", "new"]
    assert persisted[2:] == [bad, "garbage"]
    assert [item.id for item in WardrobeStore(storage).list_items()] == ["ok", "new"]


def test_sqlite_backend_round_trip(tmp_path: Path, shirt_attrs: Dict[str, str]) -> None:
    storage = SQLiteStorage(tmp_path / "wardrobe.db")
    store = WardrobeStore(storage, today=lambda: TODAY)
    item = store.add_item(shirt_attrs)
    store.record_worn(item.id)

    reopened = WardrobeStore(SQLiteStorage(tmp_path / "wardrobe.db"))
    assert reopened.list_items() == store.list_items()
    assert storage.delete(store.key) is True
    assert storage.get(store.key) is None


def test_build_storage_selects_backend(tmp_path: Path) -> None:
    assert isinstance(build_storage("json", str(tmp_path / "json")), JSONFileStorage)
    assert isinstance(build_storage("SQLite", str(tmp_path / "db.sqlite")), SQLiteStorage)
    with pytest.raises(ValueError):
        build_storage("redis")
