"""Item store tests."""

from __future__ import annotations

import json
from datetime import datetime, timedelta
from pathlib import Path
from uuid import uuid4

import pytest

from resurface.state import (
    STORE_FORMAT_VERSION,
    InMemoryItemStore,
    JsonItemStore,
    MissingItemError,
    StateError,
    find_item,
)
from resurface.state.seed import seed_items

NOW = datetime(2026, 10, 19, 12, 0)


def test_store_must_be_opened() -> None:
    store = InMemoryItemStore()

    with pytest.raises(StateError):
        store.fetch_all()

    with store:
        assert store.is_open
        assert store.fetch_all() == []

    assert not store.is_open


def test_upsert_inserts_and_replaces() -> None:
    item = seed_items(NOW)[0]
    with InMemoryItemStore() as store:
        store.upsert(item)
        store.upsert(item.with_action(NOW))

        stored = store.fetch_all()

    assert len(stored) == 1
    assert stored[0].times_acted_on == 1


def test_save_ignores_duplicates() -> None:
    item = seed_items(NOW)[0]
    with InMemoryItemStore([item]) as store:
        assert store.save(item.with_action(NOW)) is False
        assert store.get(item.id).times_acted_on == 0


def test_fetch_all_returns_a_snapshot() -> None:
    items = seed_items(NOW)
    with InMemoryItemStore(items) as store:
        snapshot = store.fetch_all()
        store.upsert(items[0].with_dismissal(NOW))

        assert snapshot[0].times_dismissed == 0
        assert store.get(items[0].id).times_dismissed == 1


def test_get_unknown_item_raises() -> None:
    with InMemoryItemStore() as store:
        with pytest.raises(MissingItemError):
            store.get(uuid4())


def test_in_memory_store_keeps_items_across_reopen() -> None:
    item = seed_items(NOW)[1]
    store = InMemoryItemStore()
    with store:
        store.upsert(item)

    with store:
        assert store.fetch_all() == [item]


def test_json_store_round_trip(tmp_path: Path) -> None:
    """Ensure items written by one store instance load in another.

    Args:
        tmp_path: Temporary directory provided by pytest.
    """
    path = tmp_path / "nested" / "items.json"
    items = seed_items(NOW)

    with JsonItemStore(path) as store:
        for item in items:
            store.upsert(item)
        store.upsert(items[2].with_shown(NOW + timedelta(hours=1)))

    payload = json.loads(path.read_text(encoding="utf-8"))
    assert payload["version"] == STORE_FORMAT_VERSION

    with JsonItemStore(path) as reopened:
        loaded = reopened.fetch_all()

    assert [item.id for item in loaded] == [item.id for item in items]
    assert loaded[2].last_shown_at == NOW + timedelta(hours=1)
    assert loaded[0] == items[0]


def test_json_store_missing_file_is_empty(tmp_path: Path) -> None:
    with JsonItemStore(tmp_path / "items.json") as store:
        assert store.fetch_all() == []


def test_json_store_invalid_data_raises(tmp_path: Path) -> None:
    """Ensure unreadable payloads raise StateError on open.

    Args:
        tmp_path: Temporary directory provided by pytest.
    """
    path = tmp_path / "items.json"
    path.write_text("not json", encoding="utf-8")

    with pytest.raises(StateError):
        JsonItemStore(path).open()

    path.write_text(json.dumps({"items": [{"id": "nope"}]}), encoding="utf-8")

    with pytest.raises(StateError):
        JsonItemStore(path).open()


def test_find_item_by_prefix() -> None:
    items = seed_items(NOW)
    target = items[1]

    assert find_item(items, str(target.id)[:8]) == target
    assert find_item(items, "zzzz") is None
    with pytest.raises(StateError):
        find_item(items, "")


def test_json_store_undecodable_or_unreadable_file_raises(tmp_path: Path) -> None:
    path = tmp_path / "items.json"
    path.write_bytes(b'{"items": ["\xff\xfe"]}')

    with pytest.raises(StateError):
        JsonItemStore(path).open()

    directory = tmp_path / "as-dir.json"
    directory.mkdir()

    with pytest.raises(StateError):
        JsonItemStore(directory).open()


class _BrokenDiskStore(InMemoryItemStore):
    def _persist(self) -> None:
        raise OSError("disk full")


def test_failed_write_leaves_memory_untouched() -> None:
    items = seed_items(NOW)
    store = _BrokenDiskStore([items[0]])
    with store:
        with pytest.raises(OSError):
            store.upsert(items[0].with_dismissal(NOW))
        with pytest.raises(OSError):
            store.save(items[1])
        with pytest.raises(OSError):
            store.upsert(items[2])

        assert store.fetch_all() == [items[0]]
        with pytest.raises(MissingItemError):
            store.get(items[1].id)
