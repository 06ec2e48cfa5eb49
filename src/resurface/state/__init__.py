"""Item persistence for Resurface.

Stores are explicitly owned objects: create one, ``open()`` it (or use it as a
context manager), pass it to whatever needs it, and ``close()`` it at shutdown.
"""

from __future__ import annotations

import json
import logging
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable, Optional
from uuid import UUID

from pydantic import ValidationError

from .errors import MissingItemError, StateError
from .factory import ItemFactory
from .models import ItemState, StoredItem

LOGGER = logging.getLogger(__name__)

STORE_FORMAT_VERSION = 1


class ItemStore(ABC):
    """Keyed collection of ``StoredItem`` records."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._items: dict[UUID, StoredItem] = {}
        self._opened = False

    @property
    def is_open(self) -> bool:
        return self._opened

    def open(self) -> "ItemStore":
        """Load the backing data and make the store usable."""
        with self._lock:
            if not self._opened:
                self._items = {item.id: item for item in self._load()}
                self._opened = True
        return self

    def close(self) -> None:
        """Release the store; later calls require ``open()`` again."""
        with self._lock:
            self._opened = False
            self._items = {}

    def __enter__(self) -> "ItemStore":
        return self.open()

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def fetch_all(self) -> list[StoredItem]:
        """Return a snapshot of every item in insertion order."""
        with self._lock:
            self._require_open()
            return list(self._items.values())

    def get(self, item_id: UUID) -> StoredItem:
        """Return the item with ``item_id``.

        Raises:
            MissingItemError: If no such item exists.
        """
        with self._lock:
            self._require_open()
            try:
                return self._items[item_id]
            except KeyError:
                raise MissingItemError(f"No stored item with id {item_id}") from None

    def upsert(self, item: StoredItem) -> None:
        """Insert ``item`` or replace the stored item with the same id."""
        with self._lock:
            self._require_open()
            self._write(item)

    def save(self, item: StoredItem) -> bool:
        """Insert ``item`` unless its id is already stored.

        Returns:
            bool: False when the id already existed and nothing was written.
        """
        with self._lock:
            self._require_open()
            if item.id in self._items:
                LOGGER.warning("Ignoring duplicate save for item %s; use upsert().", item.id)
                return False
            self._write(item)
            return True

    def _write(self, item: StoredItem) -> None:
        # Memory only keeps what made it to the backing store.
        previous = self._items.get(item.id)
        self._items[item.id] = item
        try:
            self._persist()
        except Exception:
            if previous is None:
                del self._items[item.id]
            else:
                self._items[item.id] = previous
            raise

    def _require_open(self) -> None:
        if not self._opened:
            raise StateError(f"{type(self).__name__} is not open.")

    @abstractmethod
    def _load(self) -> Iterable[StoredItem]:
        raise NotImplementedError

    @abstractmethod
    def _persist(self) -> None:
        raise NotImplementedError


class InMemoryItemStore(ItemStore):
    """Process-local store, optionally pre-populated."""

    def __init__(self, items: Iterable[StoredItem] = ()) -> None:
        super().__init__()
        self._initial = list(items)

    def _load(self) -> Iterable[StoredItem]:
        return list(self._initial)

    def _persist(self) -> None:
        self._initial = list(self._items.values())


class JsonItemStore(ItemStore):
    """Store items in a single JSON document, writing through on each change."""

    def __init__(self, path: Path) -> None:
        super().__init__()
        self._path = Path(path).expanduser()

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> Iterable[StoredItem]:
        """Read items from disk.

        Raises:
            StateError: If the file is not valid JSON or holds invalid items.
        """
        if not self._path.exists():
            return []
        try:
            payload = json.loads(self._path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise StateError(f"Invalid item store data in {self._path}: {exc}") from exc
        except OSError as exc:
            raise StateError(f"Unable to read item store {self._path}: {exc}") from exc

        raw_items = payload.get("items", []) if isinstance(payload, dict) else payload
        if not isinstance(raw_items, list):
            raise StateError(f"Item store {self._path} must hold a list of items.")
        try:
            return [StoredItem.model_validate(raw) for raw in raw_items]
        except ValidationError as exc:
            raise StateError(f"Invalid stored item in {self._path}: {exc}") from exc

    def _persist(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        payload = {
            "version": STORE_FORMAT_VERSION,
            "items": [item.model_dump(mode="json") for item in self._items.values()],
        }
        staging = self._path.with_suffix(self._path.suffix + ".tmp")
        staging.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        staging.replace(self._path)


def find_item(items: Iterable[StoredItem], prefix: str) -> Optional[StoredItem]:
    """Return the single item whose id starts with ``prefix``.

    Raises:
        StateError: If the prefix matches more than one item.
    """
    needle = prefix.strip().lower()
    matches = [item for item in items if str(item.id).startswith(needle)]
    if len(matches) > 1:
        ids = ", ".join(str(item.id) for item in matches)
        raise StateError(f"Id prefix '{prefix}' is ambiguous: {ids}")
    return matches[0] if matches else None


__all__ = [
    "ItemStore",
    "InMemoryItemStore",
    "JsonItemStore",
    "ItemFactory",
    "ItemState",
    "StoredItem",
    "StateError",
    "MissingItemError",
    "STORE_FORMAT_VERSION",
    "find_item",
]
