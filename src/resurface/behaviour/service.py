"""Surface items and record user responses against an item store."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional
from uuid import UUID

from resurface.classification.models import StackType
from resurface.state import ItemStore
from resurface.state.models import StoredItem

from .scorer import BehaviourScorer, ScoredItem

LOGGER = logging.getLogger(__name__)


class Resurfacer:
    """Glue between the scorer and an item store.

    Scoring itself never writes; only ``surface(record=True)``, ``act`` and
    ``dismiss`` replace items in the store.
    """

    def __init__(self, store: ItemStore, scorer: BehaviourScorer | None = None) -> None:
        self.store = store
        self.scorer = scorer or BehaviourScorer()

    def surface(self, stack: StackType, at: datetime, *, record: bool = True) -> Optional[StoredItem]:
        """Pick the best item in ``stack`` and optionally mark it as shown.

        Args:
            stack: Stack to pick from.
            at: Reference time, also used as the ``last_shown_at`` stamp.
            record: Persist ``last_shown_at`` on the winner when True.

        Returns:
            Optional[StoredItem]: The winner as stored after recording, or None.
        """
        winner = self.scorer.best_item(stack, at, self.store.fetch_all())
        if winner is None or not record:
            return winner
        shown = winner.with_shown(at)
        self.store.upsert(shown)
        LOGGER.info("Surfaced %s item %s.", stack.value, winner.id)
        return shown

    def explain(self, stack: StackType, at: datetime) -> list[ScoredItem]:
        """Return the full ranking for ``stack`` without recording anything."""
        return self.scorer.rank(stack, at, self.store.fetch_all())

    def preview(self, at: datetime) -> dict[StackType, Optional[StoredItem]]:
        """Return the current winner for every stack without recording anything."""
        snapshot = self.store.fetch_all()
        return {stack: self.scorer.best_item(stack, at, snapshot) for stack in StackType}

    def act(self, item_id: UUID, at: datetime) -> StoredItem:
        """Record a primary action on ``item_id``.

        Raises:
            MissingItemError: If the id is unknown.
        """
        updated = self.store.get(item_id).with_action(at)
        self.store.upsert(updated)
        return updated

    def dismiss(self, item_id: UUID, at: datetime) -> StoredItem:
        """Record a dismissal of ``item_id``.

        Raises:
            MissingItemError: If the id is unknown.
        """
        updated = self.store.get(item_id).with_dismissal(at)
        self.store.upsert(updated)
        return updated


__all__ = ["Resurfacer"]
