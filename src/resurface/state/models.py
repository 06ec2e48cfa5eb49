"""Stored item model and lifecycle helpers."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from resurface.capture.models import CaptureTrigger
from resurface.classification.models import ItemCategory, StackType


class ItemState(str, Enum):
    """Lifecycle state of a stored item from the user's perspective."""

    FRESH = "fresh"
    ACTED = "acted"
    DISMISSED = "dismissed"


class StoredItem(BaseModel):
    """Canonical persisted record of a classified capture.

    Instances are frozen; lifecycle changes produce a replacement through the
    ``with_*`` helpers. State and counters may disagree (for example a
    dismissed item with ``times_dismissed == 0`` from an older version), so
    readers must not assume they correlate.

    Attributes:
        id: Identifier of the originating capture.
        created_at: When the item was built from its capture.
        category: Content category.
        stack: Stack the item is filed under.
        trigger: Entry point that produced the capture.
        url: Captured URL, if any.
        text_snippet: Captured text, if any.
        state: Lifecycle state.
        times_dismissed: Number of dismissals; never decreases.
        times_acted_on: Number of actions; never decreases.
        last_shown_at: Last time the item was actually displayed.
        last_action_at: Last time the user acted on or dismissed the item.
    """

    model_config = ConfigDict(frozen=True)

    id: UUID
    created_at: datetime
    category: ItemCategory
    stack: StackType
    trigger: CaptureTrigger
    url: Optional[str] = None
    text_snippet: Optional[str] = None
    state: ItemState = ItemState.FRESH
    times_dismissed: int = Field(default=0, ge=0)
    times_acted_on: int = Field(default=0, ge=0)
    last_shown_at: Optional[datetime] = None
    last_action_at: Optional[datetime] = None

    @property
    def title(self) -> str:
        """Return a short human-readable label for listings."""
        if self.text_snippet:
            return self.text_snippet.splitlines()[0]
        if self.url:
            return self.url
        return "Untitled"

    def with_shown(self, at: datetime) -> "StoredItem":
        """Return a copy recording that the item was displayed at ``at``."""
        return self.model_copy(update={"last_shown_at": at})

    def with_action(self, at: datetime) -> "StoredItem":
        """Return a copy recording a primary action at ``at``."""
        return self.model_copy(
            update={
                "state": ItemState.ACTED,
                "times_acted_on": self.times_acted_on + 1,
                "last_action_at": at,
            }
        )

    def with_dismissal(self, at: datetime) -> "StoredItem":
        """Return a copy recording a dismissal at ``at``."""
        return self.model_copy(
            update={
                "state": ItemState.DISMISSED,
                "times_dismissed": self.times_dismissed + 1,
                "last_action_at": at,
            }
        )


__all__ = ["ItemState", "StoredItem"]
