"""Build stored items from classified captures."""

from __future__ import annotations

from datetime import datetime

from resurface.capture.models import CaptureEvent
from resurface.classification.models import ClassificationResult

from .models import ItemState, StoredItem


class ItemFactory:
    """Create fresh ``StoredItem`` records.

    The factory copies text exactly as supplied; trimming or truncation is the
    caller's job.
    """

    def from_capture(
        self,
        event: CaptureEvent,
        classification: ClassificationResult,
        now: datetime,
    ) -> StoredItem:
        """Return the initial stored record for ``event``.

        Args:
            event: Capture the item originates from.
            classification: Classifier output for the capture.
            now: Creation timestamp for the item.

        Returns:
            StoredItem: Item in the ``fresh`` state with zeroed counters.
        """
        return StoredItem(
            id=event.id,
            created_at=now,
            category=classification.category,
            stack=classification.stack,
            trigger=event.trigger,
            url=event.url,
            text_snippet=event.raw_text,
            state=ItemState.FRESH,
            times_dismissed=0,
            times_acted_on=0,
            last_shown_at=None,
            last_action_at=None,
        )


__all__ = ["ItemFactory"]
