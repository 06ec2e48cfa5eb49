"""Sample items for exercising the scorer by hand."""

from __future__ import annotations

from datetime import datetime, timedelta
from uuid import uuid4

from resurface.capture.models import CaptureTrigger
from resurface.classification.models import ItemCategory, StackType

from .models import ItemState, StoredItem


def seed_items(now: datetime) -> list[StoredItem]:
    """Return one sample item per populated stack, dated relative to ``now``."""
    one_day = timedelta(days=1)
    return [
        StoredItem(
            id=uuid4(),
            created_at=now - one_day * 2,
            category=ItemCategory.RECIPE,
            stack=StackType.FOOD,
            trigger=CaptureTrigger.QUICK_SAVE,
            url="https://allrecipes.com/pasta",
            text_snippet="Delicious Pasta Carbonara Recipe",
        ),
        StoredItem(
            id=uuid4(),
            created_at=now - one_day * 5,
            category=ItemCategory.WORKOUT,
            stack=StackType.BODY,
            trigger=CaptureTrigger.SHARE_ACTION,
            url="https://youtube.com/workout",
            text_snippet="15 Min HIIT Workout",
        ),
        StoredItem(
            id=uuid4(),
            created_at=now - timedelta(hours=1),
            category=ItemCategory.QUOTE,
            stack=StackType.MIND,
            trigger=CaptureTrigger.QUICK_SAVE,
            text_snippet="“The only way to do great work is to love what you do.”",
            state=ItemState.ACTED,
            times_acted_on=1,
            last_shown_at=now - timedelta(minutes=30),
            last_action_at=now - timedelta(minutes=28),
        ),
        StoredItem(
            id=uuid4(),
            created_at=now,
            category=ItemCategory.READING,
            stack=StackType.READING,
            trigger=CaptureTrigger.SHARE_ACTION,
            url="https://news.ycombinator.com",
            text_snippet="Show HN: Resurface App",
        ),
    ]


__all__ = ["seed_items"]
