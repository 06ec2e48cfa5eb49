"""Tests for the item factory and stored item replacement helpers."""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest
from pydantic import ValidationError

from resurface.capture import CaptureEvent, CaptureTrigger
from resurface.classification import ClassificationResult, ItemCategory, StackType
from resurface.state import ItemFactory, ItemState, StoredItem

NOW = datetime(2026, 10, 19, 12, 0)


def _event(**overrides) -> CaptureEvent:
    fields = {
        "trigger": CaptureTrigger.SHARE_ACTION,
        "timestamp": NOW - timedelta(minutes=5),
        "url": "https://allrecipes.com/pasta",
        "raw_text": "  Pasta carbonara  ",
    }
    fields.update(overrides)
    return CaptureEvent(**fields)


@pytest.mark.parametrize("confidence", [0.0, 0.49, 0.5, 1.0])
def test_from_capture_yields_fresh_item(confidence: float) -> None:
    """Ensure new items start fresh with zeroed counters regardless of confidence.

    Args:
        confidence: Classifier confidence attached to the capture.
    """
    classification = ClassificationResult.for_category(ItemCategory.RECIPE, confidence)

    item = ItemFactory().from_capture(_event(), classification, NOW)

    assert item.state is ItemState.FRESH
    assert item.times_dismissed == 0
    assert item.times_acted_on == 0
    assert item.last_shown_at is None
    assert item.last_action_at is None


def test_from_capture_copies_event_fields() -> None:
    event = _event()
    classification = ClassificationResult(
        category=ItemCategory.QUOTE, stack=StackType.READING, confidence=0.7
    )

    item = ItemFactory().from_capture(event, classification, NOW)

    assert item.id == event.id
    assert item.created_at == NOW
    assert item.category is ItemCategory.QUOTE
    assert item.stack is StackType.READING
    assert item.trigger is CaptureTrigger.SHARE_ACTION
    assert item.url == "https://allrecipes.com/pasta"
    assert item.text_snippet == "  Pasta carbonara  "


def test_from_capture_handles_empty_event() -> None:
    event = CaptureEvent(trigger=CaptureTrigger.QUICK_SAVE)

    item = ItemFactory().from_capture(event, ClassificationResult.uncategorized(), NOW)

    assert item.url is None
    assert item.text_snippet is None
    assert item.stack is StackType.OTHER
    assert item.title == "Untitled"


def test_replacement_helpers_leave_original_untouched() -> None:
    original = ItemFactory().from_capture(
        _event(), ClassificationResult.for_category(ItemCategory.RECIPE, 0.9), NOW
    )
    later = NOW + timedelta(hours=2)

    shown = original.with_shown(later)
    acted = shown.with_action(later)
    dismissed = acted.with_dismissal(later + timedelta(days=1))

    assert original.last_shown_at is None
    assert shown.last_shown_at == later
    assert shown.state is ItemState.FRESH
    assert acted.state is ItemState.ACTED
    assert acted.times_acted_on == 1
    assert acted.last_action_at == later
    assert dismissed.state is ItemState.DISMISSED
    assert dismissed.times_dismissed == 1
    assert dismissed.times_acted_on == 1
    assert dismissed.last_shown_at == later


def test_stored_item_is_immutable() -> None:
    item = ItemFactory().from_capture(_event(), ClassificationResult.uncategorized(), NOW)

    with pytest.raises(ValidationError):
        item.state = ItemState.ACTED  # type: ignore[misc]


def test_negative_counters_are_rejected() -> None:
    with pytest.raises(ValidationError):
        StoredItem(
            id=_event().id,
            created_at=NOW,
            category=ItemCategory.NONE,
            stack=StackType.OTHER,
            trigger=CaptureTrigger.QUICK_SAVE,
            times_dismissed=-1,
        )


def test_inconsistent_state_and_counters_are_allowed() -> None:
    item = StoredItem(
        id=_event().id,
        created_at=NOW,
        category=ItemCategory.QUOTE,
        stack=StackType.MIND,
        trigger=CaptureTrigger.QUICK_SAVE,
        state=ItemState.DISMISSED,
        times_dismissed=0,
    )

    assert item.state is ItemState.DISMISSED
    assert item.times_dismissed == 0
