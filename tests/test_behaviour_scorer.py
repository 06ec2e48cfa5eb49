"""Tests for the behaviour scorer."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from resurface.behaviour import BehaviourScorer
from resurface.capture import CaptureTrigger
from resurface.classification import ItemCategory, StackType
from resurface.config.models import ScoringSettings
from resurface.state import ItemState, StoredItem

NOW = datetime(2026, 10, 19, 12, 0)


def _item(**overrides) -> StoredItem:
    fields = {
        "id": uuid4(),
        "created_at": NOW - timedelta(days=1),
        "category": ItemCategory.RECIPE,
        "stack": StackType.FOOD,
        "trigger": CaptureTrigger.QUICK_SAVE,
        "text_snippet": "Pasta",
    }
    fields.update(overrides)
    return StoredItem(**fields)


def test_empty_pool_returns_none() -> None:
    scorer = BehaviourScorer()

    assert scorer.best_item(StackType.FOOD, NOW, []) is None
    assert scorer.best_item(StackType.FOOD, NOW, None) is None


def test_pool_without_matching_stack_returns_none() -> None:
    items = [_item(stack=StackType.BODY, category=ItemCategory.WORKOUT)]

    assert BehaviourScorer().best_item(StackType.FOOD, NOW, items) is None


def test_only_requested_stack_competes() -> None:
    food = _item(created_at=NOW - timedelta(days=6))
    body = _item(stack=StackType.BODY, category=ItemCategory.WORKOUT, created_at=NOW)

    assert BehaviourScorer().best_item(StackType.FOOD, NOW, [body, food]) == food


@pytest.mark.parametrize("shown_first", [True, False])
def test_recently_shown_item_is_suppressed(shown_first: bool) -> None:
    shown = _item(last_shown_at=NOW - timedelta(hours=1))
    never_shown = _item()
    items = [shown, never_shown] if shown_first else [never_shown, shown]

    assert BehaviourScorer().best_item(StackType.FOOD, NOW, items) == never_shown


def test_suppression_outweighs_freshness_and_actions() -> None:
    shown = _item(created_at=NOW, times_acted_on=20, last_shown_at=NOW - timedelta(minutes=5))
    stale = _item(created_at=NOW - timedelta(days=30), state=ItemState.DISMISSED, times_dismissed=2)

    assert BehaviourScorer().best_item(StackType.FOOD, NOW, [shown, stale]) == stale


def test_suppression_ends_at_threshold() -> None:
    scorer = BehaviourScorer()
    item = _item(last_shown_at=NOW - timedelta(hours=24))

    assert scorer.score(item, NOW).suppression == 0.0
    assert scorer.score(item, NOW - timedelta(seconds=1)).suppression == -1000.0


def test_dismissals_cost_exactly_the_per_dismissal_penalty() -> None:
    scorer = BehaviourScorer()
    clean = _item()
    dismissed = _item(times_dismissed=3)

    difference = scorer.score(clean, NOW).total - scorer.score(dismissed, NOW).total

    assert difference == pytest.approx(3 * scorer.settings.per_dismissal_penalty)
    assert scorer.best_item(StackType.FOOD, NOW, [dismissed, clean]) == clean


def test_actions_boost_linearly() -> None:
    scorer = BehaviourScorer()

    breakdown = scorer.score(_item(times_acted_on=4), NOW)

    assert breakdown.actions == pytest.approx(40.0)


def test_dismissed_state_penalty_only_applies_to_dismissed() -> None:
    scorer = BehaviourScorer()

    assert scorer.score(_item(state=ItemState.FRESH), NOW).state == 0.0
    assert scorer.score(_item(state=ItemState.ACTED), NOW).state == 0.0
    assert scorer.score(_item(state=ItemState.DISMISSED), NOW).state == -20.0


@pytest.mark.parametrize(
    ("age", "boost"),
    [
        (timedelta(0), 50.0),
        (timedelta(days=3, hours=12), 25.0),
        (timedelta(days=7), 0.0),
        (timedelta(days=30), 0.0),
        (-timedelta(hours=2), 50.0),
    ],
)
def test_freshness_decays_linearly(age: timedelta, boost: float) -> None:
    breakdown = BehaviourScorer().score(_item(created_at=NOW - age), NOW)

    assert breakdown.freshness == pytest.approx(boost)


def test_total_combines_all_terms() -> None:
    item = _item(
        created_at=NOW,
        state=ItemState.DISMISSED,
        times_dismissed=1,
        times_acted_on=2,
        last_shown_at=NOW - timedelta(hours=1),
    )

    total = BehaviourScorer().score(item, NOW).total

    assert total == pytest.approx(100 + 50 - 1000 - 30 + 20 - 20)


def test_ties_keep_collection_order() -> None:
    first = _item()
    second = _item()
    scorer = BehaviourScorer()

    assert scorer.best_item(StackType.FOOD, NOW, [first, second]) == first
    assert scorer.best_item(StackType.FOOD, NOW, [second, first]) == second


def test_best_item_is_idempotent() -> None:
    items = tuple(_item(times_acted_on=index % 3, times_dismissed=index % 2) for index in range(6))
    scorer = BehaviourScorer()

    first = scorer.best_item(StackType.FOOD, NOW, items)
    second = scorer.best_item(StackType.FOOD, NOW, items)

    assert first is not None
    assert first == second


def test_negative_scores_still_win_without_minimum() -> None:
    item = _item(times_dismissed=50, last_shown_at=NOW)

    assert BehaviourScorer().best_item(StackType.FOOD, NOW, [item]) == item


def test_minimum_score_withholds_low_winners() -> None:
    scorer = BehaviourScorer(ScoringSettings(minimum_score=0.0))
    item = _item(times_dismissed=50)

    assert scorer.best_item(StackType.FOOD, NOW, [item]) is None
    assert scorer.best_item(StackType.FOOD, NOW, [_item()]) is not None


def test_custom_settings_change_weights() -> None:
    scorer = BehaviourScorer(ScoringSettings(per_dismissal_penalty=5.0, freshness_boost_max=0.0))

    breakdown = scorer.score(_item(times_dismissed=2), NOW)

    assert breakdown.total == pytest.approx(90.0)


def test_mixed_naive_and_aware_datetimes() -> None:
    item = _item(created_at=datetime(2026, 10, 19, 11, 0, tzinfo=timezone.utc))

    breakdown = BehaviourScorer().score(item, datetime(2026, 10, 19, 12, 0))

    assert 0.0 < breakdown.freshness < 50.0


def test_rank_orders_descending() -> None:
    low = _item(times_dismissed=1)
    high = _item(times_acted_on=1)
    middle = _item()

    ranking = BehaviourScorer().rank(StackType.FOOD, NOW, [low, high, middle])

    assert [candidate.item for candidate in ranking] == [high, middle, low]
