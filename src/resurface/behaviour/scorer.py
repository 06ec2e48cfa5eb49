"""Select the single best stored item to resurface for a stack.

Scoring is a pure function of an item, a reference time, and the scoring
settings. Every candidate starts from a base score and receives independent
adjustments:

* freshness: ``freshness_boost_max * max(0, 1 - age / horizon)``
* suppression: ``-recent_shown_penalty`` if shown within the threshold
* dismissals: ``-times_dismissed * per_dismissal_penalty``
* actions: ``+times_acted_on * per_action_boost``
* state: ``-dismissed_state_penalty`` for dismissed items only

The highest score wins. Equal scores keep the item that appears first in the
caller's collection, so results never depend on hashing or sort stability.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, Optional

from resurface.classification.models import StackType
from resurface.config.models import ScoringSettings
from resurface.state.models import ItemState, StoredItem

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ScoreBreakdown:
    """Individual score terms for one item."""

    base: float
    freshness: float
    suppression: float
    dismissals: float
    actions: float
    state: float

    @property
    def total(self) -> float:
        return self.base + self.freshness + self.suppression + self.dismissals + self.actions + self.state


@dataclass(frozen=True, slots=True)
class ScoredItem:
    """A candidate paired with its score breakdown."""

    item: StoredItem
    breakdown: ScoreBreakdown

    @property
    def score(self) -> float:
        return self.breakdown.total


def elapsed_seconds(later: datetime, earlier: datetime) -> float:
    """Return ``later - earlier`` in seconds, treating naive datetimes as UTC."""
    if (later.tzinfo is None) != (earlier.tzinfo is None):
        later = _as_utc(later)
        earlier = _as_utc(earlier)
    return (later - earlier).total_seconds()


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


class BehaviourScorer:
    """Rank stored items and pick the one worth surfacing."""

    def __init__(self, settings: ScoringSettings | None = None) -> None:
        self.settings = settings or ScoringSettings()

    def score(self, item: StoredItem, at: datetime) -> ScoreBreakdown:
        """Return the score terms for ``item`` relative to ``at``."""
        settings = self.settings

        # Items stamped in the future count as brand new.
        age = max(0.0, elapsed_seconds(at, item.created_at))
        freshness = settings.freshness_boost_max * max(
            0.0, 1.0 - age / settings.freshness_horizon_seconds
        )

        suppression = 0.0
        if item.last_shown_at is not None:
            since_shown = elapsed_seconds(at, item.last_shown_at)
            if since_shown < settings.recent_shown_threshold_seconds:
                suppression = -settings.recent_shown_penalty

        # Fresh and acted items carry no state adjustment.
        state_adjustment = 0.0
        if item.state is ItemState.DISMISSED:
            state_adjustment = -settings.dismissed_state_penalty

        return ScoreBreakdown(
            base=settings.base_score,
            freshness=freshness,
            suppression=suppression,
            dismissals=-item.times_dismissed * settings.per_dismissal_penalty,
            actions=item.times_acted_on * settings.per_action_boost,
            state=state_adjustment,
        )

    def rank(self, stack: StackType, at: datetime, items: Iterable[StoredItem]) -> list[ScoredItem]:
        """Return candidates in ``stack`` ordered by descending score.

        Equal scores keep their original collection order.
        """
        scored = [
            ScoredItem(item=item, breakdown=self.score(item, at))
            for item in items
            if item.stack == stack
        ]
        return sorted(scored, key=lambda candidate: -candidate.score)

    def best_item(
        self,
        stack: StackType,
        at: datetime,
        items: Optional[Iterable[StoredItem]],
    ) -> Optional[StoredItem]:
        """Return the highest scoring item in ``stack`` or None.

        Args:
            stack: Stack to pick from.
            at: Reference time for decay and suppression.
            items: Snapshot of stored items; only those in ``stack`` compete.

        Returns:
            Optional[StoredItem]: The winner, or None when no item is in the
            stack (or the winner falls below ``minimum_score`` when set).
        """
        ranking = self.rank(stack, at, items or ())
        if not ranking:
            LOGGER.debug("No candidates for stack %s.", stack.value)
            return None

        if LOGGER.isEnabledFor(logging.DEBUG):
            LOGGER.debug("Ranking for stack %s at %s:", stack.value, at.isoformat())
            for candidate in ranking:
                LOGGER.debug(
                    "  [%.2f] %s (state=%s)",
                    candidate.score,
                    candidate.item.title,
                    candidate.item.state.value,
                )

        winner = ranking[0]
        floor = self.settings.minimum_score
        if floor is not None and winner.score < floor:
            LOGGER.info(
                "Best %s item scored %.2f, below minimum %.2f; nothing to surface.",
                stack.value,
                winner.score,
                floor,
            )
            return None
        return winner.item


__all__ = ["BehaviourScorer", "ScoreBreakdown", "ScoredItem", "elapsed_seconds"]
