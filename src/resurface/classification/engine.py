"""Heuristic classification of capture features.

The rest of the codebase depends only on the ``Classifier`` protocol so the
keyword heuristics here can later be swapped for a statistical model without
touching extraction, storage, or scoring.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Mapping, Optional, Protocol

from resurface.capture.models import FeatureVector

from .models import ClassificationResult, ItemCategory

LOGGER = logging.getLogger(__name__)

DEFAULT_CONFIDENCE_FLOOR = 0.5


class Classifier(Protocol):
    """Anything that maps a feature vector to a classification result."""

    def classify(self, features: FeatureVector) -> ClassificationResult: ...


@dataclass(frozen=True)
class CategorySignals:
    """Evidence weights that point towards one category.

    Attributes:
        domains: Host suffixes that strongly indicate the category.
        source_apps: Source application identifier prefixes.
        flag: Name of the ``FeatureVector`` flag backing the category.
        cues: Supporting words searched for in the snippet.
        domain_weight: Weight of a domain match.
        source_app_weight: Weight of a source application match.
        flag_weight: Weight of the heuristic flag.
        cue_weight: Weight of each matching cue word.
    """

    domains: frozenset[str]
    source_apps: tuple[str, ...]
    flag: str
    cues: tuple[str, ...] = ()
    domain_weight: float = 0.75
    source_app_weight: float = 0.6
    flag_weight: float = 0.55
    cue_weight: float = 0.15
    _cue_pattern: Optional[re.Pattern[str]] = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.cues:
            pattern = re.compile(
                r"\b(?:" + "|".join(re.escape(cue) for cue in self.cues) + r")\b", re.IGNORECASE
            )
            object.__setattr__(self, "_cue_pattern", pattern)

    def weights(self, features: FeatureVector) -> list[float]:
        """Return the weight of every signal present in ``features``."""
        matched: list[float] = []
        if features.domain and _matches_domain(features.domain, self.domains):
            matched.append(self.domain_weight)
        # The source app only corroborates content; on its own it says nothing.
        has_content = bool(features.domain or features.text_snippet)
        if (
            has_content
            and features.source_app
            and features.source_app.lower().startswith(self.source_apps)
        ):
            matched.append(self.source_app_weight)
        if getattr(features, self.flag):
            matched.append(self.flag_weight)
        if self._cue_pattern is not None and features.text_snippet:
            cue_hits = {hit.lower() for hit in self._cue_pattern.findall(features.text_snippet)}
            matched.extend([self.cue_weight] * len(cue_hits))
        return matched


DEFAULT_SIGNALS: Mapping[ItemCategory, CategorySignals] = {
    ItemCategory.RECIPE: CategorySignals(
        domains=frozenset(
            {
                "allrecipes.com",
                "bbcgoodfood.com",
                "bonappetit.com",
                "cooking.nytimes.com",
                "epicurious.com",
                "food52.com",
                "seriouseats.com",
                "budgetbytes.com",
            }
        ),
        source_apps=("com.paprika", "com.mealime", "com.nytimes.cooking"),
        flag="has_measurement_units",
        cues=("recipe", "ingredients", "bake", "oven", "simmer", "dinner", "sauce", "carbonara"),
    ),
    ItemCategory.WORKOUT: CategorySignals(
        domains=frozenset({"strava.com", "myfitnesspal.com", "bodybuilding.com", "trainingpeaks.com", "darebee.com"}),
        source_apps=("com.strava", "com.myfitnesspal", "com.nike.ntc", "com.apple.fitness"),
        flag="has_workout_markers",
        cues=("workout", "bench press", "cardio", "stretch", "mobility", "hiit", "run", "training"),
    ),
    ItemCategory.QUOTE: CategorySignals(
        domains=frozenset({"goodreads.com", "brainyquote.com", "quotefancy.com"}),
        source_apps=("com.goodreads",),
        flag="has_quote_markers",
        cues=("quote", "said", "wisdom"),
        flag_weight=0.6,
        domain_weight=0.7,
    ),
    ItemCategory.READING: CategorySignals(
        domains=frozenset(
            {
                "medium.com",
                "substack.com",
                "news.ycombinator.com",
                "nytimes.com",
                "theguardian.com",
                "bbc.co.uk",
                "bbc.com",
                "theatlantic.com",
                "newyorker.com",
            }
        ),
        source_apps=("com.apple.news", "com.medium", "com.readwise", "com.getpocket"),
        flag="has_reading_markers",
        cues=("read", "story", "analysis", "show hn"),
        domain_weight=0.65,
    ),
}


def _matches_domain(domain: str, allowlist: frozenset[str]) -> bool:
    return any(domain == entry or domain.endswith(f".{entry}") for entry in allowlist)


def combine_weights(weights: list[float]) -> float:
    """Noisy-or combination: ``1 - prod(1 - w)``."""
    remaining = 1.0
    for weight in weights:
        remaining *= 1.0 - min(max(weight, 0.0), 1.0)
    return 1.0 - remaining


class HeuristicClassifier:
    """Keyword and allowlist classifier with a minimum actionable confidence.

    Every category's signals are scored independently; the best category wins
    if it clears ``confidence_floor``, otherwise the result is uncategorized
    but keeps the computed confidence.
    """

    def __init__(
        self,
        confidence_floor: float = DEFAULT_CONFIDENCE_FLOOR,
        signals: Mapping[ItemCategory, CategorySignals] | None = None,
    ) -> None:
        self.confidence_floor = confidence_floor
        self.signals = dict(signals if signals is not None else DEFAULT_SIGNALS)

    def scores(self, features: FeatureVector) -> dict[ItemCategory, float]:
        """Return the combined confidence for every known category."""
        return {
            category: combine_weights(signals.weights(features))
            for category, signals in self.signals.items()
        }

    def classify(self, features: FeatureVector) -> ClassificationResult:
        """Classify ``features``.

        Args:
            features: Feature vector produced by the extractor.

        Returns:
            ClassificationResult: Winning category, or ``none`` when nothing
            clears the confidence floor.
        """
        scores = self.scores(features)
        best_category = ItemCategory.NONE
        best_confidence = 0.0
        # Ties keep the earlier category in declaration order.
        for category in ItemCategory:
            confidence = scores.get(category, 0.0)
            if confidence > best_confidence:
                best_category, best_confidence = category, confidence

        if best_confidence < self.confidence_floor:
            LOGGER.debug(
                "No category cleared %.2f (best %s at %.2f).",
                self.confidence_floor,
                best_category.value,
                best_confidence,
            )
            return ClassificationResult.uncategorized(best_confidence)

        return ClassificationResult.for_category(best_category, best_confidence)


__all__ = [
    "DEFAULT_CONFIDENCE_FLOOR",
    "Classifier",
    "CategorySignals",
    "DEFAULT_SIGNALS",
    "HeuristicClassifier",
    "combine_weights",
]
