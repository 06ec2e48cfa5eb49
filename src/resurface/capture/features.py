"""Derive classification features from raw captures.

Extraction is total: any well-formed ``CaptureEvent`` (including one with no
URL, text, or image) yields a ``FeatureVector``. Malformed URLs degrade to a
missing domain and image bytes are never touched.
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import Optional
from urllib.parse import urlsplit

from .models import CaptureEvent, FeatureVector, TimeBucket

DEFAULT_SNIPPET_MAX_LENGTH = 500

# Inclusive start hour, exclusive end hour.
TIME_BUCKET_BOUNDARIES: tuple[tuple[int, int, TimeBucket], ...] = (
    (5, 12, TimeBucket.MORNING),
    (12, 18, TimeBucket.AFTERNOON),
    (18, 22, TimeBucket.EVENING),
    (22, 24, TimeBucket.NIGHT),
    (0, 5, TimeBucket.NIGHT),
)

_UNIT_PATTERN = re.compile(
    r"\d+(?:[.,]\d+)?\s*(?:g|kg|mg|ml|cl|l|oz|lb)\b"
    r"|\b(?:cups?|tbsps?|tsps?|tablespoons?|teaspoons?|grams?|ounces?|millilit(?:er|re)s?|pinch)\b",
    re.IGNORECASE,
)
_WORKOUT_PATTERN = re.compile(
    r"(?<![a-z])(?:reps?|sets?|kg|lbs?|squats?|deadlifts?|burpees?|push-?ups?|pull-?ups?"
    r"|hiit|amrap|emom|workout)\b",
    re.IGNORECASE,
)
_QUOTE_CHARS = re.compile(r"[\"“”«»„]|(?:^|\s)'[^']{6,}'")
# Dash attribution after a finished sentence, running to the end of the line.
_ATTRIBUTION = re.compile(
    r"[.!?…]['\"”’]?\s*(?:—|–|-{1,2})\s*[A-Z][\w.'-]*(?:\s+[A-Z][\w.'-]*){0,3}\s*$",
    re.MULTILINE,
)
_READING_PATTERN = re.compile(
    r"\b(?:articles?|newsletters?|news|blog(?:\s?posts?)?|essays?|long-?reads?|op-ed|editorial"
    r"|read later)\b",
    re.IGNORECASE,
)


def time_bucket_for_hour(hour: int) -> TimeBucket:
    """Return the bucket whose ``[start, end)`` range contains ``hour``."""
    hour %= 24
    for start, end, bucket in TIME_BUCKET_BOUNDARIES:
        if start <= hour < end:
            return bucket
    return TimeBucket.NIGHT


def day_of_week(moment: datetime) -> int:
    """Return the day of week with 1 = Sunday and 7 = Saturday."""
    return moment.isoweekday() % 7 + 1


def domain_from_url(url: Optional[str]) -> Optional[str]:
    """Return the lowercased host of ``url`` or None when it cannot be parsed."""
    if not url or not url.strip():
        return None
    candidate = url.strip()
    if "://" not in candidate and not candidate.startswith("//"):
        candidate = f"//{candidate}"
    try:
        host = urlsplit(candidate).hostname
    except ValueError:
        return None
    if not host:
        return None
    host = host.lower().rstrip(".")
    if any(char.isspace() for char in host):
        return None
    if host.startswith("www."):
        host = host[4:]
    return host or None


def has_measurement_units(text: str) -> bool:
    return bool(_UNIT_PATTERN.search(text))


def has_workout_markers(text: str) -> bool:
    return bool(_WORKOUT_PATTERN.search(text))


def has_quote_markers(text: str) -> bool:
    return bool(_QUOTE_CHARS.search(text) or _ATTRIBUTION.search(text))


def has_reading_markers(text: str) -> bool:
    return bool(_READING_PATTERN.search(text))


class FeatureExtractor:
    """Turn ``CaptureEvent`` objects into ``FeatureVector`` records."""

    def __init__(self, snippet_max_length: int = DEFAULT_SNIPPET_MAX_LENGTH) -> None:
        self.snippet_max_length = max(0, snippet_max_length)

    def snippet(self, raw_text: Optional[str]) -> str:
        """Return the trimmed snippet capped at ``snippet_max_length`` characters."""
        if not raw_text:
            return ""
        return raw_text.strip()[: self.snippet_max_length]

    def extract(self, capture: CaptureEvent) -> FeatureVector:
        """Derive the feature vector for ``capture``.

        Flags are computed over the truncated snippet that ends up in the vector.

        Args:
            capture: Capture to analyze.

        Returns:
            FeatureVector: Features for the classifier.
        """
        snippet = self.snippet(capture.raw_text)
        return FeatureVector(
            domain=domain_from_url(capture.url),
            source_app=capture.source_app,
            time_bucket=time_bucket_for_hour(capture.timestamp.hour),
            day_of_week=day_of_week(capture.timestamp),
            text_snippet=snippet,
            has_measurement_units=has_measurement_units(snippet),
            has_workout_markers=has_workout_markers(snippet),
            has_quote_markers=has_quote_markers(snippet),
            has_reading_markers=has_reading_markers(snippet),
        )


__all__ = [
    "DEFAULT_SNIPPET_MAX_LENGTH",
    "TIME_BUCKET_BOUNDARIES",
    "FeatureExtractor",
    "time_bucket_for_hour",
    "day_of_week",
    "domain_from_url",
    "has_measurement_units",
    "has_workout_markers",
    "has_quote_markers",
    "has_reading_markers",
]
