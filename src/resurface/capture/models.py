"""Capture and feature data models."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field


class CaptureTrigger(str, Enum):
    """How the user initiated a capture."""

    QUICK_SAVE = "quick-save"
    SHARE_ACTION = "share-action"


class TimeBucket(str, Enum):
    """Coarse time-of-day partition of the 24-hour clock."""

    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"
    NIGHT = "night"


class CaptureEvent(BaseModel):
    """A single capture, exactly as handed over by a capture entry point.

    Every content field is optional; an event with no URL, text, or image is
    valid and simply classifies as uncategorized. The identifier is carried
    into the stored item unchanged.

    Attributes:
        id: Identifier generated at capture time.
        timestamp: Capture-local time of the capture.
        trigger: Entry point that produced the capture.
        source_app: Identifier of the app the content came from, if known.
        url: URL of the captured content, if any.
        raw_text: Captured text, if any.
        image_data: Raw image bytes; stored as-is and never decoded here.
    """

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4)
    timestamp: datetime = Field(default_factory=datetime.now)
    trigger: CaptureTrigger
    source_app: Optional[str] = None
    url: Optional[str] = None
    raw_text: Optional[str] = None
    image_data: Optional[bytes] = Field(default=None, repr=False)


class FeatureVector(BaseModel):
    """Classification features derived from a capture.

    Attributes:
        domain: Lowercased URL host without scheme, port, path, or ``www.``.
        source_app: Source application identifier copied from the capture.
        time_bucket: Time-of-day bucket of the capture timestamp.
        day_of_week: Day of week, 1 = Sunday through 7 = Saturday.
        text_snippet: Trimmed, truncated capture text; empty when absent.
        has_measurement_units: Snippet mentions cooking/measurement units.
        has_workout_markers: Snippet mentions sets, reps, weights, or exercises.
        has_quote_markers: Snippet has quotation marks or a dash attribution.
        has_reading_markers: Snippet mentions articles, newsletters, or news.
    """

    model_config = ConfigDict(frozen=True)

    domain: Optional[str] = None
    source_app: Optional[str] = None
    time_bucket: TimeBucket
    day_of_week: int = Field(ge=1, le=7)
    text_snippet: str = ""
    has_measurement_units: bool = False
    has_workout_markers: bool = False
    has_quote_markers: bool = False
    has_reading_markers: bool = False


__all__ = ["CaptureTrigger", "TimeBucket", "CaptureEvent", "FeatureVector"]
