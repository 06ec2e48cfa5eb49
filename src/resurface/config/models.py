"""Configuration models describing Resurface settings."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ResurfaceBaseModel(BaseModel):
    """Shared configuration for Resurface settings models."""

    model_config = ConfigDict(extra="forbid")


class ScoringSettings(ResurfaceBaseModel):
    """Weights used by the behaviour scorer.

    Attributes:
        base_score: Starting score for every candidate.
        freshness_horizon_seconds: Age at which the freshness boost reaches zero.
        freshness_boost_max: Boost granted to an item at age zero.
        recent_shown_threshold_seconds: Window after a showing during which an
            item is suppressed.
        recent_shown_penalty: Penalty applied inside the suppression window.
        per_dismissal_penalty: Penalty per recorded dismissal.
        per_action_boost: Boost per recorded action.
        dismissed_state_penalty: Extra penalty for items in the dismissed state.
        minimum_score: Optional floor; winners scoring below it are withheld.
    """

    base_score: float = 100.0
    freshness_horizon_seconds: float = Field(default=7 * 86_400, gt=0)
    freshness_boost_max: float = 50.0
    recent_shown_threshold_seconds: float = Field(default=24 * 3_600, ge=0)
    recent_shown_penalty: float = 1_000.0
    per_dismissal_penalty: float = 30.0
    per_action_boost: float = 10.0
    dismissed_state_penalty: float = 20.0
    minimum_score: Optional[float] = None


class ClassificationSettings(ResurfaceBaseModel):
    """Settings for feature extraction and classification.

    Attributes:
        confidence_floor: Minimum confidence for a category to be actionable.
        snippet_max_length: Maximum snippet length kept from captured text.
    """

    confidence_floor: float = Field(default=0.5, ge=0.0, le=1.0)
    snippet_max_length: int = Field(default=500, gt=0)


class StorageSettings(ResurfaceBaseModel):
    """Location of the persisted item collection.

    Attributes:
        path: JSON file holding stored items.
    """

    path: str = "~/.resurface/items.json"


class LoggingSettings(ResurfaceBaseModel):
    """Runtime logging configuration.

    Attributes:
        level: Logging verbosity level.
        file: Optional log file path; rotation is enabled when set.
        max_size_mb: Maximum log size before rotation.
        backup_count: Number of historical log files to retain.
    """

    level: str = "WARNING"
    file: Optional[str] = None
    max_size_mb: int = 10
    backup_count: int = 3


class ResurfaceConfig(ResurfaceBaseModel):
    """Top-level configuration struct for Resurface."""

    scoring: ScoringSettings = Field(default_factory=ScoringSettings)
    classification: ClassificationSettings = Field(default_factory=ClassificationSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


__all__ = [
    "ResurfaceBaseModel",
    "ScoringSettings",
    "ClassificationSettings",
    "StorageSettings",
    "LoggingSettings",
    "ResurfaceConfig",
]
