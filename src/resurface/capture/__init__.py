"""Capture records and feature extraction."""

from .features import FeatureExtractor, time_bucket_for_hour
from .models import CaptureEvent, CaptureTrigger, FeatureVector, TimeBucket

__all__ = [
    "CaptureEvent",
    "CaptureTrigger",
    "FeatureExtractor",
    "FeatureVector",
    "TimeBucket",
    "time_bucket_for_hour",
]
