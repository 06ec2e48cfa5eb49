"""Capture ingestion pipeline."""

from .models import CaptureBatch
from .pipeline import CapturePipeline

__all__ = ["CaptureBatch", "CapturePipeline"]
