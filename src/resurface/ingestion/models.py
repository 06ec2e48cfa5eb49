"""Result models for the capture pipeline."""

from __future__ import annotations

from typing import List
from uuid import UUID

from pydantic import BaseModel, Field

from resurface.state.models import StoredItem


class CaptureBatch(BaseModel):
    """Outcome of processing a group of captures.

    Attributes:
        stored: Items built from the captures and written to the store.
        uncategorized: Ids of stored captures that classified as ``none``.
        duplicates: Ids of captures that were already stored.
        errors: Human-readable store failures, one per capture.
    """

    stored: List[StoredItem] = Field(default_factory=list)
    uncategorized: List[UUID] = Field(default_factory=list)
    duplicates: List[UUID] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)
