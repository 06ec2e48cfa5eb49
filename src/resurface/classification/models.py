"""Classification data models."""

from __future__ import annotations

import math
from enum import Enum
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, field_validator


class ItemCategory(str, Enum):
    """Fine-grained content category assigned by the classifier."""

    RECIPE = "recipe"
    WORKOUT = "workout"
    QUOTE = "quote"
    READING = "reading"
    NONE = "none"


class StackType(str, Enum):
    """Coarse topical bucket used for grouping and resurfacing."""

    FOOD = "food"
    BODY = "body"
    MIND = "mind"
    READING = "reading"
    OTHER = "other"

    @property
    def display_name(self) -> str:
        return _STACK_DISPLAY[self][0]

    @property
    def emoji(self) -> str:
        return _STACK_DISPLAY[self][1]


_STACK_DISPLAY = {
    StackType.FOOD: ("Food", "🍽️"),
    StackType.BODY: ("Body", "💪"),
    StackType.MIND: ("Mind", "🧠"),
    StackType.READING: ("Reading", "📚"),
    StackType.OTHER: ("Other", "📦"),
}

DEFAULT_STACKS = {
    ItemCategory.RECIPE: StackType.FOOD,
    ItemCategory.WORKOUT: StackType.BODY,
    ItemCategory.QUOTE: StackType.MIND,
    ItemCategory.READING: StackType.READING,
    ItemCategory.NONE: StackType.OTHER,
}


def default_stack(category: ItemCategory) -> StackType:
    """Return the stack a category maps to under the default policy."""
    return DEFAULT_STACKS[category]


def clamp_confidence(value: float) -> float:
    """Clamp ``value`` into ``[0.0, 1.0]``; NaN becomes 0.0."""
    if math.isnan(value):
        return 0.0
    return min(max(value, 0.0), 1.0)


class ClassificationResult(BaseModel):
    """Classifier output for a single capture.

    The stack is carried explicitly so a contextual policy can override the
    default category mapping. Confidence is clamped on every construction.

    Attributes:
        category: Predicted content category.
        stack: Stack the item is filed under.
        confidence: Confidence in ``[0.0, 1.0]``.
    """

    model_config = ConfigDict(frozen=True)

    category: ItemCategory
    stack: StackType
    confidence: float

    @field_validator("confidence", mode="before")
    @classmethod
    def _clamp(cls, value: object) -> float:
        try:
            number = float(value)  # type: ignore[arg-type]
        except (TypeError, ValueError) as exc:
            raise ValueError(f"confidence must be a number, got {value!r}") from exc
        return clamp_confidence(number)

    def model_copy(
        self, *, update: Mapping[str, Any] | None = None, deep: bool = False
    ) -> "ClassificationResult":
        """Copy the result; updated fields are validated so confidence stays clamped."""
        if not update:
            return super().model_copy(deep=deep)
        return type(self).model_validate({**self.model_dump(), **update})

    @classmethod
    def for_category(cls, category: ItemCategory, confidence: float) -> "ClassificationResult":
        """Build a result using the default stack for ``category``."""
        return cls(category=category, stack=default_stack(category), confidence=confidence)

    @classmethod
    def uncategorized(cls, confidence: float = 0.0) -> "ClassificationResult":
        return cls.for_category(ItemCategory.NONE, confidence)


__all__ = [
    "ItemCategory",
    "StackType",
    "DEFAULT_STACKS",
    "default_stack",
    "clamp_confidence",
    "ClassificationResult",
]
