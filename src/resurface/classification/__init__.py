"""Classification of capture features into categories and stacks."""

from .engine import Classifier, HeuristicClassifier
from .models import ClassificationResult, ItemCategory, StackType, default_stack

__all__ = [
    "Classifier",
    "HeuristicClassifier",
    "ClassificationResult",
    "ItemCategory",
    "StackType",
    "default_stack",
]
