"""Scoring and resurfacing of stored items."""

from .scorer import BehaviourScorer, ScoreBreakdown, ScoredItem
from .service import Resurfacer

__all__ = ["BehaviourScorer", "ScoreBreakdown", "ScoredItem", "Resurfacer"]
