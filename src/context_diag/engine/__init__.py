"""Diagnostic engine: compaction detection and the per-agent Turn Evaluator."""

from .compaction import detect_compactions, is_compaction
from .evaluator import EvaluatorState, TurnEvaluator, new_event_id

__all__ = [
    "EvaluatorState",
    "TurnEvaluator",
    "detect_compactions",
    "is_compaction",
    "new_event_id",
]
