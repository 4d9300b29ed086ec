"""Compaction detection.

A compaction is inferred when usage drops by more than
COMPACTION_DROP_THRESHOLD between consecutive turns. The same predicate is
used incrementally by the Turn Evaluator and in batch over a stored series,
so both agree index-by-index.
"""

from context_diag.models import COMPACTION_DROP_THRESHOLD, Compaction, UsagePoint


def is_compaction(prev_pct: float, curr_pct: float) -> bool:
    """True when the drop from prev to curr strictly exceeds the threshold.

    The drop is rounded before comparing so that float noise cannot turn a
    drop of exactly the threshold (0.75 -> 0.70) into a compaction.
    """
    return round(prev_pct - curr_pct, 9) > COMPACTION_DROP_THRESHOLD


def detect_compactions(points: list[UsagePoint]) -> list[Compaction]:
    """Detect compactions across an ordered series of usage points."""
    compactions: list[Compaction] = []
    for prev, curr in zip(points, points[1:]):
        if is_compaction(prev.pct, curr.pct):
            compactions.append(Compaction(t=curr.t, before=prev.abs, after=curr.abs))
    return compactions
