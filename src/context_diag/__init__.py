"""context-diag - context window diagnostics for LLM agent sessions.

Quick Start:
    from context_diag.engine import TurnEvaluator
    from context_diag.models import UsagePoint
    from context_diag.profiles import get_effective_thresholds

    thresholds = get_effective_thresholds("researcher", "claude-sonnet-4-5-20250929")
    evaluator = TurnEvaluator("researcher", thresholds)

    for point in points:  # UsagePoints in timestamp order
        events.extend(evaluator.evaluate_turn(point))
    events.append(evaluator.complete(points[-1].t))
"""

__version__ = "0.1.0"
