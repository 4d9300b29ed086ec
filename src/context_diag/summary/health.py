"""Health Classifier - worst-case triage over a finished (or in-progress) series.

Gates, evaluated in order, first match wins:

UNHEALTHY:
- Lingered in the dumb zone (any dumbzone_lingering)
- Budget overrun reported
- More than TURN_BLOWOUT_FACTOR x the expected max turns
- Tool error spike while at least one turn sat in the dumb zone

DEGRADED:
- More than WARNING_TURN_SHARE_MAX of turns at/above the warning threshold
- Entered the dumb zone but compacted out of it
- Any tool error spike
- More turns than expected max

HEALTHY: otherwise, including an agent with zero turns.
"""

from collections.abc import Iterable

from context_diag.models import (
    AgentTimeSeries,
    Alerts,
    DiagnosticEvent,
    DiagnosticEventType,
    HealthGrade,
    has_event,
)
from context_diag.models.config import TURN_BLOWOUT_FACTOR, WARNING_TURN_SHARE_MAX


def classify_health(
    time_series: AgentTimeSeries,
    events: list[DiagnosticEvent],
    thresholds: Alerts,
) -> HealthGrade:
    """Classify one agent's health from its series, events and thresholds."""
    points = time_series.points
    total_turns = len(points)
    if total_turns == 0:
        return HealthGrade.HEALTHY

    max_turns = thresholds.expected_turns[1]
    turns_in_warning = sum(1 for p in points if p.pct >= thresholds.warning_threshold)
    turns_in_dumb_zone = sum(1 for p in points if p.pct >= thresholds.dumb_zone_threshold)
    has_tool_spike = has_event(events, DiagnosticEventType.TOOL_ERROR_SPIKE)

    if has_event(events, DiagnosticEventType.DUMBZONE_LINGERING):
        return HealthGrade.UNHEALTHY
    if has_event(events, DiagnosticEventType.BUDGET_OVERRUN):
        return HealthGrade.UNHEALTHY
    if total_turns > max_turns * TURN_BLOWOUT_FACTOR:
        return HealthGrade.UNHEALTHY
    if has_tool_spike and turns_in_dumb_zone > 0:
        return HealthGrade.UNHEALTHY

    if turns_in_warning / total_turns > WARNING_TURN_SHARE_MAX:
        return HealthGrade.DEGRADED
    if has_event(events, DiagnosticEventType.DUMBZONE_ENTERED) and has_event(
        events, DiagnosticEventType.COMPACTION_DETECTED
    ):
        return HealthGrade.DEGRADED
    if has_tool_spike:
        return HealthGrade.DEGRADED
    if total_turns > max_turns:
        return HealthGrade.DEGRADED

    return HealthGrade.HEALTHY


def worst_grade(grades: Iterable[HealthGrade]) -> HealthGrade:
    """Aggregate grades worst-case; vacuously healthy."""
    return max(grades, key=lambda g: g.rank, default=HealthGrade.HEALTHY)
