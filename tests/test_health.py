"""Unit tests for health classification.

Each class exercises one gate of the classifier in isolation.
"""

from context_diag.analysis import evaluate_agent
from context_diag.engine import new_event_id
from context_diag.models import (
    Alerts,
    DiagnosticEvent,
    DiagnosticEventType,
    EffectiveThresholds,
    HealthGrade,
    Severity,
    ToolCallStats,
)
from context_diag.summary import classify_health, worst_grade

from .helpers import make_series, timestamp


def _event(event_type, agent_id="researcher", data=None):
    return DiagnosticEvent(
        id=new_event_id(),
        timestamp=timestamp(0),
        agent_id=agent_id,
        severity=Severity.WARNING,
        type=event_type,
        message=event_type.value,
        data=data,
    )


def _classify(pcts, thresholds=None, tool_stats=None):
    thresholds = thresholds or EffectiveThresholds(profile_id="researcher")
    series = make_series(pcts, tool_stats=tool_stats)
    return classify_health(series, evaluate_agent(series, thresholds), thresholds)


class TestHealthy:
    def test_empty_series_is_healthy(self):
        assert _classify([]) == HealthGrade.HEALTHY

    def test_low_usage_is_healthy(self):
        assert _classify([0.1, 0.2, 0.3, 0.4, 0.5]) == HealthGrade.HEALTHY

    def test_brief_warning_share_is_healthy(self):
        # 1 of 10 turns in warning = 10%, under the 20% share
        assert _classify([0.3] * 9 + [0.75]) == HealthGrade.HEALTHY


class TestUnhealthy:
    def test_lingering_is_unhealthy(self):
        thresholds = EffectiveThresholds(profile_id="researcher", max_turns_in_dumb_zone=2)
        assert _classify([0.5, 0.87, 0.88, 0.89, 0.90], thresholds) == HealthGrade.UNHEALTHY

    def test_lingering_event_alone_is_unhealthy(self):
        series = make_series([0.1, 0.1])
        events = [_event(DiagnosticEventType.DUMBZONE_LINGERING)]
        assert classify_health(series, events, Alerts()) == HealthGrade.UNHEALTHY

    def test_budget_overrun_is_unhealthy(self):
        series = make_series([0.1, 0.1])
        events = [_event(DiagnosticEventType.BUDGET_OVERRUN)]
        assert classify_health(series, events, Alerts()) == HealthGrade.UNHEALTHY

    def test_turn_blowout_is_unhealthy(self):
        thresholds = EffectiveThresholds(profile_id="researcher", expected_turns=(5, 20))
        assert _classify([0.1] * 41, thresholds) == HealthGrade.UNHEALTHY

    def test_tool_spike_in_dumb_zone_is_unhealthy(self):
        stats = [ToolCallStats(tool_use_count=4, tool_error_count=2)] + [ToolCallStats()]
        assert _classify([0.3, 0.9], tool_stats=stats) == HealthGrade.UNHEALTHY


class TestDegraded:
    def test_warning_share_above_limit_is_degraded(self):
        # 3 of 10 turns in warning = 30%
        assert _classify([0.3] * 7 + [0.72, 0.74, 0.76]) == HealthGrade.DEGRADED

    def test_recovered_dumb_zone_is_degraded(self):
        # Enters the dumb zone once, then compacts well below it
        pcts = [0.2] * 8 + [0.9] + [0.3] * 11
        assert _classify(pcts) == HealthGrade.DEGRADED

    def test_tool_spike_outside_dumb_zone_is_degraded(self):
        stats = [ToolCallStats(tool_use_count=5, tool_error_count=3)]
        assert _classify([0.2], tool_stats=stats) == HealthGrade.DEGRADED

    def test_past_expected_max_is_degraded(self):
        thresholds = EffectiveThresholds(profile_id="researcher", expected_turns=(5, 20))
        assert _classify([0.1] * 30, thresholds) == HealthGrade.DEGRADED

    def test_exactly_double_expected_max_is_not_blowout(self):
        thresholds = EffectiveThresholds(profile_id="researcher", expected_turns=(5, 20))
        assert _classify([0.1] * 40, thresholds) == HealthGrade.DEGRADED


class TestWorstGrade:
    def test_worst_of_mixed(self):
        grades = [HealthGrade.HEALTHY, HealthGrade.UNHEALTHY, HealthGrade.DEGRADED]
        assert worst_grade(grades) == HealthGrade.UNHEALTHY

    def test_degraded_beats_healthy(self):
        assert worst_grade([HealthGrade.HEALTHY, HealthGrade.DEGRADED]) == HealthGrade.DEGRADED

    def test_no_agents_is_healthy(self):
        assert worst_grade([]) == HealthGrade.HEALTHY
