"""Session summary builder.

Combines per-agent health grades, statistics, insights and suggestions into
one SessionSummary. Overall health is the worst agent grade.
"""

from __future__ import annotations

import logging
from collections import Counter

from whenever import Instant

from context_diag.models import (
    DEFAULT_FALLBACK,
    AgentSummary,
    AgentTimeSeries,
    DiagnosticEvent,
    DiagnosticEventType,
    EffectiveThresholds,
    FallbackThresholds,
    HealthGrade,
    Insight,
    ProfilesConfig,
    SessionSummary,
    events_of_type,
)
from context_diag.profiles import get_effective_thresholds

from .health import classify_health, worst_grade
from .insights import generate_insights
from .suggestions import SuggestionInput, generate_suggestions

logger = logging.getLogger("context_diag.summary")


def build_session_summary(
    session_id: str,
    agents: list[AgentTimeSeries],
    events: list[DiagnosticEvent],
    profiles_config: ProfilesConfig | None = None,
    fallback: FallbackThresholds = DEFAULT_FALLBACK,
) -> SessionSummary:
    """Build a complete session summary from time series data and events."""
    agent_summaries: list[AgentSummary] = []
    suggestion_inputs: list[SuggestionInput] = []
    insights: list[Insight] = []

    for ts in agents:
        agent_events = [e for e in events if e.agent_id == ts.agent_id]
        thresholds = get_effective_thresholds(ts.agent_id, ts.model, profiles_config, fallback)
        health = classify_health(ts, agent_events, thresholds)

        agent_summaries.append(_agent_summary(ts, agent_events, thresholds, health))
        insights.extend(generate_insights(ts, agent_events, thresholds))
        suggestion_inputs.append(
            SuggestionInput(
                agent_id=ts.agent_id,
                health=health,
                time_series=ts,
                events=agent_events,
                thresholds=thresholds,
            )
        )

    start_time, end_time, duration_ms = _time_bounds(agents)
    overall = worst_grade(a.health for a in agent_summaries)
    logger.info("Session %s overall health: %s", session_id, overall.value)

    return SessionSummary(
        session_id=session_id,
        start_time=start_time,
        end_time=end_time,
        total_duration_ms=duration_ms,
        agents=agent_summaries,
        insights=insights,
        suggestions=generate_suggestions(suggestion_inputs),
        overall_health=overall,
    )


def _agent_summary(
    ts: AgentTimeSeries,
    events: list[DiagnosticEvent],
    thresholds: EffectiveThresholds,
    health: HealthGrade,
) -> AgentSummary:
    points = ts.points
    total_turns = len(points)

    # Tool stats: the last spike carries cumulative totals; otherwise sum the series
    spikes = events_of_type(events, DiagnosticEventType.TOOL_ERROR_SPIKE)
    if spikes:
        data = spikes[-1].data or {}
        tool_calls = int(data.get("total_calls", 0))
        tool_errors = int(data.get("total_errors", 0))
        tool_error_rate = float(data.get("error_rate", 0.0))
    else:
        tool_calls = sum(s.tool_use_count for s in ts.tool_stats)
        tool_errors = sum(s.tool_error_count for s in ts.tool_stats)
        tool_error_rate = tool_errors / tool_calls if tool_calls else 0.0

    return AgentSummary(
        agent_id=ts.agent_id,
        model=ts.model,
        label=ts.label,
        health=health,
        profile_id=thresholds.profile_id,
        total_turns=total_turns,
        peak_pct=max((p.pct for p in points), default=0.0),
        final_pct=points[-1].pct if points else 0.0,
        avg_context_pct=sum(p.pct for p in points) / total_turns if total_turns else 0.0,
        turns_in_warning=sum(1 for p in points if p.pct >= thresholds.warning_threshold),
        turns_in_dumb_zone=sum(1 for p in points if p.pct >= thresholds.dumb_zone_threshold),
        compactions=len(ts.compactions),
        tool_call_count=tool_calls,
        tool_error_count=tool_errors,
        tool_error_rate=tool_error_rate,
        event_counts=dict(Counter(e.type.value for e in events)),
        events=events,
    )


def _time_bounds(agents: list[AgentTimeSeries]) -> tuple[str, str, int]:
    """Earliest and latest point timestamps across agents, and the span in ms."""
    instants = sorted(
        (Instant.parse_iso(p.t), p.t) for ts in agents for p in ts.points
    )
    if not instants:
        now = Instant.now().format_iso()
        return now, now, 0

    (start, start_iso), (end, end_iso) = instants[0], instants[-1]
    duration_ms = round((end - start).in_seconds() * 1000)
    return start_iso, end_iso, duration_ms
