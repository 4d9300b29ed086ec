"""Session analysis - drives one Turn Evaluator per agent over a parsed session.

Each agent gets a fresh evaluator with thresholds resolved up front; its
turns are fed in order with per-turn tool statistics, then ``complete()``
closes the agent. Agents share no state.
"""

from __future__ import annotations

import logging

from pydantic import BaseModel

from context_diag.engine import TurnEvaluator
from context_diag.models import (
    DEFAULT_FALLBACK,
    AgentTimeSeries,
    DiagnosticEvent,
    EffectiveThresholds,
    FallbackThresholds,
    ProfilesConfig,
    SessionSummary,
)
from context_diag.parser import ParsedSession  # noqa: TC001
from context_diag.profiles import get_effective_thresholds
from context_diag.summary import build_session_summary

logger = logging.getLogger("context_diag.analysis")


class SessionAnalysis(BaseModel):
    events: list[DiagnosticEvent]
    summary: SessionSummary


def evaluate_agent(
    series: AgentTimeSeries,
    thresholds: EffectiveThresholds,
) -> list[DiagnosticEvent]:
    """Run a fresh evaluator over every turn of one agent, then complete it."""
    evaluator = TurnEvaluator(series.agent_id, thresholds)
    events: list[DiagnosticEvent] = []

    for index, point in enumerate(series.points):
        stats = series.tool_stats_at(index)
        events.extend(
            evaluator.evaluate_turn(point, stats.tool_use_count, stats.tool_error_count)
        )

    if series.points:
        events.append(evaluator.complete(series.points[-1].t))
    return events


def analyze_session(
    session: ParsedSession,
    profiles_config: ProfilesConfig | None = None,
    fallback: FallbackThresholds = DEFAULT_FALLBACK,
) -> SessionAnalysis:
    """Evaluate every agent in a session and summarize the result."""
    events: list[DiagnosticEvent] = []
    for series in session.agents:
        thresholds = get_effective_thresholds(
            series.agent_id, series.model, profiles_config, fallback
        )
        agent_events = evaluate_agent(series, thresholds)
        logger.info(
            "Agent %s: %d turn(s), %d event(s)",
            series.agent_id,
            len(series.points),
            len(agent_events),
        )
        events.extend(agent_events)

    summary = build_session_summary(
        session.session_id, session.agents, events, profiles_config, fallback
    )
    return SessionAnalysis(events=events, summary=summary)
