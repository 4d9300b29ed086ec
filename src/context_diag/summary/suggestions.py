"""Actionable suggestions across all agents in a session.

Triage order (priority 1 is most urgent):
1. Unhealthy agents - lingering in the dumb zone, turn-count blowout
2. Budget overruns
3. Agents with no matching profile
4. Degraded agents - threshold tuning, tool error investigation
5. Coordination - more than one unhealthy agent

Ordering within a priority band is not guaranteed.
"""

from pydantic import BaseModel

from context_diag.models import (
    AgentTimeSeries,
    Alerts,
    DiagnosticEvent,
    DiagnosticEventType,
    HealthGrade,
    Suggestion,
    has_event,
)
from context_diag.models.config import TURN_BLOWOUT_FACTOR


class SuggestionInput(BaseModel):
    agent_id: str
    health: HealthGrade
    time_series: AgentTimeSeries
    events: list[DiagnosticEvent]
    thresholds: Alerts


def generate_suggestions(inputs: list[SuggestionInput]) -> list[Suggestion]:
    suggestions: list[Suggestion] = []

    for item in inputs:
        suggestions.extend(_agent_suggestions(item))

    unhealthy_count = sum(1 for i in inputs if i.health == HealthGrade.UNHEALTHY)
    if unhealthy_count > 1:
        suggestions.append(
            Suggestion(
                priority=5,
                message=(
                    f"{unhealthy_count} agents are unhealthy. "
                    "Review how work is distributed across agents."
                ),
                action="Review agent coordination strategy",
            )
        )

    suggestions.sort(key=lambda s: s.priority)
    return suggestions


def _agent_suggestions(item: SuggestionInput) -> list[Suggestion]:
    suggestions: list[Suggestion] = []
    agent_id = item.agent_id
    events = item.events
    points = item.time_series.points
    max_turns = item.thresholds.expected_turns[1]

    if item.health == HealthGrade.UNHEALTHY:
        if has_event(events, DiagnosticEventType.DUMBZONE_LINGERING):
            suggestions.append(
                Suggestion(
                    priority=1,
                    agent_id=agent_id,
                    message=(
                        f'Agent "{agent_id}" lingered in the dumb zone. Consider splitting '
                        "this task into smaller sub-agents or reducing tool result sizes."
                    ),
                    action="Split task or add compaction triggers",
                )
            )
        if len(points) > max_turns * TURN_BLOWOUT_FACTOR:
            suggestions.append(
                Suggestion(
                    priority=1,
                    agent_id=agent_id,
                    message=(
                        f'Agent "{agent_id}" used {len(points)} turns (expected max: '
                        f"{max_turns}). This suggests scope creep or an inefficient approach."
                    ),
                    action="Review task scope and expected turn range",
                )
            )

    if has_event(events, DiagnosticEventType.BUDGET_OVERRUN):
        suggestions.append(
            Suggestion(
                priority=2,
                agent_id=agent_id,
                message=(
                    f'Agent "{agent_id}" exceeded budget allocations. '
                    "Review system prompt and tool result sizes."
                ),
                action="Adjust budget allocations in profile",
            )
        )

    if has_event(events, DiagnosticEventType.UNMATCHED_AGENT):
        suggestions.append(
            Suggestion(
                priority=3,
                agent_id=agent_id,
                message=(
                    f'Agent "{agent_id}" has no profile. Create a profile to tune '
                    "thresholds for its workload pattern."
                ),
                action="Add profile to context-profiles.json",
            )
        )

    if item.health == HealthGrade.DEGRADED:
        peak_pct = max((p.pct for p in points), default=0.0)
        if item.thresholds.warning_threshold < peak_pct < item.thresholds.dumb_zone_threshold:
            suggestions.append(
                Suggestion(
                    priority=4,
                    agent_id=agent_id,
                    message=(
                        f'Agent "{agent_id}" peaked at {peak_pct:.1%} - close to dumb zone. '
                        "Consider lowering warningThreshold for earlier alerts."
                    ),
                    action="Adjust warningThreshold in profile",
                )
            )
        if has_event(events, DiagnosticEventType.TOOL_ERROR_SPIKE):
            suggestions.append(
                Suggestion(
                    priority=4,
                    agent_id=agent_id,
                    message=(
                        f'Agent "{agent_id}" experienced tool error spikes. '
                        "Check for flaky tools or permissions issues."
                    ),
                    action="Investigate tool errors",
                )
            )

    return suggestions
