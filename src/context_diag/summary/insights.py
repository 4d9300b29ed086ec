"""Rule-based insights for a single agent."""

from context_diag.models import (
    AgentTimeSeries,
    Alerts,
    DiagnosticEvent,
    DiagnosticEventType,
    Insight,
    events_of_type,
    has_event,
)


def generate_insights(
    time_series: AgentTimeSeries,
    events: list[DiagnosticEvent],
    thresholds: Alerts,
) -> list[Insight]:
    insights: list[Insight] = []
    agent_id = time_series.agent_id
    points = time_series.points
    total_turns = len(points)

    if total_turns == 0:
        return insights

    dz_turns = sum(1 for p in points if p.pct >= thresholds.dumb_zone_threshold)
    if dz_turns > 0:
        insights.append(
            Insight(
                agent_id=agent_id,
                category="dumb-zone",
                message=(
                    f"Spent {dz_turns / total_turns:.1%} of turns "
                    f"({dz_turns}/{total_turns}) in the dumb zone"
                ),
            )
        )

    peak_pct = max(p.pct for p in points)
    peak_abs = max(p.abs for p in points)
    insights.append(
        Insight(
            agent_id=agent_id,
            category="peak-usage",
            message=f"Peak context usage: {peak_pct:.1%} ({peak_abs / 1000:.0f}k tokens)",
        )
    )

    compactions = time_series.compactions
    if compactions:
        avg_reduction = sum(c.before - c.after for c in compactions) / len(compactions)
        insights.append(
            Insight(
                agent_id=agent_id,
                category="compaction",
                message=(
                    f"{len(compactions)} compaction(s) with average reduction of "
                    f"{avg_reduction / 1000:.0f}k tokens"
                ),
            )
        )

    spikes = events_of_type(events, DiagnosticEventType.TOOL_ERROR_SPIKE)
    if spikes:
        rate = (spikes[-1].data or {}).get("error_rate", 0.0)
        insights.append(
            Insight(
                agent_id=agent_id,
                category="tool-errors",
                message=f"Tool error rate spiked - cumulative rate: {rate:.1%}",
            )
        )

    if has_event(events, DiagnosticEventType.UNMATCHED_AGENT):
        insights.append(
            Insight(
                agent_id=agent_id,
                category="profile",
                message=(
                    "No profile matched - using fallback thresholds. "
                    "Consider creating a profile for this agent."
                ),
            )
        )

    warn_turns = sum(
        1
        for p in points
        if thresholds.warning_threshold <= p.pct < thresholds.dumb_zone_threshold
    )
    if warn_turns > 0:
        insights.append(
            Insight(
                agent_id=agent_id,
                category="warning-zone",
                message=(
                    f"Spent {warn_turns} turns in warning zone "
                    f"({thresholds.warning_threshold:.0%}-{thresholds.dumb_zone_threshold:.0%})"
                ),
            )
        )

    return insights
