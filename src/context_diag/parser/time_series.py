"""Build per-agent usage time series from transcript lines."""

from __future__ import annotations

import logging

from context_diag.engine import detect_compactions
from context_diag.models import (
    AgentTimeSeries,
    ToolCallStats,
    TranscriptLine,
    UsagePoint,
    context_limit_for,
)

from .tokens import compute_used_tokens, extract_tool_stats

logger = logging.getLogger("context_diag.parser")


def build_agent_time_series(
    agent_id: str,
    label: str,
    lines: list[TranscriptLine],
) -> AgentTimeSeries:
    """Build an AgentTimeSeries from every transcript line belonging to one agent.

    Turns are assistant lines carrying usage. Streaming writes the same uuid
    several times, so lines are deduplicated keeping the most complete
    (highest output_tokens) copy, then ordered by timestamp.
    """
    assistant_lines = [
        line
        for line in lines
        if line.type == "assistant"
        and line.message.role == "assistant"
        and line.message.usage is not None
    ]
    turns = sorted(deduplicate_by_uuid(assistant_lines), key=lambda line: line.instant)

    model = resolve_model(turns)
    limit = context_limit_for(model)

    replies: dict[str, list[TranscriptLine]] = {}
    for line in lines:
        if line.type == "user" and line.parent_uuid:
            replies.setdefault(line.parent_uuid, []).append(line)

    points: list[UsagePoint] = []
    tool_stats: list[ToolCallStats] = []
    for turn in turns:
        used = compute_used_tokens(turn.message.usage)
        points.append(UsagePoint(t=turn.timestamp, abs=used, pct=used / limit))
        tool_stats.append(_turn_tool_stats(turn, replies.get(turn.uuid, [])))

    logger.debug("Built %d point(s) for agent %s (%s)", len(points), agent_id, model)
    return AgentTimeSeries(
        agent_id=agent_id,
        model=model,
        label=label,
        limit=limit,
        points=points,
        compactions=detect_compactions(points),
        tool_stats=tool_stats,
    )


def deduplicate_by_uuid(lines: list[TranscriptLine]) -> list[TranscriptLine]:
    """Keep one line per uuid, preferring the highest output_tokens."""
    by_uuid: dict[str, TranscriptLine] = {}
    for line in lines:
        existing = by_uuid.get(line.uuid)
        if existing is None or _output_tokens(line) > _output_tokens(existing):
            by_uuid[line.uuid] = line
    return list(by_uuid.values())


def resolve_model(lines: list[TranscriptLine]) -> str:
    for line in lines:
        if line.message.model:
            return line.message.model
    return "unknown"


def _output_tokens(line: TranscriptLine) -> int:
    usage = line.message.usage
    return usage.output_tokens if usage is not None else 0


def _turn_tool_stats(turn: TranscriptLine, replies: list[TranscriptLine]) -> ToolCallStats:
    stats = extract_tool_stats(turn)
    errors = sum(extract_tool_stats(turn, reply).tool_error_count for reply in replies)
    return ToolCallStats(tool_use_count=stats.tool_use_count, tool_error_count=errors)
