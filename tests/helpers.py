"""Builders for time series, usage points and transcript lines used across tests."""

import json

from context_diag.engine import detect_compactions
from context_diag.models import AgentTimeSeries, ToolCallStats, UsagePoint

LIMIT = 200_000
SONNET = "claude-sonnet-4-5-20250929"


def timestamp(i: int) -> str:
    """ISO timestamp i seconds past a fixed start."""
    return f"2025-06-01T10:{i // 60:02d}:{i % 60:02d}Z"


def make_points(pcts: list[float]) -> list[UsagePoint]:
    return [
        UsagePoint(t=timestamp(i), abs=round(pct * LIMIT), pct=pct) for i, pct in enumerate(pcts)
    ]


def make_series(
    pcts: list[float],
    agent_id: str = "researcher",
    model: str = SONNET,
    tool_stats: list[ToolCallStats] | None = None,
) -> AgentTimeSeries:
    points = make_points(pcts)
    return AgentTimeSeries(
        agent_id=agent_id,
        model=model,
        label=agent_id,
        limit=LIMIT,
        points=points,
        compactions=detect_compactions(points),
        tool_stats=tool_stats or [],
    )


def transcript_line(
    uuid: str,
    ts: str,
    *,
    kind: str = "assistant",
    input_tokens: int = 1000,
    output_tokens: int = 100,
    cache_read: int = 0,
    cache_creation: int = 0,
    content: list | None = None,
    parent: str | None = None,
    model: str = SONNET,
    session_id: str = "sess-1",
) -> str:
    """One JSONL transcript line as Claude Code writes it."""
    message: dict = {"role": kind, "content": content or []}
    if kind == "assistant":
        message["model"] = model
        message["usage"] = {
            "input_tokens": input_tokens,
            "output_tokens": output_tokens,
            "cache_read_input_tokens": cache_read,
            "cache_creation_input_tokens": cache_creation,
        }
    return json.dumps(
        {
            "sessionId": session_id,
            "uuid": uuid,
            "parentUuid": parent,
            "timestamp": ts,
            "type": kind,
            "isSidechain": False,
            "message": message,
        }
    )


