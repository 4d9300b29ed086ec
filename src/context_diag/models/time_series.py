"""Time-series models for per-agent context usage.

One UsagePoint is recorded per assistant turn. Percentages are computed by
ingestion as ``abs / context_limit`` and are consumed read-only by the engine.

Date/Time: All timestamps are ISO 8601 strings, parsed with `whenever` where needed.
"""

from pydantic import BaseModel, Field


class UsagePoint(BaseModel):
    """Context usage snapshot for a single turn."""

    t: str = Field(description="ISO 8601 timestamp of the turn")
    abs: int = Field(ge=0, description="Absolute tokens occupying the context window")
    pct: float = Field(description="Fraction of the context limit in use (0-1)")


class Compaction(BaseModel):
    """A compaction inferred from a large drop between consecutive points."""

    t: str = Field(description="Timestamp of the point after the drop")
    before: int = Field(description="Token count before compaction")
    after: int = Field(description="Token count after compaction")


class ToolCallStats(BaseModel):
    tool_use_count: int = Field(default=0, ge=0)
    tool_error_count: int = Field(default=0, ge=0)


class AgentTimeSeries(BaseModel):
    """Ordered usage history for one agent.

    ``tool_stats`` is aligned index-by-index with ``points`` when known,
    and empty otherwise.
    """

    agent_id: str
    model: str
    label: str
    limit: int = Field(gt=0, description="Context window size in tokens")
    points: list[UsagePoint] = Field(default_factory=list)
    compactions: list[Compaction] = Field(default_factory=list)
    tool_stats: list[ToolCallStats] = Field(default_factory=list)

    def tool_stats_at(self, index: int) -> ToolCallStats:
        if index < len(self.tool_stats):
            return self.tool_stats[index]
        return ToolCallStats()
