"""Session summary models consumed by rendering and persistence layers.

Health grades aggregate worst-case: unhealthy > degraded > healthy.
"""

from enum import StrEnum

from pydantic import BaseModel, Field

from .events import DiagnosticEvent  # noqa: TC001 - Pydantic needs runtime imports


class HealthGrade(StrEnum):
    HEALTHY = "healthy"  # Stayed clear of the warning zone most of the time
    DEGRADED = "degraded"  # Entered risky territory but recovered or stayed marginal
    UNHEALTHY = "unhealthy"  # Lingered in the dumb zone or blew the turn budget

    @property
    def rank(self) -> int:
        return _GRADE_RANK[self]


_GRADE_RANK = {
    HealthGrade.HEALTHY: 0,
    HealthGrade.DEGRADED: 1,
    HealthGrade.UNHEALTHY: 2,
}


class Insight(BaseModel):
    agent_id: str
    category: str
    message: str


class Suggestion(BaseModel):
    priority: int = Field(ge=1, le=5, description="1 is most urgent")
    agent_id: str | None = None
    message: str
    action: str | None = None


class AgentSummary(BaseModel):
    agent_id: str
    model: str
    label: str
    health: HealthGrade
    profile_id: str | None = None
    total_turns: int
    peak_pct: float
    final_pct: float
    avg_context_pct: float
    turns_in_warning: int
    turns_in_dumb_zone: int
    compactions: int
    tool_call_count: int
    tool_error_count: int
    tool_error_rate: float
    event_counts: dict[str, int] = Field(default_factory=dict)
    events: list[DiagnosticEvent] = Field(default_factory=list)


class SessionSummary(BaseModel):
    session_id: str
    start_time: str
    end_time: str
    total_duration_ms: int
    agents: list[AgentSummary]
    insights: list[Insight]
    suggestions: list[Suggestion]
    overall_health: HealthGrade
