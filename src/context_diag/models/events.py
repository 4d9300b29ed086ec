"""Diagnostic event models emitted by the Turn Evaluator.

Events are immutable once emitted and accumulate in an append-only list
owned by the caller.

Payload (``data``) shape per event type:
- agent_started:             model
- unmatched_agent:           (none)
- compaction_detected:       before, after                 (pct values)
- compaction_insufficient:   pct, target
- warning_threshold_crossed: pct, threshold
- dumbzone_entered:          pct, threshold
- dumbzone_lingering:        consecutive_turns, max
- scope_creep:               turns, expected_max
- tool_error_spike:          error_rate, max_rate, total_calls, total_errors
- agent_completed:           total_turns, final_pct

``budget_overrun`` and ``context_limit_approaching`` belong to the closed set
so that externally produced events validate, but the evaluator never emits them.
"""

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Severity(StrEnum):
    INFO = "info"
    WARNING = "warning"
    CRITICAL = "critical"


class DiagnosticEventType(StrEnum):
    """Closed set of diagnostic event tags."""

    AGENT_STARTED = "agent_started"
    AGENT_COMPLETED = "agent_completed"
    UNMATCHED_AGENT = "unmatched_agent"
    WARNING_THRESHOLD_CROSSED = "warning_threshold_crossed"
    DUMBZONE_ENTERED = "dumbzone_entered"
    DUMBZONE_LINGERING = "dumbzone_lingering"
    COMPACTION_DETECTED = "compaction_detected"
    COMPACTION_INSUFFICIENT = "compaction_insufficient"
    SCOPE_CREEP = "scope_creep"
    TOOL_ERROR_SPIKE = "tool_error_spike"
    BUDGET_OVERRUN = "budget_overrun"
    CONTEXT_LIMIT_APPROACHING = "context_limit_approaching"


class DiagnosticEvent(BaseModel):
    """A typed diagnostic emitted for one agent at one turn."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Random identifier, unique within a session")
    timestamp: str = Field(description="ISO 8601 timestamp of the triggering turn")
    agent_id: str
    profile_id: str | None = None
    severity: Severity
    type: DiagnosticEventType
    message: str
    data: dict[str, Any] | None = None


def has_event(events: list[DiagnosticEvent], event_type: DiagnosticEventType) -> bool:
    return any(e.type == event_type for e in events)


def events_of_type(
    events: list[DiagnosticEvent], event_type: DiagnosticEventType
) -> list[DiagnosticEvent]:
    return [e for e in events if e.type == event_type]
