"""Pydantic models for context diagnostics.

Taxonomy:
- Time series: UsagePoint (one per turn), Compaction, AgentTimeSeries
- Events: DiagnosticEvent with a closed set of 12 types and 3 severities
- Profiles: Alerts, Budgets, ContextWindowProfile, EffectiveThresholds
- Summary: HealthGrade, Insight, Suggestion, AgentSummary, SessionSummary
- Transcript: TranscriptLine, Message, Usage

Key Principle: "Rules decide, text explains"
- Events and health grades come from deterministic rules
- Insights and suggestions only describe what the rules already decided
"""

from .config import (
    COMPACTION_DROP_THRESHOLD,
    DEFAULT_ALERTS,
    DEFAULT_CONTEXT_LIMIT,
    DEFAULT_FALLBACK,
    MODEL_LIMITS,
    DiagSettings,
    context_limit_for,
)
from .events import (
    DiagnosticEvent,
    DiagnosticEventType,
    Severity,
    events_of_type,
    has_event,
)
from .profiles import (
    Alerts,
    Budgets,
    ContextWindowProfile,
    EffectiveThresholds,
    FallbackThresholds,
    MatchType,
    ProfilesConfig,
)
from .summary import (
    AgentSummary,
    HealthGrade,
    Insight,
    SessionSummary,
    Suggestion,
)
from .time_series import AgentTimeSeries, Compaction, ToolCallStats, UsagePoint
from .transcript import Message, TranscriptLine, Usage

__all__ = [
    # Config
    "COMPACTION_DROP_THRESHOLD",
    "DEFAULT_ALERTS",
    "DEFAULT_CONTEXT_LIMIT",
    "DEFAULT_FALLBACK",
    "MODEL_LIMITS",
    "DiagSettings",
    "context_limit_for",
    # Events
    "DiagnosticEvent",
    "DiagnosticEventType",
    "Severity",
    "events_of_type",
    "has_event",
    # Profiles
    "Alerts",
    "Budgets",
    "ContextWindowProfile",
    "EffectiveThresholds",
    "FallbackThresholds",
    "MatchType",
    "ProfilesConfig",
    # Summary
    "AgentSummary",
    "HealthGrade",
    "Insight",
    "SessionSummary",
    "Suggestion",
    # Time series
    "AgentTimeSeries",
    "Compaction",
    "ToolCallStats",
    "UsagePoint",
    # Transcript
    "Message",
    "TranscriptLine",
    "Usage",
]
