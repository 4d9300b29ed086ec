"""Profile and threshold models.

A profile is a named bundle of thresholds for a class of agent workload.
Profiles live in ``context-profiles.json`` and use camelCase keys on disk;
the models accept both camelCase and snake_case.

Threshold resolution order (see ``context_diag.profiles.matcher``):
    exact agent id → profile with same model → model-family fallback → default
"""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _ProfileModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class Budgets(_ProfileModel):
    """Fractions of the context window allotted per content kind (should sum to ~1.0)."""

    system_prompt: float = Field(default=0.10, ge=0, le=1)
    conversation: float = Field(default=0.50, ge=0, le=1)
    tool_results: float = Field(default=0.30, ge=0, le=1)
    output_reserve: float = Field(default=0.10, ge=0, le=1)

    def total(self) -> float:
        return self.system_prompt + self.conversation + self.tool_results + self.output_reserve


class Alerts(_ProfileModel):
    """Alert thresholds for one agent workload.

    Defaults are the global fallback used when nothing else matches.
    ``warning_threshold < dumb_zone_threshold`` is enforced by the profile
    validator, not here.
    """

    warning_threshold: float = Field(
        default=0.70,
        ge=0,
        le=1,
        description="At or above this, the agent is approaching saturation",
    )
    dumb_zone_threshold: float = Field(
        default=0.85,
        ge=0,
        le=1,
        description="At or above this, reasoning quality is believed to degrade",
    )
    compaction_target: float = Field(
        default=0.50,
        ge=0,
        le=1,
        description="A compaction should bring usage at or below this",
    )
    max_turns_in_dumb_zone: int = Field(
        default=3,
        ge=1,
        description="Consecutive dumb-zone turns tolerated before lingering fires",
    )
    max_tool_error_rate: float = Field(
        default=0.15,
        ge=0,
        le=1,
        description="Cumulative tool error ratio above which a spike is reported",
    )
    expected_turns: tuple[int, int] = Field(
        default=(10, 40),
        description="Expected [min, max] turn count; only the max is enforced",
    )


class ContextWindowProfile(_ProfileModel):
    id: str
    label: str
    model: str
    budgets: Budgets = Field(default_factory=Budgets)
    alerts: Alerts = Field(default_factory=Alerts)


class FallbackThresholds(_ProfileModel):
    """Alert sets used when no profile matches, keyed by model family."""

    opus: Alerts | None = None
    sonnet: Alerts | None = None
    haiku: Alerts | None = None
    default: Alerts = Field(default_factory=Alerts)

    def for_family(self, family: str | None) -> Alerts | None:
        if family == "opus":
            return self.opus
        if family == "sonnet":
            return self.sonnet
        if family == "haiku":
            return self.haiku
        return None


class ProfilesConfig(_ProfileModel):
    profiles: list[ContextWindowProfile] = Field(default_factory=list)
    fallback_thresholds: FallbackThresholds | None = None


class MatchType(StrEnum):
    EXACT = "exact"
    MODEL_FALLBACK = "model-fallback"
    NONE = "none"


class EffectiveThresholds(Alerts):
    """Resolved, immutable configuration for one agent for one session.

    ``profile_id`` is None when thresholds came from a fallback table;
    the evaluator reports that as ``unmatched_agent``.
    """

    profile_id: str | None = None
    match_type: MatchType = MatchType.NONE

    @classmethod
    def from_alerts(
        cls,
        alerts: Alerts,
        *,
        profile_id: str | None = None,
        match_type: MatchType = MatchType.NONE,
    ) -> "EffectiveThresholds":
        return cls(**alerts.model_dump(), profile_id=profile_id, match_type=match_type)

    @property
    def max_expected_turns(self) -> int:
        return self.expected_turns[1]
