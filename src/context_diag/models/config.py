"""Configuration for context diagnostics.

Constants that define the detection rules, the default fallback thresholds,
and runtime settings for the CLI. Fallback tables are immutable objects passed
explicitly to the resolver; nothing here is mutated at runtime.
"""

from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from .profiles import Alerts, FallbackThresholds

# A drop strictly greater than this between consecutive turns is a compaction.
# 0.05 = five percentage points of the context window.
COMPACTION_DROP_THRESHOLD = 0.05

# Health classification: share of turns at/above warning that degrades health.
WARNING_TURN_SHARE_MAX = 0.20

# Health classification: turn count multiple of expected max that is unhealthy.
TURN_BLOWOUT_FACTOR = 2

MODEL_LIMITS: dict[str, int] = {
    "claude-opus-4-6": 200_000,
    "claude-sonnet-4-5-20250929": 200_000,
    "claude-haiku-4-5-20251001": 200_000,
    # Older models
    "claude-3-5-sonnet-20241022": 200_000,
    "claude-3-5-haiku-20241022": 200_000,
    "claude-3-opus-20240229": 200_000,
    "claude-3-sonnet-20240229": 200_000,
    "claude-3-haiku-20240307": 200_000,
}

DEFAULT_CONTEXT_LIMIT = 200_000

DEFAULT_ALERTS = Alerts()

DEFAULT_FALLBACK = FallbackThresholds(default=DEFAULT_ALERTS)


def context_limit_for(model: str) -> int:
    return MODEL_LIMITS.get(model, DEFAULT_CONTEXT_LIMIT)


class DiagSettings(BaseSettings):
    """Runtime settings for the context-diag CLI."""

    profiles_path: Path | None = Field(
        default=None, description="Default context-profiles.json to load"
    )
    projects_dir: Path = Field(
        default=Path.home() / ".claude" / "projects",
        description="Root directory holding Claude Code project transcripts",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="WARNING", description="Python logging level name"
    )

    model_config = {"env_prefix": "CONTEXT_DIAG_"}

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_level(cls, v: Any) -> Any:
        return v.upper() if isinstance(v, str) else v
