"""Profile matching and threshold resolution.

Resolution order:
1. Profile whose id equals the agent id
2. First profile declared for the same model
3. Model-family fallback (opus / sonnet / haiku), from the profiles file first,
   then from the supplied fallback table
4. The fallback table's default

Only steps 1-2 carry a profile id; steps 3-4 leave it unset, which is how
the evaluator knows to report ``unmatched_agent``.
"""

from __future__ import annotations

import logging

from pydantic import BaseModel

from context_diag.models import (
    DEFAULT_FALLBACK,
    ContextWindowProfile,
    EffectiveThresholds,
    FallbackThresholds,
    MatchType,
    ProfilesConfig,
)

logger = logging.getLogger("context_diag.profiles")

MODEL_FAMILIES = ("opus", "sonnet", "haiku")


class MatchedProfile(BaseModel):
    profile: ContextWindowProfile
    match_type: MatchType


def model_family(model: str) -> str | None:
    """Return the model family named in a model id, if any."""
    lowered = model.lower()
    for family in MODEL_FAMILIES:
        if family in lowered:
            return family
    return None


def match_profile(
    agent_id: str,
    model: str,
    config: ProfilesConfig | None,
) -> MatchedProfile | None:
    """Match an agent to a profile by exact id, then by model."""
    if config is None:
        return None

    for profile in config.profiles:
        if profile.id == agent_id:
            return MatchedProfile(profile=profile, match_type=MatchType.EXACT)

    for profile in config.profiles:
        if profile.model == model:
            return MatchedProfile(profile=profile, match_type=MatchType.MODEL_FALLBACK)

    return None


def get_effective_thresholds(
    agent_id: str,
    model: str,
    config: ProfilesConfig | None = None,
    fallback: FallbackThresholds = DEFAULT_FALLBACK,
) -> EffectiveThresholds:
    """Resolve the thresholds an agent is evaluated against for this session."""
    match = match_profile(agent_id, model, config)
    if match is not None:
        logger.debug(
            "Agent %s matched profile %s (%s)",
            agent_id,
            match.profile.id,
            match.match_type.value,
        )
        return EffectiveThresholds.from_alerts(
            match.profile.alerts,
            profile_id=match.profile.id,
            match_type=match.match_type,
        )

    family = model_family(model)
    table = config.fallback_thresholds if config and config.fallback_thresholds else None

    alerts = None
    if table is not None:
        alerts = table.for_family(family)
    if alerts is None:
        alerts = fallback.for_family(family)
    if alerts is None:
        alerts = table.default if table is not None else fallback.default

    logger.debug("Agent %s unmatched, using %s fallback", agent_id, family or "default")
    return EffectiveThresholds.from_alerts(alerts)
