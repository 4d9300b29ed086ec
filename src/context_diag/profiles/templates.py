"""Built-in profile templates keyed by task type.

Each template is a starting point for a workload class; an adopter copies
one into ``context-profiles.json`` and adjusts thresholds from there.
"""

from context_diag.models import Alerts, Budgets, ContextWindowProfile

DEFAULT_TEMPLATE_MODEL = "claude-sonnet-4-5-20250929"

RETRIEVAL = ContextWindowProfile(
    id="retrieval",
    label="retrieval agent",
    model=DEFAULT_TEMPLATE_MODEL,
    budgets=Budgets(
        system_prompt=0.10,
        conversation=0.50,
        tool_results=0.30,
        output_reserve=0.10,
    ),
    alerts=Alerts(
        warning_threshold=0.70,
        dumb_zone_threshold=0.85,
        compaction_target=0.50,
        max_turns_in_dumb_zone=3,
        max_tool_error_rate=0.15,
        expected_turns=(10, 30),
    ),
)

# Analysis degrades earliest: long reasoning chains suffer most from saturation
ANALYSIS = ContextWindowProfile(
    id="analysis",
    label="analysis agent",
    model=DEFAULT_TEMPLATE_MODEL,
    budgets=Budgets(
        system_prompt=0.15,
        conversation=0.40,
        tool_results=0.35,
        output_reserve=0.10,
    ),
    alerts=Alerts(
        warning_threshold=0.50,
        dumb_zone_threshold=0.65,
        compaction_target=0.35,
        max_turns_in_dumb_zone=2,
        max_tool_error_rate=0.10,
        expected_turns=(5, 20),
    ),
)

GENERATION = ContextWindowProfile(
    id="generation",
    label="generation agent",
    model=DEFAULT_TEMPLATE_MODEL,
    budgets=Budgets(
        system_prompt=0.10,
        conversation=0.45,
        tool_results=0.25,
        output_reserve=0.20,
    ),
    alerts=Alerts(
        warning_threshold=0.60,
        dumb_zone_threshold=0.75,
        compaction_target=0.40,
        max_turns_in_dumb_zone=3,
        max_tool_error_rate=0.12,
        expected_turns=(8, 25),
    ),
)

TEMPLATES: dict[str, ContextWindowProfile] = {
    t.id: t for t in (RETRIEVAL, ANALYSIS, GENERATION)
}


def template_names() -> list[str]:
    return list(TEMPLATES)


def get_template(
    name: str,
    *,
    profile_id: str | None = None,
    label: str | None = None,
    model: str | None = None,
) -> ContextWindowProfile:
    """Return a copy of a built-in template with optional identity overrides."""
    template = TEMPLATES.get(name)
    if template is None:
        msg = f"Unknown template '{name}'. Available: {', '.join(TEMPLATES)}"
        raise ValueError(msg)

    return template.model_copy(
        update={
            "id": profile_id or template.id,
            "label": label or template.label,
            "model": model or template.model,
        }
    )
