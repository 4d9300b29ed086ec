"""Profile validator - semantic checks beyond schema validation.

Catches contradictory thresholds that would make the evaluator produce
nonsensical event sequences (e.g. dumb zone entered without a warning).
Errors mean the profile should not be used; warnings are informational.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel

from context_diag.models import MODEL_LIMITS, Alerts, ContextWindowProfile, ProfilesConfig

BUDGET_SUM_MIN = 0.95
BUDGET_SUM_MAX = 1.05


class ProfileValidationResult(BaseModel):
    profile_id: str | None
    field: str
    severity: Literal["error", "warning"]
    message: str


class ProfileValidator:
    """Evaluates all checks against a loaded ProfilesConfig."""

    def evaluate(self, config: ProfilesConfig) -> list[ProfileValidationResult]:
        results: list[ProfileValidationResult] = []
        results.extend(self._check_duplicate_ids(config))

        for profile in config.profiles:
            results.extend(self._check_alerts(profile.id, "alerts", profile.alerts))
            for check in (self._check_budget_sum, self._check_model_known):
                result = check(profile)
                if result:
                    results.append(result)

        if config.fallback_thresholds is not None:
            table = config.fallback_thresholds
            for name in ("opus", "sonnet", "haiku", "default"):
                alerts = getattr(table, name)
                if alerts is not None:
                    results.extend(
                        self._check_alerts(None, f"fallbackThresholds.{name}", alerts)
                    )

        return results

    @staticmethod
    def _check_duplicate_ids(config: ProfilesConfig) -> list[ProfileValidationResult]:
        seen: set[str] = set()
        results: list[ProfileValidationResult] = []
        for profile in config.profiles:
            if profile.id in seen:
                results.append(
                    ProfileValidationResult(
                        profile_id=profile.id,
                        field="id",
                        severity="error",
                        message=f'Duplicate profile ID: "{profile.id}"',
                    )
                )
            seen.add(profile.id)
        return results

    @staticmethod
    def _check_alerts(
        profile_id: str | None, prefix: str, alerts: Alerts
    ) -> list[ProfileValidationResult]:
        results: list[ProfileValidationResult] = []

        if alerts.warning_threshold >= alerts.dumb_zone_threshold:
            results.append(
                ProfileValidationResult(
                    profile_id=profile_id,
                    field=f"{prefix}.warningThreshold",
                    severity="error",
                    message=(
                        f"warningThreshold ({alerts.warning_threshold}) must be less than "
                        f"dumbZoneThreshold ({alerts.dumb_zone_threshold})"
                    ),
                )
            )

        if alerts.compaction_target >= alerts.dumb_zone_threshold:
            results.append(
                ProfileValidationResult(
                    profile_id=profile_id,
                    field=f"{prefix}.compactionTarget",
                    severity="error",
                    message=(
                        f"compactionTarget ({alerts.compaction_target}) must be less than "
                        f"dumbZoneThreshold ({alerts.dumb_zone_threshold})"
                    ),
                )
            )

        low, high = alerts.expected_turns
        if low > high:
            results.append(
                ProfileValidationResult(
                    profile_id=profile_id,
                    field=f"{prefix}.expectedTurns",
                    severity="error",
                    message=f"expectedTurns min ({low}) must be <= max ({high})",
                )
            )

        return results

    @staticmethod
    def _check_budget_sum(profile: ContextWindowProfile) -> ProfileValidationResult | None:
        total = profile.budgets.total()
        if total < BUDGET_SUM_MIN or total > BUDGET_SUM_MAX:
            return ProfileValidationResult(
                profile_id=profile.id,
                field="budgets",
                severity="error",
                message=(
                    f"Budget allocations sum to {total:.3f}, expected ~1.0 "
                    f"({BUDGET_SUM_MIN}-{BUDGET_SUM_MAX})"
                ),
            )
        return None

    @staticmethod
    def _check_model_known(profile: ContextWindowProfile) -> ProfileValidationResult | None:
        if profile.model not in MODEL_LIMITS:
            return ProfileValidationResult(
                profile_id=profile.id,
                field="model",
                severity="warning",
                message=(
                    f'Unrecognized model: "{profile.model}". '
                    f"Known models: {', '.join(MODEL_LIMITS)}"
                ),
            )
        return None
