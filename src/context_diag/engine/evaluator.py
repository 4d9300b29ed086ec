"""Turn Evaluator - per-agent diagnostic state machine.

Key Principle: "Rules decide, text explains"
Every event comes from a deterministic rule over the current turn and a
small amount of carried state. There is no I/O and no retry.

Per-turn evaluation order:
1. Count the turn, accumulate tool calls/errors
2. First turn: agent_started (+ unmatched_agent when no profile matched)
3. Compaction: drop > COMPACTION_DROP_THRESHOLD resets hysteresis state,
   then compaction_insufficient if still above compaction_target
4. warning_threshold_crossed (edge-triggered)
5. dumbzone_entered (edge-triggered)
6. Consecutive dumb-zone counter
7. dumbzone_lingering (level-triggered, every turn past the max)
8. scope_creep (level-triggered, every turn past expected max)
9. tool_error_spike (level-triggered on cumulative ratio)
10. Remember pct for the next turn

Order matters: a compaction in step 3 clears the sticky flags so steps 4-5
in the same turn can fire again.

Hysteresis Design:
- Warning and dumb-zone crossings fire once, then stay quiet
- Only a detected compaction re-arms them
- Lingering, scope creep and tool errors are ongoing conditions and repeat

Concurrency: one instance per agent. Calls for one agent must be serialized
and in timestamp order; out-of-order input yields a meaningless but
non-crashing event stream.
"""

import logging
import uuid
from typing import Any

from pydantic import BaseModel

from context_diag.models import (
    DiagnosticEvent,
    DiagnosticEventType,
    EffectiveThresholds,
    Severity,
    UsagePoint,
)

from .compaction import is_compaction

logger = logging.getLogger("context_diag.engine")


class EvaluatorState(BaseModel):
    """Mutable per-agent state carried between turns."""

    prev_pct: float = 0.0
    turn_count: int = 0
    warning_crossed: bool = False
    dumbzone_crossed: bool = False
    consecutive_dumb_zone_turns: int = 0
    total_tool_calls: int = 0
    total_tool_errors: int = 0
    started: bool = False


def new_event_id() -> str:
    """Random identifier for a diagnostic event."""
    return uuid.uuid4().hex[:12]


class TurnEvaluator:
    """Stateful evaluator that turns usage observations into diagnostic events."""

    def __init__(self, agent_id: str, thresholds: EffectiveThresholds | None = None) -> None:
        self.agent_id = agent_id
        self.thresholds = thresholds if thresholds is not None else EffectiveThresholds()
        self._state = EvaluatorState()

    @property
    def state(self) -> EvaluatorState:
        """Snapshot of the current state; mutating it has no effect."""
        return self._state.model_copy()

    def evaluate_turn(
        self,
        point: UsagePoint,
        tool_calls: int = 0,
        tool_errors: int = 0,
    ) -> list[DiagnosticEvent]:
        """Evaluate a single turn and return the events it emits (possibly none)."""
        events: list[DiagnosticEvent] = []
        cfg = self.thresholds
        state = self._state
        pct = point.pct

        state.turn_count += 1
        state.total_tool_calls += tool_calls
        state.total_tool_errors += tool_errors

        if not state.started:
            state.started = True
            events.append(
                self._emit(
                    point.t,
                    Severity.INFO,
                    DiagnosticEventType.AGENT_STARTED,
                    f"Agent {self.agent_id} started",
                    {"model": cfg.profile_id or "unmatched"},
                )
            )
            if cfg.profile_id is None:
                events.append(
                    self._emit(
                        point.t,
                        Severity.WARNING,
                        DiagnosticEventType.UNMATCHED_AGENT,
                        f"Agent {self.agent_id} has no matching profile"
                        " - using fallback thresholds",
                    )
                )

        if state.turn_count > 1 and is_compaction(state.prev_pct, pct):
            events.append(
                self._emit(
                    point.t,
                    Severity.INFO,
                    DiagnosticEventType.COMPACTION_DETECTED,
                    f"Compaction detected for {self.agent_id}:"
                    f" {state.prev_pct:.1%} → {pct:.1%}",
                    {"before": state.prev_pct, "after": pct},
                )
            )

            # Re-arm the edge-triggered thresholds now that memory was freed
            state.warning_crossed = False
            state.dumbzone_crossed = False
            state.consecutive_dumb_zone_turns = 0

            if pct > cfg.compaction_target:
                events.append(
                    self._emit(
                        point.t,
                        Severity.WARNING,
                        DiagnosticEventType.COMPACTION_INSUFFICIENT,
                        f"Compaction for {self.agent_id} was insufficient:"
                        f" still at {pct:.1%} (target: {cfg.compaction_target:.1%})",
                        {"pct": pct, "target": cfg.compaction_target},
                    )
                )

        if pct >= cfg.warning_threshold and not state.warning_crossed:
            state.warning_crossed = True
            events.append(
                self._emit(
                    point.t,
                    Severity.WARNING,
                    DiagnosticEventType.WARNING_THRESHOLD_CROSSED,
                    f"Agent {self.agent_id} crossed warning threshold at {pct:.1%}",
                    {"pct": pct, "threshold": cfg.warning_threshold},
                )
            )

        if pct >= cfg.dumb_zone_threshold and not state.dumbzone_crossed:
            state.dumbzone_crossed = True
            events.append(
                self._emit(
                    point.t,
                    Severity.CRITICAL,
                    DiagnosticEventType.DUMBZONE_ENTERED,
                    f"Agent {self.agent_id} entered dumb zone at {pct:.1%}",
                    {"pct": pct, "threshold": cfg.dumb_zone_threshold},
                )
            )

        if pct >= cfg.dumb_zone_threshold:
            state.consecutive_dumb_zone_turns += 1
        else:
            state.consecutive_dumb_zone_turns = 0

        if state.consecutive_dumb_zone_turns > cfg.max_turns_in_dumb_zone:
            events.append(
                self._emit(
                    point.t,
                    Severity.CRITICAL,
                    DiagnosticEventType.DUMBZONE_LINGERING,
                    f"Agent {self.agent_id} has been in dumb zone for"
                    f" {state.consecutive_dumb_zone_turns} consecutive turns"
                    f" (max: {cfg.max_turns_in_dumb_zone})",
                    {
                        "consecutive_turns": state.consecutive_dumb_zone_turns,
                        "max": cfg.max_turns_in_dumb_zone,
                    },
                )
            )

        if state.turn_count > cfg.max_expected_turns:
            events.append(
                self._emit(
                    point.t,
                    Severity.WARNING,
                    DiagnosticEventType.SCOPE_CREEP,
                    f"Agent {self.agent_id} has {state.turn_count} turns,"
                    f" exceeding expected max of {cfg.max_expected_turns}",
                    {"turns": state.turn_count, "expected_max": cfg.max_expected_turns},
                )
            )

        if state.total_tool_calls > 0:
            error_rate = state.total_tool_errors / state.total_tool_calls
            if error_rate > cfg.max_tool_error_rate:
                events.append(
                    self._emit(
                        point.t,
                        Severity.WARNING,
                        DiagnosticEventType.TOOL_ERROR_SPIKE,
                        f"Agent {self.agent_id} tool error rate {error_rate:.1%}"
                        f" exceeds max {cfg.max_tool_error_rate:.1%}",
                        {
                            "error_rate": error_rate,
                            "max_rate": cfg.max_tool_error_rate,
                            "total_calls": state.total_tool_calls,
                            "total_errors": state.total_tool_errors,
                        },
                    )
                )

        state.prev_pct = pct

        if events:
            logger.debug(
                "Turn %d for %s emitted %s",
                state.turn_count,
                self.agent_id,
                ", ".join(e.type.value for e in events),
            )
        return events

    def complete(self, timestamp: str) -> DiagnosticEvent:
        """Emit agent_completed. Call once after the last turn."""
        return self._emit(
            timestamp,
            Severity.INFO,
            DiagnosticEventType.AGENT_COMPLETED,
            f"Agent {self.agent_id} completed after {self._state.turn_count} turns",
            {"total_turns": self._state.turn_count, "final_pct": self._state.prev_pct},
        )

    def _emit(
        self,
        timestamp: str,
        severity: Severity,
        event_type: DiagnosticEventType,
        message: str,
        data: dict[str, Any] | None = None,
    ) -> DiagnosticEvent:
        return DiagnosticEvent(
            id=new_event_id(),
            timestamp=timestamp,
            agent_id=self.agent_id,
            profile_id=self.thresholds.profile_id,
            severity=severity,
            type=event_type,
            message=message,
            data=data,
        )
