"""Pytest configuration and fixtures for the context diagnostics tests."""

import pytest

from context_diag.models import EffectiveThresholds

from .helpers import timestamp, transcript_line


@pytest.fixture
def matched_thresholds() -> EffectiveThresholds:
    """Default alert values, attributed to a profile."""
    return EffectiveThresholds(profile_id="researcher")


@pytest.fixture
def session_dir(tmp_path):
    """A project directory holding one session with a subagent."""
    main = [
        transcript_line("a1", timestamp(0), input_tokens=20_000),
        transcript_line("a2", timestamp(5), input_tokens=60_000),
        transcript_line("a3", timestamp(10), input_tokens=90_000),
    ]
    (tmp_path / "sess-1.jsonl").write_text("\n".join(main) + "\n")

    subagents = tmp_path / "sess-1" / "subagents"
    subagents.mkdir(parents=True)
    sub = [
        transcript_line("b1", timestamp(2), input_tokens=150_000),
        transcript_line("b2", timestamp(4), input_tokens=176_000),
        transcript_line("b3", timestamp(6), input_tokens=178_000),
        transcript_line("b4", timestamp(8), input_tokens=180_000),
        transcript_line("b5", timestamp(9), input_tokens=182_000),
    ]
    (subagents / "agent-abc123.jsonl").write_text("\n".join(sub) + "\n")
    return tmp_path
