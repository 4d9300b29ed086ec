"""Session discovery and parsing.

Claude Code project layout::

    <project-dir>/
      <session-id>.jsonl              main session transcript
      <session-id>/
        subagents/
          agent-<hash>.jsonl          subagent transcripts

Flat ``agent-*.jsonl`` files next to the session file are also accepted.
"""

from __future__ import annotations

import logging
from pathlib import Path  # noqa: TC003

from pydantic import BaseModel

from context_diag.models import AgentTimeSeries  # noqa: TC001

from .jsonl import read_jsonl_file
from .time_series import build_agent_time_series

logger = logging.getLogger("context_diag.parser")


class DiscoveredSession(BaseModel):
    session_id: str
    session_file: Path
    agent_files: list[Path]
    mtime: float


class ParsedSession(BaseModel):
    session_id: str
    agents: list[AgentTimeSeries]


def discover_sessions(session_dir: Path) -> list[DiscoveredSession]:
    """Find session transcripts in a project directory, newest first."""
    if not session_dir.is_dir():
        return []

    flat_agents = sorted(session_dir.glob("agent-*.jsonl"))
    sessions: list[DiscoveredSession] = []

    for session_file in sorted(session_dir.glob("*.jsonl")):
        if session_file.name.startswith("agent-"):
            continue
        session_id = session_file.stem

        agent_files: list[Path] = []
        subagents_dir = session_dir / session_id / "subagents"
        if subagents_dir.is_dir():
            agent_files.extend(sorted(subagents_dir.glob("*.jsonl")))
        agent_files.extend(flat_agents)

        sessions.append(
            DiscoveredSession(
                session_id=session_id,
                session_file=session_file,
                agent_files=agent_files,
                mtime=session_file.stat().st_mtime,
            )
        )

    sessions.sort(key=lambda s: s.mtime, reverse=True)
    return sessions


def parse_session(session_dir: Path, session_id: str | None = None) -> ParsedSession | None:
    """Parse a session into per-agent time series.

    Without ``session_id`` the most recently modified session is used.
    Returns None when no matching session exists.
    """
    sessions = discover_sessions(session_dir)
    if session_id is not None:
        sessions = [s for s in sessions if s.session_id == session_id]
    if not sessions:
        return None
    return parse_discovered_session(sessions[0])


def parse_discovered_session(session: DiscoveredSession) -> ParsedSession:
    agents: list[AgentTimeSeries] = []

    main_lines = read_jsonl_file(session.session_file)
    if main_lines:
        agents.append(build_agent_time_series(session.session_id, "Main session", main_lines))

    for agent_file in session.agent_files:
        agent_lines = read_jsonl_file(agent_file)
        if agent_lines:
            name = agent_file.stem
            agents.append(build_agent_time_series(name, name, agent_lines))

    logger.info("Parsed session %s with %d agent(s)", session.session_id, len(agents))
    return ParsedSession(session_id=session.session_id, agents=agents)


def find_project_dir(projects_dir: Path, cwd: Path | None = None) -> Path | None:
    """Locate the Claude Code project directory for a working directory.

    Claude Code names project directories after the working directory with
    ``/`` replaced by ``-``. When no directory matches, the project holding
    the most recently modified session transcript is used.
    """
    if not projects_dir.is_dir():
        return None

    if cwd is not None:
        encoded = str(cwd).replace("/", "-")
        for candidate in (encoded, encoded.lstrip("-")):
            match = projects_dir / candidate
            if match.is_dir():
                return match

    best: Path | None = None
    best_mtime = 0.0
    for project in projects_dir.iterdir():
        if not project.is_dir():
            continue
        for transcript in project.glob("*.jsonl"):
            if transcript.name.startswith("agent-"):
                continue
            mtime = transcript.stat().st_mtime
            if mtime > best_mtime:
                best, best_mtime = project, mtime

    if best is not None:
        logger.debug("Using most recent project directory %s", best)
    return best
