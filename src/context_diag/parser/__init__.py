"""Transcript ingestion: JSONL reading, token accounting, time series, discovery."""

from .discovery import (
    DiscoveredSession,
    ParsedSession,
    discover_sessions,
    find_project_dir,
    parse_discovered_session,
    parse_session,
)
from .jsonl import (
    ReadResult,
    parse_jsonl_content,
    parse_jsonl_line,
    read_jsonl_file,
    read_jsonl_incremental,
)
from .time_series import build_agent_time_series, deduplicate_by_uuid, resolve_model
from .tokens import compute_used_tokens, extract_tool_stats

__all__ = [
    "DiscoveredSession",
    "ParsedSession",
    "ReadResult",
    "build_agent_time_series",
    "compute_used_tokens",
    "deduplicate_by_uuid",
    "discover_sessions",
    "find_project_dir",
    "extract_tool_stats",
    "parse_discovered_session",
    "parse_jsonl_content",
    "parse_jsonl_line",
    "parse_session",
    "read_jsonl_file",
    "read_jsonl_incremental",
    "resolve_model",
]
