"""JSONL transcript reading.

Invalid or partial lines are skipped rather than failing the whole file;
transcripts are appended to while an agent runs, and Claude Code writes
line types this package does not model.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path  # noqa: TC003

from pydantic import BaseModel, ValidationError

from context_diag.models import TranscriptLine

logger = logging.getLogger("context_diag.parser")


class ReadResult(BaseModel):
    lines: list[TranscriptLine]
    bytes_read: int
    remainder: bytes = b""


def parse_jsonl_line(raw: str) -> TranscriptLine | None:
    """Parse one JSONL line, returning None when it is not a usable transcript line."""
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError:
        logger.debug("Skipping malformed JSON line")
        return None
    try:
        return TranscriptLine.model_validate(payload)
    except ValidationError:
        return None


def parse_jsonl_content(content: str) -> list[TranscriptLine]:
    lines: list[TranscriptLine] = []
    for raw in content.split("\n"):
        trimmed = raw.strip()
        if not trimmed:
            continue
        parsed = parse_jsonl_line(trimmed)
        if parsed is not None:
            lines.append(parsed)
    return lines


def read_jsonl_file(path: Path) -> list[TranscriptLine]:
    """Read and parse an entire transcript file."""
    return parse_jsonl_content(path.read_text(encoding="utf-8", errors="replace"))


def read_jsonl_incremental(path: Path, from_byte: int, remainder: bytes = b"") -> ReadResult:
    """Read a transcript from a byte offset.

    The trailing incomplete line is returned undecoded as ``remainder`` and
    should be passed back on the next call together with ``bytes_read`` as the
    offset. Only complete lines are decoded, so a write that stops inside a
    multibyte character is decoded whole once the rest of it arrives.
    """
    with path.open("rb") as f:
        f.seek(from_byte)
        new_bytes = f.read()

    complete, _, tail = (remainder + new_bytes).rpartition(b"\n")
    lines = parse_jsonl_content(complete.decode("utf-8", errors="replace"))
    return ReadResult(lines=lines, bytes_read=from_byte + len(new_bytes), remainder=tail)
