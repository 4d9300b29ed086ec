"""Unit tests for transcript parsing, time series construction and session discovery."""

import json
import os
from pathlib import Path

from context_diag.models import TranscriptLine, Usage
from context_diag.parser import (
    build_agent_time_series,
    compute_used_tokens,
    deduplicate_by_uuid,
    discover_sessions,
    extract_tool_stats,
    find_project_dir,
    parse_jsonl_content,
    parse_jsonl_line,
    parse_session,
    read_jsonl_file,
    read_jsonl_incremental,
)

from .helpers import SONNET, timestamp, transcript_line


def _line(*args, **kwargs) -> TranscriptLine:
    return parse_jsonl_line(transcript_line(*args, **kwargs))


def _tool_result(is_error):
    return {"type": "tool_result", "tool_use_id": "t1", "content": "...", "is_error": is_error}


TOOL_USE = {"type": "tool_use", "id": "t1", "name": "Read", "input": {}}


class TestParseLine:
    def test_parses_aliases(self):
        line = _line("a1", timestamp(0), parent="p0")
        assert line.session_id == "sess-1"
        assert line.parent_uuid == "p0"
        assert line.message.model == SONNET

    def test_malformed_json_is_skipped(self):
        assert parse_jsonl_line('{"uuid": "a1", ') is None

    def test_unmodelled_line_type_is_skipped(self):
        raw = json.dumps({"type": "summary", "summary": "...", "leafUuid": "a1"})
        assert parse_jsonl_line(raw) is None

    def test_non_iso_timestamp_is_skipped(self):
        assert parse_jsonl_line(transcript_line("a1", "yesterday")) is None

    def test_null_cache_counts_are_zero(self):
        usage = Usage.model_validate(
            {
                "input_tokens": 10,
                "cache_read_input_tokens": None,
                "cache_creation_input_tokens": None,
            }
        )
        assert usage.cache_read_input_tokens == 0
        assert usage.cache_creation_input_tokens == 0

    def test_content_skips_blank_and_bad_lines(self):
        good = [transcript_line("a1", timestamp(0)), transcript_line("a2", timestamp(1))]
        content = "\n".join([good[0], "", "garbage", good[1]])
        assert [line.uuid for line in parse_jsonl_content(content)] == ["a1", "a2"]


class TestTokens:
    def test_output_tokens_excluded(self):
        line = _line(
            "a1",
            timestamp(0),
            input_tokens=1000,
            output_tokens=5000,
            cache_read=200,
            cache_creation=300,
        )
        assert compute_used_tokens(line.message.usage) == 1500

    def test_tool_stats_from_response_and_reply(self):
        assistant = _line("a1", timestamp(0), content=[TOOL_USE, TOOL_USE, {"type": "text"}])
        reply = _line(
            "u1",
            timestamp(1),
            kind="user",
            parent="a1",
            content=[_tool_result(True), _tool_result(False)],
        )
        stats = extract_tool_stats(assistant, reply)
        assert stats.tool_use_count == 2
        assert stats.tool_error_count == 1

    def test_string_content_has_no_tools(self):
        reply = parse_jsonl_line(
            json.dumps(
                {
                    "sessionId": "sess-1",
                    "uuid": "u1",
                    "timestamp": timestamp(1),
                    "type": "user",
                    "message": {"role": "user", "content": "plain prompt"},
                }
            )
        )
        assert extract_tool_stats(_line("a1", timestamp(0)), reply).tool_error_count == 0


class TestTimeSeries:
    def test_deduplicate_keeps_most_complete(self):
        lines = [
            _line("a1", timestamp(0), output_tokens=10),
            _line("a1", timestamp(0), output_tokens=400),
            _line("a1", timestamp(0), output_tokens=50),
        ]
        deduped = deduplicate_by_uuid(lines)
        assert len(deduped) == 1
        assert deduped[0].message.usage.output_tokens == 400

    def test_points_ordered_by_timestamp(self):
        lines = [
            _line("a2", timestamp(5), input_tokens=40_000),
            _line("a1", timestamp(1), input_tokens=20_000),
        ]
        series = build_agent_time_series("main", "Main", lines)
        assert [p.abs for p in series.points] == [20_000, 40_000]
        assert [p.pct for p in series.points] == [0.1, 0.2]
        assert series.limit == 200_000
        assert series.model == SONNET

    def test_user_lines_are_not_turns(self):
        lines = [
            _line("u0", timestamp(0), kind="user"),
            _line("a1", timestamp(1)),
        ]
        assert len(build_agent_time_series("main", "Main", lines).points) == 1

    def test_compactions_detected(self):
        lines = [
            _line("a1", timestamp(0), input_tokens=160_000),
            _line("a2", timestamp(1), input_tokens=60_000),
        ]
        series = build_agent_time_series("main", "Main", lines)
        assert len(series.compactions) == 1
        assert series.compactions[0].before == 160_000

    def test_tool_stats_aligned_with_turns(self):
        lines = [
            _line("a1", timestamp(0), content=[TOOL_USE, TOOL_USE]),
            _line("u1", timestamp(1), kind="user", parent="a1", content=[_tool_result(True)]),
            _line("u2", timestamp(2), kind="user", parent="a1", content=[_tool_result(True)]),
            _line("a2", timestamp(3)),
        ]
        series = build_agent_time_series("main", "Main", lines)
        assert series.tool_stats_at(0).tool_use_count == 2
        assert series.tool_stats_at(0).tool_error_count == 2
        assert series.tool_stats_at(1).tool_use_count == 0

    def test_unknown_model(self):
        series = build_agent_time_series("main", "Main", [])
        assert series.model == "unknown"
        assert series.points == []


class TestIncrementalRead:
    def test_partial_line_carried_over(self, tmp_path):
        path = tmp_path / "sess-1.jsonl"
        first = transcript_line("a1", timestamp(0))
        second = transcript_line("a2", timestamp(1))

        path.write_text(first + "\n" + second[:20])
        result = read_jsonl_incremental(path, 0)
        assert [line.uuid for line in result.lines] == ["a1"]
        assert result.remainder == second[:20].encode()

        with path.open("a") as f:
            f.write(second[20:] + "\n")
        result = read_jsonl_incremental(path, result.bytes_read, result.remainder)
        assert [line.uuid for line in result.lines] == ["a2"]
        assert result.remainder == b""
        assert result.bytes_read == path.stat().st_size

    def test_multibyte_character_split_across_writes(self, tmp_path):
        path = tmp_path / "sess-1.jsonl"
        text_block = {"type": "text", "text": "café"}
        raw = json.loads(transcript_line("a1", timestamp(0), content=[text_block]))
        line = json.dumps(raw, ensure_ascii=False).encode()
        cut = line.index("é".encode()) + 1

        path.write_bytes(line[:cut])
        result = read_jsonl_incremental(path, 0)
        assert result.lines == []

        with path.open("ab") as f:
            f.write(line[cut:] + b"\n")
        result = read_jsonl_incremental(path, result.bytes_read, result.remainder)
        assert [parsed.message.content_blocks()[0]["text"] for parsed in result.lines] == ["café"]

    def test_no_new_bytes(self, tmp_path):
        path = tmp_path / "sess-1.jsonl"
        path.write_text(transcript_line("a1", timestamp(0)) + "\n")
        size = path.stat().st_size
        result = read_jsonl_incremental(path, size)
        assert result.lines == []
        assert result.bytes_read == size


class TestDiscovery:
    def test_finds_session_and_subagents(self, session_dir):
        sessions = discover_sessions(session_dir)
        assert [s.session_id for s in sessions] == ["sess-1"]
        assert [p.name for p in sessions[0].agent_files] == ["agent-abc123.jsonl"]

    def test_flat_agent_files(self, tmp_path):
        (tmp_path / "sess-2.jsonl").write_text(transcript_line("a1", timestamp(0)) + "\n")
        (tmp_path / "agent-flat.jsonl").write_text(transcript_line("b1", timestamp(0)) + "\n")
        sessions = discover_sessions(tmp_path)
        assert [s.session_id for s in sessions] == ["sess-2"]
        assert [p.name for p in sessions[0].agent_files] == ["agent-flat.jsonl"]

    def test_newest_session_first(self, session_dir):
        older = session_dir / "sess-0.jsonl"
        older.write_text(transcript_line("z1", timestamp(0)) + "\n")
        os.utime(older, (1_000_000, 1_000_000))
        assert discover_sessions(session_dir)[0].session_id == "sess-1"

    def test_missing_directory(self, tmp_path):
        assert discover_sessions(tmp_path / "absent") == []

    def test_parse_session(self, session_dir):
        session = parse_session(session_dir)
        assert session.session_id == "sess-1"
        assert [a.agent_id for a in session.agents] == ["sess-1", "agent-abc123"]
        assert len(session.agents[1].points) == 5
        assert session.agents[0].label == "Main session"

    def test_parse_unknown_session_id(self, session_dir):
        assert parse_session(session_dir, "nope") is None

    def test_whole_file_read(self, session_dir):
        assert len(read_jsonl_file(session_dir / "sess-1.jsonl")) == 3


class TestFindProjectDir:
    def test_matches_encoded_cwd(self, tmp_path):
        (tmp_path / "-work-repo").mkdir()
        (tmp_path / "-work-other").mkdir()
        assert find_project_dir(tmp_path, Path("/work/repo")) == tmp_path / "-work-repo"

    def test_falls_back_to_most_recent_transcript(self, tmp_path):
        old, new = tmp_path / "-old", tmp_path / "-new"
        for project, mtime in ((old, 1_000_000), (new, 2_000_000)):
            project.mkdir()
            transcript = project / "sess.jsonl"
            transcript.write_text(transcript_line("a1", timestamp(0)) + "\n")
            os.utime(transcript, (mtime, mtime))
        assert find_project_dir(tmp_path, Path("/elsewhere")) == new

    def test_missing_projects_dir(self, tmp_path):
        assert find_project_dir(tmp_path / "absent") is None
