"""Token accounting and tool statistics for transcript lines."""

from context_diag.models import ToolCallStats, TranscriptLine, Usage


def compute_used_tokens(usage: Usage) -> int:
    """Tokens occupying the context window for a turn.

    input + cache_read + cache_creation. Output tokens are excluded: they are
    the turn's response, not context carried into it.
    """
    return (
        usage.input_tokens + usage.cache_read_input_tokens + usage.cache_creation_input_tokens
    )


def extract_tool_stats(
    assistant_line: TranscriptLine,
    user_line: TranscriptLine | None = None,
) -> ToolCallStats:
    """Count tool_use blocks in a response and errored tool_results in the reply to it."""
    tool_use_count = sum(
        1 for block in assistant_line.message.content_blocks() if block.get("type") == "tool_use"
    )

    tool_error_count = 0
    if user_line is not None:
        tool_error_count = sum(
            1
            for block in user_line.message.content_blocks()
            if block.get("type") == "tool_result" and block.get("is_error") is True
        )

    return ToolCallStats(tool_use_count=tool_use_count, tool_error_count=tool_error_count)
