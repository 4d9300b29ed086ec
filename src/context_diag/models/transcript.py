"""Transcript line models for Claude Code session JSONL files.

Only the fields the diagnostics need are modelled; everything else in a line
is ignored. Lines whose timestamp is not valid ISO 8601 fail validation so
that ordering by time is always well defined downstream.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from whenever import Instant


class Usage(BaseModel):
    input_tokens: int = Field(ge=0)
    output_tokens: int = Field(default=0, ge=0)
    cache_creation_input_tokens: int = Field(default=0, ge=0)
    cache_read_input_tokens: int = Field(default=0, ge=0)

    @field_validator("cache_creation_input_tokens", "cache_read_input_tokens", mode="before")
    @classmethod
    def _none_is_zero(cls, v: Any) -> Any:
        return 0 if v is None else v


class Message(BaseModel):
    role: Literal["user", "assistant"]
    model: str | None = None
    content: list[Any] | str = Field(default_factory=list)
    usage: Usage | None = None

    def content_blocks(self) -> list[dict[str, Any]]:
        if isinstance(self.content, str):
            return []
        return [b for b in self.content if isinstance(b, dict)]


class TranscriptLine(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    session_id: str = Field(alias="sessionId")
    uuid: str
    parent_uuid: str | None = Field(default=None, alias="parentUuid")
    timestamp: str
    type: Literal["user", "assistant"]
    is_sidechain: bool = Field(default=False, alias="isSidechain")
    message: Message

    @field_validator("timestamp")
    @classmethod
    def _iso_timestamp(cls, v: str) -> str:
        Instant.parse_iso(v)
        return v

    @property
    def instant(self) -> Instant:
        return Instant.parse_iso(self.timestamp)
