"""Canonical data contracts for the news reel pipeline."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


SUMMARY_MAX_CHARS = 600
TRUNCATION_MARKER = "..."


class PipelineState(str, Enum):
    """Lifecycle states of the orchestrator."""

    IDLE = "idle"
    FETCHING = "fetching"
    READY = "ready"
    RENDERING = "rendering"
    DONE = "done"
    ERROR = "error"


class ItemStats(BaseModel):
    """Engagement counters carried over from the feed."""

    model_config = ConfigDict(frozen=True)

    comment_count: int = Field(default=0, ge=0)
    upvote_ratio: float = Field(default=0.0, ge=0.0, le=1.0)


class FeedItem(BaseModel):
    """One normalized content unit destined for one slide. Immutable once built."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    summary: str
    source_url: str
    author: str = ""
    posted_at: datetime
    stats: ItemStats = Field(default_factory=ItemStats)

    @field_validator("id", mode="before")
    @classmethod
    def _non_empty_id(cls, value: Any) -> str:
        text = str(value or "").strip()
        if not text:
            raise ValueError("id is required")
        return text

    @field_validator("summary")
    @classmethod
    def _bounded_summary(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("summary must not be empty")
        if len(value) > SUMMARY_MAX_CHARS:
            raise ValueError(f"summary exceeds {SUMMARY_MAX_CHARS} characters")
        return value

    @field_validator("posted_at")
    @classmethod
    def _aware_timestamp(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @property
    def upvote_percent(self) -> int:
        return int(round(self.stats.upvote_ratio * 100))


class PipelineStatus(BaseModel):
    """Observable orchestrator snapshot consumed by the presentation layer."""

    state: PipelineState
    item_count: int = 0
    narration: str = ""
    error: Optional[str] = None
    per_slide_duration_sec: Optional[int] = None
    total_duration_sec: Optional[int] = None
    video_available: bool = False
    video_duration_sec: Optional[int] = None
    video_filename: Optional[str] = None
    logs: List[str] = Field(default_factory=list)
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
