"""Core contracts and shared types for the news reel pipeline."""

from .contracts import (
    SUMMARY_MAX_CHARS,
    TRUNCATION_MARKER,
    FeedItem,
    ItemStats,
    PipelineState,
    PipelineStatus,
)

__all__ = [
    "SUMMARY_MAX_CHARS",
    "TRUNCATION_MARKER",
    "FeedItem",
    "ItemStats",
    "PipelineState",
    "PipelineStatus",
]
