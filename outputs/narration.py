"""Narration script composed from the normalized item list."""

from __future__ import annotations

from typing import Sequence

from core import FeedItem
from utils.timefmt import DEFAULT_TIMEZONE, format_timestamp


def build_story_paragraph(item: FeedItem, index: int, *, tz: str = DEFAULT_TIMEZONE) -> str:
    posted = format_timestamp(item.posted_at, tz=tz)
    return "\n".join(
        [
            f"Story {index + 1}: {item.title}.",
            item.summary,
            f"Published by {item.author} on {posted}.",
        ]
    )


def build_narration(items: Sequence[FeedItem], *, tz: str = DEFAULT_TIMEZONE) -> str:
    """One paragraph per item, in feed order, separated by a blank line.

    The result is a draft: callers may edit it freely; it is only rebuilt when the
    item list is refreshed.
    """
    return "\n\n".join(build_story_paragraph(item, index, tz=tz) for index, item in enumerate(items))
