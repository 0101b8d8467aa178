from __future__ import annotations

from datetime import datetime, timezone

from core import FeedItem
from outputs.narration import build_narration, build_story_paragraph


def _item(idx: int, **overrides) -> FeedItem:
    data = dict(
        id=f"n{idx}",
        title=f"Headline {idx}",
        summary=f"Summary {idx}",
        source_url=f"https://www.reddit.com/r/india/comments/n{idx}/",
        author=f"reporter{idx}",
        posted_at=datetime(2026, 10, 17, 15, 35, tzinfo=timezone.utc),
    )
    data.update(overrides)
    return FeedItem(**data)


def test_story_paragraph_format() -> None:
    paragraph = build_story_paragraph(_item(0), 0)
    assert paragraph == (
        "Story 1: Headline 0.\n"
        "Summary 0\n"
        "Published by reporter0 on 17 October 2026, 09:05 pm."
    )


def test_narration_keeps_feed_order_and_blank_line_separators() -> None:
    narration = build_narration([_item(0), _item(1), _item(2)])
    paragraphs = narration.split("\n\n")
    assert len(paragraphs) == 3
    assert paragraphs[0].startswith("Story 1: Headline 0.")
    assert paragraphs[2].startswith("Story 3: Headline 2.")


def test_narration_day_is_not_padded() -> None:
    item = _item(0, posted_at=datetime(2026, 3, 4, 3, 0, tzinfo=timezone.utc))
    assert build_story_paragraph(item, 4).endswith("on 4 March 2026, 08:30 am.")


def test_empty_item_list_yields_empty_narration() -> None:
    assert build_narration([]) == ""


def test_timezone_override() -> None:
    paragraph = build_story_paragraph(_item(0), 0, tz="UTC")
    assert paragraph.endswith("on 17 October 2026, 03:35 pm.")
