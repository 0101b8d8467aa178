from __future__ import annotations

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from core import FeedItem
from sources.normalize import build_summary, normalize_post, normalize_posts, truncate_summary


def _record(idx: int, **overrides):
    record = {
        "id": f"p{idx}",
        "title": f"Headline {idx}",
        "selftext": f"Body text {idx}",
        "author": f"user{idx}",
        "created_utc": 1_700_000_000 + idx,
        "permalink": f"/r/india/comments/p{idx}/headline_{idx}/",
        "stickied": False,
        "over_18": False,
        "num_comments": idx * 3,
        "upvote_ratio": 0.91,
    }
    record.update(overrides)
    return record


def test_filters_stickied_and_adult_posts_preserving_order() -> None:
    records = [_record(i) for i in range(12)]
    records[1]["stickied"] = True
    records[4]["stickied"] = True
    records[7]["over_18"] = True

    items = normalize_posts(records, limit=10)

    assert [item.id for item in items] == ["p0", "p2", "p3", "p5", "p6", "p8", "p9", "p10", "p11"]


def test_limit_keeps_the_first_survivors() -> None:
    items = normalize_posts([_record(i) for i in range(15)], limit=10)
    assert len(items) == 10
    assert items[-1].id == "p9"


def test_records_without_id_are_dropped() -> None:
    items = normalize_posts([_record(0, id=""), _record(1, id=None), _record(2)])
    assert [item.id for item in items] == ["p2"]


def test_empty_listing_yields_no_items() -> None:
    assert normalize_posts([]) == []
    assert normalize_posts([_record(0, stickied=True)]) == []


def test_post_fields_are_mapped() -> None:
    item = normalize_post(_record(3, created_utc=0, num_comments=None, upvote_ratio=None))
    assert item.title == "Headline 3"
    assert item.summary == "Body text 3"
    assert item.author == "user3"
    assert item.source_url == "https://www.reddit.com/r/india/comments/p3/headline_3/"
    assert item.posted_at == datetime(1970, 1, 1, tzinfo=timezone.utc)
    assert item.stats.comment_count == 0
    assert item.stats.upvote_ratio == 0.0


def test_out_of_range_stats_are_clamped() -> None:
    item = normalize_post(_record(1, num_comments=-5, upvote_ratio=1.7))
    assert item.stats.comment_count == 0
    assert item.stats.upvote_ratio == 1.0
    assert item.upvote_percent == 100


def test_empty_body_gets_fallback_summary() -> None:
    item = normalize_post(_record(1, title="Markets rally", selftext=""))
    assert item.summary == "Stay informed: Markets rally. For the full context, visit the linked article."


def test_fallback_summary_drops_one_trailing_period() -> None:
    assert build_summary("Rain expected.", "   ") == (
        "Stay informed: Rain expected. For the full context, visit the linked article."
    )
    assert build_summary("Wait..", None).startswith("Stay informed: Wait.. For")


def test_long_body_is_truncated_to_600_chars() -> None:
    item = normalize_post(_record(1, selftext="x" * 1000))
    assert len(item.summary) == 600
    assert item.summary.endswith("...")
    assert item.summary[:597] == "x" * 597


def test_truncate_leaves_short_text_alone() -> None:
    text = "y" * 600
    assert truncate_summary(text) == text


def test_feed_item_rejects_oversized_summary() -> None:
    with pytest.raises(ValidationError):
        FeedItem(
            id="a",
            title="t",
            summary="z" * 601,
            source_url="https://www.reddit.com/x",
            posted_at=datetime(2026, 1, 1, tzinfo=timezone.utc),
        )


def test_feed_item_is_immutable() -> None:
    item = normalize_post(_record(1))
    with pytest.raises(ValidationError):
        item.title = "changed"
