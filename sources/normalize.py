"""Normalization stage: raw listing records -> bounded, ordered ``FeedItem`` list."""

from __future__ import annotations

from datetime import datetime, timezone
import logging
import re
from typing import Any, Iterable, List, Mapping, Optional

from core import SUMMARY_MAX_CHARS, TRUNCATION_MARKER, FeedItem, ItemStats


logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://www.reddit.com"
FALLBACK_CALL_TO_ACTION = "For the full context, visit the linked article."

_TRAILING_PERIOD_RE = re.compile(r"\.$")


def _text(value: Any) -> str:
    return str(value) if value is not None else ""


def _to_int(value: Any) -> int:
    try:
        return max(0, int(value or 0))
    except (TypeError, ValueError):
        return 0


def _to_ratio(value: Any) -> float:
    try:
        ratio = float(value or 0.0)
    except (TypeError, ValueError):
        return 0.0
    return max(0.0, min(1.0, ratio))


def _posted_at(value: Any) -> datetime:
    try:
        return datetime.fromtimestamp(float(value or 0), tz=timezone.utc)
    except (TypeError, ValueError, OverflowError, OSError):
        return datetime.fromtimestamp(0, tz=timezone.utc)


def truncate_summary(text: str, max_len: int = SUMMARY_MAX_CHARS) -> str:
    if len(text) <= max_len:
        return text
    return text[: max_len - len(TRUNCATION_MARKER)] + TRUNCATION_MARKER


def build_summary(title: str, body: Optional[str]) -> str:
    """Prefer the post body; otherwise synthesize a sentence that quotes the title."""
    summary = _text(body).strip()
    if not summary:
        headline = _TRAILING_PERIOD_RE.sub("", _text(title))
        summary = f"Stay informed: {headline}. {FALLBACK_CALL_TO_ACTION}"
    return truncate_summary(summary)


def is_eligible(record: Mapping[str, Any]) -> bool:
    if not _text(record.get("id")).strip():
        return False
    if record.get("stickied") or record.get("over_18"):
        return False
    return True


def normalize_post(record: Mapping[str, Any], *, base_url: str = DEFAULT_BASE_URL) -> FeedItem:
    title = _text(record.get("title"))
    permalink = _text(record.get("permalink"))
    return FeedItem(
        id=_text(record.get("id")).strip(),
        title=title,
        summary=build_summary(title, record.get("selftext")),
        source_url=f"{base_url.rstrip('/')}{permalink}",
        author=_text(record.get("author")),
        posted_at=_posted_at(record.get("created_utc")),
        stats=ItemStats(
            comment_count=_to_int(record.get("num_comments")),
            upvote_ratio=_to_ratio(record.get("upvote_ratio")),
        ),
    )


def normalize_posts(
    records: Iterable[Mapping[str, Any]],
    *,
    limit: int = 10,
    base_url: str = DEFAULT_BASE_URL,
) -> List[FeedItem]:
    """Filter ineligible records, keep feed order, and bound to the first ``limit`` survivors."""
    raw = list(records)
    eligible = [record for record in raw if isinstance(record, Mapping) and is_eligible(record)]
    kept = eligible[: max(0, int(limit))]
    logger.debug("normalize_posts kept=%s dropped=%s limit=%s", len(kept), len(raw) - len(eligible), limit)
    return [normalize_post(record, base_url=base_url) for record in kept]
