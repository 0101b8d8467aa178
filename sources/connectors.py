"""Content feed connector: ranked subreddit listing over HTTP."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from config import FeedSettings, get_settings
from core import FeedItem
from utils.exceptions import FeedUnavailableError, NoContentError

from .normalize import normalize_posts


logger = logging.getLogger(__name__)

FEED_UNAVAILABLE_MESSAGE = "Unable to fetch updates right now."
NO_CONTENT_MESSAGE = "No fresh updates available. Try again shortly."


async def _http_get_json(
    url: str,
    *,
    headers: Optional[Dict[str, str]] = None,
    params: Optional[Dict[str, Any]] = None,
    timeout: float = 12.0,
) -> Any:
    async with httpx.AsyncClient(timeout=httpx.Timeout(timeout), follow_redirects=True) as client:
        response = await client.get(url, headers=headers, params=params)
        response.raise_for_status()
        return response.json()


def _listing_records(payload: Any) -> List[Dict[str, Any]]:
    if not isinstance(payload, dict):
        raise FeedUnavailableError(FEED_UNAVAILABLE_MESSAGE, reason="unexpected payload shape")
    data = payload.get("data")
    children = (data.get("children") if isinstance(data, dict) else None) or []
    records: List[Dict[str, Any]] = []
    for child in children:
        if isinstance(child, dict) and isinstance(child.get("data"), dict):
            records.append(child["data"])
    return records


async def fetch_listing(settings: Optional[FeedSettings] = None) -> List[Dict[str, Any]]:
    """Fetch the raw top-of-window listing. Any transport or status failure is ``FeedUnavailableError``."""
    feed = settings or get_settings().feed
    url = f"{feed.base_url.rstrip('/')}/r/{feed.subreddit}/top/.json"
    params = {"limit": feed.max_items, "t": feed.time_window}
    logger.info("[Feed] GET %s limit=%s t=%s", url, feed.max_items, feed.time_window)

    try:
        payload = await _http_get_json(
            url,
            headers={"User-Agent": feed.user_agent},
            params=params,
            timeout=feed.request_timeout,
        )
    except httpx.HTTPStatusError as exc:
        status_code = exc.response.status_code
        logger.error("[Feed] non-success status %s from %s", status_code, url)
        raise FeedUnavailableError(FEED_UNAVAILABLE_MESSAGE, status_code=status_code) from exc
    except (httpx.HTTPError, ValueError) as exc:
        logger.error("[Feed] request failed: %s", exc)
        raise FeedUnavailableError(FEED_UNAVAILABLE_MESSAGE, reason=str(exc)) from exc

    return _listing_records(payload)


async def fetch_updates(settings: Optional[FeedSettings] = None) -> List[FeedItem]:
    """Fetch and normalize the latest items; raises ``NoContentError`` when nothing survives filtering."""
    feed = settings or get_settings().feed
    records = await fetch_listing(feed)
    items = normalize_posts(records, limit=feed.max_items, base_url=feed.base_url)
    if not items:
        raise NoContentError(NO_CONTENT_MESSAGE, {"raw_count": len(records)})
    logger.info("[Feed] %s eligible items out of %s records", len(items), len(records))
    return items
