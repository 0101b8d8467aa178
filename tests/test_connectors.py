from __future__ import annotations

import httpx
import pytest

from config import FeedSettings
from sources import connectors
from utils.exceptions import FeedUnavailableError, NoContentError


def _listing(*records):
    return {"kind": "Listing", "data": {"children": [{"kind": "t3", "data": r} for r in records]}}


def _post(post_id: str, **extra):
    record = {
        "id": post_id,
        "title": f"Title {post_id}",
        "selftext": "Body",
        "author": "someone",
        "created_utc": 1_760_000_000,
        "permalink": f"/r/india/comments/{post_id}/",
        "num_comments": 4,
        "upvote_ratio": 0.8,
    }
    record.update(extra)
    return record


@pytest.mark.asyncio
async def test_fetch_updates_requests_top_listing(monkeypatch) -> None:
    calls = []

    async def _fake_get_json(url: str, *, headers=None, params=None, timeout=12.0):
        calls.append((url, headers, params))
        return _listing(_post("a"), _post("b", stickied=True), _post("c"))

    monkeypatch.setattr(connectors, "_http_get_json", _fake_get_json)

    items = await connectors.fetch_updates(FeedSettings())

    assert [item.id for item in items] == ["a", "c"]
    url, headers, params = calls[0]
    assert url == "https://www.reddit.com/r/india/top/.json"
    assert params == {"limit": 10, "t": "day"}
    assert headers == {"User-Agent": "agentic-video-generator/1.0"}


@pytest.mark.asyncio
async def test_non_success_status_is_feed_unavailable(monkeypatch) -> None:
    async def _fake_get_json(url: str, *, headers=None, params=None, timeout=12.0):
        request = httpx.Request("GET", url)
        response = httpx.Response(503, request=request)
        raise httpx.HTTPStatusError("service unavailable", request=request, response=response)

    monkeypatch.setattr(connectors, "_http_get_json", _fake_get_json)

    with pytest.raises(FeedUnavailableError) as exc_info:
        await connectors.fetch_updates(FeedSettings())
    assert exc_info.value.status_code == 503
    assert exc_info.value.message == "Unable to fetch updates right now."


@pytest.mark.asyncio
async def test_network_error_is_feed_unavailable(monkeypatch) -> None:
    async def _fake_get_json(url: str, *, headers=None, params=None, timeout=12.0):
        raise httpx.ConnectError("connection refused")

    monkeypatch.setattr(connectors, "_http_get_json", _fake_get_json)

    with pytest.raises(FeedUnavailableError):
        await connectors.fetch_listing(FeedSettings())


@pytest.mark.asyncio
async def test_unexpected_payload_is_feed_unavailable(monkeypatch) -> None:
    async def _fake_get_json(url: str, *, headers=None, params=None, timeout=12.0):
        return ["not", "a", "listing"]

    monkeypatch.setattr(connectors, "_http_get_json", _fake_get_json)

    with pytest.raises(FeedUnavailableError):
        await connectors.fetch_listing(FeedSettings())


@pytest.mark.asyncio
async def test_all_filtered_is_no_content(monkeypatch) -> None:
    async def _fake_get_json(url: str, *, headers=None, params=None, timeout=12.0):
        return _listing(_post("a", stickied=True), _post("b", over_18=True))

    monkeypatch.setattr(connectors, "_http_get_json", _fake_get_json)

    with pytest.raises(NoContentError) as exc_info:
        await connectors.fetch_updates(FeedSettings())
    assert exc_info.value.message == "No fresh updates available. Try again shortly."


@pytest.mark.asyncio
async def test_settings_drive_subreddit_and_window(monkeypatch) -> None:
    seen = {}

    async def _fake_get_json(url: str, *, headers=None, params=None, timeout=12.0):
        seen["url"] = url
        seen["params"] = params
        seen["timeout"] = timeout
        return _listing(_post("a"))

    monkeypatch.setattr(connectors, "_http_get_json", _fake_get_json)

    feed = FeedSettings(subreddit="IndiaSpeaks", max_items=5, time_window="week", request_timeout=3.0)
    await connectors.fetch_updates(feed)

    assert seen["url"].endswith("/r/IndiaSpeaks/top/.json")
    assert seen["params"] == {"limit": 5, "t": "week"}
    assert seen["timeout"] == 3.0
