from __future__ import annotations

from config import FeedSettings, Settings, VideoSettings


def test_defaults() -> None:
    feed = FeedSettings()
    video = VideoSettings()
    assert feed.subreddit == "india"
    assert feed.max_items == 10
    assert feed.time_window == "day"
    assert video.min_total_duration_sec == 240
    assert video.fallback_slide_duration_sec == 40
    assert (video.canvas_width, video.canvas_height) == (1280, 720)
    assert video.output_filename == "india-pulse-news.mp4"
    assert video.log_window == 120


def test_env_prefix_overrides(monkeypatch) -> None:
    monkeypatch.setenv("FEED_SUBREDDIT", "mumbai")
    monkeypatch.setenv("VIDEO_MIN_TOTAL_DURATION_SEC", "300")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")

    settings = Settings.load_from_env_file()

    assert settings.feed.subreddit == "mumbai"
    assert settings.video.min_total_duration_sec == 300
    assert settings.logging.level == "DEBUG"
