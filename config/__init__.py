"""
Configuration Management Module
统一配置管理，实现API配置解耦
"""
from .settings import (
    FeedSettings,
    LoggingSettings,
    Settings,
    VideoSettings,
    get_feed_settings,
    get_logging_settings,
    get_settings,
    get_video_settings,
)

__all__ = [
    "FeedSettings",
    "LoggingSettings",
    "Settings",
    "VideoSettings",
    "get_feed_settings",
    "get_logging_settings",
    "get_settings",
    "get_video_settings",
]
