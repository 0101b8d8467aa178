"""
Settings Configuration
使用 Pydantic 进行配置验证和管理
"""
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class FeedSettings(BaseSettings):
    """内容源 (Reddit listing) 配置"""
    base_url: str = Field(default="https://www.reddit.com", description="Feed host")
    subreddit: str = Field(default="india", description="Subreddit to pull the daily top listing from")
    max_items: int = Field(default=10, ge=1, description="最大返回结果数")
    time_window: str = Field(default="day", description="Ranking window: hour, day, week, month, year, all")
    user_agent: str = Field(default="agentic-video-generator/1.0", description="User Agent")
    request_timeout: float = Field(default=12.0, description="请求超时时间(秒)")

    class Config:
        env_prefix = "FEED_"


class VideoSettings(BaseSettings):
    """视频合成配置"""
    min_total_duration_sec: int = Field(default=240, ge=1, description="Target minimum runtime")
    fallback_slide_duration_sec: int = Field(default=40, ge=1, description="Minimum seconds per slide")
    canvas_width: int = Field(default=1280, description="Slide width in pixels")
    canvas_height: int = Field(default=720, description="Slide height in pixels")
    fps: int = Field(default=30, description="Output frame rate")
    sample_rate: int = Field(default=44100, description="Silence track sample rate")
    video_codec: str = Field(default="libx264")
    pixel_format: str = Field(default="yuv420p")
    audio_codec: str = Field(default="aac")
    audio_bitrate: str = Field(default="128k")
    ffmpeg_bin: Optional[str] = Field(default=None, description="ffmpeg 路径 (不填则从 PATH 查找)")
    font_path: Optional[str] = Field(default=None, description="TrueType font used for slides")
    display_timezone: str = Field(default="Asia/Kolkata", description="Timezone for rendered timestamps")
    output_filename: str = Field(default="india-pulse-news.mp4", description="Download filename")
    log_window: int = Field(default=120, ge=1, description="Encoder log lines kept in memory")

    class Config:
        env_prefix = "VIDEO_"


class LoggingSettings(BaseSettings):
    """日志配置"""
    level: str = Field(default="INFO", description="日志级别")
    file: Optional[str] = Field(default=None, description="日志文件名 (可选)")
    use_rich: bool = Field(default=True, description="是否使用 Rich 美化输出")

    class Config:
        env_prefix = "LOG_"


class Settings(BaseSettings):
    """主配置类 - 聚合所有子配置"""

    feed: FeedSettings = Field(default_factory=FeedSettings)
    video: VideoSettings = Field(default_factory=VideoSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @classmethod
    def load_from_env_file(cls, env_path: Optional[Path] = None) -> "Settings":
        """从指定的 .env 文件加载配置"""
        if env_path is None:
            # 默认查找 config/.env
            env_path = Path(__file__).parent / ".env"

        if env_path.exists():
            from dotenv import load_dotenv
            load_dotenv(env_path)

        return cls(
            feed=FeedSettings(),
            video=VideoSettings(),
            logging=LoggingSettings(),
        )


@lru_cache()
def get_settings() -> Settings:
    """获取全局配置单例"""
    return Settings.load_from_env_file()


# 便捷访问
def get_feed_settings() -> FeedSettings:
    return get_settings().feed


def get_video_settings() -> VideoSettings:
    return get_settings().video


def get_logging_settings() -> LoggingSettings:
    return get_settings().logging
