"""
Utils Module
通用工具函数
"""
from .logger import quiet_loggers, setup_logger
from .log_stream import LogStream
from .exceptions import (
    NewsReelError,
    ConfigurationError,
    EncoderFailureError,
    FeedUnavailableError,
    NoContentError,
    PipelineBusyError,
    PreconditionNotMetError,
    RenderSurfaceUnavailableError,
)
from .timefmt import format_current_cut, format_duration, format_timestamp

__all__ = [
    "setup_logger",
    "quiet_loggers",
    "LogStream",
    "NewsReelError",
    "ConfigurationError",
    "EncoderFailureError",
    "FeedUnavailableError",
    "NoContentError",
    "PipelineBusyError",
    "PreconditionNotMetError",
    "RenderSurfaceUnavailableError",
    "format_current_cut",
    "format_duration",
    "format_timestamp",
]
