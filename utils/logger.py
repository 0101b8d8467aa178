"""
Logger Configuration
统一日志配置
"""
import logging
import sys
from pathlib import Path
from typing import Iterable, Optional, Union

from rich.console import Console
from rich.logging import RichHandler


# 全局 Console 实例, CLI 输出与日志共用
console = Console()

LOG_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"
LOG_FORMAT_SIMPLE = "%(message)s"

# 默认日志目录
LOG_DIR = Path(__file__).parent.parent / "logs"

# httpx/httpcore log every request at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "PIL")


def _resolve_level(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    return getattr(logging, str(level).upper(), logging.INFO)


def _console_handler(use_rich: bool) -> logging.Handler:
    if use_rich:
        handler: logging.Handler = RichHandler(
            console=console,
            show_time=True,
            show_path=False,
            rich_tracebacks=True,
        )
        handler.setFormatter(logging.Formatter(LOG_FORMAT_SIMPLE))
    else:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
    return handler


def quiet_loggers(names: Iterable[str] = NOISY_LOGGERS, level: int = logging.WARNING) -> None:
    for name in names:
        logging.getLogger(name).setLevel(level)


def setup_logger(
    name: Optional[str] = None,
    level: Union[int, str] = logging.INFO,
    log_file: Optional[str] = None,
    use_rich: bool = True,
) -> logging.Logger:
    """
    设置日志记录器

    Args:
        name: 日志记录器名称 (None 表示根记录器, 覆盖所有模块的 ``__name__`` logger)
        level: 日志级别, 可以是 ``logging.DEBUG`` 或 ``"debug"``
        log_file: 写入 ``logs/`` 目录的文件名 (可选)
        use_rich: 是否使用 Rich 美化输出

    Returns:
        配置好的 Logger 实例
    """
    logger = logging.getLogger(name)
    resolved = _resolve_level(level)
    logger.setLevel(resolved)

    # 避免重复添加 handler
    if logger.handlers:
        return logger

    console_handler = _console_handler(use_rich)
    console_handler.setLevel(resolved)
    logger.addHandler(console_handler)

    if log_file:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(LOG_DIR / log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        file_handler.setLevel(resolved)
        logger.addHandler(file_handler)

    if resolved > logging.DEBUG:
        quiet_loggers()
    return logger
