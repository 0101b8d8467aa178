from __future__ import annotations

import logging

from rich.logging import RichHandler

from utils.logger import setup_logger


def test_plain_handler_and_level_name() -> None:
    logger = setup_logger("newsreel.test.plain", level="debug", use_rich=False)
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 1
    assert not isinstance(logger.handlers[0], RichHandler)


def test_rich_handler_is_added_once() -> None:
    first = setup_logger("newsreel.test.rich", level=logging.INFO)
    second = setup_logger("newsreel.test.rich", level=logging.INFO)
    assert first is second
    assert len(second.handlers) == 1
    assert isinstance(second.handlers[0], RichHandler)


def test_request_chatter_is_quieted() -> None:
    setup_logger("newsreel.test.quiet", level="INFO", use_rich=False)
    assert logging.getLogger("httpx").level == logging.WARNING
    assert logging.getLogger("httpcore").level == logging.WARNING
