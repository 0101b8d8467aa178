from __future__ import annotations

from utils.log_stream import LogStream


def test_window_keeps_most_recent_lines() -> None:
    stream = LogStream(window=120)
    for i in range(300):
        stream.append(f"line {i}")
    lines = stream.lines()
    assert len(lines) == 120
    assert lines[0] == "line 180"
    assert lines[-1] == "line 299"


def test_subscribers_receive_lines_until_unsubscribed() -> None:
    stream = LogStream(window=5)
    received = []
    unsubscribe = stream.subscribe(received.append)
    stream.append("a\n")
    unsubscribe()
    stream.append("b")
    assert received == ["a"]
    assert stream.lines() == ["a", "b"]


def test_failing_subscriber_does_not_break_the_stream() -> None:
    stream = LogStream()
    received = []

    def _boom(line: str) -> None:
        raise RuntimeError("subscriber exploded")

    stream.subscribe(_boom)
    stream.subscribe(received.append)
    stream.append("still here")
    assert received == ["still here"]
    assert len(stream) == 1


def test_clear_empties_the_window() -> None:
    stream = LogStream()
    stream.append("x")
    stream.clear()
    assert stream.lines() == []
