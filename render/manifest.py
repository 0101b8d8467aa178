"""ffmpeg concat-demuxer playlist for still slides."""

from __future__ import annotations

from typing import Sequence, Union


def _escape(name: str) -> str:
    return name.replace("'", "'\\''")


def _format_seconds(value: Union[int, float]) -> str:
    if float(value).is_integer():
        return str(int(value))
    return f"{float(value):.3f}".rstrip("0").rstrip(".")


def build_concat_manifest(slide_names: Sequence[str], duration_sec: Union[int, float]) -> str:
    """One ``file``/``duration`` pair per slide, then the last slide repeated without a duration.

    The concat demuxer ignores the final entry's ``duration`` unless another ``file``
    follows it, so the trailing repeat keeps the last slide on screen for its full time.
    """
    names = [str(name) for name in slide_names]
    if not names:
        raise ValueError("at least one slide is required")
    if duration_sec <= 0:
        raise ValueError("duration_sec must be positive")

    seconds = _format_seconds(duration_sec)
    lines = []
    for name in names:
        lines.append(f"file '{_escape(name)}'")
        lines.append(f"duration {seconds}")
    lines.append(f"file '{_escape(names[-1])}'")
    return "\n".join(lines) + "\n"
