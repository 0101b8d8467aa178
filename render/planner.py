"""Per-slide and total duration planning."""

from __future__ import annotations

from dataclasses import dataclass
import math


MIN_TOTAL_DURATION_SEC = 240
FALLBACK_SLIDE_DURATION_SEC = 40


@dataclass(frozen=True)
class RenderPlan:
    item_count: int
    per_slide_duration_sec: int
    total_duration_sec: int


def plan_durations(
    item_count: int,
    *,
    min_total_duration_sec: int = MIN_TOTAL_DURATION_SEC,
    fallback_slide_duration_sec: int = FALLBACK_SLIDE_DURATION_SEC,
) -> RenderPlan:
    """Spread the minimum runtime evenly, never dropping a slide below the fallback duration."""
    count = int(item_count)
    if count < 1:
        raise ValueError("item_count must be at least 1")
    per_slide = max(math.ceil(min_total_duration_sec / count), int(fallback_slide_duration_sec))
    return RenderPlan(
        item_count=count,
        per_slide_duration_sec=per_slide,
        total_duration_sec=per_slide * count,
    )
