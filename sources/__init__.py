"""Content source connectors and normalization."""

from .connectors import fetch_listing, fetch_updates
from .normalize import build_summary, normalize_post, normalize_posts, truncate_summary

__all__ = [
    "build_summary",
    "fetch_listing",
    "fetch_updates",
    "normalize_post",
    "normalize_posts",
    "truncate_summary",
]
