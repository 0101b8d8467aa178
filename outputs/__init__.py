"""Text outputs derived from the item list."""

from .narration import build_narration, build_story_paragraph

__all__ = [
    "build_narration",
    "build_story_paragraph",
]
