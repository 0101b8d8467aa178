"""Pipeline orchestrator for the news reel generator."""

from .service import PipelineOrchestrator, VideoResult

__all__ = [
    "PipelineOrchestrator",
    "VideoResult",
]
