"""Slide, audio, manifest and encoder stages of the video pipeline."""

from .audio import generate_silence_wav
from .encoder import BaseEncoder, FFmpegEncoder, build_encode_args
from .manifest import build_concat_manifest
from .planner import RenderPlan, plan_durations
from .slides import BaseRenderSurface, PillowSurface, SlideLayout, SlideRenderer, SlideTheme, fit_line, wrap_text

__all__ = [
    "BaseEncoder",
    "BaseRenderSurface",
    "FFmpegEncoder",
    "PillowSurface",
    "RenderPlan",
    "SlideLayout",
    "SlideRenderer",
    "SlideTheme",
    "build_concat_manifest",
    "build_encode_args",
    "fit_line",
    "generate_silence_wav",
    "plan_durations",
    "wrap_text",
]
