"""Pipeline orchestrator: fetch -> narration -> slides/manifest/silence -> encoder -> video."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timezone
import logging
from typing import Awaitable, Callable, List, Optional, Sequence

from config import Settings, get_settings
from core import FeedItem, PipelineState, PipelineStatus
from outputs.narration import build_narration
from render.audio import generate_silence_wav
from render.encoder import (
    MANIFEST_NAME,
    OUTPUT_NAME,
    SILENCE_NAME,
    BaseEncoder,
    FFmpegEncoder,
    build_encode_args,
    clear_scratch,
)
from render.manifest import build_concat_manifest
from render.planner import RenderPlan, plan_durations
from render.slides import SlideLayout, SlideRenderer, slide_name
from sources.connectors import NO_CONTENT_MESSAGE
from sources.connectors import fetch_updates as fetch_feed_updates
from utils.exceptions import (
    NewsReelError,
    NoContentError,
    PipelineBusyError,
    PreconditionNotMetError,
)
from utils.log_stream import LogStream


logger = logging.getLogger(__name__)

Fetcher = Callable[[], Awaitable[List[FeedItem]]]

NO_ITEMS_MESSAGE = "Fetch the latest updates before generating a video."
BUSY_MESSAGE = "A pipeline run is already in progress."
FETCH_FAILED_MESSAGE = "Unexpected error while fetching updates."
RENDER_FAILED_MESSAGE = "Something went wrong while generating the video."

_BUSY = {PipelineState.FETCHING, PipelineState.RENDERING}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class VideoResult:
    """Encoded video held in memory until superseded or released."""

    data: bytes
    duration_sec: int
    filename: str
    mime_type: str = "video/mp4"
    created_at: datetime = field(default_factory=_utcnow)
    released: bool = False

    @property
    def size_bytes(self) -> int:
        return len(self.data)

    def release(self) -> None:
        self.data = b""
        self.released = True


class PipelineOrchestrator:
    """Single-flight state machine over the news reel pipeline.

    ``IDLE -> FETCHING -> READY -> RENDERING -> DONE``; failures land in ``ERROR``
    and the next fetch goes back through ``IDLE`` before fetching again. The encoder
    is created lazily once and reused.
    """

    def __init__(
        self,
        *,
        settings: Optional[Settings] = None,
        fetcher: Optional[Fetcher] = None,
        encoder: Optional[BaseEncoder] = None,
        slide_renderer: Optional[SlideRenderer] = None,
    ) -> None:
        self._settings = settings or get_settings()
        video = self._settings.video
        self._fetcher = fetcher or (lambda: fetch_feed_updates(self._settings.feed))
        self._encoder = encoder
        self._owns_encoder = encoder is None
        self._encoder_lock = asyncio.Lock()
        self._slides = slide_renderer or SlideRenderer(
            layout=SlideLayout(canvas_size=(video.canvas_width, video.canvas_height)),
            font_path=video.font_path,
            display_timezone=video.display_timezone,
        )

        self.logs = LogStream(window=video.log_window)
        self._state = PipelineState.IDLE
        self._items: List[FeedItem] = []
        self._narration = ""
        self._error: Optional[str] = None
        self._video: Optional[VideoResult] = None
        self._state_subscribers: List[Callable[[PipelineState], None]] = []

    # ------------------------------------------------------------------
    # observable state

    @property
    def state(self) -> PipelineState:
        return self._state

    @property
    def items(self) -> List[FeedItem]:
        return list(self._items)

    @property
    def narration(self) -> str:
        return self._narration

    @narration.setter
    def narration(self, text: str) -> None:
        self._narration = str(text or "")

    @property
    def error(self) -> Optional[str]:
        return self._error

    @property
    def video(self) -> Optional[VideoResult]:
        return self._video

    @property
    def plan(self) -> Optional[RenderPlan]:
        if not self._items:
            return None
        return self._plan(len(self._items))

    def subscribe_logs(self, callback: Callable[[str], None]) -> Callable[[], None]:
        return self.logs.subscribe(callback)

    def subscribe_state(self, callback: Callable[[PipelineState], None]) -> Callable[[], None]:
        """Call ``callback`` with every new state; returns an unsubscribe function."""
        self._state_subscribers.append(callback)

        def _unsubscribe() -> None:
            if callback in self._state_subscribers:
                self._state_subscribers.remove(callback)

        return _unsubscribe

    def snapshot(self) -> PipelineStatus:
        plan = self.plan
        video = self._video
        return PipelineStatus(
            state=self._state,
            item_count=len(self._items),
            narration=self._narration,
            error=self._error,
            per_slide_duration_sec=plan.per_slide_duration_sec if plan else None,
            total_duration_sec=plan.total_duration_sec if plan else None,
            video_available=bool(video and not video.released),
            video_duration_sec=video.duration_sec if video else None,
            video_filename=video.filename if video else None,
            logs=self.logs.lines(),
        )

    def build_narration(self, items: Sequence[FeedItem]) -> str:
        return build_narration(items, tz=self._settings.video.display_timezone)

    # ------------------------------------------------------------------
    # internals

    def _plan(self, item_count: int) -> RenderPlan:
        video = self._settings.video
        return plan_durations(
            item_count,
            min_total_duration_sec=video.min_total_duration_sec,
            fallback_slide_duration_sec=video.fallback_slide_duration_sec,
        )

    def _set_state(self, state: PipelineState) -> None:
        self._state = state
        for callback in list(self._state_subscribers):
            try:
                callback(state)
            except Exception:
                logger.debug("State subscriber failed", exc_info=True)

    def _emit_progress(self, message: str) -> None:
        logger.info("[Pipeline] %s", message)
        self.logs.append(f"[pipeline] {message}")

    def _record_failure(self, exc: Exception, message: str) -> None:
        logger.error("[Pipeline] %s failed: %s", self._state.value, exc, exc_info=exc)
        self._error = message
        self._set_state(PipelineState.ERROR)

    async def _ensure_encoder(self) -> BaseEncoder:
        async with self._encoder_lock:
            if self._encoder is None:
                video = self._settings.video
                self._encoder = FFmpegEncoder(ffmpeg_bin=video.ffmpeg_bin)
                self._owns_encoder = True
            if not self._encoder.loaded:
                self._emit_progress(f"Loading encoder ({self._encoder.provider})...")
                await self._encoder.load()
            return self._encoder

    # ------------------------------------------------------------------
    # user intents

    async def fetch_updates(self) -> List[FeedItem]:
        """Fetch and normalize the latest items, then rebuild the narration draft."""
        if self._state in _BUSY:
            raise PipelineBusyError(BUSY_MESSAGE, {"state": self._state.value})

        if self._state == PipelineState.ERROR:
            self._set_state(PipelineState.IDLE)
        self._set_state(PipelineState.FETCHING)
        self._error = None
        try:
            items = list(await self._fetcher())
            if not items:
                raise NoContentError(NO_CONTENT_MESSAGE)
            narration = self.build_narration(items)
        except NewsReelError as exc:
            self._record_failure(exc, exc.message)
            raise
        except Exception as exc:
            self._record_failure(exc, FETCH_FAILED_MESSAGE)
            raise NewsReelError(FETCH_FAILED_MESSAGE, {"cause": type(exc).__name__}) from exc

        self._items = items
        self._narration = narration
        self._set_state(PipelineState.READY)
        logger.info("[Pipeline] fetched %s items", len(items))
        return list(items)

    async def generate_video(self, items: Optional[Sequence[FeedItem]] = None) -> VideoResult:
        """Render slides, build manifest and silence, encode, and publish the video.

        Rejected without any state change when there are no items or a run is in flight.
        """
        run_items = list(self._items if items is None else items)
        if self._state in _BUSY:
            raise PipelineBusyError(BUSY_MESSAGE, {"state": self._state.value})
        if not run_items:
            raise PreconditionNotMetError(NO_ITEMS_MESSAGE)

        self._set_state(PipelineState.RENDERING)
        self._error = None
        self.logs.clear()
        try:
            result = await self._render(run_items)
        except NewsReelError as exc:
            self._record_failure(exc, exc.message)
            raise
        except Exception as exc:
            self._record_failure(exc, RENDER_FAILED_MESSAGE)
            raise NewsReelError(RENDER_FAILED_MESSAGE, {"cause": type(exc).__name__}) from exc

        previous = self._video
        self._video = result
        if previous is not None and previous is not result:
            previous.release()
        self._set_state(PipelineState.DONE)
        self._emit_progress(f"Render complete: {result.filename} ({result.duration_sec}s, {result.size_bytes} bytes)")
        return result

    async def _render(self, items: List[FeedItem]) -> VideoResult:
        video = self._settings.video
        plan = self._plan(len(items))
        self._emit_progress(
            f"Plan: {plan.item_count} slides x {plan.per_slide_duration_sec}s = {plan.total_duration_sec}s"
        )

        encoder = await self._ensure_encoder()
        names: List[str] = []
        try:
            for index, item in enumerate(items):
                name = slide_name(index)
                data = await asyncio.to_thread(self._slides.render, item, index, len(items))
                names.append(name)
                encoder.write_file(name, data)
                self._emit_progress(f"Rendered {name}")

            manifest = build_concat_manifest(names, plan.per_slide_duration_sec)
            encoder.write_file(MANIFEST_NAME, manifest)

            silence = await asyncio.to_thread(
                generate_silence_wav,
                plan.total_duration_sec,
                sample_rate=video.sample_rate,
            )
            encoder.write_file(SILENCE_NAME, silence)
            self._emit_progress(f"Silence track ready ({len(silence)} bytes)")

            self._emit_progress("Encoding video...")
            await encoder.run(
                build_encode_args(
                    fps=video.fps,
                    video_codec=video.video_codec,
                    pixel_format=video.pixel_format,
                    audio_codec=video.audio_codec,
                    audio_bitrate=video.audio_bitrate,
                ),
                on_line=self.logs.append,
            )
            data = encoder.read_file(OUTPUT_NAME)
        finally:
            clear_scratch(encoder, [*names, MANIFEST_NAME, SILENCE_NAME, OUTPUT_NAME])

        return VideoResult(
            data=data,
            duration_sec=plan.total_duration_sec,
            filename=video.output_filename,
        )

    async def close(self) -> None:
        """Release the held video and dispose an encoder this orchestrator created."""
        if self._video is not None:
            self._video.release()
            self._video = None
        if self._encoder is not None and self._owns_encoder:
            await self._encoder.close()
            self._encoder = None

    async def __aenter__(self) -> "PipelineOrchestrator":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
