"""Encoder collaborator: named input buffers + argument list -> one encoded output buffer."""

from __future__ import annotations

import asyncio
from collections import deque
import logging
from pathlib import Path
import shutil
import tempfile
from typing import Callable, Collection, Deque, List, Optional, Union

from utils.exceptions import EncoderFailureError


logger = logging.getLogger(__name__)

LineCallback = Callable[[str], None]

MANIFEST_NAME = "slides.txt"
SILENCE_NAME = "silence.wav"
OUTPUT_NAME = "output.mp4"
ENCODER_FAILURE_MESSAGE = "Something went wrong while generating the video."
TAIL_LINES = 20
LINE_LIMIT_BYTES = 1024 * 1024


def build_encode_args(
    *,
    manifest_name: str = MANIFEST_NAME,
    audio_name: str = SILENCE_NAME,
    output_name: str = OUTPUT_NAME,
    fps: int = 30,
    video_codec: str = "libx264",
    pixel_format: str = "yuv420p",
    audio_codec: str = "aac",
    audio_bitrate: str = "128k",
) -> List[str]:
    """Concat the slide playlist, mux the silence track, stop at the shorter stream."""
    return [
        "-f",
        "concat",
        "-safe",
        "0",
        "-i",
        manifest_name,
        "-i",
        audio_name,
        "-shortest",
        "-r",
        str(fps),
        "-c:v",
        video_codec,
        "-pix_fmt",
        pixel_format,
        "-c:a",
        audio_codec,
        "-b:a",
        audio_bitrate,
        output_name,
    ]


class BaseEncoder:
    """Long-lived encoder with a flat scratch filesystem.

    Lifecycle: ``load()`` once, reuse across runs, ``close()`` to dispose.
    """

    provider = "base"

    @property
    def loaded(self) -> bool:
        raise NotImplementedError

    async def load(self) -> None:
        raise NotImplementedError

    def write_file(self, name: str, data: Union[bytes, str]) -> None:
        raise NotImplementedError

    def read_file(self, name: str) -> bytes:
        raise NotImplementedError

    def remove_file(self, name: str) -> None:
        raise NotImplementedError

    async def run(self, args: List[str], *, on_line: Optional[LineCallback] = None) -> None:
        raise NotImplementedError

    async def close(self) -> None:
        raise NotImplementedError


class FFmpegEncoder(BaseEncoder):
    """ffmpeg subprocess encoder working inside a private temporary directory."""

    provider = "ffmpeg"

    def __init__(
        self,
        *,
        ffmpeg_bin: Optional[str] = None,
        work_root: Optional[Path] = None,
        line_limit: int = LINE_LIMIT_BYTES,
    ) -> None:
        self._requested_bin = ffmpeg_bin
        self._line_limit = int(line_limit)
        self._work_root = Path(work_root) if work_root else None
        self._bin: Optional[str] = None
        self._work_dir: Optional[Path] = None

    @property
    def loaded(self) -> bool:
        return self._bin is not None and self._work_dir is not None

    @property
    def work_dir(self) -> Optional[Path]:
        return self._work_dir

    async def load(self) -> None:
        if self.loaded:
            return
        candidate = self._requested_bin or "ffmpeg"
        resolved = shutil.which(candidate)
        if not resolved:
            raise EncoderFailureError(
                "ffmpeg is required to encode the video. Please install ffmpeg first.",
                binary=candidate,
            )
        if self._work_root:
            self._work_root.mkdir(parents=True, exist_ok=True)
        self._work_dir = Path(tempfile.mkdtemp(prefix="newsreel_", dir=str(self._work_root) if self._work_root else None))
        self._bin = resolved
        logger.info("Encoder loaded bin=%s work_dir=%s", resolved, self._work_dir)

    def _path(self, name: str) -> Path:
        if not self.loaded:
            raise EncoderFailureError("Encoder used before load().")
        if not name or "/" in name or "\\" in name or name in {".", ".."}:
            raise ValueError(f"invalid scratch file name: {name!r}")
        return self._work_dir / name

    def write_file(self, name: str, data: Union[bytes, str]) -> None:
        payload = data.encode("utf-8") if isinstance(data, str) else bytes(data)
        self._path(name).write_bytes(payload)

    def read_file(self, name: str) -> bytes:
        path = self._path(name)
        if not path.exists():
            raise EncoderFailureError(ENCODER_FAILURE_MESSAGE, missing=name)
        return path.read_bytes()

    def remove_file(self, name: str) -> None:
        self._path(name).unlink(missing_ok=True)

    async def run(self, args: List[str], *, on_line: Optional[LineCallback] = None) -> None:
        if not self.loaded:
            raise EncoderFailureError("Encoder used before load().")
        cmd = [self._bin, "-hide_banner", "-nostats", "-y", *args]
        pretty = " ".join(a if " " not in a else f"'{a}'" for a in cmd)
        logger.debug("FFmpeg: %s", pretty)

        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                cwd=str(self._work_dir),
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
                limit=self._line_limit,
            )
        except OSError as exc:
            raise EncoderFailureError(ENCODER_FAILURE_MESSAGE, reason=str(exc)) from exc

        tail: Deque[str] = deque(maxlen=TAIL_LINES)
        try:
            assert process.stdout is not None
            try:
                async for raw in process.stdout:
                    line = raw.decode("utf-8", errors="replace").rstrip()
                    if not line:
                        continue
                    tail.append(line)
                    if on_line:
                        on_line(line)
            except (ValueError, asyncio.LimitOverrunError) as exc:
                logger.error("ffmpeg output could not be read: %s", exc)
                raise EncoderFailureError(ENCODER_FAILURE_MESSAGE, reason=str(exc)) from exc
            returncode = await process.wait()
        finally:
            if process.returncode is None:
                try:
                    process.kill()
                except ProcessLookupError:
                    logger.debug("ffmpeg exited before it could be killed")
                await process.wait()

        if returncode != 0:
            for line in tail:
                logger.error("ffmpeg: %s", line)
            raise EncoderFailureError(ENCODER_FAILURE_MESSAGE, exit_code=returncode, tail=list(tail)[-5:])

    async def close(self) -> None:
        if self._work_dir is not None:
            shutil.rmtree(self._work_dir, ignore_errors=True)
            logger.info("Encoder disposed work_dir=%s", self._work_dir)
        self._work_dir = None
        self._bin = None


def clear_scratch(encoder: BaseEncoder, names: Collection[str]) -> None:
    for name in names:
        try:
            encoder.remove_file(name)
        except (OSError, ValueError, EncoderFailureError):
            logger.debug("Could not remove scratch file %s", name, exc_info=True)
