"""Fixed-layout slide rendering.

A slide is drawn onto a ``BaseRenderSurface``: the capability set the renderer needs
(text measurement, rectangle/gradient fills, text drawing, PNG rasterization). The
default surface is backed by Pillow; tests and alternative rasterizers can pass their
own ``surface_factory``.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
import io
import logging
from pathlib import Path
import re
from typing import Callable, List, Optional, Sequence, Tuple
from urllib.parse import urlparse

from PIL import Image, ImageDraw, ImageFont

from core import FeedItem
from utils.exceptions import RenderSurfaceUnavailableError
from utils.timefmt import DEFAULT_TIMEZONE, format_timestamp


logger = logging.getLogger(__name__)

RGB = Tuple[int, int, int]
RGBA = Tuple[int, int, int, int]
Box = Tuple[int, int, int, int]

ELLIPSIS = "…"
ATTRIBUTION_CAPTION = "Generated by India Pulse • Refresh daily for new stories"

_TRAILING_MARKS_RE = re.compile(r"[.·…]+$")

_FONT_CANDIDATES = (
    "DejaVuSans.ttf",
    "Arial.ttf",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
)
_BOLD_FONT_CANDIDATES = (
    "DejaVuSans-Bold.ttf",
    "Arial Bold.ttf",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
)


@dataclass(frozen=True)
class FontSpec:
    size: int
    bold: bool = False


@dataclass(frozen=True)
class TextBlock:
    font: FontSpec
    color: RGBA
    line_height: int = 0
    max_lines: int = 1


@dataclass(frozen=True)
class SlideTheme:
    gradient_stops: Tuple[Tuple[float, RGB], ...] = (
        (0.0, (0x05, 0x0C, 0x1A)),
        (0.55, (0x0B, 0x26, 0x59)),
        (1.0, (0x12, 0x2B, 0x61)),
    )
    panel_fill: RGBA = (6, 14, 48, 115)
    frame_color: RGBA = (56, 189, 248, 153)
    frame_width: int = 6
    label: TextBlock = TextBlock(font=FontSpec(34, bold=True), color=(56, 189, 248, 230))
    title: TextBlock = TextBlock(font=FontSpec(56, bold=True), color=(226, 232, 240, 230), line_height=62, max_lines=3)
    summary: TextBlock = TextBlock(font=FontSpec(26), color=(148, 163, 184, 242), line_height=36, max_lines=6)
    footer: TextBlock = TextBlock(font=FontSpec(22), color=(94, 234, 212, 230))
    caption: TextBlock = TextBlock(font=FontSpec(20), color=(148, 163, 184, 204))


@dataclass(frozen=True)
class SlideLayout:
    canvas_size: Tuple[int, int] = (1280, 720)
    panel_inset: int = 60
    text_x: int = 100
    label_y: int = 120
    title_y: int = 196
    summary_y: int = 374
    footer_gap: int = 28
    footer_bottom_offset: int = 140
    caption_gap: int = 32

    @property
    def width(self) -> int:
        return self.canvas_size[0]

    @property
    def height(self) -> int:
        return self.canvas_size[1]

    @property
    def panel_box(self) -> Box:
        inset = self.panel_inset
        return (inset, inset, self.width - inset, self.height - inset)

    @property
    def text_width(self) -> int:
        return self.width - 2 * self.text_x


DEFAULT_THEME = SlideTheme()
DEFAULT_LAYOUT = SlideLayout()


def wrap_text(
    text: str,
    measure: Callable[[str], float],
    max_width: float,
    max_lines: int,
) -> List[str]:
    """Greedy word wrap.

    Words are packed while the measured line fits ``max_width``; a single word wider
    than ``max_width`` still gets a line of its own. When more than ``max_lines`` lines
    result, the overflow is dropped and the last kept line ends with one ellipsis.
    """
    words = str(text or "").split()
    lines: List[str] = []
    current = ""
    for word in words:
        candidate = f"{current} {word}" if current else word
        if current and measure(candidate) > max_width:
            lines.append(current)
            current = word
        else:
            current = candidate
    if current:
        lines.append(current)

    if max_lines > 0 and len(lines) > max_lines:
        lines = lines[:max_lines]
        lines[-1] = _TRAILING_MARKS_RE.sub("", lines[-1]) + ELLIPSIS
    return lines


def fit_line(text: str, measure: Callable[[str], float], max_width: float) -> str:
    """Trim ``text`` character by character until it fits, ending with one ellipsis."""
    text = str(text or "")
    if measure(text) <= max_width:
        return text
    cut = text
    while cut and measure(_TRAILING_MARKS_RE.sub("", cut) + ELLIPSIS) > max_width:
        cut = cut[:-1]
    return _TRAILING_MARKS_RE.sub("", cut) + ELLIPSIS


def source_reference(url: str) -> str:
    """``https://www.reddit.com/r/india/...`` -> ``reddit.com/r/india/...``."""
    parsed = urlparse(str(url or ""))
    if not parsed.netloc:
        return str(url or "")
    host = parsed.netloc[4:] if parsed.netloc.startswith("www.") else parsed.netloc
    return f"{host}{parsed.path}"


def slide_name(index: int) -> str:
    return f"slide-{index}.png"


class BaseRenderSurface:
    """Drawing capability required by ``SlideRenderer``."""

    width: int
    height: int

    def measure_text(self, text: str, font: FontSpec) -> float:
        raise NotImplementedError

    def fill_vertical_gradient(self, stops: Sequence[Tuple[float, RGB]]) -> None:
        raise NotImplementedError

    def fill_rect(self, box: Box, color: RGBA) -> None:
        raise NotImplementedError

    def stroke_rect(self, box: Box, color: RGBA, width: int) -> None:
        raise NotImplementedError

    def draw_text(self, xy: Tuple[int, int], text: str, font: FontSpec, color: RGBA) -> None:
        raise NotImplementedError

    def to_png(self) -> bytes:
        raise NotImplementedError


@lru_cache(maxsize=32)
def load_font(path: Optional[str], size: int, bold: bool = False) -> ImageFont.ImageFont:
    if path:
        font_path = Path(path).expanduser()
        if font_path.exists():
            try:
                return ImageFont.truetype(str(font_path), size=size)
            except OSError:
                logger.warning("Could not load font %s, falling back", font_path)
    for candidate in _BOLD_FONT_CANDIDATES if bold else _FONT_CANDIDATES:
        try:
            return ImageFont.truetype(candidate, size=size)
        except OSError:
            continue
    return ImageFont.load_default(size=size)


def _lerp(a: int, b: int, t: float) -> int:
    return int(round(a + (b - a) * t))


def _gradient_color(stops: Sequence[Tuple[float, RGB]], position: float) -> RGB:
    if position <= stops[0][0]:
        return stops[0][1]
    for (start, c0), (end, c1) in zip(stops, stops[1:]):
        if position <= end:
            span = end - start
            t = 0.0 if span <= 0 else (position - start) / span
            return (_lerp(c0[0], c1[0], t), _lerp(c0[1], c1[1], t), _lerp(c0[2], c1[2], t))
    return stops[-1][1]


class PillowSurface(BaseRenderSurface):
    """RGBA Pillow canvas; translucent fills are alpha-composited."""

    def __init__(self, width: int, height: int, *, font_path: Optional[str] = None) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"invalid canvas size {width}x{height}")
        self.width = int(width)
        self.height = int(height)
        self.font_path = font_path
        self._image = Image.new("RGBA", (self.width, self.height), (0, 0, 0, 255))
        self._draw = ImageDraw.Draw(self._image)

    def _font(self, font: FontSpec) -> ImageFont.ImageFont:
        return load_font(self.font_path, font.size, font.bold)

    def measure_text(self, text: str, font: FontSpec) -> float:
        return float(self._draw.textlength(text, font=self._font(font)))

    def fill_vertical_gradient(self, stops: Sequence[Tuple[float, RGB]]) -> None:
        ordered = sorted(stops, key=lambda stop: stop[0])
        last_row = max(1, self.height - 1)
        for y in range(self.height):
            color = _gradient_color(ordered, y / last_row)
            self._draw.line([(0, y), (self.width, y)], fill=(*color, 255))

    def _composite(self, paint: Callable[[ImageDraw.ImageDraw], None]) -> None:
        overlay = Image.new("RGBA", self._image.size, (0, 0, 0, 0))
        paint(ImageDraw.Draw(overlay))
        self._image = Image.alpha_composite(self._image, overlay)
        self._draw = ImageDraw.Draw(self._image)

    def fill_rect(self, box: Box, color: RGBA) -> None:
        self._composite(lambda draw: draw.rectangle(box, fill=color))

    def stroke_rect(self, box: Box, color: RGBA, width: int) -> None:
        # Centre the stroke on the box edge like a canvas strokeRect.
        half = width // 2
        outer = (box[0] - half, box[1] - half, box[2] + half, box[3] + half)
        self._composite(lambda draw: draw.rectangle(outer, outline=color, width=width))

    def draw_text(self, xy: Tuple[int, int], text: str, font: FontSpec, color: RGBA) -> None:
        self._composite(lambda draw: draw.text(xy, text, font=self._font(font), fill=color, anchor="ls"))

    def to_png(self) -> bytes:
        buffer = io.BytesIO()
        self._image.convert("RGB").save(buffer, format="PNG")
        return buffer.getvalue()


SurfaceFactory = Callable[[int, int], BaseRenderSurface]


class SlideRenderer:
    """Draw one ``FeedItem`` per call into a PNG frame."""

    def __init__(
        self,
        *,
        layout: SlideLayout = DEFAULT_LAYOUT,
        theme: SlideTheme = DEFAULT_THEME,
        surface_factory: Optional[SurfaceFactory] = None,
        font_path: Optional[str] = None,
        display_timezone: str = DEFAULT_TIMEZONE,
    ) -> None:
        self.layout = layout
        self.theme = theme
        self.font_path = font_path
        self.display_timezone = display_timezone
        self._surface_factory = surface_factory or (
            lambda width, height: PillowSurface(width, height, font_path=self.font_path)
        )

    def _create_surface(self) -> BaseRenderSurface:
        try:
            return self._surface_factory(self.layout.width, self.layout.height)
        except Exception as exc:
            logger.error("Slide surface creation failed: %s", exc)
            raise RenderSurfaceUnavailableError(
                "Failed to initialise the slide rendering surface.",
                {"size": f"{self.layout.width}x{self.layout.height}"},
            ) from exc

    def _draw_wrapped(self, surface: BaseRenderSurface, text: str, y: int, block: TextBlock) -> int:
        lines = wrap_text(
            text,
            lambda candidate: surface.measure_text(candidate, block.font),
            self.layout.text_width,
            block.max_lines,
        )
        for index, line in enumerate(lines):
            surface.draw_text((self.layout.text_x, y + index * block.line_height), line, block.font, block.color)
        return y + len(lines) * block.line_height

    def render(self, item: FeedItem, index: int, total: int) -> bytes:
        layout = self.layout
        theme = self.theme
        surface = self._create_surface()

        surface.fill_vertical_gradient(theme.gradient_stops)
        surface.fill_rect(layout.panel_box, theme.panel_fill)
        surface.stroke_rect(layout.panel_box, theme.frame_color, theme.frame_width)

        surface.draw_text(
            (layout.text_x, layout.label_y),
            f"Update {index + 1} of {total}",
            theme.label.font,
            theme.label.color,
        )
        self._draw_wrapped(surface, item.title, layout.title_y, theme.title)
        next_y = self._draw_wrapped(surface, item.summary, layout.summary_y, theme.summary)

        footer_y = max(next_y + layout.footer_gap, layout.height - layout.footer_bottom_offset)
        posted = format_timestamp(item.posted_at, tz=self.display_timezone, pad_day=True)
        prefix, suffix = "Source · ", f" · Posted {posted}"

        def measure_footer(candidate: str) -> float:
            return surface.measure_text(candidate, theme.footer.font)

        reference = fit_line(
            source_reference(item.source_url),
            measure_footer,
            layout.text_width - measure_footer(prefix + suffix),
        )
        surface.draw_text(
            (layout.text_x, footer_y),
            f"{prefix}{reference}{suffix}",
            theme.footer.font,
            theme.footer.color,
        )
        surface.draw_text(
            (layout.text_x, footer_y + layout.caption_gap),
            ATTRIBUTION_CAPTION,
            theme.caption.font,
            theme.caption.color,
        )
        return surface.to_png()
