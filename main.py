"""CLI entrypoint: fetch today's updates, show the narration draft, render the video."""

from __future__ import annotations

import argparse
import asyncio
from pathlib import Path
import sys
from typing import List, Optional

from rich.panel import Panel
from rich.table import Table

from config import get_settings
from core import FeedItem
from orchestrator import PipelineOrchestrator
from utils.exceptions import NewsReelError
from utils.logger import console, setup_logger
from utils.timefmt import format_current_cut, format_duration, format_timestamp


def _items_table(items: List[FeedItem], tz: str) -> Table:
    table = Table(title="Latest updates", show_lines=False)
    table.add_column("#", justify="right")
    table.add_column("Title")
    table.add_column("Author")
    table.add_column("Posted")
    table.add_column("Upvotes", justify="right")
    table.add_column("Comments", justify="right")
    for index, item in enumerate(items, start=1):
        table.add_row(
            str(index),
            item.title,
            item.author,
            format_timestamp(item.posted_at, tz=tz, pad_day=True),
            f"{item.upvote_percent}%",
            str(item.stats.comment_count),
        )
    return table


async def _run(args: argparse.Namespace) -> int:
    settings = get_settings()
    tz = settings.video.display_timezone

    async with PipelineOrchestrator(settings=settings) as pipeline:
        if args.verbose_encoder:
            pipeline.subscribe_logs(lambda line: console.print(f"[dim]{line}[/dim]"))

        try:
            items = await pipeline.fetch_updates()
        except NewsReelError as exc:
            console.print(f"[bold red]{exc.message}[/bold red]")
            return 1

        console.print(_items_table(items, tz))
        plan = pipeline.plan
        if plan is not None:
            console.print(f"Current cut: {format_current_cut(plan.total_duration_sec)}")
        console.print(Panel(pipeline.narration, title="Narration draft", border_style="cyan"))

        if args.narration_out:
            Path(args.narration_out).write_text(pipeline.narration, encoding="utf-8")
            console.print(f"Narration saved to {args.narration_out}")

        if args.skip_video:
            return 0

        try:
            video = await pipeline.generate_video()
        except NewsReelError as exc:
            console.print(f"[bold red]{exc.message}[/bold red]")
            return 1

        output = Path(args.output) if args.output else Path(video.filename)
        if output.is_dir():
            output = output / video.filename
        output.write_bytes(video.data)
        console.print(
            f"[bold green]Video ready[/bold green] {output} ({format_duration(video.duration_sec)}, {video.size_bytes} bytes)"
        )
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="India Pulse daily news reel")
    parser.add_argument("--output", default="", help="Where to save the mp4 (file or directory)")
    parser.add_argument("--narration-out", default="", help="Optional path to save the narration text")
    parser.add_argument("--skip-video", action="store_true", help="Fetch and print the narration only")
    parser.add_argument("--verbose-encoder", action="store_true", help="Echo encoder log lines as they arrive")
    parser.add_argument("--log-level", default="", help="Override LOG_LEVEL")
    args = parser.parse_args(argv)

    log_settings = get_settings().logging
    setup_logger(
        level=args.log_level or log_settings.level,
        log_file=log_settings.file,
        use_rich=log_settings.use_rich,
    )
    return asyncio.run(_run(args))


if __name__ == "__main__":
    sys.exit(main())
