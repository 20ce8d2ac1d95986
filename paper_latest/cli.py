# paper_latest/cli.py
from __future__ import annotations
import argparse
import logging
from typing import List, Optional

from rich.console import Console
from rich.markup import escape

from .core import (
    ApiClient, DownloadPipeline, DownloadResult, DownloadTarget, PaperLatestError, Settings,
    human_size, load_settings, make_session, setup_logging,
)
from .core.config import COLOR_MODES

logger = logging.getLogger(__name__)

def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(prog="paper-latest", description="Gets the latest Paper JAR")
    ap.add_argument("-p", "--project", default="paper", help="The project to fetch")
    ap.add_argument("--download-type", default="application", help="The type of download to fetch")
    ap.add_argument("version", help="The version (group) to fetch")
    ap.add_argument("download_location", nargs="?", default="-",
                    help="The file location to download to, or `-` for STDOUT")
    ap.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging for core/network")
    ap.add_argument("--color", choices=COLOR_MODES, default="auto",
                    help="Colorize progress and messages (default: only when stderr is a terminal)")
    return ap.parse_args(argv)

def make_console(settings: Settings) -> Console:
    # Everything human-readable goes to stderr; stdout may be the artifact.
    if settings.color == "always":
        return Console(stderr=True, force_terminal=True)
    if settings.color == "never":
        return Console(stderr=True, no_color=True, highlight=False)
    return Console(stderr=True)

def summary(result: DownloadResult) -> str:
    if result.skipped:
        return "Latest build already downloaded. Exiting."
    return (
        f"Downloaded PaperMC Project '{result.project_id}', version '{result.version}', "
        f"build '{result.build}' ({result.file_name}, {human_size(result.size)}) to '{result.target}'"
    )

def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    console = Console(stderr=True)
    try:
        settings = load_settings().with_overrides(color=args.color, verbose=args.verbose)
    except ValueError as e:
        console.print(f"[red]Error:[/] {escape(str(e))}")
        return 2
    setup_logging(verbose=settings.verbose)
    console = make_console(settings)

    client = ApiClient(make_session(), settings.api_base, settings.timeout, settings.chunk_size)
    pipeline = DownloadPipeline(client, console, settings)
    target = DownloadTarget.parse(args.download_location)
    try:
        result = pipeline.run(args.project, args.download_type, args.version, target)
    except KeyboardInterrupt:
        console.print("[yellow]Interrupted by user.[/]")
        return 130
    except PaperLatestError as e:
        logger.debug("Run failed", exc_info=True)
        console.print(f"[red]Error:[/] {escape(str(e))}", highlight=False, soft_wrap=True)
        return 1
    finally:
        client.session.close()

    console.print(summary(result), markup=False, highlight=False, soft_wrap=True)
    return 0
