"""Command-line interface for satsnr.

Parses arguments with :func:`satsnr.app.live_view.parse_args`, sets up
logging and then either renders a single PNG frame, runs the headless
loop, or opens the live window.
"""

from __future__ import annotations

import argparse
import asyncio
import logging

from satsnr import __version__
from satsnr import config as _config
from satsnr.app import live_view


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    return live_view.parse_args(argv)


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main(argv: list[str] | None = None) -> None:
    """Synchronous entrypoint for the satsnr CLI."""
    args = parse_args(argv)
    if args.version:
        print(f"satsnr {__version__}")
        return
    _setup_logging(args.log_level)

    if args.png:
        import os

        os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
        rc = _config.make_runtime_config(args=args)
        live_view.render_png(live_view.make_feed(args), args.png, rc=rc)
        return

    try:
        asyncio.run(run_async(argv))
    except KeyboardInterrupt:
        # Allow graceful cancellation via Ctrl+C
        pass


async def run_async(argv: list[str] | None = None) -> None:
    """Async entrypoint for programmatic usage/testing."""
    args = parse_args(argv)
    if args.version:
        print(f"satsnr {__version__}")
        return
    if args.headless:
        await live_view._main_headless_async(args)
    else:
        await live_view.main_async(args)


if __name__ == "__main__":
    main()
