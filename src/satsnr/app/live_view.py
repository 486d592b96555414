"""Live SNR viewer (application entrypoint).

Feeds satellite frames from a recorded snapshot file or the synthetic
constellation into an ``SnrView`` and presents it through the pygame
backend. The controller owns redraw coalescing: feed updates only mark
the view dirty, and the frame loop draws at most once per tick.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
from typing import Any, Optional

from satsnr import __version__
from satsnr import config as _config
from satsnr.core.ranges import NmeaRange
from satsnr.core.time import RealTimeSource, TimeSource
from satsnr.ingest.snapshot_source import (
    SatelliteFeed,
    SnapshotSource,
    SyntheticConstellation,
)
from satsnr.render.canvas import DisplayBackend
from satsnr.render.snr_view import ColorBG, SnrView

logger = logging.getLogger(__name__)

pg: Any = None
try:  # optional import guard for environments without SDL
    import pygame as _pg

    pg = _pg
except ImportError:  # pragma: no cover
    pg = None

_SYSTEM_NAMES = {
    "gps": NmeaRange.GPS,
    "sbas": NmeaRange.SBAS,
    "glonass": NmeaRange.GLONASS,
    "qzss": NmeaRange.QZSS,
    "beidou": NmeaRange.BEIDOU,
}


class SnrController:
    """Owns the frame loop: polls the feed, redraws the view when dirty."""

    def __init__(
        self,
        *,
        display: DisplayBackend,
        view: SnrView,
        feed: SatelliteFeed,
        ts: Optional[TimeSource] = None,
        update_interval_s: float = 1.0,
        target_fps: float = 10.0,
        process_input: bool = False,
    ) -> None:
        self._display = display
        self._view = view
        self._feed = feed
        self._ts: TimeSource = ts or RealTimeSource()
        self._interval = max(0.0, float(update_interval_s))
        self._dt_target = 1.0 / max(1e-6, float(target_fps))
        self._process_input_enabled = bool(process_input)
        self._next_update: float | None = None
        self._running = False
        self.updates = 0
        self.frames_drawn = 0

    @property
    def running(self) -> bool:
        return self._running

    def tick(self) -> bool:
        """Run one loop iteration. Returns True when a frame was drawn."""
        now = self._ts.monotonic()
        if self._next_update is None or now >= self._next_update:
            self._view.show_sats(self._feed.next_frame())
            self.updates += 1
            self._next_update = now + self._interval
        if self._process_input_enabled:
            self._process_input()
        if not self._view.dirty:
            return False
        canvas = self._display.begin_frame()
        self._view.draw(canvas, self._display.size())
        self._display.end_frame()
        self.frames_drawn += 1
        return True

    async def run(self, *, duration_s: float | None = None) -> None:
        self._running = True
        t_start = self._ts.monotonic()
        try:
            while self._running:
                t0 = self._ts.monotonic()
                if duration_s is not None and t0 - t_start >= duration_s:
                    break
                self.tick()
                # Frame pacing
                remaining = self._dt_target - max(0.0, self._ts.monotonic() - t0)
                if remaining > 0:
                    await self._ts.sleep(remaining)
                else:
                    await asyncio.sleep(0)
        except asyncio.CancelledError:  # pragma: no cover - cooperative cancel
            pass
        finally:
            self._running = False
            logger.info(
                "Frame loop stopped after %d updates, %d frames",
                self.updates,
                self.frames_drawn,
            )

    def stop(self) -> None:
        self._running = False

    def _process_input(self) -> None:
        if pg is None:
            return
        for ev in pg.event.get():
            if ev.type == pg.QUIT:
                self._running = False
            elif ev.type == pg.KEYDOWN and ev.key in (pg.K_q, pg.K_ESCAPE):
                self._running = False


def make_feed(args: argparse.Namespace) -> SatelliteFeed:
    """Build the satellite feed selected on the command line."""
    if getattr(args, "snapshots", None):
        return SnapshotSource.from_file(args.snapshots, loop=True)
    systems = [_SYSTEM_NAMES[s] for s in getattr(args, "systems", None) or ["gps"]]
    return SyntheticConstellation(systems, seed=int(getattr(args, "seed", 0)))


def make_view(rc: _config.RuntimeConfig) -> SnrView:
    return SnrView(
        grid_stroke_px=rc.view.grid_stroke_px,
        height_ratio=rc.view.height_ratio,
        max_snr=rc.view.max_snr,
        background=ColorBG,
    )


def render_png(
    feed: SatelliteFeed, path: str, *, rc: Optional[_config.RuntimeConfig] = None
) -> tuple[int, int]:
    """Render one frame from *feed* headless and save it to *path*.

    Returns the rendered (width, height).
    """
    from satsnr.platform.display.pygame_backend import PygameDisplayBackend

    rc = rc or _config.get_runtime()
    view = make_view(rc)
    size = view.measure(rc.app.width_px, rc.app.max_height_px)
    display = PygameDisplayBackend(size=size)
    view.show_sats(feed.next_frame())
    canvas = display.begin_frame()
    view.draw(canvas, display.size())
    display.end_frame()
    display.save_png(path)
    logger.info("Wrote %dx%d SNR frame to %s", size[0], size[1], path)
    return size


async def main_async(args: argparse.Namespace) -> None:
    from satsnr.platform.display.pygame_backend import PygameDisplayBackend

    rc = _config.make_runtime_config(args=args)
    _config.set_runtime(rc)
    feed = make_feed(args)
    view = make_view(rc)
    size = view.measure(rc.app.width_px, rc.app.max_height_px)
    display = PygameDisplayBackend(size=size, create_window=True)
    if not display.has_window:
        logger.warning("No window available; rendering offscreen only")
    ctl = SnrController(
        display=display,
        view=view,
        feed=feed,
        update_interval_s=rc.app.update_interval_s,
        target_fps=rc.app.target_fps,
        process_input=display.has_window,
    )
    print("Keys: q/ESC quit")
    await ctl.run(duration_s=getattr(args, "duration", None))


async def _main_headless_async(args: argparse.Namespace) -> None:
    """Lightweight headless runner for CI and tests.

    Drives the feed and redraw loop against the offscreen pygame surface
    briefly (``--duration``, default 0.5 s) without opening a window.
    """
    import os

    os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
    from satsnr.platform.display.pygame_backend import PygameDisplayBackend

    rc = _config.make_runtime_config(args=args)
    _config.set_runtime(rc)
    view = make_view(rc)
    display = PygameDisplayBackend(
        size=view.measure(rc.app.width_px, rc.app.max_height_px)
    )
    ctl = SnrController(
        display=display,
        view=view,
        feed=make_feed(args),
        update_interval_s=rc.app.update_interval_s,
        target_fps=rc.app.target_fps,
    )
    duration = getattr(args, "duration", None)
    await ctl.run(duration_s=0.5 if duration is None else float(duration))


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="satsnr", description="Satellite signal-to-noise bar chart viewer"
    )
    p.add_argument(
        "--snapshots",
        type=str,
        default=None,
        help="JSON file of recorded satellite frames; synthetic data if omitted",
    )
    p.add_argument(
        "--systems",
        nargs="+",
        choices=sorted(_SYSTEM_NAMES),
        default=None,
        help="Systems for synthetic data (default: gps)",
    )
    p.add_argument("--seed", type=int, default=0, help="Synthetic data seed")
    p.add_argument("--width", type=int, default=None, help="View width in px")
    p.add_argument(
        "--max-height",
        dest="max_height",
        type=int,
        default=None,
        help="Upper bound for the view height in px",
    )
    p.add_argument(
        "--stroke-px",
        dest="stroke_px",
        type=int,
        default=None,
        help="Grid line width in px",
    )
    p.add_argument("--fps", type=float, default=None, help="Frame rate limit")
    p.add_argument(
        "--interval",
        type=float,
        default=None,
        help="Seconds between satellite updates",
    )
    p.add_argument(
        "--duration",
        type=float,
        default=None,
        help="Stop after this many seconds (default: run until closed)",
    )
    p.add_argument(
        "--png",
        type=str,
        default=None,
        help="Render a single frame to this PNG path and exit",
    )
    p.add_argument(
        "--headless",
        dest="headless",
        action="store_true",
        help="Run without GUI (lightweight mode suitable for CI/tests)",
    )
    p.add_argument(
        "--log-level",
        dest="log_level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )
    p.add_argument(
        "--version",
        action="store_true",
        help=f"Print version ({__version__}) and exit",
    )
    return p.parse_args(argv)
