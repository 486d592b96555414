"""
SNR bar-chart view.

Draws one bar per visible satellite over a calibrated grid. Columns are
assigned by NMEA ID (see ``satsnr.core.ranges``); only ID ranges that carry
satellites in the current update get columns, so a GPS-only receiver shows
32 columns and a GPS/GLONASS receiver 56.

Coordinates and units
---------------------
- size_px: (width, height) of the area the view owns, origin top-left
- Bar height is SNR / max_snr of the usable height, clamped at max_snr
- Colors are RGBA tuples (0..255)

Refresh contract
----------------
Callers hand over each new satellite collection with ``show_sats``. The
view keeps a reference (no copy) and marks itself dirty; the host loop
redraws dirty views at its own pace, so several updates between two
frames cost a single redraw.
"""

from __future__ import annotations

import logging
from math import isfinite
from typing import Callable, Iterable, Iterator, Optional, Tuple

from satsnr import config as _config
from satsnr.core.ranges import MAX_NMEA_ID, LineStyle, VisibleRanges
from satsnr.render.canvas import Canvas, Color
from satsnr.settings.values import THEME

logger = logging.getLogger(__name__)

_SNR_THEME = (
    THEME.get("colors", {}).get("snr_view", {}) if isinstance(THEME, dict) else {}
)


def _col(v: object, fb: tuple[int, int, int, int]) -> Color:
    if (
        isinstance(v, (list, tuple))
        and len(v) == 4
        and all(isinstance(c, (int, float)) for c in v)
    ):
        return (int(v[0]), int(v[1]), int(v[2]), int(v[3]))
    return fb


ColorBG: Color = _col(_SNR_THEME.get("background"), (0, 0, 0, 255))
ColorActive: Color = _col(_SNR_THEME.get("active"), (51, 181, 229, 255))
ColorInactive: Color = _col(_SNR_THEME.get("inactive"), (255, 68, 68, 255))
ColorGrid: Color = _col(_SNR_THEME.get("grid"), (77, 77, 77, 255))
ColorGridStrong: Color = _col(_SNR_THEME.get("grid_strong"), (255, 255, 255, 255))


class SnrView:
    """Signal-to-noise bar chart for the satellites currently in view.

    Parameters
    ----------
    grid_stroke_px: Width of grid lines; bars are inset by it.
    height_ratio: Preferred height as a fraction of the width (see
        :meth:`measure`).
    max_snr: SNR mapped to a full-height bar; higher values are clamped.
    on_invalidate: Optional hook called whenever the view needs a redraw,
        e.g. to wake the host loop.
    """

    def __init__(
        self,
        *,
        grid_stroke_px: Optional[int] = None,
        height_ratio: Optional[float] = None,
        max_snr: Optional[float] = None,
        active_color: Color = ColorActive,
        inactive_color: Color = ColorInactive,
        grid_color: Color = ColorGrid,
        grid_strong_color: Color = ColorGridStrong,
        background: Optional[Color] = None,
        on_invalidate: Optional[Callable[[], None]] = None,
    ) -> None:
        defaults = _config.get_runtime().view
        if grid_stroke_px is None:
            grid_stroke_px = defaults.grid_stroke_px
        self.grid_stroke_px = max(0, int(grid_stroke_px))
        self.height_ratio = float(
            height_ratio if height_ratio is not None else defaults.height_ratio
        )
        self.max_snr = float(max_snr if max_snr is not None else defaults.max_snr)
        if self.max_snr <= 0:
            raise ValueError("max_snr must be > 0")
        self.active_color = active_color
        self.inactive_color = inactive_color
        self.grid_color = grid_color
        self.grid_strong_color = grid_strong_color
        self.background = background
        self.on_invalidate = on_invalidate

        self._sats: Optional[Iterable[object]] = None
        self._visible = VisibleRanges.from_satellites(None)
        self._dirty = True

    # Public API -----------------------------------------------------------
    def show_sats(self, sats: Optional[Iterable[object]]) -> None:
        """Replace the satellites shown and request a redraw.

        *sats* is kept by reference and re-read on every draw. One-shot
        iterators are materialized since each draw scans them twice.
        """
        if isinstance(sats, Iterator):
            sats = list(sats)
        self._sats = sats
        self.invalidate()

    def invalidate(self) -> None:
        self._dirty = True
        cb = self.on_invalidate
        if cb is not None:
            cb()

    @property
    def dirty(self) -> bool:
        return self._dirty

    @property
    def visible_ranges(self) -> VisibleRanges:
        """Ranges computed by the most recent draw."""
        return self._visible

    def measure(self, width: int, max_height: int) -> Tuple[int, int]:
        """Return the preferred (width, height) for the available space.

        Height follows the width by ``height_ratio`` but never exceeds
        *max_height*.
        """
        w = max(0, int(width))
        h = min(int(w * self.height_ratio), int(max_height))
        return w, max(0, h)

    def draw(self, canvas: Canvas, size_px: Tuple[int, int]) -> None:
        """Render bars, then the grid on top so no bar covers a grid line."""
        w, h = int(size_px[0]), int(size_px[1])
        self._visible = VisibleRanges.from_satellites(self._sats)
        if self.background is not None:
            canvas.clear(self.background)
        if w > self.grid_stroke_px and h > self.grid_stroke_px:
            for sat in self._sats or ():
                try:
                    prn = int(getattr(sat, "prn"))
                except (AttributeError, TypeError, ValueError, OverflowError):
                    # Already reported while scanning ranges
                    continue
                try:
                    snr = float(getattr(sat, "snr"))
                    used = bool(getattr(sat, "used_in_fix"))
                except (AttributeError, TypeError, ValueError, OverflowError):
                    logger.warning(
                        "Skipping satellite %d without usable SNR data: %r", prn, sat
                    )
                    continue
                self._draw_sat(canvas, w, h, prn, snr, used)
            self._draw_grid(canvas, w, h)
        else:
            logger.debug("SNR view too small to draw (%dx%d)", w, h)
        self._dirty = False

    # Rendering --------------------------------------------------------------
    def _draw_grid(self, canvas: Canvas, w: int, h: int) -> None:
        s = self.grid_stroke_px
        half = s // 2
        n = self._visible.num_bars()

        # left boundary
        canvas.line((half, 0), (half, h), width=s, color=self.grid_strong_color)

        # range boundaries and auxiliary lines (every 4th satellite)
        for nmea_id in range(1, MAX_NMEA_ID):
            pos = self._visible.grid_pos(nmea_id)
            if pos is None:
                continue
            style = self._visible.line_style(nmea_id)
            if style is None:
                continue
            x = half + pos * (w - s) // n
            color = (
                self.grid_strong_color if style is LineStyle.STRONG else self.grid_color
            )
            canvas.line((x, 0), (x, h), width=s, color=color)

        # right boundary
        canvas.line((w - half, h), (w - half, 0), width=s, color=self.grid_strong_color)

        # bottom line
        canvas.line((0, h - half), (w, h - half), width=s, color=self.grid_strong_color)

    def _draw_sat(
        self, canvas: Canvas, w: int, h: int, nmea_id: int, snr: float, used: bool
    ) -> None:
        pos = self._visible.grid_pos(nmea_id)
        if pos is None:
            return
        s = self.grid_stroke_px
        n = self._visible.num_bars()

        x0 = (pos - 1) * (w - s) // n + s // 2
        x1 = pos * (w - s) // n - s // 2

        y0 = h - s
        y1 = self.bar_top(snr, y0)

        canvas.rect(
            (x0, y1), (x1, h), color=self.active_color if used else self.inactive_color
        )

    def bar_top(self, snr: float, usable_h: int) -> int:
        """Top y of a bar for *snr* when *usable_h* pixels are available."""
        snr = float(snr)
        if not isfinite(snr):
            snr = self.max_snr if snr > 0 else 0.0
        level = min(max(snr, 0.0), self.max_snr) / self.max_snr
        return int(usable_h * (1.0 - level))


__all__ = ["SnrView"]
