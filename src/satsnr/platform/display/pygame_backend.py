"""Pygame-based DisplayBackend with headless (offscreen) support.

This module implements the Canvas and DisplayBackend protocols using pygame.
It's suitable for deterministic, headless tests by setting the environment
variable SDL_VIDEODRIVER=dummy before importing pygame.

Example:
    import os
    os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
    from satsnr.platform.display.pygame_backend import PygameDisplayBackend

    backend = PygameDisplayBackend(size=(480, 72))
    canvas = backend.begin_frame()
    canvas.clear((0, 0, 0, 255))
    canvas.rect((10, 20), (16, 72), color=(51, 181, 229, 255))
    backend.end_frame()
    backend.save_png("/tmp/snr.png")
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Tuple

from satsnr.render.canvas import Canvas, Color, DisplayBackend

logger = logging.getLogger(__name__)

pg: Any = None
try:  # pragma: no cover - import guard for environments without SDL
    import pygame as _pg

    pg = _pg
except ImportError:  # pragma: no cover
    pg = None


def _pygame_color(c: Color) -> Tuple[int, int, int, int]:
    r, g, b, a = c
    return int(r), int(g), int(b), int(a)


class _PygameCanvas(Canvas):
    def __init__(self, surface: Any) -> None:
        self._surface = surface

    def clear(self, color: Color) -> None:
        self._surface.fill(_pygame_color(color))

    def line(
        self,
        p0: Tuple[int, int],
        p1: Tuple[int, int],
        width: int = 1,
        color: Color = (255, 255, 255, 255),
    ) -> None:
        pg.draw.line(self._surface, _pygame_color(color), p0, p1, width)

    def rect(
        self,
        p0: Tuple[int, int],
        p1: Tuple[int, int],
        color: Color = (255, 255, 255, 255),
    ) -> None:
        x0, y0 = min(p0[0], p1[0]), min(p0[1], p1[1])
        w = abs(p1[0] - p0[0])
        h = abs(p1[1] - p0[1])
        if w <= 0 or h <= 0:
            return
        pg.draw.rect(self._surface, _pygame_color(color), pg.Rect(x0, y0, w, h), 0)


class PygameDisplayBackend(DisplayBackend):
    """Pygame implementation of DisplayBackend with offscreen surface.

    Automatically initializes pygame with an offscreen display if the
    environment variable SDL_VIDEODRIVER is set to "dummy". Otherwise, a
    regular window may be created depending on the platform.
    """

    def __init__(
        self,
        size: Tuple[int, int] = (480, 72),
        *,
        create_window: bool = False,
        title: str = "satsnr",
    ) -> None:
        local_pg = pg
        if local_pg is None:
            raise RuntimeError(
                "pygame is not available. "
                "Ensure it is installed and that SDL is configured."
            )

        if os.environ.get("SDL_VIDEODRIVER") == "dummy":
            os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

        if not local_pg.get_init():
            local_pg.init()

        self._width, self._height = int(size[0]), int(size[1])
        self._window_surface = None
        if create_window and os.environ.get("SDL_VIDEODRIVER") != "dummy":
            try:
                self._window_surface = local_pg.display.set_mode(
                    (self._width, self._height)
                )
                local_pg.display.set_caption(title)
            except local_pg.error as e:
                logger.warning(
                    "Window creation failed (%s); falling back to offscreen. "
                    "Check SDL_VIDEODRIVER and display permissions.",
                    e,
                )
                self._window_surface = None

        # Offscreen surface with per-pixel alpha; the window only gets blits
        self._surface = local_pg.Surface(
            (self._width, self._height), flags=local_pg.SRCALPHA
        )

    @property
    def has_window(self) -> bool:
        return self._window_surface is not None

    def size(self) -> Tuple[int, int]:
        return (self._width, self._height)

    def begin_frame(self) -> Canvas:
        return _PygameCanvas(self._surface)

    def end_frame(self) -> None:
        local_pg = pg
        if self._window_surface is not None and local_pg is not None:
            self._window_surface.blit(self._surface, (0, 0))
            local_pg.display.flip()
        return None

    def save_png(self, path: str) -> None:
        local_pg = pg
        if local_pg is None:  # pragma: no cover - should not happen at runtime
            raise RuntimeError("pygame is not available")
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        local_pg.image.save(self._surface, path)

    def get_at(self, pos: Tuple[int, int]) -> Color:
        """Return the RGBA color of the offscreen pixel at *pos*."""
        c = self._surface.get_at((int(pos[0]), int(pos[1])))
        return (int(c.r), int(c.g), int(c.b), int(c.a))
