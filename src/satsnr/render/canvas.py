"""Framework-agnostic Canvas and DisplayBackend protocols.

Defines the minimal drawing primitives the SNR view needs and a display
backend contract so different frameworks (pygame, a test recorder, etc.)
can be plugged in.
"""

from __future__ import annotations

from typing import Protocol, Tuple

Color = Tuple[int, int, int, int]


class Canvas(Protocol):
    def clear(self, color: Color) -> None:
        ...

    def line(
        self,
        p0: Tuple[int, int],
        p1: Tuple[int, int],
        width: int = 1,
        color: Color = (255, 255, 255, 255),
    ) -> None:
        ...

    def rect(
        self,
        p0: Tuple[int, int],
        p1: Tuple[int, int],
        color: Color = (255, 255, 255, 255),
    ) -> None:
        """Solid-filled rectangle spanning corners *p0* (left, top) and
        *p1* (right, bottom)."""
        ...


class DisplayBackend(Protocol):
    def size(self) -> Tuple[int, int]:
        ...

    def begin_frame(self) -> Canvas:
        ...

    def end_frame(self) -> None:
        ...

    def save_png(self, path: str) -> None:
        ...
