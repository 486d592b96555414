from __future__ import annotations

from pathlib import Path
from typing import Tuple

import pytest


class FakeCanvas:
    """Records drawing calls in order for assertions."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, tuple, dict]] = []

    def clear(self, color: Tuple[int, int, int, int]) -> None:
        self.calls.append(("clear", (color,), {}))

    def line(
        self,
        p0: Tuple[int, int],
        p1: Tuple[int, int],
        width: int = 1,
        color=(255, 255, 255, 255),
    ) -> None:
        self.calls.append(("line", (p0, p1), {"width": width, "color": color}))

    def rect(
        self,
        p0: Tuple[int, int],
        p1: Tuple[int, int],
        color=(255, 255, 255, 255),
    ) -> None:
        self.calls.append(("rect", (p0, p1), {"color": color}))

    def of(self, kind: str) -> list[tuple[str, tuple, dict]]:
        return [c for c in self.calls if c[0] == kind]


class FakeDisplay:
    def __init__(self, size: Tuple[int, int] = (322, 100)) -> None:
        self._size = size
        self.canvas = FakeCanvas()
        self.frames = 0

    def size(self) -> Tuple[int, int]:
        return self._size

    def begin_frame(self) -> FakeCanvas:
        self.canvas = FakeCanvas()
        return self.canvas

    def end_frame(self) -> None:
        self.frames += 1

    def save_png(self, path: str) -> None:  # pragma: no cover
        raise NotImplementedError


@pytest.fixture
def fixtures_dir() -> Path:
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def canvas() -> FakeCanvas:
    return FakeCanvas()


@pytest.fixture
def fake_display() -> FakeDisplay:
    return FakeDisplay()
