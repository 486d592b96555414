"""
Satellite feeds for driving the SNR view without a receiver.

Two feeds share the same ``next_frame()`` interface:

- ``SnapshotSource`` replays recorded frames from a JSON file. The file is
  either a list of frames or ``{"frames": [...]}``; each frame is a list of
  ``{"prn": int, "snr": float, "used_in_fix": bool}`` objects.
- ``SyntheticConstellation`` generates a deterministic, slowly varying set
  of satellites across the configured systems (seeded RNG).

Entries with missing or invalid fields are skipped with a warning rather
than failing the whole file.
"""
from __future__ import annotations

import json
import logging
import random
from pathlib import Path
from typing import Any, Dict, List, Protocol, Sequence

from pydantic import ValidationError

from satsnr.core.models import Satellite
from satsnr.core.ranges import NmeaRange

logger = logging.getLogger(__name__)

Frame = List[Satellite]


class SatelliteFeed(Protocol):
    def next_frame(self) -> Frame:
        ...


def _parse_frame(raw: object, index: int) -> Frame:
    if not isinstance(raw, list):
        logger.warning("Skipping frame %d: expected a list, got %s", index, type(raw))
        return []
    out: Frame = []
    for entry in raw:
        try:
            out.append(Satellite.model_validate(entry))
        except ValidationError as e:
            logger.warning(
                "Skipping invalid satellite in frame %d: %s", index, e.errors()[0]
            )
    return out


def load_snapshots_json(path: str | Path) -> List[Frame]:
    """Load recorded satellite frames from *path*.

    Raises ``ValueError`` when the document is not a list of frames.
    """
    p = Path(path)
    with p.open("r", encoding="utf-8") as f:
        data: Any = json.load(f)
    if isinstance(data, dict):
        data = data.get("frames")
    if not isinstance(data, list):
        raise ValueError(f"{p}: expected a list of frames or {{'frames': [...]}}")
    frames = [_parse_frame(raw, i) for i, raw in enumerate(data)]
    logger.info("Loaded %d satellite frames from %s", len(frames), p)
    return frames


class SnapshotSource:
    """Replay a fixed sequence of frames, optionally looping."""

    def __init__(self, frames: Sequence[Frame], *, loop: bool = True) -> None:
        self._frames = list(frames)
        self._loop = bool(loop)
        self._idx = 0

    @classmethod
    def from_file(cls, path: str | Path, *, loop: bool = True) -> "SnapshotSource":
        return cls(load_snapshots_json(path), loop=loop)

    def __len__(self) -> int:
        return len(self._frames)

    @property
    def exhausted(self) -> bool:
        return not self._loop and self._idx >= len(self._frames)

    def next_frame(self) -> Frame:
        """Return the next frame; an empty frame once exhausted."""
        if not self._frames:
            return []
        if self._idx >= len(self._frames):
            if not self._loop:
                return []
            self._idx = 0
        frame = self._frames[self._idx]
        self._idx += 1
        return frame


# Satellites per system the generator keeps in view at once
_DEFAULT_IN_VIEW: Dict[NmeaRange, int] = {
    NmeaRange.GPS: 10,
    NmeaRange.SBAS: 2,
    NmeaRange.GLONASS: 7,
    NmeaRange.QZSS: 1,
    NmeaRange.BEIDOU: 8,
}


class SyntheticConstellation:
    """Deterministic pseudo-random satellites for demos and tests.

    Each system keeps a fixed set of IDs in view; SNR values take a
    bounded random walk between frames and the strongest satellites are
    marked as used in the fix.

    Parameters
    ----------
    systems: Ranges to populate. Defaults to GPS + GLONASS.
    seed: RNG seed; the same seed yields the same frame sequence.
    max_used: Upper bound on satellites flagged as used in fix.
    """

    def __init__(
        self,
        systems: Sequence[NmeaRange] = (NmeaRange.GPS, NmeaRange.GLONASS),
        *,
        seed: int = 0,
        max_used: int = 12,
    ) -> None:
        self._rng = random.Random(seed)
        self._max_used = max(0, int(max_used))
        self._snr: Dict[int, float] = {}
        for r in systems:
            count = min(_DEFAULT_IN_VIEW.get(r, 4), r.width)
            for prn in sorted(self._rng.sample(range(r.first, r.last + 1), count)):
                self._snr[prn] = self._rng.uniform(10.0, 50.0)

    @property
    def prns(self) -> List[int]:
        return sorted(self._snr)

    def next_frame(self) -> Frame:
        for prn, snr in self._snr.items():
            self._snr[prn] = min(55.0, max(0.0, snr + self._rng.uniform(-3.0, 3.0)))
        strongest = sorted(self._snr, key=lambda p: self._snr[p], reverse=True)
        used = {p for p in strongest[: self._max_used] if self._snr[p] >= 20.0}
        return [
            Satellite(prn=prn, snr=round(snr, 1), used_in_fix=prn in used)
            for prn, snr in sorted(self._snr.items())
        ]


__all__ = [
    "Frame",
    "SatelliteFeed",
    "load_snapshots_json",
    "SnapshotSource",
    "SyntheticConstellation",
]
