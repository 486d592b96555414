"""NMEA satellite ID ranges and their mapping onto SNR grid columns.

Satellite IDs encode the constellation through fixed, inclusive sub-ranges:

==========  =====  ===========================================================
IDs         Width  System
==========  =====  ===========================================================
1–32        32     GPS
33–54       22     SBAS (EGNOS, WAAS, SDCM, GAGAN, MSAS)
55–64       10     SBAS extension (not assigned yet)
65–88       24     GLONASS
89–96       8      GLONASS extension
97–192      96     unassigned
193–195     3      QZSS
196–200     5      QZSS extension
201–235     35     BeiDou
==========  =====  ===========================================================

Only ranges that actually carry satellites are given columns in the SNR
grid. An ID seen in an extension range also switches on its base range so
the two always render side by side. ``VisibleRanges`` holds the switched-on
set for one render pass and maps IDs to 1-based column positions.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Iterable, Iterator

logger = logging.getLogger(__name__)

MAX_NMEA_ID = 235


class NmeaRange(Enum):
    GPS = (1, 32)
    SBAS = (33, 54)
    SBAS_EXT = (55, 64)
    GLONASS = (65, 88)
    GLONASS_EXT = (89, 96)
    UNASSIGNED = (97, 192)
    QZSS = (193, 195)
    QZSS_EXT = (196, 200)
    BEIDOU = (201, MAX_NMEA_ID)

    @property
    def first(self) -> int:
        return int(self.value[0])

    @property
    def last(self) -> int:
        return int(self.value[1])

    @property
    def width(self) -> int:
        return self.last - self.first + 1

    @property
    def base(self) -> "NmeaRange | None":
        """Base range an extension is coupled to (None for base ranges)."""
        return _BASE_OF.get(self)

    @property
    def extension(self) -> "NmeaRange | None":
        """Extension range rendered adjacent to this one, if any."""
        return _EXTENSION_OF.get(self)


_BASE_OF = {
    NmeaRange.SBAS_EXT: NmeaRange.SBAS,
    NmeaRange.GLONASS_EXT: NmeaRange.GLONASS,
    NmeaRange.QZSS_EXT: NmeaRange.QZSS,
}
_EXTENSION_OF = {base: ext for ext, base in _BASE_OF.items()}

BASE_RANGES: tuple[NmeaRange, ...] = tuple(r for r in NmeaRange if r not in _BASE_OF)


class LineStyle(Enum):
    TICK = "tick"
    STRONG = "strong"


def classify(nmea_id: int) -> NmeaRange | None:
    """Return the range owning *nmea_id*, or None when outside 1–235."""
    if nmea_id < 1 or nmea_id > MAX_NMEA_ID:
        return None
    for r in NmeaRange:
        if nmea_id <= r.last:
            return r
    return None  # pragma: no cover - table covers 1..MAX_NMEA_ID


def _prn_of(sat: object) -> int | None:
    try:
        return int(getattr(sat, "prn"))
    except (AttributeError, TypeError, ValueError, OverflowError):
        logger.warning("Skipping satellite record without usable NMEA ID: %r", sat)
        return None


class VisibleRanges:
    """Set of NMEA ranges that get columns in the SNR grid.

    Enabling an extension range always enables its base range as well, so
    an extension can never be visible on its own.
    """

    __slots__ = ("_on",)

    def __init__(self, ranges: Iterable[NmeaRange] = ()) -> None:
        self._on: set[NmeaRange] = set()
        for r in ranges:
            self.enable(r)

    @classmethod
    def from_satellites(cls, sats: Iterable[object] | None) -> "VisibleRanges":
        """Scan *sats* once and switch on every range that carries a satellite.

        IDs below 1 or above ``MAX_NMEA_ID`` are logged and ignored. When no
        range ends up visible, GPS is shown so the grid is never empty.
        """
        vis = cls()
        for sat in sats or ():
            prn = _prn_of(sat)
            if prn is None:
                continue
            r = classify(prn)
            if r is None:
                if prn < 1:
                    logger.error("Got satellite with invalid NMEA ID %d", prn)
                else:
                    logger.warning(
                        "Got satellite with NMEA ID %d, possibly unsupported system",
                        prn,
                    )
                continue
            if r is NmeaRange.UNASSIGNED:
                logger.warning(
                    "Got satellite with NMEA ID %d (from the unassigned %d-%d range)",
                    prn,
                    r.first,
                    r.last,
                )
            vis.enable(r)
        # Extensions always pull in their base, so checking bases is enough
        if not any(r in vis for r in BASE_RANGES):
            vis.enable(NmeaRange.GPS)
        return vis

    def enable(self, r: NmeaRange) -> None:
        self._on.add(r)
        if r.base is not None:
            self._on.add(r.base)

    def __contains__(self, r: object) -> bool:
        return r in self._on

    def __iter__(self) -> Iterator[NmeaRange]:
        return (r for r in NmeaRange if r in self._on)

    def __len__(self) -> int:
        return len(self._on)

    def __repr__(self) -> str:  # pragma: no cover
        return "VisibleRanges(" + ", ".join(r.name for r in self) + ")"

    def num_bars(self) -> int:
        """Number of grid columns (32 for GPS only, 56 for GPS+GLONASS)."""
        return sum(r.width for r in self._on)

    def grid_pos(self, nmea_id: int) -> int | None:
        """Return the 1-based grid column for *nmea_id*.

        Hidden ranges below the ID are skipped. Returns None when the ID is
        out of bounds or its own range is hidden.
        """
        r = classify(nmea_id)
        if r is None or r not in self._on:
            return None
        skip = sum(h.width for h in NmeaRange if h.last < nmea_id and h not in self._on)
        return nmea_id - skip

    def line_style(self, nmea_id: int) -> LineStyle | None:
        """Grid line drawn on the right edge of the column for *nmea_id*.

        Range ends are strong, except where a visible extension continues
        the range; every 4th ID gets a tick. Hidden ranges get no lines.
        """
        r = classify(nmea_id)
        if r is None or r not in self._on:
            return None
        if nmea_id == r.last:
            if r.extension is not None and r.extension in self._on:
                return LineStyle.TICK
            return LineStyle.STRONG
        if nmea_id % 4 == 0:
            return LineStyle.TICK
        return None


__all__ = [
    "MAX_NMEA_ID",
    "NmeaRange",
    "BASE_RANGES",
    "LineStyle",
    "classify",
    "VisibleRanges",
]
