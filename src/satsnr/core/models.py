from __future__ import annotations

from typing import Protocol, runtime_checkable

from pydantic import BaseModel, Field, field_validator


@runtime_checkable
class SatelliteLike(Protocol):
    """Anything the SNR view can draw: identifier, SNR and fix usage."""

    prn: int
    snr: float
    used_in_fix: bool


class Satellite(BaseModel):
    """
    Satellite as reported by the location subsystem for one update.
    The identifier is not range-checked here; the view decides what to draw.
    """

    prn: int = Field(..., description="NMEA satellite ID")
    snr: float = Field(0.0, description="Signal-to-noise ratio (dB-Hz)")
    used_in_fix: bool = Field(
        False, description="Whether the satellite contributes to the fix"
    )

    @field_validator("snr", mode="before")
    @classmethod
    def _coerce_snr(cls, v: object) -> float:
        if v is None:
            return 0.0
        return float(v)  # type: ignore[arg-type]

    def to_json(self) -> str:
        return self.model_dump_json(indent=2)

    def __repr__(self) -> str:  # pragma: no cover
        mark = "*" if self.used_in_fix else ""
        return f"Satellite({self.prn}{mark} snr={self.snr:.1f})"


__all__ = ["SatelliteLike", "Satellite"]
