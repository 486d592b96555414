"""Satellite feeds for the SNR view."""

from .snapshot_source import SnapshotSource, SyntheticConstellation, load_snapshots_json

__all__ = ["SnapshotSource", "SyntheticConstellation", "load_snapshots_json"]
