"""Centralized values loaded from YAML.

This module provides a single place to access theme colors and the
numeric constants used by the SNR view and the host application. The
master source is ``values.yml`` in this package.

On import we attempt to load and parse the YAML. Failures fall back to
hard-coded defaults so the application can still run; the fallbacks
mirror the shipped YAML.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict

import yaml

logger = logging.getLogger(__name__)

_PKG_DIR = Path(__file__).parent
_YAML_PATH = _PKG_DIR / "values.yml"

# --- Fallback literals ---------------------------------------------------
_FALLBACK_THEME = {
    "colors": {
        "snr_view": {
            "background": [0, 0, 0, 255],
            "active": [51, 181, 229, 255],
            "inactive": [255, 68, 68, 255],
            "grid": [77, 77, 77, 255],
            "grid_strong": [255, 255, 255, 255],
        },
    }
}
_FALLBACK_SNR_VIEW = {
    "grid_stroke_px": 2,
    "height_ratio": 0.15,
    "max_snr": 60.0,
}
_FALLBACK_APP = {
    "width_px": 480,
    "max_height_px": 800,
    "target_fps": 10.0,
    "update_interval_s": 1.0,
}


def _load_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    try:
        with path.open("r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Failed to load %s, using defaults: %s", path, e)
        return {}
    if not isinstance(raw, dict):
        logger.warning("Ignoring %s: top level is not a mapping", path)
        return {}
    return raw


def _merge_numeric(dst: Dict[str, Any], src: object) -> None:
    """Copy numeric entries of *src* over keys already present in *dst*."""
    if not isinstance(src, dict):
        return
    for k, v in src.items():
        if k in dst and isinstance(v, (int, float)) and not isinstance(v, bool):
            dst[k] = type(dst[k])(v)


# --- Load YAML -----------------------------------------------------------
_theme: Dict[str, Any] = {
    "colors": {k: dict(v) for k, v in _FALLBACK_THEME["colors"].items()}
}
_snr_view_cfg: Dict[str, Any] = dict(_FALLBACK_SNR_VIEW)
_app_cfg: Dict[str, Any] = dict(_FALLBACK_APP)

_raw = _load_yaml(_YAML_PATH)
_theme_raw = _raw.get("theme")
if isinstance(_theme_raw, dict) and isinstance(_theme_raw.get("colors"), dict):
    for section, colors in _theme_raw["colors"].items():
        if isinstance(colors, dict):
            _theme["colors"].setdefault(section, {}).update(colors)
_merge_numeric(_snr_view_cfg, _raw.get("snr_view"))
_merge_numeric(_app_cfg, _raw.get("app"))

# --- Public accessors ----------------------------------------------------
THEME: Dict[str, Any] = dict(_theme)
SNR_VIEW_CONFIG: Dict[str, Any] = dict(_snr_view_cfg)
APP_CONFIG: Dict[str, Any] = dict(_app_cfg)

__all__ = [
    "THEME",
    "SNR_VIEW_CONFIG",
    "APP_CONFIG",
]
