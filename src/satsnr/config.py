"""Runtime configuration helpers.

Small aggregator that centralizes defaults from settings.values and
provides a factory to build the RuntimeConfig used by the application
and CLI. CLI args (when provided) override the packaged values for the
current session only; nothing is written back.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from .settings.values import APP_CONFIG, SNR_VIEW_CONFIG, THEME

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ViewData:
    grid_stroke_px: int = int(SNR_VIEW_CONFIG.get("grid_stroke_px", 2))
    height_ratio: float = float(SNR_VIEW_CONFIG.get("height_ratio", 0.15))
    max_snr: float = float(SNR_VIEW_CONFIG.get("max_snr", 60.0))


@dataclass(slots=True)
class AppData:
    width_px: int = int(APP_CONFIG.get("width_px", 480))
    max_height_px: int = int(APP_CONFIG.get("max_height_px", 800))
    target_fps: float = float(APP_CONFIG.get("target_fps", 10.0))
    update_interval_s: float = float(APP_CONFIG.get("update_interval_s", 1.0))


@dataclass(slots=True)
class RuntimeConfig:
    view: ViewData = field(default_factory=ViewData)
    app: AppData = field(default_factory=AppData)
    theme: dict[str, Any] = field(default_factory=lambda: dict(THEME))


def _override(obj: object, attr: str, args: object, name: str, cast: Any) -> None:
    value = getattr(args, name, None)
    if value is None:
        return
    try:
        setattr(obj, attr, cast(value))
    except (TypeError, ValueError):
        logger.warning("Ignoring invalid --%s value %r", name.replace("_", "-"), value)


def make_runtime_config(*, args: Optional[object] = None) -> RuntimeConfig:
    """Build a RuntimeConfig from packaged values, applying optional CLI
    overrides passed in *args* (argparse.Namespace-like).

    Only the commonly overridden fields are merged: width, max_height,
    fps, interval and grid stroke width.
    """
    rc = RuntimeConfig()
    if args is not None:
        _override(rc.app, "width_px", args, "width", int)
        _override(rc.app, "max_height_px", args, "max_height", int)
        _override(rc.app, "target_fps", args, "fps", float)
        _override(rc.app, "update_interval_s", args, "interval", float)
        _override(rc.view, "grid_stroke_px", args, "stroke_px", int)
    if rc.app.target_fps <= 0:
        logger.warning("target_fps must be > 0, using 10")
        rc.app.target_fps = 10.0
    return rc


_RUNTIME: RuntimeConfig | None = None


def get_runtime() -> RuntimeConfig:
    """Return the current runtime config, creating a default if needed."""
    global _RUNTIME
    if _RUNTIME is None:
        _RUNTIME = make_runtime_config()
    return _RUNTIME


def set_runtime(rc: RuntimeConfig) -> None:
    global _RUNTIME
    _RUNTIME = rc
