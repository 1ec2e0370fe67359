"""Runtime configuration helpers for engines."""
from __future__ import annotations

import logging
import os
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_DISPOSE_TIMEOUT_S = 2.0
DEFAULT_MARKER_MARGIN_PX = 44.0


def _get_env(name: str, default: Optional[str] = None) -> Optional[str]:
    return os.getenv(name, default)


def _get_positive_float(name: str, default: float) -> float:
    raw = _get_env(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("ignoring non-numeric %s=%r, using %s", name, raw, default)
        return default
    if value <= 0:
        logger.warning("ignoring non-positive %s=%r, using %s", name, raw, default)
        return default
    return value


def get_env() -> Optional[str]:
    return _get_env("ENV") or _get_env("APP_ENV")


def _is_dev_env() -> bool:
    env = (get_env() or "dev").lower()
    return env in {"dev", "local"}


def get_annotations_dispose_timeout() -> float:
    """Seconds an overlay stays mounted after its animation is due."""
    return _get_positive_float("ANNOTATIONS_DISPOSE_TIMEOUT_S", DEFAULT_DISPOSE_TIMEOUT_S)


def get_annotations_marker_margin() -> float:
    """Pixel distance under which progress-bar markers are merged."""
    return _get_positive_float("ANNOTATIONS_MARKER_MARGIN_PX", DEFAULT_MARKER_MARGIN_PX)


def annotations_diagnostics_enabled() -> bool:
    """Return skipped-action diagnostics in snapshots. On by default in dev."""
    raw = _get_env("ANNOTATIONS_DIAGNOSTICS")
    if raw is None:
        return _is_dev_env()
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def config_snapshot() -> dict:
    """Return a snapshot of relevant env-driven config."""
    return {
        "env": get_env(),
        "annotations_dispose_timeout_s": get_annotations_dispose_timeout(),
        "annotations_marker_margin_px": get_annotations_marker_margin(),
        "annotations_diagnostics": annotations_diagnostics_enabled(),
    }
