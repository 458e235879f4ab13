"""Resolve the external market monitor from a ``module:attribute`` path."""
from __future__ import annotations

import importlib

from loguru import logger

from starsniper.engine.protocols import MarketMonitor


class MonitorUnavailable(Exception):
    pass


def load_monitor(target: str) -> MarketMonitor:
    """Import ``package.module:attribute`` and return the callable it names.

    Raises MonitorUnavailable for an empty, malformed, or unimportable target.
    """
    target = (target or "").strip()
    if not target:
        raise MonitorUnavailable(
            "No market monitor configured (set STARSNIPER_MONITOR=package.module:callable)"
        )

    modname, sep, attr = target.partition(":")
    if not sep or not modname or not attr:
        raise MonitorUnavailable(f"Monitor must look like package.module:callable, got {target!r}")

    try:
        module = importlib.import_module(modname)
    except ImportError as e:
        raise MonitorUnavailable(f"Could not import monitor module {modname!r}: {e}") from e

    found = module
    for part in attr.split("."):
        found = getattr(found, part, None)
        if found is None:
            raise MonitorUnavailable(f"{modname!r} has no attribute {attr!r}")

    if not isinstance(found, MarketMonitor):
        raise MonitorUnavailable(f"{target!r} is not callable")

    logger.info("Using market monitor: {}", target)
    return found
