"""Logging helpers for the command-line front end."""

from __future__ import annotations

import logging


def parse_level(name: str, default: int = logging.WARNING) -> int:
    """Map a level name such as ``"debug"`` to its numeric value."""
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else default


def configure_logging(level: int = logging.WARNING) -> None:
    """Configure stderr logging if no handlers are present."""
    root = logging.getLogger()
    if root.handlers:
        root.setLevel(level)
        return
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
