"""Logger factory shared by the library modules."""

from __future__ import annotations

import logging
import os
import sys

ROOT_LOGGER = "scale_scheduler"
LOG_FORMAT = "[%(levelname)s] %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger under the package root, configuring the root once."""
    root = logging.getLogger(ROOT_LOGGER)
    if not root.handlers:
        level = os.getenv("SCALE_SCHEDULER_LOG_LEVEL", "WARNING").upper()
        root.setLevel(getattr(logging, level, logging.WARNING))
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
        root.propagate = False
    if not name or name == ROOT_LOGGER:
        return root
    if not name.startswith(ROOT_LOGGER + "."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)


def set_level(level: str) -> None:
    """Change the package log level at runtime (used by the CLI)."""
    get_logger().setLevel(getattr(logging, level.upper(), logging.INFO))
