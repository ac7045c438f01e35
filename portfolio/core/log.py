"""Logging setup for the API process."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """
    Configure the root logger once for the process.

    Module loggers (``logging.getLogger(__name__)``) propagate here.
    """
    root = logging.getLogger()
    root.setLevel(level.upper())

    if any(getattr(h, "_portfolio", False) for h in root.handlers):
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._portfolio = True  # type: ignore[attr-defined]
    root.addHandler(handler)
