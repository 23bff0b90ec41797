"""Logging setup: one ``harbormaster`` logger tree, verbosity chosen by the CLI."""

from __future__ import annotations

import logging
import sys

_ROOT = "harbormaster"


def setup_logging(verbose: bool = False) -> None:
    """Configure the ``harbormaster`` logger: DEBUG if *verbose*, else WARNING."""
    logger = logging.getLogger(_ROOT)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
        logger.addHandler(handler)
    logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    """Return the child logger ``harbormaster.<name>``."""
    return logging.getLogger(f"{_ROOT}.{name}")
