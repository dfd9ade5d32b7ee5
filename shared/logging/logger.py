"""Logger lookup shared by every dashboard module."""

from __future__ import annotations

import logging

_configured = False


def get_logger(name: str, fallback: bool = True) -> logging.Logger:
    """Return ``name``'s logger, propagating to the root JSON handler.

    When the JSON handler was never installed (one-off scripts, REPL) and
    ``fallback`` is set, a plain-text ``basicConfig`` is applied once.
    """
    global _configured

    if fallback and not _configured:
        logging.basicConfig(
            level=logging.INFO,
            format="%(asctime)s %(levelname)s %(name)s %(message)s",
        )
        _configured = True

    logger = logging.getLogger(name)
    logger.propagate = True
    return logger


def mark_configured():
    """Record that configure_logging installed the JSON handler."""
    global _configured
    _configured = True
