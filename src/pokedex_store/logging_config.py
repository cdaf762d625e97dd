"""Process-level logging setup for the CLI entry points and the API."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str | int = "INFO") -> None:
    """Route the ``pokedex_store`` loggers to stderr at *level*.

    Safe to call more than once; the handler is installed only the first time.
    """
    logger = logging.getLogger("pokedex_store")
    logger.setLevel(level.upper() if isinstance(level, str) else level)

    if not any(getattr(h, "_pokedex_store", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._pokedex_store = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
