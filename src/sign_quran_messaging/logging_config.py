"""Logging configuration."""
from __future__ import annotations

import logging

from sign_quran_messaging.api.middleware.correlation_id import CorrelationIdFilter


def setup_logging(level: str | int = logging.INFO) -> None:
    """Configure root logging with a console handler that carries the request id."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    handler = logging.StreamHandler()
    handler.addFilter(CorrelationIdFilter())
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s %(levelname)s [%(name)s] [%(request_id)s] %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    root.addHandler(handler)
