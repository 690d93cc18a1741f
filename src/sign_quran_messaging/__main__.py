"""Entrypoint: python -m sign_quran_messaging"""
from __future__ import annotations

import uvicorn

from sign_quran_messaging.config import settings
from sign_quran_messaging.logging_config import setup_logging


def main() -> None:
    setup_logging(settings.LOG_LEVEL)
    uvicorn.run(
        "sign_quran_messaging.app:create_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
        log_level=settings.LOG_LEVEL.lower(),
        log_config=None,
    )


if __name__ == "__main__":
    main()
