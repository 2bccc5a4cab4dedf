"""Entrypoint: python -m casting_messaging"""
from __future__ import annotations

import uvicorn

from casting_messaging.config import settings
from casting_messaging.logging_config import configure_logging


def main() -> None:
    configure_logging(settings.LOG_LEVEL)
    uvicorn.run(
        "casting_messaging.app:create_app",
        factory=True,
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL,
    )


if __name__ == "__main__":
    main()
