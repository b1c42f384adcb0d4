"""Run the tracker service under uvicorn."""

from __future__ import annotations

import logging

import uvicorn

from tracker.core.config import get_settings
from tracker.core.logging import configure_logging

logger = logging.getLogger("tracker")


def main() -> None:
    settings = get_settings()
    configure_logging(settings)
    logger.info("Starting tracker with settings=%s", settings.safe_for_logging())
    uvicorn.run(
        "tracker.main:app",
        host=settings.server_host,
        port=settings.server_port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
