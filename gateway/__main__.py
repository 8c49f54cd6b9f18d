"""Command-line entry point: ``python -m gateway``."""

from __future__ import annotations

import logging
import sys

import uvicorn

from .config import ConfigError, load_settings
from .main import create_app

logger = logging.getLogger("gateway")


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        settings = load_settings()
    except ConfigError as e:
        logger.error("%s", e)
        sys.exit(1)

    logging.getLogger().setLevel(settings.log_level)

    app = create_app(settings)
    logger.info("Gateway listening on http://%s:%d", settings.server.host, settings.server.port)
    uvicorn.run(
        app,
        host=settings.server.host,
        port=settings.server.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
