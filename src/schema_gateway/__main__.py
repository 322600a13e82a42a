"""Entrypoint: ``python -m schema_gateway``."""

import logging

import uvicorn

from schema_gateway.api.app import create_app
from schema_gateway.config.settings import GatewaySettings

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def main() -> None:
    settings = GatewaySettings.from_env()
    configure_logging(settings.log_level)
    app = create_app(settings)
    logger.info("Server running on http://%s:%s", settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
