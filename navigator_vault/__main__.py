"""Run the vault server: ``python -m navigator_vault``."""
import sys
import logging

from aiohttp import web
from pydantic import ValidationError

from .config import VaultSettings
from .handlers import create_app

logger = logging.getLogger("navigator.vault")


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        settings = VaultSettings.from_env()
    except (RuntimeError, ValidationError) as err:
        logger.error("%s", err)
        sys.exit(1)
    if settings.debug:
        logging.getLogger("navigator").setLevel(logging.DEBUG)
    app = create_app(settings)
    logger.info("Server running in %s mode", settings.environment)
    logger.info("Access at: http://localhost:%s", settings.port)
    web.run_app(app, port=settings.port, print=None)


if __name__ == "__main__":
    main()
