"""
Process entry point for the folder viewer API.

Validates configuration, opens the store connection once, and serves the Flask
app. The process exits with status 1 if the store cannot be reached.
"""

import atexit
import logging
import sys

from sqlalchemy.exc import SQLAlchemyError

from . import create_app
from .config import Config
from .errors import StoreError
from .services.container import create_services

logger = logging.getLogger(__name__)


def main() -> int:
    logging.basicConfig(
        level=Config.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        Config.validate()
    except ValueError as e:
        logger.error("%s", e)
        return 1

    try:
        services = create_services(database_url=Config.DATABASE_URL)
        services.storage.ping()
    except (StoreError, SQLAlchemyError, ValueError) as e:
        logger.error("Database connection error: %s", e)
        return 1

    atexit.register(services.close)
    logger.info("Database connected successfully (%s)", services.storage.dialect)

    app = create_app(services=services)
    logger.info("Server is running on http://localhost:%s", Config.PORT)
    app.run(host="0.0.0.0", port=Config.PORT, debug=Config.DEBUG, use_reloader=False)
    return 0


if __name__ == "__main__":
    sys.exit(main())
