"""Environment loading and logging setup for applications using the client.

Library modules only create loggers; handlers are installed here, once, by
whichever entry point runs the client (a script, a Prefect flow, a notebook).
"""

import logging
import os

from dotenv import load_dotenv

LOGGER_NAME = "appeears_client"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"

_ENV_LOADED = False


def load_environment() -> None:
    """Load a .env file into the process environment, once."""
    global _ENV_LOADED
    if _ENV_LOADED:
        return
    load_dotenv()
    _ENV_LOADED = True


def configure_logging(level: str | int | None = None) -> logging.Logger:
    """Attach a stream handler to the package logger and quiet HTTP libraries."""
    if level is None:
        level = os.getenv("APPEEARS_LOG_LEVEL", "INFO").strip().upper() or "INFO"

    package_logger = logging.getLogger(LOGGER_NAME)
    package_logger.setLevel(level)
    if not package_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        package_logger.addHandler(handler)
    for handler in package_logger.handlers:
        handler.setLevel(level)
    package_logger.propagate = False

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    return package_logger
