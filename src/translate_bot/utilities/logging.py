import logging
from logging import Logger

from rich.console import Console
from rich.logging import RichHandler

PACKAGE_LOGGER_NAME = "translate_bot"


def configure_logging(level: int | str = "INFO", logger: Logger | None = None, enable_rich_tracebacks: bool = True) -> Logger:
    """Send the package's log records to stderr through a rich handler, replacing any handlers already installed."""

    if logger is None:
        logger = logging.getLogger(PACKAGE_LOGGER_NAME)

    handler = RichHandler(console=Console(stderr=True), rich_tracebacks=enable_rich_tracebacks)
    handler.setFormatter(logging.Formatter("%(message)s"))

    logger.setLevel(level.upper() if isinstance(level, str) else level)

    for existing_handler in logger.handlers[:]:
        logger.removeHandler(existing_handler)

    logger.addHandler(handler)
    logger.propagate = False

    return logger
