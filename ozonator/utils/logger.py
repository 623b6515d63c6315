import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from ozonator.utils.settings import (
    get_environment,
    get_log_level_override,
    is_file_logging_enabled,
)

LOG_DIR = Path("logs")
LOG_FILE = LOG_DIR / "ozonator.log"
LOG_FORMAT = "%(asctime)s [%(levelname)s] [%(name)s] - %(message)s"
# Production lines skip the component name
LOG_FORMAT_PROD = "%(asctime)s [%(levelname)s] - %(message)s"
LOG_FILE_MAX_BYTES = 5 * 1024 * 1024
LOG_FILE_BACKUPS = 3


def _file_handler(formatter: logging.Formatter) -> RotatingFileHandler:
    LOG_DIR.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        LOG_FILE,
        maxBytes=LOG_FILE_MAX_BYTES,
        backupCount=LOG_FILE_BACKUPS,
        encoding="utf-8",
    )
    handler.setFormatter(formatter)
    return handler


def get_logger(name: str) -> logging.Logger:
    """
    Return a component logger configured once for the current environment.

    prod: WARNING, short format. dev: INFO, component name in every line.
    ``LOG_LEVEL`` overrides the level (``DEBUG`` shows unparseable cell
    values and ignored sort directives). Log files are written only when
    ``LOG_TO_FILE`` is set, so importing the grid helpers never touches disk.

    Args:
        name: Component name, e.g. "TableSort"
    """
    logger = logging.getLogger(name)
    if getattr(logger, "_configured", False):
        return logger

    is_prod = get_environment() == "prod"
    formatter = logging.Formatter(LOG_FORMAT_PROD if is_prod else LOG_FORMAT)

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)
    if is_file_logging_enabled():
        logger.addHandler(_file_handler(formatter))

    level = get_log_level_override()
    if level is None:
        level = logging.WARNING if is_prod else logging.INFO
    logger.setLevel(level)

    logger.propagate = False
    logger._configured = True
    return logger
