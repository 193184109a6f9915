import logging
import os
from logging.handlers import RotatingFileHandler

LADDER_LOGGER_NAME = "bootladder"
LOG_FILENAME = "ladder.log"
DEFAULT_LOG_MAX_BYTES = 10 * 1024 * 1024
DEFAULT_LOG_BACKUP_COUNT = 10

_LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _has_handler(logger, handler_type, path=None):
    for handler in logger.handlers:
        if type(handler) is not handler_type:
            continue
        if path is None or getattr(handler, "baseFilename", None) == path:
            return True
    return False


def setup_ladder_logger(
    level="INFO",
    log_dir=None,
    max_bytes=DEFAULT_LOG_MAX_BYTES,
    backup_count=DEFAULT_LOG_BACKUP_COUNT,
):
    """Configure the ``bootladder`` logger tree.

    Adds a stderr handler and, when ``log_dir`` is given, a rotating
    ``ladder.log`` file. Calling it again does not duplicate handlers.
    """
    logger = logging.getLogger(LADDER_LOGGER_NAME)
    logger.setLevel(level)

    formatter = logging.Formatter(_LOG_FORMAT, datefmt=_DATE_FORMAT)

    if not _has_handler(logger, logging.StreamHandler):
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(formatter)
        logger.addHandler(stream_handler)

    if log_dir is not None:
        os.makedirs(log_dir, exist_ok=True)
        path = os.path.abspath(os.path.join(log_dir, LOG_FILENAME))
        if not _has_handler(logger, RotatingFileHandler, path):
            file_handler = RotatingFileHandler(
                path,
                maxBytes=max_bytes,
                backupCount=backup_count,
            )
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

    return logger


def setup_logger_from_params(params):
    """Configure the ladder logger from a ``LoggingParams`` instance."""
    return setup_ladder_logger(
        level=params.level,
        log_dir=params.log_dir,
        max_bytes=params.max_bytes,
        backup_count=params.backup_count,
    )
