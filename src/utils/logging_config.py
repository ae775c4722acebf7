import logging
import os
from logging.handlers import RotatingFileHandler

from utils.constants import LOG_FORMAT, LOG_FILE_NAME, LOG_MAX_BYTES, LOG_BACKUP_COUNT

def setup_logging(level: str = 'INFO', log_dir: str = 'logs', log_to_file: bool = True):
    """
    Configure logging for the player with console and optional file output.
    Rotating log files have a max size of 10MB, keeping 5 backup files.

    Args:
        level: Log level name (DEBUG, INFO, ...)
        log_dir: Directory receiving the rotating log file
        log_to_file: Disable to log to the console only

    Returns:
        logging.Logger: The configured root logger
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    logger = logging.getLogger()
    logger.setLevel(numeric_level)

    formatter = logging.Formatter(LOG_FORMAT)

    # Calling setup twice must not duplicate output
    for handler in list(logger.handlers):
        if getattr(handler, '_queue_player_handler', False):
            logger.removeHandler(handler)
            handler.close()

    handlers = []

    if log_to_file:
        if not os.path.exists(log_dir):
            os.makedirs(log_dir)

        file_handler = RotatingFileHandler(
            os.path.join(log_dir, LOG_FILE_NAME),
            maxBytes=LOG_MAX_BYTES,
            backupCount=LOG_BACKUP_COUNT,
            encoding='utf-8'
        )
        handlers.append(file_handler)

    console_handler = logging.StreamHandler()
    handlers.append(console_handler)

    for handler in handlers:
        handler.setFormatter(formatter)
        handler.setLevel(numeric_level)
        handler._queue_player_handler = True
        logger.addHandler(handler)

    return logger
