import logging
from typing import Optional

CONSOLE_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
FILE_FORMAT = '%(asctime)s [%(levelname)s] %(name)s (%(filename)s:%(lineno)d): %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

def setup_logging(level: str = "INFO", log_file: Optional[str] = None) -> logging.Logger:
    """Configure the root logger and the rewrite package logger.

    Args:
        level: Level for console output
        log_file: Optional path for a debug-level log file

    Returns:
        The ``rewrite`` package logger
    """
    logging.basicConfig(
        level=level,
        format=CONSOLE_FORMAT,
        datefmt=DATE_FORMAT
    )

    # Create logger for rewrite modules
    logger = logging.getLogger('rewrite')

    if log_file:
        # Package logger goes to debug so the file gets rule-level detail
        logger.setLevel(logging.DEBUG)
        try:
            file_handler = logging.FileHandler(log_file)
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
            logger.addHandler(file_handler)
        except OSError as e:
            logger.warning(f"Could not set up file logging: {e}")

    return logger
