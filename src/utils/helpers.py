import logging
import sys

from src.config import DEFAULT_LOG_LEVEL


def setup_logging(logger_name, level=DEFAULT_LOG_LEVEL):
    """Configure console logging for a logger, once per logger"""

    logger = logging.getLogger(logger_name)
    logger.setLevel(level)

    # Avoid stacking handlers when called repeatedly
    if any(getattr(h, "_desirability_console", False) for h in logger.handlers):
        return logger

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    console_handler._desirability_console = True
    logger.addHandler(console_handler)

    return logger
