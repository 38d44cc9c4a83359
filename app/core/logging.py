import logging
import os
from typing import Dict, Optional, Union

from colorlog import ColoredFormatter

# Library loggers that flood the console at INFO (SQL echo, Stripe connection pool)
QUIET_LOGGERS = ("sqlalchemy.engine", "urllib3")


def _logger_levels() -> Dict[str, str]:
    levels = {name: "WARNING" for name in QUIET_LOGGERS}
    payments_level = os.getenv("PAYMENTS_LOG_LEVEL")
    if payments_level:
        levels["app.payments"] = payments_level.upper()
    return levels


def setup_logger(level: Optional[Union[int, str]] = None):
    """
    Configure the root logger with colored console output.

    LOG_LEVEL sets the root level; PAYMENTS_LOG_LEVEL overrides it for the
    payment registry, dispatcher and providers (e.g. DEBUG while
    investigating a provider without flooding the rest of the app).
    """
    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO").upper()

    logger = logging.getLogger()
    logger.setLevel(level)

    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = ColoredFormatter(
        "%(log_color)s%(levelname)-8s%(reset)s | "
        "%(blue)s%(asctime)s%(reset)s | "
        "%(cyan)s%(name)s:%(lineno)d%(reset)s | "
        "%(message_log_color)s%(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        log_colors={
            "DEBUG": "cyan",
            "INFO": "green",
            "WARNING": "yellow",
            "ERROR": "red",
            "CRITICAL": "bold_red,bg_white",
        },
        # Provider failures and capability warnings stand out in the message too
        secondary_log_colors={
            "message": {"WARNING": "yellow", "ERROR": "red", "CRITICAL": "red"},
        },
    )

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    for name, logger_level in _logger_levels().items():
        logging.getLogger(name).setLevel(logger_level)

    return logger
