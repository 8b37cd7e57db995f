"""Logging configuration for the scene core."""

import logging

from src.python.config import LOG_FORMAT, LOG_LEVEL


def setup_logging(name: str = "src.python", level: str | None = None) -> logging.Logger:
    """Set up console logging for the package.

    Safe to call more than once: a handler is only attached the first time.

    Args:
        name: Logger name. The default covers every module in the package.
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
            Defaults to ``LOG_LEVEL`` from the configuration.

    Returns:
        The configured logger.
    """
    if level is None:
        level = LOG_LEVEL

    numeric_level = getattr(logging, level.upper(), logging.WARNING)
    logger = logging.getLogger(name)
    logger.setLevel(numeric_level)

    if not any(getattr(h, "_raycore_handler", False) for h in logger.handlers):
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        console_handler._raycore_handler = True  # type: ignore[attr-defined]
        logger.addHandler(console_handler)

    for handler in logger.handlers:
        handler.setLevel(numeric_level)

    return logger
