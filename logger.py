"""Logging configuration for Worldsmith.

Sets up logging to a date-stamped file and to the console. The CLI reports
to the user through the console handler, so console output carries only the
message text unless DEBUG is enabled.
"""

import logging
from datetime import date
from typing import Optional
from config import Config

LOGGER_NAME = "worldsmith"


def setup_logging(config: Config, console: bool = True) -> logging.Logger:
    """Set up application logging with file and console handlers.

    Args:
        config: Application configuration containing log settings.
        console: Whether to attach a console handler.

    Returns:
        Configured root application logger.
    """
    config.log_dir.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(config.log_level)

    # Clear any existing handlers (in case this is called multiple times)
    logger.handlers.clear()

    file_formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    log_file_path = config.log_dir / f"worldsmith-{date.today().isoformat()}.log"
    file_handler = logging.FileHandler(log_file_path)
    file_handler.setLevel(config.log_level)
    file_handler.setFormatter(file_formatter)
    logger.addHandler(file_handler)

    if console:
        if logging.getLevelName(config.log_level) == logging.DEBUG:
            console_formatter = logging.Formatter("%(levelname)s - %(name)s - %(message)s")
        else:
            console_formatter = logging.Formatter("%(message)s")
        console_handler = logging.StreamHandler()
        console_handler.setLevel(config.log_level)
        console_handler.setFormatter(console_formatter)
        logger.addHandler(console_handler)

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get the application logger, or a named child of it.

    Args:
        name: Optional child name, e.g. "store" for "worldsmith.store".

    Returns:
        Logger instance.
    """
    if name:
        return logging.getLogger(f"{LOGGER_NAME}.{name}")
    return logging.getLogger(LOGGER_NAME)
