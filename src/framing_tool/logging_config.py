"""
Centralized logging configuration for the framing tool.

Log Format:
    2026-10-19 10:15:30 [INFO    ] framing_tool.services.shopify_client - Loaded 6 categories

Usage:
    # At application startup
    from framing_tool.logging_config import setup_logging, get_logger

    setup_logging(log_level=logging.INFO)

    # In modules
    logger = get_logger(__name__)
"""
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

APP_LOGGER = "framing_tool"


def setup_logging(
    log_level: int | str = logging.INFO,
    log_dir: Optional[Path] = None,
    enable_file_logging: bool = False,
) -> logging.Logger:
    """
    Configure the application logger.

    Sets up a console handler and, when enabled, a rotating file log plus a
    separate error log. Safe to call more than once (handlers are replaced).

    Args:
        log_level: Minimum level, as an int or a name such as "DEBUG"
        log_dir: Directory for log files (default: ./logs under the cwd)
        enable_file_logging: Whether to write to log files

    Returns:
        The configured "framing_tool" logger
    """
    if isinstance(log_level, str):
        log_level = logging.getLevelName(log_level.upper())
        if not isinstance(log_level, int):
            log_level = logging.INFO

    logger = logging.getLogger(APP_LOGGER)
    logger.setLevel(log_level)
    logger.propagate = False
    logger.handlers.clear()

    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)-8s] %(name)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if enable_file_logging:
        if log_dir is None:
            log_dir = Path.cwd() / "logs"
        log_dir.mkdir(parents=True, exist_ok=True)

        app_log_file = log_dir / f"{APP_LOGGER}.log"
        file_handler = RotatingFileHandler(
            filename=app_log_file,
            maxBytes=5 * 1024 * 1024,  # 5 MB per file
            backupCount=3,
            encoding="utf-8"
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

        error_handler = RotatingFileHandler(
            filename=log_dir / f"{APP_LOGGER}_error.log",
            maxBytes=5 * 1024 * 1024,
            backupCount=3,
            encoding="utf-8"
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(formatter)
        logger.addHandler(error_handler)

        logger.info(f"File logging enabled: {app_log_file}")

    logger.debug(f"Logging configured at level {logging.getLevelName(log_level)}")
    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a child logger under the "framing_tool" namespace.

    Module names from inside the package already carry the prefix; anything
    else (scripts, the Streamlit page) is nested under it.
    """
    if not name.startswith(APP_LOGGER):
        name = f"{APP_LOGGER}.{name}"
    return logging.getLogger(name)
