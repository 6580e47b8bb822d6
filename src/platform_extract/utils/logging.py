"""
Logging configuration for the platform extraction engine.

Every module logs through a child of the ``platform_extract`` logger so a
single call to setup_logging() controls console output, the optional
rotating log file, and the level for the whole package. Extractors log
through a LoggerAdapter carrying their platform name.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from platform_extract.config.settings import LoggingSettings


ROOT_LOGGER_NAME = "platform_extract"

DEFAULT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_logging_configured = False


def setup_logging(
    settings: "LoggingSettings | None" = None,
    level: str | None = None,
) -> logging.Logger:
    """
    Configure the package logger.

    Safe to call more than once; only the first call installs handlers.

    Args:
        settings: Logging configuration. If None, console logging at INFO.
        level: Optional level name overriding the configured level
            (the CLI passes DEBUG for --verbose).

    Returns:
        The package root logger.
    """
    global _logging_configured

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    if _logging_configured:
        return logger

    logger.handlers.clear()

    if settings is None:
        level_name = "INFO"
        formatter = logging.Formatter(DEFAULT_FORMAT, DEFAULT_DATE_FORMAT)
        log_to_console = True
        file_path = None
        max_bytes = 10 * 1024 * 1024
        backup_count = 3
    else:
        level_name = settings.level
        formatter = logging.Formatter(settings.format, settings.date_format)
        log_to_console = settings.log_to_console
        file_path = settings.file_path
        max_bytes = settings.max_file_size_mb * 1024 * 1024
        backup_count = settings.backup_count

    resolved_level = getattr(logging, (level or level_name).upper())
    logger.setLevel(resolved_level)

    if log_to_console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(resolved_level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if file_path is not None:
        logger.addHandler(
            _create_file_handler(
                file_path, max_bytes, backup_count, resolved_level, formatter
            )
        )

    # Handlers live on the package logger only
    logger.propagate = False
    _logging_configured = True

    return logger


def _create_file_handler(
    file_path: Path,
    max_bytes: int,
    backup_count: int,
    level: int,
    formatter: logging.Formatter,
) -> RotatingFileHandler:
    """Create a rotating file handler, creating the parent directory."""
    file_path.parent.mkdir(parents=True, exist_ok=True)

    handler = RotatingFileHandler(
        filename=str(file_path),
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Get a logger under the package root.

    Args:
        name: Usually ``__name__``. Names outside the package are nested
            under it so they share its handlers.

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.debug("Trying selector %s", selector)
    """
    if name is None:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if name.startswith(ROOT_LOGGER_NAME):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def reset_logging() -> None:
    """Remove all package handlers so setup_logging() can run again."""
    global _logging_configured

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in logger.handlers[:]:
        handler.close()
        logger.removeHandler(handler)

    _logging_configured = False


class LoggerAdapter(logging.LoggerAdapter):
    """
    Logger adapter that appends ``[key=value]`` context to every message.

    Example:
        >>> logger = LoggerAdapter(get_logger(__name__), {"platform": "google"})
        >>> logger.info("Extraction started")  # "Extraction started [platform=google]"
    """

    def process(self, msg, kwargs):
        if self.extra:
            context_str = " ".join(f"[{k}={v}]" for k, v in self.extra.items())
            msg = f"{msg} {context_str}"
        return msg, kwargs


def get_logger_with_context(
    name: str | None = None,
    **context: str,
) -> LoggerAdapter:
    """
    Get a logger whose messages carry the given context.

    Example:
        >>> logger = get_logger_with_context(__name__, platform="xiaohongshu")
    """
    return LoggerAdapter(get_logger(name), context)
