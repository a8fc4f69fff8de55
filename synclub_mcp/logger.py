"""
Logger utility for the SynClub MCP adapter.

stdout carries the MCP stdio transport, so console output goes to stderr.
When a log directory is configured, rotating files are written there:
- synclub.log: Main log with 5MB rotation, keeps 3 backups
- synclub.errors.log: Errors only, 2MB rotation, keeps 2 backups
- synclub.json: Structured JSON, 5MB rotation, keeps 2 backups
"""

import json
import logging
import sys
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

PACKAGE_LOGGER = "synclub_mcp"


class JsonFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data)


def _add_file_handlers(
    logger: logging.Logger, log_dir: Path, formatter: logging.Formatter
) -> None:
    log_dir.mkdir(parents=True, exist_ok=True)

    main_handler = RotatingFileHandler(
        log_dir / "synclub.log",
        maxBytes=5 * 1024 * 1024,
        backupCount=3,
        encoding="utf-8",
    )
    main_handler.setLevel(logging.DEBUG)
    main_handler.setFormatter(formatter)
    logger.addHandler(main_handler)

    error_handler = RotatingFileHandler(
        log_dir / "synclub.errors.log",
        maxBytes=2 * 1024 * 1024,
        backupCount=2,
        encoding="utf-8",
    )
    error_handler.setLevel(logging.ERROR)
    error_handler.setFormatter(formatter)
    logger.addHandler(error_handler)

    json_handler = RotatingFileHandler(
        log_dir / "synclub.json",
        maxBytes=5 * 1024 * 1024,
        backupCount=2,
        encoding="utf-8",
    )
    json_handler.setLevel(logging.INFO)
    json_handler.setFormatter(JsonFormatter())
    logger.addHandler(json_handler)


def get_logger(
    name: str = PACKAGE_LOGGER,
    level: Optional[int] = None,
    log_dir: Optional[str] = None,
) -> logging.Logger:
    """
    Get or create a logger with a stderr handler and optional rotating files.

    Args:
        name: Logger name
        level: Optional logging level (defaults to INFO)
        log_dir: Optional directory for rotating log files

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        text_formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(text_formatter)
        logger.addHandler(console_handler)

        if log_dir:
            try:
                _add_file_handlers(logger, Path(log_dir).expanduser(), text_formatter)
            except OSError as e:
                logger.warning("File logging disabled (%s): %s", log_dir, e)

    if level is not None:
        logger.setLevel(level)
    elif not logger.level:
        logger.setLevel(logging.INFO)

    return logger


def configure_logging(settings) -> logging.Logger:
    """Set up the package logger from Settings; module loggers propagate to it."""
    level = logging.DEBUG if settings.debug else logging.getLevelName(
        settings.log_level.upper()
    )
    if not isinstance(level, int):
        level = logging.INFO
    return get_logger(PACKAGE_LOGGER, level=level, log_dir=settings.log_dir)
