#!/usr/bin/env python3
"""
Loguru sinks for the Coffee Extractor CLI and web app.

The console sink goes to stderr so the CLI can print the extracted record as
plain JSON on stdout. An optional file sink rotates and compresses old logs;
with ``logging.format=json`` each line is a serialized loguru record carrying
the structured fields (url, provider, kind, status) passed by the callers.
"""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger
from omegaconf import DictConfig


class LoggingManager:
    """Centralized logging infrastructure management using Loguru framework.

    Attributes:
        config (DictConfig): Logging configuration from Hydra

    Example:
        log_manager = LoggingManager()
        log_manager.setup_logging(config)
        log_manager.log_page_operation("Fetched product page", url=url, chars=1200)
    """

    def __init__(self):
        """Initialize the logging manager."""
        self.config: Optional[DictConfig] = None

    def setup_logging(self, cfg: DictConfig):
        """Configure Loguru logging based on Hydra configuration.

        Removes default Loguru handlers and configures console and optional
        file handlers from ``cfg.logging``.

        Args:
            cfg (DictConfig): Configuration object with logging settings

        Logging Configuration Options:
            - level: DEBUG, INFO, WARNING, ERROR, CRITICAL
            - format: simple, detailed, json
            - console: Enable/disable the stderr handler (default: True)
            - file: Optional file path for file logging
            - rotation: Log rotation size (default: 100 MB)
            - retention: Log retention period (default: 30 days)
            - colorize: Enable/disable console colors (default: True)
        """
        self.config = cfg
        log_config = cfg.logging

        # Remove default Loguru handler
        logger.remove()

        if log_config.get("console", True):
            logger.add(
                sys.stderr,
                format=self._get_console_format(log_config.format),
                level=log_config.level.upper(),
                colorize=log_config.get("colorize", True),
                backtrace=True,
                diagnose=False
            )

        if log_config.get("file"):
            self._setup_file_logging(log_config)

        logger.info("Loguru logging configured",
                    level=log_config.level,
                    format=log_config.format,
                    file=log_config.get("file") or "console-only")

    def _get_console_format(self, format_type: str) -> str:
        """Get console logging format string based on configuration.

        Args:
            format_type (str): Format type - simple, detailed, or json

        Returns:
            str: Loguru format string for console output
        """
        if format_type == "simple":
            return "<level>{level}</level> - {message}"
        elif format_type == "json":
            return "{time:HH:mm:ss} | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan> | {message} | {extra}"
        else:  # detailed
            return "{time:HH:mm:ss} | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level> {extra}"

    def _setup_file_logging(self, log_config: DictConfig):
        """Setup file logging with rotation and compression.

        Args:
            log_config (DictConfig): Logging configuration object
        """
        file_path = Path(log_config.file)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        if log_config.format == "json":
            logger.add(
                file_path,
                level=log_config.level.upper(),
                rotation=log_config.get("rotation", "100 MB"),
                retention=log_config.get("retention", "30 days"),
                compression="gz",
                serialize=True
            )
        else:
            logger.add(
                file_path,
                format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message} {extra}",
                level=log_config.level.upper(),
                rotation=log_config.get("rotation", "100 MB"),
                retention=log_config.get("retention", "30 days"),
                compression="gz"
            )

    def log_page_operation(self, message: str, url: str, **context):
        """Log page fetch with structured context.

        Args:
            message (str): Log message
            url (str): Product page URL
            **context: Additional context data (chars, status, etc.)
        """
        logger.info(message, url=url, **context)

    def log_success(self, message: str, **context):
        logger.success(message, **context)

    def log_error(self, message: str, **context):
        logger.error(message, **context)


# Global logging manager instance for easy access
_logging_manager = LoggingManager()


def setup_logging(cfg: DictConfig):
    """Setup global logging configuration.

    Args:
        cfg (DictConfig): Configuration object with logging settings
    """
    _logging_manager.setup_logging(cfg)


def get_logging_manager() -> LoggingManager:
    return _logging_manager
