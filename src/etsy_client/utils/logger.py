"""
Logging configuration for the Etsy API client.

Importing the library only attaches a ``NullHandler`` to the ``etsy_client``
logger and leaves propagation on, so records reach whatever handlers the
embedding application configures. ``setup_logging`` adds colored console
output and optional rotating file logging for standalone use such as the CLI.
"""

import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import Optional

import colorlog


CONSOLE_HANDLER_NAME = "etsy_client.console"


class EtsyClientLogger:
    """Centralized logger for the Etsy client library."""

    def __init__(self, name: str = "etsy_client"):
        """Initialize logger with the given name."""
        self.name = name
        self.logger = logging.getLogger(name)
        if not self.logger.handlers:
            self.logger.addHandler(logging.NullHandler())
            log_level = os.getenv("ETSY_LOG_LEVEL")
            if log_level:
                self.logger.setLevel(getattr(logging, log_level.upper(), logging.WARNING))

    @property
    def is_configured(self) -> bool:
        """Whether console output has already been attached."""
        return any(h.get_name() == CONSOLE_HANDLER_NAME for h in self.logger.handlers)

    def configure(self) -> None:
        """Attach console and optional file handlers."""
        if self.is_configured:
            return

        log_level = os.getenv("ETSY_LOG_LEVEL", "WARNING").upper()
        log_dir = os.getenv("ETSY_LOG_DIR")
        debug_mode = os.getenv("ETSY_DEBUG_MODE", "false").lower() == "true"

        self.logger.setLevel(getattr(logging, log_level, logging.WARNING))

        self._setup_console_handler(debug_mode)

        if log_dir:
            Path(log_dir).mkdir(parents=True, exist_ok=True)
            self._setup_file_handler(log_dir, debug_mode)

    def _setup_console_handler(self, debug_mode: bool) -> None:
        """Setup colored console logging."""
        console_handler = colorlog.StreamHandler(sys.stderr)
        console_handler.set_name(CONSOLE_HANDLER_NAME)

        color_format = (
            "%(log_color)s%(asctime)s [%(levelname)8s] "
            "%(name)s.%(funcName)s:%(lineno)d - %(message)s"
        )

        if not debug_mode:
            color_format = (
                "%(log_color)s%(asctime)s [%(levelname)8s] "
                "%(name)s - %(message)s"
            )

        formatter = colorlog.ColoredFormatter(
            color_format,
            datefmt="%Y-%m-%d %H:%M:%S",
            log_colors={
                'DEBUG': 'cyan',
                'INFO': 'green',
                'WARNING': 'yellow',
                'ERROR': 'red',
                'CRITICAL': 'red,bg_white',
            }
        )

        console_handler.setFormatter(formatter)
        self.logger.addHandler(console_handler)

    def _setup_file_handler(self, log_dir: str, debug_mode: bool) -> None:
        """Setup file logging with rotation."""
        log_file = os.path.join(log_dir, "etsy_client.log")

        # 5MB per file, keep 5 files
        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=5 * 1024 * 1024,
            backupCount=5,
            encoding='utf-8'
        )

        file_format = (
            "%(asctime)s [%(levelname)8s] %(name)s.%(funcName)s:%(lineno)d - "
            "%(message)s"
        )

        if not debug_mode:
            file_format = (
                "%(asctime)s [%(levelname)8s] %(name)s - %(message)s"
            )

        formatter = logging.Formatter(
            file_format,
            datefmt="%Y-%m-%d %H:%M:%S"
        )

        file_handler.setFormatter(formatter)
        self.logger.addHandler(file_handler)

    def get_logger(self) -> logging.Logger:
        """Get the configured logger instance."""
        return self.logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger instance for the given name.

    Args:
        name: Logger name. If None, uses the caller's module name.

    Returns:
        Configured logger instance.
    """
    if name is None:
        frame = sys._getframe(1)
        name = frame.f_globals.get('__name__', 'etsy_client')

    # Package modules share the handlers of the root package logger
    if name.startswith("etsy_client."):
        EtsyClientLogger("etsy_client")
        return logging.getLogger(name)

    return EtsyClientLogger(name).get_logger()


def setup_logging(level: Optional[str] = None) -> logging.Logger:
    """
    Setup application-wide logging for the ``etsy_client`` logger tree.

    Args:
        level: Optional level overriding ETSY_LOG_LEVEL

    Returns:
        The root ``etsy_client`` logger.
    """
    configurator = EtsyClientLogger("etsy_client")
    configurator.configure()
    root_logger = configurator.get_logger()
    if level:
        root_logger.setLevel(getattr(logging, level.upper(), logging.WARNING))

    root_logger.debug(f"Log level: {root_logger.level}")
    root_logger.debug(f"Handlers: {[h.__class__.__name__ for h in root_logger.handlers]}")
    return root_logger
