r"""
Logging configuration for applications embedding the XDCC engine.

Provides a configurable console setup using the colorlog library plus a
structured one-line error format shared by the error-handling helpers.
"""

import logging
import os
import sys
from typing import Any

import colorlog

LOG_FORMAT = (
    "%(asctime)s %(log_color)s%(levelname)-8s%(reset)s %(message_log_color)s%(message)s"
)
LOG_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "magenta",
}


def log_structured_error(
    error_type: str,
    message: str,
    exception: Exception | None = None,
    context: dict[str, Any] | None = None,
    level: int = logging.ERROR,
) -> None:
    """Log an error with structured context.

    Args:
        error_type: Category of the error (e.g., 'network', 'protocol', 'bot')
        message: Descriptive error message
        exception: The exception that occurred (optional)
        context: Additional context data for debugging
        level: Logging level (default: ERROR)
    """
    structured_message = f"[{error_type.upper()}] {message}"

    if exception:
        structured_message += f" | Exception: {type(exception).__name__}: {exception}"

    if context:
        context_str = " | ".join(f"{k}={v}" for k, v in context.items())
        structured_message += f" | Context: {context_str}"

    logging.getLogger("xdcc_engine.errors").log(level, structured_message)


class LoggerConfigurator:
    """Handles logging configuration cleanly using colorlog.

    Supports environment variable configuration for log levels.
    """

    def __init__(self, config: dict[str, Any] | None = None, stream=None):
        """Initialize the configurator.

        Args:
            config: Optional overrides; ``level`` forces a log level.
            stream: Output stream for the console handler (default stderr).
        """
        self.config = config or {}
        self.stream = stream

    def build_formatter(self) -> colorlog.ColoredFormatter:
        return colorlog.ColoredFormatter(
            LOG_FORMAT,
            datefmt="%Y-%m-%d %H:%M:%S",
            log_colors=LOG_COLORS,
            secondary_log_colors={
                "message": {
                    "ERROR": "red",
                    "CRITICAL": "magenta",
                }
            },
            reset=True,
        )

    def resolve_level(self) -> int:
        if "level" in self.config:
            return int(self.config["level"])
        debug_env = os.environ.get("DEBUG", "").lower()
        return logging.DEBUG if debug_env in ("true", "1", "yes") else logging.INFO

    def configure(self) -> logging.Handler:
        """Attach a colored console handler to the package logger.

        Uses environment variables:
        - DEBUG: Set to 'true', '1', or 'yes' for DEBUG level, otherwise INFO

        Calling it again replaces the handler installed by a previous call.
        """
        log_level = self.resolve_level()
        handler = logging.StreamHandler(self.stream or sys.stderr)
        handler.setFormatter(self.build_formatter())
        handler.set_name("xdcc_engine_console")

        package_logger = logging.getLogger("xdcc_engine")
        for existing in list(package_logger.handlers):
            if existing.get_name() == "xdcc_engine_console":
                package_logger.removeHandler(existing)
        package_logger.addHandler(handler)
        package_logger.setLevel(log_level)
        return handler
