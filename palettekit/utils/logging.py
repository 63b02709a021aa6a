"""
PaletteKit Structured Logging
Centralized logging configuration using loguru.
"""
import sys
from typing import Dict, Any, Optional

from loguru import logger

from palettekit.config import config


def configure_logging(level: Optional[str] = None, serialize: bool = False) -> None:
    """
    Replace loguru's default sink with the PaletteKit format.

    Only called on request; importing the package never touches sinks.

    Args:
        level: Minimum level, defaults to ``config.LOG_LEVEL``
        serialize: Emit JSON records instead of text
    """
    logger.remove()
    logger.add(
        sys.stderr,
        format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {name} | {message} | {extra}",
        level=level or config.LOG_LEVEL,
        serialize=serialize,
    )


class StructuredLogger:
    """Structured logger binding extra context to each record."""

    def __init__(self, component: str = "palettekit"):
        self.component = component

    def _bound(self, extra: Optional[Dict[str, Any]]):
        return logger.bind(component=self.component, **(extra or {}))

    def info(self, message: str, extra: Optional[Dict[str, Any]] = None):
        """Log info message with optional extra data."""
        self._bound(extra).info(message)

    def warning(self, message: str, extra: Optional[Dict[str, Any]] = None):
        """Log warning message with optional extra data."""
        self._bound(extra).warning(message)

    def error(self, message: str, extra: Optional[Dict[str, Any]] = None):
        """Log error message with optional extra data."""
        self._bound(extra).error(message)

    def debug(self, message: str, extra: Optional[Dict[str, Any]] = None):
        """Log debug message with optional extra data."""
        self._bound(extra).debug(message)


def get_logger(component: str = "palettekit") -> StructuredLogger:
    """Create a structured logger for a component."""
    return StructuredLogger(component)
