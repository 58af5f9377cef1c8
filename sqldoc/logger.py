"""
User-facing log channel for a documentation run.
"""

import logging
from enum import IntEnum
from typing import TYPE_CHECKING, Protocol

import typer

if TYPE_CHECKING:
    from sqldoc.settings import Settings

logger = logging.getLogger(__name__)


class LogLevel(IntEnum):
    """Urgency of a log message."""

    VERBOSE = 0
    INFO = 1
    WARN = 2
    ERROR = 3


class Logger(Protocol):
    """Anything that accepts log messages."""

    def log(self, message: str, level: LogLevel = LogLevel.INFO) -> None:
        """
        Print a log message.

        Args:
            message: The message itself
            level: The urgency of the message
        """
        ...


_LEVEL_COLORS = {
    LogLevel.WARN: typer.colors.YELLOW,
    LogLevel.ERROR: typer.colors.RED,
}


class ConsoleLogger:
    """
    Logger writing to standard output.

    Remembers whether an error was ever logged; the flag is never reset.
    Verbose messages are dropped unless ``settings.verbose`` is set at the
    time of the call.
    """

    def __init__(self, settings: "Settings") -> None:
        self.settings = settings
        self.has_errors = False

    def log(self, message: str, level: LogLevel = LogLevel.INFO) -> None:
        if level == LogLevel.ERROR:
            self.has_errors = True

        if level != LogLevel.VERBOSE or self.settings.verbose:
            color = _LEVEL_COLORS.get(level)
            try:
                typer.echo(typer.style(message, fg=color) if color else message)
            except (OSError, ValueError) as e:
                # Closed pipe or unencodable stdout
                logger.debug(f"Could not print log message: {e}")


def setup_logging(verbose: bool = False) -> None:
    """
    Set up logging configuration for internal diagnostics.

    Args:
        verbose: If True, set logging level to DEBUG, otherwise WARNING
    """
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s - %(name)s - %(message)s")
