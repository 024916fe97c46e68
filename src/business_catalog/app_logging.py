"""
Logging setup shared by the command line tools.

Library modules only create module loggers with logging.getLogger(__name__);
handlers are attached here, by the CLIs, so importing the packages never
configures logging as a side effect.
"""

import logging
import sys
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme


# Custom theme for log levels
_LOG_THEME = Theme({
    "logging.level.debug": "dim cyan",
    "logging.level.info": "green",
    "logging.level.warning": "yellow",
    "logging.level.error": "bold red",
    "logging.level.critical": "bold white on red",
    "log.time": "dim",
    "log.message": "default",
    "log.path": "dim",
})

# Log output goes to stderr so JSON written to stdout stays clean
_console = Console(theme=_LOG_THEME, stderr=True)

# Packages whose loggers the CLIs configure
LOGGER_NAMES = ("business_catalog", "fit_scorer")


def setup_logging(
    level: str = 'WARNING',
    verbose: bool = False,
    log_format: Optional[str] = None,
    rich_tracebacks: bool = True,
    show_path: bool = False,
) -> None:
    """
    Setup console logging for the business_catalog and fit_scorer packages.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        verbose: Use rich console output at DEBUG level
        log_format: Format string for the plain handler. If None, uses default format.
        rich_tracebacks: Whether to use rich for exception tracebacks (default: True)
        show_path: Whether to show file path in rich console logs (default: False)
    """
    if log_format is None:
        log_format = '%(levelname)s - %(name)s - %(message)s'

    if verbose:
        level = 'DEBUG'
    level_value = getattr(logging, level.upper())

    for logger_name in LOGGER_NAMES:
        if verbose:
            handler: logging.Handler = RichHandler(
                console=_console,
                level=level_value,
                show_path=show_path,
                rich_tracebacks=rich_tracebacks,
                markup=False,
            )
        else:
            handler = logging.StreamHandler(sys.stderr)
            handler.setFormatter(logging.Formatter(log_format))
        handler.setLevel(level_value)

        logger = logging.getLogger(logger_name)
        logger.setLevel(level_value)
        logger.handlers.clear()
        logger.addHandler(handler)
        # Prevent propagation to root logger
        logger.propagate = False
