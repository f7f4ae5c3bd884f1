"""
Logging configuration for Qualigate.

Log records go to stderr through rich. Stdout is reserved for reports and
CI annotations that other tools parse, so nothing here ever writes to it.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "qualigate"

# Keyed by ScoringConfig.verbosity.
VERBOSITY_LEVELS = {
    "quiet": logging.ERROR,
    "normal": logging.WARNING,
    "verbose": logging.DEBUG,
}

FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s [%(threadName)s] %(message)s"


def verbosity_from_flags(verbose: bool = False, quiet: bool = False) -> str:
    """Map --verbose/--quiet to a verbosity name. --quiet wins."""
    if quiet:
        return "quiet"
    if verbose:
        return "verbose"
    return "normal"


def setup_logging(verbosity: str = "normal", log_file: Optional[str] = None) -> logging.Logger:
    """
    Route qualigate logging to a rich stderr handler.

    Args:
        verbosity: "quiet" (errors only), "normal" (warnings) or "verbose" (debug)
        log_file: Also append every record, including debug, to this file

    Returns:
        The root qualigate logger
    """
    level = VERBOSITY_LEVELS.get(verbosity, logging.WARNING)
    verbose = level == logging.DEBUG

    handlers: list[logging.Handler] = [
        RichHandler(
            console=Console(stderr=True),
            level=level,
            rich_tracebacks=True,
            tracebacks_show_locals=verbose,
            markup=False,
            show_path=verbose,
            log_time_format="[%X]",
        )
    ]

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        handlers.append(file_handler)

    logging.basicConfig(level=logging.WARNING, format="%(message)s", handlers=handlers, force=True)

    # Analyzer worker threads log through child loggers of this one.
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if log_file else level)
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Logger for a qualigate module.

    ``get_logger(__name__)`` inside the package returns the module logger;
    names outside the package are nested under ``qualigate``.
    """
    if name is None:
        return logging.getLogger(LOGGER_NAME)
    if not name.startswith(LOGGER_NAME):
        name = f"{LOGGER_NAME}.{name}"
    return logging.getLogger(name)
