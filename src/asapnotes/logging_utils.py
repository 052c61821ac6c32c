"""Logging setup for the asapnotes CLI and notes server.

Two streams share the same handlers. Application messages go through the
root logger at the requested level. HTTP request lines go through
``asapnotes.access``, which stays at WARNING unless the access log is switched
on, so the editor's heartbeat requests do not flood the console.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

ACCESS_LOGGER_NAME = "asapnotes.access"

LOG_LEVEL_NAMES = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

CONSOLE_FORMAT = "%(levelname)s: %(message)s"
TRACE_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s"
TRACE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def resolve_log_level(log_level: int | str, trace_mode: bool = False) -> int:
    """Turn a level name or number into a numeric level.

    Parameters
    ----------
    log_level : int | str
        Numeric level, or one of ``LOG_LEVEL_NAMES`` in any case
    trace_mode : bool, default False
        Forces DEBUG regardless of ``log_level``

    Returns
    -------
    int
        Numeric logging level

    Raises
    ------
    ValueError
        If ``log_level`` is a name that is not a standard level

    Examples
    --------
        >>> resolve_log_level("info")
        20
        >>> resolve_log_level("ERROR", trace_mode=True)
        10

    """
    if trace_mode:
        return logging.DEBUG
    if isinstance(log_level, int):
        return log_level
    name = log_level.strip().upper()
    if name not in LOG_LEVEL_NAMES:
        raise ValueError(f"Unknown log level {log_level!r}, expected one of {', '.join(LOG_LEVEL_NAMES)}")
    return getattr(logging, name)


def get_access_logger() -> logging.Logger:
    """Return the logger used for HTTP request lines."""
    return logging.getLogger(ACCESS_LOGGER_NAME)


def configure_logging(
    log_level: int | str,
    log_file: Optional[str] = None,
    trace_mode: bool = False,
    access_log: bool = False,
) -> logging.Logger:
    """Install the console handler, and optionally a log file, on the root logger.

    Parameters
    ----------
    log_level : int | str
        Level for application messages
    log_file : str, optional
        Append log output to this file as well; a file that cannot be opened
        is reported as a warning and skipped
    trace_mode : bool, default False
        Debug level with timestamps and logger names; request lines are shown too
    access_log : bool, default False
        Show one INFO line per HTTP request

    Returns
    -------
    logging.Logger
        The configured root logger

    """
    level = resolve_log_level(log_level, trace_mode)
    formatter = (
        logging.Formatter(TRACE_FORMAT, datefmt=TRACE_DATE_FORMAT) if trace_mode else logging.Formatter(CONSOLE_FORMAT)
    )

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    file_error: OSError | None = None
    if log_file:
        try:
            handlers.append(logging.FileHandler(log_file, mode="a", encoding="utf-8"))
        except OSError as exc:
            file_error = exc

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(level)
    # Handlers stay at NOTSET so access records pass even when the root level is higher
    for handler in handlers:
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    get_access_logger().setLevel(logging.INFO if access_log or trace_mode else logging.WARNING)

    if file_error is not None:
        root_logger.warning("Could not open log file %s: %s", log_file, file_error)
    elif log_file:
        root_logger.info("Logging to file: %s", log_file)

    return root_logger
