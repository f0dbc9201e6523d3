"""Package-wide logging setup for schedgraph.

Every module obtains its logger through :func:`get_logger`. All of them hang
off the ``schedgraph`` root logger, which owns exactly one handler so that
repeated imports or CLI invocations never duplicate output. The CLI flags
``--verbose`` and ``--quiet`` map onto levels through :func:`set_verbosity`.
"""

import logging
import sys
from typing import Optional

ROOT_LOGGER_NAME = "schedgraph"
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_ROOT_LOGGER_CONFIGURED = False


def _root() -> logging.Logger:
    return logging.getLogger(ROOT_LOGGER_NAME)


def setup_root_logger(
    level: int = logging.INFO,
    format_string: Optional[str] = None,
    handler: Optional[logging.Handler] = None,
) -> None:
    """Attach the single handler to the ``schedgraph`` root logger.

    Subsequent calls are no-ops until :func:`reset_logging` is called.

    Args:
        level: Initial level for the root logger.
        format_string: Record format; defaults to :data:`DEFAULT_FORMAT`.
        handler: Handler to install; defaults to a stdout stream handler.
    """
    global _ROOT_LOGGER_CONFIGURED

    if _ROOT_LOGGER_CONFIGURED:
        return

    target = handler if handler is not None else logging.StreamHandler(sys.stdout)
    target.setFormatter(logging.Formatter(format_string or DEFAULT_FORMAT))

    root_logger = _root()
    root_logger.handlers[:] = [target]
    root_logger.setLevel(level)
    # Propagate so pytest's caplog sees records.
    root_logger.propagate = True

    _ROOT_LOGGER_CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    """Return a logger that inherits the ``schedgraph`` root configuration.

    Args:
        name: Logger name, normally ``__name__`` of the calling module.

    Returns:
        Logger with level NOTSET so the root level applies.
    """
    setup_root_logger()
    logger = logging.getLogger(name)
    logger.setLevel(logging.NOTSET)
    return logger


def set_global_log_level(level: int) -> None:
    """Set the level of the root logger and its handlers."""
    setup_root_logger()
    root_logger = _root()
    root_logger.setLevel(level)
    for handler in root_logger.handlers:
        handler.setLevel(level)


def set_verbosity(verbose: bool = False, quiet: bool = False) -> int:
    """Apply the CLI verbosity flags and return the resulting level.

    ``verbose`` wins over ``quiet``: DEBUG, then WARNING, else INFO.
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO
    set_global_log_level(level)
    return level


def enable_debug_logging() -> None:
    set_verbosity(verbose=True)


def disable_debug_logging() -> None:
    set_verbosity()


def reset_logging() -> None:
    """Drop the root handler and forget the configured state (used by tests)."""
    global _ROOT_LOGGER_CONFIGURED
    _ROOT_LOGGER_CONFIGURED = False

    root_logger = _root()
    root_logger.handlers.clear()
    root_logger.setLevel(logging.NOTSET)


setup_root_logger()
