"""
Logging for indelctx.

Modules log through ``logging.getLogger(__name__)``, so every logger sits
under the ``indelctx`` package logger. ``setup_logging`` attaches a rich
handler (stderr) and an optional file handler to that package logger only,
leaving the root logger of a host application alone.
"""

import logging
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from functools import wraps
from typing import Any

from rich.console import Console
from rich.logging import RichHandler

__all__ = ["PACKAGE_LOGGER", "setup_logging", "timed", "log_call"]

PACKAGE_LOGGER = "indelctx"

# stdout is kept for command output
_console = Console(stderr=True)

# Handlers installed by the last setup_logging call
_installed_handlers: list[logging.Handler] = []


def setup_logging(verbose: bool = False, log_file: str | None = None) -> logging.Logger:
    """
    Route indelctx log records to the console and, optionally, a file.

    Calling it again replaces the handlers of the previous call.

    Args:
        verbose: DEBUG level (with source paths) instead of INFO.
        log_file: Also append records to this file.

    Returns:
        The configured package logger.
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in _installed_handlers:
        package_logger.removeHandler(handler)
        handler.close()
    _installed_handlers.clear()

    console_handler = RichHandler(
        console=_console,
        rich_tracebacks=True,
        markup=True,
        show_path=verbose,
        log_time_format="[%X]",
    )
    _installed_handlers.append(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)-8s %(name)s: %(message)s")
        )
        _installed_handlers.append(file_handler)

    for handler in _installed_handlers:
        package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    return package_logger


@contextmanager
def timed(operation: str, logger: logging.Logger | None = None) -> Iterator[None]:
    """
    Log the wall time of a block at DEBUG.

    Example:
        with timed("Fetching downstream flanks for 12 1bp deletion(s)", logger):
            flanks = FlankKernel.fetch_downstream(variants, lengths, reference)
    """
    log = logger or logging.getLogger(PACKAGE_LOGGER)
    start = time.perf_counter()
    try:
        yield
    finally:
        log.debug("%s took %.3fs", operation, time.perf_counter() - start)


def log_call(logger: logging.Logger | None = None) -> Callable:
    """
    Decorator logging entry, duration and failure of a function.

    Failures are logged at ERROR and re-raised.
    """

    def decorator(func: Callable) -> Callable:
        log = logger or logging.getLogger(func.__module__)

        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            log.debug("Calling %s", func.__qualname__)
            start = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                log.error("%s failed: %s", func.__qualname__, e)
                raise
            log.debug("%s returned in %.3fs", func.__qualname__, time.perf_counter() - start)
            return result

        return wrapper

    return decorator
