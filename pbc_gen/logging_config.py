"""Logging setup shared by every pbc_gen module.

Modules obtain their logger through ``get_logger(__name__)``; the CLI calls
``setup_logging`` once to attach a rich handler to the package logger.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

PACKAGE_LOGGER = "pbc_gen"


def get_logger(name: str) -> logging.Logger:
    """Return a logger in the pbc_gen hierarchy.

    Args:
        name: Usually the calling module's ``__name__``.

    Returns:
        Logger whose records propagate to the package logger.
    """
    if name != PACKAGE_LOGGER and not name.startswith(PACKAGE_LOGGER + "."):
        name = f"{PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name)


def setup_logging(verbose: bool = False, console: Console | None = None) -> logging.Logger:
    """Attach a RichHandler to the package logger.

    Calling this more than once replaces the previous handler instead of
    stacking duplicates.

    Args:
        verbose: Log at DEBUG instead of INFO.
        console: Console to write to; defaults to stderr.

    Returns:
        The configured package logger.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    level = logging.DEBUG if verbose else logging.INFO

    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_time=verbose,
        show_path=verbose,
        markup=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(level)
    return logger
