"""Rich consoles and logging setup for the CLI layer.

Two consoles are used: ``console`` (stderr) carries progress messages,
log records and errors; ``output`` (stdout) carries command results
such as image tables, so they can be piped.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

from pvsadm.exceptions import InvalidOptionError

LOG_LEVELS: tuple[str, ...] = ("DEBUG", "INFO", "WARNING", "ERROR")

console = Console(stderr=True)
output = Console()


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Route the ``pvsadm`` logger through a Rich handler on stderr.

    Calling this more than once replaces the previous handler.
    """
    normalized = level.upper()
    if normalized not in LOG_LEVELS:
        raise InvalidOptionError(
            f"Invalid log level: {level}",
            hint=f"Allowable values are [{', '.join(LOG_LEVELS)}]",
        )

    handler = RichHandler(
        console=console,
        show_path=False,
        markup=False,
        rich_tracebacks=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))

    logger = logging.getLogger("pvsadm")
    for existing in list(logger.handlers):
        logger.removeHandler(existing)
    logger.addHandler(handler)
    logger.setLevel(normalized)
    logger.propagate = False
    return logger
