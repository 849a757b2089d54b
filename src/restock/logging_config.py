"""Logging setup for the Restock CLI."""

import logging
import os

from rich.console import Console
from rich.logging import RichHandler

LOG_FORMAT = "%(name)s: %(message)s"

_configured = False


def configure_logging(verbose: bool = False) -> None:
    """Configure application-wide logging once.

    Log records go to stderr through rich so they never mix with ``--json``
    output on stdout. The level comes from ``--verbose`` or the
    ``RESTOCK_LOG_LEVEL`` environment variable, WARNING otherwise.
    """
    global _configured
    if _configured:
        return

    if verbose:
        level = logging.DEBUG
    else:
        level_name = os.getenv("RESTOCK_LOG_LEVEL", "WARNING").upper()
        level = getattr(logging, level_name, logging.WARNING)

    handler = RichHandler(console=Console(stderr=True), show_path=False)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root = logging.getLogger("restock")
    root.setLevel(level)
    root.addHandler(handler)

    _configured = True
