"""Shared terminal console and logging setup."""

import logging

from rich.console import Console
from rich.logging import RichHandler

console = Console()
err_console = Console(stderr=True)


def setup_logging(debug: bool = False) -> None:
    """Route library logging through rich.

    DEBUG when debug is set, WARNING otherwise.
    """
    level = logging.DEBUG if debug else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=debug)],
        force=True,
    )
