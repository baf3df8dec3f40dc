"""Terminal output, logging setup and process termination."""

from __future__ import annotations

import logging
import sys
from typing import Any, NoReturn

from rich.console import Console
from rich.json import JSON
from rich.logging import RichHandler

console = Console()
err_console = Console(stderr=True)


def die(message: str, code: int = 1) -> NoReturn:
    """Print ``message`` to stderr and exit with ``code``."""
    err_console.print(message, markup=False, highlight=False, soft_wrap=True)
    sys.exit(code)


def say(message: str) -> None:
    """Print ``message`` to stdout exactly as given, on one line."""
    console.print(message, markup=False, highlight=False, soft_wrap=True)


def say_json(data: Any) -> None:
    """Print ``data`` as indented JSON without line wrapping."""
    console.print(JSON.from_data(data, indent=2), soft_wrap=True)


def setup_logging(verbose: bool = False) -> None:
    """Send package logs to stderr through rich."""
    logger = logging.getLogger("streamadm")
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)

    if not any(isinstance(handler, RichHandler) for handler in logger.handlers):
        handler = RichHandler(console=err_console, show_path=False)
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
