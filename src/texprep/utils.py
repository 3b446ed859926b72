"""Shared utilities."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler


def configure_logging(verbosity: int = 0, console: Console | None = None) -> None:
    """Route library logging through Rich. 0 = warnings, 1 = info, 2+ = debug."""
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        show_time=False,
        markup=False,
    )
    root = logging.getLogger("texprep")
    root.handlers[:] = [handler]
    root.setLevel(level)


def fmt_dims(width: int, height: int) -> str:
    return f"{width}x{height}"


def fmt_list(items: tuple[str, ...] | list[str]) -> str:
    """Comma-joined list, or a dash when empty."""
    return ", ".join(items) if items else "-"
