from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

# stdout carries protocol frames; everything human-readable goes to stderr
err_console = Console(stderr=True)

_configured = False


def configure_logging(level: str | int = "INFO") -> None:
    global _configured
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root = logging.getLogger("toolhost")
    root.setLevel(level)
    if _configured:
        return
    handler = RichHandler(console=err_console, show_path=False, rich_tracebacks=True)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    root.addHandler(handler)
    root.propagate = False
    _configured = True
