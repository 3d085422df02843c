"""Rich terminal output."""
from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

console = Console()
err_console = Console(stderr=True)


class Display:
    def __init__(self) -> None:
        self.console = console
        self.err_console = err_console

    def show_results(self, lines: list[str]) -> None:
        for line in lines:
            self.console.print(line, markup=False, highlight=False, soft_wrap=True)

    def show_error(self, error: Exception) -> None:
        self.err_console.print(str(error), style="red", markup=False, highlight=False, soft_wrap=True)


def configure_logging(level: str | int) -> None:
    """Send the package's log records to stderr through rich."""
    package_logger = logging.getLogger("dicexp")
    package_logger.setLevel(level.upper() if isinstance(level, str) else level)
    if not any(isinstance(h, RichHandler) for h in package_logger.handlers):
        package_logger.addHandler(RichHandler(console=err_console, show_path=False))
