"""
Console and file logging for seqinfo.

Log lines go to stderr through a rich Console so stdout stays reserved for
the report itself.
"""

from __future__ import annotations

import threading
from datetime import datetime
from pathlib import Path

from rich.console import Console
from rich.markup import escape


class SimpleLogger:
    """Simple logger that writes to console and file."""

    def __init__(self, log_file: Path | None = None, console: Console | None = None) -> None:
        self.log_file = log_file
        self.console = console or Console(stderr=True, highlight=False)
        self._file_lock = threading.Lock()

        if self.log_file:
            self.log_file.parent.mkdir(parents=True, exist_ok=True)
            with open(self.log_file, "a", encoding="utf-8") as f:
                f.write(f"\n{'=' * 60}\n")
                f.write(f"Session started: {datetime.now().isoformat()}\n")
                f.write(f"{'=' * 60}\n")

    def log(self, message: str, prefix: str = "", style: str | None = None) -> None:
        """Log a message to console and file.

        Args:
            message: The message to log
            prefix: Optional prefix like [INFO], [ERROR], etc.
            style: Rich style for the console line
        """
        formatted = f"{prefix} {message}" if prefix else message
        self.console.print(escape(formatted), style=style, soft_wrap=True)

        if self.log_file:
            timestamp = datetime.now().strftime("%H:%M:%S")
            with self._file_lock, open(self.log_file, "a", encoding="utf-8") as f:
                f.write(f"[{timestamp}] {formatted}\n")

    def success(self, message: str) -> None:
        """Log a success message."""
        self.log(message, prefix="[SUCCESS]", style="green")

    def error(self, message: str) -> None:
        """Log an error message."""
        self.log(message, prefix="[ERROR]", style="bold red")

    def warning(self, message: str) -> None:
        """Log a warning message."""
        self.log(message, prefix="[WARNING]", style="yellow")

    def info(self, message: str) -> None:
        """Log an info message."""
        self.log(message, prefix="[INFO]")
