"""
Line-oriented scan output.

Every event goes to the rich console and, when a log file is configured,
to an append-only file with a timestamp prefix. Both writes happen under
one lock so lines from different workers never interleave mid-line.
"""

import threading
from datetime import datetime
from pathlib import Path
from typing import Optional, TextIO

from rich.console import Console


class ScanLog:
    """Thread-safe sink for scan output lines."""

    def __init__(
        self,
        console: Optional[Console] = None,
        log_file: Optional[Path] = None,
        verbose: bool = False,
    ):
        self.console = console or Console(highlight=False)
        self.verbose = verbose
        self.log_path = Path(log_file) if log_file else None
        self._file: Optional[TextIO] = None
        self._lock = threading.Lock()

        if self.log_path:
            self.log_path.parent.mkdir(parents=True, exist_ok=True)
            self._file = open(self.log_path, "a", encoding="utf-8")

    def line(
        self,
        message: str,
        style: Optional[str] = None,
        console: bool = True,
        persist: bool = True,
    ) -> None:
        """
        Emit one line.

        Args:
            message: Text to write, printed without markup processing
            style: Optional rich style for the console
            console: Write to the terminal
            persist: Mirror to the log file if one is open
        """
        with self._lock:
            if console:
                self.console.print(message, style=style, markup=False, highlight=False)
            if persist and self._file is not None:
                stamp = datetime.now().strftime("%Y/%m/%d %H:%M:%S")
                self._file.write(f"{stamp} {message}\n")
                self._file.flush()

    def debug(self, message: str, persist: bool = False) -> None:
        """Diagnostic line shown only in verbose mode."""
        if self.verbose:
            self.line(message, style="dim", persist=persist)
        elif persist:
            self.line(message, console=False)

    def close(self) -> None:
        with self._lock:
            if self._file is not None:
                self._file.close()
                self._file = None

    def __enter__(self) -> "ScanLog":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
