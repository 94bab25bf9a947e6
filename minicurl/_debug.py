"""Verbose mode trace output."""

from __future__ import annotations

import sys
import threading
from typing import TYPE_CHECKING, Iterable, TextIO

if TYPE_CHECKING:
    from .config import RequestConfig
    from .models import Response


class DebugOutput:
    """Writes curl-style request/response traces to a diagnostic stream.

    Each trace block is written in one call under a lock, so blocks from
    concurrent workers never interleave line by line.
    """

    def __init__(self, output: TextIO | None = None):
        """Initialize debug output handler.

        Args:
            output: Output stream (defaults to stderr at write time).
        """
        self._output = output
        self._lock = threading.Lock()

    @property
    def output(self) -> TextIO:
        return self._output or sys.stderr

    def _write(self, lines: list[str]) -> None:
        text = "".join(f"{line}\n" for line in lines)
        with self._lock:
            self.output.write(text)
            self.output.flush()

    def log_request(
        self, config: RequestConfig, headers: Iterable[tuple[str, str]] | None = None
    ) -> None:
        """Trace the request line and the headers sent (config headers if None)."""
        lines = [f"> {config.method} {config.url}"]
        for name, value in (config.headers if headers is None else headers):
            lines.append(f"> {name}: {value}")
        lines.append(">")
        self._write(lines)

    def log_response(self, response: Response) -> None:
        """Trace the status line and response headers."""
        lines = [f"< HTTP/1.1 {response.status_code} {response.status_text}"]
        for name, value in response.headers.items():
            lines.append(f"< {name}: {value}")
        lines.append("<")
        self._write(lines)
