"""Response presentation: header blocks, output files and console output."""

from __future__ import annotations

import logging
from typing import TextIO

import click

from .config import ExecutorConfig
from .models import (
    BatchResult,
    CurlError,
    ExecutionOutcome,
    InvalidHeader,
    InvalidUrl,
    OutputError,
    Response,
    TransportError,
    WorkerCrashed,
)

logger = logging.getLogger(__name__)


def format_status_line(response: Response) -> str:
    return f"HTTP/1.1 {response.status_code} {response.status_text}"


def format_header_block(response: Response) -> str:
    """Status line, one ``name: value`` line per header, then a blank line."""
    lines = [format_status_line(response)]
    lines.extend(f"{name}: {value}" for name, value in response.headers.items())
    return "\n".join(lines) + "\n\n"


def write_output_file(path: str, response: Response, include_headers: bool = False) -> None:
    """Write the response body (and optionally its header block) to a file.

    The body is written as the exact bytes received.

    Raises:
        OutputError: If the file cannot be created or written.
    """
    try:
        with open(path, "wb") as f:
            if include_headers:
                f.write(format_header_block(response).encode("utf-8"))
            f.write(response.content)
    except OSError as e:
        raise OutputError(path, original_error=e) from e
    logger.debug("Wrote %d bytes to %s", len(response.content), path)


def describe_error(error: BaseException) -> str:
    """Render a human readable message for an execution error."""
    if isinstance(error, InvalidUrl):
        if not error.url:
            return "Invalid URL: URL cannot be empty"
        return f"Invalid URL: {error.url}"

    if isinstance(error, InvalidHeader):
        if error.reason == "name":
            return f"Invalid header name: {error.name!r}"
        if error.reason == "value":
            return f"Invalid header value for {error.name}: {error.value!r}"
        return f"Header must be in format 'Key: Value', got: {error.name!r}"

    if isinstance(error, TransportError):
        cause = error.original_error
        if error.kind == "timeout":
            return f"Request timed out: {error.url}"
        if error.kind == "connect":
            return f"Failed to connect to {error.url}: {cause}"
        if error.kind == "redirect":
            return f"Too many redirects: {error.url}"
        if cause is None:
            return f"HTTP request failed: {error.url}"
        return f"HTTP request failed: {cause}"

    if isinstance(error, OutputError):
        cause = error.original_error
        reason = getattr(cause, "strerror", None) or cause
        return f"Failed to write {error.path}: {reason}"

    if isinstance(error, WorkerCrashed):
        cause = error.original_error
        return f"Worker for {error.url} crashed: {type(cause).__name__}: {cause}"

    if isinstance(error, CurlError):
        return f"Request failed: {error}"

    return f"{type(error).__name__}: {error}"


class ConsolePresenter:
    """Prints execution outcomes to stdout and diagnostics to stderr.

    Args:
        settings: Invocation settings (header echo, head-only, silent, verbose).
        out: Stream for response output (defaults to stdout).
        err: Stream for diagnostics (defaults to stderr).
    """

    def __init__(
        self,
        settings: ExecutorConfig,
        out: TextIO | None = None,
        err: TextIO | None = None,
    ) -> None:
        self._settings = settings
        self._out = out
        self._err = err

    def _echo(self, message: str = "", nl: bool = True) -> None:
        click.echo(message, file=self._out, nl=nl)

    def _echo_err(self, message: str) -> None:
        click.echo(message, file=self._err, err=True)

    def error(self, message: str) -> None:
        if not self._settings.silent:
            self._echo_err(f"minicurl: {message}")

    def warn(self, message: str) -> None:
        if not self._settings.silent:
            self._echo_err(f"minicurl: warning: {message}")

    def present(
        self,
        outcome: ExecutionOutcome,
        labeled: bool = False,
        to_file: bool = False,
    ) -> None:
        """Print one URL's result.

        Args:
            outcome: The outcome to print.
            labeled: Prefix the section with the URL.
            to_file: The response went to the output file, so nothing but
                diagnostics is printed.
        """
        settings = self._settings
        if labeled:
            self._echo(f"==> {outcome.url} <==")

        if outcome.error is not None:
            self.error(describe_error(outcome.error))
        elif outcome.response is not None and not to_file:
            response = outcome.response
            if settings.include_headers or settings.head_only:
                self._echo(format_header_block(response), nl=False)
            if not settings.head_only and response.body:
                self._echo(response.body, nl=False)
                if labeled and not response.body.endswith("\n"):
                    self._echo()

        if settings.verbose:
            self._echo_err(f"* {outcome.url}: {outcome.elapsed:.3f}s")

    def summarize(self, batch: BatchResult) -> None:
        """Report the total batch wall-clock time in verbose parallel mode."""
        if self._settings.verbose and self._settings.parallel:
            self._echo_err(
                f"* {len(batch.outcomes)} request(s) completed in {batch.elapsed:.3f}s"
            )
