"""Command-line interface.

Examples:
    minicurl https://example.com
    minicurl -X POST -H "Content-Type: application/json" -d '{"name": "test"}' https://api.example.com/data
    minicurl -i -o page.html https://example.com
    minicurl -P https://example.com/a https://example.com/b https://example.com/c
    minicurl -K urls.txt --parallel -v
"""

from __future__ import annotations

import logging
import sys

import click

from . import __version__
from .batch import load_urls
from .client import HttpClient
from .config import ExecutorConfig, HttpMethod
from .executor import Executor
from .headers import parse_header
from .models import InvalidHeader
from .output import ConsolePresenter, describe_error

EXIT_OK = 0
EXIT_USAGE = 2
EXIT_HTTP_ERROR = 22  # curl's "HTTP page not retrieved"

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def setup_logging(level: str = "WARNING") -> logging.Logger:
    """Attach a stderr handler to the package logger.

    Args:
        level: Logging level name.

    Returns:
        The configured package logger.
    """
    logger = logging.getLogger("minicurl")
    logger.setLevel(getattr(logging, level.upper()))
    logger.handlers = [h for h in logger.handlers if isinstance(h, logging.NullHandler)]

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    logger.addHandler(handler)
    return logger


def _parse_headers(raw_headers: tuple[str, ...]) -> tuple[tuple[str, str], ...]:
    headers = []
    for raw in raw_headers:
        try:
            headers.append(parse_header(raw))
        except InvalidHeader as e:
            raise click.BadParameter(describe_error(e), param_hint="'-H' / '--header'") from e
    return tuple(headers)


def _parse_method(method: str) -> HttpMethod:
    try:
        return HttpMethod.parse(method)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="'-X' / '--request'") from e


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("urls", nargs=-1)
@click.option("-X", "--request", "method", default="GET", show_default=True,
              help="HTTP method (GET, POST, PUT, DELETE, HEAD, PATCH)")
@click.option("-d", "--data", help="Request body data")
@click.option("-H", "--header", "raw_headers", multiple=True,
              help="Header in 'Name: Value' format (repeatable)")
@click.option("-L", "--location/--no-location", "follow", default=True,
              help="Follow redirects")
@click.option("--max-redirs", default=10, show_default=True, type=int,
              help="Maximum number of redirects to follow")
@click.option("--compressed/--no-compression", "compression", default=True,
              help="Request a compressed response")
@click.option("-v", "--verbose", is_flag=True, help="Trace requests and responses on stderr")
@click.option("-o", "--output", help="Write the response to FILE (single URL only)")
@click.option("-i", "--include", "include_headers", is_flag=True,
              help="Include response headers in the output")
@click.option("-m", "--max-time", "timeout", default=30.0, show_default=True, type=float,
              help="Maximum time in seconds for each request")
@click.option("-s", "--silent", is_flag=True, help="Don't show error messages")
@click.option("-I", "--head", "head_only", is_flag=True, help="Show only the response headers")
@click.option("-P", "--parallel", is_flag=True, help="Request all URLs concurrently")
@click.option("-K", "--urls-file", type=click.Path(exists=True, dir_okay=False),
              help="Read additional URLs from FILE, one per line")
@click.option("--log-level", default="WARNING", show_default=True,
              type=click.Choice(LOG_LEVELS, case_sensitive=False),
              help="Internal logging level")
@click.version_option(__version__, prog_name="minicurl")
@click.pass_context
def main(ctx: click.Context, urls: tuple[str, ...], method: str, data: str | None,
         raw_headers: tuple[str, ...], follow: bool, max_redirs: int, compression: bool,
         verbose: bool, output: str | None, include_headers: bool, timeout: float,
         silent: bool, head_only: bool, parallel: bool, urls_file: str | None,
         log_level: str) -> None:
    """Issue HTTP requests to one or more URLs.

    Exits 0 when every response is 2xx, 22 when any request fails or
    returns a non-2xx status, and 2 on invalid arguments.
    """
    setup_logging(log_level)

    http_method = _parse_method(method)
    headers = _parse_headers(raw_headers)

    targets = list(urls)
    if urls_file:
        try:
            targets.extend(load_urls(urls_file))
        except (OSError, UnicodeDecodeError) as e:
            raise click.BadParameter(str(e), param_hint="'-K' / '--urls-file'") from e
    if not targets:
        raise click.UsageError("no URL specified")

    try:
        settings = ExecutorConfig(
            method=http_method,
            headers=headers,
            body=data,
            timeout=timeout,
            follow_redirects=follow,
            max_redirects=max_redirs,
            compression=compression,
            verbose=verbose,
            include_headers=include_headers,
            head_only=head_only,
            output_file=output,
            silent=silent,
            parallel=parallel,
        )
    except ValueError as e:
        raise click.UsageError(str(e)) from e

    presenter = ConsolePresenter(settings)
    with HttpClient(max_redirects=settings.max_redirects) as client:
        batch = Executor(client, settings, presenter).run(targets)

    ctx.exit(EXIT_OK if batch.success else EXIT_HTTP_ERROR)
