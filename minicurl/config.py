"""Request and executor configuration dataclasses."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterable

DEFAULT_TIMEOUT = 30.0


class HttpMethod(str, Enum):
    """HTTP methods supported by minicurl."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    HEAD = "HEAD"
    PATCH = "PATCH"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, method: "str | HttpMethod") -> "HttpMethod":
        """Case-insensitive lookup by name.

        Raises:
            ValueError: If the method is not supported.
        """
        if isinstance(method, cls):
            return method
        try:
            return cls(method.upper())
        except ValueError:
            raise ValueError(f"Unknown HTTP method: {method}") from None

    @property
    def allows_body(self) -> bool:
        return self is not HttpMethod.HEAD


@dataclass(frozen=True)
class RequestConfig:
    """Description of a single HTTP request.

    Instances are immutable; every builder method returns a new config, so a
    config handed to a worker can never change underneath it.

    Attributes:
        url: Request URL. Checked for emptiness at execution time.
        method: HTTP method.
        headers: Ordered (name, value) pairs. Duplicates are all sent.
        body: Request body, attached only when set.
        timeout: Request timeout in seconds, None to disable.
        follow_redirects: Whether to follow HTTP redirects.
        compression: Whether to request an encoded (compressed) transfer.
        verbose: Whether to trace the exchange on the diagnostic stream.
        output_file: Path the response is written to, if any.
        include_headers: Whether the output file starts with the header block.
    """

    url: str = ""
    method: HttpMethod = HttpMethod.GET
    headers: tuple[tuple[str, str], ...] = ()
    body: str | None = None
    timeout: float | None = DEFAULT_TIMEOUT
    follow_redirects: bool = True
    compression: bool = True
    verbose: bool = False
    output_file: str | None = None
    include_headers: bool = False

    @classmethod
    def for_url(cls, url: str) -> "RequestConfig":
        return cls(url=url)

    def with_url(self, url: str) -> "RequestConfig":
        return replace(self, url=url)

    def with_method(self, method: "HttpMethod | str") -> "RequestConfig":
        return replace(self, method=HttpMethod.parse(method))

    def header(self, name: str, value: str) -> "RequestConfig":
        """Append a header."""
        return replace(self, headers=self.headers + ((name, value),))

    def with_headers(self, headers: Iterable[tuple[str, str]]) -> "RequestConfig":
        """Append several headers, keeping their order."""
        return replace(self, headers=self.headers + tuple(headers))

    def with_body(self, body: str | None) -> "RequestConfig":
        return replace(self, body=body)

    def with_timeout(self, timeout: float | None) -> "RequestConfig":
        return replace(self, timeout=timeout)

    def with_follow_redirects(self, follow: bool) -> "RequestConfig":
        return replace(self, follow_redirects=follow)

    def with_compression(self, compression: bool) -> "RequestConfig":
        return replace(self, compression=compression)

    def with_verbose(self, verbose: bool) -> "RequestConfig":
        return replace(self, verbose=verbose)

    def with_output_file(self, path: str | None) -> "RequestConfig":
        return replace(self, output_file=path)

    def with_include_headers(self, include: bool) -> "RequestConfig":
        return replace(self, include_headers=include)


@dataclass(frozen=True)
class ExecutorConfig:
    """Settings shared by every URL of one invocation.

    Attributes:
        method: HTTP method for every request.
        headers: Ordered (name, value) pairs sent with every request.
        body: Request body sent with every request.
        timeout: Per-request timeout in seconds.
        follow_redirects: Whether to follow HTTP redirects.
        max_redirects: Maximum number of redirects to follow.
        compression: Whether to request compressed transfers.
        verbose: Trace exchanges and report timings on stderr.
        include_headers: Print the response header block before the body.
        head_only: Send HEAD and print only the header block.
        output_file: Write the response to this path (single URL only).
        silent: Suppress error messages.
        parallel: Run all URLs concurrently.
    """

    method: HttpMethod = HttpMethod.GET
    headers: tuple[tuple[str, str], ...] = ()
    body: str | None = None
    timeout: float | None = DEFAULT_TIMEOUT
    follow_redirects: bool = True
    max_redirects: int = 10
    compression: bool = True
    verbose: bool = False
    include_headers: bool = False
    head_only: bool = False
    output_file: str | None = None
    silent: bool = False
    parallel: bool = False

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be > 0")
        if self.max_redirects < 0:
            raise ValueError("max_redirects must be >= 0")

    @property
    def effective_method(self) -> HttpMethod:
        return HttpMethod.HEAD if self.head_only else self.method

    def request_for(self, url: str, write_output: bool = False) -> RequestConfig:
        """Build the request config for one URL.

        Args:
            url: Target URL.
            write_output: Attach the output file. Callers pass True only
                when a single URL is being processed.
        """
        return RequestConfig(
            url=url,
            method=self.effective_method,
            headers=self.headers,
            body=self.body,
            timeout=self.timeout,
            follow_redirects=self.follow_redirects,
            compression=self.compression,
            verbose=self.verbose,
            output_file=self.output_file if write_output else None,
            include_headers=self.include_headers or self.head_only,
        )
