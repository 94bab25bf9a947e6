"""Response, outcome and error models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable


@dataclass(frozen=True)
class Response:
    """Normalized HTTP response.

    Attributes:
        status_code: HTTP status code.
        status_text: Canonical reason phrase for the status code.
        headers: Response headers keyed by lower-cased name.
        body: Decoded response body ("" for HEAD).
        content: Exact response body bytes (b"" for HEAD).
        url: Final URL after redirects.
    """

    status_code: int
    status_text: str
    headers: dict[str, str] = field(default_factory=dict)
    body: str = ""
    content: bytes = b""
    url: str = ""

    @classmethod
    def from_pairs(
        cls,
        status_code: int,
        status_text: str,
        header_pairs: Iterable[tuple[str, str]],
        body: str = "",
        content: bytes = b"",
        url: str = "",
    ) -> "Response":
        """Build a response from raw header pairs, lower-casing names.

        When the same name appears more than once the last value wins.
        """
        headers: dict[str, str] = {}
        for name, value in header_pairs:
            headers[name.lower()] = value
        return cls(
            status_code=status_code,
            status_text=status_text,
            headers=headers,
            body=body,
            content=content,
            url=url,
        )

    @property
    def is_success(self) -> bool:
        """Check if status code indicates success (2xx)."""
        return 200 <= self.status_code < 300

    def get_header(self, name: str) -> str | None:
        """Case-insensitive header lookup."""
        return self.headers.get(name.lower())


class CurlError(Exception):
    """Base exception for request execution errors."""
    pass


class InvalidUrl(CurlError):
    """URL is empty or missing."""

    def __init__(self, url: str = ""):
        super().__init__(url)
        self.url = url


class InvalidHeader(CurlError):
    """Header could not be parsed or was rejected as malformed.

    ``reason`` is one of "syntax" (no colon in a ``Name: Value`` string),
    "name" (not a valid token) or "value" (control characters or non-ASCII).
    """

    def __init__(self, name: str, value: str | None = None, reason: str = "syntax"):
        super().__init__(name, value, reason)
        self.name = name
        self.value = value
        self.reason = reason


class TransportError(CurlError):
    """Error during HTTP transport (DNS, connect, TLS, timeout, protocol)."""

    def __init__(
        self,
        url: str,
        kind: str = "transport",
        original_error: Exception | None = None,
    ):
        super().__init__(url, kind)
        self.url = url
        self.kind = kind
        self.original_error = original_error

    @property
    def timed_out(self) -> bool:
        return self.kind == "timeout"


class OutputError(CurlError):
    """Local failure creating or writing the output file."""

    def __init__(self, path: str, original_error: Exception | None = None):
        super().__init__(path)
        self.path = path
        self.original_error = original_error


class WorkerCrashed(CurlError):
    """Unexpected exception raised inside a parallel worker."""

    def __init__(self, url: str, original_error: BaseException | None = None):
        super().__init__(url)
        self.url = url
        self.original_error = original_error


@dataclass(frozen=True)
class ExecutionOutcome:
    """Result of executing one URL of a batch.

    Attributes:
        index: Position of the URL in the input list.
        url: The requested URL.
        elapsed: Wall-clock duration of the call in seconds.
        response: Response if the call completed.
        error: Error if the call failed.
    """

    index: int
    url: str
    elapsed: float = 0.0
    response: Response | None = None
    error: CurlError | None = None

    @property
    def ok(self) -> bool:
        return self.response is not None and self.response.is_success


@dataclass(frozen=True)
class BatchResult:
    """Outcomes of a batch run, in input order.

    Attributes:
        outcomes: One outcome per input URL, ordered by index.
        elapsed: Total wall-clock time for the batch in seconds.
    """

    outcomes: list[ExecutionOutcome]
    elapsed: float = 0.0

    @property
    def success(self) -> bool:
        """True only if every request completed with a 2xx status."""
        return all(outcome.ok for outcome in self.outcomes)

    @property
    def failures(self) -> list[ExecutionOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.ok]
