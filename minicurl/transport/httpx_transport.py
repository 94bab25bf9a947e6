"""httpx-based transport with a shared connection pool."""

from __future__ import annotations

import logging
import threading
import time

import httpx

from ..config import RequestConfig
from ..models import InvalidUrl, Response, TransportError
from .base import BaseTransport

logger = logging.getLogger(__name__)


def _error_kind(error: httpx.HTTPError) -> str:
    """Classify an httpx error into a transport error kind."""
    if isinstance(error, httpx.TimeoutException):
        return "timeout"
    if isinstance(error, httpx.ConnectError):
        return "connect"
    if isinstance(error, httpx.TooManyRedirects):
        return "redirect"
    if isinstance(error, httpx.ProtocolError):
        return "protocol"
    return "transport"


class HttpxTransport(BaseTransport):
    """Transport backed by a single ``httpx.Client``.

    The client is created lazily on first use and reused for every request
    so that repeated calls to the same host share pooled connections.
    ``httpx.Client`` is safe to share across threads.
    """

    def __init__(
        self,
        max_redirects: int = 10,
        user_agent: str | None = None,
        backend: httpx.BaseTransport | None = None,
    ):
        """Initialize httpx transport.

        Args:
            max_redirects: Maximum number of redirects to follow.
            user_agent: Default User-Agent header.
            backend: Optional httpx transport (e.g. ``httpx.MockTransport``).
        """
        super().__init__(max_redirects=max_redirects, user_agent=user_agent)
        self._backend = backend
        self._sync_client: httpx.Client | None = None
        self._lock = threading.Lock()

    def _get_sync_client(self) -> httpx.Client:
        """Get or create sync client (lazy initialization)."""
        with self._lock:
            if self._sync_client is None:
                headers = {"User-Agent": self._user_agent} if self._user_agent else None
                self._sync_client = httpx.Client(
                    headers=headers,
                    follow_redirects=True,
                    max_redirects=self._max_redirects,
                    transport=self._backend,
                )
                logger.debug("Created connection pool (max_redirects=%d)", self._max_redirects)
            return self._sync_client

    def _build_headers(self, config: RequestConfig) -> list[tuple[str, str]]:
        headers = list(config.headers)
        if not config.compression:
            names = {name.lower() for name, _ in headers}
            if "accept-encoding" not in names:
                headers.append(("Accept-Encoding", "identity"))
        return headers

    def _convert_response(self, httpx_resp: httpx.Response, content: bytes) -> Response:
        """Convert a streamed httpx.Response and its collected body to our Response model."""
        status_text = httpx.codes.get_reason_phrase(httpx_resp.status_code) or "Unknown"
        return Response.from_pairs(
            status_code=httpx_resp.status_code,
            status_text=status_text,
            header_pairs=httpx_resp.headers.multi_items(),
            body=content.decode(httpx_resp.encoding or "utf-8", errors="replace"),
            content=content,
            url=str(httpx_resp.url),
        )

    def request_headers(self, config: RequestConfig) -> list[tuple[str, str]]:
        """Headers httpx would send for config, client defaults included."""
        if self._closed:
            raise TransportError(config.url, kind="transport")
        client = self._get_sync_client()
        try:
            request = client.build_request(
                method=config.method.value,
                url=config.url,
                headers=self._build_headers(config),
                content=self._body(config),
            )
        except httpx.InvalidURL as e:
            raise InvalidUrl(config.url) from e
        encoding = request.headers.encoding
        return [(name.decode(encoding), value.decode(encoding)) for name, value in request.headers.raw]

    @staticmethod
    def _body(config: RequestConfig) -> str | None:
        if config.body is not None and config.method.allows_body:
            return config.body
        return None

    @staticmethod
    def _check_deadline(config: RequestConfig, deadline: float | None) -> None:
        if deadline is not None and time.monotonic() > deadline:
            raise TransportError(config.url, kind="timeout")

    def request_sync(self, config: RequestConfig) -> Response:
        """Execute one HTTP round trip.

        ``config.timeout`` bounds the whole exchange: httpx enforces it on each
        connect/read/write phase, and the body is streamed against a deadline
        so a slowly dripping response is cut off too.

        Args:
            config: The request to execute.

        Returns:
            Response object for any status the server returned.

        Raises:
            InvalidUrl: If httpx rejects the URL as malformed.
            TransportError: On connection, timeout or protocol errors.
        """
        if self._closed:
            raise TransportError(config.url, kind="transport")

        client = self._get_sync_client()
        deadline = None if config.timeout is None else time.monotonic() + config.timeout

        try:
            with client.stream(
                method=config.method.value,
                url=config.url,
                headers=self._build_headers(config),
                content=self._body(config),
                timeout=config.timeout,
                follow_redirects=config.follow_redirects,
            ) as resp:
                self._check_deadline(config, deadline)
                chunks: list[bytes] = []
                for chunk in resp.iter_bytes():
                    chunks.append(chunk)
                    self._check_deadline(config, deadline)
                return self._convert_response(resp, b"".join(chunks))
        except httpx.InvalidURL as e:
            raise InvalidUrl(config.url) from e
        except httpx.HTTPError as e:
            raise TransportError(config.url, kind=_error_kind(e), original_error=e) from e

    def close_sync(self) -> None:
        """Close sync client."""
        with self._lock:
            if self._sync_client is not None:
                self._sync_client.close()
                self._sync_client = None
                logger.debug("Closed connection pool")
        super().close_sync()
