"""HTTP client that turns a RequestConfig into one round trip.

Basic usage:

    from minicurl import HttpClient, RequestConfig

    with HttpClient() as client:
        response = client.get("https://example.com")
        print(response.status_code, response.body)

        config = (
            RequestConfig.for_url("https://example.com/api")
            .with_method("POST")
            .header("Content-Type", "application/json")
            .with_body('{"name": "test"}')
        )
        response = client.execute(config)
"""

from __future__ import annotations

import logging
from typing import Any

from . import __version__
from ._debug import DebugOutput
from .config import HttpMethod, RequestConfig
from .headers import validate_header
from .models import InvalidUrl, Response
from .output import write_output_file
from .transport import HttpxTransport, Transport

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = f"minicurl/{__version__}"


class HttpClient:
    """Executes request configs against a shared, connection-reusing transport.

    A single instance may be used from many threads at once; the underlying
    connection pool handles its own synchronization.

    Args:
        transport: Transport to use (an ``HttpxTransport`` is created if None).
        max_redirects: Maximum number of redirects to follow.
        user_agent: Default User-Agent header, overridable per request.
        debug: Trace writer for verbose requests (stderr if None).
    """

    def __init__(
        self,
        transport: Transport | None = None,
        *,
        max_redirects: int = 10,
        user_agent: str = DEFAULT_USER_AGENT,
        debug: DebugOutput | None = None,
    ) -> None:
        self._transport = transport or HttpxTransport(
            max_redirects=max_redirects,
            user_agent=user_agent,
        )
        self._debug = debug or DebugOutput()
        self._closed = False

    @property
    def transport(self) -> Transport:
        return self._transport

    @property
    def is_closed(self) -> bool:
        return self._closed

    def execute(self, config: RequestConfig) -> Response:
        """Execute one request.

        Non-2xx responses are returned like any other response. When the
        config names an output file, the response is written there as a side
        effect; the returned Response is unchanged.

        Args:
            config: The request to execute.

        Returns:
            Normalized response.

        Raises:
            InvalidUrl: If the URL is empty. No network call is made.
            InvalidHeader: If a header name or value is malformed. No network
                call is made.
            TransportError: On DNS, connect, TLS, timeout or protocol errors.
            OutputError: If the output file cannot be written.
        """
        if not config.url:
            raise InvalidUrl(config.url)
        for name, value in config.headers:
            validate_header(name, value)

        if config.verbose:
            self._debug.log_request(config, self._transport.request_headers(config))

        logger.debug("%s %s", config.method, config.url)
        response = self._transport.request_sync(config)

        if config.method is HttpMethod.HEAD and (response.body or response.content):
            response = Response(
                status_code=response.status_code,
                status_text=response.status_text,
                headers=response.headers,
                url=response.url,
            )

        if config.verbose:
            self._debug.log_response(response)

        if config.output_file:
            write_output_file(config.output_file, response, config.include_headers)

        return response

    def request(self, method: HttpMethod | str, url: str, **kwargs: Any) -> Response:
        """Build a config from keyword fields and execute it."""
        config = RequestConfig(url=url, method=HttpMethod.parse(method), **kwargs)
        return self.execute(config)

    def get(self, url: str, **kwargs: Any) -> Response:
        return self.request(HttpMethod.GET, url, **kwargs)

    def post(self, url: str, body: str | None = None, **kwargs: Any) -> Response:
        return self.request(HttpMethod.POST, url, body=body, **kwargs)

    def put(self, url: str, body: str | None = None, **kwargs: Any) -> Response:
        return self.request(HttpMethod.PUT, url, body=body, **kwargs)

    def patch(self, url: str, body: str | None = None, **kwargs: Any) -> Response:
        return self.request(HttpMethod.PATCH, url, body=body, **kwargs)

    def delete(self, url: str, **kwargs: Any) -> Response:
        return self.request(HttpMethod.DELETE, url, **kwargs)

    def head(self, url: str, **kwargs: Any) -> Response:
        return self.request(HttpMethod.HEAD, url, **kwargs)

    def close(self) -> None:
        """Close the transport and its connection pool."""
        if not self._closed:
            self._transport.close_sync()
            self._closed = True

    def __enter__(self) -> "HttpClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
