"""Abstract transport protocol for HTTP requests."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Protocol, runtime_checkable

from ..config import RequestConfig
from ..models import Response


@runtime_checkable
class Transport(Protocol):
    """Protocol defining the transport interface.

    Transports handle the actual HTTP communication. One transport instance
    is shared by every call on a client and must be safe for concurrent use.
    """

    def request_sync(self, config: RequestConfig) -> Response:
        """Execute one HTTP round trip.

        Args:
            config: The request to execute. URL and headers are already
                validated by the caller.

        Returns:
            Response object. Non-2xx statuses are returned, not raised.

        Raises:
            TransportError: On connection or transport errors.
        """
        ...

    def request_headers(self, config: RequestConfig) -> list[tuple[str, str]]:
        """Headers that request_sync would send for config."""
        ...

    def close_sync(self) -> None:
        """Release pooled connections."""
        ...


class BaseTransport(ABC):
    """Abstract base class for transport implementations."""

    def __init__(self, max_redirects: int = 10, user_agent: str | None = None):
        """Initialize transport.

        Args:
            max_redirects: Maximum number of redirects to follow.
            user_agent: Default User-Agent header.
        """
        self._max_redirects = max_redirects
        self._user_agent = user_agent
        self._closed = False

    @property
    def is_closed(self) -> bool:
        """Check if transport has been closed."""
        return self._closed

    @abstractmethod
    def request_sync(self, config: RequestConfig) -> Response:
        """Execute one HTTP round trip."""
        raise NotImplementedError

    def close_sync(self) -> None:
        """Close synchronous resources."""
        self._closed = True

    def __enter__(self) -> "BaseTransport":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close_sync()
