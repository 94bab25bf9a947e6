"""Transport layer implementations."""

from .base import BaseTransport, Transport
from .httpx_transport import HttpxTransport

__all__ = ["Transport", "BaseTransport", "HttpxTransport"]
