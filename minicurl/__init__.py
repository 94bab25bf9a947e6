"""Command-line HTTP request tool with sequential and parallel batch execution.

This package provides:

- An immutable, builder-style request configuration
- A connection-reusing HTTP client built on httpx
- Sequential and parallel multi-URL execution with input-ordered output
- A curl-style command-line interface

Basic usage:

    from minicurl import HttpClient, RequestConfig

    with HttpClient() as client:
        response = client.execute(RequestConfig.for_url("https://example.com"))
        print(response.status_code, response.get_header("Content-Type"))

    # Batch operations
    from minicurl import Executor, ExecutorConfig

    settings = ExecutorConfig(parallel=True)
    with HttpClient() as client:
        batch = Executor(client, settings).run(["https://example.com/1", "https://example.com/2"])
        print(batch.success)
"""

import logging

__version__ = "0.1.0"

from .config import ExecutorConfig, HttpMethod, RequestConfig
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
from .headers import parse_header, validate_header
from .client import HttpClient
from .executor import Executor

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Client and executor
    "HttpClient",
    "Executor",
    # Configuration
    "HttpMethod",
    "RequestConfig",
    "ExecutorConfig",
    # Models
    "Response",
    "ExecutionOutcome",
    "BatchResult",
    # Headers
    "parse_header",
    "validate_header",
    # Exceptions
    "CurlError",
    "InvalidUrl",
    "InvalidHeader",
    "TransportError",
    "OutputError",
    "WorkerCrashed",
    # Version
    "__version__",
]
