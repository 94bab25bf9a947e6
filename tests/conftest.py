"""Shared test fixtures and configuration."""

import io
from typing import Callable, Generator
from unittest.mock import MagicMock

import httpx
import pytest

from minicurl import (
    BatchResult,
    ExecutionOutcome,
    ExecutorConfig,
    HttpClient,
    RequestConfig,
    Response,
)
from minicurl._debug import DebugOutput
from minicurl.transport import HttpxTransport


# ============== Configuration Fixtures ==============

@pytest.fixture
def default_settings() -> ExecutorConfig:
    """Default executor settings (sequential)."""
    return ExecutorConfig()


@pytest.fixture
def parallel_settings() -> ExecutorConfig:
    """Executor settings with parallel fan-out."""
    return ExecutorConfig(parallel=True)


@pytest.fixture
def sample_config() -> RequestConfig:
    """Sample GET request config."""
    return RequestConfig.for_url("https://example.com/api/test").header(
        "Accept", "application/json"
    )


# ============== Response Fixtures ==============

@pytest.fixture
def sample_response() -> Response:
    """Sample successful response."""
    return Response(
        status_code=200,
        status_text="OK",
        headers={"content-type": "text/plain"},
        body="Hello, World!",
        content=b"Hello, World!",
        url="https://example.com/",
    )


@pytest.fixture
def error_response() -> Response:
    """Sample server error response."""
    return Response(
        status_code=500,
        status_text="Internal Server Error",
        headers={"content-type": "text/plain"},
        body="Internal Server Error",
        content=b"Internal Server Error",
        url="https://example.com/",
    )


# ============== Mock Fixtures ==============

@pytest.fixture
def mock_transport(sample_response: Response) -> MagicMock:
    """Mock transport for testing without network."""
    transport = MagicMock(spec=HttpxTransport)
    transport.is_closed = False
    transport.request_sync.return_value = sample_response
    transport.request_headers.side_effect = lambda config: list(config.headers)
    return transport


@pytest.fixture
def debug_stream() -> io.StringIO:
    """Captures verbose trace output."""
    return io.StringIO()


@pytest.fixture
def client(mock_transport: MagicMock, debug_stream: io.StringIO) -> Generator[HttpClient, None, None]:
    """HttpClient with mocked transport."""
    client = HttpClient(transport=mock_transport, debug=DebugOutput(debug_stream))
    yield client
    client.close()


@pytest.fixture
def make_http_client() -> Generator[Callable[..., HttpClient], None, None]:
    """Factory for a real HttpxTransport routed to an httpx.MockTransport handler."""
    clients: list[HttpClient] = []

    def factory(handler: Callable[[httpx.Request], httpx.Response], **kwargs) -> HttpClient:
        transport = HttpxTransport(
            max_redirects=kwargs.pop("max_redirects", 10),
            user_agent=kwargs.pop("user_agent", "minicurl/0.1.0"),
            backend=httpx.MockTransport(handler),
        )
        client = HttpClient(transport=transport, **kwargs)
        clients.append(client)
        return client

    yield factory
    for client in clients:
        client.close()


# ============== Presenter Fixtures ==============

class RecordingPresenter:
    """Presenter that records every call in order."""

    def __init__(self) -> None:
        self.presented: list[tuple[ExecutionOutcome, bool, bool]] = []
        self.warnings: list[str] = []
        self.summaries: list[BatchResult] = []

    def present(self, outcome: ExecutionOutcome, labeled: bool = False, to_file: bool = False) -> None:
        self.presented.append((outcome, labeled, to_file))

    def warn(self, message: str) -> None:
        self.warnings.append(message)

    def summarize(self, batch: BatchResult) -> None:
        self.summaries.append(batch)

    @property
    def urls(self) -> list[str]:
        return [outcome.url for outcome, _, _ in self.presented]


@pytest.fixture
def presenter() -> RecordingPresenter:
    return RecordingPresenter()


# ============== URL Fixtures ==============

@pytest.fixture
def test_urls() -> list[str]:
    """List of test URLs."""
    return [
        "https://example.com/a",
        "https://example.com/b",
        "https://example.com/c",
    ]
