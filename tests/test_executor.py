"""Tests for sequential and parallel batch execution."""

import threading
import time
from unittest.mock import MagicMock

import httpx
import pytest

from minicurl import (
    BatchResult,
    Executor,
    ExecutorConfig,
    HttpClient,
    HttpMethod,
    InvalidUrl,
    RequestConfig,
    Response,
    TransportError,
    WorkerCrashed,
)
from minicurl.transport import HttpxTransport


def ok_response(url: str, status: int = 200) -> Response:
    return Response(status_code=status, status_text="OK", body=f"body of {url}",
                    content=f"body of {url}".encode(), url=url)


@pytest.fixture
def scripted_transport() -> MagicMock:
    """Transport whose behaviour is scripted per URL via ``transport.script``."""
    transport = MagicMock(spec=HttpxTransport)
    transport.script = {}

    def request_sync(config: RequestConfig) -> Response:
        action = transport.script.get(config.url)
        if isinstance(action, BaseException):
            raise action
        if callable(action):
            return action(config)
        return ok_response(config.url)

    transport.request_sync.side_effect = request_sync
    return transport


@pytest.fixture
def shared_client(scripted_transport: MagicMock) -> HttpClient:
    return HttpClient(transport=scripted_transport)


class TestSequentialExecution:
    """Tests for sequential mode."""

    def test_all_success(self, shared_client, default_settings, presenter, test_urls):
        """Test every URL is executed in order and the batch succeeds."""
        batch = Executor(shared_client, default_settings, presenter).run(test_urls)

        assert isinstance(batch, BatchResult)
        assert batch.success is True
        assert [o.url for o in batch.outcomes] == test_urls
        assert [o.index for o in batch.outcomes] == [0, 1, 2]
        assert presenter.urls == test_urls
        assert presenter.summaries == [batch]

    def test_failure_does_not_stop_batch(self, shared_client, scripted_transport,
                                         default_settings, presenter):
        """Test a failing first URL still lets the second run, in order."""
        scripted_transport.script["A"] = TransportError("A", kind="connect")

        batch = Executor(shared_client, default_settings, presenter).run(["A", "B"])

        assert batch.success is False
        assert presenter.urls == ["A", "B"]
        first, second = batch.outcomes
        assert isinstance(first.error, TransportError)
        assert first.response is None
        assert second.response is not None
        assert second.response.body == "body of B"

    def test_non_2xx_fails_batch(self, shared_client, scripted_transport,
                                 default_settings, presenter):
        """Test an error status is an outcome, not an exception, and fails the batch."""
        scripted_transport.script["B"] = lambda config: ok_response("B", status=404)

        batch = Executor(shared_client, default_settings, presenter).run(["A", "B", "C"])

        assert batch.success is False
        assert batch.outcomes[1].response.status_code == 404
        assert batch.outcomes[1].error is None
        assert [o.ok for o in batch.outcomes] == [True, False, True]

    def test_invalid_url_reported_per_url(self, shared_client, scripted_transport,
                                          default_settings, presenter):
        """Test an empty URL fails only its own entry."""
        batch = Executor(shared_client, default_settings, presenter).run(["", "B"])

        assert isinstance(batch.outcomes[0].error, InvalidUrl)
        assert batch.outcomes[1].ok
        assert scripted_transport.request_sync.call_count == 1

    def test_each_result_presented_before_next_request(self, shared_client,
                                                       scripted_transport, default_settings):
        """Test URL i is presented before URL i+1 is requested."""
        events = []

        def record(config):
            events.append(("request", config.url))
            return ok_response(config.url)

        scripted_transport.script.update({"A": record, "B": record})
        presenter = MagicMock()
        presenter.present.side_effect = lambda outcome, **kwargs: events.append(
            ("present", outcome.url)
        )

        Executor(shared_client, default_settings, presenter).run(["A", "B"])

        assert events == [
            ("request", "A"),
            ("present", "A"),
            ("request", "B"),
            ("present", "B"),
        ]

    def test_label_only_for_multiple_urls(self, shared_client, default_settings, presenter):
        """Test sections are labeled only when several URLs run."""
        Executor(shared_client, default_settings, presenter).run(["A"])
        Executor(shared_client, default_settings, presenter).run(["A", "B"])

        assert [labeled for _, labeled, _ in presenter.presented] == [False, True, True]

    def test_shared_settings_applied(self, shared_client, scripted_transport, presenter):
        """Test every URL receives the shared method, headers and body."""
        settings = ExecutorConfig(
            method=HttpMethod.POST,
            headers=(("X-A", "1"),),
            body="payload",
            timeout=5.0,
            follow_redirects=False,
            compression=False,
        )

        Executor(shared_client, settings, presenter).run(["A", "B"])

        configs = [c.args[0] for c in scripted_transport.request_sync.call_args_list]
        assert [c.url for c in configs] == ["A", "B"]
        for config in configs:
            assert config.method is HttpMethod.POST
            assert config.headers == (("X-A", "1"),)
            assert config.body == "payload"
            assert config.timeout == 5.0
            assert config.follow_redirects is False
            assert config.compression is False

    def test_elapsed_recorded(self, shared_client, scripted_transport,
                              default_settings, presenter):
        """Test per-URL elapsed time is captured."""
        def slow(config):
            time.sleep(0.05)
            return ok_response(config.url)

        scripted_transport.script["A"] = slow

        batch = Executor(shared_client, default_settings, presenter).run(["A"])

        assert batch.outcomes[0].elapsed >= 0.05
        assert batch.elapsed >= batch.outcomes[0].elapsed

    def test_runs_without_presenter(self, shared_client, default_settings):
        """Test results are collected when no presenter is given."""
        batch = Executor(shared_client, default_settings).run(["A", "B"])

        assert batch.success


class TestOutputFileRule:
    """Tests for output file capture across batch sizes."""

    @pytest.mark.parametrize("parallel", [False, True])
    def test_single_url_writes_file(self, shared_client, presenter, tmp_path, parallel):
        """Test one URL writes the output file."""
        path = tmp_path / "out.txt"
        settings = ExecutorConfig(output_file=str(path), parallel=parallel)

        batch = Executor(shared_client, settings, presenter).run(["A"])

        assert batch.success
        assert path.read_bytes() == b"body of A"
        assert presenter.presented[0][2] is True
        assert presenter.warnings == []

    @pytest.mark.parametrize("parallel", [False, True])
    def test_multiple_urls_skip_file(self, shared_client, scripted_transport,
                                     presenter, tmp_path, parallel):
        """Test several URLs never write to the single destination."""
        path = tmp_path / "out.txt"
        settings = ExecutorConfig(output_file=str(path), parallel=parallel)

        Executor(shared_client, settings, presenter).run(["A", "B"])

        assert not path.exists()
        configs = [c.args[0] for c in scripted_transport.request_sync.call_args_list]
        assert all(c.output_file is None for c in configs)
        assert all(to_file is False for _, _, to_file in presenter.presented)
        assert len(presenter.warnings) == 1


class TestParallelExecution:
    """Tests for parallel mode."""

    def test_output_in_input_order(self, shared_client, scripted_transport,
                                   parallel_settings, presenter):
        """Test results are presented in input order regardless of completion order."""
        completed = []
        lock = threading.Lock()

        def delayed(delay):
            def respond(config):
                time.sleep(delay)
                with lock:
                    completed.append(config.url)
                return ok_response(config.url)
            return respond

        scripted_transport.script.update(
            {"A": delayed(0.3), "B": delayed(0.15), "C": delayed(0.0)}
        )

        batch = Executor(shared_client, parallel_settings, presenter).run(["A", "B", "C"])

        assert completed[0] == "C"
        assert presenter.urls == ["A", "B", "C"]
        assert [o.url for o in batch.outcomes] == ["A", "B", "C"]
        assert [o.index for o in batch.outcomes] == [0, 1, 2]
        assert batch.success

    def test_workers_run_concurrently(self, shared_client, scripted_transport,
                                      parallel_settings, presenter):
        """Test every URL has its own worker running at the same time."""
        barrier = threading.Barrier(3, timeout=5)

        def wait_for_all(config):
            barrier.wait()
            return ok_response(config.url)

        scripted_transport.script.update({"A": wait_for_all, "B": wait_for_all, "C": wait_for_all})

        batch = Executor(shared_client, parallel_settings, presenter).run(["A", "B", "C"])

        assert batch.success

    def test_every_section_labeled(self, shared_client, parallel_settings, presenter):
        """Test parallel sections are labeled even for a single URL."""
        Executor(shared_client, parallel_settings, presenter).run(["A"])

        assert presenter.presented[0][1] is True

    def test_partial_failure(self, shared_client, scripted_transport,
                             parallel_settings, presenter):
        """Test one failing URL does not affect its siblings."""
        scripted_transport.script["B"] = TransportError("B", kind="timeout")

        batch = Executor(shared_client, parallel_settings, presenter).run(["A", "B", "C"])

        assert batch.success is False
        assert batch.outcomes[0].ok
        assert batch.outcomes[1].error.timed_out
        assert batch.outcomes[2].ok
        assert presenter.urls == ["A", "B", "C"]

    def test_worker_crash_reported(self, shared_client, scripted_transport,
                                   parallel_settings, presenter):
        """Test an unexpected exception becomes a per-URL failure."""
        scripted_transport.script["B"] = RuntimeError("boom")

        batch = Executor(shared_client, parallel_settings, presenter).run(["A", "B", "C"])

        crashed = batch.outcomes[1]
        assert isinstance(crashed.error, WorkerCrashed)
        assert isinstance(crashed.error.original_error, RuntimeError)
        assert crashed.url == "B"
        assert batch.outcomes[0].ok and batch.outcomes[2].ok
        assert batch.success is False

    def test_empty_batch(self, shared_client, parallel_settings, presenter):
        """Test an empty URL list yields an empty, successful batch."""
        batch = Executor(shared_client, parallel_settings, presenter).run([])

        assert batch.outcomes == []
        assert batch.success is True

    def test_summary_reported(self, shared_client, parallel_settings, presenter):
        """Test the batch summary is handed to the presenter."""
        batch = Executor(shared_client, parallel_settings, presenter).run(["A", "B"])

        assert presenter.summaries == [batch]
        assert batch.elapsed >= 0.0

    def test_run_dispatches_on_mode(self, shared_client, default_settings, parallel_settings):
        """Test run() picks the strategy from the settings."""
        sequential = Executor(shared_client, default_settings)
        parallel = Executor(shared_client, parallel_settings)
        sequential.run_sequential = MagicMock()
        parallel.run_parallel = MagicMock()

        sequential.run(["A"])
        parallel.run(["A"])

        sequential.run_sequential.assert_called_once_with(["A"])
        parallel.run_parallel.assert_called_once_with(["A"])


class TestEndToEnd:
    """Batch scenarios through a real HttpxTransport."""

    def test_single_post_batch(self, make_http_client, presenter):
        """Test a single POST with the expected body makes a successful batch."""
        def handler(request: httpx.Request) -> httpx.Response:
            if request.method == "POST" and request.content == b'{"name": "test"}':
                return httpx.Response(201, text="created")
            return httpx.Response(400)

        settings = ExecutorConfig(method=HttpMethod.POST, body='{"name": "test"}')
        batch = Executor(make_http_client(handler), settings, presenter).run(
            ["http://test.local/api/data"]
        )

        assert batch.outcomes[0].response.status_code == 201
        assert batch.success is True

    def test_parallel_shared_pool(self, make_http_client, presenter):
        """Test parallel workers share one client against a mock server."""
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text=request.url.path)

        urls = [f"http://test.local/{i}" for i in range(10)]
        batch = Executor(make_http_client(handler), ExecutorConfig(parallel=True), presenter).run(urls)

        assert batch.success
        assert [o.response.body for o in batch.outcomes] == [f"/{i}" for i in range(10)]
