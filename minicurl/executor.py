"""Sequential and parallel execution of request batches."""

from __future__ import annotations

import logging
import time
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Protocol, Sequence

from .client import HttpClient
from .config import ExecutorConfig, RequestConfig
from .models import BatchResult, CurlError, ExecutionOutcome, WorkerCrashed

logger = logging.getLogger(__name__)


class Presenter(Protocol):
    """Receives outcomes as the executor produces them."""

    def present(
        self,
        outcome: ExecutionOutcome,
        labeled: bool = False,
        to_file: bool = False,
    ) -> None:
        ...

    def warn(self, message: str) -> None:
        ...

    def summarize(self, batch: BatchResult) -> None:
        ...


class Executor:
    """Runs one request per URL against a single shared client.

    Sequential mode executes URLs in order and presents each result before
    the next request starts. Parallel mode fans out one worker per URL, waits
    for all of them, then presents results in input order.

    Args:
        client: Client shared by every request of the batch.
        settings: Settings applied to every URL.
        presenter: Output sink (results are only collected if None).
    """

    def __init__(
        self,
        client: HttpClient,
        settings: ExecutorConfig,
        presenter: Presenter | None = None,
    ):
        self._client = client
        self._settings = settings
        self._presenter = presenter

    @property
    def settings(self) -> ExecutorConfig:
        return self._settings

    def run(self, urls: Sequence[str]) -> BatchResult:
        """Execute every URL using the configured mode."""
        if self._settings.parallel:
            return self.run_parallel(urls)
        return self.run_sequential(urls)

    def _writes_output(self, urls: Sequence[str]) -> bool:
        """Output file capture applies only to a single-URL batch."""
        if self._settings.output_file is None:
            return False
        if len(urls) == 1:
            return True
        if self._presenter is not None:
            self._presenter.warn(
                f"--output ignored: {len(urls)} URLs would overwrite "
                f"{self._settings.output_file}"
            )
        return False

    def _execute_one(self, index: int, config: RequestConfig) -> ExecutionOutcome:
        """Execute one request and time it, capturing request errors."""
        start = time.monotonic()
        try:
            response = self._client.execute(config)
        except CurlError as e:
            elapsed = time.monotonic() - start
            logger.debug("[%d] %s failed after %.3fs: %r", index, config.url, elapsed, e)
            return ExecutionOutcome(index=index, url=config.url, elapsed=elapsed, error=e)

        elapsed = time.monotonic() - start
        logger.debug(
            "[%d] %s -> %d in %.3fs", index, config.url, response.status_code, elapsed
        )
        return ExecutionOutcome(index=index, url=config.url, elapsed=elapsed, response=response)

    def run_sequential(self, urls: Sequence[str]) -> BatchResult:
        """Execute URLs one after another, presenting each as it completes.

        A failure on one URL never stops the remaining ones.
        """
        write_output = self._writes_output(urls)
        labeled = len(urls) > 1
        outcomes: list[ExecutionOutcome] = []
        batch_start = time.monotonic()

        for index, url in enumerate(urls):
            config = self._settings.request_for(url, write_output=write_output)
            outcome = self._execute_one(index, config)
            outcomes.append(outcome)
            if self._presenter is not None:
                self._presenter.present(
                    outcome, labeled=labeled, to_file=write_output and outcome.response is not None
                )

        batch = BatchResult(outcomes=outcomes, elapsed=time.monotonic() - batch_start)
        if self._presenter is not None:
            self._presenter.summarize(batch)
        return batch

    def run_parallel(self, urls: Sequence[str]) -> BatchResult:
        """Execute all URLs concurrently, one worker per URL.

        Every worker runs to completion or timeout; a failing or crashing
        worker never cancels its siblings. Results are ordered by input
        position before being presented.
        """
        write_output = self._writes_output(urls)
        batch_start = time.monotonic()
        outcomes: list[ExecutionOutcome] = []

        if urls:
            with ThreadPoolExecutor(max_workers=len(urls)) as pool:
                futures: list[tuple[int, str, Future[ExecutionOutcome]]] = []
                for index, url in enumerate(urls):
                    config = self._settings.request_for(url, write_output=write_output)
                    futures.append((index, url, pool.submit(self._execute_one, index, config)))
                logger.debug("Dispatched %d parallel requests", len(futures))

                for index, url, future in futures:
                    try:
                        outcomes.append(future.result())
                    except Exception as e:
                        logger.debug("[%d] worker for %s crashed", index, url, exc_info=True)
                        outcomes.append(
                            ExecutionOutcome(
                                index=index,
                                url=url,
                                error=WorkerCrashed(url, original_error=e),
                            )
                        )

        outcomes.sort(key=lambda outcome: outcome.index)
        batch = BatchResult(outcomes=outcomes, elapsed=time.monotonic() - batch_start)

        if self._presenter is not None:
            for outcome in batch.outcomes:
                self._presenter.present(
                    outcome, labeled=True, to_file=write_output and outcome.response is not None
                )
            self._presenter.summarize(batch)
        return batch
