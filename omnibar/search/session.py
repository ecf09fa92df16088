"""
Query Session - Owns the generation counter and serializes delivery.

submit() bumps the generation, cancels the previous generation's token and
schedules the aggregator on a single worker thread. Every delivery passes
through the session lock, where it is dropped unless its generation is
still current, so the listener only ever sees the latest query.
"""

import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Optional

from loguru import logger

from omnibar.search.aggregator import Aggregator, GenerationReport
from omnibar.search.cancellation import CancellationToken
from omnibar.search.models import Result


class ResultListener:
    """
    Presentation collaborator. Override the hooks you need.

    Hooks are called from worker threads, one at a time.
    """

    def on_results(self, generation: int, results: list[Result]) -> None:
        pass

    def on_complete(self, report: GenerationReport) -> None:
        pass

    def on_confirmation_required(self, pending) -> None:
        pass


class QuerySession:
    """Process-wide search state for one palette."""

    def __init__(self, aggregator: Aggregator, listener: Optional[ResultListener] = None):
        self.aggregator = aggregator
        self.listener = listener or ResultListener()
        self._lock = threading.RLock()
        self._generation = 0
        self._token: Optional[CancellationToken] = None
        self._query = ""
        # One worker keeps the merge step single-owner per generation; a
        # superseded run exits at its next cancellation check.
        self._runner = ThreadPoolExecutor(max_workers=1, thread_name_prefix="omnibar-session")

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def query(self) -> str:
        return self._query

    def is_current(self, generation: int) -> bool:
        return generation == self._generation

    def submit(self, query: str) -> Future:
        """
        Start a new generation for ``query``.

        Returns:
            Future resolving to the generation's final ordered results
        """
        with self._lock:
            if self._token is not None:
                self._token.cancel()
            self._generation += 1
            generation = self._generation
            token = CancellationToken()
            self._token = token
            self._query = query

        logger.debug(f"Generation {generation} started for '{query}'")
        return self._runner.submit(
            self.aggregator.run,
            query,
            generation,
            token,
            self._deliver,
            self._complete,
        )

    def run_query(self, query: str, timeout: Optional[float] = None) -> list[Result]:
        """Submit and block until the generation finishes."""
        return self.submit(query).result(timeout=timeout)

    def clear(self) -> None:
        """Discard the current generation and show an empty list."""
        with self._lock:
            if self._token is not None:
                self._token.cancel()
                self._token = None
            self._generation += 1
            self._query = ""
            generation = self._generation
            self.listener.on_results(generation, [])

    def _deliver(self, generation: int, results: list[Result]) -> None:
        with self._lock:
            if generation != self._generation:
                logger.debug(f"Dropped stale batch from generation {generation}")
                return
            self.listener.on_results(generation, results)

    def _complete(self, report: GenerationReport) -> None:
        with self._lock:
            if report.generation != self._generation:
                return
            self.listener.on_complete(report)

    def close(self) -> None:
        with self._lock:
            if self._token is not None:
                self._token.cancel()
        self._runner.shutdown(wait=False, cancel_futures=True)
        self.aggregator.shutdown()
