"""
Aggregator - Fans one query generation out to every provider concurrently.

Each provider runs on the shared thread pool with its own child token and
deadline. The deadline starts when the provider actually begins running,
so time spent queued behind busy workers is not charged to it; a provider
that cannot get a worker within ``start_timeout`` is reported as timed out.
Workers push results onto a per-run queue as they are yielded; the run
loop drains whatever is available into a batch, merges it into the
generation's RankedResults and delivers the re-sorted list. Results that
arrive after a provider's deadline, or after the generation was cancelled,
are dropped.
"""

import queue
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Callable, Optional

from loguru import logger

from omnibar.errors import ProviderError, ProviderTimeout
from omnibar.search.cancellation import CancellationToken
from omnibar.search.models import Result
from omnibar.search.provider import Provider, ProviderRegistry
from omnibar.search.ranker import Ranker

DEFAULT_TIMEOUT = 0.3
# How long a submitted provider may wait for a free worker
DEFAULT_START_TIMEOUT = 1.0
# Upper bound on how long a superseded run keeps waiting before it notices
POLL_INTERVAL = 0.02

DeliverFn = Callable[[int, list[Result]], None]
CompleteFn = Callable[["GenerationReport"], None]


@dataclass
class GenerationReport:
    """Summary of how every provider fared for one generation."""
    generation: int
    query: str
    completed: list[str] = field(default_factory=list)
    timed_out: list[ProviderTimeout] = field(default_factory=list)
    failed: list[ProviderError] = field(default_factory=list)
    cancelled: bool = False

    @property
    def partial(self) -> bool:
        return bool(self.timed_out or self.failed)


@dataclass(frozen=True)
class _Started:
    provider: str
    at: float


@dataclass(frozen=True)
class _Item:
    provider: str
    result: Result


@dataclass(frozen=True)
class _Done:
    provider: str
    error: Optional[BaseException] = None


@dataclass
class _Invocation:
    token: CancellationToken
    timeout: float
    # Start-of-queue bound until the worker picks it up, then start + timeout
    deadline: float
    started: bool = False


class Aggregator:
    """Runs providers for a generation and streams ranked results."""

    def __init__(
        self,
        registry: ProviderRegistry,
        ranker: Optional[Ranker] = None,
        timeout: float = DEFAULT_TIMEOUT,
        timeouts: Optional[dict[str, float]] = None,
        max_workers: int = 8,
        start_timeout: float = DEFAULT_START_TIMEOUT,
    ):
        self.registry = registry
        self.ranker = ranker or Ranker()
        self.timeout = timeout
        self.timeouts = timeouts or {}
        self.start_timeout = start_timeout
        # One worker per provider at least, so a full generation never queues
        self.max_workers = max(max_workers, len(registry))
        self._pool = ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="omnibar-provider")

    def timeout_for(self, provider_name: str) -> float:
        return self.timeouts.get(provider_name, self.timeout)

    def run(
        self,
        query: str,
        generation: int,
        cancel: CancellationToken,
        deliver: DeliverFn,
        complete: Optional[CompleteFn] = None,
    ) -> list[Result]:
        """
        Run every provider for ``query`` and return the final ordering.

        Args:
            query: Raw query string, passed through unchanged
            generation: Generation number used to tag deliveries
            cancel: Token bound to this generation
            deliver: Called with (generation, ordered results) per batch;
                an exception from it is logged and does not stop the run
            complete: Called once with the GenerationReport, unless the
                generation was cancelled

        Returns:
            Ordered results accumulated for this generation
        """
        report = GenerationReport(generation=generation, query=query)
        accumulated = self.ranker.accumulator()
        inbox: queue.Queue = queue.Queue()
        pending: dict[str, _Invocation] = {}

        if cancel.cancelled:
            # Superseded while queued behind an older generation
            report.cancelled = True
            return []

        submitted = time.monotonic()
        try:
            for name, provider in self.registry.items():
                invocation = _Invocation(
                    token=cancel.child(),
                    timeout=self.timeout_for(name),
                    deadline=submitted + self.start_timeout,
                )
                pending[name] = invocation
                self._pool.submit(self._drive, name, provider, query, invocation, inbox)

            logger.debug(f"Generation {generation}: '{query}' sent to {len(pending)} providers")
            self._collect(generation, cancel, inbox, pending, accumulated, report, deliver)
        finally:
            # Providers still running when the loop exits are cancelled
            for invocation in pending.values():
                invocation.token.cancel()

        if cancel.cancelled:
            report.cancelled = True
            logger.debug(f"Generation {generation} superseded, dropping late output")
            return accumulated.ordered()

        if complete is not None:
            complete(report)
        return accumulated.ordered()

    def _collect(self, generation, cancel, inbox, pending, accumulated, report, deliver) -> None:
        """Drain the inbox until every provider is done, failed or timed out."""
        while pending:
            if cancel.cancelled:
                return

            nearest = min(inv.deadline for inv in pending.values())
            wait = min(max(0.0, nearest - time.monotonic()), POLL_INTERVAL)
            try:
                first = inbox.get(timeout=wait)
            except queue.Empty:
                first = None

            messages = [] if first is None else [first]
            while True:
                try:
                    messages.append(inbox.get_nowait())
                except queue.Empty:
                    break

            batches: dict[str, list[Result]] = {}
            failed: list[str] = []
            for message in messages:
                invocation = pending.get(message.provider)
                if invocation is None:
                    # Provider already timed out for this generation
                    continue
                if isinstance(message, _Started):
                    invocation.started = True
                    invocation.deadline = message.at + invocation.timeout
                elif isinstance(message, _Done):
                    del pending[message.provider]
                    if message.error is None:
                        report.completed.append(message.provider)
                    else:
                        error = ProviderError(message.provider, message.error)
                        report.failed.append(error)
                        failed.append(message.provider)
                        logger.opt(exception=message.error).warning(str(error))
                else:
                    batches.setdefault(message.provider, []).append(message.result)

            now = time.monotonic()
            for name, invocation in list(pending.items()):
                if now >= invocation.deadline:
                    invocation.token.cancel()
                    del pending[name]
                    if invocation.started:
                        error = ProviderTimeout(name, invocation.timeout)
                        logger.warning(str(error))
                    else:
                        error = ProviderTimeout(name, self.start_timeout)
                        logger.warning(f"Provider '{name}' never got a worker within {self.start_timeout}s")
                    report.timed_out.append(error)

            if cancel.cancelled:
                return

            if batches or failed:
                for name, batch in batches.items():
                    accumulated.add(batch, source=name)
                # A failing provider contributes nothing, even what it streamed earlier
                for name in failed:
                    accumulated.discard(name)
                ordered = accumulated.ordered()
                logger.debug(
                    f"Generation {generation}: merged {sum(map(len, batches.values()))} results, "
                    f"{len(ordered)} ranked"
                )
                try:
                    deliver(generation, ordered)
                except Exception:
                    logger.exception(f"Result delivery for generation {generation} failed")

    def _drive(
        self,
        name: str,
        provider: Provider,
        query: str,
        invocation: _Invocation,
        inbox: queue.Queue,
    ) -> None:
        """Iterate one provider on a pool thread, forwarding results in time."""
        token = invocation.token
        if token.cancelled:
            return

        started = time.monotonic()
        deadline = started + invocation.timeout
        inbox.put(_Started(name, started))
        try:
            for result in provider.search(query, token):
                if token.cancelled or time.monotonic() >= deadline:
                    break
                inbox.put(_Item(name, result))
        except Exception as e:
            inbox.put(_Done(name, e))
            return
        inbox.put(_Done(name))

    def shutdown(self) -> None:
        self._pool.shutdown(wait=False, cancel_futures=True)
