"""Fixed-size thread pool turning page descriptors into page results."""

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from queue import Queue
from typing import Iterator, Protocol

import structlog

from ..errors import PageFailure, PageFetchError
from .cancel import CancelToken
from .page_client import PageFetch, Record
from .task_queue import PageDescriptor, TaskQueue

_WORKER_DONE = object()


@dataclass(slots=True)
class PageResult:
    """Outcome of one page; ``error`` set means the rows were discarded."""

    page_number: int
    offset: int
    rows: list[Record] = field(default_factory=list)
    error: PageFailure | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class PageFetcher(Protocol):
    def fetch(self, descriptor: PageDescriptor) -> PageFetch:
        """Fetch one page or raise ``PageFetchError``."""


class WorkerPool:
    """Run ``pool_size`` workers over a shared task queue.

    Each worker paces itself: after every fetch it waits ``pacing_delay``
    seconds before pulling the next descriptor, so the aggregate request rate
    is roughly ``pool_size / pacing_delay``. Results are yielded in completion
    order, not page order.
    """

    def __init__(
        self,
        page_client: PageFetcher,
        pool_size: int = 5,
        pacing_delay: float = 0.5,
        cancel_token: CancelToken | None = None,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        if pool_size < 1:
            raise ValueError("pool_size must be >= 1")
        self.page_client = page_client
        self.pool_size = pool_size
        self.pacing_delay = pacing_delay
        self.cancel_token = cancel_token or CancelToken()
        self.logger = logger or structlog.get_logger("supplier_export.worker_pool")

    def run(self, task_queue: TaskQueue) -> Iterator[PageResult]:
        results: Queue = Queue(maxsize=self.pool_size)
        executor = ThreadPoolExecutor(max_workers=self.pool_size, thread_name_prefix="export-worker")
        futures: list[Future[None]] = [
            executor.submit(self._work, worker_id, task_queue, results)
            for worker_id in range(1, self.pool_size + 1)
        ]
        finished = 0
        try:
            while finished < self.pool_size:
                item = results.get()
                if item is _WORKER_DONE:
                    finished += 1
                    continue
                yield item
        finally:
            if finished < self.pool_size:
                # Consumer stopped early: stop the workers and unblock their puts.
                self.cancel_token.cancel()
                task_queue.close()
                while finished < self.pool_size:
                    if results.get() is _WORKER_DONE:
                        finished += 1
            executor.shutdown(wait=True)
        for future in futures:
            future.result()

    def _work(self, worker_id: int, task_queue: TaskQueue, results: Queue) -> None:
        log = self.logger.bind(worker=worker_id)
        try:
            for descriptor in task_queue.drain():
                if self.cancel_token.cancelled:
                    log.info("page_dropped", page=descriptor.page_number, offset=descriptor.offset)
                    return
                results.put(self._fetch(descriptor, log))
                if self.cancel_token.wait(self.pacing_delay):
                    return
        finally:
            results.put(_WORKER_DONE)

    def _fetch(self, descriptor: PageDescriptor, log: structlog.BoundLogger) -> PageResult:
        try:
            page = self.page_client.fetch(descriptor)
        except PageFetchError as exc:
            log.warning(
                "page_failed",
                page=descriptor.page_number,
                offset=descriptor.offset,
                kind=exc.failure.kind.value,
                error=str(exc.failure),
            )
            return PageResult(
                page_number=descriptor.page_number, offset=descriptor.offset, error=exc.failure
            )
        log.info(
            "page_fetched",
            page=descriptor.page_number,
            offset=descriptor.offset,
            rows=len(page.rows),
        )
        return PageResult(page_number=descriptor.page_number, offset=descriptor.offset, rows=page.rows)


__all__ = ["PageFetcher", "PageResult", "WorkerPool"]
