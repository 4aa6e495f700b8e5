"""Single consumer turning page results into exported rows and counters."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Protocol

import structlog

from .exporter import BaseExporter
from .worker_pool import PageResult


class PageObserver(Protocol):
    def page_done(self, result: PageResult) -> None:
        """Called once per consumed page result."""


@dataclass(slots=True)
class SinkTotals:
    rows_written: int = 0
    pages_received: int = 0
    pages_failed: int = 0


class ResultSink:
    """Drain page results, write rows incrementally and keep the counters.

    The exporter and the counters are owned by the sink; read ``totals`` only
    after ``consume`` has returned.
    """

    def __init__(
        self,
        exporter: BaseExporter,
        observer: PageObserver | None = None,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.exporter = exporter
        self.observer = observer
        self.logger = logger or structlog.get_logger("supplier_export.sink")
        self.totals = SinkTotals()

    def consume(self, results: Iterable[PageResult]) -> SinkTotals:
        for result in results:
            self.handle(result)
        return self.totals

    def handle(self, result: PageResult) -> None:
        self.totals.pages_received += 1
        if result.error is not None:
            self.totals.pages_failed += 1
            self.logger.error(
                "page_skipped",
                page=result.page_number,
                offset=result.offset,
                error=str(result.error),
            )
        else:
            written = self.exporter.export_many(result.rows)
            # A finished page is on disk before the next result is handled.
            self.exporter.flush()
            self.totals.rows_written += written
        if self.observer is not None:
            self.observer.page_done(result)


__all__ = ["PageObserver", "ResultSink", "SinkTotals"]
