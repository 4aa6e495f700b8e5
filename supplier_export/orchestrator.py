"""Run controller wiring priming, planning, the worker pool and the result sink."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from contextlib import closing
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Sequence

import structlog

from .config import ExportConfig
from .engine import (
    SUPPLIER_COLUMNS,
    CancelToken,
    PageClient,
    PageDescriptor,
    ResultSink,
    TaskQueue,
    WorkerPool,
    count_pages,
    plan_pages,
)
from .engine.exporter import BaseExporter, CsvExporter, default_filename
from .engine.worker_pool import PageFetcher
from .errors import ConfigError, PageFetchError, PrimingError
from .ui import ProgressReporter

ExporterFactory = Callable[[Path, Sequence[str]], BaseExporter]


class RunState(str, Enum):
    INIT = "init"
    PRIMING = "priming"
    PLANNING = "planning"
    RUNNING = "running"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"


@dataclass(slots=True)
class RunSummary:
    """Final counters of one run; fewer rows than ``total_count`` means lost pages."""

    total_rows_written: int = 0
    total_pages_requested: int = 0
    total_pages_failed: int = 0
    cancelled: bool = False
    total_count: int = 0
    total_pages_planned: int = 0
    output_path: Path | None = None
    state: RunState = RunState.COMPLETED

    @property
    def missing_rows(self) -> int:
        return max(self.total_count - self.total_rows_written, 0)


class RunController:
    """Drive one export: Init → Priming → Planning → Running → terminal state."""

    def __init__(
        self,
        config: ExportConfig,
        page_client: PageFetcher | None = None,
        cancel_token: CancelToken | None = None,
        progress: ProgressReporter | None = None,
        headers: Sequence[str] = SUPPLIER_COLUMNS,
        exporter_factory: ExporterFactory = CsvExporter,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.config = config
        self.cancel_token = cancel_token or CancelToken()
        self.progress = progress
        self.headers = tuple(headers)
        self.exporter_factory = exporter_factory
        self.logger = (logger or structlog.get_logger("supplier_export")).bind(component="controller")
        self._page_client = page_client
        self.state = RunState.INIT

    def run(self, output_path: Path | None = None) -> RunSummary:
        self.state = RunState.INIT
        if not self.config.has_token:
            self._transition(RunState.FAILED)
            raise ConfigError("access_token is not configured")

        owns_client = self._page_client is None
        client = self._page_client or PageClient(
            self.config, logger=self.logger.bind(component="page_client")
        )
        try:
            total_count = self._prime(client)
            return self._plan_and_run(client, total_count, output_path)
        except Exception:
            self._transition(RunState.FAILED)
            raise
        finally:
            if owns_client:
                client.close()

    # ------------------------------------------------------------------
    def _transition(self, state: RunState) -> None:
        self.logger.debug("state_changed", previous=self.state.value, current=state.value)
        self.state = state

    def _prime(self, client: PageFetcher) -> int:
        self._transition(RunState.PRIMING)
        if self.cancel_token.cancelled:
            raise PrimingError("run cancelled before the record count was known")
        descriptor = PageDescriptor(page_number=1, offset=0, limit=self.config.page_size)
        try:
            page = client.fetch(descriptor)
        except PageFetchError as exc:
            self.logger.error("priming_failed", kind=exc.failure.kind.value, error=str(exc.failure))
            raise PrimingError(f"priming request failed: {exc.failure}") from exc
        if page.total_count_hint is None:
            self.logger.error("priming_failed", error="missing count attribute")
            raise PrimingError("priming response carries no record count")
        self.logger.info("total_count_discovered", total_count=page.total_count_hint)
        return page.total_count_hint

    def _plan_and_run(
        self, client: PageFetcher, total_count: int, output_path: Path | None
    ) -> RunSummary:
        self._transition(RunState.PLANNING)
        total_pages = count_pages(total_count, self.config.page_size)
        if total_pages == 0:
            self.logger.info("nothing_to_export", total_count=total_count)
            self._transition(RunState.COMPLETED)
            return RunSummary(total_count=max(total_count, 0), state=self.state)
        if self.cancel_token.cancelled:
            # Cancelled while priming was in flight: no file is created.
            self._transition(RunState.CANCELLED)
            self.logger.info("run_cancelled", total_count=total_count, total_pages=total_pages)
            return RunSummary(
                cancelled=True,
                total_count=total_count,
                total_pages_planned=total_pages,
                state=self.state,
            )

        self._transition(RunState.RUNNING)
        path = output_path or self.config.output_dir / default_filename(self.config.output_file_prefix)
        self.logger.info(
            "run_started",
            total_count=total_count,
            total_pages=total_pages,
            workers=self.config.max_workers,
            output=str(path),
        )
        task_queue = TaskQueue()
        pool = WorkerPool(
            client,
            pool_size=self.config.max_workers,
            pacing_delay=self.config.request_delay,
            cancel_token=self.cancel_token,
            logger=self.logger.bind(component="worker_pool"),
        )
        exporter = self.exporter_factory(path, self.headers)
        try:
            sink = ResultSink(
                exporter, observer=self.progress, logger=self.logger.bind(component="sink")
            )
            if self.progress is not None:
                self.progress.start(total_pages)

            with ThreadPoolExecutor(max_workers=1, thread_name_prefix="export-populate") as executor:
                population = executor.submit(
                    task_queue.populate,
                    plan_pages(total_count, self.config.page_size),
                    self.cancel_token,
                )
                try:
                    with closing(pool.run(task_queue)) as results:
                        totals = sink.consume(results)
                finally:
                    task_queue.close()
                enqueued = population.result()
        finally:
            exporter.close()
            if self.progress is not None:
                self.progress.close()

        cancelled = self.cancel_token.cancelled
        self._transition(RunState.CANCELLED if cancelled else RunState.COMPLETED)
        summary = RunSummary(
            total_rows_written=totals.rows_written,
            total_pages_requested=totals.pages_received,
            total_pages_failed=totals.pages_failed,
            cancelled=cancelled,
            total_count=total_count,
            total_pages_planned=total_pages,
            output_path=path,
            state=self.state,
        )
        self.logger.info(
            "run_cancelled" if cancelled else "run_completed",
            rows=summary.total_rows_written,
            pages_requested=summary.total_pages_requested,
            pages_failed=summary.total_pages_failed,
            pages_enqueued=enqueued,
        )
        return summary


__all__ = ["RunController", "RunState", "RunSummary"]
