from __future__ import annotations

from supplier_export.engine import ResultSink
from supplier_export.engine.exporter import BaseExporter
from supplier_export.engine.worker_pool import PageResult
from supplier_export.errors import FailureKind, PageFailure


class RecordingExporter(BaseExporter):
    def __init__(self) -> None:
        self.rows: list = []
        self.flushes = 0
        self.closed = False

    def export(self, row) -> None:
        self.rows.append(list(row))

    def flush(self) -> None:
        self.flushes += 1

    def close(self) -> None:
        self.closed = True


class RecordingObserver:
    def __init__(self) -> None:
        self.pages: list[int] = []

    def page_done(self, result: PageResult) -> None:
        self.pages.append(result.page_number)


def test_sink_counts_rows_and_failed_pages() -> None:
    exporter = RecordingExporter()
    observer = RecordingObserver()
    sink = ResultSink(exporter, observer=observer)
    failure = PageFailure(kind=FailureKind.HTTP_STATUS, detail="boom", status_code=500)

    totals = sink.consume(
        [
            PageResult(page_number=2, offset=10, rows=[["a"], ["b"]]),
            PageResult(page_number=1, offset=0, error=failure),
            PageResult(page_number=3, offset=20, rows=[]),
            PageResult(page_number=4, offset=30, rows=[["c"]]),
        ]
    )

    assert totals.rows_written == 3
    assert totals.pages_failed == 1
    assert totals.pages_received == 4
    assert exporter.rows == [["a"], ["b"], ["c"]]
    # Flushed once per successful page, zero-row pages included.
    assert exporter.flushes == 3
    assert observer.pages == [2, 1, 3, 4]
    assert not exporter.closed


def test_sink_without_results_writes_nothing() -> None:
    exporter = RecordingExporter()
    totals = ResultSink(exporter).consume([])
    assert totals.rows_written == 0
    assert totals.pages_received == 0
    assert exporter.rows == []
