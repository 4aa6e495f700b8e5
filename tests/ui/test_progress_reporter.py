from __future__ import annotations

from io import StringIO

import pytest
from rich.console import Console

from supplier_export.engine.worker_pool import PageResult
from supplier_export.errors import FailureKind, PageFailure
from supplier_export.ui import ProgressReporter, ProgressState


def test_progress_reporter_counts_and_lines() -> None:
    buffer = StringIO()
    reporter = ProgressReporter(enabled=True, console=Console(file=buffer, width=200))
    reporter.start(total=2)
    reporter.page_done(PageResult(page_number=1, offset=0, rows=[["a"], ["b"]]))
    failure = PageFailure(kind=FailureKind.DECODE, detail="[bad] json")
    reporter.page_done(PageResult(page_number=2, offset=10, error=failure))
    reporter.close()

    assert reporter.state == ProgressState(total=2, success=1, failed=1, rows=2)
    output = buffer.getvalue()
    assert "page 1 (offset=0) fetched 2 rows" in output
    assert "page 2 (offset=10) failed: decode: [bad] json" in output


def test_progress_requires_start() -> None:
    reporter = ProgressReporter(enabled=False)
    with pytest.raises(RuntimeError):
        reporter.page_done(PageResult(page_number=1, offset=0))
