"""Shared fixtures: isolated home directory, config builder and a fake page client."""

from __future__ import annotations

from pathlib import Path
from threading import Lock
from typing import Any, Callable, Iterable

import pytest

from supplier_export.config import ExportConfig
from supplier_export.engine import PageDescriptor, PageFetch
from supplier_export.engine.payload import SUPPLIER_COLUMNS
from supplier_export.errors import FailureKind, PageFailure, PageFetchError


def make_row(index: int) -> list[Any]:
    row: list[Any] = [f"supplier-{index}", f"USC{index:08d}"]
    row.extend(None if pos % 5 == 0 else f"v{pos}" for pos in range(len(SUPPLIER_COLUMNS) - 2))
    return row


class FakePageClient:
    """In-memory stand-in for ``PageClient``; the first call is the priming call."""

    def __init__(
        self,
        total_count: int,
        fail_pages: Iterable[int] = (),
        priming_failure: PageFailure | None = None,
        advertise_count: bool = True,
        on_page: Callable[[PageDescriptor, int], None] | None = None,
        on_priming: Callable[[], None] | None = None,
    ) -> None:
        self.total_count = total_count
        self.fail_pages = set(fail_pages)
        self.priming_failure = priming_failure
        self.advertise_count = advertise_count
        self.on_page = on_page
        self.on_priming = on_priming
        self.priming_calls: list[PageDescriptor] = []
        self.page_calls: list[PageDescriptor] = []
        self.closed = False
        self._lock = Lock()

    def fetch(self, descriptor: PageDescriptor) -> PageFetch:
        with self._lock:
            priming = not self.priming_calls
            if priming:
                self.priming_calls.append(descriptor)
            else:
                self.page_calls.append(descriptor)
                call_number = len(self.page_calls)
        if priming:
            if self.on_priming is not None:
                self.on_priming()
            if self.priming_failure is not None:
                raise PageFetchError(self.priming_failure)
            hint = self.total_count if self.advertise_count else None
            return PageFetch(rows=self._rows(descriptor), total_count_hint=hint)
        if self.on_page is not None:
            self.on_page(descriptor, call_number)
        if descriptor.page_number in self.fail_pages:
            raise PageFetchError(
                PageFailure(kind=FailureKind.TRANSPORT, detail=f"page {descriptor.page_number} down")
            )
        return PageFetch(rows=self._rows(descriptor), total_count_hint=self.total_count)

    def _rows(self, descriptor: PageDescriptor) -> list[list[Any]]:
        count = max(0, min(descriptor.limit, self.total_count - descriptor.offset))
        return [make_row(descriptor.offset + i) for i in range(count)]

    def close(self) -> None:
        self.closed = True

    def __enter__(self) -> "FakePageClient":
        return self

    def __exit__(self, *_exc: object) -> None:
        self.close()


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.setenv("SUPPLIER_EXPORT_HOME", str(tmp_path))
    return tmp_path


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    path = tmp_path / "out"
    path.mkdir()
    return path


@pytest.fixture
def export_config(output_dir: Path) -> Callable[..., ExportConfig]:
    def _builder(**overrides: Any) -> ExportConfig:
        base: dict[str, Any] = {
            "access_token": "token-0123456789abcdefghijklmnop",
            "page_size": 1000,
            "request_delay": 0.001,
            "max_workers": 3,
            "output_dir": output_dir,
        }
        base.update(overrides)
        return ExportConfig(**base)

    return _builder


@pytest.fixture
def fake_client() -> type[FakePageClient]:
    return FakePageClient
