"""Exporter Service Provider Interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Iterable, Sequence


class BaseExporter(ABC):
    """Uniform exporter contract for positional rows."""

    @abstractmethod
    def export(self, row: Sequence[Any]) -> None:
        """Persist a single row."""

    def export_many(self, rows: Iterable[Sequence[Any]]) -> int:
        written = 0
        for row in rows:
            self.export(row)
            written += 1
        return written

    @abstractmethod
    def flush(self) -> None:
        """Flush buffered data to destination."""

    @abstractmethod
    def close(self) -> None:
        """Release underlying resources."""


__all__ = ["BaseExporter"]
