"""CSV exporter writing spreadsheet-friendly, BOM-prefixed UTF-8 files."""

from __future__ import annotations

import csv
import json
from datetime import datetime
from pathlib import Path
from typing import Any, Sequence

from .base import BaseExporter

# Leading tab makes spreadsheet tools keep codes and dates as text.
TEXT_PREFIX = "\t"
NULL_CELL = ""


def encode_cell(value: Any) -> str:
    """Render one cell; ``None`` stays empty so it differs from ``""``."""

    if value is None:
        return NULL_CELL
    if isinstance(value, bool):
        text = "true" if value else "false"
    elif isinstance(value, (dict, list)):
        text = json.dumps(value, ensure_ascii=False, separators=(",", ":"))
    else:
        text = str(value)
    return TEXT_PREFIX + text


def decode_cell(text: str) -> str | None:
    if text == NULL_CELL:
        return None
    if text.startswith(TEXT_PREFIX):
        return text[len(TEXT_PREFIX):]
    return text


def default_filename(prefix: str, when: datetime | None = None) -> str:
    timestamp = (when or datetime.now()).strftime("%Y%m%d_%H%M%S")
    return f"{prefix}_{timestamp}.csv"


class CsvExporter(BaseExporter):
    """Write rows to a local CSV file under a fixed header."""

    def __init__(self, path: Path, headers: Sequence[str]) -> None:
        self.path = path
        self.headers = tuple(headers)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        # utf-8-sig emits the byte-order mark spreadsheet tools look for.
        self._file = self.path.open("w", encoding="utf-8-sig", newline="")
        self._writer = csv.writer(self._file)
        self._writer.writerow(self.headers)
        self.rows_written = 0

    def export(self, row: Sequence[Any]) -> None:
        self._writer.writerow([encode_cell(cell) for cell in row])
        self.rows_written += 1

    def flush(self) -> None:
        self._file.flush()

    def close(self) -> None:
        if not self._file.closed:
            self._file.flush()
            self._file.close()

    def __enter__(self) -> "CsvExporter":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def read_export(path: Path) -> tuple[list[str], list[list[str | None]]]:
    """Read an exported file back into its header and decoded rows."""

    with path.open("r", encoding="utf-8-sig", newline="") as stream:
        reader = csv.reader(stream)
        header = next(reader, [])
        rows = [[decode_cell(cell) for cell in row] for row in reader]
    return header, rows


__all__ = [
    "CsvExporter",
    "NULL_CELL",
    "TEXT_PREFIX",
    "decode_cell",
    "default_filename",
    "encode_cell",
    "read_export",
]
