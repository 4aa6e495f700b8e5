from __future__ import annotations

import pytest

from supplier_export.engine.exporter import CsvExporter, decode_cell, encode_cell, read_export
from supplier_export.engine.payload import SUPPLIER_COLUMNS


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (None, ""),
        ("", "\t"),
        ("ACME Ltd", "\tACME Ltd"),
        (1000, "\t1000"),
        (1.5, "\t1.5"),
        (True, "\ttrue"),
        ({"k": [1, 2]}, '\t{"k":[1,2]}'),
    ],
)
def test_encode_cell(value, expected) -> None:
    assert encode_cell(value) == expected


def test_decode_cell_inverts_the_convention() -> None:
    assert decode_cell("") is None
    assert decode_cell("\t") == ""
    assert decode_cell("\t0012") == "0012"
    assert decode_cell("plain") == "plain"


def test_file_has_bom_and_fixed_header(tmp_path) -> None:
    path = tmp_path / "nested" / "export.csv"
    with CsvExporter(path, SUPPLIER_COLUMNS) as exporter:
        exporter.export(["a"] * len(SUPPLIER_COLUMNS))

    raw = path.read_bytes()
    assert raw.startswith(b"\xef\xbb\xbf")
    header, rows = read_export(path)
    assert header == list(SUPPLIER_COLUMNS)
    assert len(header) == 21
    assert rows == [["a"] * 21]


def test_round_trip_keeps_null_distinct_from_empty(tmp_path) -> None:
    path = tmp_path / "export.csv"
    records = [
        [None, "", "x, with comma", 'quote " inside', "line\nbreak", 42],
        ["", None, "", None, "", None],
        ["0001", "2024-01-01", None, "", "中文", 3.25],
    ]
    exporter = CsvExporter(path, ["c1", "c2", "c3", "c4", "c5", "c6"])
    assert exporter.export_many(records) == 3
    exporter.close()

    _header, rows = read_export(path)
    assert len(rows) == len(records)
    expected = [[None if cell is None else str(cell) for cell in record] for record in records]
    assert rows == expected
