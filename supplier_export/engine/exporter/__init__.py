"""Exporter SPI and implementations."""

from .base import BaseExporter
from .csv_exporter import CsvExporter, decode_cell, default_filename, encode_cell, read_export

__all__ = [
    "BaseExporter",
    "CsvExporter",
    "decode_cell",
    "default_filename",
    "encode_cell",
    "read_export",
]
