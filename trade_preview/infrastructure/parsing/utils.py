"""Shared parsing utilities for CSV and Excel ingestion."""
from __future__ import annotations

from io import BytesIO
from pathlib import Path
from typing import Any, Sequence

import pandas as pd

from trade_preview.domain.models import ParsedSheet
from trade_preview.domain.normalizers import to_text

SUPPORTED_EXTENSIONS = ("csv", "xlsx", "xls")
EXCEL_ENGINES = {"xlsx": "openpyxl", "xls": "xlrd"}


class UnsupportedFileTypeError(ValueError):
    """Raised for uploads that are neither CSV nor Excel workbooks."""


def ensure_bytes(source: BytesIO | Path | bytes) -> bytes:
    if isinstance(source, bytes):
        return source
    if isinstance(source, BytesIO):
        return source.getvalue()
    if isinstance(source, Path):
        return source.read_bytes()
    raise TypeError(f"Unsupported source type: {type(source)!r}")


def file_extension(file_name: str) -> str:
    return Path(file_name).suffix.lstrip(".").lower()


def _read_csv(payload: bytes, **options: Any) -> pd.DataFrame:
    return pd.read_csv(
        BytesIO(payload),
        header=None,
        dtype=str,
        keep_default_na=False,
        encoding="utf-8-sig",
        encoding_errors="replace",
        engine="python",
        **options,
    )


def _read_frame(payload: bytes, extension: str) -> pd.DataFrame:
    if extension == "csv":
        # Rows longer than the header row keep their leading cells.
        width = _read_csv(payload, nrows=1).shape[1]
        return _read_csv(payload, on_bad_lines=lambda fields: fields[:width])
    return pd.read_excel(
        BytesIO(payload),
        sheet_name=0,
        header=None,
        engine=EXCEL_ENGINES[extension],
    )


def _frame_to_rows(frame: pd.DataFrame) -> list[list[Any]]:
    cleaned = frame.astype(object).where(frame.notna(), None)
    return cleaned.values.tolist()


def read_sheet(source: BytesIO | Path | bytes, file_name: str) -> ParsedSheet:
    """Read the first sheet of an upload into a header row and raw data rows."""
    extension = file_extension(file_name)
    if extension not in SUPPORTED_EXTENSIONS:
        raise UnsupportedFileTypeError(f"Unsupported file type: {file_name}")

    try:
        frame = _read_frame(ensure_bytes(source), extension)
    except pd.errors.EmptyDataError:
        return ParsedSheet(file_name=file_name, headers=(), rows=())

    rows = _frame_to_rows(frame)
    if not rows:
        return ParsedSheet(file_name=file_name, headers=(), rows=())
    headers = tuple(to_text(cell) for cell in rows[0])
    return ParsedSheet(file_name=file_name, headers=headers, rows=tuple(rows[1:]))


def cell(row: Sequence[Any], index: int) -> Any:
    """Cell at ``index``, or ``None`` for unmatched (-1) or short rows."""
    if index < 0 or index >= len(row):
        return None
    return row[index]
