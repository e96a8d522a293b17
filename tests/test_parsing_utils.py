import pytest

from trade_preview.application.use_cases import extract_sheets
from trade_preview.domain.models import UploadedFile
from trade_preview.infrastructure.parsing.utils import UnsupportedFileTypeError, cell, read_sheet
from trade_preview.infrastructure.repositories.file_repositories import UploadedSheetRepository

HEADER = "Date,Seller Deal Type,Buyer Deal Type,ISIN,Maturity Date,Deal size,Price,Yield,Settlement status\n"


def test_row_with_trailing_comma_keeps_leading_cells():
    payload = (
        HEADER
        + "16-01-2025,DIRECT,DIRECT,INE0ABCDEF12,10/12/2030,500000,101.25,7.5,Settled\n"
        + "16-01-2025,DIRECT,DIRECT,INE002A08106,10/12/2031,300000,99.5,8.1,Settled,\n"
    ).encode("utf-8")
    sheet = read_sheet(payload, "nse.csv")

    assert len(sheet.headers) == 9
    assert [row[3] for row in sheet.rows] == ["INE0ABCDEF12", "INE002A08106"]
    assert all(len(row) == 9 for row in sheet.rows)


def test_ragged_upload_still_yields_every_trade():
    payload = (
        HEADER
        + "16-01-2025,DIRECT,DIRECT,INE0ABCDEF12,10/12/2030,500000,101.25,7.5,Settled\n"
        + "16-01-2025,DIRECT,DIRECT,INE002A08106,10/12/2031,300000,99.5,8.1,Settled,\n"
    ).encode("utf-8")
    sheets, failures = UploadedSheetRepository([UploadedFile("nse.csv", payload)]).list_sheets()
    trades, _ = extract_sheets(sheets)

    assert failures == ()
    assert [t.amount for t in trades] == [5.0, 3.0]


def test_short_rows_read_as_empty_cells():
    payload = (HEADER + "16-01-2025,DIRECT,DIRECT,INE0ABCDEF12\n").encode("utf-8")
    [row] = read_sheet(payload, "nse.csv").rows
    assert row[3] == "INE0ABCDEF12"
    assert cell(row, 5) in (None, "")


def test_invalid_utf8_bytes_are_replaced():
    payload = (HEADER + "16-01-2025,DIRECT,DIRECT,INE0ABCDEF12,10/12/2030,500000,101.25,7.5,Réglé\n").encode("cp1252")
    sheets, failures = UploadedSheetRepository([UploadedFile("nse.csv", payload)]).list_sheets()
    [trade], _ = extract_sheets(sheets)

    assert failures == ()
    assert trade.identifier == "INE0ABCDEF12"
    assert trade.status.startswith("R")
    assert "\ufffd" in trade.status


def test_byte_order_mark_is_dropped_from_first_header():
    sheet = read_sheet(("\ufeff" + HEADER).encode("utf-8"), "nse.csv")
    assert sheet.headers[0] == "Date"


def test_empty_csv_gives_empty_sheet():
    sheet = read_sheet(b"", "nse.csv")
    assert sheet.headers == ()
    assert sheet.rows == ()


def test_unsupported_extension():
    with pytest.raises(UnsupportedFileTypeError):
        read_sheet(b"hello", "notes.txt")
