"""BSE trade-report parser producing canonical trade records."""
from __future__ import annotations

from typing import Sequence

from trade_preview.domain.headers import first_column
from trade_preview.domain.models import Exchange, ParsedSheet, TradeRecord
from trade_preview.domain.normalizers import (
    is_valid_identifier,
    normalize_date,
    normalize_identifier,
    normalize_time,
    sanitize_display,
    to_numeric,
    to_text,
)
from trade_preview.infrastructure.parsing.utils import cell
from trade_preview.utils.logger import get_logger

LOGGER = get_logger(__name__)

COLUMNS = {
    "isin": ["isin"],
    "trade_date": ["deal date", "trade date", "date"],
    "trade_time": ["trade time", "time"],
    "maturity": ["maturity date", "maturity"],
    "price": ["trade price (rs)", "price"],
    "yield": ["traded yield (%)", "yield"],
    "status": ["settlement status", "status"],
    "order_type": ["order type", "type"],
}

# Tried in order until one yields a number; the sheet already reports lacs.
AMOUNT_ALIASES = (
    ["trade amount (in rs lacs)", "trade amount (rs lacs)"],
    ["amount (rs lacs)", "trade amount"],
    ["amount"],
)


def _amount_columns(headers: Sequence[str]) -> list[int]:
    columns: list[int] = []
    for aliases in AMOUNT_ALIASES:
        index = first_column(headers, aliases)
        if index >= 0 and index not in columns:
            columns.append(index)
    return columns


def _read_amount(row: Sequence[object], columns: Sequence[int]) -> float:
    for index in columns:
        value = to_numeric(cell(row, index))
        if value is not None:
            return value
    return 0.0


def bse_to_records(sheet: ParsedSheet, exchange: str = Exchange.BSE.value) -> Sequence[TradeRecord]:
    idx = {name: first_column(sheet.headers, patterns) for name, patterns in COLUMNS.items()}
    amount_columns = _amount_columns(sheet.headers)

    records: list[TradeRecord] = []
    dropped = 0
    for number, row in enumerate(sheet.rows, start=1):
        identifier = normalize_identifier(cell(row, idx["isin"]))
        if not is_valid_identifier(identifier):
            dropped += 1
            continue
        records.append(
            TradeRecord(
                exchange=exchange,
                trade_date=normalize_date(cell(row, idx["trade_date"])),
                trade_time=normalize_time(cell(row, idx["trade_time"])),
                identifier=identifier,
                maturity_date=normalize_date(cell(row, idx["maturity"])),
                amount=_read_amount(row, amount_columns),
                price=to_numeric(cell(row, idx["price"])) or 0.0,
                traded_yield=sanitize_display(cell(row, idx["yield"])),
                status=sanitize_display(cell(row, idx["status"])),
                deal_type=to_text(cell(row, idx["order_type"])).upper(),
                source=sheet.file_name,
                lineage=f"row={number}",
            )
        )
    if dropped:
        LOGGER.debug("%s: skipped %d rows without a valid ISIN", sheet.file_name, dropped)
    return records
