"""NSE trade-report parser producing canonical trade records."""
from __future__ import annotations

from typing import Sequence

from trade_preview.domain.headers import first_column
from trade_preview.domain.models import Exchange, ParsedSheet, TradeRecord
from trade_preview.domain.normalizers import (
    is_valid_identifier,
    normalize_date,
    normalize_identifier,
    normalize_time,
    rupees_to_lacs,
    sanitize_display,
    to_numeric,
    to_text,
)
from trade_preview.infrastructure.parsing.utils import cell
from trade_preview.utils.logger import get_logger

LOGGER = get_logger(__name__)

COLUMNS = {
    "isin": ["isin"],
    "trade_date": ["trade date", "deal date", "date"],
    "trade_time": ["trade time", "time", "timestamp"],
    "maturity": ["maturity date", "maturity"],
    "deal_size": ["deal size", "trade amount (rs)", "amount"],
    "price": ["price", "trade price"],
    "yield": ["yield", "traded yield"],
    "status": ["settlement status", "status"],
    "seller": ["seller deal type", "seller type"],
    "buyer": ["buyer deal type", "buyer type"],
}


def derive_deal_type(seller: object, buyer: object) -> str:
    seller_text = to_text(seller).upper()
    buyer_text = to_text(buyer).upper()
    if "DIRECT" in seller_text and "DIRECT" in buyer_text:
        return "DIRECT"
    if "BROKERED" in seller_text or "BROKERED" in buyer_text:
        return "BROKERED"
    return seller_text or buyer_text


def nse_to_records(sheet: ParsedSheet, exchange: str = Exchange.NSE.value) -> Sequence[TradeRecord]:
    idx = {name: first_column(sheet.headers, patterns) for name, patterns in COLUMNS.items()}

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
                amount=rupees_to_lacs(cell(row, idx["deal_size"])),
                price=to_numeric(cell(row, idx["price"])) or 0.0,
                traded_yield=sanitize_display(cell(row, idx["yield"])),
                status=sanitize_display(cell(row, idx["status"])),
                deal_type=derive_deal_type(cell(row, idx["seller"]), cell(row, idx["buyer"])),
                source=sheet.file_name,
                lineage=f"row={number}",
            )
        )
    if dropped:
        LOGGER.debug("%s: skipped %d rows without a valid ISIN", sheet.file_name, dropped)
    return records
