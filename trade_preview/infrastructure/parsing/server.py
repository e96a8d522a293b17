"""Mapping between backend transaction payloads and canonical trade records.

The trading API stores transactions under its own field names and returns
them a page at a time. Records fetched that way are run through the same
normalisers as file uploads before they are treated as :class:`TradeRecord`.
Clients of that API (a sync job or a service front-end) call these helpers;
the file-based CLI and Streamlit page do not.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Iterable, Mapping, Sequence

from trade_preview.domain.models import Exchange, FilterState, SecurityRecord, TradeRecord
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
from trade_preview.domain.services import reconcile

MAX_PAGE_SIZE = 500


@dataclass(frozen=True)
class PageSummary:
    total_amount: float
    avg_yield: float | None
    trade_count: int


@dataclass(frozen=True)
class TransactionsPage:
    page: int
    per_page: int
    total: int
    total_pages: int
    summary: PageSummary
    records: Sequence[TradeRecord] = field(default_factory=tuple)
    filters_applied: Mapping[str, Any] = field(default_factory=dict)


def _first_present(item: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        value = item.get(key)
        if value not in (None, ""):
            return value
    return None


def _amount(item: Mapping[str, Any], exchange: str) -> float:
    value = to_numeric(item.get("tradeAmountValue"))
    if value is not None:
        return value
    raw = item.get("tradeAmountRaw")
    if exchange == Exchange.NSE.value:
        return rupees_to_lacs(raw)
    return to_numeric(raw) or 0.0


def _source_name(source: Any) -> str:
    if isinstance(source, Mapping):
        return to_text(source.get("fileName"))
    return ""


def server_item_to_record(item: Mapping[str, Any]) -> TradeRecord | None:
    identifier = normalize_identifier(item.get("isin"))
    if not is_valid_identifier(identifier):
        return None
    exchange = to_text(item.get("exchange")).upper() or "UNKNOWN"
    price = to_numeric(_first_present(item, "tradePriceValue", "tradePriceRaw"))
    return TradeRecord(
        exchange=exchange,
        trade_date=normalize_date(item.get("tradeDate")),
        trade_time=normalize_time(item.get("tradeTime")),
        identifier=identifier,
        maturity_date=normalize_date(item.get("maturityDate")),
        amount=_amount(item, exchange),
        price=price or 0.0,
        traded_yield=sanitize_display(_first_present(item, "yieldRaw", "yieldValue")),
        status=sanitize_display(item.get("settlementStatus")),
        deal_type=to_text(item.get("orderType")).upper(),
        issuer_details=to_text(item.get("issuerName")),
        rating=to_text(item.get("rating")),
        source=_source_name(item.get("source")),
        lineage=to_text(item.get("transactionId")) or None,
    )


def server_to_records(
    items: Iterable[Mapping[str, Any]],
    securities: Mapping[str, SecurityRecord] | None = None,
) -> list[TradeRecord]:
    records = [record for record in map(server_item_to_record, items) if record is not None]
    return reconcile(records, securities or {})


def parse_transactions_page(
    payload: Mapping[str, Any],
    securities: Mapping[str, SecurityRecord] | None = None,
) -> TransactionsPage:
    summary = payload.get("summary") or {}
    return TransactionsPage(
        page=int(payload.get("page") or 1),
        per_page=int(payload.get("perPage") or 0),
        total=int(payload.get("total") or 0),
        total_pages=int(payload.get("totalPages") or 0),
        summary=PageSummary(
            total_amount=to_numeric(summary.get("totalAmount")) or 0.0,
            avg_yield=to_numeric(summary.get("avgYield")),
            trade_count=int(summary.get("tradeCount") or 0),
        ),
        records=tuple(server_to_records(payload.get("data") or (), securities)),
        filters_applied=dict(payload.get("filtersApplied") or {}),
    )


def _format_bound(value: str | date | None) -> str | None:
    if value in (None, ""):
        return None
    return normalize_date(value) or None


def filter_to_query_params(state: FilterState, page: int = 1, limit: int = 100) -> dict[str, str]:
    """Query string for the paginated transactions endpoint."""
    params: dict[str, Any] = {
        "ratingGroup": (state.rating or "").strip().upper() or None,
        "startDate": _format_bound(state.start_date),
        "endDate": _format_bound(state.end_date),
        "exchange": (state.exchange or "").strip().upper() or None,
        "tradeTime": state.trade_time,
        "isin": (state.identifier or "").strip().upper() or None,
        "issuer": state.issuer,
        "maturity": state.maturity,
        "minAmt": state.min_amount,
        "maxAmt": state.max_amount,
        "minPrice": state.min_price,
        "maxPrice": state.max_price,
        "yield": state.traded_yield,
        "status": state.status,
        "dealType": state.deal_type,
    }
    if state.trade_date:
        params["date"] = state.trade_date
    query = {key: str(value) for key, value in params.items() if value not in (None, "")}
    query["page"] = str(max(int(page), 1))
    query["limit"] = str(min(max(int(limit), 1), MAX_PAGE_SIZE))
    return query
