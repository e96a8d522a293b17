"""Domain services: securities join, ordering and filtering of trade records."""
from __future__ import annotations

import re
from dataclasses import replace
from datetime import date, datetime, time
from typing import Iterable, Mapping, Sequence

from .models import FilterState, SecurityRecord, TradeRecord
from .normalizers import parse_date_value, split_rating

_RATING_TOKEN_SPLIT = re.compile(r"[,\s/|]+")
_RATING_TOKEN_STRIP = re.compile(r"[^A-Z+/-]")


def reconcile(
    records: Iterable[TradeRecord], securities: Mapping[str, SecurityRecord]
) -> list[TradeRecord]:
    """Attach issuer and rating from the securities master and split the rating."""
    reconciled: list[TradeRecord] = []
    for record in records:
        security = securities.get(record.identifier)
        issuer = security.issuer if security else record.issuer_details
        rating = (security.rating if security else record.rating or "").strip()
        reconciled.append(
            replace(
                record,
                issuer_details=issuer,
                rating=rating,
                rating_parts=split_rating(rating),
            )
        )
    return reconciled


def sort_records(records: Iterable[TradeRecord]) -> list[TradeRecord]:
    """Trade date descending, then exchange and identifier ascending."""
    ordered = sorted(records, key=lambda r: (r.exchange, r.identifier))
    ordered.sort(key=lambda r: r.trade_date, reverse=True)
    return ordered


def max_rating_columns(records: Iterable[TradeRecord]) -> int:
    return max([1, *(len(record.rating_parts) for record in records)])


class TradeFilter:
    """Evaluates a :class:`FilterState` against trade records."""

    _TEXT_FIELDS = (
        ("exchange", "exchange"),
        ("trade_date", "trade_date"),
        ("trade_time", "trade_time"),
        ("identifier", "identifier"),
        ("issuer", "issuer_details"),
        ("maturity", "maturity_date"),
        ("traded_yield", "traded_yield"),
        ("status", "status"),
        ("deal_type", "deal_type"),
    )

    def __init__(self, state: FilterState) -> None:
        self._state = state
        self._start = self._bound(state.start_date, time.min)
        self._end = self._bound(state.end_date, time.max)
        needle = (state.rating or "").strip().upper()
        self._rating = needle or None

    def apply(self, records: Sequence[TradeRecord]) -> list[TradeRecord]:
        return [record for record in records if self.matches(record)]

    def matches(self, record: TradeRecord) -> bool:
        state = self._state
        for filter_field, record_field in self._TEXT_FIELDS:
            needle = getattr(state, filter_field)
            if needle and not self._contains(getattr(record, record_field), needle):
                return False

        if not self._in_range(record.amount, state.min_amount, state.max_amount):
            return False
        if not self._in_range(record.price, state.min_price, state.max_price):
            return False
        if not self._in_date_range(record.trade_date):
            return False
        if self._rating and not self._rating_matches(record):
            return False
        return True

    @staticmethod
    def _contains(value: object, needle: str) -> bool:
        return str(needle).strip().casefold() in str(value or "").casefold()

    @staticmethod
    def _in_range(value: float, lower: float | None, upper: float | None) -> bool:
        if lower is not None and value < lower:
            return False
        if upper is not None and value > upper:
            return False
        return True

    @staticmethod
    def _bound(value: str | date | None, at: time) -> datetime | None:
        if value in (None, ""):
            return None
        parsed = parse_date_value(value)
        if parsed is None:
            return None
        return datetime.combine(parsed, at)

    def _in_date_range(self, trade_date: str) -> bool:
        if self._start is None and self._end is None:
            return True
        parsed = parse_date_value(trade_date)
        if parsed is None:
            return False
        moment = datetime.combine(parsed, time.min)
        if self._start is not None and moment < self._start:
            return False
        if self._end is not None and moment > self._end:
            return False
        return True

    def _rating_matches(self, record: TradeRecord) -> bool:
        sources = record.rating_parts or ((record.rating,) if record.rating else ())
        for source in sources:
            for token in _RATING_TOKEN_SPLIT.split(str(source).upper()):
                cleaned = _RATING_TOKEN_STRIP.sub("", token)
                if cleaned and cleaned.startswith(self._rating):
                    return True
        return False


def filter_records(records: Sequence[TradeRecord], state: FilterState) -> list[TradeRecord]:
    return TradeFilter(state).apply(records)
