"""Domain models for the trade preview pipeline.

These dataclasses capture the canonical schema for normalized trade rows and
the reference data they are reconciled against.
"""
from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import date
from enum import Enum
from typing import Any, Mapping, Sequence

from .normalizers import to_numeric


class Exchange(str, Enum):
    NSE = "NSE"
    BSE = "BSE"


class SheetType(str, Enum):
    SECURITIES = "SECURITIES"
    NSE = "NSE"
    BSE = "BSE"
    UNKNOWN = "UNKNOWN"


@dataclass(frozen=True)
class ParsedSheet:
    """Header row and raw data rows read from the first sheet of an upload."""

    file_name: str
    headers: Sequence[str]
    rows: Sequence[Sequence[Any]]


@dataclass(frozen=True)
class SecurityRecord:
    """Securities-master entry keyed by ISIN."""

    identifier: str
    issuer: str = ""
    rating: str = ""


@dataclass(frozen=True)
class TradeRecord:
    """Unified trade row produced from either exchange's export."""

    exchange: str
    trade_date: str
    trade_time: str
    identifier: str
    maturity_date: str
    amount: float
    price: float
    traded_yield: str = ""
    status: str = ""
    deal_type: str = ""
    issuer_details: str = ""
    rating: str = ""
    rating_parts: tuple[str, ...] = ()
    source: str = ""
    lineage: str | None = None


@dataclass(frozen=True)
class FilterState:
    """One optional constraint per trade field; ``None`` means unset."""

    exchange: str | None = None
    trade_date: str | None = None
    trade_time: str | None = None
    identifier: str | None = None
    issuer: str | None = None
    maturity: str | None = None
    min_amount: float | None = None
    max_amount: float | None = None
    min_price: float | None = None
    max_price: float | None = None
    traded_yield: str | None = None
    status: str | None = None
    deal_type: str | None = None
    rating: str | None = None
    start_date: str | date | None = None
    end_date: str | date | None = None

    NUMERIC_FIELDS = ("min_amount", "max_amount", "min_price", "max_price")

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "FilterState":
        """Build a filter from loosely typed form values; blanks are unset."""
        known = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, value in values.items():
            if key not in known or value is None:
                continue
            if key in cls.NUMERIC_FIELDS:
                kwargs[key] = to_numeric(value)
            elif isinstance(value, date):
                kwargs[key] = value
            else:
                text = str(value).strip()
                kwargs[key] = text or None
        return cls(**kwargs)

    def is_active(self) -> bool:
        return any(getattr(self, f.name) not in (None, "") for f in fields(self))


@dataclass(frozen=True)
class SummaryKey:
    rating_group: str
    bucket_key: str
    identifier: str
    issuer: str
    maturity: str


@dataclass
class AggregationCell:
    """Running totals for one rating/bucket/security cell."""

    key: SummaryKey
    trade_count: int = 0
    sum_amount: float = 0.0
    weighted_yield_numerator: float = 0.0
    weighted_yield_denominator: float = 0.0
    labels: dict[str, None] = field(default_factory=dict)

    @property
    def weighted_average(self) -> float | None:
        if self.weighted_yield_denominator <= 0:
            return None
        return self.weighted_yield_numerator / self.weighted_yield_denominator


@dataclass(frozen=True)
class UploadedFile:
    name: str
    content: bytes
