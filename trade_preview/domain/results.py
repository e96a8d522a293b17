"""Domain-level results for trade previews."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Mapping, Sequence

from trade_preview.config import AmountBucket

from .models import SecurityRecord, TradeRecord


@dataclass(frozen=True)
class SummaryRow:
    issuer: str
    identifier: str
    maturity: str
    trade_count: int
    sum_amount: float
    weighted_average: float | None
    labels: tuple[str, ...]

    @property
    def broker_yield(self) -> str:
        return ", ".join(self.labels) if self.labels else "-"


@dataclass(frozen=True)
class BucketSummary:
    bucket: AmountBucket
    rows: Sequence[SummaryRow] = field(default_factory=tuple)

    @property
    def key(self) -> str:
        return self.bucket.key

    @property
    def label(self) -> str:
        return self.bucket.label


@dataclass(frozen=True)
class RatingSummary:
    rating: str
    buckets: Sequence[BucketSummary]

    def has_rows(self) -> bool:
        return any(bucket.rows for bucket in self.buckets)

    def iter_rows(self) -> Iterable[tuple[BucketSummary, SummaryRow]]:
        for bucket in self.buckets:
            for row in bucket.rows:
                yield bucket, row


@dataclass(frozen=True)
class FileFailure:
    file_name: str
    message: str


@dataclass(frozen=True)
class PreviewResult:
    records: Sequence[TradeRecord]
    securities: Mapping[str, SecurityRecord]
    summaries: Sequence[RatingSummary]
    max_rating_columns: int
    all_records: Sequence[TradeRecord] = field(default_factory=tuple)
    failures: Sequence[FileFailure] = field(default_factory=tuple)

    def has_failures(self) -> bool:
        return bool(self.failures)

    def error_message(self) -> str | None:
        if not self.failures:
            return None
        details = "; ".join(f"{f.file_name}: {f.message}" for f in self.failures)
        return f"Failed to parse {len(self.failures)} file(s): {details}"
