"""Rating and amount-bucket aggregation of filtered trade records."""
from __future__ import annotations

import re
from typing import Sequence

from trade_preview.config import SETTINGS, AmountBucket

from .models import AggregationCell, SummaryKey, TradeRecord
from .normalizers import to_numeric
from .results import BucketSummary, RatingSummary, SummaryRow

_RATING_GROUP = re.compile(r"(?:^|\s)([ABCD]{1,3})(?=[+\-/\s(]|$)")
_RATING_SHORTCUT = re.compile(r"^[A-Z+/\\-]+$")


def normalize_rating_group(label: str | None) -> str:
    match = _RATING_GROUP.search(str(label or "").upper())
    return match.group(1) if match else SETTINGS.unrated


class TradeAggregator:
    """Groups trade records into rating -> amount bucket -> security cells."""

    def __init__(self, buckets: Sequence[AmountBucket] | None = None) -> None:
        self._buckets = tuple(buckets or SETTINGS.amount_buckets)

    def summarize(self, records: Sequence[TradeRecord]) -> list[RatingSummary]:
        cells: dict[str, dict[str, dict[SummaryKey, AggregationCell]]] = {}
        for record in records:
            amount = to_numeric(record.amount)
            if amount is None or amount <= 0:
                continue
            bucket = self._bucket_for(amount)
            if bucket is None:
                continue
            key = self._key_for(record, bucket)
            by_bucket = cells.setdefault(key.rating_group, {})
            by_key = by_bucket.setdefault(bucket.key, {})
            cell = by_key.get(key)
            if cell is None:
                cell = by_key[key] = AggregationCell(key=key)
            self._accumulate(cell, record, amount)

        summaries = [
            RatingSummary(rating=rating, buckets=self._bucket_summaries(by_bucket))
            for rating, by_bucket in cells.items()
        ]
        summaries = [summary for summary in summaries if summary.has_rows()]
        summaries.sort(key=lambda summary: summary.rating)
        return summaries

    def _bucket_for(self, amount: float) -> AmountBucket | None:
        for bucket in self._buckets:
            if bucket.contains(amount):
                return bucket
        return None

    @staticmethod
    def _key_for(record: TradeRecord, bucket: AmountBucket) -> SummaryKey:
        label = (record.rating_parts[0] if record.rating_parts else record.rating or "").strip()
        return SummaryKey(
            rating_group=normalize_rating_group(label or "Unrated"),
            bucket_key=bucket.key,
            identifier=record.identifier or SETTINGS.missing_label,
            issuer=(record.issuer_details or "").strip() or SETTINGS.unknown_issuer,
            maturity=record.maturity_date or SETTINGS.missing_label,
        )

    @staticmethod
    def _accumulate(cell: AggregationCell, record: TradeRecord, amount: float) -> None:
        cell.trade_count += 1
        cell.sum_amount += amount
        yield_value = to_numeric(record.traded_yield)
        if yield_value is not None:
            cell.weighted_yield_numerator += yield_value * amount
            cell.weighted_yield_denominator += amount
        label = " / ".join(part for part in (record.deal_type, record.traded_yield) if part)
        if label:
            cell.labels.setdefault(label, None)

    def _bucket_summaries(self, by_bucket: dict[str, dict[SummaryKey, AggregationCell]]) -> tuple[BucketSummary, ...]:
        summaries = []
        for bucket in self._buckets:
            rows = [self._to_row(cell) for cell in by_bucket.get(bucket.key, {}).values()]
            rows.sort(
                key=lambda row: (
                    -row.sum_amount,
                    row.weighted_average is None,
                    -(row.weighted_average or 0.0),
                )
            )
            summaries.append(BucketSummary(bucket=bucket, rows=tuple(rows)))
        return tuple(summaries)

    @staticmethod
    def _to_row(cell: AggregationCell) -> SummaryRow:
        return SummaryRow(
            issuer=cell.key.issuer,
            identifier=cell.key.identifier,
            maturity=cell.key.maturity,
            trade_count=cell.trade_count,
            sum_amount=cell.sum_amount,
            weighted_average=cell.weighted_average,
            labels=tuple(cell.labels),
        )


def summarize(records: Sequence[TradeRecord]) -> list[RatingSummary]:
    return TradeAggregator().summarize(records)


def _haystack(rating: str, bucket: BucketSummary, row: SummaryRow) -> str:
    average = f"{row.weighted_average:.2f}" if row.weighted_average is not None else ""
    return " ".join(
        [
            rating,
            bucket.label,
            row.issuer,
            row.identifier,
            row.maturity,
            str(row.trade_count),
            f"{row.sum_amount:.2f}",
            average,
            row.broker_yield,
        ]
    ).lower()


def search_summaries(summaries: Sequence[RatingSummary], query: str | None) -> list[RatingSummary]:
    """Free-text search over the aggregated view.

    Queries of up to three rating characters (``"AA"``, ``"BB+"``) select
    rating groups by prefix instead of searching row text.
    """
    needle = (query or "").strip()
    if not needle:
        return list(summaries)
    upper = needle.upper()
    lower = needle.lower()
    rating_only = len(upper) <= 3 and bool(_RATING_SHORTCUT.match(upper))

    results: list[RatingSummary] = []
    for summary in summaries:
        rating_upper = summary.rating.upper()
        rating_matches = rating_upper.startswith(upper)
        if rating_only:
            if rating_matches:
                results.append(summary)
            continue

        buckets = tuple(
            BucketSummary(
                bucket=bucket.bucket,
                rows=tuple(row for row in bucket.rows if lower in _haystack(rating_upper, bucket, row)),
            )
            for bucket in summary.buckets
        )
        has_rows = any(bucket.rows for bucket in buckets)
        label_matches = any(lower in bucket.label.lower() for bucket in summary.buckets)
        if rating_matches or has_rows or label_matches:
            results.append(RatingSummary(rating=summary.rating, buckets=buckets))
    return results
