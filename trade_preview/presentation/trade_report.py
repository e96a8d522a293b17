"""Export helpers for unified trades and their rating summaries."""
from __future__ import annotations

import csv
import io
from html import escape
from typing import Sequence

import pandas as pd

from trade_preview.domain.models import TradeRecord
from trade_preview.domain.results import RatingSummary
from trade_preview.domain.services import max_rating_columns

TRADE_COLUMNS = [
    "Exchange",
    "Trade Date",
    "Trade Time",
    "ISIN",
    "Issuer details",
    "Maturity Date",
    "Amount (Rs lacs)",
    "Price (Rs)",
    "Yield",
    "Status",
    "Deal Type",
]

SUMMARY_COLUMNS = [
    "Rating",
    "Bucket",
    "Issuer",
    "ISIN",
    "Maturity",
    "Trades",
    "Sum Amount (Rs lacs)",
    "Weighted Avg Yield",
    "Broker / Yield",
]


def rating_headers(count: int) -> list[str]:
    if count <= 1:
        return ["Rating"]
    return [f"Rating {n}" for n in range(1, count + 1)]


def records_to_rows(
    records: Sequence[TradeRecord], rating_columns: int | None = None
) -> list[dict[str, object]]:
    count = rating_columns or max_rating_columns(records)
    headers = rating_headers(count)
    rows: list[dict[str, object]] = []
    for record in records:
        row: dict[str, object] = {
            "Exchange": record.exchange,
            "Trade Date": record.trade_date,
            "Trade Time": record.trade_time,
            "ISIN": record.identifier,
            "Issuer details": record.issuer_details,
            "Maturity Date": record.maturity_date,
            "Amount (Rs lacs)": record.amount,
            "Price (Rs)": record.price,
            "Yield": record.traded_yield,
            "Status": record.status,
            "Deal Type": record.deal_type,
        }
        parts = list(record.rating_parts) or ([record.rating] if record.rating else [])
        for idx, header in enumerate(headers):
            row[header] = parts[idx] if idx < len(parts) else ""
        rows.append(row)
    return rows


def render_csv(records: Sequence[TradeRecord], rating_columns: int | None = None) -> bytes:
    count = rating_columns or max_rating_columns(records)
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=TRADE_COLUMNS + rating_headers(count))
    writer.writeheader()
    writer.writerows(records_to_rows(records, count))
    return buffer.getvalue().encode("utf-8")


def render_xlsx(records: Sequence[TradeRecord], rating_columns: int | None = None) -> bytes:
    count = rating_columns or max_rating_columns(records)
    frame = pd.DataFrame(records_to_rows(records, count), columns=TRADE_COLUMNS + rating_headers(count))
    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        frame.to_excel(writer, sheet_name="Merged Trades", index=False)
    return buffer.getvalue()


def summaries_to_rows(summaries: Sequence[RatingSummary]) -> list[dict[str, str]]:
    rows: list[dict[str, str]] = []
    for summary in summaries:
        for bucket, row in summary.iter_rows():
            rows.append(
                {
                    "Rating": summary.rating,
                    "Bucket": bucket.label,
                    "Issuer": row.issuer,
                    "ISIN": row.identifier,
                    "Maturity": row.maturity,
                    "Trades": str(row.trade_count),
                    "Sum Amount (Rs lacs)": f"{row.sum_amount:.2f}",
                    "Weighted Avg Yield": "" if row.weighted_average is None else f"{row.weighted_average:.2f}",
                    "Broker / Yield": row.broker_yield,
                }
            )
    return rows


def render_summary_csv(summaries: Sequence[RatingSummary]) -> bytes:
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=SUMMARY_COLUMNS)
    writer.writeheader()
    writer.writerows(summaries_to_rows(summaries))
    return buffer.getvalue().encode("utf-8")


def render_summary_html(summaries: Sequence[RatingSummary]) -> str:
    rows = summaries_to_rows(summaries)
    if not rows:
        return "<p>No trades to summarise.</p>"
    header = "".join(f"<th>{escape(col)}</th>" for col in SUMMARY_COLUMNS)
    body_parts = []
    for row in rows:
        body_parts.append("<tr>" + "".join(f"<td>{escape(row[col])}</td>" for col in SUMMARY_COLUMNS) + "</tr>")
    body_html = "".join(body_parts)
    return f"<table><thead><tr>{header}</tr></thead><tbody>{body_html}</tbody></table>"
