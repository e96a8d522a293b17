"""Command-line entrypoint for building trade previews."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

from trade_preview.application.dto import PreviewRequest
from trade_preview.application.use_cases import BuildTradePreviewUseCase, TradePreviewContext
from trade_preview.domain.models import FilterState
from trade_preview.infrastructure.repositories.file_repositories import UploadedSheetRepository
from trade_preview.infrastructure.storage.master_store import JsonSecuritiesMasterStore
from trade_preview.presentation.trade_report import render_csv, render_summary_csv, render_xlsx


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Merge NSE/BSE trade exports against a securities master")
    parser.add_argument("files", nargs="+", help="CSV/XLSX/XLS trade reports and securities master lists")
    parser.add_argument("-o", "--output", type=str, help="Write merged trades to a .csv or .xlsx file")
    parser.add_argument("--summary-csv", type=str, help="Write the rating/amount summary to a CSV file")
    parser.add_argument("--master-cache", type=str, help="JSON cache of the securities master to read and update")
    parser.add_argument("--exchange", type=str)
    parser.add_argument("--isin", dest="identifier", type=str)
    parser.add_argument("--issuer", type=str)
    parser.add_argument("--rating", type=str)
    parser.add_argument("--deal-type", type=str)
    parser.add_argument("--start-date", type=str, help="Earliest trade date (inclusive)")
    parser.add_argument("--end-date", type=str, help="Latest trade date (inclusive)")
    parser.add_argument("--min-amount", type=str, help="Minimum amount in Rs lacs")
    parser.add_argument("--max-amount", type=str, help="Maximum amount in Rs lacs")
    return parser.parse_args(argv)


def build_filters(args: argparse.Namespace) -> FilterState:
    return FilterState.from_mapping(
        {
            "exchange": args.exchange,
            "identifier": args.identifier,
            "issuer": args.issuer,
            "rating": args.rating,
            "deal_type": args.deal_type,
            "start_date": args.start_date,
            "end_date": args.end_date,
            "min_amount": args.min_amount,
            "max_amount": args.max_amount,
        }
    )


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv or sys.argv[1:])

    store = JsonSecuritiesMasterStore(Path(args.master_cache)) if args.master_cache else None
    context = TradePreviewContext(
        sheet_repository=UploadedSheetRepository.from_paths(args.files),
        master_store=store,
    )
    result = BuildTradePreviewUseCase(context).execute(PreviewRequest(filters=build_filters(args)))

    print("Trade Preview Summary")
    print("=====================")
    print(f"Files: {len(args.files)}")
    print(f"Trade records: {len(result.all_records)}")
    print(f"After filters: {len(result.records)}")
    print(f"Securities: {len(result.securities)}")
    for summary in result.summaries:
        rows = [row for _, row in summary.iter_rows()]
        total = sum(row.sum_amount for row in rows)
        trades = sum(row.trade_count for row in rows)
        print(f"- {summary.rating}: {trades} trades, {total:.2f} lacs")

    if result.has_failures():
        print(f"\n{result.error_message()}")

    if args.output:
        output = Path(args.output)
        if output.suffix.lower() == ".xlsx":
            output.write_bytes(render_xlsx(result.records, result.max_rating_columns))
        else:
            output.write_bytes(render_csv(result.records, result.max_rating_columns))
        print(f"\nWrote {len(result.records)} trades to {output}")
    if args.summary_csv:
        Path(args.summary_csv).write_bytes(render_summary_csv(result.summaries))

    if result.failures and len(result.failures) == len(args.files):
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
