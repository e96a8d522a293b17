"""Application services orchestrating the trade preview workflow."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Sequence

from trade_preview.application.dto import PreviewRequest
from trade_preview.domain.aggregation import TradeAggregator
from trade_preview.domain.headers import detect_sheet_type, resolve_exchange
from trade_preview.domain.models import Exchange, FilterState, ParsedSheet, SecurityRecord, SheetType, TradeRecord
from trade_preview.domain.repositories import SecuritiesMasterStore, SheetRepository
from trade_preview.domain.results import FileFailure, PreviewResult
from trade_preview.domain.services import filter_records, max_rating_columns, reconcile, sort_records
from trade_preview.infrastructure.parsing.bse import bse_to_records
from trade_preview.infrastructure.parsing.nse import nse_to_records
from trade_preview.infrastructure.parsing.securities import securities_to_map
from trade_preview.utils.logger import get_logger

LOGGER = get_logger(__name__)

EXTRACTORS = {
    Exchange.NSE: nse_to_records,
    Exchange.BSE: bse_to_records,
}


@dataclass(slots=True)
class TradePreviewContext:
    sheet_repository: SheetRepository
    master_store: SecuritiesMasterStore | None = None
    aggregator: TradeAggregator = field(default_factory=TradeAggregator)


def extract_sheets(sheets: Sequence[ParsedSheet]) -> tuple[list[TradeRecord], dict[str, SecurityRecord]]:
    """Split sheets into trade rows and securities-master entries."""
    trades: list[TradeRecord] = []
    securities: dict[str, SecurityRecord] = {}
    for sheet in sheets:
        sheet_type = detect_sheet_type(sheet.headers)
        if sheet_type is SheetType.SECURITIES:
            entries = securities_to_map(sheet)
            securities.update(entries)
            LOGGER.info("%s -> securities master (%d securities)", sheet.file_name, len(entries))
            continue

        exchange = resolve_exchange(sheet_type, sheet.file_name)
        if exchange is None:
            LOGGER.warning("Unable to detect exchange for %s; skipping", sheet.file_name)
            continue
        extracted = EXTRACTORS[exchange](sheet, exchange.value)
        trades.extend(extracted)
        LOGGER.info(
            "%s -> %s (%s headers, %d of %d rows)",
            sheet.file_name,
            exchange.value,
            sheet_type.value,
            len(extracted),
            len(sheet.rows),
        )
    return trades, securities


def build_view(
    records: Sequence[TradeRecord],
    securities: Mapping[str, SecurityRecord],
    filters: FilterState | None = None,
    failures: Sequence[FileFailure] = (),
    aggregator: TradeAggregator | None = None,
) -> PreviewResult:
    """Filter and aggregate an already reconciled, sorted record set."""
    filtered = filter_records(records, filters or FilterState())
    summaries = (aggregator or TradeAggregator()).summarize(filtered)
    return PreviewResult(
        records=tuple(filtered),
        securities=dict(securities),
        summaries=tuple(summaries),
        max_rating_columns=max_rating_columns(records),
        all_records=tuple(records),
        failures=tuple(failures),
    )


class BuildTradePreviewUseCase:
    def __init__(self, context: TradePreviewContext) -> None:
        self._context = context

    def execute(self, request: PreviewRequest | None = None) -> PreviewResult:
        request = request or PreviewRequest()
        sheets, failures = self._context.sheet_repository.list_sheets()
        trades, uploaded = extract_sheets(sheets)

        securities: dict[str, SecurityRecord] = {}
        store = self._context.master_store
        if store is not None:
            securities.update(store.load())
            if uploaded and request.persist_master:
                store.save(uploaded)
        securities.update(uploaded)

        records = sort_records(reconcile(trades, securities))
        LOGGER.info("Built %d trade records against %d securities", len(records), len(securities))
        if failures:
            LOGGER.warning("%d file(s) failed to parse", len(failures))
        return build_view(
            records,
            securities,
            filters=request.filters,
            failures=failures,
            aggregator=self._context.aggregator,
        )
