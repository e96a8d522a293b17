"""Trade preview toolkit: merge exchange trade exports against a securities master."""
from trade_preview.application.use_cases import BuildTradePreviewUseCase, TradePreviewContext, build_view
from trade_preview.domain.aggregation import TradeAggregator, search_summaries
from trade_preview.domain.models import FilterState, SecurityRecord, TradeRecord, UploadedFile
from trade_preview.infrastructure.repositories.file_repositories import UploadedSheetRepository
from trade_preview.infrastructure.storage.master_store import JsonSecuritiesMasterStore

__all__ = [
    "BuildTradePreviewUseCase",
    "TradePreviewContext",
    "build_view",
    "TradeAggregator",
    "search_summaries",
    "FilterState",
    "SecurityRecord",
    "TradeRecord",
    "UploadedFile",
    "UploadedSheetRepository",
    "JsonSecuritiesMasterStore",
]
