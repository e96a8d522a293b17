"""Streamlit front-end for the trade preview pipeline."""
from __future__ import annotations

from typing import Sequence

import pandas as pd
import streamlit as st

from trade_preview import (
    BuildTradePreviewUseCase,
    FilterState,
    JsonSecuritiesMasterStore,
    TradePreviewContext,
    UploadedFile,
    UploadedSheetRepository,
    build_view,
    search_summaries,
)
from trade_preview.domain.results import PreviewResult, RatingSummary
from trade_preview.presentation.trade_report import (
    records_to_rows,
    render_csv,
    render_summary_csv,
    render_xlsx,
    summaries_to_rows,
)


st.set_page_config(page_title="Trade Preview", layout="wide")
st.title("Trade Preview Builder")


def run_preview(files: Sequence[UploadedFile], use_cache: bool) -> PreviewResult:
    context = TradePreviewContext(
        sheet_repository=UploadedSheetRepository(files),
        master_store=JsonSecuritiesMasterStore() if use_cache else None,
    )
    return BuildTradePreviewUseCase(context).execute()


def summary_frame(summaries: Sequence[RatingSummary]) -> pd.DataFrame:
    return pd.DataFrame(summaries_to_rows(summaries))


if "result" not in st.session_state:
    st.session_state["result"] = None


uploads = st.file_uploader(
    "Upload NSE / BSE trade reports and the securities master list",
    type=["csv", "xlsx", "xls"],
    accept_multiple_files=True,
)
use_cache = st.checkbox("Remember uploaded securities master", value=True)

col_build, col_clear = st.columns([1, 1])
with col_build:
    build_clicked = st.button("Build Preview", disabled=not uploads)
with col_clear:
    if st.button("Clear"):
        st.session_state["result"] = None
        st.rerun()

if build_clicked and uploads:
    files = [UploadedFile(name=upload.name, content=upload.read()) for upload in uploads]
    with st.spinner("Parsing files..."):
        st.session_state["result"] = run_preview(files, use_cache)

result: PreviewResult | None = st.session_state.get("result")
if not result:
    st.info("Upload files and build a preview to see trades.")
else:
    if result.has_failures():
        st.error(result.error_message())

    with st.sidebar:
        st.header("Filters")
        raw_filters = {
            "exchange": st.text_input("Exchange"),
            "trade_date": st.text_input("Trade date"),
            "trade_time": st.text_input("Trade time"),
            "identifier": st.text_input("ISIN"),
            "issuer": st.text_input("Issuer"),
            "maturity": st.text_input("Maturity"),
            "min_amount": st.text_input("Min amount (lacs)"),
            "max_amount": st.text_input("Max amount (lacs)"),
            "min_price": st.text_input("Min price"),
            "max_price": st.text_input("Max price"),
            "traded_yield": st.text_input("Yield"),
            "status": st.text_input("Status"),
            "deal_type": st.text_input("Deal type"),
            "rating": st.text_input("Rating"),
            "start_date": st.text_input("From date (YYYY-MM-DD)"),
            "end_date": st.text_input("To date (YYYY-MM-DD)"),
        }
    filters = FilterState.from_mapping(raw_filters)
    view = build_view(result.all_records, result.securities, filters)

    caption = f"Showing {len(view.records)} of {len(view.all_records)} trades"
    if filters.is_active():
        caption += " (filters active)"
    st.caption(caption)
    tabs = st.tabs(["Trades", "Summary"])
    with tabs[0]:
        st.dataframe(pd.DataFrame(records_to_rows(view.records, view.max_rating_columns)))
        st.download_button(
            "Download CSV",
            data=render_csv(view.records, view.max_rating_columns),
            file_name="merged_trades.csv",
            mime="text/csv",
        )
        st.download_button(
            "Download XLSX",
            data=render_xlsx(view.records, view.max_rating_columns),
            file_name="merged_trades.xlsx",
            mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        )
    with tabs[1]:
        search = st.text_input("Search summary", key="summary_search")
        summaries = search_summaries(view.summaries, search)
        st.dataframe(summary_frame(summaries))
        st.download_button(
            "Download summary CSV",
            data=render_summary_csv(summaries),
            file_name="trade_summary.csv",
            mime="text/csv",
        )
