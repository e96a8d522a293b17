from trade_preview.domain.models import ParsedSheet
from trade_preview.infrastructure.parsing.bse import bse_to_records
from trade_preview.infrastructure.parsing.nse import derive_deal_type, nse_to_records
from trade_preview.infrastructure.parsing.securities import securities_to_map

NSE_HEADERS = (
    "Date",
    "Seller Deal Type",
    "Buyer Deal Type",
    "ISIN",
    "Description",
    "Maturity Date",
    "Deal size",
    "Price",
    "Yield",
    "Settlement status",
    "Trade Time",
)


def make_nse_sheet(*rows):
    return ParsedSheet(file_name="nse_trades.csv", headers=NSE_HEADERS, rows=rows)


def test_nse_row_is_normalized():
    sheet = make_nse_sheet(
        ["16-01-2025", "DIRECT", "DIRECT", "ine0abcdef12", "Bond", "10/12/2030", 500000, 101.25, 7.5, "Settled", 0.4375],
    )
    [record] = nse_to_records(sheet)

    assert record.exchange == "NSE"
    assert record.trade_date == "2025-01-16"
    assert record.trade_time == "10:30:00"
    assert record.identifier == "INE0ABCDEF12"
    assert record.maturity_date == "2030-12-10"
    assert record.amount == 5.0
    assert record.price == 101.25
    assert record.traded_yield == "7.5"
    assert record.status == "Settled"
    assert record.deal_type == "DIRECT"
    assert record.source == "nse_trades.csv"
    assert record.lineage == "row=1"


def test_rows_without_valid_isin_are_dropped():
    valid = ["16-01-2025", "DIRECT", "DIRECT", "INE0ABCDEF12", "", "", "100000", "", "", "", ""]
    sheet = make_nse_sheet(
        valid,
        ["16-01-2025", "DIRECT", "DIRECT", "INE0ABCDEF1", "", "", "100000", "", "", "", ""],
        ["", "", "", "", "", "", "", "", "", "", ""],
        ["16-01-2025", "DIRECT", "DIRECT", "INE0-ABCDEF1", "", "", "100000", "", "", "", ""],
        [None] * 11,
    )
    records = nse_to_records(sheet)

    assert [r.identifier for r in records] == ["INE0ABCDEF12"]
    assert all(len(r.identifier) == 12 and r.identifier.isalnum() for r in records)


def test_nse_placeholders_and_bad_numbers():
    sheet = make_nse_sheet(
        ["16-01-2025", "", "", "INE0ABCDEF12", "", "", "n/a", "abc", "N.A.", "--", ""],
    )
    [record] = nse_to_records(sheet)

    assert record.amount == 0.0
    assert record.price == 0.0
    assert record.traded_yield == ""
    assert record.status == ""
    assert record.deal_type == ""
    assert record.trade_time == ""


def test_nse_tolerates_missing_columns_and_short_rows():
    sheet = ParsedSheet(file_name="nse.csv", headers=("ISIN", "Deal size"), rows=(["INE0ABCDEF12"],))
    [record] = nse_to_records(sheet)
    assert record.amount == 0.0
    assert record.trade_date == ""
    assert record.price == 0.0


def test_derive_deal_type():
    assert derive_deal_type("DIRECT", "direct") == "DIRECT"
    assert derive_deal_type("BROKERED", "DIRECT") == "BROKERED"
    assert derive_deal_type("", "Brokered") == "BROKERED"
    assert derive_deal_type("Inter Scheme", "") == "INTER SCHEME"
    assert derive_deal_type("", "Inter Scheme") == "INTER SCHEME"
    assert derive_deal_type(None, None) == ""


BSE_HEADERS = (
    "Deal Date",
    "ISIN",
    "Issuer Name",
    "Maturity Date",
    "Trade Amount (In Rs Lacs)",
    "Trade Price (Rs)",
    "Traded Yield (%)",
    "Trade Time",
    "Order Type",
)


def test_bse_row_is_normalized():
    sheet = ParsedSheet(
        file_name="bse_report.xlsx",
        headers=BSE_HEADERS,
        rows=(["15/01/2025", "INE002A08106", "Acme", "01/06/2030", "250.5", "99.8", "8.10", "14:05", "brokered"],),
    )
    [record] = bse_to_records(sheet)

    assert record.exchange == "BSE"
    assert record.trade_date == "2025-01-15"
    assert record.trade_time == "14:05:00"
    assert record.maturity_date == "2030-06-01"
    assert record.amount == 250.5
    assert record.price == 99.8
    assert record.traded_yield == "8.10"
    assert record.deal_type == "BROKERED"
    assert record.issuer_details == ""


def test_bse_amount_alias_chain_falls_through_to_next_column():
    sheet = ParsedSheet(
        file_name="bse.csv",
        headers=("ISIN", "Trade Amount (Rs Lacs)", "Amount"),
        rows=(["INE002A08106", "", "75"], ["INE002A08107", "12.5", "75"], ["INE002A08108", "", ""]),
    )
    records = bse_to_records(sheet)
    assert [r.amount for r in records] == [75.0, 12.5, 0.0]


def test_extractor_honours_exchange_override():
    sheet = ParsedSheet(file_name="nse.csv", headers=("ISIN", "Order Type"), rows=(["INE002A08106", "direct"],))
    [record] = bse_to_records(sheet, "NSE")
    assert record.exchange == "NSE"


def test_securities_master_map():
    sheet = ParsedSheet(
        file_name="master.xlsx",
        headers=("ISIN Code", "Name of Issuer", "Credit Rating"),
        rows=(
            ["ine002a08106", "Acme", "AAA;Stable"],
            ["INE002A08106", "Acme Ltd", "AAA | Stable"],
            ["BAD", "Nobody", "D"],
            ["INE0ABCDEF12", None, None],
        ),
    )
    securities = securities_to_map(sheet)

    assert set(securities) == {"INE002A08106", "INE0ABCDEF12"}
    assert securities["INE002A08106"].issuer == "Acme Ltd"
    assert securities["INE002A08106"].rating == "AAA | Stable"
    assert securities["INE0ABCDEF12"].issuer == ""
