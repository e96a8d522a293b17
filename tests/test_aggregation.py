import pytest

from trade_preview.domain.aggregation import TradeAggregator, normalize_rating_group, search_summaries
from trade_preview.domain.models import TradeRecord


def make_record(**overrides):
    values = dict(
        exchange="NSE",
        trade_date="2025-01-16",
        trade_time="10:00:00",
        identifier="INE002A08106",
        maturity_date="2030-12-10",
        amount=5.0,
        price=100.0,
        traded_yield="8",
        deal_type="DIRECT",
        issuer_details="Acme",
        rating_parts=("AAA", "Stable"),
    )
    values.update(overrides)
    return TradeRecord(**values)


@pytest.mark.parametrize(
    "label, group",
    [
        ("CRISIL AAA/Stable", "AAA"),
        ("AA+", "AA"),
        ("A-", "A"),
        ("BBB (SO)", "BBB"),
        ("D", "D"),
        ("ICRA A1+", "UNRATED"),
        ("Unrated", "UNRATED"),
        ("", "UNRATED"),
        (None, "UNRATED"),
    ],
)
def test_normalize_rating_group(label, group):
    assert normalize_rating_group(label) == group


def test_weighted_average_yield():
    records = [make_record(amount=5.0, traded_yield="8"), make_record(amount=5.0, traded_yield="9")]
    [summary] = TradeAggregator().summarize(records)
    [(bucket, row)] = list(summary.iter_rows())

    assert summary.rating == "AAA"
    assert bucket.key == "UNDER_10"
    assert row.trade_count == 2
    assert row.sum_amount == 10.0
    assert row.weighted_average == pytest.approx(8.5)
    assert row.labels == ("DIRECT / 8", "DIRECT / 9")


def test_weighted_average_ignores_non_numeric_yields():
    records = [make_record(amount=4.0, traded_yield="7"), make_record(amount=6.0, traded_yield="")]
    [summary] = TradeAggregator().summarize(records)
    [(_, row)] = list(summary.iter_rows())
    assert row.sum_amount == 10.0
    assert row.weighted_average == pytest.approx(7.0)

    [summary] = TradeAggregator().summarize([make_record(traded_yield="")])
    [(_, row)] = list(summary.iter_rows())
    assert row.weighted_average is None
    assert row.broker_yield == "DIRECT"


def test_bucket_boundaries_are_half_open():
    records = [
        make_record(amount=9.999, identifier="INE000000001"),
        make_record(amount=10.0, identifier="INE000000002"),
        make_record(amount=2500.0, identifier="INE000000003"),
    ]
    [summary] = TradeAggregator().summarize(records)
    placed = {row.identifier: bucket.key for bucket, row in summary.iter_rows()}

    assert placed == {
        "INE000000001": "UNDER_10",
        "INE000000002": "BETWEEN_10_50",
        "INE000000003": "ABOVE_2500",
    }
    assert len(summary.buckets) == 6


def test_non_positive_amounts_are_excluded():
    records = [make_record(amount=0.0), make_record(amount=-5.0)]
    assert TradeAggregator().summarize(records) == []


def test_groups_sorted_and_defaults_applied():
    records = [
        make_record(rating_parts=(), rating="", issuer_details="", maturity_date=""),
        make_record(rating_parts=("BBB",)),
        make_record(rating_parts=("AA",)),
    ]
    summaries = TradeAggregator().summarize(records)

    assert [s.rating for s in summaries] == ["AA", "BBB", "UNRATED"]
    [(_, unrated_row)] = list(summaries[-1].iter_rows())
    assert unrated_row.issuer == "Unknown Issuer"
    assert unrated_row.maturity == "-"


def test_rows_sorted_by_sum_then_yield():
    records = [
        make_record(identifier="INE000000001", amount=5.0, traded_yield="7"),
        make_record(identifier="INE000000002", amount=8.0, traded_yield="7"),
        make_record(identifier="INE000000003", amount=5.0, traded_yield="9"),
        make_record(identifier="INE000000004", amount=5.0, traded_yield=""),
    ]
    [summary] = TradeAggregator().summarize(records)
    assert [row.identifier for _, row in summary.iter_rows()] == [
        "INE000000002",
        "INE000000003",
        "INE000000001",
        "INE000000004",
    ]


def test_search_summaries():
    records = [
        make_record(rating_parts=("AAA",), issuer_details="Acme"),
        make_record(rating_parts=("AA",), issuer_details="Beta Housing", identifier="INE000000002"),
        make_record(rating_parts=("BBB",), issuer_details="Gamma", identifier="INE000000003"),
    ]
    summaries = TradeAggregator().summarize(records)

    assert search_summaries(summaries, "") == summaries
    assert [s.rating for s in search_summaries(summaries, "aa")] == ["AA", "AAA"]

    [hit] = search_summaries(summaries, "housing")
    assert hit.rating == "AA"
    assert [row.issuer for _, row in hit.iter_rows()] == ["Beta Housing"]

    assert search_summaries(summaries, "no such issuer") == []
