"""Central configuration for the trade preview package."""
from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent
DATA_DIR = BASE_DIR / "data"


@dataclass(slots=True, frozen=True)
class AmountBucket:
    key: str
    label: str
    min: float
    max: float

    def contains(self, amount: float) -> bool:
        return self.min <= amount < self.max


AMOUNT_BUCKETS = (
    AmountBucket("UNDER_10", "Below 10 Lac", 0, 10),
    AmountBucket("BETWEEN_10_50", "Between 10 Lac to 50 Lac", 10, 50),
    AmountBucket("BETWEEN_50_100", "Between 50 Lac to 100 Lac", 50, 100),
    AmountBucket("BETWEEN_100_500", "Between 100 Lac to 500 Lac", 100, 500),
    AmountBucket("BETWEEN_500_2500", "Between 500 Lac to 2500 Lac", 500, 2500),
    AmountBucket("ABOVE_2500", "Above 2500 Lac", 2500, float("inf")),
)

# Compared after upper-casing and removing punctuation/whitespace.
NO_VALUE_TOKENS = frozenset(
    {
        "NA",
        "NOTAVAILABLE",
        "NOTAPPLICABLE",
        "NULL",
        "NIL",
        "NONE",
        "",
    }
)


@dataclass(slots=True, frozen=True)
class Settings:
    lac_divisor: float
    lac_precision: int
    serial_epoch: date
    serial_min: float
    serial_max: float
    two_digit_year_pivot: int
    transposed_year_threshold: int
    isin_pattern: re.Pattern[str]
    no_value_tokens: frozenset[str]
    amount_buckets: tuple[AmountBucket, ...]
    unknown_issuer: str
    missing_label: str
    unrated: str
    max_workers: int
    master_cache_path: Path


SETTINGS = Settings(
    lac_divisor=100_000,
    lac_precision=4,
    serial_epoch=date(1899, 12, 30),
    serial_min=59,
    serial_max=2958465,
    two_digit_year_pivot=70,
    transposed_year_threshold=4000,
    isin_pattern=re.compile(r"^[A-Z0-9]{12}$"),
    no_value_tokens=NO_VALUE_TOKENS,
    amount_buckets=AMOUNT_BUCKETS,
    unknown_issuer="Unknown Issuer",
    missing_label="-",
    unrated="UNRATED",
    max_workers=4,
    master_cache_path=DATA_DIR / "securities_master.json",
)
