"""Header matching and sheet schema detection."""
from __future__ import annotations

import re
from typing import Sequence

from .models import Exchange, SheetType

_WHITESPACE = re.compile(r"\s+")


def normalize_header(value: object) -> str:
    return _WHITESPACE.sub("", "" if value is None else str(value).lower())


def first_column(headers: Sequence[object], patterns: Sequence[str]) -> int:
    """Index of the first header equal to any pattern, then of the first containing one.

    The exact pass covers every pattern before any substring matching starts,
    so ``"Date"`` wins over ``"Maturity Date"`` for ``["trade date", "date"]``.
    Returns -1 when nothing matches.
    """
    normalized = [normalize_header(h) for h in headers]
    keys = [normalize_header(p) for p in patterns]
    for key in keys:
        if key in normalized:
            return normalized.index(key)
    for key in keys:
        if not key:
            continue
        for idx, header in enumerate(normalized):
            if key in header:
                return idx
    return -1


def detect_sheet_type(headers: Sequence[object]) -> SheetType:
    normalized = [normalize_header(h) for h in headers]

    def has(*tokens: str) -> bool:
        return any(token in header for header in normalized for token in tokens)

    if has("creditrating", "rating") and has("nameofissuer", "issuername", "issuer") and has("isin"):
        return SheetType.SECURITIES
    if has("dealsize", "settlementstatus"):
        return SheetType.NSE
    if any("tradeamount" in h and "lacs" in h for h in normalized) or has("ordertype"):
        return SheetType.BSE
    return SheetType.UNKNOWN


def exchange_from_file_name(file_name: str) -> Exchange | None:
    lowered = (file_name or "").lower()
    if "nse" in lowered:
        return Exchange.NSE
    if "bse" in lowered:
        return Exchange.BSE
    return None


def resolve_exchange(sheet_type: SheetType, file_name: str) -> Exchange | None:
    """Exchange a trade sheet should be read as; the file name hint wins."""
    if sheet_type is SheetType.SECURITIES:
        return None
    hint = exchange_from_file_name(file_name)
    if hint is not None:
        return hint
    if sheet_type is SheetType.NSE:
        return Exchange.NSE
    if sheet_type is SheetType.BSE:
        return Exchange.BSE
    return None
