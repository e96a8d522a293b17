"""Securities-master parser building the ISIN lookup used by the join stage."""
from __future__ import annotations

from trade_preview.domain.headers import first_column
from trade_preview.domain.models import ParsedSheet, SecurityRecord
from trade_preview.domain.normalizers import is_valid_identifier, normalize_identifier, to_text
from trade_preview.infrastructure.parsing.utils import cell

ISIN_COLUMNS = ["isin", "isin code"]
ISSUER_COLUMNS = ["name of issuer", "issuer name", "issuer"]
RATING_COLUMNS = ["credit rating", "rating"]


def securities_to_map(sheet: ParsedSheet) -> dict[str, SecurityRecord]:
    isin_idx = first_column(sheet.headers, ISIN_COLUMNS)
    issuer_idx = first_column(sheet.headers, ISSUER_COLUMNS)
    rating_idx = first_column(sheet.headers, RATING_COLUMNS)

    securities: dict[str, SecurityRecord] = {}
    for row in sheet.rows:
        identifier = normalize_identifier(cell(row, isin_idx))
        if not is_valid_identifier(identifier):
            continue
        securities[identifier] = SecurityRecord(
            identifier=identifier,
            issuer=to_text(cell(row, issuer_idx)),
            rating=to_text(cell(row, rating_idx)),
        )
    return securities
