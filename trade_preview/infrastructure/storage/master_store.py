"""Storage helpers for the securities master cache."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping

from trade_preview.config import SETTINGS
from trade_preview.domain.models import SecurityRecord
from trade_preview.domain.normalizers import is_valid_identifier, normalize_identifier, to_text
from trade_preview.domain.repositories import SecuritiesMasterStore
from trade_preview.utils.logger import get_logger

LOGGER = get_logger(__name__)

DEFAULT_PATH = SETTINGS.master_cache_path


def _normalize_master(raw: dict[str, Any] | None) -> dict[str, SecurityRecord]:
    normalized: dict[str, SecurityRecord] = {}
    if not isinstance(raw, dict):
        return normalized
    for key, value in raw.items():
        identifier = normalize_identifier(key)
        if not is_valid_identifier(identifier):
            continue
        entry = value if isinstance(value, dict) else {}
        normalized[identifier] = SecurityRecord(
            identifier=identifier,
            issuer=to_text(entry.get("issuer")),
            rating=to_text(entry.get("rating")),
        )
    return normalized


def load_master(path: Path | None = None) -> dict[str, SecurityRecord]:
    master_path = path or DEFAULT_PATH
    if not master_path.exists():
        return {}
    try:
        data = json.loads(master_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError:
        LOGGER.warning("Ignoring unreadable securities master cache %s", master_path)
        return {}
    securities = _normalize_master(data)
    LOGGER.debug("Loaded %d securities from %s", len(securities), master_path)
    return securities


def save_master(
    securities: Mapping[str, SecurityRecord], path: Path | None = None
) -> dict[str, SecurityRecord]:
    """Merge ``securities`` over the cached entries and write the result back."""
    master_path = path or DEFAULT_PATH
    merged = load_master(master_path)
    merged.update(
        _normalize_master(
            {key: {"issuer": record.issuer, "rating": record.rating} for key, record in securities.items()}
        )
    )
    master_path.parent.mkdir(parents=True, exist_ok=True)
    master_path.write_text(
        json.dumps(
            {key: {"issuer": record.issuer, "rating": record.rating} for key, record in merged.items()},
            ensure_ascii=False,
            indent=2,
            sort_keys=True,
        ),
        encoding="utf-8",
    )
    return merged


class JsonSecuritiesMasterStore(SecuritiesMasterStore):
    def __init__(self, path: Path | None = None) -> None:
        self._path = Path(path) if path else DEFAULT_PATH

    def load(self) -> dict[str, SecurityRecord]:
        return load_master(self._path)

    def save(self, securities: Mapping[str, SecurityRecord]) -> dict[str, SecurityRecord]:
        return save_master(securities, self._path)
