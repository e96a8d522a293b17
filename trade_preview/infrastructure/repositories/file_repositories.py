"""Upload-backed repositories for trade sheets."""
from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Sequence

from trade_preview.config import SETTINGS
from trade_preview.domain.models import ParsedSheet, UploadedFile
from trade_preview.domain.repositories import SheetRepository
from trade_preview.domain.results import FileFailure
from trade_preview.infrastructure.parsing.utils import ensure_bytes, read_sheet
from trade_preview.utils.logger import get_logger

LOGGER = get_logger(__name__)


class UploadedSheetRepository(SheetRepository):
    """Parses every upload concurrently; one bad file never stops the others."""

    def __init__(self, files: Sequence[UploadedFile | Path], max_workers: int | None = None) -> None:
        self._files = list(files)
        self._max_workers = max_workers or SETTINGS.max_workers

    @classmethod
    def from_paths(cls, paths: Sequence[str | Path], max_workers: int | None = None) -> "UploadedSheetRepository":
        return cls([Path(path) for path in paths], max_workers=max_workers)

    def list_sheets(self) -> tuple[Sequence[ParsedSheet], Sequence[FileFailure]]:
        if not self._files:
            return (), ()
        workers = max(1, min(self._max_workers, len(self._files)))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            outcomes = list(pool.map(self._parse_one, self._files))

        sheets: list[ParsedSheet] = []
        failures: list[FileFailure] = []
        for outcome in outcomes:
            if isinstance(outcome, FileFailure):
                failures.append(outcome)
            else:
                sheets.append(outcome)
        return tuple(sheets), tuple(failures)

    @staticmethod
    def _parse_one(source: UploadedFile | Path) -> ParsedSheet | FileFailure:
        name = source.name
        try:
            payload = source.content if isinstance(source, UploadedFile) else ensure_bytes(source)
            return read_sheet(payload, name)
        except Exception as exc:  # each upload fails on its own
            LOGGER.warning("Failed to parse %s: %s", name, exc)
            return FileFailure(file_name=name, message=str(exc) or exc.__class__.__name__)
