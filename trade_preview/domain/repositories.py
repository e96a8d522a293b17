"""Repository interfaces anchoring the domain layer."""
from __future__ import annotations

from typing import Mapping, Protocol, Sequence

from .models import ParsedSheet, SecurityRecord
from .results import FileFailure


class SheetRepository(Protocol):
    """Provides the parsed first sheet of every uploaded file."""

    def list_sheets(self) -> tuple[Sequence[ParsedSheet], Sequence[FileFailure]]:
        ...


class SecuritiesMasterStore(Protocol):
    """Persists the securities master between preview runs."""

    def load(self) -> dict[str, SecurityRecord]:
        ...

    def save(self, securities: Mapping[str, SecurityRecord]) -> dict[str, SecurityRecord]:
        ...
