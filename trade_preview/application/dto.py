"""Application-level DTOs for trade previews."""
from __future__ import annotations

from dataclasses import dataclass, field

from trade_preview.domain.models import FilterState


@dataclass(slots=True, frozen=True)
class PreviewRequest:
    filters: FilterState = field(default_factory=FilterState)
    persist_master: bool = True
