"""Outcome models for game data synchronization."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from models.ark import GameDataset


class SyncErrorKind(Enum):
    """Why a dataset refresh did not publish a new snapshot."""

    NETWORK = "network"
    EMPTY_RESPONSE = "empty_response"
    PARSE = "parse"
    CANCELLED = "cancelled"


class SyncResult(BaseModel):
    """Outcome of refreshing one dataset."""

    model_config = ConfigDict(frozen=True)

    dataset: GameDataset
    ok: bool
    count: int = Field(0, ge=0, description="Entries in the published snapshot.")
    error_kind: SyncErrorKind | None = None
    error: str | None = None
    duration_ms: float = 0.0
    finished_at: datetime

    @property
    def is_failure(self) -> bool:
        return not self.ok


class SyncReport(BaseModel):
    """Outcome of one ``sync_all`` run, one result per dataset."""

    model_config = ConfigDict(frozen=True)

    results: list[SyncResult]

    @property
    def ok(self) -> bool:
        """True when every dataset published a new snapshot."""
        return all(r.ok for r in self.results)

    @property
    def failed(self) -> list[SyncResult]:
        return [r for r in self.results if not r.ok]

    def get(self, dataset: GameDataset) -> SyncResult | None:
        for result in self.results:
            if result.dataset is dataset:
                return result
        return None

    def summary(self) -> str:
        """One line per dataset, suitable for logs and CLI output."""
        lines = []
        for r in self.results:
            if r.ok:
                lines.append(
                    f"{r.dataset.value}: ok ({r.count} entries, {r.duration_ms:.0f}ms)"
                )
            else:
                kind = r.error_kind.value if r.error_kind else "unknown"
                lines.append(
                    f"{r.dataset.value}: FAILED [{kind}] {r.error or ''}".rstrip()
                )
        return "\n".join(lines)
