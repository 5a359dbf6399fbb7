"""Progress reporting for game data synchronization.

This module provides:
- ProgressPhase enum for tracking the stages of a dataset refresh
- ProgressUpdate dataclass describing one step of a sync run
- CancelToken for stopping a sequential sync between datasets
- ProgressCallback type alias for progress handler functions

Usage:
    from utils.progress_callback import CancelToken, ProgressUpdate

    def on_progress(update: ProgressUpdate) -> None:
        print(f"[{update.dataset}] {update.phase.value}: {update.message}")

    token = CancelToken()
    report = await provider.sync_all(cancel_token=token)
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum


class ProgressPhase(Enum):
    """Phases of a dataset refresh."""

    STARTING = "starting"
    FETCHING = "fetching"
    PROCESSING = "processing"
    COMPLETE = "complete"
    ERROR = "error"


@dataclass
class ProgressUpdate:
    """Structured progress information for a sync run.

    Attributes:
        operation: Name of the operation being performed.
        dataset: Dataset being refreshed, or None for run-level updates.
        phase: Current phase of the operation.
        current: Datasets finished so far.
        total: Datasets in the run (0 if indeterminate).
        message: Human-readable status message.
        detail: Optional additional detail string.
    """

    operation: str
    dataset: str | None
    phase: ProgressPhase
    current: int
    total: int
    message: str
    detail: str | None = None


ProgressCallback = Callable[[ProgressUpdate], None]


class CancelToken:
    """Token to signal cancellation to a running sync.

    The provider checks ``is_cancelled`` before starting each dataset, so a
    refresh already in flight always finishes and publishes.
    """

    def __init__(self) -> None:
        self._cancelled = False

    def cancel(self) -> None:
        """Signal cancellation to the operation."""
        self._cancelled = True

    @property
    def is_cancelled(self) -> bool:
        """Check if cancellation has been requested."""
        return self._cancelled

    def reset(self) -> None:
        """Reset the cancellation state for reuse."""
        self._cancelled = False
