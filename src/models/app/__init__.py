"""Application/business models (domain layer)."""

from .level_info import ArkLevelInfo
from .sync_result import SyncErrorKind, SyncReport, SyncResult

__all__ = [
    "ArkLevelInfo",
    "SyncErrorKind",
    "SyncReport",
    "SyncResult",
]
