"""Custom exception hierarchy for the Ark game data mirror.

Provides structured exception classes for different error scenarios.
"""

from __future__ import annotations


class ArkMirrorError(Exception):
    """Base exception for all Ark game data mirror errors."""

    pass


class ConfigurationError(ArkMirrorError):
    """Exception raised for configuration-related errors."""

    pass


class DataProviderError(ArkMirrorError):
    """Base exception for data provider errors."""

    pass


class GameDataError(DataProviderError):
    """Exception raised for game data table errors."""

    def __init__(self, message: str, dataset: str | None = None) -> None:
        super().__init__(message)
        self.dataset = dataset


class GameDataDownloadError(GameDataError):
    """Exception raised when a game data table cannot be fetched."""

    pass


class GameDataEmptyResponseError(GameDataError):
    """Exception raised when a game data table comes back with an empty body."""

    pass


class GameDataParseError(GameDataError):
    """Exception raised when a game data table cannot be parsed."""

    pass


class ServiceError(ArkMirrorError):
    """Base exception for service layer errors."""

    pass
