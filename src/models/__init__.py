"""Arknights game data models (domain layer)."""

from .ark import (
    ArkActivity,
    ArkCharacter,
    ArkStage,
    ArkTower,
    ArkZone,
    GameDataset,
)

__all__ = [
    "ArkActivity",
    "ArkCharacter",
    "ArkStage",
    "ArkTower",
    "ArkZone",
    "GameDataset",
]
