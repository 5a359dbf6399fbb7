"""Arknights game data models (domain layer)."""

from .activity import ArkActivity
from .character import ArkCharacter
from .dataset import GameDataset
from .stage import ArkStage
from .tower import ArkTower
from .zone import ArkZone

__all__ = [
    "ArkActivity",
    "ArkCharacter",
    "ArkStage",
    "ArkTower",
    "ArkZone",
    "GameDataset",
]
