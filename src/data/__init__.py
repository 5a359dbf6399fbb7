from .gamedata_provider import GameDataProvider, StageIndex

__all__ = [
    "GameDataProvider",
    "StageIndex",
]
