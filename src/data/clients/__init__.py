from .gamedata_client import GameDataClient

__all__ = ["GameDataClient"]
