"""Data parsers for the game data tables."""

from .gamedata_json import GameDataJsonParser

__all__ = ["GameDataJsonParser"]
