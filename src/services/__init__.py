"""Unified service layer for the Ark game data mirror.

Domain-oriented submodules:
    level_service: level and operator display metadata for copilot documents

"""

from .level_service import LevelService

__all__ = [
    "LevelService",
]
