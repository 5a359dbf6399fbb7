"""Identifiers of the independently synchronized game data tables."""

from enum import Enum


class GameDataset(Enum):
    """One of the five game data tables mirrored by the provider.

    Members are declared in sync order.
    """

    STAGE = "stage"
    ZONE = "zone"
    ACTIVITY = "activity"
    CHARACTER = "character"
    TOWER = "tower"
