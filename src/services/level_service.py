"""Level service: display metadata for copilot documents."""

import logging
from collections.abc import Iterable

from data.gamedata_provider import GameDataProvider
from models.app.level_info import ArkLevelInfo
from utils.exceptions import ServiceError

logger = logging.getLogger(__name__)


class LevelService:
    """Resolves levels and operators referenced by strategy documents.

    Reads only from the provider's published snapshots, so it can be called
    from request handlers while a sync is running.
    """

    def __init__(self, gamedata_provider: GameDataProvider):
        """Initialize level service.

        Args:
            gamedata_provider: Game data provider instance (required via DI)
        """
        self._provider = gamedata_provider

    def describe_level(
        self,
        level_id: str | None,
        code: str | None = None,
        stage_id: str | None = None,
    ) -> ArkLevelInfo:
        """Resolve stage, zone, activity and tower names for a level.

        Args:
            level_id: Level identifier stored in the document, if any.
            code: Stage code stored in the document, used to disambiguate.
            stage_id: Stage key stored in the document, used as a fallback.

        Returns:
            ArkLevelInfo; fields the tables cannot resolve stay None.

        Raises:
            ServiceError: If neither a level id nor a stage id is given.
        """
        if not level_id and not stage_id:
            raise ServiceError("describe_level needs a level_id or a stage_id")

        stage = self._provider.find_stage(level_id, code, stage_id)
        if stage is None:
            logger.warning(
                "Level %s (code %s, stage %s) not found in game data",
                level_id,
                code,
                stage_id,
            )
            return ArkLevelInfo(level_id=level_id, stage_id=stage_id, code=code)

        zone = self._provider.find_zone(level_id, code, stage_id)
        activity = (
            self._provider.find_activity_by_zone_id(stage.zone_id)
            if stage.zone_id
            else None
        )
        tower = self._provider.find_tower(stage.zone_id) if stage.zone_id else None

        if activity is not None:
            category = activity.name
        elif tower is not None:
            category = tower.name
        else:
            category = zone.type if zone else None

        return ArkLevelInfo(
            level_id=level_id,
            stage_id=stage.id,
            code=stage.code,
            stage_name=stage.name,
            zone_id=stage.zone_id,
            zone_name=zone.display_name if zone else None,
            zone_type=zone.type if zone else None,
            activity_name=activity.name if activity else None,
            tower_name=tower.name if tower else None,
            category=category,
        )

    def describe_operators(self, character_ids: Iterable[str]) -> dict[str, str | None]:
        """Map each character id to its operator name (None when unknown)."""
        names: dict[str, str | None] = {}
        for character_id in character_ids:
            character = self._provider.find_character(character_id)
            names[character_id] = character.name if character else None
        return names
