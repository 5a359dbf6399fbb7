"""Parser turning decoded game data tables into domain records."""

import logging
from collections.abc import Iterator
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from models.ark import (
    ArkActivity,
    ArkCharacter,
    ArkStage,
    ArkTower,
    ArkZone,
    GameDataset,
)
from utils.exceptions import GameDataParseError

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

# Mapping of table camelCase field names to snake_case model field names
FIELD_NAME_MAP = {
    # Stage fields
    "stageId": "id",
    "levelId": "level_id",
    "zoneId": "zone_id",
    "stageType": "stage_type",
    "apCost": "ap_cost",
    "dangerLevel": "danger_level",
    # Zone fields
    "zoneID": "id",
    "zoneIndex": "zone_index",
    "zoneNameFirst": "zone_name_first",
    "zoneNameSecond": "zone_name_second",
    # Activity fields
    "startTime": "start_time",
    "endTime": "end_time",
    # Tower fields
    "subName": "sub_name",
    "towerType": "tower_type",
}

# Sub-documents holding each table's records
STAGES_KEY = "stages"
ZONES_KEY = "zones"
ZONE_TO_ACTIVITY_KEY = "zoneToActivity"
BASIC_INFO_KEY = "basicInfo"
TOWERS_KEY = "towers"


class GameDataJsonParser:
    """Converts table documents into ``{key: record}`` mappings.

    Missing or malformed sub-documents raise ``GameDataParseError``. A single
    entry that fails validation is logged with its key and skipped.
    """

    def parse_stages(self, document: dict[str, Any]) -> dict[str, ArkStage]:
        """Parse ``stages`` into records keyed by stage key."""
        stages = self._sub_document(document, STAGES_KEY, GameDataset.STAGE)
        return dict(self._records(stages, ArkStage, GameDataset.STAGE))

    def parse_zones(self, document: dict[str, Any]) -> dict[str, ArkZone]:
        """Parse ``zones`` into records keyed by zone key."""
        zones = self._sub_document(document, ZONES_KEY, GameDataset.ZONE)
        return dict(self._records(zones, ArkZone, GameDataset.ZONE))

    def parse_activities(
        self, document: dict[str, Any]
    ) -> tuple[dict[str, str], dict[str, ArkActivity]]:
        """Parse the activity table.

        Returns:
            Tuple of (zone key -> activity key, activity key -> activity).
        """
        zone_to_activity_raw = self._sub_document(
            document, ZONE_TO_ACTIVITY_KEY, GameDataset.ACTIVITY
        )
        basic_info = self._sub_document(document, BASIC_INFO_KEY, GameDataset.ACTIVITY)

        zone_to_activity: dict[str, str] = {}
        for zone_id, activity_id in zone_to_activity_raw.items():
            if not isinstance(activity_id, str) or not activity_id:
                logger.warning(
                    "Skipping zoneToActivity entry %s: activity id %r is not a string",
                    zone_id,
                    activity_id,
                )
                continue
            zone_to_activity[zone_id] = activity_id

        activities = dict(self._records(basic_info, ArkActivity, GameDataset.ACTIVITY))
        return zone_to_activity, activities

    def parse_characters(self, document: dict[str, Any]) -> dict[str, ArkCharacter]:
        """Parse the character table, which is keyed at the top level.

        The raw key becomes the record's ``id``; entries with an empty key
        are dropped.
        """
        return {
            key: character
            for key, character in self._records(
                document, ArkCharacter, GameDataset.CHARACTER
            )
            if key
        }

    def parse_towers(self, document: dict[str, Any]) -> dict[str, ArkTower]:
        """Parse ``towers`` into records keyed by tower (zone) key."""
        towers = self._sub_document(document, TOWERS_KEY, GameDataset.TOWER)
        return dict(self._records(towers, ArkTower, GameDataset.TOWER))

    def _sub_document(
        self, document: dict[str, Any], key: str, dataset: GameDataset
    ) -> dict[str, Any]:
        node = document.get(key)
        if node is None:
            raise GameDataParseError(
                f"{dataset.value} table has no '{key}' section", dataset=dataset.value
            )
        if not isinstance(node, dict):
            raise GameDataParseError(
                f"{dataset.value} table section '{key}' is a "
                f"{type(node).__name__}, expected an object",
                dataset=dataset.value,
            )
        return node

    def _records(
        self,
        entries: dict[str, Any],
        model: type[M],
        dataset: GameDataset,
    ) -> Iterator[tuple[str, M]]:
        for key, raw in entries.items():
            if not isinstance(raw, dict):
                logger.error(
                    f"Failed to parse {dataset.value} {key}: entry is not an object"
                )
                continue
            data = self._map_keys(raw)
            # The table key is authoritative for the record id
            data["id"] = key
            try:
                yield key, model(**data)
            except ValidationError as e:
                logger.error(f"Failed to parse {dataset.value} {key}: {e}")
                continue

    def _map_keys(self, data: dict[str, Any]) -> dict[str, Any]:
        """Rename known camelCase keys; nested values are left as they are."""
        return {FIELD_NAME_MAP.get(k, k): v for k, v in data.items()}
