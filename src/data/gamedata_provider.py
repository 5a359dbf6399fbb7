"""Game data provider: mirrored lookup tables with snapshot-and-swap refresh."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from types import MappingProxyType
from typing import Any

from data.clients.gamedata_client import GameDataClient
from data.parsers.gamedata_json import GameDataJsonParser
from models.app.sync_result import SyncErrorKind, SyncReport, SyncResult
from models.ark import (
    ArkActivity,
    ArkCharacter,
    ArkStage,
    ArkTower,
    ArkZone,
    GameDataset,
)
from utils.exceptions import (
    GameDataDownloadError,
    GameDataEmptyResponseError,
    GameDataError,
    GameDataParseError,
)
from utils.metrics import MetricCategories, MetricsCollector, get_metrics
from utils.progress_callback import (
    CancelToken,
    ProgressCallback,
    ProgressPhase,
    ProgressUpdate,
)

logger = logging.getLogger(__name__)

SYNC_ORDER: tuple[GameDataset, ...] = (
    GameDataset.STAGE,
    GameDataset.ZONE,
    GameDataset.ACTIVITY,
    GameDataset.CHARACTER,
    GameDataset.TOWER,
)

# Character keys look like <prefix>_<tier>_<shortId>
CHARACTER_ID_SEGMENTS = 3

_EMPTY: Mapping[str, Any] = MappingProxyType({})


def split_character_id(character_id: str) -> list[str]:
    """Split a character id on ``_``, dropping trailing empty segments."""
    return character_id.rstrip("_").split("_")


@dataclass(frozen=True)
class StageIndex:
    """Stage snapshot: the stage map and the level map, published together."""

    by_id: Mapping[str, ArkStage] = field(
        default_factory=lambda: MappingProxyType({})
    )
    by_level: Mapping[str, ArkStage] = field(
        default_factory=lambda: MappingProxyType({})
    )


class GameDataProvider:
    """Mirror of the remote game data tables with O(1) lookups.

    Every dataset has exactly one published snapshot, a read-only mapping
    held in a single attribute. A refresh builds the next snapshot in local
    variables and publishes it with one assignment, so readers on any thread
    see either the old or the new snapshot and never take a lock. A refresh
    that fails leaves the previous snapshot in place.

    All snapshots start empty; ``sync_all`` seeds and later replaces them.
    """

    def __init__(
        self,
        client: GameDataClient,
        parser: GameDataJsonParser | None = None,
        *,
        metrics: MetricsCollector | None = None,
        progress_callback: ProgressCallback | None = None,
    ):
        """Initialize an empty provider.

        Args:
            client: Client used to download the tables.
            parser: Parser converting table documents into records.
            metrics: Metrics collector for refresh timings and sizes.
            progress_callback: Optional callback for progress updates during syncs.
        """
        self._client = client
        self._parser = parser or GameDataJsonParser()
        self._metrics = metrics or get_metrics()
        self._progress_callback = progress_callback

        # Published snapshots
        self._stage_index = StageIndex()
        self._zones: Mapping[str, ArkZone] = _EMPTY
        self._zone_activities: Mapping[str, ArkActivity] = _EMPTY
        self._characters: Mapping[str, ArkCharacter] = _EMPTY
        self._towers: Mapping[str, ArkTower] = _EMPTY

        self._last_results: Mapping[GameDataset, SyncResult] = _EMPTY
        self._last_synced_at: datetime | None = None
        self._published: frozenset[GameDataset] = frozenset()

        self._publishers: dict[GameDataset, Callable[[dict[str, Any]], int]] = {
            GameDataset.STAGE: self._publish_stages,
            GameDataset.ZONE: self._publish_zones,
            GameDataset.ACTIVITY: self._publish_activities,
            GameDataset.CHARACTER: self._publish_characters,
            GameDataset.TOWER: self._publish_towers,
        }

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def find_stage(
        self, level_id: str | None, code: str | None, stage_id: str | None
    ) -> ArkStage | None:
        """Find a stage by level id, disambiguated by code, else by stage id.

        Level ids are reused when a stage code is reissued, so a level hit
        only counts when its code equals ``code`` ignoring case. Otherwise
        the stage id lookup decides.

        Args:
            level_id: Level identifier, matched case-insensitively.
            code: Stage code expected for the level hit.
            stage_id: Stage key used as the fallback.

        Returns:
            ArkStage or None if not found
        """
        index = self._stage_index
        if level_id:
            stage = index.by_level.get(level_id.lower())
            if stage is not None and stage.matches_code(code):
                return stage
        if stage_id is None:
            return None
        return index.by_id.get(stage_id)

    def find_zone(
        self, level_id: str | None, code: str | None, stage_id: str | None
    ) -> ArkZone | None:
        """Find the zone owning the stage resolved by ``find_stage``.

        Returns:
            ArkZone or None if either the stage or its zone is unknown
        """
        stage = self.find_stage(level_id, code, stage_id)
        if stage is None:
            logger.error("[DATA] Stage not found: %s (level %s)", stage_id, level_id)
            return None
        zone = self._zones.get(stage.zone_id) if stage.zone_id else None
        if zone is None:
            logger.error(
                "[DATA] Zone not found: %s (level %s)", stage.zone_id, level_id
            )
        return zone

    def find_tower(self, zone_id: str) -> ArkTower | None:
        return self._towers.get(zone_id)

    def find_character(self, character_id: str) -> ArkCharacter | None:
        """Find an operator by any id ending in its short id.

        The lookup uses the last ``_`` segment whatever the number of
        segments, so both ``char_002_amiya`` and ``amiya`` resolve. The index
        itself only holds keys with exactly three segments.

        Args:
            character_id: Raw or short character id.

        Returns:
            ArkCharacter or None if not found
        """
        if not character_id:
            return None
        return self._characters.get(split_character_id(character_id)[-1])

    def find_activity_by_zone_id(self, zone_id: str) -> ArkActivity | None:
        return self._zone_activities.get(zone_id)

    # ------------------------------------------------------------------
    # Sync
    # ------------------------------------------------------------------

    async def sync_all(
        self,
        *,
        concurrent: bool = False,
        cancel_token: CancelToken | None = None,
    ) -> SyncReport:
        """Refresh all five datasets.

        Datasets are refreshed one after another in ``SYNC_ORDER``; a failure
        in one never stops the others. With ``concurrent=True`` they are
        refreshed together, which is safe because each writes its own
        snapshot.

        Args:
            concurrent: Refresh datasets concurrently.
            cancel_token: Checked before each dataset; remaining datasets are
                reported as cancelled and keep their snapshots.

        Returns:
            SyncReport with one result per dataset, in sync order.
        """
        total = len(SYNC_ORDER)
        self._emit_progress(
            None, ProgressPhase.STARTING, 0, total, "Starting game data sync..."
        )

        if concurrent:
            if cancel_token is not None and cancel_token.is_cancelled:
                results = [self._cancelled_result(d) for d in SYNC_ORDER]
            else:
                results = list(
                    await asyncio.gather(
                        *(
                            self._sync(d, current=idx, total=total)
                            for idx, d in enumerate(SYNC_ORDER)
                        )
                    )
                )
        else:
            results = []
            for idx, dataset in enumerate(SYNC_ORDER):
                if cancel_token is not None and cancel_token.is_cancelled:
                    logger.info("Game data sync cancelled before %s", dataset.value)
                    results.append(self._cancelled_result(dataset))
                    continue
                results.append(await self._sync(dataset, current=idx, total=total))

        report = SyncReport(results=results)
        self._last_synced_at = datetime.now(UTC)

        if report.ok:
            logger.info("Game data sync finished: all %d datasets published", total)
            self._emit_progress(
                None, ProgressPhase.COMPLETE, total, total, "Game data sync complete"
            )
        else:
            failed = ", ".join(r.dataset.value for r in report.failed)
            logger.warning("Game data sync finished with failures: %s", failed)
            self._emit_progress(
                None,
                ProgressPhase.ERROR,
                total - len(report.failed),
                total,
                "Game data sync finished with failures",
                detail=failed,
            )
        return report

    async def sync_stages(self) -> SyncResult:
        return await self._sync(GameDataset.STAGE)

    async def sync_zones(self) -> SyncResult:
        return await self._sync(GameDataset.ZONE)

    async def sync_activities(self) -> SyncResult:
        return await self._sync(GameDataset.ACTIVITY)

    async def sync_characters(self) -> SyncResult:
        return await self._sync(GameDataset.CHARACTER)

    async def sync_towers(self) -> SyncResult:
        return await self._sync(GameDataset.TOWER)

    async def sync_dataset(self, dataset: GameDataset) -> SyncResult:
        """Refresh a single dataset by identifier."""
        return await self._sync(dataset)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def is_loaded(self) -> bool:
        """True once every dataset has published at least one snapshot."""
        return all(self._has_published(d) for d in SYNC_ORDER)

    @property
    def last_results(self) -> Mapping[GameDataset, SyncResult]:
        """Most recent refresh outcome per dataset."""
        return self._last_results

    @property
    def last_synced_at(self) -> datetime | None:
        """When the last ``sync_all`` run finished."""
        return self._last_synced_at

    def get_cache_stats(self) -> dict[str, int | bool]:
        """Get the size of every published snapshot.

        Returns:
            Dictionary with snapshot sizes and load state
        """
        index = self._stage_index
        return {
            "stages": len(index.by_id),
            "levels": len(index.by_level),
            "zones": len(self._zones),
            "zone_activities": len(self._zone_activities),
            "characters": len(self._characters),
            "towers": len(self._towers),
            "is_loaded": self.is_loaded,
        }

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _sync(
        self, dataset: GameDataset, current: int = 0, total: int = 1
    ) -> SyncResult:
        """Fetch, parse and publish one dataset, never raising."""
        name = dataset.value
        started = time.perf_counter()
        error_kind: SyncErrorKind | None = None
        error: str | None = None
        count = 0

        self._emit_progress(
            dataset, ProgressPhase.FETCHING, current, total, f"Fetching {name} table..."
        )
        try:
            with self._metrics.time_operation(f"{MetricCategories.SYNC}.sync.{name}"):
                document = await self._client.fetch_table(dataset)
                self._emit_progress(
                    dataset,
                    ProgressPhase.PROCESSING,
                    current,
                    total,
                    f"Indexing {name} table...",
                )
                count = self._publishers[dataset](document)
        except GameDataEmptyResponseError as e:
            error_kind, error = SyncErrorKind.EMPTY_RESPONSE, str(e)
            logger.error("[DATA] Failed to fetch %s data: %s", name, e)
        except GameDataDownloadError as e:
            error_kind, error = SyncErrorKind.NETWORK, str(e)
            logger.error("[DATA] Failed to fetch %s data: %s", name, e)
        except GameDataParseError as e:
            error_kind, error = SyncErrorKind.PARSE, str(e)
            logger.error("[DATA] Failed to parse %s data: %s", name, e)
        except GameDataError as e:
            error_kind, error = SyncErrorKind.PARSE, str(e)
            logger.error("[DATA] Failed to sync %s data: %s", name, e)
        except Exception as e:
            error_kind, error = SyncErrorKind.PARSE, f"{type(e).__name__}: {e}"
            logger.exception("[DATA] Unexpected error syncing %s data", name)

        duration_ms = (time.perf_counter() - started) * 1000
        result = SyncResult(
            dataset=dataset,
            ok=error_kind is None,
            count=count,
            error_kind=error_kind,
            error=error,
            duration_ms=duration_ms,
            finished_at=datetime.now(UTC),
        )
        self._record_result(result)

        if result.ok:
            self._metrics.record(f"{MetricCategories.SYNC}.count.{name}", count)
            logger.info("[DATA] Synced %s data: %d entries", name, count)
            self._emit_progress(
                dataset,
                ProgressPhase.COMPLETE,
                current + 1,
                total,
                f"{name} table published",
                detail=f"{count} entries",
            )
        else:
            self._emit_progress(
                dataset,
                ProgressPhase.ERROR,
                current,
                total,
                f"{name} table kept previous snapshot",
                detail=error,
            )
        return result

    def _publish_stages(self, document: dict[str, Any]) -> int:
        stages = self._parser.parse_stages(document)
        by_level: dict[str, ArkStage] = {}
        for stage in stages.values():
            if stage.level_id:
                by_level[stage.level_id.lower()] = stage

        self._stage_index = StageIndex(
            by_id=MappingProxyType(stages), by_level=MappingProxyType(by_level)
        )
        return len(stages)

    def _publish_zones(self, document: dict[str, Any]) -> int:
        zones = self._parser.parse_zones(document)
        self._zones = MappingProxyType(zones)
        return len(zones)

    def _publish_activities(self, document: dict[str, Any]) -> int:
        zone_to_activity, activities = self._parser.parse_activities(document)

        zone_activities: dict[str, ArkActivity] = {}
        for zone_id, activity_id in zone_to_activity.items():
            activity = activities.get(activity_id)
            if activity is None:
                logger.debug(
                    "[DATA] No basic info for activity %s (zone %s)",
                    activity_id,
                    zone_id,
                )
                continue
            zone_activities[zone_id] = activity

        self._zone_activities = MappingProxyType(zone_activities)
        return len(zone_activities)

    def _publish_characters(self, document: dict[str, Any]) -> int:
        characters = self._parser.parse_characters(document)

        by_short_id: dict[str, ArkCharacter] = {}
        for raw_id, character in characters.items():
            segments = split_character_id(raw_id)
            if len(segments) != CHARACTER_ID_SEGMENTS:
                # Tokens, traps and other non-operators
                logger.debug("[DATA] Skipping non-operator character id %s", raw_id)
                continue
            by_short_id[segments[2]] = character

        self._characters = MappingProxyType(by_short_id)
        return len(by_short_id)

    def _publish_towers(self, document: dict[str, Any]) -> int:
        towers = self._parser.parse_towers(document)
        self._towers = MappingProxyType(towers)
        return len(towers)

    def _has_published(self, dataset: GameDataset) -> bool:
        return dataset in self._published

    def _record_result(self, result: SyncResult) -> None:
        results = dict(self._last_results)
        results[result.dataset] = result
        self._last_results = MappingProxyType(results)
        if result.ok:
            self._published = self._published | {result.dataset}

    def _cancelled_result(self, dataset: GameDataset) -> SyncResult:
        result = SyncResult(
            dataset=dataset,
            ok=False,
            error_kind=SyncErrorKind.CANCELLED,
            error="sync cancelled",
            finished_at=datetime.now(UTC),
        )
        self._record_result(result)
        return result

    def _emit_progress(
        self,
        dataset: GameDataset | None,
        phase: ProgressPhase,
        current: int,
        total: int,
        message: str,
        detail: str | None = None,
    ) -> None:
        """Emit progress update if callback is configured."""
        if self._progress_callback:
            self._progress_callback(
                ProgressUpdate(
                    operation="gamedata_sync",
                    dataset=dataset.value if dataset else None,
                    phase=phase,
                    current=current,
                    total=total,
                    message=message,
                    detail=detail,
                )
            )
