"""Display metadata for a level referenced by a copilot document."""

from pydantic import BaseModel, Field


class ArkLevelInfo(BaseModel):
    """Names resolved from the mirrored tables for one level.

    Any field the tables cannot resolve is left as None.
    """

    level_id: str | None = None
    stage_id: str | None = None
    code: str | None = None
    stage_name: str | None = None
    zone_id: str | None = None
    zone_name: str | None = None
    zone_type: str | None = None
    activity_name: str | None = None
    tower_name: str | None = None
    category: str | None = Field(
        None,
        description="Top-level grouping: activity name, tower name or zone type.",
    )
