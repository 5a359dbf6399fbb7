"""Arknights stage data models."""

from pydantic import BaseModel, Field


class ArkStage(BaseModel):
    """Represents one entry of the stage table."""

    id: str = Field(..., min_length=1, description="The stage key, e.g. 'main_01-07'.")
    level_id: str | None = Field(
        None,
        description="Level file identifier; matched case-insensitively.",
    )
    zone_id: str | None = Field(
        None, description="Key of the zone this stage belongs to."
    )
    code: str | None = Field(None, description="Human-readable stage code, e.g. '1-7'.")
    name: str | None = Field(None, description="Display name of the stage.")
    stage_type: str | None = Field(
        None, description="Stage category such as MAIN, ACTIVITY or CAMPAIGN."
    )
    difficulty: str | None = Field(None, description="NORMAL or FOUR_STAR.")
    ap_cost: int | None = Field(None, description="Sanity cost of one run.")
    danger_level: str | None = Field(
        None, description="Recommended operator level as displayed in game."
    )

    def matches_code(self, code: str | None) -> bool:
        """Return True if ``code`` equals this stage's code ignoring case."""
        if self.code is None or code is None:
            return False
        return self.code.casefold() == code.casefold()
