"""Arknights zone data models."""

from pydantic import BaseModel, Field


class ArkZone(BaseModel):
    """Represents a zone, the group a set of stages is shown under."""

    id: str = Field(..., min_length=1, description="The zone key, e.g. 'main_1'.")
    zone_index: int | None = Field(None, description="Ordering index of the zone.")
    type: str | None = Field(
        None, description="Zone type such as MAINLINE, ACTIVITY or CAMPAIGN."
    )
    zone_name_first: str | None = Field(
        None, description="First line of the zone title."
    )
    zone_name_second: str | None = Field(
        None, description="Second line of the zone title."
    )

    @property
    def display_name(self) -> str | None:
        """Zone title with both lines joined, or None when the zone is unnamed."""
        parts = [p for p in (self.zone_name_first, self.zone_name_second) if p]
        return " ".join(parts) if parts else None
