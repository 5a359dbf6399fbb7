"""Arknights activity (event) data models."""

from pydantic import BaseModel, Field


class ArkActivity(BaseModel):
    """Represents the basic info of one in-game activity."""

    id: str = Field(..., min_length=1, description="The activity key, e.g. 'act1side'.")
    type: str | None = Field(None, description="Activity type.")
    name: str | None = Field(None, description="Display name of the activity.")
    start_time: int | None = Field(None, description="Start time as a Unix timestamp.")
    end_time: int | None = Field(None, description="End time as a Unix timestamp.")
