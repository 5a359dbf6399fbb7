"""Arknights climb tower data models."""

from pydantic import BaseModel, Field


class ArkTower(BaseModel):
    """Represents a climb tower, keyed by the same id as its zone."""

    id: str = Field(..., min_length=1, description="The tower key, e.g. 'tower_n_1'.")
    name: str | None = Field(None, description="Display name of the tower.")
    sub_name: str | None = Field(None, description="Subtitle of the tower.")
    tower_type: str | None = Field(None, description="NORMAL or TRAINING.")
