"""Arknights character (operator) data models."""

from pydantic import BaseModel, Field


class ArkCharacter(BaseModel):
    """Represents an operator from the character table.

    The table is keyed by ids shaped ``<prefix>_<tier>_<shortId>``, e.g.
    ``char_002_amiya``; the key is copied into ``id`` while parsing.
    """

    id: str = Field(..., min_length=1, description="The raw character key.")
    name: str | None = Field(None, description="Display name of the operator.")
    appellation: str | None = Field(None, description="Romanized name.")
    profession: str | None = Field(
        None, description="Class such as PIONEER, WARRIOR or TOKEN."
    )
    rarity: int | str | None = Field(
        None, description="Rarity, either an index or a 'TIER_n' label."
    )

    @property
    def short_id(self) -> str:
        """Last ``_`` segment of the raw key."""
        return self.id.split("_")[-1]
