"""Typed view of the PokeAPI ``/pokemon/{id}`` response.

Only the fields the transform reads are modelled; everything else in the
(very large) upstream document is ignored.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class NamedResource(BaseModel):
    name: str


class TypeSlot(BaseModel):
    type: NamedResource


class AbilitySlot(BaseModel):
    ability: NamedResource


class MoveSlot(BaseModel):
    move: NamedResource


class StatSlot(BaseModel):
    stat: NamedResource
    base_stat: int


class Artwork(BaseModel):
    front_default: str | None = None


class OtherSprites(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    official_artwork: Artwork | None = Field(default=None, alias="official-artwork")


class Sprites(BaseModel):
    other: OtherSprites | None = None


class UpstreamPokemon(BaseModel):
    """One ``GET /pokemon/{id}`` payload.

    ``height`` is in decimetres and ``weight`` in hectograms, as served.
    """

    id: int
    name: str
    sprites: Sprites = Field(default_factory=Sprites)
    types: list[TypeSlot] = Field(default_factory=list)
    height: int
    weight: int
    abilities: list[AbilitySlot] = Field(default_factory=list)
    base_experience: int | None = None
    moves: list[MoveSlot] = Field(default_factory=list)
    stats: list[StatSlot] = Field(default_factory=list)

    @property
    def artwork_url(self) -> str | None:
        other = self.sprites.other
        if other is None or other.official_artwork is None:
            return None
        return other.official_artwork.front_default
