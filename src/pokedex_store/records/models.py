"""Record models for the ``pokemons`` collection.

Python attributes are snake_case; the wire / storage keys are camelCase
(``externalId``, ``averageStat`` …) via an alias generator, so the same
models serve the HTTP layer and the MongoDB documents.
"""

from __future__ import annotations

from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

MAX_MOVES = 5

# Record fields that may legitimately hold null.
NULLABLE_FIELDS = frozenset({"experience", "caught_at"})


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_document(self) -> dict[str, Any]:
        """Return the camelCase dict stored in (and returned by) the API."""
        return self.model_dump(by_alias=True)


class Move(_CamelModel):
    move_name: str


class Stat(_CamelModel):
    stat_name: str
    base_value: int


class PokemonRecord(_CamelModel):
    """A normalised, persisted Pokémon.

    Attributes
    ----------
    external_id:
        Upstream (PokeAPI) identifier; unique within the collection.
    height / weight:
        Pre-formatted strings with unit suffix, e.g. ``"0.7m"``, ``"6.9kg"``.
    moves:
        At most :data:`MAX_MOVES` entries.
    average_stat:
        Mean of ``stats[].base_value`` formatted to two decimals.
    """

    external_id: int
    name: str
    image: str = ""
    types: list[str] = Field(default_factory=list)
    height: str = ""
    weight: str = ""
    abilities: list[str] = Field(default_factory=list)
    experience: int | None = None
    moves: list[Move] = Field(default_factory=list, max_length=MAX_MOVES)
    stats: list[Stat] = Field(default_factory=list)
    average_stat: str = ""
    caught: bool = False
    caught_at: str | None = None


class PokemonUpdate(_CamelModel):
    """Partial update — one optional slot per mutable field.

    ``externalId`` is not part of the update surface.  Only fields the
    caller explicitly set are merged; see :meth:`changes`.
    """

    name: str | None = None
    image: str | None = None
    types: list[str] | None = None
    height: str | None = None
    weight: str | None = None
    abilities: list[str] | None = None
    experience: int | None = None
    moves: Annotated[list[Move], Field(max_length=MAX_MOVES)] | None = None
    stats: list[Stat] | None = None
    average_stat: str | None = None
    caught: bool | None = None
    caught_at: str | None = None

    @model_validator(mode="after")
    def _reject_null_required(self) -> PokemonUpdate:
        nulled = sorted(
            name
            for name in self.model_fields_set - NULLABLE_FIELDS
            if getattr(self, name) is None
        )
        if nulled:
            raise ValueError(f"fields cannot be null: {', '.join(nulled)}")
        return self

    def changes(self) -> dict[str, Any]:
        """Return the explicitly-set fields as a camelCase ``$set`` payload."""
        return self.model_dump(by_alias=True, exclude_unset=True)


class IngestResult(BaseModel):
    """Outcome of a bulk ingest."""

    message: str
    inserted: int
