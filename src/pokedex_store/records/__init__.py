"""
Records — the document shape shared by ingestion, storage and the API.
"""

from pokedex_store.records.models import (
    MAX_MOVES,
    IngestResult,
    Move,
    PokemonRecord,
    PokemonUpdate,
    Stat,
)

__all__ = [
    "MAX_MOVES",
    "IngestResult",
    "Move",
    "PokemonRecord",
    "PokemonUpdate",
    "Stat",
]
