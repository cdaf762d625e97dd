"""
Ingestion — pull Pokémon from PokeAPI, normalise them, and batch-insert
them into the record store.
"""

from pokedex_store.ingestion.client import PokeApiClient
from pokedex_store.ingestion.ingest import fetch_records, ingest
from pokedex_store.ingestion.transform import to_record

__all__ = [
    "PokeApiClient",
    "fetch_records",
    "ingest",
    "to_record",
]
