"""
Storage — CRUD access to the ``pokemons`` document collection.

Public surface
--------------
- :class:`RecordStoreBase` — abstract backend (subclass for other stores).
- :class:`MongoRecordStore` — default MongoDB backend.
"""

from pokedex_store.storage.base import RecordStoreBase

__all__ = [
    "MongoRecordStore",
    "RecordStoreBase",
]


def __getattr__(name: str):  # noqa: ANN001
    """Lazy-import MongoRecordStore to avoid pulling in pymongo at import time."""
    if name == "MongoRecordStore":
        from pokedex_store.storage.mongo_store import MongoRecordStore

        return MongoRecordStore
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
