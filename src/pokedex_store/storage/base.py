"""Abstract base class for record-store backends.

The serving layer and the ingest routine only talk to
:class:`RecordStoreBase`; swapping MongoDB for another document store
means subclassing it and implementing the abstract methods.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from pokedex_store.records.models import PokemonRecord, PokemonUpdate


class RecordStoreBase(ABC):
    """Backend-agnostic CRUD interface over :class:`PokemonRecord`.

    Lookups that find nothing return ``None``; every other failure is
    raised as :class:`~pokedex_store.errors.StorageError`.

    Parameters
    ----------
    collection_name:
        Logical name of the collection / table / namespace.
    """

    def __init__(self, collection_name: str) -> None:
        self.collection_name = collection_name

    # -- required overrides ---------------------------------------------------

    @abstractmethod
    def insert(self, record: PokemonRecord) -> PokemonRecord:
        """Insert a single record and return it as stored."""
        ...

    @abstractmethod
    def insert_many(self, records: list[PokemonRecord]) -> int:
        """Unordered batch insert; returns the number of records written.

        An empty batch is a no-op returning ``0``.
        """
        ...

    @abstractmethod
    def list_all(self) -> list[PokemonRecord]:
        ...

    @abstractmethod
    def get(self, external_id: int) -> PokemonRecord | None:
        ...

    @abstractmethod
    def update(self, external_id: int, changes: PokemonUpdate) -> PokemonRecord | None:
        """Merge the explicitly-set fields of *changes* into the record.

        Returns the updated record, or ``None`` when *external_id* is unknown.
        """
        ...

    @abstractmethod
    def delete(self, external_id: int) -> PokemonRecord | None:
        """Remove the record and return it, or ``None`` when absent."""
        ...

    @abstractmethod
    def count_caught(self) -> int:
        ...

    @abstractmethod
    def list_caught(self) -> list[PokemonRecord]:
        ...

    @abstractmethod
    def health_check(self) -> bool:
        """Return ``True`` when the backend is reachable and ready."""
        ...

    # -- optional overrides ---------------------------------------------------

    def ensure_indexes(self) -> None:
        """Create backend indexes / constraints.  No-op by default."""

    def close(self) -> None:
        """Release backend resources.  No-op by default."""
