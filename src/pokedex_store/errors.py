"""Exception taxonomy shared by the ingest routine, the store and the API.

"Not found" is deliberately absent: lookups return ``None`` instead.
"""

from __future__ import annotations


class PokedexStoreError(Exception):
    """Base class for every error raised by this package."""


class UpstreamFetchError(PokedexStoreError):
    """An upstream PokeAPI request failed or returned an unusable payload.

    Attributes
    ----------
    key:
        The upstream lookup key that failed, when a single key is at fault.
    failed_keys:
        Every key that failed during a batch ingest.
    """

    def __init__(
        self,
        message: str,
        *,
        key: int | None = None,
        failed_keys: list[int] | None = None,
    ) -> None:
        super().__init__(message)
        self.key = key
        self.failed_keys = failed_keys or ([key] if key is not None else [])


class StorageError(PokedexStoreError):
    """A database operation failed (connectivity, constraint, bad query)."""


class DuplicateRecordError(StorageError):
    """A write violated the ``externalId`` uniqueness constraint."""
