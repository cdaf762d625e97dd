"""Bulk ingest — fetch N Pokémon concurrently, normalise, persist in one batch.

Failure policy is all-or-nothing: every fetch is awaited, and if any of
them failed the batch is abandoned before anything touches storage.
Nothing is retried, and a failed batch write is not rolled back.

Usage::

    async with PokeApiClient() as client:
        result = await ingest(25, client=client, store=store)
    print(result.message)
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from pokedex_store.errors import UpstreamFetchError
from pokedex_store.ingestion.transform import to_record
from pokedex_store.records.models import IngestResult, PokemonRecord

if TYPE_CHECKING:
    from pokedex_store.ingestion.client import PokeApiClient
    from pokedex_store.storage.base import RecordStoreBase

logger = logging.getLogger(__name__)

DEFAULT_COUNT = 25


async def fetch_records(
    count: int,
    *,
    client: PokeApiClient,
    max_concurrency: int = 0,
) -> list[PokemonRecord]:
    """Fetch keys ``1..count`` concurrently and return records in key order.

    Parameters
    ----------
    count:
        Number of upstream keys to fetch, starting at 1.
    client:
        Upstream API client.
    max_concurrency:
        Cap on in-flight requests; ``0`` launches all of them at once.

    Raises
    ------
    UpstreamFetchError
        After all fetches have settled, if at least one of them failed.
        ``failed_keys`` lists every key that failed.
    """
    keys = list(range(1, count + 1))
    semaphore = asyncio.Semaphore(max_concurrency) if max_concurrency > 0 else None

    async def _fetch(key: int) -> PokemonRecord:
        if semaphore is None:
            return to_record(await client.fetch_pokemon(key))
        async with semaphore:
            return to_record(await client.fetch_pokemon(key))

    outcomes = await asyncio.gather(*(_fetch(k) for k in keys), return_exceptions=True)

    failures = [(k, o) for k, o in zip(keys, outcomes) if isinstance(o, BaseException)]
    if failures:
        for key, exc in failures:
            logger.error("Upstream fetch failed for key %d: %s", key, exc)
        first = failures[0][1]
        if not isinstance(first, Exception):
            raise first
        failed_keys = [k for k, _ in failures]
        raise UpstreamFetchError(
            f"Ingest aborted: {len(failures)} of {count} upstream fetches failed "
            f"(keys {failed_keys})",
            failed_keys=failed_keys,
        ) from first

    return list(outcomes)  # type: ignore[arg-type]


async def ingest(
    count: int = DEFAULT_COUNT,
    *,
    client: PokeApiClient,
    store: RecordStoreBase,
    max_concurrency: int = 0,
) -> IngestResult:
    """Fetch, normalise and batch-insert *count* Pokémon.

    Existing records are not deduplicated against; with the unique
    ``externalId`` index a repeated ingest fails in the batch write.

    Returns
    -------
    IngestResult
        Confirmation message and number of inserted records.
    """
    if count < 0:
        raise ValueError(f"count must be >= 0, got {count}")

    logger.info("Ingesting %d Pokémon from %s", count, client.base_url)
    records = await fetch_records(count, client=client, max_concurrency=max_concurrency)

    # pymongo is blocking; keep the event loop free during the batch write.
    inserted = await asyncio.to_thread(store.insert_many, records)

    logger.info("Stored %d Pokémon in '%s'", inserted, store.collection_name)
    return IngestResult(message=f"{count} Pokémon saved.", inserted=inserted)
