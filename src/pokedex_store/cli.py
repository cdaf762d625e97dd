"""Command-line entry points.

    pokedex-ingest --limit 151    # one-shot ingest, no HTTP server
    pokedex-serve                 # run the API under uvicorn
"""

from __future__ import annotations

import argparse
import asyncio
import logging

from pokedex_store.config import Settings, get_settings
from pokedex_store.ingestion.client import PokeApiClient
from pokedex_store.ingestion.ingest import ingest
from pokedex_store.logging_config import configure_logging
from pokedex_store.records.models import IngestResult
from pokedex_store.storage.base import RecordStoreBase

logger = logging.getLogger(__name__)


async def run_ingest(
    settings: Settings,
    limit: int,
    *,
    store: RecordStoreBase | None = None,
    client: PokeApiClient | None = None,
) -> IngestResult:
    """Build backends from *settings* (unless given) and run one ingest."""
    if store is None:
        from pokedex_store.storage.mongo_store import MongoRecordStore

        store = MongoRecordStore.from_settings(settings)
    client = client or PokeApiClient.from_settings(settings)
    try:
        store.ensure_indexes()
        async with client:
            return await ingest(
                limit,
                client=client,
                store=store,
                max_concurrency=settings.ingest_max_concurrency,
            )
    finally:
        store.close()


def ingest_main(argv: list[str] | None = None) -> int:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Fetch Pokémon from PokeAPI into MongoDB")
    parser.add_argument(
        "--limit",
        type=int,
        default=settings.ingest_default_limit,
        help="Number of Pokémon to ingest, ids 1..limit (default: %(default)s)",
    )
    args = parser.parse_args(argv)
    if args.limit < 0:
        parser.error("--limit must be >= 0")

    configure_logging(settings.log_level)
    result = asyncio.run(run_ingest(settings, args.limit))
    print(result.message)
    return 0


def serve_main(argv: list[str] | None = None) -> int:
    import uvicorn

    settings = get_settings()
    parser = argparse.ArgumentParser(description="Run the Pokédex Store API")
    parser.add_argument("--host", default=settings.api_host)
    parser.add_argument("--port", type=int, default=settings.api_port)
    args = parser.parse_args(argv)

    configure_logging(settings.log_level)
    logger.info("Starting API on %s:%d", args.host, args.port)
    uvicorn.run(
        "pokedex_store.serving.app:create_app",
        factory=True,
        host=args.host,
        port=args.port,
    )
    return 0
