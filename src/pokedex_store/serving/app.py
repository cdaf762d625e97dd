"""FastAPI application exposing the Pokémon record store as a REST API.

Run with::

    uvicorn pokedex_store.serving.app:create_app --factory
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Query, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from pokedex_store.config import Settings, get_settings
from pokedex_store.errors import DuplicateRecordError, StorageError, UpstreamFetchError
from pokedex_store.ingestion.client import PokeApiClient
from pokedex_store.ingestion.ingest import ingest
from pokedex_store.logging_config import configure_logging
from pokedex_store.records.models import IngestResult, PokemonRecord, PokemonUpdate
from pokedex_store.storage.base import RecordStoreBase

logger = logging.getLogger(__name__)


# ── Response schemas ──────────────────────────────────────────────────
class CountResponse(BaseModel):
    count: int


class HealthResponse(BaseModel):
    status: str
    database: str


# ── Dependencies ──────────────────────────────────────────────────────
def get_store(request: Request) -> RecordStoreBase:
    return request.app.state.store


def get_client(request: Request) -> PokeApiClient:
    return request.app.state.client


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def _not_found(external_id: int) -> HTTPException:
    return HTTPException(status_code=404, detail=f"Pokémon {external_id} not found")


# ── Routes ────────────────────────────────────────────────────────────
router = APIRouter(prefix="/pokemons", tags=["pokemons"])


@router.post("", response_model=PokemonRecord, status_code=status.HTTP_201_CREATED)
def create_pokemon(
    record: PokemonRecord, store: RecordStoreBase = Depends(get_store)
) -> PokemonRecord:
    return store.insert(record)


@router.get("", response_model=list[PokemonRecord])
def list_pokemons(store: RecordStoreBase = Depends(get_store)) -> list[PokemonRecord]:
    return store.list_all()


@router.post("/fetch", response_model=IngestResult)
async def fetch_pokemons(
    limit: int | None = Query(default=None, ge=0),
    store: RecordStoreBase = Depends(get_store),
    client: PokeApiClient = Depends(get_client),
    settings: Settings = Depends(get_app_settings),
) -> IngestResult:
    """Pull ``limit`` Pokémon (ids 1..limit) from PokeAPI into the store."""
    count = settings.ingest_default_limit if limit is None else limit
    return await ingest(
        count,
        client=client,
        store=store,
        max_concurrency=settings.ingest_max_concurrency,
    )


# Literal paths must be registered before "/{external_id}".
@router.get("/caught/count", response_model=CountResponse)
def count_caught(store: RecordStoreBase = Depends(get_store)) -> CountResponse:
    return CountResponse(count=store.count_caught())


@router.get("/caught", response_model=list[PokemonRecord])
def list_caught(store: RecordStoreBase = Depends(get_store)) -> list[PokemonRecord]:
    return store.list_caught()


@router.get("/{external_id}", response_model=PokemonRecord)
def get_pokemon(external_id: int, store: RecordStoreBase = Depends(get_store)) -> PokemonRecord:
    record = store.get(external_id)
    if record is None:
        raise _not_found(external_id)
    return record


@router.patch("/{external_id}", response_model=PokemonRecord)
def update_pokemon(
    external_id: int,
    changes: PokemonUpdate,
    store: RecordStoreBase = Depends(get_store),
) -> PokemonRecord:
    record = store.update(external_id, changes)
    if record is None:
        raise _not_found(external_id)
    return record


@router.delete("/{external_id}", response_model=PokemonRecord)
def delete_pokemon(external_id: int, store: RecordStoreBase = Depends(get_store)) -> PokemonRecord:
    record = store.delete(external_id)
    if record is None:
        raise _not_found(external_id)
    return record


# ── Error translation ─────────────────────────────────────────────────
async def _upstream_error(request: Request, exc: UpstreamFetchError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content={"detail": str(exc), "failedKeys": exc.failed_keys},
    )


async def _duplicate_error(request: Request, exc: DuplicateRecordError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"detail": str(exc)})


async def _storage_error(request: Request, exc: StorageError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content={"detail": str(exc)}
    )


# ── Factory ───────────────────────────────────────────────────────────
def create_app(
    settings: Settings | None = None,
    *,
    store: RecordStoreBase | None = None,
    client: PokeApiClient | None = None,
) -> FastAPI:
    """Build the API with explicitly injected configuration and backends.

    Parameters
    ----------
    settings:
        Defaults to :func:`get_settings`, which fails when ``MONGO_URL``
        is unset.
    store:
        Record store; a :class:`MongoRecordStore` is built from *settings*
        when omitted.
    client:
        Upstream client; built from *settings* when omitted.
    """
    settings = settings or get_settings()
    if store is None:
        from pokedex_store.storage.mongo_store import MongoRecordStore

        store = MongoRecordStore.from_settings(settings)
    if client is None:
        client = PokeApiClient.from_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        configure_logging(settings.log_level)
        store.ensure_indexes()
        logger.info("Serving collection '%s'", store.collection_name)
        yield
        await client.aclose()
        store.close()

    app = FastAPI(
        title="Pokédex Store API",
        version="0.1.0",
        description="CRUD over Pokémon records ingested from PokeAPI.",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store
    app.state.client = client

    app.add_exception_handler(UpstreamFetchError, _upstream_error)  # type: ignore[arg-type]
    app.add_exception_handler(DuplicateRecordError, _duplicate_error)  # type: ignore[arg-type]
    app.add_exception_handler(StorageError, _storage_error)  # type: ignore[arg-type]

    @app.get("/health", response_model=HealthResponse)
    def health() -> HealthResponse:
        """Liveness probe, with a database reachability flag."""
        database = "ok" if store.health_check() else "unavailable"
        return HealthResponse(status="ok", database=database)

    app.include_router(router)
    return app
