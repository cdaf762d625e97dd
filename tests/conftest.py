"""Shared pytest configuration and fixtures."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import httpx
import pytest

from pokedex_store.config import Settings
from pokedex_store.errors import DuplicateRecordError
from pokedex_store.ingestion.client import PokeApiClient
from pokedex_store.records.models import PokemonRecord, PokemonUpdate
from pokedex_store.storage.base import RecordStoreBase

UPSTREAM_URL = "https://pokeapi.test/api/v2"


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: marks tests requiring external services")


# ── Fake record store for deterministic testing ─────────────────────────


class FakeRecordStore(RecordStoreBase):
    """In-memory store keyed by ``external_id``, insertion-ordered."""

    def __init__(self) -> None:
        super().__init__("test-pokemons")
        self.records: dict[int, PokemonRecord] = {}
        self.batch_calls = 0
        self.indexed = False
        self.closed = False
        self.healthy = True

    def insert(self, record: PokemonRecord) -> PokemonRecord:
        if record.external_id in self.records:
            raise DuplicateRecordError(f"duplicate externalId {record.external_id}")
        self.records[record.external_id] = record
        return record

    def insert_many(self, records: list[PokemonRecord]) -> int:
        self.batch_calls += 1
        for record in records:
            self.insert(record)
        return len(records)

    def list_all(self) -> list[PokemonRecord]:
        return list(self.records.values())

    def get(self, external_id: int) -> PokemonRecord | None:
        return self.records.get(external_id)

    def update(self, external_id: int, changes: PokemonUpdate) -> PokemonRecord | None:
        current = self.records.get(external_id)
        if current is None:
            return None
        merged = PokemonRecord.model_validate({**current.to_document(), **changes.changes()})
        self.records[external_id] = merged
        return merged

    def delete(self, external_id: int) -> PokemonRecord | None:
        return self.records.pop(external_id, None)

    def count_caught(self) -> int:
        return sum(1 for r in self.records.values() if r.caught)

    def list_caught(self) -> list[PokemonRecord]:
        return [r for r in self.records.values() if r.caught]

    def health_check(self) -> bool:
        return self.healthy

    def ensure_indexes(self) -> None:
        self.indexed = True

    def close(self) -> None:
        self.closed = True


# ── Upstream fixtures ───────────────────────────────────────────────────


def make_payload(
    pid: int,
    *,
    name: str | None = None,
    height: int = 7,
    weight: int = 69,
    base_stats: tuple[int, ...] = (45, 49, 49, 65, 65, 45),
    move_count: int = 7,
    artwork: str | None = "https://img.test/official-artwork/{pid}.png",
) -> dict[str, Any]:
    """Build a trimmed-down PokeAPI ``/pokemon/{pid}`` document."""
    stat_names = ["hp", "attack", "defense", "special-attack", "special-defense", "speed"]
    return {
        "id": pid,
        "name": name or f"pokemon-{pid}",
        "sprites": {
            "front_default": f"https://img.test/{pid}.png",
            "other": {
                "official-artwork": {
                    "front_default": artwork.format(pid=pid) if artwork else None,
                },
            },
        },
        "types": [{"slot": 1, "type": {"name": "grass", "url": "x"}},
                  {"slot": 2, "type": {"name": "poison", "url": "x"}}],
        "height": height,
        "weight": weight,
        "abilities": [{"ability": {"name": "overgrow"}, "is_hidden": False},
                      {"ability": {"name": "chlorophyll"}, "is_hidden": True}],
        "base_experience": 64,
        "moves": [{"move": {"name": f"move-{i}"}} for i in range(move_count)],
        "stats": [
            {"stat": {"name": stat_names[i % len(stat_names)]}, "base_stat": value, "effort": 0}
            for i, value in enumerate(base_stats)
        ],
    }


def pokeapi_transport(fail_keys: set[int] | None = None) -> httpx.MockTransport:
    """A MockTransport serving :func:`make_payload` and 500 for *fail_keys*."""
    fail_keys = fail_keys or set()

    def handler(request: httpx.Request) -> httpx.Response:
        key = int(request.url.path.rstrip("/").rsplit("/", 1)[-1])
        if key in fail_keys:
            return httpx.Response(500, json={"detail": "boom"})
        return httpx.Response(200, json=make_payload(key))

    return httpx.MockTransport(handler)


@pytest.fixture()
def fake_store() -> FakeRecordStore:
    return FakeRecordStore()


@pytest.fixture()
def settings() -> Settings:
    return Settings(mongo_url="mongodb://localhost:27017", _env_file=None)  # type: ignore[call-arg]


@pytest.fixture()
def upstream_client() -> Callable[..., PokeApiClient]:
    """Factory: ``upstream_client(fail_keys={2})`` → stubbed :class:`PokeApiClient`."""

    def _build(fail_keys: set[int] | None = None) -> PokeApiClient:
        return PokeApiClient(UPSTREAM_URL, transport=pokeapi_transport(fail_keys))

    return _build


@pytest.fixture()
def sample_record() -> PokemonRecord:
    return PokemonRecord.model_validate(
        {
            "externalId": 25,
            "name": "pikachu",
            "image": "https://img.test/25.png",
            "types": ["electric"],
            "height": "0.4m",
            "weight": "6kg",
            "abilities": ["static", "lightning-rod"],
            "experience": 112,
            "moves": [{"moveName": "thunder-shock"}, {"moveName": "quick-attack"}],
            "stats": [{"statName": "hp", "baseValue": 35}, {"statName": "speed", "baseValue": 90}],
            "averageStat": "62.50",
        }
    )
