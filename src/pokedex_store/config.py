"""Shared configuration loaded from environment / .env file."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application-wide settings, populated from env vars or .env file.

    ``MONGO_URL`` has no default: a missing connection string is a
    startup error, never a silent fallback to some shared cluster.
    """

    # Storage
    mongo_url: str = Field(description="MongoDB connection string, e.g. 'mongodb://localhost:27017'")
    mongo_database: str = "pokedex"
    mongo_collection: str = "pokemons"

    # Upstream
    upstream_base_url: str = Field(
        default="https://pokeapi.co/api/v2",
        description="Root of the PokeAPI REST interface (no trailing slash).",
    )
    upstream_timeout: float = Field(default=10.0, description="Per-request timeout in seconds")

    # Ingest
    ingest_default_limit: int = Field(default=25, ge=0)
    ingest_max_concurrency: int = Field(
        default=0,
        ge=0,
        description="Upper bound on in-flight upstream requests; 0 means unbounded.",
    )

    # Serving
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Build the process-wide :class:`Settings` on first use.

    Raises ``pydantic.ValidationError`` when required values are absent.
    """
    return Settings()  # type: ignore[call-arg]
