"""Async PokeAPI client — one GET per Pokémon, no retries."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx

from pokedex_store.errors import UpstreamFetchError
from pokedex_store.ingestion.payload import UpstreamPokemon

if TYPE_CHECKING:
    from pokedex_store.config import Settings

DEFAULT_BASE_URL = "https://pokeapi.co/api/v2"


class PokeApiClient:
    """Thin wrapper around :class:`httpx.AsyncClient`.

    Parameters
    ----------
    base_url:
        API root, e.g. ``"https://pokeapi.co/api/v2"``.
    timeout:
        Per-request timeout in seconds.
    transport:
        Optional httpx transport; tests pass an ``httpx.MockTransport``.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        *,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._http = httpx.AsyncClient(base_url=self.base_url, timeout=timeout, transport=transport)

    @classmethod
    def from_settings(cls, settings: Settings) -> PokeApiClient:
        return cls(settings.upstream_base_url, timeout=settings.upstream_timeout)

    async def fetch_pokemon(self, key: int) -> UpstreamPokemon:
        """Fetch and parse ``/pokemon/{key}``.

        Raises
        ------
        UpstreamFetchError
            On network errors, non-2xx responses, or a payload that is not
            JSON / lacks required fields.
        """
        try:
            response = await self._http.get(f"/pokemon/{key}")
            response.raise_for_status()
            return UpstreamPokemon.model_validate(response.json())
        except httpx.HTTPStatusError as exc:
            raise UpstreamFetchError(
                f"PokeAPI returned {exc.response.status_code} for key {key}", key=key
            ) from exc
        except httpx.HTTPError as exc:
            raise UpstreamFetchError(f"PokeAPI request for key {key} failed: {exc}", key=key) from exc
        except ValueError as exc:
            # JSONDecodeError, UnicodeDecodeError and pydantic ValidationError
            raise UpstreamFetchError(f"Malformed PokeAPI payload for key {key}", key=key) from exc

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> PokeApiClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
