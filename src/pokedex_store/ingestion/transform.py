"""Pure reshaping of an upstream payload into a :class:`PokemonRecord`."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from pokedex_store.ingestion.payload import StatSlot, UpstreamPokemon
from pokedex_store.records.models import MAX_MOVES, Move, PokemonRecord, Stat


def format_tenths(value: int, unit: str) -> str:
    """Render an upstream tenths value with *unit*: ``70`` → ``"7m"``, ``69`` → ``"6.9m"``."""
    text = f"{value / 10:.1f}"
    if text.endswith(".0"):
        text = text[:-2]
    return f"{text}{unit}"


def average_stat(stats: list[StatSlot]) -> str:
    """Mean ``base_stat`` to two decimals; ``"0.00"`` for an empty list.

    Exact binary ties round up (``50.125`` → ``"50.13"``).
    """
    if not stats:
        return "0.00"
    mean = sum(s.base_stat for s in stats) / len(stats)
    return str(Decimal(mean).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def to_record(payload: UpstreamPokemon) -> PokemonRecord:
    """Normalise one upstream Pokémon.  Freshly ingested records are never caught."""
    return PokemonRecord(
        external_id=payload.id,
        name=payload.name,
        image=payload.artwork_url or "",
        types=[t.type.name for t in payload.types],
        height=format_tenths(payload.height, "m"),
        weight=format_tenths(payload.weight, "kg"),
        abilities=[a.ability.name for a in payload.abilities],
        experience=payload.base_experience,
        moves=[Move(move_name=m.move.name) for m in payload.moves[:MAX_MOVES]],
        stats=[Stat(stat_name=s.stat.name, base_value=s.base_stat) for s in payload.stats],
        average_stat=average_stat(payload.stats),
        caught=False,
    )
