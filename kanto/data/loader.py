"""Runtime loader utilities for species data.

Provides cached access to the per-species JSON documents under
assets/pokemon/species (one file per National Dex number).
"""
from __future__ import annotations
import json
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Tuple

from kanto.core.errors import DataLoadError, InvariantViolation
from kanto.core.paths import SPECIES, POKEMON
from kanto.battle.models import StatBlock

_INDEX_FILE = POKEMON / "species_index.json"

GROWTH_RATES = ("fast", "medium", "slow")
# Curves the data may name that we fold into the three we model
_GROWTH_ALIASES = {
    "medium_fast": "medium",
    "medium-fast": "medium",
    "medium_slow": "medium",
    "medium-slow": "medium",
    "mediumslow": "medium",
    "slow_fast": "medium",
    "slowfast": "medium",
}

class SpeciesNotFound(InvariantViolation):
    pass


@dataclass(frozen=True)
class LearnsetEntry:
    level: int
    move_id: int


@dataclass(frozen=True)
class Species:
    id: int
    name: str
    types: Tuple[str, ...]
    base_stats: StatBlock
    catch_rate: int
    base_exp: int
    growth_rate: str
    learnset: Tuple[LearnsetEntry, ...] = ()

    def moves_between(self, low: int, high: int) -> Tuple[int, ...]:
        """Move ids learned at levels in (low, high]."""
        return tuple(e.move_id for e in self.learnset if low < e.level <= high)

    def moves_up_to(self, level: int) -> Tuple[int, ...]:
        return tuple(e.move_id for e in self.learnset if e.level <= level)


def normalize_growth_rate(raw: Optional[str]) -> str:
    r = str(raw or "medium").lower().replace(" ", "_")
    r = _GROWTH_ALIASES.get(r, r)
    return r if r in GROWTH_RATES else "medium"


def _parse(path: Path, raw: Dict[str, Any]) -> Species:
    try:
        base = raw["base_stats"]
        return Species(
            id=int(raw["id"]),
            name=str(raw["name"]),
            types=tuple(t.lower() for t in raw["types"]),
            base_stats=StatBlock(**{k: int(base[k]) for k in StatBlock.FIELDS}),
            catch_rate=int(raw["catch_rate"]),
            base_exp=int(raw["base_exp"]),
            growth_rate=normalize_growth_rate(raw.get("growth_rate")),
            learnset=tuple(
                LearnsetEntry(int(e["level"]), int(e["move"]))
                for e in sorted(raw.get("learnset", []), key=lambda e: e["level"])
            ),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise DataLoadError(str(path), f"malformed species document ({e!r})") from e


@lru_cache(maxsize=None)
def _index() -> list[int]:
    if not _INDEX_FILE.exists():
        return []
    return json.loads(_INDEX_FILE.read_text(encoding="utf-8"))

@lru_cache(maxsize=None)
def _species_path(species_id: int) -> Path:
    p = SPECIES / f"{species_id:03}.json"
    if not p.exists():
        raise SpeciesNotFound(f"Species id {species_id} not found")
    return p

@lru_cache(maxsize=256)
def get_species(species_id: int) -> Species:
    path = _species_path(int(species_id))
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise DataLoadError(str(path), str(e)) from e
    return _parse(path, raw)

@lru_cache(maxsize=None)
def all_species_ids() -> Iterable[int]:
    return tuple(_index())

@lru_cache(maxsize=None)
def find_by_name(name: str) -> Optional[Species]:
    name_lower = name.lower()
    for sid in all_species_ids():
        data = get_species(sid)
        if data.name.lower() == name_lower:
            return data
    return None

__all__ = ["Species","LearnsetEntry","SpeciesNotFound","get_species","all_species_ids","find_by_name",
           "normalize_growth_rate","GROWTH_RATES"]
