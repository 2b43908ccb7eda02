"""Factory helpers for constructing Combatant instances from species data.

Shared across the engine, the CLI and the tests.
"""
from __future__ import annotations
import random
from typing import Iterable, List, Optional, Tuple

from .models import Combatant, MoveSlot, StatBlock, MAX_MOVES
from .experience import clamp_level, required_exp_for_level
from .stats import derive_stats, random_ivs
from kanto.data.loader import get_species
from kanto.data.moves import get_move
from kanto.data.trainers import Trainer


def default_moves(species_id: int, level: int) -> List[int]:
    """Last four distinct moves the species knows by ``level``."""
    ids: List[int] = []
    for mid in get_species(species_id).moves_up_to(level):
        if mid in ids:
            ids.remove(mid)
        ids.append(mid)
    return ids[-MAX_MOVES:]


def combatant_from_species(
    species_id: int,
    level: int,
    rng: Optional[random.Random] = None,
    *,
    nickname: str | None = None,
    ivs: StatBlock | None = None,
    evs: StatBlock | None = None,
    move_ids: Iterable[int] | None = None,
) -> Combatant:
    level = clamp_level(level)
    s = get_species(species_id)
    if ivs is None:
        ivs = random_ivs(rng or random.Random())
    evs = evs or StatBlock()
    stats = derive_stats(s.base_stats, ivs, evs, level)
    ids = list(move_ids) if move_ids is not None else default_moves(species_id, level)
    moves = tuple(MoveSlot.fresh(get_move(mid)) for mid in ids[:MAX_MOVES])
    return Combatant(
        species_id=s.id,
        name=nickname or s.name,
        level=level,
        types=s.types,
        current_hp=stats.hp,
        stats=stats,
        ivs=ivs,
        evs=evs,
        moves=moves,
        exp=required_exp_for_level(level, s.growth_rate),
    )


def party_for_trainer(trainer: Trainer, rng: Optional[random.Random] = None) -> Tuple[Combatant, ...]:
    rng = rng or random.Random()
    return tuple(combatant_from_species(m.species_id, m.level, rng) for m in trainer.party)

__all__ = ["combatant_from_species","party_for_trainer","default_moves"]
