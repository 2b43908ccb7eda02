"""Experience calculation, growth rates, level-up handling & move learning.

Implements the Gen I model:
- EXP on a knockout: floor(base_exp * level * bonus / 7), at least 1.
- Effort values grow by a tenth of the defeated species' base stats.
- Three growth curves (fast / medium / slow); other curve names fold into medium.
- Each level crossed checks the learnset; a full moveset queues the new move.
"""
from __future__ import annotations
from dataclasses import dataclass, replace
import math
from typing import List, Optional, Tuple

from .models import Combatant, Move, MoveSlot, MAX_LEVEL, MIN_LEVEL, MAX_MOVES
from .stats import derive_stats, effort_gain
from kanto.core.errors import InvariantViolation
from kanto.data.loader import get_species, Species
from kanto.data.moves import get_move

GROWTH_RATE_DEFAULT = "medium"


def clamp_level(level: int) -> int:
    return max(MIN_LEVEL, min(int(level), MAX_LEVEL))


def required_exp_for_level(level: int, rate: str = GROWTH_RATE_DEFAULT) -> int:
    """Total EXP needed to be at ``level`` on the given curve."""
    if level <= 1:
        return 0
    level = min(level, MAX_LEVEL)
    cube = level ** 3
    if rate == "fast":
        return math.floor(4 * cube / 5)
    if rate == "slow":
        return math.floor(5 * cube / 4)
    return cube


def exp_gain(defeated: Species, defeated_level: int, bonus: float = 1.0) -> int:
    return max(1, math.floor(defeated.base_exp * defeated_level * bonus / 7))


@dataclass(frozen=True)
class LevelUpResult:
    combatant: Combatant
    messages: Tuple[str, ...]
    from_level: int
    to_level: int
    learned: Tuple[Move, ...] = ()
    pending: Tuple[Move, ...] = ()

    @property
    def leveled(self) -> bool:
        return self.to_level > self.from_level


def recompute_stats(combatant: Combatant, species: Optional[Species] = None) -> Combatant:
    """Rebuild derived stats for the current level/IVs/EVs and refill HP."""
    species = species or get_species(combatant.species_id)
    stats = derive_stats(species.base_stats, combatant.ivs, combatant.evs, combatant.level)
    return replace(combatant, stats=stats, current_hp=stats.hp)


def apply_experience(combatant: Combatant, gained: int) -> LevelUpResult:
    species = get_species(combatant.species_id)
    before = combatant.level
    member = replace(combatant, exp=combatant.exp + max(0, gained))
    level = before
    while level < MAX_LEVEL and member.exp >= required_exp_for_level(level + 1, species.growth_rate):
        level += 1
    if level == before:
        return LevelUpResult(member, (), before, before)

    member = recompute_stats(replace(member, level=level), species)
    messages: List[str] = [f"{member.name} grew to Level {level}!"]
    learned: List[Move] = []
    pending: List[Move] = []
    known = {slot.move.id for slot in member.moves}
    for move_id in species.moves_between(before, level):
        if move_id in known:
            continue
        known.add(move_id)
        move = get_move(move_id)
        if len(member.moves) < MAX_MOVES:
            member = replace(member, moves=member.moves + (MoveSlot.fresh(move),))
            messages.append(f"{member.name} learned {move.name}!")
            learned.append(move)
        else:
            pending.append(move)
    return LevelUpResult(member, tuple(messages), before, level, tuple(learned), tuple(pending))


def award_experience(winner: Combatant, defeated: Combatant, bonus: float = 1.0) -> LevelUpResult:
    """EVs first, then EXP; used when ``defeated`` faints."""
    species = get_species(defeated.species_id)
    gained = exp_gain(species, defeated.level, bonus)
    winner = replace(winner, evs=effort_gain(winner.evs, species.base_stats))
    res = apply_experience(winner, gained)
    return replace(res, messages=(f"{winner.name} gained {gained} EXP!",) + res.messages)


def learn_move(combatant: Combatant, move: Move, forget_slot: Optional[int]) -> Tuple[Combatant, str]:
    """Resolve a queued learn: replace ``forget_slot`` or decline with None."""
    if forget_slot is None:
        return combatant, f"{combatant.name} did not learn {move.name}."
    if not 0 <= forget_slot < len(combatant.moves):
        raise InvariantViolation(f"No move in slot {forget_slot}")
    old = combatant.moves[forget_slot].move
    updated = combatant.with_slot(forget_slot, MoveSlot.fresh(move))
    return updated, f"{combatant.name} forgot {old.name} and learned {move.name}!"

__all__ = [
    "clamp_level","required_exp_for_level","exp_gain","apply_experience","award_experience",
    "recompute_stats","learn_move","LevelUpResult","GROWTH_RATE_DEFAULT",
]
