"""Opponent move selection.

Picks uniformly among moves with PP, skipping ones that would be wasted:
status moves against an already statused target and stat drops on a stat
already bottomed out. A filter that would empty the pool is ignored.
"""
from __future__ import annotations
import random
from typing import List

from .models import Combatant, MoveSlot, UseMove, STRUGGLE_SLOT
from .stages import MIN_STAGE


def _wasted_status(slot: MoveSlot, target: Combatant) -> bool:
    return target.status is not None and slot.move.inflicts_status


def _wasted_drop(slot: MoveSlot, target: Combatant) -> bool:
    lowered = slot.move.lowered_stats()
    return bool(lowered) and any(target.stages.get(stat) <= MIN_STAGE for stat in lowered)


def candidate_slots(opponent: Combatant, target: Combatant) -> List[int]:
    legal = [i for i, slot in enumerate(opponent.moves) if slot.pp > 0]
    pool = legal
    for wasted in (_wasted_status, _wasted_drop):
        kept = [i for i in pool if not wasted(opponent.moves[i], target)]
        if kept:
            pool = kept
    return pool


def choose_move(opponent: Combatant, target: Combatant, rng: random.Random) -> UseMove:
    pool = candidate_slots(opponent, target)
    if not pool:
        return UseMove(STRUGGLE_SLOT)
    return UseMove(rng.choice(pool))

__all__ = ["choose_move","candidate_slots","STRUGGLE_SLOT"]
