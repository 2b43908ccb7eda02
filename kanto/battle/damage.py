"""Accuracy and damage rolls.

The base formula truncates at every division the way the old fixed-point
games did; modifiers are then applied in a fixed order (STAB, type, crit,
variance) and floored once.
"""
from __future__ import annotations
from dataclasses import dataclass
import math
import random
from typing import Optional, Tuple

from .models import Combatant, Move
from .stages import stage_multiplier, effective_stat
from .typechart import get_effectiveness, effectiveness_message

CRIT_CHANCE = 0.0625
CRIT_MULTIPLIER = 1.5
STAB_MULTIPLIER = 1.5
VARIANCE_MIN = 0.85
VARIANCE_SPAN = 0.15


@dataclass(frozen=True)
class DamageResult:
    damage: int
    is_critical: bool = False
    effectiveness: float = 1.0
    tier: Optional[str] = None    # "super" | "not_very" | "immune" | None
    messages: Tuple[str, ...] = ()


def hit_chance(attacker: Combatant, defender: Combatant, move: Move) -> float:
    acc = stage_multiplier(attacker.stages.accuracy)
    eva = stage_multiplier(defender.stages.evasion)
    return float(move.accuracy * acc / eva)


def roll_accuracy(attacker: Combatant, defender: Combatant, move: Move, rng: random.Random) -> bool:
    """True if the move connects. Accuracy 0 never misses."""
    if move.accuracy <= 0:
        return True
    return not rng.random() * 100 > hit_chance(attacker, defender, move)


def base_damage(level: int, power: int, attack: int, defense: int) -> int:
    defense = max(1, defense)
    return math.floor(math.floor(math.floor(2 * level / 5 + 2) * power * attack / defense) / 50 + 2)


def _attack_and_defense(attacker: Combatant, defender: Combatant, move: Move) -> Tuple[int, int]:
    if move.category == "physical":
        atk = effective_stat(attacker.stats.attack, attacker.stages.attack)
        dfn = effective_stat(defender.stats.defense, defender.stages.defense)
    else:
        atk = effective_stat(attacker.stats.sp_attack, attacker.stages.sp_attack)
        dfn = effective_stat(defender.stats.sp_defense, defender.stages.sp_defense)
    return atk, dfn


def _tier(effectiveness: float) -> Optional[str]:
    if effectiveness == 0:
        return "immune"
    if effectiveness >= 2:
        return "super"
    if effectiveness < 1:
        return "not_very"
    return None


def compute_damage(attacker: Combatant, defender: Combatant, move: Move, rng: random.Random) -> DamageResult:
    if not move.is_damaging:
        return DamageResult(0)
    eff = get_effectiveness(move.type, defender.types)
    tier = _tier(eff)
    if eff == 0:
        return DamageResult(0, False, eff, tier, (effectiveness_message(eff),))

    atk, dfn = _attack_and_defense(attacker, defender, move)
    base = base_damage(attacker.level, move.power, atk, dfn)
    stab = STAB_MULTIPLIER if move.type.lower() in (t.lower() for t in attacker.types) else 1.0
    crit = rng.random() < CRIT_CHANCE
    variance = VARIANCE_MIN + rng.random() * VARIANCE_SPAN
    total = base * stab * eff * (CRIT_MULTIPLIER if crit else 1.0) * variance
    damage = max(1, math.floor(total))

    messages = []
    if crit:
        messages.append("A critical hit!")
    tier_msg = effectiveness_message(eff)
    if tier_msg:
        messages.append(tier_msg)
    return DamageResult(damage, crit, eff, tier, tuple(messages))

__all__ = ["DamageResult","hit_chance","roll_accuracy","base_damage","compute_damage",
           "CRIT_CHANCE","CRIT_MULTIPLIER","STAB_MULTIPLIER"]
