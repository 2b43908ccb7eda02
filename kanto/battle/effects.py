"""Move execution: announce, accuracy, damage, then secondary effects.

Each step hands back fresh attacker/defender values; later effects see the
results of earlier ones (drain after recoil sees the post-recoil HP).
"""
from __future__ import annotations
from dataclasses import dataclass
import random
from typing import List, Optional, Tuple

from .models import (
    Combatant, Move, MoveEffect, StatusEffect, VolatileEffect, StatStageEffect, HealEffect,
    DrainEffect, RecoilEffect, LeechSeedEffect, TrapEffect, STRUGGLE_ID,
)
from .damage import roll_accuracy, compute_damage
from .stages import apply_stage_delta
from .status import apply_primary_status, apply_volatile


@dataclass(frozen=True)
class MoveResult:
    attacker: Combatant
    defender: Combatant
    messages: Tuple[str, ...]
    damage_dealt: int = 0
    missed: bool = False
    critical: bool = False

    @property
    def fainted(self) -> bool:
        """True if either side ended the move at 0 HP."""
        return self.attacker.fainted or self.defender.fainted


def stat_effect_targets_self(effect: StatStageEffect, move: Move) -> Optional[bool]:
    """Resolve who a stat-stage effect applies to.

    Returns True (attacker) or False (defender) for the whole effect, or None
    when an untagged effect has to be split per change by sign.
    """
    if effect.target is not None:
        return effect.target == "self"
    guaranteed = effect.chance is None or effect.chance >= 100
    if guaranteed and move.is_damaging and all(c.delta < 0 for c in effect.changes):
        return True
    return None


def _rolls(effect: MoveEffect, rng: random.Random) -> bool:
    if effect.chance is None or effect.chance >= 100:
        return True
    return not rng.random() * 100 > effect.chance


def _apply_to_attacker(effect: MoveEffect, move: Move, attacker: Combatant, dealt: int,
                       messages: List[str]) -> Combatant:
    if isinstance(effect, DrainEffect):
        if dealt > 0 and not attacker.fainted:
            attacker = attacker.heal(dealt * effect.percent // 100)
            messages.append(f"{attacker.name} absorbed some HP!")
    elif isinstance(effect, RecoilEffect):
        # Struggle's recoil ignores the damage it dealt
        if move.id == STRUGGLE_ID:
            recoil = attacker.max_hp // 4
        else:
            recoil = dealt * effect.percent // 100
        if move.id == STRUGGLE_ID or dealt > 0:
            attacker = attacker.take_damage(recoil)
            messages.append(f"{attacker.name} was hurt by recoil!")
    elif isinstance(effect, HealEffect):
        if attacker.current_hp == attacker.max_hp:
            messages.append(f"{attacker.name}'s HP is full!")
        else:
            attacker = attacker.heal(attacker.max_hp * effect.percent // 100)
            messages.append(f"{attacker.name} regained health!")
    return attacker


def _apply_stat_stages(effect: StatStageEffect, move: Move, attacker: Combatant, defender: Combatant,
                       messages: List[str]) -> Tuple[Combatant, Combatant]:
    on_self = stat_effect_targets_self(effect, move)
    for change in effect.changes:
        to_self = on_self if on_self is not None else change.delta > 0
        if to_self:
            sc = apply_stage_delta(attacker, change.stat, change.delta)
            attacker = sc.combatant
        elif defender.fainted:
            continue
        else:
            sc = apply_stage_delta(defender, change.stat, change.delta)
            defender = sc.combatant
        messages.append(sc.message)
    return attacker, defender


def _apply_to_defender(effect: MoveEffect, move: Move, attacker: Combatant, defender: Combatant,
                       rng: random.Random, messages: List[str]) -> Combatant:
    if defender.fainted:
        return defender
    if isinstance(effect, StatusEffect):
        res = apply_primary_status(defender, effect.status, rng)
    elif isinstance(effect, VolatileEffect):
        res = apply_volatile(defender, effect.volatile, rng, effect.turns)
    elif isinstance(effect, TrapEffect):
        res = apply_volatile(defender, "trap", rng, effect.turns)
    elif isinstance(effect, LeechSeedEffect):
        res = apply_volatile(defender, "leech_seed", rng)
        if res.applied:
            messages.append(f"{attacker.name} planted a seed on {defender.name}!")
            return res.combatant
    else:
        return defender
    messages.append(res.message)
    return res.combatant


def execute_move(attacker: Combatant, defender: Combatant, move: Move, rng: random.Random) -> MoveResult:
    """Resolve one use of ``move`` by ``attacker`` against ``defender``.

    PP is not touched here; the orchestrator spends it when the move is
    committed. A miss aborts before damage and skips every secondary effect.
    """
    messages: List[str] = [f"{attacker.name} used {move.name}!"]
    if not roll_accuracy(attacker, defender, move, rng):
        messages.append(f"{attacker.name}'s attack missed!")
        return MoveResult(attacker, defender, tuple(messages), 0, missed=True)

    dealt = 0
    critical = False
    if move.is_damaging:
        dmg = compute_damage(attacker, defender, move, rng)
        dealt = dmg.damage
        critical = dmg.is_critical
        defender = defender.take_damage(dealt)
        messages.extend(dmg.messages)
        if dmg.effectiveness == 0:
            return MoveResult(attacker, defender, tuple(messages), 0)

    for effect in move.effects:
        if not _rolls(effect, rng):
            continue
        if isinstance(effect, (DrainEffect, RecoilEffect, HealEffect)):
            attacker = _apply_to_attacker(effect, move, attacker, dealt, messages)
        elif isinstance(effect, StatStageEffect):
            attacker, defender = _apply_stat_stages(effect, move, attacker, defender, messages)
        else:
            defender = _apply_to_defender(effect, move, attacker, defender, rng, messages)

    return MoveResult(attacker, defender, tuple(messages), dealt, critical=critical)

__all__ = ["MoveResult","execute_move","stat_effect_targets_self"]
