"""Primary and volatile status handling.

Primary statuses are mutually exclusive and persist after battle; volatiles
are battle scoped and tracked independently in ``Volatiles``.
"""
from __future__ import annotations
from dataclasses import dataclass, replace
import random
from typing import Optional, Tuple

from .models import (
    Combatant, Volatiles, Poisoned, BadlyPoisoned, Burned, Paralyzed, Asleep, Frozen,
    PrimaryStatus, normalize_status_code, VOLATILE_KINDS,
)
from kanto.core.errors import InvariantViolation

SLEEP_TURNS = (1, 5)
VOLATILE_TURNS = (2, 5)
PARALYSIS_STOP_CHANCE = 0.25
THAW_CHANCE = 0.2
CONFUSION_SELF_HIT_CHANCE = 0.5

# status code -> defending types that ignore it
_IMMUNITIES = {
    "psn": ("poison", "steel"),
    "tox": ("poison", "steel"),
    "brn": ("fire",),
    "par": ("electric",),
    "frz": ("ice",),
}

_APPLY_MESSAGES = {
    "psn": "{name} was poisoned!",
    "tox": "{name} was badly poisoned!",
    "brn": "{name} was burned!",
    "par": "{name} was paralyzed! It may be unable to move!",
    "slp": "{name} fell asleep!",
    "frz": "{name} was frozen solid!",
}

_VOLATILE_MESSAGES = {
    "confusion": "{name} became confused!",
    "flinch": "{name} flinched!",
    "trap": "{name} was trapped!",
    "leech_seed": "{name} was seeded!",
}


@dataclass(frozen=True)
class StatusResult:
    combatant: Combatant
    message: str
    applied: bool


@dataclass(frozen=True)
class TickResult:
    combatant: Combatant
    message: Optional[str] = None
    damage: int = 0


@dataclass(frozen=True)
class ActionGate:
    can_act: bool
    combatant: Combatant
    messages: Tuple[str, ...] = ()


def is_immune(combatant: Combatant, code: str) -> bool:
    blocked = _IMMUNITIES.get(code, ())
    return any(t.lower() in blocked for t in combatant.types)


def _build_status(code: str, rng: random.Random) -> PrimaryStatus:
    if code == "psn":
        return Poisoned()
    if code == "tox":
        return BadlyPoisoned(stack=1)
    if code == "brn":
        return Burned()
    if code == "par":
        return Paralyzed()
    if code == "slp":
        return Asleep(turns_remaining=rng.randint(*SLEEP_TURNS))
    if code == "frz":
        return Frozen()
    raise InvariantViolation(f"Unknown primary status: {code}")


def apply_primary_status(combatant: Combatant, status: str, rng: random.Random) -> StatusResult:
    code = normalize_status_code(status)
    if combatant.status is not None:
        return StatusResult(combatant, "But it failed!", False)
    if is_immune(combatant, code):
        return StatusResult(combatant, f"It doesn't affect {combatant.name}...", False)
    updated = replace(combatant, status=_build_status(code, rng))
    return StatusResult(updated, _APPLY_MESSAGES[code].format(name=combatant.name), True)


def cure_status(combatant: Combatant) -> Combatant:
    return replace(combatant, status=None)


def tick_primary_status(combatant: Combatant, rng: random.Random) -> TickResult:
    """End-of-turn effect of the current primary status."""
    st = combatant.status
    name = combatant.name
    if st is None or combatant.fainted:
        return TickResult(combatant)
    if isinstance(st, Poisoned):
        dmg = combatant.max_hp // 8
        return TickResult(combatant.take_damage(dmg), f"{name} was hurt by poison!", dmg)
    if isinstance(st, BadlyPoisoned):
        dmg = combatant.max_hp * st.stack // 16
        hurt = replace(combatant.take_damage(dmg), status=BadlyPoisoned(stack=st.stack + 1))
        return TickResult(hurt, f"{name} was hurt by poison!", dmg)
    if isinstance(st, Burned):
        dmg = combatant.max_hp // 8
        return TickResult(combatant.take_damage(dmg), f"{name} was hurt by its burn!", dmg)
    if isinstance(st, Asleep):
        left = st.turns_remaining - 1
        if left <= 0:
            return TickResult(cure_status(combatant), f"{name} woke up!")
        return TickResult(replace(combatant, status=Asleep(left)), f"{name} is fast asleep.")
    if isinstance(st, Frozen):
        if rng.random() < THAW_CHANCE:
            return TickResult(cure_status(combatant), f"{name} thawed out!")
        return TickResult(combatant, f"{name} is frozen solid!")
    # Paralysis only matters at action time
    return TickResult(combatant)


def can_act(combatant: Combatant, rng: random.Random) -> ActionGate:
    """Turn-start gate: flinch, then primary status, then confusion.

    Stops at the first check that cancels the action. Waking up or thawing
    lets the combatant act on the same turn.
    """
    name = combatant.name
    if combatant.fainted:
        return ActionGate(False, combatant)
    if combatant.volatiles.flinch:
        cleared = clear_flinch(combatant)
        return ActionGate(False, cleared, (f"{name} flinched and couldn't move!",))

    messages: list[str] = []
    st = combatant.status
    if isinstance(st, Paralyzed):
        if rng.random() < PARALYSIS_STOP_CHANCE:
            return ActionGate(False, combatant, (f"{name} is paralyzed! It can't move!",))
    elif isinstance(st, Asleep):
        left = st.turns_remaining - 1
        if left > 0:
            return ActionGate(False, replace(combatant, status=Asleep(left)), (f"{name} is fast asleep!",))
        combatant = cure_status(combatant)
        messages.append(f"{name} woke up!")
    elif isinstance(st, Frozen):
        if rng.random() >= THAW_CHANCE:
            return ActionGate(False, combatant, (f"{name} is frozen solid!",))
        combatant = cure_status(combatant)
        messages.append(f"{name} thawed out!")

    if combatant.volatiles.confusion > 0:
        if rng.random() < CONFUSION_SELF_HIT_CHANCE:
            dmg = combatant.max_hp // 16
            messages.append(f"{name} is confused! It hurt itself in confusion!")
            return ActionGate(False, combatant.take_damage(dmg), tuple(messages))
        messages.append(f"{name} is confused!")
    return ActionGate(True, combatant, tuple(messages))


def apply_volatile(combatant: Combatant, kind: str, rng: random.Random,
                   turns: Optional[int] = None) -> StatusResult:
    if kind not in VOLATILE_KINDS:
        raise InvariantViolation(f"Unknown volatile status: {kind}")
    if combatant.volatiles.is_active(kind):
        return StatusResult(combatant, "But it failed!", False)
    v = combatant.volatiles
    if kind == "confusion":
        v = replace(v, confusion=turns or rng.randint(*VOLATILE_TURNS))
    elif kind == "trap":
        v = replace(v, trapped=turns or rng.randint(*VOLATILE_TURNS))
    elif kind == "flinch":
        v = replace(v, flinch=True)
    else:
        v = replace(v, leech_seed=True)
    msg = _VOLATILE_MESSAGES[kind].format(name=combatant.name)
    return StatusResult(replace(combatant, volatiles=v), msg, True)


def tick_leech_seed(seeded: Combatant, seeder: Combatant) -> Tuple[Combatant, Combatant, Optional[str]]:
    """Move ``seeded.max_hp // 16`` HP from the seeded side to its opponent."""
    if not seeded.volatiles.leech_seed or seeded.fainted:
        return seeded, seeder, None
    drained = min(seeded.max_hp // 16, seeded.current_hp)
    seeded = seeded.take_damage(drained)
    if not seeder.fainted:
        seeder = seeder.heal(drained)
    return seeded, seeder, f"{seeded.name}'s health was sapped by Leech Seed!"


def tick_confusion(combatant: Combatant) -> TickResult:
    turns = combatant.volatiles.confusion
    if turns <= 0:
        return TickResult(combatant)
    left = turns - 1
    updated = replace(combatant, volatiles=replace(combatant.volatiles, confusion=left))
    if left == 0:
        return TickResult(updated, f"{combatant.name} snapped out of confusion!")
    return TickResult(updated)


def tick_trap(combatant: Combatant) -> TickResult:
    turns = combatant.volatiles.trapped
    if turns <= 0:
        return TickResult(combatant)
    left = turns - 1
    updated = replace(combatant, volatiles=replace(combatant.volatiles, trapped=left))
    if left == 0:
        return TickResult(updated, f"{combatant.name} was freed from the trap!")
    return TickResult(updated)


def clear_flinch(combatant: Combatant) -> Combatant:
    if not combatant.volatiles.flinch:
        return combatant
    return replace(combatant, volatiles=replace(combatant.volatiles, flinch=False))


def clear_volatiles(combatant: Combatant) -> Combatant:
    return replace(combatant, volatiles=Volatiles())

__all__ = [
    "StatusResult","TickResult","ActionGate","is_immune","apply_primary_status","cure_status",
    "tick_primary_status","can_act","apply_volatile","tick_leech_seed","tick_confusion",
    "tick_trap","clear_flinch","clear_volatiles",
]
