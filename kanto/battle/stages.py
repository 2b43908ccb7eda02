"""Stat stage helpers.

Stages are integers in [-6, 6]; each maps to an exact rational multiplier so
effective stats never pick up float drift.
"""
from __future__ import annotations
from dataclasses import dataclass, replace
from fractions import Fraction
from typing import Dict

from .models import Combatant, STAT_DISPLAY_NAMES
from kanto.core.errors import InvariantViolation

MIN_STAGE = -6
MAX_STAGE = 6

_STAGE_MULTIPLIERS: Dict[int, Fraction] = {
    -6: Fraction(1, 4),
    -5: Fraction(7, 25),
    -4: Fraction(1, 3),
    -3: Fraction(2, 5),
    -2: Fraction(1, 2),
    -1: Fraction(2, 3),
    0: Fraction(1),
    1: Fraction(3, 2),
    2: Fraction(2),
    3: Fraction(5, 2),
    4: Fraction(3),
    5: Fraction(7, 2),
    6: Fraction(4),
}

_RISE = {1: "rose!", 2: "rose sharply!", 3: "rose drastically!"}
_FALL = {1: "fell!", 2: "harshly fell!", 3: "severely fell!"}


def clamp_stage(stage: int) -> int:
    return max(MIN_STAGE, min(MAX_STAGE, int(stage)))


def stage_multiplier(stage: int) -> Fraction:
    return _STAGE_MULTIPLIERS[clamp_stage(stage)]


def effective_stat(raw: int, stage: int) -> int:
    """``floor(raw * multiplier)``; used for damage and turn order."""
    return int(raw * stage_multiplier(stage))


@dataclass(frozen=True)
class StageChange:
    combatant: Combatant
    message: str
    applied: bool


def apply_stage_delta(combatant: Combatant, stat: str, delta: int) -> StageChange:
    if stat not in STAT_DISPLAY_NAMES or stat == "hp":
        raise InvariantViolation(f"Stat {stat!r} has no stage")
    current = combatant.stages.get(stat)
    new = clamp_stage(current + delta)
    label = f"{combatant.name}'s {STAT_DISPLAY_NAMES[stat]}"
    if new == current:
        direction = "higher" if delta > 0 else "lower"
        return StageChange(combatant, f"{label} won't go any {direction}!", False)
    actual = new - current
    table = _RISE if actual > 0 else _FALL
    word = table[min(abs(actual), 3)]
    updated = replace(combatant, stages=combatant.stages.with_stage(stat, new))
    return StageChange(updated, f"{label} {word}", True)

__all__ = ["clamp_stage","stage_multiplier","effective_stat","apply_stage_delta","StageChange","MIN_STAGE","MAX_STAGE"]
