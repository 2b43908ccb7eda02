"""Capture & flee mechanics (Gen I style percent rolls)."""
from __future__ import annotations
from dataclasses import dataclass
import math
import random

from .models import Combatant

# Status bonus by primary status code
STATUS_BONUS = {
    'slp': 2.0,
    'frz': 2.0,
    'par': 1.5,
    'brn': 1.5,
    'psn': 1.5,
    'tox': 1.5,
}

MASTER_BALL_BONUS = 255


@dataclass(frozen=True)
class CaptureResult:
    success: bool
    chance: int


def capture_chance(combatant: Combatant, catch_rate: int, ball_bonus: float) -> int:
    """Percent chance (1-100) that a ball catches ``combatant``."""
    max_hp = combatant.max_hp
    status_mod = STATUS_BONUS.get(combatant.status_code or "", 1.0)
    a = (3 * max_hp - 2 * combatant.current_hp) * catch_rate * ball_bonus * status_mod / (3 * max_hp)
    return max(1, min(100, math.floor(a)))


def attempt_capture(rng: random.Random, combatant: Combatant, catch_rate: int, ball_bonus: float) -> CaptureResult:
    chance = capture_chance(combatant, catch_rate, ball_bonus)
    if ball_bonus >= MASTER_BALL_BONUS:
        return CaptureResult(True, 100)
    return CaptureResult(rng.random() * 100 <= chance, chance)


def escape_chance(player_speed: int, opponent_speed: int, turn: int) -> float:
    """``player_speed*32 / ((opponent_speed/4) % 256) + 30*turn``.

    A zero divisor (opponent speed a multiple of 1024) means escape always works.
    """
    divisor = (opponent_speed / 4) % 256
    if divisor == 0:
        return float("inf")
    return player_speed * 32 / divisor + 30 * turn


def flee_success(rng: random.Random, player_speed: int, opponent_speed: int, turn: int) -> bool:
    return rng.random() * 256 < escape_chance(player_speed, opponent_speed, turn)

__all__ = ["attempt_capture","capture_chance","escape_chance","flee_success","CaptureResult","STATUS_BONUS"]
