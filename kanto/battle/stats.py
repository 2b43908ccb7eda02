"""Stat derivation from base stats, IVs, EVs and level (Gen I formula)."""
from __future__ import annotations
import math
import random

from .models import StatBlock

IV_MAX = 15
EV_MAX = 65535


def derive_stat(stat: str, base: int, iv: int, ev: int, level: int) -> int:
    core = math.floor(((2 * base + iv + math.floor(ev / 4)) * level) / 100)
    if stat == "hp":
        return core + level + 10
    return core + 5


def derive_stats(base: StatBlock, ivs: StatBlock, evs: StatBlock, level: int) -> StatBlock:
    return StatBlock(**{
        k: derive_stat(k, base.get(k), ivs.get(k), evs.get(k), level) for k in StatBlock.FIELDS
    })


def random_ivs(rng: random.Random) -> StatBlock:
    return StatBlock(**{k: rng.randint(0, IV_MAX) for k in StatBlock.FIELDS})


def effort_gain(evs: StatBlock, defeated_base: StatBlock) -> StatBlock:
    """Add ``base // 10`` of the defeated species to every EV, capped at 65535."""
    return StatBlock(**{
        k: min(EV_MAX, evs.get(k) + defeated_base.get(k) // 10) for k in StatBlock.FIELDS
    })

__all__ = ["derive_stat","derive_stats","random_ivs","effort_gain","IV_MAX","EV_MAX"]
