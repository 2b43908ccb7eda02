"""Trainer roster loader.

Rewards are derived from the party: ``floor(avg_level * 20 * class_multiplier)``.
"""
from __future__ import annotations
import json
import math
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Dict, Optional, Tuple

from kanto.core.errors import DataLoadError, InvariantViolation
from kanto.core.paths import TRAINERS
from kanto.battle.models import BattleKind

_TRAINERS_FILE = TRAINERS / "trainers.json"
DEFAULT_REWARD = 2000

TRAINER_CLASS_MULTIPLIERS: Dict[str, float] = {
    "Bug Catcher": 0.5,
    "Youngster": 0.6,
    "Lass": 0.6,
    "Camper": 0.7,
    "Picnicker": 0.7,
    "Fisherman": 0.8,
    "Swimmer": 0.8,
    "Jr. Trainer": 0.8,
    "Hiker": 0.9,
    "Bird Keeper": 0.9,
    "Sailor": 0.9,
    "Engineer": 1.0,
    "Super Nerd": 1.0,
    "Rocket": 1.0,
    "Scientist": 1.1,
    "Channeler": 1.1,
    "Juggler": 1.1,
    "Beauty": 1.2,
    "Psychic": 1.2,
    "Tamer": 1.2,
    "Black Belt": 1.3,
    "PokeManiac": 1.3,
    "Gambler": 1.5,
    "Ace Trainer": 1.5,
    "Gentleman": 1.8,
    "Rich Boy": 2.0,
    "Gym Leader": 2.5,
    "Elite Four": 3.0,
    "Champion": 4.0,
}

_CLASS_KINDS = {
    "Gym Leader": BattleKind.GYM,
    "Elite Four": BattleKind.ELITE,
    "Champion": BattleKind.CHAMPION,
}

class TrainerNotFound(InvariantViolation):
    pass


@dataclass(frozen=True)
class TrainerMember:
    species_id: int
    level: int


@dataclass(frozen=True)
class Trainer:
    id: int
    name: str
    trainer_class: str
    party: Tuple[TrainerMember, ...]
    before_text: str = ""
    after_text: str = ""
    badge: Optional[str] = None

    @property
    def kind(self) -> BattleKind:
        return _CLASS_KINDS.get(self.trainer_class, BattleKind.TRAINER)

    @property
    def display_name(self) -> str:
        return f"{self.trainer_class} {self.name}"

    @property
    def reward(self) -> int:
        return calc_reward(self.party, self.trainer_class)


def calc_reward(party: Tuple[TrainerMember, ...], trainer_class: str) -> int:
    if not party:
        return DEFAULT_REWARD
    avg_level = sum(m.level for m in party) / len(party)
    return math.floor(avg_level * 20 * TRAINER_CLASS_MULTIPLIERS.get(trainer_class, 1.0))


@lru_cache(maxsize=None)
def _raw_trainers() -> Dict[int, Dict[str, Any]]:
    if not _TRAINERS_FILE.exists():
        raise DataLoadError(str(_TRAINERS_FILE), "file missing")
    try:
        entries = json.loads(_TRAINERS_FILE.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise DataLoadError(str(_TRAINERS_FILE), str(e)) from e
    return {int(t["id"]): t for t in entries}


@lru_cache(maxsize=None)
def get_trainer(trainer_id: int) -> Trainer:
    raw = _raw_trainers().get(int(trainer_id))
    if raw is None:
        raise TrainerNotFound(f"Trainer id {trainer_id} not found")
    try:
        party = tuple(TrainerMember(int(m["species"]), int(m["level"])) for m in raw["party"])
    except (KeyError, TypeError, ValueError) as e:
        raise DataLoadError(str(_TRAINERS_FILE), f"malformed trainer {trainer_id} ({e!r})") from e
    if not party or len(party) > 6:
        raise InvariantViolation(f"Trainer {trainer_id} has {len(party)} party members")
    return Trainer(
        id=int(raw["id"]),
        name=raw["name"],
        trainer_class=raw["class"],
        party=party,
        before_text=raw.get("before", ""),
        after_text=raw.get("after", ""),
        badge=raw.get("badge"),
    )


def all_trainer_ids() -> Tuple[int, ...]:
    return tuple(sorted(_raw_trainers()))

__all__ = ["Trainer","TrainerMember","TrainerNotFound","get_trainer","all_trainer_ids","calc_reward",
           "TRAINER_CLASS_MULTIPLIERS","DEFAULT_REWARD"]
