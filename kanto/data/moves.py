"""Runtime loader for move data (Gen I subset).

Moves live in assets/moves/moves.json keyed by their numeric id. Each entry
is parsed into an immutable ``Move`` with typed effect variants.
"""
from __future__ import annotations
import json
from functools import lru_cache
from typing import Any, Dict, Iterable, List

from kanto.core.errors import DataLoadError, InvariantViolation
from kanto.core.logging import logger
from kanto.core.paths import MOVES
from kanto.battle.models import (
    Move, MoveEffect, StatusEffect, VolatileEffect, StatChange, StatStageEffect, HealEffect,
    DrainEffect, RecoilEffect, LeechSeedEffect, TrapEffect, STRUGGLE, STRUGGLE_ID,
    STAGE_STATS, VOLATILE_KINDS, normalize_status_code,
)

_MOVES_FILE = MOVES / "moves.json"

class MoveNotFound(InvariantViolation):
    pass


def parse_effect(raw: Dict[str, Any], *, move_name: str = "?") -> MoveEffect:
    kind = raw.get("kind")
    chance = raw.get("chance")
    if kind == "status":
        return StatusEffect(normalize_status_code(raw["status"]), chance)
    if kind == "volatile":
        vol = raw["volatile"]
        if vol not in VOLATILE_KINDS:
            raise InvariantViolation(f"{move_name}: unknown volatile {vol!r}")
        return VolatileEffect(vol, raw.get("turns"), chance)
    if kind == "stat_stage":
        changes = []
        for c in raw["changes"]:
            if c["stat"] not in STAGE_STATS:
                raise InvariantViolation(f"{move_name}: unknown stat {c['stat']!r}")
            changes.append(StatChange(c["stat"], int(c["delta"])))
        target = raw.get("target")
        if target not in (None, "self", "opponent"):
            raise InvariantViolation(f"{move_name}: bad stat target {target!r}")
        return StatStageEffect(tuple(changes), target, chance)
    if kind == "heal":
        return HealEffect(int(raw.get("percent", 50)), chance)
    if kind == "drain":
        return DrainEffect(int(raw.get("percent", 50)), chance)
    if kind == "recoil":
        return RecoilEffect(int(raw.get("percent", 25)), chance)
    if kind == "leech_seed":
        return LeechSeedEffect(chance)
    if kind == "trap":
        return TrapEffect(raw.get("turns"), chance)
    raise InvariantViolation(f"{move_name}: unknown effect kind {kind!r}")


def parse_move(raw: Dict[str, Any]) -> Move:
    name = raw.get("name", "?")
    effects = tuple(parse_effect(e, move_name=name) for e in raw.get("effects", []))
    for e in effects:
        if isinstance(e, StatStageEffect) and e.target is None:
            logger.warn("AmbiguousStatTarget", move=name, id=raw.get("id"))
    return Move(
        id=int(raw["id"]),
        name=name,
        type=str(raw["type"]).lower(),
        category=str(raw["category"]).lower(),
        power=int(raw.get("power") or 0),
        accuracy=int(raw.get("accuracy") or 0),
        max_pp=int(raw.get("pp") or 1),
        priority=int(raw.get("priority", 0)),
        effects=effects,
    )


@lru_cache(maxsize=None)
def _raw_moves() -> Dict[int, Dict[str, Any]]:
    if not _MOVES_FILE.exists():
        raise DataLoadError(str(_MOVES_FILE), "file missing")
    try:
        entries: List[Dict[str, Any]] = json.loads(_MOVES_FILE.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise DataLoadError(str(_MOVES_FILE), str(e)) from e
    return {int(m["id"]): m for m in entries}


@lru_cache(maxsize=None)
def get_move(move_id: int) -> Move:
    if int(move_id) == STRUGGLE_ID:
        return STRUGGLE
    raw = _raw_moves().get(int(move_id))
    if raw is None:
        raise MoveNotFound(f"Move id {move_id} not found")
    try:
        return parse_move(raw)
    except (KeyError, TypeError, ValueError) as e:
        raise DataLoadError(str(_MOVES_FILE), f"malformed move {move_id} ({e!r})") from e


def all_move_ids() -> Iterable[int]:
    return tuple(sorted(_raw_moves()))


def find_move(name: str) -> Move:
    name_lower = name.lower()
    for mid, raw in _raw_moves().items():
        if raw.get("name", "").lower() == name_lower:
            return get_move(mid)
    raise MoveNotFound(f"Move not found: {name}")

__all__ = ["get_move","find_move","all_move_ids","parse_move","parse_effect","MoveNotFound"]
