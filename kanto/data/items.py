"""Item data loader (Gen I subset)."""
from __future__ import annotations
import json
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Dict, Optional

from kanto.core.errors import DataLoadError, InvariantViolation
from kanto.core.paths import ITEMS

_ITEMS_FILE = ITEMS / "items.json"

class ItemNotFound(InvariantViolation):
    pass


@dataclass(frozen=True)
class Item:
    id: int
    name: str
    type: str                       # PokeBall | Potion | StatusHeal | Other | KeyItem ...
    description: str = ""
    price: int = 0
    effect: Dict[str, Any] = field(default_factory=dict, hash=False, compare=False)

    @property
    def effect_type(self) -> Optional[str]:
        return self.effect.get("type")

    @property
    def is_ball(self) -> bool:
        return self.type == "PokeBall"

    @property
    def is_master_ball(self) -> bool:
        return self.is_ball and float(self.effect.get("value", 1)) >= 255

    @property
    def ball_bonus(self) -> float:
        return float(self.effect.get("value", 1))

    @property
    def is_healing(self) -> bool:
        return self.type == "Potion" and self.effect_type in ("heal", "healFull")

    @property
    def usable_in_battle(self) -> bool:
        return self.is_ball or self.is_healing


@lru_cache(maxsize=None)
def _raw_items() -> Dict[int, Dict[str, Any]]:
    if not _ITEMS_FILE.exists():
        raise DataLoadError(str(_ITEMS_FILE), "file missing")
    try:
        entries = json.loads(_ITEMS_FILE.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise DataLoadError(str(_ITEMS_FILE), str(e)) from e
    return {int(i["id"]): i for i in entries}


@lru_cache(maxsize=None)
def get_item(item_id: int) -> Item:
    raw = _raw_items().get(int(item_id))
    if raw is None:
        raise ItemNotFound(f"Item id {item_id} not found")
    return Item(
        id=int(raw["id"]),
        name=raw["name"],
        type=raw["type"],
        description=raw.get("description", ""),
        price=int(raw.get("price", 0)),
        effect=dict(raw.get("effect") or {}),
    )


def all_items() -> Dict[int, Item]:
    return {i: get_item(i) for i in sorted(_raw_items())}

__all__ = ["Item","ItemNotFound","get_item","all_items"]
