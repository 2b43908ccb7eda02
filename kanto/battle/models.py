"""Immutable battle data model.

Everything here is a frozen dataclass. Engine steps never mutate a value;
they build a new one with ``dataclasses.replace`` and hand it back.
"""
from __future__ import annotations
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import ClassVar, Optional, Tuple, Union

from kanto.core.errors import InvariantViolation

MIN_LEVEL = 1
MAX_LEVEL = 100
MAX_MOVES = 4

# Stats that carry a stage counter, in display order
STAGE_STATS: Tuple[str, ...] = ("attack", "defense", "sp_attack", "sp_defense", "speed", "accuracy", "evasion")
STAT_DISPLAY_NAMES = {
    "hp": "HP",
    "attack": "Attack",
    "defense": "Defense",
    "sp_attack": "Special Attack",
    "sp_defense": "Special Defense",
    "speed": "Speed",
    "accuracy": "Accuracy",
    "evasion": "Evasion",
}

# ---------------------------------------------------------------------------
# Stats & stages
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class StatBlock:
    """Six stat values; used for base stats, IVs, EVs and derived stats alike."""
    hp: int = 0
    attack: int = 0
    defense: int = 0
    sp_attack: int = 0
    sp_defense: int = 0
    speed: int = 0

    FIELDS: ClassVar[Tuple[str, ...]] = ("hp", "attack", "defense", "sp_attack", "sp_defense", "speed")

    def get(self, stat: str) -> int:
        return getattr(self, stat)


@dataclass(frozen=True)
class StatStages:
    attack: int = 0
    defense: int = 0
    sp_attack: int = 0
    sp_defense: int = 0
    speed: int = 0
    accuracy: int = 0
    evasion: int = 0

    def get(self, stat: str) -> int:
        if stat not in STAGE_STATS:
            raise InvariantViolation(f"Unknown stage stat: {stat}")
        return getattr(self, stat)

    def with_stage(self, stat: str, value: int) -> "StatStages":
        if stat not in STAGE_STATS:
            raise InvariantViolation(f"Unknown stage stat: {stat}")
        if not -6 <= value <= 6:
            raise InvariantViolation(f"Stage {value} for {stat} outside [-6, 6]")
        return replace(self, **{stat: value})

# ---------------------------------------------------------------------------
# Primary status (one at a time; None means healthy)
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class Poisoned:
    code: ClassVar[str] = "psn"

@dataclass(frozen=True)
class BadlyPoisoned:
    stack: int = 1
    code: ClassVar[str] = "tox"

@dataclass(frozen=True)
class Burned:
    code: ClassVar[str] = "brn"

@dataclass(frozen=True)
class Paralyzed:
    code: ClassVar[str] = "par"

@dataclass(frozen=True)
class Asleep:
    turns_remaining: int
    code: ClassVar[str] = "slp"

@dataclass(frozen=True)
class Frozen:
    code: ClassVar[str] = "frz"

PrimaryStatus = Union[Poisoned, BadlyPoisoned, Burned, Paralyzed, Asleep, Frozen]
STATUS_CODES = ("psn", "tox", "brn", "par", "slp", "frz")

# Long-form aliases accepted by the data files
STATUS_ALIASES = {
    "poison": "psn", "poisoned": "psn",
    "toxic": "tox", "badly-poisoned": "tox", "bad-poison": "tox",
    "burn": "brn", "burned": "brn",
    "paralysis": "par", "paralyzed": "par",
    "sleep": "slp", "asleep": "slp",
    "freeze": "frz", "frozen": "frz",
}


def normalize_status_code(raw: str) -> str:
    code = STATUS_ALIASES.get(raw.lower(), raw.lower())
    if code not in STATUS_CODES:
        raise InvariantViolation(f"Unknown primary status: {raw}")
    return code

# ---------------------------------------------------------------------------
# Volatile statuses (battle scoped)
# ---------------------------------------------------------------------------
VOLATILE_KINDS = ("confusion", "flinch", "trap", "leech_seed")

@dataclass(frozen=True)
class Volatiles:
    confusion: int = 0       # turns left
    flinch: bool = False
    trapped: int = 0         # turns left
    leech_seed: bool = False

    def is_active(self, kind: str) -> bool:
        if kind == "confusion":
            return self.confusion > 0
        if kind == "flinch":
            return self.flinch
        if kind == "trap":
            return self.trapped > 0
        if kind == "leech_seed":
            return self.leech_seed
        raise InvariantViolation(f"Unknown volatile status: {kind}")

# ---------------------------------------------------------------------------
# Move effects (tagged variants, each with its own chance; None = always)
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class StatusEffect:
    status: str
    chance: Optional[int] = None
    kind: ClassVar[str] = "status"

@dataclass(frozen=True)
class VolatileEffect:
    volatile: str
    turns: Optional[int] = None
    chance: Optional[int] = None
    kind: ClassVar[str] = "volatile"

@dataclass(frozen=True)
class StatChange:
    stat: str
    delta: int

@dataclass(frozen=True)
class StatStageEffect:
    changes: Tuple[StatChange, ...]
    target: Optional[str] = None     # "self" | "opponent"; None = infer
    chance: Optional[int] = None
    kind: ClassVar[str] = "stat_stage"

@dataclass(frozen=True)
class HealEffect:
    percent: int = 50
    chance: Optional[int] = None
    kind: ClassVar[str] = "heal"

@dataclass(frozen=True)
class DrainEffect:
    percent: int = 50
    chance: Optional[int] = None
    kind: ClassVar[str] = "drain"

@dataclass(frozen=True)
class RecoilEffect:
    percent: int = 25
    chance: Optional[int] = None
    kind: ClassVar[str] = "recoil"

@dataclass(frozen=True)
class LeechSeedEffect:
    chance: Optional[int] = None
    kind: ClassVar[str] = "leech_seed"

@dataclass(frozen=True)
class TrapEffect:
    turns: Optional[int] = None
    chance: Optional[int] = None
    kind: ClassVar[str] = "trap"

MoveEffect = Union[StatusEffect, VolatileEffect, StatStageEffect, HealEffect,
                   DrainEffect, RecoilEffect, LeechSeedEffect, TrapEffect]

# ---------------------------------------------------------------------------
# Moves
# ---------------------------------------------------------------------------
CATEGORIES = ("physical", "special", "status")

@dataclass(frozen=True)
class Move:
    id: int
    name: str
    type: str
    category: str  # physical | special | status
    power: int = 0
    accuracy: int = 100  # 0 => never misses
    max_pp: int = 10
    priority: int = 0
    effects: Tuple[MoveEffect, ...] = ()

    def __post_init__(self):
        if self.category not in CATEGORIES:
            raise InvariantViolation(f"Move {self.name}: unknown category {self.category}")

    @property
    def is_damaging(self) -> bool:
        return self.category != "status" and self.power > 0

    @property
    def inflicts_status(self) -> bool:
        return any(isinstance(e, StatusEffect) for e in self.effects)

    def lowered_stats(self) -> Tuple[str, ...]:
        """Stats this move lowers on its target (explicit or inferred opponent side)."""
        out = []
        for e in self.effects:
            if not isinstance(e, StatStageEffect) or e.target == "self":
                continue
            if e.target is None and (e.chance is None or e.chance >= 100) and self.is_damaging \
                    and all(c.delta < 0 for c in e.changes):
                continue  # untagged self-debuff on an attack
            out.extend(c.stat for c in e.changes if c.delta < 0)
        return tuple(out)


STRUGGLE_ID = 165
STRUGGLE_SLOT = -1     # UseMove slot meaning "no PP left anywhere"
STRUGGLE = Move(
    id=STRUGGLE_ID, name="Struggle", type="normal", category="physical",
    power=50, accuracy=0, max_pp=1, priority=0,
    effects=(RecoilEffect(percent=25),),
)


@dataclass(frozen=True)
class MoveSlot:
    move: Move
    pp: int

    @classmethod
    def fresh(cls, move: Move) -> "MoveSlot":
        return cls(move, move.max_pp)

    def spend(self) -> "MoveSlot":
        return replace(self, pp=max(0, self.pp - 1))

    def restored(self) -> "MoveSlot":
        return replace(self, pp=self.move.max_pp)

# ---------------------------------------------------------------------------
# Combatant
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class Combatant:
    species_id: int
    name: str
    level: int
    types: Tuple[str, ...]
    current_hp: int
    stats: StatBlock
    ivs: StatBlock = field(default_factory=StatBlock)
    evs: StatBlock = field(default_factory=StatBlock)
    moves: Tuple[MoveSlot, ...] = ()
    status: Optional[PrimaryStatus] = None
    volatiles: Volatiles = field(default_factory=Volatiles)
    stages: StatStages = field(default_factory=StatStages)
    exp: int = 0

    def __post_init__(self):
        if not MIN_LEVEL <= self.level <= MAX_LEVEL:
            raise InvariantViolation(f"{self.name}: level {self.level} outside [{MIN_LEVEL}, {MAX_LEVEL}]")
        if self.stats.hp <= 0:
            raise InvariantViolation(f"{self.name}: max HP must be positive")
        if not 0 <= self.current_hp <= self.stats.hp:
            raise InvariantViolation(f"{self.name}: HP {self.current_hp} outside [0, {self.stats.hp}]")
        if len(self.moves) > MAX_MOVES:
            raise InvariantViolation(f"{self.name}: knows {len(self.moves)} moves (max {MAX_MOVES})")

    @property
    def max_hp(self) -> int:
        return self.stats.hp

    @property
    def fainted(self) -> bool:
        return self.current_hp == 0

    @property
    def status_code(self) -> Optional[str]:
        return self.status.code if self.status is not None else None

    @property
    def has_pp(self) -> bool:
        return any(slot.pp > 0 for slot in self.moves)

    def with_hp(self, hp: int) -> "Combatant":
        return replace(self, current_hp=hp)

    def take_damage(self, amount: int) -> "Combatant":
        return replace(self, current_hp=max(0, self.current_hp - max(0, amount)))

    def heal(self, amount: int) -> "Combatant":
        return replace(self, current_hp=min(self.max_hp, self.current_hp + max(0, amount)))

    def with_slot(self, index: int, slot: MoveSlot) -> "Combatant":
        moves = list(self.moves)
        moves[index] = slot
        return replace(self, moves=tuple(moves))

    def battle_reset(self) -> "Combatant":
        """Drop stages and volatiles; primary status is kept."""
        return replace(self, stages=StatStages(), volatiles=Volatiles())

    def fully_healed(self) -> "Combatant":
        return replace(
            self,
            current_hp=self.max_hp,
            status=None,
            volatiles=Volatiles(),
            stages=StatStages(),
            moves=tuple(s.restored() for s in self.moves),
        )

# ---------------------------------------------------------------------------
# Battle
# ---------------------------------------------------------------------------
class BattleKind(str, Enum):
    WILD = "wild"
    TRAINER = "trainer"
    GYM = "gym"
    ELITE = "elite"
    CHAMPION = "champion"

    @property
    def is_trainer(self) -> bool:
        return self is not BattleKind.WILD


class Side(str, Enum):
    PLAYER = "player"
    OPPONENT = "opponent"


class Outcome(str, Enum):
    CONTINUE = "CONTINUE"
    FAINTED = "FAINTED"
    BATTLE_WON = "BATTLE_WON"
    BATTLE_LOST = "BATTLE_LOST"
    FLED = "FLED"
    CAUGHT = "CAUGHT"
    MOVE_LEARN_PENDING = "MOVE_LEARN_PENDING"

    @property
    def terminal(self) -> bool:
        return self in (Outcome.BATTLE_WON, Outcome.BATTLE_LOST, Outcome.FLED, Outcome.CAUGHT)


@dataclass(frozen=True)
class UseMove:
    slot: int

@dataclass(frozen=True)
class UseItem:
    item_id: int

@dataclass(frozen=True)
class Switch:
    party_index: int

@dataclass(frozen=True)
class Flee:
    pass

Action = Union[UseMove, UseItem, Switch, Flee]


@dataclass(frozen=True)
class PendingMoveLearn:
    party_index: int
    move: Move


@dataclass(frozen=True)
class BattleSnapshot:
    player_party: Tuple[Combatant, ...]
    opponent_party: Tuple[Combatant, ...]
    kind: BattleKind
    can_escape: bool
    player_active: int = 0
    opponent_active: int = 0
    turn: int = 1
    log: Tuple[str, ...] = ()
    reward: int = 0
    money: int = 0
    exp_bonus: float = 1.0
    trainer_name: Optional[str] = None
    badge: Optional[str] = None
    badges: Tuple[str, ...] = ()
    pending_learns: Tuple[PendingMoveLearn, ...] = ()
    deferred_outcome: Optional[Outcome] = None
    deferred_side: Optional[Side] = None
    finished: bool = False

    def __post_init__(self):
        if not self.player_party or not self.opponent_party:
            raise InvariantViolation("Both parties need at least one member")
        if not 0 <= self.player_active < len(self.player_party):
            raise InvariantViolation(f"Player active slot {self.player_active} out of range")
        if not 0 <= self.opponent_active < len(self.opponent_party):
            raise InvariantViolation(f"Opponent active slot {self.opponent_active} out of range")

    @property
    def player(self) -> Combatant:
        return self.player_party[self.player_active]

    @property
    def opponent(self) -> Combatant:
        return self.opponent_party[self.opponent_active]

    def active(self, side: Side) -> Combatant:
        return self.player if side is Side.PLAYER else self.opponent

    def recent(self, n: int = 6) -> Tuple[str, ...]:
        """Bounded tail of the log for display; the log itself is never trimmed."""
        return self.log[-n:] if n > 0 else ()

    def with_active(self, side: Side, combatant: Combatant) -> "BattleSnapshot":
        if side is Side.PLAYER:
            return self.with_member(side, self.player_active, combatant)
        return self.with_member(side, self.opponent_active, combatant)

    def with_member(self, side: Side, index: int, combatant: Combatant) -> "BattleSnapshot":
        if side is Side.PLAYER:
            party = list(self.player_party)
            party[index] = combatant
            return replace(self, player_party=tuple(party))
        party = list(self.opponent_party)
        party[index] = combatant
        return replace(self, opponent_party=tuple(party))

    def with_messages(self, messages) -> "BattleSnapshot":
        return replace(self, log=self.log + tuple(messages))


@dataclass(frozen=True)
class TurnResult:
    snapshot: BattleSnapshot
    messages: Tuple[str, ...]
    outcome: Outcome
    fainted_side: Optional[Side] = None
    caught: Optional[Combatant] = None

__all__ = [
    "MIN_LEVEL","MAX_LEVEL","MAX_MOVES","STAGE_STATS","STAT_DISPLAY_NAMES",
    "StatBlock","StatStages",
    "Poisoned","BadlyPoisoned","Burned","Paralyzed","Asleep","Frozen","PrimaryStatus",
    "STATUS_CODES","normalize_status_code",
    "VOLATILE_KINDS","Volatiles",
    "StatusEffect","VolatileEffect","StatChange","StatStageEffect","HealEffect","DrainEffect",
    "RecoilEffect","LeechSeedEffect","TrapEffect","MoveEffect",
    "Move","MoveSlot","STRUGGLE","STRUGGLE_ID","STRUGGLE_SLOT","Combatant",
    "BattleKind","Side","Outcome","UseMove","UseItem","Switch","Flee","Action",
    "PendingMoveLearn","BattleSnapshot","TurnResult",
]
