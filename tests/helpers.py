"""Shared builders for battle tests."""
import random

from kanto.battle.models import Combatant, Move, MoveSlot, StatBlock
from kanto.data.moves import get_move


class ScriptedRng(random.Random):
    """``random()`` returns the scripted values in order, then falls back to the seed.

    ``randint``/``choice`` keep using the seeded generator so scripts only have
    to list the float rolls.
    """

    def __init__(self, values=(), seed=0):
        super().__init__(seed)
        self.values = list(values)

    def random(self):
        if self.values:
            return self.values.pop(0)
        return super().random()

    # random.Random routes randint/choice through random() for subclasses that
    # override random() alone; defining getrandbits keeps them on the bit stream.
    def getrandbits(self, k):
        return super().getrandbits(k)


def make_combatant(name="Testmon", *, species_id=129, types=("normal",), level=5, hp=20,
                   attack=10, defense=10, sp_attack=10, sp_defense=10, speed=10,
                   moves=(), current_hp=None, status=None):
    stats = StatBlock(hp, attack, defense, sp_attack, sp_defense, speed)
    slots = tuple(MoveSlot.fresh(m if isinstance(m, Move) else get_move(m)) for m in moves)
    return Combatant(
        species_id=species_id,
        name=name,
        level=level,
        types=tuple(types),
        current_hp=hp if current_hp is None else current_hp,
        stats=stats,
        ivs=StatBlock(),
        evs=StatBlock(),
        moves=slots,
        status=status,
    )
