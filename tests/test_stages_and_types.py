import pytest
from fractions import Fraction

from kanto.battle.stages import apply_stage_delta, effective_stat, stage_multiplier, MAX_STAGE, MIN_STAGE
from kanto.battle.typechart import get_effectiveness, effectiveness_message
from kanto.core.errors import InvariantViolation
from helpers import make_combatant


def test_multiplier_table_is_monotonic_and_neutral_at_zero():
    values = [stage_multiplier(s) for s in range(MIN_STAGE, MAX_STAGE + 1)]
    assert values == sorted(values)
    assert len(set(values)) == len(values)
    assert stage_multiplier(0) == 1
    assert stage_multiplier(-6) == Fraction(1, 4)
    assert stage_multiplier(6) == 4


def test_effective_stat_floors():
    assert effective_stat(100, 0) == 100
    assert effective_stat(100, -1) == 66
    assert effective_stat(55, 1) == 82


def test_stage_messages_and_cap():
    c = make_combatant("Pidgey")
    res = apply_stage_delta(c, "attack", 2)
    assert res.applied and res.message == "Pidgey's Attack rose sharply!"
    c = res.combatant
    for _ in range(3):
        c = apply_stage_delta(c, "attack", 2).combatant
    assert c.stages.attack == 6
    capped = apply_stage_delta(c, "attack", 1)
    assert not capped.applied
    assert capped.message == "Pidgey's Attack won't go any higher!"
    assert capped.combatant.stages.attack == 6


def test_stage_drop_clamps_to_minimum():
    c = make_combatant("Onix")
    res = apply_stage_delta(c, "defense", -8)
    assert res.combatant.stages.defense == -6
    assert res.message == "Onix's Defense severely fell!"
    again = apply_stage_delta(res.combatant, "defense", -1)
    assert again.message == "Onix's Defense won't go any lower!"


def test_out_of_range_stage_is_rejected():
    c = make_combatant()
    with pytest.raises(InvariantViolation):
        c.stages.with_stage("speed", 7)


def test_dual_type_effectiveness_multiplies():
    assert get_effectiveness("water", ("rock", "ground")) == 4
    assert get_effectiveness("Grass", ["Water"]) == 2
    assert get_effectiveness("electric", ("ground",)) == 0
    assert get_effectiveness("fire", ("water", "rock")) == 0.25
    assert get_effectiveness("normal", ("water",)) == 1


def test_effectiveness_messages():
    assert effectiveness_message(0) == "It doesn't affect the target..."
    assert effectiveness_message(4) == "It's super effective!"
    assert effectiveness_message(0.5) == "It's not very effective..."
    assert effectiveness_message(1) is None
