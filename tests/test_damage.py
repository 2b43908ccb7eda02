import math
import random
from dataclasses import replace

from kanto.battle.damage import base_damage, compute_damage, roll_accuracy
from kanto.battle.models import (
    Burned, Move, StatChange, StatStageEffect, StatStages, StatusEffect, STRUGGLE,
)
from kanto.battle.effects import execute_move
from kanto.data.moves import get_move
from helpers import ScriptedRng, make_combatant

TACKLE = Move(1, "Tackle", "normal", "physical", power=40, accuracy=100)


def _pair():
    # Water attacker using a Normal move: neutral, no STAB
    attacker = make_combatant("Attacker", types=("water",), level=5, hp=20)
    defender = make_combatant("Defender", types=("water",), level=5, hp=20)
    return attacker, defender


def test_neutral_tackle_stays_within_formula_bounds():
    attacker, defender = _pair()
    base = base_damage(5, 40, 10, 10)
    assert base == 5
    low, high = math.floor(base * 0.85), math.ceil(base * 1.5)
    rng = random.Random(42)
    for _ in range(300):
        dmg = compute_damage(attacker, defender, TACKLE, rng).damage
        assert low <= dmg <= high


def test_scripted_rolls_hit_the_extremes():
    attacker, defender = _pair()
    low = compute_damage(attacker, defender, TACKLE, ScriptedRng([0.5, 0.0]))
    assert low.damage == 4 and not low.is_critical
    high = compute_damage(attacker, defender, TACKLE, ScriptedRng([0.0, 0.9999]))
    assert high.is_critical
    assert high.damage == 7
    assert high.messages == ("A critical hit!",)


def test_damage_is_at_least_one():
    attacker = make_combatant(types=("water",), level=1, sp_attack=1)
    defender = make_combatant(types=("rock",), sp_defense=500)
    weak = Move(2, "Ember", "fire", "special", power=10)
    for seed in range(20):
        assert compute_damage(attacker, defender, weak, random.Random(seed)).damage >= 1


def test_immune_target_takes_zero_without_rolls():
    attacker = make_combatant(types=("electric",))
    defender = make_combatant(types=("ground",))
    shock = Move(3, "Thunder Shock", "electric", "special", power=40)
    rng = ScriptedRng([0.0, 0.0])
    res = compute_damage(attacker, defender, shock, rng)
    assert res.damage == 0
    assert res.tier == "immune"
    assert res.messages == ("It doesn't affect the target...",)
    assert rng.values == [0.0, 0.0]


def test_stab_and_super_effective_message():
    attacker = make_combatant(types=("water",), level=20, sp_attack=40)
    defender = make_combatant(types=("fire",), level=20, sp_defense=40)
    gun = Move(4, "Water Gun", "water", "special", power=40)
    res = compute_damage(attacker, defender, gun, ScriptedRng([0.5, 0.99999]))
    base = base_damage(20, 40, 40, 40)
    assert res.damage == math.floor(base * 1.5 * 2 * (0.85 + 0.99999 * 0.15))
    assert res.messages == ("It's super effective!",)


def test_accuracy_zero_never_misses():
    attacker, defender = _pair()
    swift = Move(5, "Swift", "normal", "special", power=60, accuracy=0)
    assert roll_accuracy(attacker, defender, swift, ScriptedRng([0.9999]))


def test_miss_skips_damage_and_effects():
    attacker, defender = _pair()
    inaccurate = Move(6, "Wild Swing", "normal", "physical", power=40, accuracy=50)
    res = execute_move(attacker, defender, inaccurate, ScriptedRng([0.9]))
    assert res.missed
    assert res.defender == defender
    assert res.messages == ("Attacker used Wild Swing!", "Attacker's attack missed!")


def test_struggle_recoil_is_quarter_max_hp():
    attacker = make_combatant("Pidgey", hp=41)
    defender = make_combatant("Rattata", hp=200)
    res = execute_move(attacker, defender, STRUGGLE, random.Random(3))
    assert res.attacker.current_hp == 41 - 41 // 4
    assert "Pidgey was hurt by recoil!" in res.messages
    assert res.damage_dealt >= 1


def test_drain_heals_half_of_damage():
    attacker = make_combatant("Oddish", types=("grass",), hp=100, current_hp=10, sp_attack=50)
    defender = make_combatant("Squirtle", types=("water",), hp=200)
    absorb = get_move(71)
    res = execute_move(attacker, defender, absorb, random.Random(9))
    assert res.attacker.current_hp == 10 + res.damage_dealt // 2
    assert "Oddish absorbed some HP!" in res.messages


def test_leer_lowers_opponent_defense():
    attacker = make_combatant("Ekans")
    defender = make_combatant("Pidgey")
    res = execute_move(attacker, defender, get_move(43), ScriptedRng([0.0]))
    assert res.defender.stages.defense == -1
    assert res.attacker.stages.defense == 0
    assert res.messages == ("Ekans used Leer!", "Pidgey's Defense fell!")


def test_thunder_wave_paralyzes():
    attacker = make_combatant("Pikachu", types=("electric",))
    defender = make_combatant("Pidgey", types=("normal", "flying"))
    res = execute_move(attacker, defender, get_move(86), ScriptedRng([0.0]))
    assert res.defender.status_code == "par"
    assert res.messages[-1] == "Pidgey was paralyzed! It may be unable to move!"


def test_leech_seed_message():
    attacker = make_combatant("Bulbasaur", types=("grass", "poison"))
    defender = make_combatant("Pidgey")
    res = execute_move(attacker, defender, get_move(73), ScriptedRng([0.0]))
    assert res.defender.volatiles.leech_seed
    assert res.messages[-1] == "Bulbasaur planted a seed on Pidgey!"


def test_failed_secondary_status_on_an_attack_is_reported():
    attacker = make_combatant("Vulpix", types=("fire",))
    defender = make_combatant("Rattata", hp=200, status=Burned())
    ember = Move(8, "Sure Ember", "fire", "special", power=40, accuracy=0,
                 effects=(StatusEffect("brn", chance=100),))
    res = execute_move(attacker, defender, ember, random.Random(4))
    assert res.damage_dealt >= 1
    assert res.messages[-1] == "But it failed!"


def test_capped_secondary_drop_on_an_attack_is_reported():
    attacker = make_combatant("Krabby", types=("water",))
    defender = replace(make_combatant("Rattata", hp=200), stages=StatStages(attack=-6))
    growl_hit = Move(9, "Growl Hit", "normal", "physical", power=40, accuracy=0,
                     effects=(StatStageEffect((StatChange("attack", -1),), target="opponent", chance=100),))
    res = execute_move(attacker, defender, growl_hit, random.Random(4))
    assert res.defender.stages.attack == -6
    assert res.messages[-1] == "Rattata's Attack won't go any lower!"
