import random

from kanto.battle.experience import (
    apply_experience, award_experience, exp_gain, learn_move, required_exp_for_level,
)
from kanto.battle.factory import combatant_from_species
from kanto.battle.models import StatBlock
from kanto.data.loader import get_species
from kanto.data.moves import get_move

IVS = StatBlock(8, 8, 8, 8, 8, 8)


def test_growth_curves():
    assert required_exp_for_level(1) == 0
    assert required_exp_for_level(10, "fast") == 800
    assert required_exp_for_level(10, "medium") == 1000
    assert required_exp_for_level(10, "slow") == 1250


def test_exp_gain_formula_and_bonus():
    magikarp = get_species(129)
    assert exp_gain(magikarp, 7) == 20
    assert exp_gain(magikarp, 7, 1.5) == 30
    assert exp_gain(magikarp, 1) == 2


def test_level_up_recomputes_and_heals():
    p = combatant_from_species(25, 5, ivs=IVS)
    p = p.take_damage(5)
    res = apply_experience(p, required_exp_for_level(6) - p.exp)
    assert res.leveled and res.to_level == 6
    assert res.combatant.current_hp == res.combatant.max_hp
    assert res.combatant.max_hp > p.max_hp
    assert "Pikachu grew to Level 6!" in res.messages


def test_new_move_auto_learned_with_free_slot():
    karp = combatant_from_species(129, 14, ivs=IVS)
    assert [s.move.name for s in karp.moves] == ["Splash"]
    res = apply_experience(karp, required_exp_for_level(15, "slow") - karp.exp)
    assert res.to_level == 15
    assert [s.move.name for s in res.combatant.moves] == ["Splash", "Tackle"]
    assert "Magikarp learned Tackle!" in res.messages


def test_full_moveset_queues_move():
    karp = combatant_from_species(129, 14, ivs=IVS, move_ids=[150, 45, 43, 98])
    res = apply_experience(karp, required_exp_for_level(15, "slow") - karp.exp)
    assert [m.name for m in res.pending] == ["Tackle"]
    assert len(res.combatant.moves) == 4


def test_learn_move_forget_or_decline():
    karp = combatant_from_species(129, 14, ivs=IVS, move_ids=[150, 45, 43, 98])
    tackle = get_move(33)
    kept, msg = learn_move(karp, tackle, None)
    assert kept is karp
    assert msg == "Magikarp did not learn Tackle."
    learned, msg = learn_move(karp, tackle, 0)
    assert learned.moves[0].move.name == "Tackle"
    assert learned.moves[0].pp == tackle.max_pp
    assert msg == "Magikarp forgot Splash and learned Tackle!"


def test_award_experience_adds_effort_values():
    winner = combatant_from_species(25, 10, ivs=IVS)
    loser = combatant_from_species(74, 8, random.Random(1))
    res = award_experience(winner, loser)
    base = get_species(74).base_stats
    assert res.combatant.evs.attack == base.attack // 10
    assert res.messages[0] == f"Pikachu gained {exp_gain(get_species(74), 8)} EXP!"
