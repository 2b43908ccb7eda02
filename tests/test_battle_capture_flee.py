import random

import pytest

from kanto.battle.capture import attempt_capture, capture_chance, escape_chance, flee_success
from kanto.battle.models import Asleep
from helpers import ScriptedRng, make_combatant


def test_capture_chance_full_hp_and_clamps():
    karp = make_combatant("Magikarp", hp=30)
    assert capture_chance(karp, 255, 1) == 85
    assert capture_chance(karp.with_hp(1), 255, 1) == 100
    assert capture_chance(karp, 3, 1) == 1


def test_status_raises_capture_chance():
    plain = make_combatant(hp=30)
    sleepy = make_combatant(hp=30, status=Asleep(3))
    assert capture_chance(sleepy, 45, 1) == 2 * capture_chance(plain, 45, 1)


def test_capture_roll():
    c = make_combatant(hp=30)
    assert attempt_capture(ScriptedRng([0.5]), c, 255, 1).success
    assert not attempt_capture(ScriptedRng([0.9]), c, 255, 1).success


def test_master_ball_always_catches():
    mewtwo = make_combatant("Mewtwo", hp=300)
    rng = random.Random(0)
    for _ in range(20):
        assert attempt_capture(rng, mewtwo, 3, 255).success


def test_escape_chance_formula():
    assert escape_chance(40, 40, 1) == 40 * 32 / 10 + 30
    # divisor keeps its fraction: 6/4 = 1.5, 3/4 = 0.75
    assert escape_chance(10, 6, 1) == pytest.approx(320 / 1.5 + 30)
    assert escape_chance(10, 3, 1) == pytest.approx(320 / 0.75 + 30)
    assert escape_chance(10, 1024, 1) == float("inf")


def test_flee_roll():
    # chance 158: succeeds below 158/256
    assert flee_success(ScriptedRng([0.5]), 40, 40, 1)
    assert not flee_success(ScriptedRng([0.7]), 40, 40, 1)


def test_slow_opponent_is_not_a_free_escape():
    # chance ~243.3 against a roll of 245.76
    assert not flee_success(ScriptedRng([0.96]), 10, 6, 1)
    assert flee_success(ScriptedRng([0.94]), 10, 6, 1)
    assert not flee_success(ScriptedRng([0.99]), 1, 3, 1)
