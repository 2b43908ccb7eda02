from kanto.battle.models import Move, StatChange, StatStageEffect
from kanto.data.moves import get_move
from scripts.validate_moves import simulate_move, untagged_stat_effects


def test_tackle_smoke_passes():
    ok, info = simulate_move(get_move(33))
    assert ok
    assert info["damage_dealt"] > 0


def test_untagged_effects_are_reported_with_inference():
    overheat = Move(900, "Overheat", "fire", "special", power=130, accuracy=90,
                    effects=(StatStageEffect((StatChange("sp_attack", -2),)),))
    assert untagged_stat_effects(overheat) == [{"changes": [["sp_attack", -2]], "inferred": "self"}]
    ok, info = simulate_move(overheat)
    assert not ok
    assert "untagged stat target" in info["reasons"]
