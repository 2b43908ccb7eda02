import pytest

from kanto.battle.models import STRUGGLE, STRUGGLE_ID, StatStageEffect
from kanto.core.errors import DataLoadError, InvariantViolation
from kanto.data import loader
from kanto.data.items import ItemNotFound, all_items, get_item
from kanto.data.loader import SpeciesNotFound, find_by_name, get_species, normalize_growth_rate
from kanto.data.moves import MoveNotFound, find_move, get_move, parse_move
from kanto.data.trainers import all_trainer_ids, calc_reward, get_trainer, TrainerMember


def test_species_lookup():
    s = get_species(25)
    assert s.name == "Pikachu"
    assert s.types == ("electric",)
    assert s.base_stats.speed == 90
    assert s.catch_rate == 190
    assert find_by_name("magikarp").id == 129
    with pytest.raises(SpeciesNotFound):
        get_species(9999)


def test_learnset_windows():
    karp = get_species(129)
    assert karp.moves_up_to(14) == (150,)
    assert karp.moves_between(14, 15) == (33,)
    assert karp.moves_between(15, 20) == ()


def test_growth_rate_normalization():
    assert normalize_growth_rate("medium_slow") == "medium"
    assert normalize_growth_rate("fast") == "fast"
    assert normalize_growth_rate(None) == "medium"


def test_malformed_species_file(tmp_path, monkeypatch):
    (tmp_path / "900.json").write_text("{not json", encoding="utf-8")
    monkeypatch.setattr(loader, "SPECIES", tmp_path)
    loader.get_species.cache_clear()
    try:
        with pytest.raises(DataLoadError):
            loader.get_species(900)
    finally:
        loader.get_species.cache_clear()
        loader._species_path.cache_clear()


def test_moves_parse_effects():
    quick = get_move(98)
    assert quick.priority == 1
    leer = find_move("leer")
    assert isinstance(leer.effects[0], StatStageEffect)
    assert leer.effects[0].target == "opponent"
    assert get_move(STRUGGLE_ID) is STRUGGLE
    with pytest.raises(MoveNotFound):
        get_move(9999)


def test_untagged_stat_effect_is_inferred():
    raw = {"id": 900, "name": "Overheat", "type": "fire", "category": "special", "power": 130,
           "accuracy": 90, "pp": 5,
           "effects": [{"kind": "stat_stage", "changes": [{"stat": "sp_attack", "delta": -2}]}]}
    move = parse_move(raw)
    assert move.effects[0].target is None
    assert move.lowered_stats() == ()


def test_unknown_effect_kind_rejected():
    raw = {"id": 901, "name": "Oddity", "type": "normal", "category": "status",
           "effects": [{"kind": "teleport"}]}
    with pytest.raises(InvariantViolation):
        parse_move(raw)


def test_items():
    assert get_item(4).is_master_ball
    potion = get_item(5)
    assert potion.is_healing and potion.usable_in_battle
    assert not get_item(27).usable_in_battle
    with pytest.raises(ItemNotFound):
        get_item(999)


def test_trainers_and_rewards():
    brock = get_trainer(10)
    assert brock.display_name == "Gym Leader Brock"
    assert brock.kind.is_trainer
    assert brock.reward == calc_reward(brock.party, "Gym Leader")
    assert calc_reward((TrainerMember(16, 4), TrainerMember(19, 6)), "Unknown") == 100


def test_every_catalog_entry_loads():
    items = all_items()
    assert sum(1 for i in items.values() if i.is_ball) == 4
    for tid in all_trainer_ids():
        trainer = get_trainer(tid)
        assert 1 <= len(trainer.party) <= 6
        for member in trainer.party:
            assert get_species(member.species_id).id == member.species_id
