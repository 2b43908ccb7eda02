"""Smoke validator for assets/moves/moves.json.

Runs each move once in a fixed 1v1 and reports whether something observable
happened (damage, status, volatile, stat stage, HP change on the user) and
which stat-stage effects lack an explicit ``target`` tag, together with the
side the engine's inference picks for them.

Outputs a concise console summary and a JSON report under scripts/reports/.
"""
from __future__ import annotations
import json
import random
from typing import Any, Dict, List, Tuple

from kanto.battle.effects import execute_move, stat_effect_targets_self
from kanto.battle.factory import combatant_from_species
from kanto.battle.models import Move, StatBlock, StatStageEffect
from kanto.core.paths import REPORTS
from kanto.data.moves import all_move_ids, get_move

REPORT_PATH = REPORTS / "move_smoke_report.json"

# Normal-type attacker against a Water target: nothing in the table is immune
ATTACKER_SPECIES = 143
DEFENDER_SPECIES = 7
LEVEL = 30


def untagged_stat_effects(move: Move) -> List[Dict[str, Any]]:
    out = []
    for effect in move.effects:
        if isinstance(effect, StatStageEffect) and effect.target is None:
            side = stat_effect_targets_self(effect, move)
            out.append({
                "changes": [[c.stat, c.delta] for c in effect.changes],
                "inferred": "split" if side is None else ("self" if side else "opponent"),
            })
    return out


def simulate_move(move: Move, seed: int = 7) -> Tuple[bool, Dict[str, Any]]:
    rng = random.Random(seed)
    ivs = StatBlock(15, 15, 15, 15, 15, 15)
    attacker = combatant_from_species(ATTACKER_SPECIES, LEVEL, ivs=ivs, move_ids=[])
    defender = combatant_from_species(DEFENDER_SPECIES, LEVEL, ivs=ivs, move_ids=[])
    attacker = attacker.take_damage(attacker.max_hp // 2)
    res = execute_move(attacker, defender, move, rng)
    observed = {
        "damage_dealt": res.damage_dealt,
        "user_hp_changed": res.attacker.current_hp != attacker.current_hp,
        "status_changed": res.defender.status != defender.status,
        "volatile_changed": res.defender.volatiles != defender.volatiles or res.attacker.volatiles != attacker.volatiles,
        "stage_changed": res.defender.stages != defender.stages or res.attacker.stages != attacker.stages,
    }
    success = res.missed or any(observed.values()) or "But it failed!" in res.messages
    reasons = [] if success else ["nothing observable"]
    untagged = untagged_stat_effects(move)
    if untagged:
        reasons.append("untagged stat target")
    return success and not untagged, {
        "id": move.id,
        "name": move.name,
        "missed": res.missed,
        **observed,
        "untagged": untagged,
        "log_tail": res.messages[-4:],
        "success": success and not untagged,
        "reasons": reasons,
    }


def main():
    results: List[Dict[str, Any]] = []
    ok = 0
    for move_id in all_move_ids():
        success, info = simulate_move(get_move(move_id))
        results.append(info)
        ok += success
    REPORTS.mkdir(parents=True, exist_ok=True)
    REPORT_PATH.write_text(json.dumps({
        "total": len(results),
        "ok": ok,
        "fail": len(results) - ok,
        "results": results,
    }, indent=2))
    print(f"Move smoke complete: {ok}/{len(results)} OK, {len(results) - ok} need review. Report: {REPORT_PATH}")
    for r in results:
        if not r["success"]:
            print(f"- {r['id']} {r['name']}: {', '.join(r['reasons'])}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
