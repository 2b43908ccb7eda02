from __future__ import annotations
import argparse
import random
import time
from typing import List, Optional

from kanto.battle.ai import choose_move
from kanto.battle.engine import BattleEngine
from kanto.battle.factory import combatant_from_species, party_for_trainer
from kanto.battle.models import BattleKind, Outcome, TurnResult
from kanto.battle.render import console, print_battle
from kanto.core.errors import KantoError
from kanto.core.logging import logger
from kanto.data.trainers import get_trainer
from kanto.system.settings import Settings

MAX_TURNS = 200


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="kanto", description="Auto-play a Gen I style battle in the terminal")
    parser.add_argument("--species", type=int, action="append", help="Player party species id (repeatable)")
    parser.add_argument("--level", type=int, default=10, help="Player party level")
    parser.add_argument("--wild", type=int, default=129, help="Wild species id")
    parser.add_argument("--wild-level", type=int, default=8)
    parser.add_argument("--trainer", type=int, help="Battle this trainer id instead of a wild Pokemon")
    parser.add_argument("--seed", type=int, help="RNG seed for a reproducible battle")
    parser.add_argument("--fast", action="store_true", help="Skip message pacing")
    parser.add_argument("--debug", action="store_true", help="Verbose engine logging")
    return parser


def _play(engine: BattleEngine, snapshot, *, delay: float, window: int) -> TurnResult:
    result: Optional[TurnResult] = None
    for _ in range(MAX_TURNS):
        action = choose_move(snapshot.player, snapshot.opponent, engine.rng)
        result = engine.resolve_turn(snapshot, action)
        # Auto-play never forgets a move for a new one
        while result.outcome is Outcome.MOVE_LEARN_PENDING:
            result = engine.resolve_move_learn(result.snapshot, None)
        snapshot = result.snapshot
        for line in result.messages:
            console.print(line, markup=False)
            if delay:
                time.sleep(delay)
        if result.outcome.terminal:
            break
    print_battle(snapshot, window)
    return result


def run(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = Settings.load()
    if args.debug:
        settings.update(debug=True)
    settings.apply_logging()
    rng = random.Random(args.seed)
    engine = BattleEngine(rng, settings.data)
    try:
        party = [combatant_from_species(sid, args.level, rng) for sid in (args.species or [25])]
        if args.trainer is not None:
            trainer = get_trainer(args.trainer)
            snap = engine.start_battle(party, party_for_trainer(trainer, rng), trainer.kind,
                                       reward=trainer.reward, trainer_name=trainer.display_name,
                                       badge=trainer.badge)
            if trainer.before_text:
                console.print(f"[bold]{trainer.display_name}:[/bold] {trainer.before_text}")
        else:
            wild = combatant_from_species(args.wild, args.wild_level, rng)
            snap = engine.start_battle(party, [wild], BattleKind.WILD)
    except KantoError as e:
        logger.error("BattleSetupFailed", error=str(e))
        return 1
    print_battle(snap, settings.data.message_window, show_moves=True)
    delay = 0.0 if args.fast else settings.data.text_delay
    result = _play(engine, snap, delay=delay, window=settings.data.message_window)
    outcome = result.outcome if result else Outcome.CONTINUE
    if args.trainer is not None and outcome is Outcome.BATTLE_WON and trainer.after_text:
        console.print(f"[bold]{trainer.display_name}:[/bold] {trainer.after_text}")
    console.print(f"[bold]Result:[/bold] {outcome.value}")
    return 0


if __name__ == "__main__":
    raise SystemExit(run())
