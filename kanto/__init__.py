"""Kanto: a Gen-1 style monster battle engine.

The engine resolves one turn at a time against immutable snapshots:

    from kanto.battle.engine import BattleEngine
    from kanto.battle.models import BattleKind, UseMove

    engine = BattleEngine()
    snap = engine.start_battle(player_party, opponent_party, BattleKind.WILD)
    result = engine.resolve_turn(snap, UseMove(0))
"""
__version__ = "0.3.0"
