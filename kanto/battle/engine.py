"""Turn orchestration for 1v1 party battles.

``BattleEngine.resolve_turn`` takes a snapshot plus one action per side and
returns a new snapshot, the turn's messages and an outcome tag. The input
snapshot is never modified; all randomness comes from the engine's ``rng``.

Turn pipeline:
  validate -> order -> first action -> second action (skipped on a faint)
  -> end-of-turn ticks (leech seed, confusion, trap, status) -> faints.
Item use, switching and a failed escape hand the opponent a free action
before the end-of-turn ticks.
"""
from __future__ import annotations
from dataclasses import dataclass, field, replace
import random
from typing import Iterable, List, Optional, Sequence, Tuple

from .models import (
    Action, BattleKind, BattleSnapshot, Combatant, Flee, Move, Outcome, PendingMoveLearn,
    Side, Switch, TurnResult, UseItem, UseMove, STRUGGLE, STRUGGLE_SLOT,
)
from .ai import choose_move
from .capture import attempt_capture, flee_success
from .effects import execute_move
from .experience import award_experience, learn_move
from .stages import effective_stat
from .status import (
    can_act, clear_flinch, tick_confusion, tick_leech_seed,
    tick_primary_status, tick_trap,
)
from kanto.core.errors import IllegalActionError, InvariantViolation
from kanto.core.logging import logger
from kanto.data.items import Item, get_item
from kanto.data.loader import get_species
from kanto.system.settings import SettingsData

PARTY_LIMIT = 6


def _other(side: Side) -> Side:
    return Side.OPPONENT if side is Side.PLAYER else Side.PLAYER


def _first_healthy(party: Sequence[Combatant], start: int = 0) -> Optional[int]:
    for i in range(start, len(party)):
        if not party[i].fainted:
            return i
    return None


@dataclass
class _Turn:
    """Working state while one turn resolves."""
    snap: BattleSnapshot
    messages: List[str] = field(default_factory=list)

    def say(self, *lines: str):
        self.messages.extend(line for line in lines if line)

    def put(self, side: Side, combatant: Combatant):
        self.snap = self.snap.with_active(side, combatant)

    def any_fainted(self) -> bool:
        return self.snap.player.fainted or self.snap.opponent.fainted


class BattleEngine:
    def __init__(self, rng: Optional[random.Random] = None, settings: Optional[SettingsData] = None):
        self.rng = rng or random.Random()
        self.settings = settings or SettingsData()

    # ------------------------------------------------------------------
    # Battle lifecycle
    # ------------------------------------------------------------------
    def start_battle(
        self,
        player_party: Iterable[Combatant],
        opponent_party: Iterable[Combatant],
        kind: BattleKind = BattleKind.WILD,
        can_escape: Optional[bool] = None,
        *,
        reward: int = 0,
        money: int = 0,
        trainer_name: Optional[str] = None,
        exp_bonus: Optional[float] = None,
        badge: Optional[str] = None,
        badges: Iterable[str] = (),
    ) -> BattleSnapshot:
        player_party = tuple(player_party)
        opponent_party = tuple(opponent_party)
        if len(player_party) > PARTY_LIMIT or len(opponent_party) > PARTY_LIMIT:
            raise InvariantViolation(f"Parties hold at most {PARTY_LIMIT} members")
        p_idx = _first_healthy(player_party)
        o_idx = _first_healthy(opponent_party)
        if p_idx is None or o_idx is None:
            raise InvariantViolation("Both parties need a healthy member to start a battle")
        if can_escape is None:
            can_escape = kind is BattleKind.WILD
        if exp_bonus is None:
            exp_bonus = self.settings.trainer_exp_bonus if kind.is_trainer else 1.0

        opp = opponent_party[o_idx]
        if kind.is_trainer:
            opening = [f"{trainer_name or 'Trainer'} wants to battle!", f"{trainer_name or 'Trainer'} sent out {opp.name}!"]
        else:
            opening = [f"A wild {opp.name} appeared!"]
        opening.append(f"Go! {player_party[p_idx].name}!")

        snap = BattleSnapshot(
            player_party=player_party,
            opponent_party=opponent_party,
            kind=kind,
            can_escape=can_escape,
            player_active=p_idx,
            opponent_active=o_idx,
            log=tuple(opening),
            reward=max(0, reward),
            money=max(0, money),
            exp_bonus=exp_bonus,
            trainer_name=trainer_name,
            badge=badge if kind.is_trainer else None,
            badges=tuple(badges),
        )
        logger.info("BattleStart", kind=kind.value, player=snap.player.name, opponent=opp.name)
        return snap

    # ------------------------------------------------------------------
    # Legality
    # ------------------------------------------------------------------
    @staticmethod
    def legal_moves(combatant: Combatant) -> List[int]:
        """Selectable move slots; ``[STRUGGLE_SLOT]`` when nothing has PP."""
        slots = [i for i, s in enumerate(combatant.moves) if s.pp > 0]
        return slots or [STRUGGLE_SLOT]

    def _reject(self, message: str, action: object):
        logger.debug("IllegalAction", reason=message, action=action)
        raise IllegalActionError(message, action=action)

    def _check_move(self, combatant: Combatant, action: UseMove):
        if not combatant.has_pp:
            return
        if not 0 <= action.slot < len(combatant.moves):
            self._reject(f"{combatant.name} doesn't know a move in that slot!", action)
        slot = combatant.moves[action.slot]
        if slot.pp <= 0:
            self._reject(f"{combatant.name} has no PP left for {slot.move.name}!", action)

    def _check_item(self, snap: BattleSnapshot, action: UseItem) -> Item:
        item = get_item(action.item_id)
        if not item.usable_in_battle:
            self._reject("Can't use that item here!", action)
        if item.is_ball and snap.kind.is_trainer:
            self._reject("The trainer blocked the ball! Don't be a thief!", action)
        if item.is_healing:
            target = snap.player
            cures = item.effect_type == "healFull" and target.status is not None
            if target.current_hp >= target.max_hp and not cures:
                self._reject("It won't have any effect!", action)
        return item

    def validate_action(self, snap: BattleSnapshot, action: Action):
        """Raise ``IllegalActionError`` if the player may not take ``action`` now."""
        if snap.finished:
            self._reject("The battle is already over!", action)
        if snap.pending_learns:
            self._reject("Choose whether to learn the new move first!", action)
        player = snap.player
        if isinstance(action, UseMove):
            self._check_move(player, action)
        elif isinstance(action, UseItem):
            self._check_item(snap, action)
        elif isinstance(action, Switch):
            if not 0 <= action.party_index < len(snap.player_party):
                self._reject("There's no Pokemon in that slot!", action)
            target = snap.player_party[action.party_index]
            if action.party_index == snap.player_active:
                self._reject(f"{target.name} is already in battle!", action)
            if target.fainted:
                self._reject(f"{target.name} has no energy left to battle!", action)
        elif isinstance(action, Flee):
            if snap.kind.is_trainer:
                self._reject("Can't escape from a trainer battle!", action)
            if not snap.can_escape:
                self._reject("Can't escape!", action)
            if player.volatiles.trapped > 0:
                self._reject(f"{player.name} is trapped and can't escape!", action)
        else:
            raise InvariantViolation(f"Unknown action: {action!r}")

    # ------------------------------------------------------------------
    # Turn resolution
    # ------------------------------------------------------------------
    def turn_order(self, player: Combatant, opponent: Combatant, p_move: Move, o_move: Move) -> Tuple[Side, Side]:
        """Priority, then stage-adjusted speed, then a fair coin."""
        if p_move.priority != o_move.priority:
            first = Side.PLAYER if p_move.priority > o_move.priority else Side.OPPONENT
            return first, _other(first)
        p_speed = effective_stat(player.stats.speed, player.stages.speed)
        o_speed = effective_stat(opponent.stats.speed, opponent.stages.speed)
        if p_speed != o_speed:
            first = Side.PLAYER if p_speed > o_speed else Side.OPPONENT
        else:
            first = Side.PLAYER if self.rng.random() < 0.5 else Side.OPPONENT
        return first, _other(first)

    @staticmethod
    def _move_for(combatant: Combatant, action: UseMove) -> Tuple[Move, Optional[int]]:
        if not combatant.has_pp:
            return STRUGGLE, None
        return combatant.moves[action.slot].move, action.slot

    def _act(self, t: _Turn, side: Side, action: UseMove):
        actor = t.snap.active(side)
        target = t.snap.active(_other(side))
        if actor.fainted or target.fainted:
            return
        move, slot = self._move_for(actor, action)
        if slot is not None:
            actor = actor.with_slot(slot, actor.moves[slot].spend())
        gate = can_act(actor, self.rng)
        t.say(*gate.messages)
        if not gate.can_act:
            t.put(side, gate.combatant)
            return
        res = execute_move(gate.combatant, target, move, self.rng)
        t.put(side, res.attacker)
        t.put(_other(side), res.defender)
        t.say(*res.messages)

    def resolve_turn(self, snapshot: BattleSnapshot, player_action: Action,
                     opponent_action: Optional[Action] = None) -> TurnResult:
        self.validate_action(snapshot, player_action)
        if opponent_action is None:
            # a switching player is targeted as the incoming member
            if not isinstance(player_action, Switch):
                opponent_action = choose_move(snapshot.opponent, snapshot.player, self.rng)
        elif not isinstance(opponent_action, UseMove):
            raise IllegalActionError("The opponent can only choose a move.", action=opponent_action)
        else:
            self._check_move(snapshot.opponent, opponent_action)

        t = _Turn(snapshot)
        if isinstance(player_action, UseMove):
            p_move, _ = self._move_for(snapshot.player, player_action)
            o_move, _ = self._move_for(snapshot.opponent, opponent_action)
            for side in self.turn_order(snapshot.player, snapshot.opponent, p_move, o_move):
                self._act(t, side, player_action if side is Side.PLAYER else opponent_action)
                if t.any_fainted():
                    break
        elif isinstance(player_action, Flee):
            if flee_success(self.rng, snapshot.player.stats.speed, snapshot.opponent.stats.speed, snapshot.turn):
                t.say("Got away safely!")
                return self._finish(t, Outcome.FLED)
            t.say("Can't escape!")
            self._act(t, Side.OPPONENT, opponent_action)
        elif isinstance(player_action, UseItem):
            caught = self._use_item(t, get_item(player_action.item_id))
            if caught is not None:
                return self._finish(t, Outcome.CAUGHT, caught=caught)
            self._act(t, Side.OPPONENT, opponent_action)
        else:
            self._switch(t, player_action.party_index)
            if opponent_action is None:
                opponent_action = choose_move(t.snap.opponent, t.snap.player, self.rng)
            self._act(t, Side.OPPONENT, opponent_action)

        if not t.any_fainted():
            self._end_of_turn(t)
        t.put(Side.PLAYER, clear_flinch(t.snap.player))
        t.put(Side.OPPONENT, clear_flinch(t.snap.opponent))
        t.snap = replace(t.snap, turn=t.snap.turn + 1)
        outcome, side = self._resolve_faints(t)
        return self._finish(t, outcome, fainted_side=side)

    # ------------------------------------------------------------------
    # Non-move actions
    # ------------------------------------------------------------------
    def _switch(self, t: _Turn, index: int):
        outgoing = t.snap.player
        t.say(f"Come back! {outgoing.name}!")
        t.put(Side.PLAYER, outgoing.battle_reset())
        t.snap = replace(t.snap, player_active=index)
        t.say(f"Go! {t.snap.player.name}!")

    def _use_item(self, t: _Turn, item: Item) -> Optional[Combatant]:
        """Apply a healing item or throw a ball; returns the caught combatant."""
        t.say(f"You used a {item.name}!")
        if item.is_ball:
            wild = t.snap.opponent
            res = attempt_capture(self.rng, wild, get_species(wild.species_id).catch_rate, item.ball_bonus)
            if not res.success:
                t.say("Oh no! The Pokemon broke free!")
                return None
            t.say(f"Gotcha! {wild.name} was caught!")
            return wild.battle_reset()
        target = t.snap.player
        if item.effect_type == "healFull":
            healed = replace(target.heal(target.max_hp), status=None)
        else:
            healed = target.heal(int(item.effect.get("value", 20)))
        t.say(f"{target.name} recovered {healed.current_hp - target.current_hp} HP!")
        if target.status is not None and healed.status is None:
            t.say(f"{target.name} was cured of its status!")
        t.put(Side.PLAYER, healed)
        return None

    # ------------------------------------------------------------------
    # End of turn
    # ------------------------------------------------------------------
    def _end_of_turn(self, t: _Turn):
        """Residual effects in fixed order; stops at the first faint."""
        for side in (Side.PLAYER, Side.OPPONENT):
            seeded, seeder, msg = tick_leech_seed(t.snap.active(side), t.snap.active(_other(side)))
            t.put(side, seeded)
            t.put(_other(side), seeder)
            t.say(msg)
            if t.any_fainted():
                return
        for tick in (tick_confusion, tick_trap):
            for side in (Side.PLAYER, Side.OPPONENT):
                res = tick(t.snap.active(side))
                t.put(side, res.combatant)
                t.say(res.message)
        for side in (Side.PLAYER, Side.OPPONENT):
            res = tick_primary_status(t.snap.active(side), self.rng)
            t.put(side, res.combatant)
            t.say(res.message)
            if t.any_fainted():
                return

    # ------------------------------------------------------------------
    # Faints, rewards, replacement
    # ------------------------------------------------------------------
    def _award(self, t: _Turn, defeated: Combatant):
        winner = t.snap.player
        if winner.fainted:
            return
        res = award_experience(winner, defeated, t.snap.exp_bonus)
        t.put(Side.PLAYER, res.combatant)
        t.say(*res.messages)
        queued = tuple(PendingMoveLearn(t.snap.player_active, m) for m in res.pending)
        for m in res.pending:
            t.say(f"{winner.name} is trying to learn {m.name}!",
                  f"But {winner.name} can't learn more than four moves!")
            logger.debug("MoveLearnQueued", pokemon=winner.name, move=m.name)
        if queued:
            t.snap = replace(t.snap, pending_learns=t.snap.pending_learns + queued)

    def _resolve_faints(self, t: _Turn) -> Tuple[Outcome, Optional[Side]]:
        opp_down = t.snap.opponent.fainted
        player_down = t.snap.player.fainted
        if not opp_down and not player_down:
            return Outcome.CONTINUE, None

        if opp_down:
            defeated = t.snap.opponent
            t.say(f"{defeated.name} fainted!")
            self._award(t, defeated)
        if player_down:
            t.say(f"{t.snap.player.name} fainted!")

        player_next = _first_healthy(t.snap.player_party)
        if player_next is None:
            return self._whiteout(t), Side.PLAYER

        opp_next = _first_healthy(t.snap.opponent_party) if opp_down else t.snap.opponent_active
        if opp_next is None:
            return Outcome.BATTLE_WON, Side.OPPONENT

        if opp_down:
            t.snap = replace(t.snap, opponent_active=opp_next)
            sender = t.snap.trainer_name or ("Trainer" if t.snap.kind.is_trainer else "Wild")
            t.say(f"{sender} sent out {t.snap.opponent.name}!")
        if player_down:
            t.snap = replace(t.snap, player_active=player_next)
            t.say(f"Go! {t.snap.player.name}!")
            return Outcome.FAINTED, Side.PLAYER
        return Outcome.CONTINUE, Side.OPPONENT

    def _whiteout(self, t: _Turn) -> Outcome:
        t.say(f"{t.snap.player.name} is out of usable Pokemon!", "You whited out!")
        money = t.snap.money
        if t.snap.kind.is_trainer:
            penalty = t.snap.reward * self.settings.whiteout_penalty_percent // 100
            lost = min(penalty, money)
            money -= lost
            t.say(f"You lost {lost} to the winner!")
        healed = tuple(m.fully_healed() for m in t.snap.player_party)
        t.snap = replace(t.snap, player_party=healed, money=money, pending_learns=())
        t.say("Your Pokemon were healed at the Pokemon Center!")
        return Outcome.BATTLE_LOST

    def _finish(self, t: _Turn, outcome: Outcome, *, fainted_side: Optional[Side] = None,
                caught: Optional[Combatant] = None) -> TurnResult:
        if outcome in (Outcome.BATTLE_WON, Outcome.FLED, Outcome.CAUGHT):
            self._end_battle(t, outcome, caught)
        elif outcome is Outcome.BATTLE_LOST:
            t.snap = replace(t.snap, finished=True)
        if t.snap.pending_learns:
            t.snap = replace(t.snap, deferred_outcome=outcome, deferred_side=fainted_side)
            shown = Outcome.MOVE_LEARN_PENDING
        else:
            shown = outcome
        t.snap = t.snap.with_messages(t.messages)
        logger.debug("TurnResolved", turn=t.snap.turn, outcome=shown.value)
        if outcome.terminal:
            logger.info("BattleEnd", outcome=outcome.value, turns=t.snap.turn)
        return TurnResult(t.snap, tuple(t.messages), shown, fainted_side, caught)

    def _end_battle(self, t: _Turn, outcome: Outcome, caught: Optional[Combatant]):
        party = tuple(m.battle_reset() for m in t.snap.player_party)
        money = t.snap.money
        if outcome is Outcome.CAUGHT and caught is not None:
            if len(party) < PARTY_LIMIT:
                party = party + (caught,)
                t.say(f"{caught.name} was added to your party!")
            else:
                t.say(f"{caught.name} was sent to the PC!")
        badges = t.snap.badges
        if outcome is Outcome.BATTLE_WON and t.snap.badge and t.snap.badge not in badges:
            badges = badges + (t.snap.badge,)
            t.say(f"Received the {t.snap.badge}!")
        if outcome is Outcome.BATTLE_WON and t.snap.kind.is_trainer:
            money += t.snap.reward
            if t.snap.trainer_name:
                t.say(f"{t.snap.trainer_name} paid out {t.snap.reward}!")
            else:
                t.say(f"Got {t.snap.reward} for winning!")
        t.snap = replace(t.snap, player_party=party, money=money, badges=badges, finished=True)

    # ------------------------------------------------------------------
    # Suspended move learning
    # ------------------------------------------------------------------
    def resolve_move_learn(self, snapshot: BattleSnapshot, forget_slot: Optional[int]) -> TurnResult:
        """Answer the oldest learn prompt: forget ``forget_slot`` or skip with None."""
        if not snapshot.pending_learns:
            raise IllegalActionError("There is no move waiting to be learned.")
        head, rest = snapshot.pending_learns[0], snapshot.pending_learns[1:]
        member = snapshot.player_party[head.party_index]
        if forget_slot is not None and not 0 <= forget_slot < len(member.moves):
            raise IllegalActionError(f"{member.name} doesn't know a move in that slot!")
        updated, message = learn_move(member, head.move, forget_slot)
        snap = snapshot.with_member(Side.PLAYER, head.party_index, updated)
        snap = replace(snap, pending_learns=rest)
        if rest:
            return TurnResult(snap.with_messages([message]), (message,), Outcome.MOVE_LEARN_PENDING)
        outcome = snapshot.deferred_outcome or Outcome.CONTINUE
        side = snapshot.deferred_side
        snap = replace(snap, deferred_outcome=None, deferred_side=None).with_messages([message])
        return TurnResult(snap, (message,), outcome, side)

__all__ = ["BattleEngine","PARTY_LIMIT"]
