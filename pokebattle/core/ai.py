"""Decision-making for automated (NPC) participants."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from pokebattle.core.battle import ActionKind, BattleAction, BattleState
from pokebattle.core.moves import DamageClass, get_type_effectiveness


@runtime_checkable
class NpcPolicy(Protocol):
    def choose_action(
        self,
        state: BattleState,
        side: int,
        legal_actions: list[BattleAction],
    ) -> BattleAction:
        """Pick one of ``legal_actions`` for ``side``."""
        ...


class GreedyNpcPolicy:
    """Always attacks with the move that scores best against the foe.

    Score is power times type effectiveness. Replacements send out the
    first healthy bench Pokemon. Never forfeits.
    """

    def choose_action(
        self,
        state: BattleState,
        side: int,
        legal_actions: list[BattleAction],
    ) -> BattleAction:
        if not legal_actions:
            raise ValueError(f"no legal actions for side {side}")

        moves = [a for a in legal_actions if a.kind == ActionKind.USE_MOVE]
        if not moves:
            switches = [a for a in legal_actions if a.kind == ActionKind.SWITCH]
            return switches[0] if switches else legal_actions[0]

        user = state.sides[side].active_pokemon
        foe = state.sides[1 - side].active_pokemon
        if user is None or foe is None:
            return moves[0]

        best = moves[0]
        best_score = -1.0
        for action in moves:
            move = user.moves[action.move_index]
            power = move.power or 0
            if move.damage_class == DamageClass.STATUS:
                power = 0
            score = power * get_type_effectiveness(move.type, foe.type1, foe.type2)
            if score > best_score:
                best_score = score
                best = action
        return best
