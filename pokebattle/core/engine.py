"""Turn resolution.

``ResolutionEngine`` is the contract the tick driver talks to. Any object
with these three methods works; ``BattleEngine`` is the bundled rule set
(singles, Gen V+ damage, status conditions, PP and Struggle, priority,
two-turn charging moves, and replacement after a faint).
"""

from __future__ import annotations

import random
from typing import Protocol, runtime_checkable

from pokebattle.core.battle import (
    ActionKind,
    BattleAction,
    BattlePokemon,
    BattleSide,
    BattleState,
    Phase,
)
from pokebattle.core.events import BattleEvent, EventKind
from pokebattle.core.moves import STRUGGLE, DamageClass, Move, StatusEffect, calculate_damage


@runtime_checkable
class ResolutionEngine(Protocol):
    """Pluggable rules: what is legal, when to resolve, and how."""

    def resolve(
        self,
        state: BattleState,
        action_a: BattleAction | None,
        action_b: BattleAction | None,
        rng_seed: int,
    ) -> tuple[BattleState, list[BattleEvent]]:
        """Return the state after one resolution step and the events it produced."""
        ...

    def ready_for_resolution(self, state: BattleState) -> bool:
        ...

    def legal_actions(self, state: BattleState, side: int) -> list[BattleAction]:
        ...


class BattleEngine:
    """Reference resolution engine.

    Stateless: takes a BattleState and returns the advanced copy plus the
    events for that step. All randomness comes from the seed passed in.
    """

    # -- decision points --------------------------------------------------

    def ready_for_resolution(self, state: BattleState) -> bool:
        phase = state.phase
        if phase.is_terminal:
            return False
        if phase in (Phase.AWAITING_BOTH_ACTIONS, Phase.AWAITING_BOTH_REPLACEMENTS):
            return state.pending[0] is not None and state.pending[1] is not None
        side = phase.replacement_side
        return side is not None and state.pending[side] is not None

    def legal_actions(self, state: BattleState, side: int) -> list[BattleAction]:
        phase = state.phase
        own = state.sides[side]

        if phase.is_terminal:
            return []

        if phase == Phase.AWAITING_BOTH_ACTIONS:
            active = own.active_pokemon
            if active is None:
                return [BattleAction.forfeit()]

            # While charging, any move is accepted; resolve() swaps in the charged move
            actions = [
                BattleAction.use_move(i)
                for i, m in enumerate(active.moves)
                if m.current_pp is None or m.current_pp > 0
            ]
            if not actions and active.moves:
                # Out of PP everywhere: slot 0 becomes Struggle
                actions = [BattleAction.use_move(0)]
            actions.extend(BattleAction.switch(i) for i in own.switch_targets())
            actions.append(BattleAction.forfeit())
            return actions

        if phase == Phase.AWAITING_BOTH_REPLACEMENTS or phase.replacement_side == side:
            return [BattleAction.switch(i) for i in own.switch_targets()]

        return []

    # -- resolution -------------------------------------------------------

    def resolve(
        self,
        state: BattleState,
        action_a: BattleAction | None,
        action_b: BattleAction | None,
        rng_seed: int,
    ) -> tuple[BattleState, list[BattleEvent]]:
        """Resolve the current decision point.

        Works on a copy of ``state``: the returned state has HP, status,
        active Pokemon, phase and turn number advanced and both pending
        slots cleared.
        """
        if not self.ready_for_resolution(state):
            raise ValueError(f"battle is not ready for resolution in phase {state.phase.value}")

        state = state.model_copy(deep=True)
        rng = random.Random(rng_seed)
        actions = [action_a, action_b]

        if state.phase == Phase.AWAITING_BOTH_ACTIONS:
            events = self._resolve_turn(state, actions, rng)
        else:
            events = self._resolve_replacements(state, actions)

        state.clear_pending()
        return state, events

    def _resolve_replacements(
        self,
        state: BattleState,
        actions: list[BattleAction | None],
    ) -> list[BattleEvent]:
        events: list[BattleEvent] = []
        for idx, side in enumerate(state.sides):
            action = actions[idx]
            if not side.needs_replacement or action is None or action.switch_to is None:
                continue
            side.active_index = action.switch_to
            events.append(BattleEvent(
                kind=EventKind.SENT_OUT,
                side=idx,
                trainer=side.trainer_name,
                pokemon=side.active_pokemon.name,
            ))

        state.phase = Phase.AWAITING_BOTH_ACTIONS
        state.turn_number += 1
        return events

    def _resolve_turn(
        self,
        state: BattleState,
        actions: list[BattleAction | None],
        rng: random.Random,
    ) -> list[BattleEvent]:
        events: list[BattleEvent] = []
        sides = state.sides

        for side in sides:
            if side.active_pokemon:
                side.active_pokemon.is_protected = False

        # A charging Pokemon that stays in is locked into its move
        for idx, side in enumerate(sides):
            action = actions[idx]
            active = side.active_pokemon
            if (
                active is not None
                and active.charging_move is not None
                and action is not None
                and action.kind == ActionKind.USE_MOVE
            ):
                actions[idx] = BattleAction.use_move(active.charging_move)

        # Handle forfeits first
        for idx, side in enumerate(sides):
            action = actions[idx]
            if action is not None and action.kind == ActionKind.FORFEIT:
                winner = 1 - idx
                state.phase = Phase.victory(winner)
                events.append(BattleEvent(kind=EventKind.FORFEIT, side=idx, trainer=side.trainer_name))
                events.append(BattleEvent(
                    kind=EventKind.VICTORY, side=winner, trainer=sides[winner].trainer_name,
                ))
                return events

        # Process switches first (switches always happen before attacks)
        for idx, side in enumerate(sides):
            action = actions[idx]
            if action is None or action.kind != ActionKind.SWITCH or action.switch_to is None:
                continue
            old = side.active_pokemon
            if old is not None:
                old.charging_move = None
            side.active_index = action.switch_to
            events.append(BattleEvent(
                kind=EventKind.SWITCHED,
                side=idx,
                trainer=side.trainer_name,
                previous=old.name if old else "?",
                pokemon=side.active_pokemon.name,
            ))

        attackers = [
            idx for idx in (0, 1)
            if actions[idx] is not None and actions[idx].kind == ActionKind.USE_MOVE
        ]
        if len(attackers) == 2:
            attackers = self._order_attackers(sides, actions, rng)

        for idx in attackers:
            atk_side = sides[idx]
            def_side = sides[1 - idx]
            atk_mon = atk_side.active_pokemon
            def_mon = def_side.active_pokemon
            if not atk_mon or atk_mon.is_fainted:
                continue
            if not def_mon or def_mon.is_fainted:
                continue

            events.extend(self._execute_move(idx, atk_side, actions[idx], def_side, rng))

            if atk_mon.is_fainted:
                events.append(BattleEvent(kind=EventKind.FAINTED, side=idx, pokemon=atk_mon.name))
            if def_mon.is_fainted:
                events.append(BattleEvent(kind=EventKind.FAINTED, side=1 - idx, pokemon=def_mon.name))

        # End-of-turn status damage
        for idx, side in enumerate(sides):
            mon = side.active_pokemon
            if mon and not mon.is_fainted:
                events.extend(self._apply_status_damage(idx, mon))
                if mon.is_fainted:
                    events.append(BattleEvent(kind=EventKind.FAINTED, side=idx, pokemon=mon.name))

        events.extend(self._settle_phase(state))
        return events

    @staticmethod
    def _settle_phase(state: BattleState) -> list[BattleEvent]:
        """Pick the next phase once a full turn has been resolved."""
        side0, side1 = state.sides
        out0 = not side0.has_usable_pokemon
        out1 = not side1.has_usable_pokemon

        if out0 and out1:
            state.phase = Phase.DRAW
            return [BattleEvent(kind=EventKind.DRAW)]
        if out0 or out1:
            winner = 1 if out0 else 0
            state.phase = Phase.victory(winner)
            return [BattleEvent(
                kind=EventKind.VICTORY, side=winner, trainer=state.sides[winner].trainer_name,
            )]

        need0 = side0.needs_replacement
        need1 = side1.needs_replacement
        if need0 and need1:
            state.phase = Phase.AWAITING_BOTH_REPLACEMENTS
        elif need0 or need1:
            state.phase = Phase.awaiting_replacement(0 if need0 else 1)
        else:
            state.phase = Phase.AWAITING_BOTH_ACTIONS
            state.turn_number += 1
        return []

    @staticmethod
    def _order_attackers(
        sides: list[BattleSide],
        actions: list[BattleAction | None],
        rng: random.Random,
    ) -> list[int]:
        """Move priority first, then speed (halved if paralyzed), then a coin flip."""

        def sort_key(idx: int) -> tuple[int, int, float]:
            mon = sides[idx].active_pokemon
            action = actions[idx]
            priority = 0
            if mon and action.move_index is not None and action.move_index < len(mon.moves):
                priority = mon.moves[action.move_index].priority
            speed = 0
            if mon:
                speed = mon.spe // 2 if mon.status == StatusEffect.PARALYSIS else mon.spe
            return (priority, speed, rng.random())

        return sorted((0, 1), key=sort_key, reverse=True)

    # -- single move ------------------------------------------------------

    def _execute_move(
        self,
        idx: int,
        atk_side: BattleSide,
        action: BattleAction,
        def_side: BattleSide,
        rng: random.Random,
    ) -> list[BattleEvent]:
        events: list[BattleEvent] = []
        atk_mon = atk_side.active_pokemon
        def_mon = def_side.active_pokemon
        def_idx = 1 - idx

        # Status preventing action
        if atk_mon.status == StatusEffect.SLEEP:
            atk_mon.status_turns -= 1
            if atk_mon.status_turns <= 0:
                atk_mon.status = StatusEffect.NONE
                events.append(BattleEvent(
                    kind=EventKind.STATUS_CURED, side=idx, pokemon=atk_mon.name, status=StatusEffect.SLEEP,
                ))
            else:
                events.append(BattleEvent(
                    kind=EventKind.STATUS_PREVENTED, side=idx, pokemon=atk_mon.name, status=StatusEffect.SLEEP,
                ))
                return events

        if atk_mon.status == StatusEffect.FREEZE:
            # 20% chance to thaw each turn
            if rng.random() < 0.2:
                atk_mon.status = StatusEffect.NONE
                events.append(BattleEvent(
                    kind=EventKind.STATUS_CURED, side=idx, pokemon=atk_mon.name, status=StatusEffect.FREEZE,
                ))
            else:
                events.append(BattleEvent(
                    kind=EventKind.STATUS_PREVENTED, side=idx, pokemon=atk_mon.name, status=StatusEffect.FREEZE,
                ))
                return events

        if atk_mon.status == StatusEffect.PARALYSIS and rng.random() < 0.25:
            events.append(BattleEvent(
                kind=EventKind.STATUS_PREVENTED, side=idx, pokemon=atk_mon.name, status=StatusEffect.PARALYSIS,
            ))
            return events

        move_idx = action.move_index or 0
        if move_idx >= len(atk_mon.moves):
            move_idx = 0
        move = atk_mon.moves[move_idx]

        # Second turn of a charging move: strike without spending PP again
        striking = atk_mon.charging_move is not None
        if striking:
            atk_mon.charging_move = None
        elif move.current_pp is not None and move.current_pp <= 0:
            events.append(BattleEvent(kind=EventKind.STRUGGLE, side=idx, pokemon=atk_mon.name))
            move = STRUGGLE.model_copy(deep=True)
        else:
            if move.current_pp is not None:
                move.current_pp -= 1
            if move.charges:
                atk_mon.charging_move = move_idx
                events.append(BattleEvent(
                    kind=EventKind.CHARGING, side=idx, pokemon=atk_mon.name, move=move.display_name,
                ))
                return events

        events.append(BattleEvent(
            kind=EventKind.USED_MOVE,
            side=idx,
            pokemon=atk_mon.name,
            target=def_mon.name,
            move=move.display_name,
        ))

        if def_mon.is_protected:
            events.append(BattleEvent(kind=EventKind.PROTECTED, side=def_idx, pokemon=def_mon.name))
            return events

        if move.damage_class == DamageClass.STATUS:
            events.extend(self._handle_status_move(idx, atk_mon, move, def_mon, rng))
            return events

        # Accuracy check
        if move.accuracy is not None and rng.randint(1, 100) > move.accuracy:
            events.append(BattleEvent(kind=EventKind.MISS, side=idx, pokemon=atk_mon.name))
            return events

        if move.damage_class == DamageClass.PHYSICAL:
            atk_stat = atk_mon.atk
            def_stat = def_mon.defense
            # Burn halves physical attack
            if atk_mon.status == StatusEffect.BURN:
                atk_stat = atk_stat // 2
        else:
            atk_stat = atk_mon.spa
            def_stat = def_mon.spd

        damage, effectiveness, was_crit = calculate_damage(
            attacker_level=atk_mon.level,
            move=move,
            attack_stat=atk_stat,
            defense_stat=max(1, def_stat),
            attacker_types=atk_mon.types,
            defender_type1=def_mon.type1,
            defender_type2=def_mon.type2,
            rng=rng,
        )

        if effectiveness == 0:
            events.append(BattleEvent(
                kind=EventKind.IMMUNE, side=def_idx, target=def_mon.name, multiplier=0.0,
            ))
            return events

        actual_damage = def_mon.take_damage(damage)
        events.append(BattleEvent(
            kind=EventKind.DAMAGE, side=def_idx, target=def_mon.name, amount=actual_damage,
        ))
        if was_crit:
            events.append(BattleEvent(kind=EventKind.CRITICAL, side=def_idx))
        events.append(BattleEvent(kind=EventKind.EFFECTIVENESS, side=def_idx, multiplier=effectiveness))

        # Drain / recoil
        if move.drain_percent != 0:
            drain_amount = int(actual_damage * abs(move.drain_percent) / 100)
            if move.drain_percent > 0:
                healed = atk_mon.heal(drain_amount)
                if healed > 0:
                    events.append(BattleEvent(
                        kind=EventKind.DRAINED, side=idx, pokemon=atk_mon.name, amount=healed,
                    ))
            else:
                recoil = atk_mon.take_damage(max(1, drain_amount))
                if recoil > 0:
                    events.append(BattleEvent(
                        kind=EventKind.RECOIL, side=idx, pokemon=atk_mon.name, amount=recoil,
                    ))

        # Secondary status effect
        if (
            move.status_effect != StatusEffect.NONE
            and move.effect_chance
            and not def_mon.is_fainted
            and def_mon.status == StatusEffect.NONE
            and rng.randint(1, 100) <= move.effect_chance
        ):
            self._inflict(def_mon, move.status_effect, rng)
            events.append(BattleEvent(
                kind=EventKind.STATUS_INFLICTED, side=def_idx, target=def_mon.name, status=move.status_effect,
            ))

        return events

    def _handle_status_move(
        self,
        idx: int,
        atk_mon: BattlePokemon,
        move: Move,
        def_mon: BattlePokemon,
        rng: random.Random,
    ) -> list[BattleEvent]:
        """Non-damaging moves (simplified)."""
        name = move.name.lower()
        def_idx = 1 - idx

        if name == "protect":
            atk_mon.is_protected = True
            return [BattleEvent(kind=EventKind.PROTECTED, side=idx, pokemon=atk_mon.name)]

        if name == "rest":
            if atk_mon.current_hp < atk_mon.max_hp:
                atk_mon.current_hp = atk_mon.max_hp
                atk_mon.status = StatusEffect.SLEEP
                atk_mon.status_turns = 2
                return [BattleEvent(kind=EventKind.RESTED, side=idx, pokemon=atk_mon.name)]
            return [BattleEvent(kind=EventKind.HP_FULL, side=idx, pokemon=atk_mon.name)]

        if move.healing_percent > 0:
            healed = atk_mon.heal(int(atk_mon.max_hp * move.healing_percent / 100))
            return [BattleEvent(kind=EventKind.HEALED, side=idx, pokemon=atk_mon.name, amount=healed)]

        if move.status_effect != StatusEffect.NONE:
            if def_mon.status != StatusEffect.NONE:
                return [BattleEvent(kind=EventKind.ALREADY_AFFLICTED, side=def_idx, target=def_mon.name)]
            if move.accuracy is not None and rng.randint(1, 100) > move.accuracy:
                return [BattleEvent(kind=EventKind.MISS, side=idx, pokemon=atk_mon.name)]
            self._inflict(def_mon, move.status_effect, rng)
            return [BattleEvent(
                kind=EventKind.STATUS_INFLICTED, side=def_idx, target=def_mon.name, status=move.status_effect,
            )]

        return [BattleEvent(kind=EventKind.NO_EFFECT, side=idx)]

    @staticmethod
    def _inflict(mon: BattlePokemon, status: StatusEffect, rng: random.Random) -> None:
        mon.status = status
        mon.status_turns = rng.randint(1, 3) if status == StatusEffect.SLEEP else 0

    @staticmethod
    def _apply_status_damage(idx: int, mon: BattlePokemon) -> list[BattleEvent]:
        """End-of-turn burn and poison damage."""
        if mon.status == StatusEffect.BURN:
            dmg = max(1, mon.max_hp // 16)
        elif mon.status == StatusEffect.POISON:
            dmg = max(1, mon.max_hp // 8)
        elif mon.status == StatusEffect.BADLY_POISONED:
            mon.status_turns += 1
            dmg = max(1, mon.max_hp * mon.status_turns // 16)
        else:
            return []

        actual = mon.take_damage(dmg)
        return [BattleEvent(
            kind=EventKind.STATUS_DAMAGE, side=idx, pokemon=mon.name, amount=actual, status=mon.status,
        )]
