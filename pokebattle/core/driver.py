"""Game-tick driver.

Takes one submitted action, fills in whatever the automated side needs
to decide, and keeps calling the resolution engine until a human has to
act again (or the battle ends). Works on a copy of the incoming state,
so a rejected or failed advance never leaks partial changes.
"""

from __future__ import annotations

import logging
import secrets
from typing import Callable

from pydantic import BaseModel, Field

from pokebattle.core.ai import NpcPolicy
from pokebattle.core.battle import BattleAction, BattleState
from pokebattle.core.engine import ResolutionEngine
from pokebattle.core.events import format_event
from pokebattle.core.validator import can_act, validate_action
from pokebattle.errors import BattleServiceError, InternalError, InvalidAction, InvalidPhase

logger = logging.getLogger(__name__)

MAX_ITERATIONS = 100


def _random_seed() -> int:
    return secrets.randbits(64)


class Submission(BaseModel):
    """One side's action, as handed to the driver."""

    side: int
    action: BattleAction


class TurnEvents(BaseModel):
    """Formatted lines produced while the battle was on one turn number."""

    turn_number: int
    events: list[str] = Field(default_factory=list)


class TickResult(BaseModel):
    state: BattleState
    events: list[str] = Field(default_factory=list)
    turns: list[TurnEvents] = Field(default_factory=list)


class TickDriver:
    """Bounded resolve loop around a ``ResolutionEngine``."""

    def __init__(
        self,
        engine: ResolutionEngine,
        npc_policy: NpcPolicy,
        max_iterations: int = MAX_ITERATIONS,
        seed_source: Callable[[], int] | None = None,
    ):
        self.engine = engine
        self.npc_policy = npc_policy
        self.max_iterations = max_iterations
        self.seed_source = seed_source or _random_seed

    def check(self, state: BattleState, submission: Submission) -> None:
        """Raise InvalidPhase / InvalidAction if the submission can't be taken."""
        side = submission.side
        action = submission.action

        verdict = validate_action(state.phase, side, action, state.pending[side])
        if not verdict.accepted:
            if verdict.battle_over:
                raise InvalidPhase(state.phase.value, verdict.reason)
            raise InvalidAction(verdict.reason)

        try:
            legal = self.engine.legal_actions(state, side)
        except Exception as e:
            logger.exception("Engine failed to list legal actions")
            raise InternalError(f"engine failed to list legal actions: {e}") from e

        if action not in legal:
            raise InvalidAction(f"cannot {action.describe()} right now")

    def advance(self, state: BattleState, submission: Submission) -> TickResult:
        """Apply ``submission`` and resolve as far as possible without human input."""
        self.check(state, submission)

        state = state.model_copy(deep=True)
        state.pending[submission.side] = submission.action

        try:
            return self._run(state)
        except BattleServiceError:
            raise
        except Exception as e:
            logger.exception("Unexpected failure while resolving battle")
            raise InternalError(f"battle resolution failed: {e}") from e

    def _run(self, state: BattleState) -> TickResult:
        self._fill_npc_slots(state)

        events: list[str] = []
        turns: list[TurnEvents] = []
        iterations = 0

        while self.engine.ready_for_resolution(state) and iterations < self.max_iterations:
            iterations += 1
            turn_number = state.turn_number

            state, primitive = self.engine.resolve(
                state, state.pending[0], state.pending[1], self.seed_source(),
            )

            lines = [line for line in (format_event(e) for e in primitive) if line]
            events.extend(lines)
            _group(turns, turn_number, lines)

            if state.phase.is_terminal:
                break
            self._fill_npc_slots(state)

        if (
            iterations >= self.max_iterations
            and not state.phase.is_terminal
            and self.engine.ready_for_resolution(state)
        ):
            logger.error(
                f"Tick driver hit the iteration ceiling ({self.max_iterations}) "
                f"in phase {state.phase.value} at turn {state.turn_number}"
            )
            raise InternalError(
                f"battle did not settle after {self.max_iterations} resolution steps"
            )

        return TickResult(state=state, events=events, turns=turns)

    def _fill_npc_slots(self, state: BattleState) -> None:
        """Let automated sides commit an action wherever their slot is required and empty."""
        for idx, side in enumerate(state.sides):
            if not side.is_npc or state.pending[idx] is not None:
                continue
            if not can_act(state.phase, idx, None):
                continue
            legal = self.engine.legal_actions(state, idx)
            if not legal:
                continue
            choice = self.npc_policy.choose_action(state, idx, legal)
            if choice not in legal:
                raise InternalError(f"automated side {idx} chose an illegal action: {choice.describe()}")
            state.pending[idx] = choice


def _group(turns: list[TurnEvents], turn_number: int, lines: list[str]) -> None:
    if turns and turns[-1].turn_number == turn_number:
        turns[-1].events.extend(lines)
    elif lines:
        turns.append(TurnEvents(turn_number=turn_number, events=lines))
