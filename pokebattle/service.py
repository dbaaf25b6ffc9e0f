"""Battle session service.

Composition root for the battle core: every operation is a full
read-modify-write against the session store. Rejected actions and failed
resolutions never reach the store.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable

from pydantic import BaseModel, Field

from pokebattle.core import teams
from pokebattle.core.ai import GreedyNpcPolicy, NpcPolicy
from pokebattle.core.battle import BattleAction, BattleState
from pokebattle.core.driver import Submission, TickDriver, TickResult
from pokebattle.core.engine import BattleEngine, ResolutionEngine
from pokebattle.core.teams import (
    NpcOpponentInfo,
    PrefabTeamInfo,
    SideConfig,
    build_side,
    get_npc_opponent,
    get_prefab_team,
)
from pokebattle.core.validator import can_act
from pokebattle.core.view import PlayerView, TeamView, project_team, project_view
from pokebattle.data.models import BattleSession, TurnRecord
from pokebattle.data.store import SessionStore
from pokebattle.errors import (
    BattleServiceError,
    CollaboratorTimeout,
    InternalError,
    NotFound,
    Unauthorized,
    ValidationError,
)
from pokebattle.utils.config import Config

logger = logging.getLogger(__name__)


class CreateSessionResult(BaseModel):
    session_id: str
    view: PlayerView


class SubmitActionResult(BaseModel):
    success: bool
    message: str
    battle_updated: bool
    events: list[str] = Field(default_factory=list)


class BattleService:
    """Creates battles, accepts actions and answers queries for participants."""

    def __init__(
        self,
        store: SessionStore,
        engine: ResolutionEngine | None = None,
        npc_policy: NpcPolicy | None = None,
        config: Config | None = None,
        seed_source: Callable[[], int] | None = None,
    ):
        self.store = store
        self.config = config or Config()
        self.engine = engine or BattleEngine()
        self.npc_policy = npc_policy or GreedyNpcPolicy()
        self.driver = TickDriver(
            self.engine,
            self.npc_policy,
            max_iterations=self.config.max_tick_iterations,
            seed_source=seed_source,
        )

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    def create_session(self, side_a: SideConfig, side_b: SideConfig) -> CreateSessionResult:
        """Start a battle between two participants. Side A gets the returned view."""
        if side_a.player_id == side_b.player_id:
            raise ValidationError("Participants must have distinct player ids")

        state = BattleState(sides=[build_side(side_a), build_side(side_b)])
        session = BattleSession(
            side_a_id=side_a.player_id,
            side_b_id=side_b.player_id,
            battle_state=state,
        )
        self.store.create(session)
        logger.info(
            f"Created battle {session.session_id}: {side_a.player_id} vs {side_b.player_id}"
        )
        return CreateSessionResult(
            session_id=session.session_id,
            view=project_view(state, side_a.player_id),
        )

    def create_npc_session(
        self,
        player_id: str,
        player_name: str,
        team_id: str,
        opponent_id: str,
    ) -> CreateSessionResult:
        """Start a battle with a prefab team against a catalogue NPC."""
        team = get_prefab_team(team_id)
        if team is None:
            raise ValidationError(f"Unknown team: {team_id}")
        opponent = get_npc_opponent(opponent_id)
        if opponent is None:
            raise ValidationError(f"Unknown opponent: {opponent_id}")

        player = SideConfig(player_id=player_id, trainer_name=player_name, team=team.pokemon)
        npc = SideConfig(
            player_id=f"npc_{opponent.id}",
            trainer_name=opponent.name,
            is_npc=True,
            team=opponent.team,
        )
        return self.create_session(player, npc)

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def submit_action(self, session_id: str, player_id: str, action: BattleAction) -> SubmitActionResult:
        session = self._load(session_id)
        side = self._side_of(session, player_id)

        result = self._advance(session.battle_state, Submission(side=side, action=action))
        resolved = bool(result.turns) or result.state.turn_number != session.battle_state.turn_number

        session.battle_state = result.state
        session.append_turns(
            [TurnRecord(turn_number=t.turn_number, events=t.events) for t in result.turns]
        )
        self.store.update(session)

        if result.state.phase.is_terminal:
            logger.info(f"Battle {session_id} finished: {result.state.phase.value}")
            message = "Action processed successfully. The battle is over."
        elif resolved:
            message = "Action processed successfully"
        else:
            message = "Action submitted. Waiting for the opponent."

        return SubmitActionResult(
            success=True,
            message=message,
            battle_updated=resolved,
            events=result.events,
        )

    def _advance(self, state: BattleState, submission: Submission) -> TickResult:
        """Run the tick driver under the configured time limit.

        Each call gets its own daemon thread. A call that overruns is
        abandoned, not joined, so it never holds up other sessions.
        """
        timeout = self.config.decision_timeout_seconds
        outcome: dict[str, object] = {}

        def run() -> None:
            try:
                outcome["result"] = self.driver.advance(state, submission)
            except Exception as e:
                outcome["error"] = e

        worker = threading.Thread(target=run, name="battle-tick", daemon=True)
        worker.start()
        worker.join(timeout)

        if worker.is_alive():
            logger.warning(f"Battle resolution exceeded {timeout}s; discarding result")
            raise CollaboratorTimeout(timeout)

        error = outcome.get("error")
        if isinstance(error, BattleServiceError):
            raise error
        if error is not None:
            logger.error(f"Tick driver failed unexpectedly: {error!r}")
            raise InternalError(str(error)) from error
        return outcome["result"]

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_view(self, session_id: str, player_id: str) -> PlayerView:
        session = self._load(session_id)
        return project_view(session.battle_state, player_id)

    def get_team_info(self, session_id: str, player_id: str) -> TeamView:
        session = self._load(session_id)
        return project_team(session.battle_state, player_id)

    def get_valid_actions(self, session_id: str, player_id: str) -> list[BattleAction]:
        """Legal actions for the requester right now (empty when they can't act)."""
        session = self._load(session_id)
        side = self._side_of(session, player_id)
        state = session.battle_state
        if not can_act(state.phase, side, state.pending[side]):
            return []
        try:
            return self.engine.legal_actions(state, side)
        except Exception as e:
            logger.exception("Engine failed to list legal actions")
            raise InternalError(f"engine failed to list legal actions: {e}") from e

    def get_events(self, session_id: str, player_id: str, last_n_turns: int | None = None) -> list[TurnRecord]:
        """The whole turn log, or its last ``last_n_turns`` records."""
        if last_n_turns is not None and last_n_turns < 0:
            raise ValidationError("last_n_turns must be zero or positive")
        session = self._load(session_id)
        self._side_of(session, player_id)
        return session.last_turns(last_n_turns)

    def available_teams(self) -> list[PrefabTeamInfo]:
        return teams.available_teams()

    def npc_opponents(self) -> list[NpcOpponentInfo]:
        return teams.npc_opponents()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _load(self, session_id: str) -> BattleSession:
        session = self.store.get(session_id)
        if session is None:
            raise NotFound(session_id)
        return session

    @staticmethod
    def _side_of(session: BattleSession, player_id: str) -> int:
        if not session.has_player(player_id):
            raise Unauthorized(player_id)
        return session.battle_state.side_index(player_id)
