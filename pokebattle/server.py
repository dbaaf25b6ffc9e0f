"""HTTP adapter over BattleService."""

from datetime import datetime, timezone
from typing import Annotated

from fastapi import Depends, FastAPI, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from pokebattle import __version__
from pokebattle.core.battle import BattleAction
from pokebattle.core.teams import NpcOpponentInfo, PrefabTeamInfo, SideConfig
from pokebattle.core.view import PlayerView, TeamView
from pokebattle.data.models import TurnRecord
from pokebattle.data.store import SqlSessionStore
from pokebattle.errors import BattleServiceError
from pokebattle.service import BattleService, CreateSessionResult, SubmitActionResult
from pokebattle.utils.config import Config

app = FastAPI(title="PokeBattle Session Service", version=__version__)

# --- Models ---


class CreateBattleRequest(BaseModel):
    player_id: str = "player_1"
    player_name: str
    team_id: str
    opponent_id: str


class CreatePvpBattleRequest(BaseModel):
    side_a: SideConfig
    side_b: SideConfig


class SubmitActionRequest(BaseModel):
    player_id: str
    action: BattleAction


class BattleStateResponse(BaseModel):
    battle_id: str
    view: PlayerView


class ValidActionsResponse(BaseModel):
    battle_id: str
    valid_actions: list[BattleAction]


class TeamInfoResponse(BaseModel):
    battle_id: str
    team: TeamView


class EventsResponse(BaseModel):
    battle_id: str
    turns: list[TurnRecord]


# --- Dependencies ---


def _get_service(request: Request) -> BattleService:
    """Service attached to the app, built from the environment on first use."""
    state = request.app.state
    if getattr(state, "service", None) is None:
        config = Config.from_env()
        state.service = BattleService(SqlSessionStore(config), config=config)
    return state.service


ServiceDep = Annotated[BattleService, Depends(_get_service)]


@app.exception_handler(BattleServiceError)
async def _battle_error_handler(request: Request, exc: BattleServiceError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_response())


# --- Catalogue Endpoints ---


@app.get("/health")
async def health():
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}


@app.get("/available_teams", response_model=list[PrefabTeamInfo])
def available_teams(service: ServiceDep):
    return service.available_teams()


@app.get("/npc_opponents", response_model=list[NpcOpponentInfo])
def npc_opponents(service: ServiceDep):
    return service.npc_opponents()


# --- Battle Endpoints ---


@app.post("/battles", response_model=CreateSessionResult, status_code=201)
def create_battle(body: CreateBattleRequest, service: ServiceDep):
    return service.create_npc_session(body.player_id, body.player_name, body.team_id, body.opponent_id)


@app.post("/battles/pvp", response_model=CreateSessionResult, status_code=201)
def create_pvp_battle(body: CreatePvpBattleRequest, service: ServiceDep):
    return service.create_session(body.side_a, body.side_b)


@app.post("/battles/{battle_id}/action", response_model=SubmitActionResult)
def submit_action(battle_id: str, body: SubmitActionRequest, service: ServiceDep):
    return service.submit_action(battle_id, body.player_id, body.action)


@app.get("/battles/{battle_id}/state", response_model=BattleStateResponse)
def get_battle_state(battle_id: str, player_id: str, service: ServiceDep):
    return BattleStateResponse(battle_id=battle_id, view=service.get_view(battle_id, player_id))


@app.get("/battles/{battle_id}/valid_actions", response_model=ValidActionsResponse)
def get_valid_actions(battle_id: str, player_id: str, service: ServiceDep):
    return ValidActionsResponse(
        battle_id=battle_id,
        valid_actions=service.get_valid_actions(battle_id, player_id),
    )


@app.get("/battles/{battle_id}/team_info", response_model=TeamInfoResponse)
def get_team_info(battle_id: str, player_id: str, service: ServiceDep):
    return TeamInfoResponse(battle_id=battle_id, team=service.get_team_info(battle_id, player_id))


@app.get("/battles/{battle_id}/events", response_model=EventsResponse)
def get_battle_events(
    battle_id: str,
    player_id: str,
    service: ServiceDep,
    last_turns: Annotated[int | None, Query(ge=0)] = None,
):
    return EventsResponse(
        battle_id=battle_id,
        turns=service.get_events(battle_id, player_id, last_turns),
    )
