"""Per-player projection of a battle.

A player sees everything about their own team and only the public face
of the opponent: the active Pokemon's name, species, level, HP, fainted
flag and status, plus bare counts. Bench identities, stats, moves and PP
of the opposing side never leave this module.
"""

from pydantic import BaseModel, Field

from pokebattle.core.battle import BattlePokemon, BattleSide, BattleState, Phase
from pokebattle.core.moves import StatusEffect
from pokebattle.core.validator import can_act
from pokebattle.errors import Unauthorized


class MoveView(BaseModel):
    name: str
    display_name: str
    type: str
    power: int | None = None
    accuracy: int | None = None
    pp: int
    max_pp: int


class StatBlock(BaseModel):
    hp: int
    atk: int
    defense: int
    spa: int
    spd: int
    spe: int


class PokemonDetailView(BaseModel):
    """Full detail, only ever shown to the owner."""

    name: str
    species: str
    types: list[str]
    level: int
    current_hp: int
    max_hp: int
    stats: StatBlock
    moves: list[MoveView] = Field(default_factory=list)
    status: StatusEffect = StatusEffect.NONE
    is_fainted: bool = False


class PokemonPublicView(BaseModel):
    """What the opponent can see of an active Pokemon."""

    name: str
    species: str
    level: int
    current_hp: int
    max_hp: int
    is_fainted: bool = False
    status: StatusEffect = StatusEffect.NONE


class TeamView(BaseModel):
    active_index: int
    pokemon: list[PokemonDetailView] = Field(default_factory=list)


class OpponentView(BaseModel):
    player_id: str
    trainer_name: str
    active_pokemon: PokemonPublicView | None = None
    team_size: int
    remaining_pokemon_count: int


class PlayerView(BaseModel):
    phase: Phase
    turn_number: int
    can_act: bool
    own_team: TeamView
    opponent: OpponentView


def _detail(mon: BattlePokemon) -> PokemonDetailView:
    return PokemonDetailView(
        name=mon.name,
        species=mon.species,
        types=mon.types,
        level=mon.level,
        current_hp=mon.current_hp,
        max_hp=mon.max_hp,
        stats=StatBlock(
            hp=mon.max_hp, atk=mon.atk, defense=mon.defense, spa=mon.spa, spd=mon.spd, spe=mon.spe,
        ),
        moves=[
            MoveView(
                name=m.name,
                display_name=m.display_name,
                type=m.type,
                power=m.power,
                accuracy=m.accuracy,
                pp=m.current_pp if m.current_pp is not None else m.pp,
                max_pp=m.max_pp,
            )
            for m in mon.moves
        ],
        status=mon.status,
        is_fainted=mon.is_fainted,
    )


def _public(mon: BattlePokemon) -> PokemonPublicView:
    return PokemonPublicView(
        name=mon.name,
        species=mon.species,
        level=mon.level,
        current_hp=mon.current_hp,
        max_hp=mon.max_hp,
        is_fainted=mon.is_fainted,
        status=mon.status,
    )


def _team_view(side: BattleSide) -> TeamView:
    return TeamView(active_index=side.active_index, pokemon=[_detail(p) for p in side.roster])


def _opponent_view(side: BattleSide) -> OpponentView:
    active = side.active_pokemon
    return OpponentView(
        player_id=side.player_id,
        trainer_name=side.trainer_name,
        active_pokemon=_public(active) if active else None,
        team_size=len(side.roster),
        # Includes the active Pokemon when it is still standing
        remaining_pokemon_count=side.alive_count,
    )


def _require_side(state: BattleState, player_id: str) -> int:
    idx = state.side_index(player_id)
    if idx is None:
        raise Unauthorized(player_id)
    return idx


def project_team(state: BattleState, player_id: str) -> TeamView:
    """Full view of the requester's own team."""
    idx = _require_side(state, player_id)
    return _team_view(state.sides[idx])


def project_view(state: BattleState, player_id: str) -> PlayerView:
    """Build what ``player_id`` is allowed to see. Raises Unauthorized for strangers."""
    idx = _require_side(state, player_id)
    return PlayerView(
        phase=state.phase,
        turn_number=state.turn_number,
        can_act=can_act(state.phase, idx, state.pending[idx]),
        own_team=_team_view(state.sides[idx]),
        opponent=_opponent_view(state.sides[1 - idx]),
    )
