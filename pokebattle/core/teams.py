"""Roster configuration, prefab teams and the NPC opponent catalogue."""

from pydantic import BaseModel, Field

from pokebattle.core.battle import BattleSide, create_battle_pokemon
from pokebattle.core.moves import get_move
from pokebattle.core.species import get_species
from pokebattle.errors import ValidationError

MAX_TEAM_SIZE = 6
MIN_LEVEL = 1
MAX_LEVEL = 100
MAX_MOVES = 4


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------

class PokemonConfig(BaseModel):
    """One roster entry as submitted by a client."""

    species: str
    level: int = 50
    moves: list[str] = Field(default_factory=list)
    nickname: str | None = None
    nature: str = "hardy"


class SideConfig(BaseModel):
    """One participant of a new battle."""

    player_id: str
    trainer_name: str = ""
    is_npc: bool = False
    team: list[PokemonConfig] = Field(default_factory=list)


def validate_team(team: list[PokemonConfig]) -> None:
    """Raise ValidationError unless the roster is 1-6 known species at level 1-100 with 1-4 known moves."""
    if not team:
        raise ValidationError("Team cannot be empty")
    if len(team) > MAX_TEAM_SIZE:
        raise ValidationError(f"Team cannot have more than {MAX_TEAM_SIZE} Pokemon")

    for entry in team:
        if entry.level < MIN_LEVEL or entry.level > MAX_LEVEL:
            raise ValidationError(f"Invalid level {entry.level} for {entry.species}")
        if get_species(entry.species) is None:
            raise ValidationError(f"Species data not found for {entry.species}")
        if not entry.moves or len(entry.moves) > MAX_MOVES:
            raise ValidationError(f"Pokemon must have 1-{MAX_MOVES} moves")
        for name in entry.moves:
            if get_move(name) is None:
                raise ValidationError(f"Unknown move {name} for {entry.species}")


def build_side(config: SideConfig) -> BattleSide:
    """Turn a validated SideConfig into a fresh BattleSide."""
    validate_team(config.team)
    roster = [
        create_battle_pokemon(
            species=get_species(entry.species),
            level=entry.level,
            moves=[get_move(name) for name in entry.moves],
            nickname=entry.nickname,
            nature=entry.nature,
        )
        for entry in config.team
    ]
    return BattleSide(
        player_id=config.player_id,
        trainer_name=config.trainer_name or f"Player {config.player_id}",
        is_npc=config.is_npc,
        roster=roster,
    )


# ---------------------------------------------------------------------------
# Catalogues
# ---------------------------------------------------------------------------

class PrefabTeam(BaseModel):
    id: str
    name: str
    description: str
    pokemon: list[PokemonConfig]


class PrefabTeamInfo(BaseModel):
    id: str
    name: str
    description: str
    pokemon_count: int
    average_level: int


class NpcOpponent(BaseModel):
    id: str
    name: str
    description: str
    difficulty: str
    team: list[PokemonConfig]


class NpcOpponentInfo(BaseModel):
    id: str
    name: str
    description: str
    difficulty: str


def _mon(species: str, level: int, *moves: str) -> PokemonConfig:
    return PokemonConfig(species=species, level=level, moves=list(moves))


PREFAB_TEAMS: dict[str, PrefabTeam] = {
    t.id: t
    for t in [
        PrefabTeam(
            id="venusaur_team",
            name="Venusaur Team",
            description="Grass starter backed by solid coverage",
            pokemon=[
                _mon("venusaur", 50, "solar-beam", "sludge-bomb", "giga-drain", "body-slam"),
                _mon("pidgeotto", 48, "wing-attack", "quick-attack", "sky-attack", "tackle"),
                _mon("sandslash", 48, "earthquake", "rock-slide", "iron-tail", "body-slam"),
            ],
        ),
        PrefabTeam(
            id="charizard_team",
            name="Charizard Team",
            description="Fast fire offense",
            pokemon=[
                _mon("charizard", 50, "flamethrower", "wing-attack", "dragon-claw", "fire-blast"),
                _mon("raichu", 48, "thunderbolt", "quick-attack", "iron-tail", "thunder-wave"),
                _mon("machamp", 48, "karate-chop", "brick-break", "rock-slide", "body-slam"),
            ],
        ),
        PrefabTeam(
            id="blastoise_team",
            name="Blastoise Team",
            description="Bulky water core with status support",
            pokemon=[
                _mon("blastoise", 50, "surf", "ice-beam", "skull-bash", "bite"),
                _mon("alakazam", 48, "psychic", "confusion", "recover", "thunder-wave"),
                _mon("snorlax", 48, "body-slam", "rest", "earthquake", "double-edge"),
            ],
        ),
    ]
}


NPC_OPPONENTS: dict[str, NpcOpponent] = {
    o.id: o
    for o in [
        NpcOpponent(
            id="gym_leader_easy",
            name="Gym Leader Brock",
            description="Rock-type specialist with defensive strategies",
            difficulty="easy",
            team=[
                _mon("geodude", 40, "rock-throw", "tackle", "earthquake"),
                _mon("onix", 42, "rock-slide", "dig", "body-slam"),
            ],
        ),
        NpcOpponent(
            id="gym_leader_medium",
            name="Gym Leader Misty",
            description="Water-type master with balanced offense and control",
            difficulty="medium",
            team=[
                _mon("staryu", 45, "water-gun", "confusion", "recover"),
                _mon("psyduck", 45, "surf", "confusion", "ice-beam"),
                _mon("starmie", 48, "surf", "psychic", "ice-beam", "thunderbolt"),
            ],
        ),
        NpcOpponent(
            id="gym_leader_hard",
            name="Gym Leader Lt. Surge",
            description="Electric-type powerhouse with aggressive tactics",
            difficulty="hard",
            team=[
                _mon("voltorb", 50, "thunderbolt", "thunder-wave", "tackle"),
                _mon("magnemite", 50, "thunderbolt", "thunder-shock", "iron-tail"),
                _mon("electrode", 52, "thunderbolt", "quick-attack", "body-slam"),
                _mon("raichu", 55, "thunderbolt", "quick-attack", "iron-tail", "brick-break"),
            ],
        ),
    ]
}


def get_prefab_team(team_id: str) -> PrefabTeam | None:
    return PREFAB_TEAMS.get(team_id)


def get_npc_opponent(opponent_id: str) -> NpcOpponent | None:
    return NPC_OPPONENTS.get(opponent_id)


def available_teams() -> list[PrefabTeamInfo]:
    return [
        PrefabTeamInfo(
            id=t.id,
            name=t.name,
            description=t.description,
            pokemon_count=len(t.pokemon),
            average_level=sum(p.level for p in t.pokemon) // len(t.pokemon),
        )
        for t in PREFAB_TEAMS.values()
    ]


def npc_opponents() -> list[NpcOpponentInfo]:
    return [
        NpcOpponentInfo(id=o.id, name=o.name, description=o.description, difficulty=o.difficulty)
        for o in NPC_OPPONENTS.values()
    ]
