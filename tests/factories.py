"""Builders for battle states and roster configs used across the tests."""

from pokebattle.core.battle import BattlePokemon, BattleSide, BattleState
from pokebattle.core.moves import get_move
from pokebattle.core.teams import PokemonConfig, SideConfig


def make_pokemon(
    name="Pikachu",
    species="pikachu",
    type1="electric",
    type2=None,
    hp=100,
    atk=55,
    defense=40,
    spa=50,
    spd=50,
    spe=90,
    level=50,
    moves=("tackle", "thunderbolt"),
) -> BattlePokemon:
    return BattlePokemon(
        name=name,
        species=species,
        type1=type1,
        type2=type2,
        max_hp=hp,
        current_hp=hp,
        atk=atk,
        defense=defense,
        spa=spa,
        spd=spd,
        spe=spe,
        level=level,
        moves=[get_move(m) for m in moves],
    )


def make_side(roster=None, player_id="ash", trainer_name="Ash", is_npc=False) -> BattleSide:
    if roster is None:
        roster = [make_pokemon()]
    return BattleSide(player_id=player_id, trainer_name=trainer_name, is_npc=is_npc, roster=roster)


def make_state(side0=None, side1=None) -> BattleState:
    """Two-sided battle waiting for both actions on turn 1."""
    s0 = side0 or make_side()
    s1 = side1 or make_side(
        roster=[make_pokemon(name="Charmander", species="charmander", type1="fire", spe=65,
                             moves=("tackle", "ember"))],
        player_id="gary",
        trainer_name="Gary",
    )
    return BattleState(sides=[s0, s1])


def side_config(player_id, *entries, trainer_name="", is_npc=False) -> SideConfig:
    """SideConfig from (species, level, moves) tuples."""
    return SideConfig(
        player_id=player_id,
        trainer_name=trainer_name or player_id.capitalize(),
        is_npc=is_npc,
        team=[PokemonConfig(species=s, level=lv, moves=list(mv)) for s, lv, mv in entries],
    )
