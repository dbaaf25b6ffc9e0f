"""Species table used to build battle rosters.

Only what battle resolution needs is kept: types and base stats.
"""

from pydantic import BaseModel


class Species(BaseModel):
    """Static species data."""

    name: str
    type1: str
    type2: str | None = None
    base_stats: dict[str, int]

    @property
    def display_name(self) -> str:
        return self.name.replace("-", " ").title()


# (name, type1, type2, hp, atk, def, spa, spd, spe)
# fmt: off
_SPECIES_TABLE: list[tuple[str, str, str | None, int, int, int, int, int, int]] = [
    ("bulbasaur", "grass", "poison", 45, 49, 49, 65, 65, 45),
    ("ivysaur", "grass", "poison", 60, 62, 63, 80, 80, 60),
    ("venusaur", "grass", "poison", 80, 82, 83, 100, 100, 80),
    ("charmander", "fire", None, 39, 52, 43, 60, 50, 65),
    ("charmeleon", "fire", None, 58, 64, 58, 80, 65, 80),
    ("charizard", "fire", "flying", 78, 84, 78, 109, 85, 100),
    ("squirtle", "water", None, 44, 48, 65, 50, 64, 43),
    ("wartortle", "water", None, 59, 63, 80, 65, 80, 58),
    ("blastoise", "water", None, 79, 83, 100, 85, 105, 78),
    ("pidgeotto", "normal", "flying", 63, 60, 55, 50, 50, 71),
    ("pikachu", "electric", None, 35, 55, 40, 50, 50, 90),
    ("raichu", "electric", None, 60, 90, 55, 90, 80, 110),
    ("sandslash", "ground", None, 75, 100, 110, 45, 55, 65),
    ("clefairy", "fairy", None, 70, 45, 48, 60, 65, 35),
    ("vulpix", "fire", None, 38, 41, 40, 50, 65, 65),
    ("gloom", "grass", "poison", 60, 65, 70, 85, 75, 40),
    ("diglett", "ground", None, 10, 55, 25, 35, 45, 95),
    ("psyduck", "water", None, 50, 52, 48, 65, 50, 55),
    ("growlithe", "fire", None, 55, 70, 45, 70, 50, 60),
    ("poliwhirl", "water", None, 65, 65, 65, 50, 50, 90),
    ("abra", "psychic", None, 25, 20, 15, 105, 55, 90),
    ("alakazam", "psychic", None, 55, 50, 45, 135, 95, 120),
    ("machop", "fighting", None, 70, 80, 50, 35, 35, 35),
    ("machamp", "fighting", None, 90, 130, 80, 65, 85, 55),
    ("geodude", "rock", "ground", 40, 80, 100, 30, 30, 20),
    ("golem", "rock", "ground", 80, 120, 130, 55, 65, 45),
    ("ponyta", "fire", None, 50, 85, 55, 65, 65, 90),
    ("magnemite", "electric", "steel", 25, 35, 70, 95, 55, 45),
    ("gastly", "ghost", "poison", 30, 35, 30, 100, 35, 80),
    ("gengar", "ghost", "poison", 60, 65, 60, 130, 75, 110),
    ("onix", "rock", "ground", 35, 45, 160, 30, 45, 70),
    ("voltorb", "electric", None, 40, 30, 50, 55, 55, 100),
    ("electrode", "electric", None, 60, 50, 70, 80, 80, 150),
    ("staryu", "water", None, 30, 45, 55, 70, 55, 85),
    ("starmie", "water", "psychic", 60, 75, 85, 100, 85, 115),
    ("scyther", "bug", "flying", 70, 110, 80, 55, 80, 105),
    ("magikarp", "water", None, 20, 10, 55, 15, 20, 80),
    ("gyarados", "water", "flying", 95, 125, 79, 60, 100, 81),
    ("lapras", "water", "ice", 130, 85, 80, 85, 95, 60),
    ("eevee", "normal", None, 55, 55, 50, 45, 65, 55),
    ("snorlax", "normal", None, 160, 110, 65, 65, 110, 30),
    ("dragonite", "dragon", "flying", 91, 134, 95, 100, 100, 80),
    ("mewtwo", "psychic", None, 106, 110, 90, 154, 90, 130),
    ("umbreon", "dark", None, 95, 65, 110, 60, 130, 65),
    ("steelix", "steel", "ground", 75, 85, 200, 55, 65, 30),
]
# fmt: on

SPECIES: dict[str, Species] = {
    name: Species(
        name=name,
        type1=type1,
        type2=type2,
        base_stats={"hp": hp, "atk": atk, "def": dfn, "spa": spa, "spd": spd, "spe": spe},
    )
    for name, type1, type2, hp, atk, dfn, spa, spd, spe in _SPECIES_TABLE
}


def get_species(name: str) -> Species | None:
    return SPECIES.get(name.lower())
