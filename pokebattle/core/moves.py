"""Move model, type effectiveness chart, damage formula and the move catalogue."""

import random
from enum import Enum

from pydantic import BaseModel, Field


class PokemonType(str, Enum):
    """All 18 Pokemon types."""

    NORMAL = "normal"
    FIRE = "fire"
    WATER = "water"
    ELECTRIC = "electric"
    GRASS = "grass"
    ICE = "ice"
    FIGHTING = "fighting"
    POISON = "poison"
    GROUND = "ground"
    FLYING = "flying"
    PSYCHIC = "psychic"
    BUG = "bug"
    ROCK = "rock"
    GHOST = "ghost"
    DRAGON = "dragon"
    DARK = "dark"
    STEEL = "steel"
    FAIRY = "fairy"


class DamageClass(str, Enum):
    """Move damage classification."""

    PHYSICAL = "physical"
    SPECIAL = "special"
    STATUS = "status"


class StatusEffect(str, Enum):
    """Non-volatile status conditions."""

    NONE = "none"
    BURN = "burn"
    FREEZE = "freeze"
    PARALYSIS = "paralysis"
    POISON = "poison"
    BADLY_POISONED = "badly_poisoned"
    SLEEP = "sleep"


# Nature stat modifiers: nature -> (boosted_stat, lowered_stat)
NATURE_MODIFIERS: dict[str, tuple[str | None, str | None]] = {
    "hardy": (None, None), "docile": (None, None), "serious": (None, None),
    "bashful": (None, None), "quirky": (None, None),
    "lonely": ("atk", "def"), "brave": ("atk", "spe"),
    "adamant": ("atk", "spa"), "naughty": ("atk", "spd"),
    "bold": ("def", "atk"), "relaxed": ("def", "spe"),
    "impish": ("def", "spa"), "lax": ("def", "spd"),
    "timid": ("spe", "atk"), "hasty": ("spe", "def"),
    "jolly": ("spe", "spa"), "naive": ("spe", "spd"),
    "modest": ("spa", "atk"), "mild": ("spa", "def"),
    "quiet": ("spa", "spe"), "rash": ("spa", "spd"),
    "calm": ("spd", "atk"), "gentle": ("spd", "def"),
    "sassy": ("spd", "spe"), "careful": ("spd", "spa"),
}


def get_nature_multiplier(nature: str, stat: str) -> float:
    """Return the nature multiplier for a given stat (1.0, 1.1, or 0.9)."""
    boosted, lowered = NATURE_MODIFIERS.get(nature, (None, None))
    if stat == boosted:
        return 1.1
    if stat == lowered:
        return 0.9
    return 1.0


# ---------------------------------------------------------------------------
# Type effectiveness chart
# ---------------------------------------------------------------------------
# TYPE_CHART[attacking_type][defending_type] = multiplier
# ---------------------------------------------------------------------------

_ALL_TYPES = [t.value for t in PokemonType]

# fmt: off
_SUPER_EFFECTIVE: dict[str, tuple[str, ...]] = {
    "fire": ("grass", "ice", "bug", "steel"),
    "water": ("fire", "ground", "rock"),
    "electric": ("water", "flying"),
    "grass": ("water", "ground", "rock"),
    "ice": ("grass", "ground", "flying", "dragon"),
    "fighting": ("normal", "ice", "rock", "dark", "steel"),
    "poison": ("grass", "fairy"),
    "ground": ("fire", "electric", "poison", "rock", "steel"),
    "flying": ("grass", "fighting", "bug"),
    "psychic": ("fighting", "poison"),
    "bug": ("grass", "psychic", "dark"),
    "rock": ("fire", "ice", "flying", "bug"),
    "ghost": ("psychic", "ghost"),
    "dragon": ("dragon",),
    "dark": ("psychic", "ghost"),
    "steel": ("ice", "rock", "fairy"),
    "fairy": ("fighting", "dragon", "dark"),
}

_NOT_VERY_EFFECTIVE: dict[str, tuple[str, ...]] = {
    "normal": ("rock", "steel"),
    "fire": ("fire", "water", "rock", "dragon"),
    "water": ("water", "grass", "dragon"),
    "electric": ("electric", "grass", "dragon"),
    "grass": ("fire", "grass", "poison", "flying", "bug", "dragon", "steel"),
    "ice": ("fire", "water", "ice", "steel"),
    "fighting": ("poison", "flying", "psychic", "bug", "fairy"),
    "poison": ("poison", "ground", "rock", "ghost"),
    "ground": ("grass", "bug"),
    "flying": ("electric", "rock", "steel"),
    "psychic": ("psychic", "steel"),
    "bug": ("fire", "fighting", "poison", "flying", "ghost", "steel", "fairy"),
    "rock": ("fighting", "ground", "steel"),
    "ghost": ("dark",),
    "dragon": ("steel",),
    "dark": ("fighting", "dark", "fairy"),
    "steel": ("fire", "water", "electric", "steel"),
    "fairy": ("fire", "poison", "steel"),
}

_IMMUNE: dict[str, tuple[str, ...]] = {
    "normal": ("ghost",),
    "electric": ("ground",),
    "fighting": ("ghost",),
    "poison": ("steel",),
    "ground": ("flying",),
    "psychic": ("dark",),
    "ghost": ("normal",),
    "dragon": ("fairy",),
}
# fmt: on

TYPE_CHART: dict[str, dict[str, float]] = {a: {d: 1.0 for d in _ALL_TYPES} for a in _ALL_TYPES}

for _table, _mult in ((_SUPER_EFFECTIVE, 2.0), (_NOT_VERY_EFFECTIVE, 0.5), (_IMMUNE, 0.0)):
    for _atk, _defenders in _table.items():
        for _dfn in _defenders:
            TYPE_CHART[_atk][_dfn] = _mult


def get_type_effectiveness(move_type: str, defender_type1: str, defender_type2: str | None) -> float:
    """Combined multiplier against one or two defending types.

    Unknown types (e.g. Struggle's "typeless") are neutral.
    """
    row = TYPE_CHART.get(move_type.lower(), {})
    mult = row.get(defender_type1.lower(), 1.0)
    if defender_type2:
        mult *= row.get(defender_type2.lower(), 1.0)
    return mult


# ---------------------------------------------------------------------------
# Move model
# ---------------------------------------------------------------------------

class Move(BaseModel):
    """A move slot. ``current_pp`` is the live counter during a battle."""

    name: str
    display_name: str = ""
    type: str
    damage_class: DamageClass = DamageClass.PHYSICAL
    power: int | None = None  # None for status moves
    accuracy: int | None = None  # None means always hits
    pp: int = 20
    current_pp: int | None = None
    priority: int = 0

    status_effect: StatusEffect = StatusEffect.NONE
    effect_chance: int | None = None  # % chance of secondary status; None on status moves
    drain_percent: int = 0  # Positive = drain, negative = recoil
    healing_percent: int = 0
    charges: bool = False  # Two-turn move: charge first, strike next turn

    def model_post_init(self, __context) -> None:
        if not self.display_name:
            self.display_name = self.name.replace("-", " ").title()
        if self.current_pp is None:
            self.current_pp = self.pp

    @property
    def max_pp(self) -> int:
        return self.pp


STRUGGLE = Move(
    name="struggle", type="typeless", damage_class=DamageClass.PHYSICAL,
    power=50, accuracy=None, pp=1, drain_percent=-25,
)


# ---------------------------------------------------------------------------
# Damage calculation (Gen V+ formula)
# ---------------------------------------------------------------------------

def calculate_damage(
    attacker_level: int,
    move: Move,
    attack_stat: int,
    defense_stat: int,
    attacker_types: list[str],
    defender_type1: str,
    defender_type2: str | None = None,
    rng: random.Random | None = None,
    critical: bool = False,
) -> tuple[int, float, bool]:
    """Calculate damage using the Gen V+ damage formula.

    Returns (damage, effectiveness_multiplier, was_critical).

        base = (((2 * level / 5 + 2) * power * A / D) / 50) + 2
        damage = base * STAB * effectiveness * critical * random(0.85..1.0)
    """
    rng = rng or random.Random()
    if not move.power:
        return 0, 1.0, False

    is_crit = critical or rng.randint(1, 16) == 1
    base = (((2 * attacker_level / 5 + 2) * move.power * attack_stat / defense_stat) / 50) + 2
    stab = 1.5 if move.type.lower() in [t.lower() for t in attacker_types] else 1.0
    effectiveness = get_type_effectiveness(move.type, defender_type1, defender_type2)
    crit_mult = 1.5 if is_crit else 1.0
    modifier = stab * effectiveness * crit_mult * rng.uniform(0.85, 1.0)

    damage = max(1, int(base * modifier)) if effectiveness > 0 else 0
    return damage, effectiveness, is_crit


# ---------------------------------------------------------------------------
# Move catalogue
# ---------------------------------------------------------------------------
# (name, type, damage_class, power, accuracy, pp) plus optional overrides.
# ---------------------------------------------------------------------------

# fmt: off
_MOVE_TABLE: list[tuple[str, str, str, int | None, int | None, int, dict]] = [
    ("tackle", "normal", "physical", 40, 100, 35, {}),
    ("quick-attack", "normal", "physical", 40, 100, 30, {"priority": 1}),
    ("body-slam", "normal", "physical", 85, 100, 15,
        {"status_effect": StatusEffect.PARALYSIS, "effect_chance": 30}),
    ("double-edge", "normal", "physical", 120, 100, 15, {"drain_percent": -33}),
    ("hyper-beam", "normal", "special", 150, 90, 5, {}),
    ("skull-bash", "normal", "physical", 130, 100, 10, {"charges": True}),
    ("ember", "fire", "special", 40, 100, 25,
        {"status_effect": StatusEffect.BURN, "effect_chance": 10}),
    ("flamethrower", "fire", "special", 90, 100, 15,
        {"status_effect": StatusEffect.BURN, "effect_chance": 10}),
    ("fire-blast", "fire", "special", 110, 85, 5,
        {"status_effect": StatusEffect.BURN, "effect_chance": 10}),
    ("water-gun", "water", "special", 40, 100, 25, {}),
    ("surf", "water", "special", 90, 100, 15, {}),
    ("hydro-pump", "water", "special", 110, 80, 5, {}),
    ("thunder-shock", "electric", "special", 40, 100, 30,
        {"status_effect": StatusEffect.PARALYSIS, "effect_chance": 10}),
    ("thunderbolt", "electric", "special", 90, 100, 15,
        {"status_effect": StatusEffect.PARALYSIS, "effect_chance": 10}),
    ("vine-whip", "grass", "physical", 45, 100, 25, {}),
    ("razor-leaf", "grass", "physical", 55, 95, 25, {}),
    ("giga-drain", "grass", "special", 75, 100, 10, {"drain_percent": 50}),
    ("solar-beam", "grass", "special", 120, 100, 10, {"charges": True}),
    ("ice-beam", "ice", "special", 90, 100, 10,
        {"status_effect": StatusEffect.FREEZE, "effect_chance": 10}),
    ("karate-chop", "fighting", "physical", 50, 100, 25, {}),
    ("brick-break", "fighting", "physical", 75, 100, 15, {}),
    ("sludge-bomb", "poison", "special", 90, 100, 10,
        {"status_effect": StatusEffect.POISON, "effect_chance": 30}),
    ("earthquake", "ground", "physical", 100, 100, 10, {}),
    ("dig", "ground", "physical", 80, 100, 10, {"charges": True}),
    ("wing-attack", "flying", "physical", 60, 100, 35, {}),
    ("sky-attack", "flying", "physical", 140, 90, 5, {"charges": True}),
    ("confusion", "psychic", "special", 50, 100, 25, {}),
    ("psychic", "psychic", "special", 90, 100, 10, {}),
    ("bug-bite", "bug", "physical", 60, 100, 20, {}),
    ("rock-throw", "rock", "physical", 50, 90, 15, {}),
    ("rock-slide", "rock", "physical", 75, 90, 10, {}),
    ("shadow-ball", "ghost", "special", 80, 100, 15, {}),
    ("dragon-claw", "dragon", "physical", 80, 100, 15, {}),
    ("bite", "dark", "physical", 60, 100, 25, {}),
    ("iron-tail", "steel", "physical", 100, 75, 15, {}),
    ("moonblast", "fairy", "special", 95, 100, 15, {}),
    # Status moves
    ("splash", "normal", "status", None, None, 40, {}),
    ("protect", "normal", "status", None, None, 10, {"priority": 4}),
    ("rest", "psychic", "status", None, None, 10, {}),
    ("recover", "normal", "status", None, None, 10, {"healing_percent": 50}),
    ("thunder-wave", "electric", "status", None, 90, 20, {"status_effect": StatusEffect.PARALYSIS}),
    ("toxic", "poison", "status", None, 90, 10, {"status_effect": StatusEffect.BADLY_POISONED}),
    ("will-o-wisp", "fire", "status", None, 85, 15, {"status_effect": StatusEffect.BURN}),
    ("hypnosis", "psychic", "status", None, 60, 20, {"status_effect": StatusEffect.SLEEP}),
]
# fmt: on

MOVEDEX: dict[str, Move] = {
    name: Move(
        name=name,
        type=mtype,
        damage_class=DamageClass(dclass),
        power=power,
        accuracy=accuracy,
        pp=pp,
        **extra,
    )
    for name, mtype, dclass, power, accuracy, pp, extra in _MOVE_TABLE
}


def get_move(name: str) -> Move | None:
    """Return a fresh copy of a catalogue move (full PP), or None if unknown."""
    template = MOVEDEX.get(name.lower())
    if template is None:
        return None
    return template.model_copy(update={"current_pp": template.pp}, deep=True)

