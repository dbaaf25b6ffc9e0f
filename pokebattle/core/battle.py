"""Battle-state value types.

The resolution engine owns these models; the rest of the service only
reads the phase, the turn number, the per-side pending-action slots and
the rosters. Everything here is plain pydantic so a whole battle can be
dumped to JSON, stored, loaded and advanced again.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

from pokebattle.core.moves import Move, StatusEffect, get_nature_multiplier
from pokebattle.core.species import Species


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class Phase(str, Enum):
    """Where the battle is waiting."""

    AWAITING_BOTH_ACTIONS = "awaiting_both_actions"
    AWAITING_SIDE0_REPLACEMENT = "awaiting_side0_replacement"
    AWAITING_SIDE1_REPLACEMENT = "awaiting_side1_replacement"
    AWAITING_BOTH_REPLACEMENTS = "awaiting_both_replacements"
    SIDE0_VICTORY = "side0_victory"
    SIDE1_VICTORY = "side1_victory"
    DRAW = "draw"

    @property
    def is_terminal(self) -> bool:
        return self in (Phase.SIDE0_VICTORY, Phase.SIDE1_VICTORY, Phase.DRAW)

    @property
    def replacement_side(self) -> int | None:
        """Side index for a single-side replacement phase, else None."""
        if self is Phase.AWAITING_SIDE0_REPLACEMENT:
            return 0
        if self is Phase.AWAITING_SIDE1_REPLACEMENT:
            return 1
        return None

    @property
    def winner_side(self) -> int | None:
        if self is Phase.SIDE0_VICTORY:
            return 0
        if self is Phase.SIDE1_VICTORY:
            return 1
        return None

    @classmethod
    def awaiting_replacement(cls, side: int) -> Phase:
        return cls.AWAITING_SIDE0_REPLACEMENT if side == 0 else cls.AWAITING_SIDE1_REPLACEMENT

    @classmethod
    def victory(cls, side: int) -> Phase:
        return cls.SIDE0_VICTORY if side == 0 else cls.SIDE1_VICTORY


class ActionKind(str, Enum):
    """Types of actions a participant can submit."""

    USE_MOVE = "use_move"
    SWITCH = "switch"
    FORFEIT = "forfeit"


# ---------------------------------------------------------------------------
# Supporting models
# ---------------------------------------------------------------------------

class BattleAction(BaseModel):
    """An action submitted by one side.

    Two actions compare equal when kind and indices match, which is what
    the legality check (``action in legal_actions``) relies on.
    """

    kind: ActionKind
    move_index: int | None = None  # Index into the active Pokemon's moves (0-3)
    switch_to: int | None = None  # Index into the side's roster

    @property
    def is_switch(self) -> bool:
        return self.kind == ActionKind.SWITCH

    @classmethod
    def use_move(cls, move_index: int) -> BattleAction:
        return cls(kind=ActionKind.USE_MOVE, move_index=move_index)

    @classmethod
    def switch(cls, switch_to: int) -> BattleAction:
        return cls(kind=ActionKind.SWITCH, switch_to=switch_to)

    @classmethod
    def forfeit(cls) -> BattleAction:
        return cls(kind=ActionKind.FORFEIT)

    def describe(self) -> str:
        if self.kind == ActionKind.USE_MOVE:
            return f"use move {self.move_index}"
        if self.kind == ActionKind.SWITCH:
            return f"switch to {self.switch_to}"
        return "forfeit"


class BattlePokemon(BaseModel):
    """A Pokemon prepared for battle with runtime HP and move PP tracking."""

    # Identity
    name: str
    species: str

    # Types
    type1: str
    type2: str | None = None

    # Calculated stats (frozen at battle start)
    max_hp: int
    current_hp: int
    atk: int
    defense: int  # 'def' is a Python keyword
    spa: int
    spd: int
    spe: int

    level: int = 50
    nature: str = "hardy"

    moves: list[Move] = Field(default_factory=list)

    # Status
    status: StatusEffect = StatusEffect.NONE
    status_turns: int = 0  # Sleep turns left, or toxic counter
    is_fainted: bool = False

    # Flags for turn resolution
    is_protected: bool = False
    charging_move: int | None = None  # Move index being charged, struck next turn

    @property
    def types(self) -> list[str]:
        t = [self.type1]
        if self.type2:
            t.append(self.type2)
        return t

    def take_damage(self, amount: int) -> int:
        """Apply damage, return actual amount dealt. Clamps to 0."""
        actual = min(amount, self.current_hp)
        self.current_hp -= actual
        if self.current_hp <= 0:
            self.current_hp = 0
            self.is_fainted = True
            self.charging_move = None
        return actual

    def heal(self, amount: int) -> int:
        """Heal HP, return actual amount healed. Clamps to max_hp."""
        if self.is_fainted:
            return 0
        actual = min(amount, self.max_hp - self.current_hp)
        self.current_hp += actual
        return actual


class BattleSide(BaseModel):
    """One participant's side of the field."""

    player_id: str
    trainer_name: str = ""
    is_npc: bool = False
    roster: list[BattlePokemon] = Field(default_factory=list)
    active_index: int = 0

    @property
    def active_pokemon(self) -> BattlePokemon | None:
        if 0 <= self.active_index < len(self.roster):
            return self.roster[self.active_index]
        return None

    @property
    def has_usable_pokemon(self) -> bool:
        return any(not p.is_fainted for p in self.roster)

    @property
    def alive_count(self) -> int:
        return sum(1 for p in self.roster if not p.is_fainted)

    @property
    def needs_replacement(self) -> bool:
        active = self.active_pokemon
        return active is not None and active.is_fainted and self.has_usable_pokemon

    def switch_targets(self) -> list[int]:
        """Roster indices this side may switch to."""
        return [i for i, p in enumerate(self.roster) if i != self.active_index and not p.is_fainted]


# ---------------------------------------------------------------------------
# Main battle state
# ---------------------------------------------------------------------------

class BattleState(BaseModel):
    """The complete state of one battle.

    ``pending`` holds the action each side has committed for the current
    decision point; the engine clears both slots when it resolves.
    """

    sides: list[BattleSide]
    phase: Phase = Phase.AWAITING_BOTH_ACTIONS
    turn_number: int = 1
    pending: list[BattleAction | None] = Field(default_factory=lambda: [None, None])

    def side_index(self, player_id: str) -> int | None:
        for i, side in enumerate(self.sides):
            if side.player_id == player_id:
                return i
        return None

    def clear_pending(self) -> None:
        self.pending = [None, None]


# ---------------------------------------------------------------------------
# Battle Pokemon factory
# ---------------------------------------------------------------------------

def create_battle_pokemon(
    species: Species,
    level: int,
    moves: list[Move],
    nickname: str | None = None,
    nature: str = "hardy",
    ivs: dict[str, int] | None = None,
    evs: dict[str, int] | None = None,
) -> BattlePokemon:
    """Create a BattlePokemon snapshot with all stats frozen at ``level``."""
    ivs = ivs or {}
    evs = evs or {}

    def calc_stat(stat_name: str) -> int:
        base = species.base_stats.get(stat_name, 50)
        iv = ivs.get(stat_name, 0)
        ev = evs.get(stat_name, 0)
        nature_mult = get_nature_multiplier(nature, stat_name)
        if stat_name == "hp":
            return int((2 * base + iv + ev // 4) * level / 100) + level + 10
        else:
            return max(1, int(((2 * base + iv + ev // 4) * level / 100 + 5) * nature_mult))

    hp = calc_stat("hp")

    for m in moves:
        m.current_pp = m.pp

    return BattlePokemon(
        name=nickname or species.display_name,
        species=species.name,
        type1=species.type1,
        type2=species.type2,
        max_hp=hp,
        current_hp=hp,
        atk=calc_stat("atk"),
        defense=calc_stat("def"),
        spa=calc_stat("spa"),
        spd=calc_stat("spd"),
        spe=calc_stat("spe"),
        level=level,
        nature=nature,
        moves=moves,
    )
