"""Primitive battle events and their human-readable rendering.

The engine emits structured ``BattleEvent`` objects; ``format_event``
turns each one into a single line of battle text. Some events carry no
text (neutral effectiveness); those format to an empty string and are
dropped from the turn log.
"""

from enum import Enum

from pydantic import BaseModel

from pokebattle.core.moves import StatusEffect


class EventKind(str, Enum):
    USED_MOVE = "used_move"
    CHARGING = "charging"
    STRUGGLE = "struggle"
    DAMAGE = "damage"
    CRITICAL = "critical"
    EFFECTIVENESS = "effectiveness"
    IMMUNE = "immune"
    MISS = "miss"
    PROTECTED = "protected"
    FAINTED = "fainted"
    SENT_OUT = "sent_out"
    SWITCHED = "switched"
    NO_EFFECT = "no_effect"
    STATUS_INFLICTED = "status_inflicted"
    ALREADY_AFFLICTED = "already_afflicted"
    STATUS_PREVENTED = "status_prevented"
    STATUS_CURED = "status_cured"
    STATUS_DAMAGE = "status_damage"
    HEALED = "healed"
    DRAINED = "drained"
    RECOIL = "recoil"
    RESTED = "rested"
    HP_FULL = "hp_full"
    FORFEIT = "forfeit"
    VICTORY = "victory"
    DRAW = "draw"


class BattleEvent(BaseModel):
    """A single thing that happened during resolution."""

    kind: EventKind
    side: int | None = None  # Side the subject belongs to
    trainer: str = ""
    pokemon: str = ""
    target: str = ""
    previous: str = ""  # Pokemon withdrawn by a switch
    move: str = ""
    amount: int = 0  # Damage dealt or HP restored
    multiplier: float = 1.0
    status: StatusEffect = StatusEffect.NONE


_STATUS_VERB = {
    StatusEffect.BURN: "burned",
    StatusEffect.FREEZE: "frozen solid",
    StatusEffect.PARALYSIS: "paralyzed",
    StatusEffect.POISON: "poisoned",
    StatusEffect.BADLY_POISONED: "badly poisoned",
    StatusEffect.SLEEP: "put to sleep",
}

_STATUS_PREVENTED = {
    StatusEffect.SLEEP: "{pokemon} is fast asleep!",
    StatusEffect.FREEZE: "{pokemon} is frozen solid!",
    StatusEffect.PARALYSIS: "{pokemon} is paralyzed and can't move!",
}

_STATUS_CURED = {
    StatusEffect.SLEEP: "{pokemon} woke up!",
    StatusEffect.FREEZE: "{pokemon} thawed out!",
}

_STATUS_DAMAGE = {
    StatusEffect.BURN: "{pokemon} was hurt by its burn!",
    StatusEffect.POISON: "{pokemon} was hurt by poison!",
    StatusEffect.BADLY_POISONED: "{pokemon} was badly hurt by poison!",
}


def _effectiveness_text(multiplier: float) -> str:
    if multiplier == 0:
        return ""
    if multiplier > 1.0:
        return "It's super effective!"
    if multiplier < 1.0:
        return "It's not very effective..."
    return ""


def format_event(event: BattleEvent) -> str:
    """Render one event as a line of battle text ("" for silent events)."""
    e = event
    kind = e.kind

    if kind == EventKind.USED_MOVE:
        return f"{e.pokemon} used {e.move}!"
    if kind == EventKind.CHARGING:
        return f"{e.pokemon} is charging up {e.move}!"
    if kind == EventKind.STRUGGLE:
        return f"{e.pokemon} has no moves left!"
    if kind == EventKind.DAMAGE:
        return f"{e.target} took {e.amount} damage!"
    if kind == EventKind.CRITICAL:
        return "A critical hit!"
    if kind == EventKind.EFFECTIVENESS:
        return _effectiveness_text(e.multiplier)
    if kind == EventKind.IMMUNE:
        return f"It doesn't affect {e.target}..."
    if kind == EventKind.MISS:
        return f"{e.pokemon}'s attack missed!"
    if kind == EventKind.PROTECTED:
        return f"{e.pokemon} protected itself!"
    if kind == EventKind.FAINTED:
        return f"{e.pokemon} fainted!"
    if kind == EventKind.SENT_OUT:
        return f"{e.trainer} sent out {e.pokemon}!"
    if kind == EventKind.SWITCHED:
        return f"{e.trainer} withdrew {e.previous} and sent out {e.pokemon}!"
    if kind == EventKind.NO_EFFECT:
        return "But nothing happened!"
    if kind == EventKind.STATUS_INFLICTED:
        return f"{e.target} was {_STATUS_VERB.get(e.status, 'afflicted')}!"
    if kind == EventKind.ALREADY_AFFLICTED:
        return f"But {e.target} is already afflicted..."
    if kind == EventKind.STATUS_PREVENTED:
        return _STATUS_PREVENTED.get(e.status, "{pokemon} can't move!").format(pokemon=e.pokemon)
    if kind == EventKind.STATUS_CURED:
        return _STATUS_CURED.get(e.status, "{pokemon} recovered!").format(pokemon=e.pokemon)
    if kind == EventKind.STATUS_DAMAGE:
        line = _STATUS_DAMAGE.get(e.status, "{pokemon} was hurt!").format(pokemon=e.pokemon)
        return f"{line} (-{e.amount} HP)"
    if kind == EventKind.HEALED:
        return f"{e.pokemon} recovered {e.amount} HP!"
    if kind == EventKind.DRAINED:
        return f"{e.pokemon} drained {e.amount} HP!"
    if kind == EventKind.RECOIL:
        return f"{e.pokemon} took {e.amount} recoil damage!"
    if kind == EventKind.RESTED:
        return f"{e.pokemon} went to sleep and restored HP!"
    if kind == EventKind.HP_FULL:
        return f"{e.pokemon}'s HP is already full!"
    if kind == EventKind.FORFEIT:
        return f"{e.trainer} forfeited the battle!"
    if kind == EventKind.VICTORY:
        return f"{e.trainer} wins the battle!"
    if kind == EventKind.DRAW:
        return "Both sides are out of usable Pokemon. It's a draw!"
    return ""
