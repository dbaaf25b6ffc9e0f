"""Phase-aware acceptance rules for submitted actions.

These checks only ask "may this side act now, and with this kind of
action?". Whether the specific move or switch target is legal is the
resolution engine's call and is checked afterwards.
"""

from pydantic import BaseModel

from pokebattle.core.battle import BattleAction, Phase


class Verdict(BaseModel):
    """Outcome of a phase check."""

    accepted: bool
    reason: str = ""
    battle_over: bool = False


_ACCEPT = Verdict(accepted=True)


def validate_action(
    phase: Phase,
    submitting_side: int,
    action: BattleAction,
    pending_action: BattleAction | None,
) -> Verdict:
    """Decide whether ``submitting_side`` may submit ``action`` in ``phase``.

    ``pending_action`` is the submitting side's own pending slot.
    """
    if phase.is_terminal:
        return Verdict(accepted=False, reason="Battle already concluded", battle_over=True)

    if phase == Phase.AWAITING_BOTH_ACTIONS:
        if pending_action is not None:
            return Verdict(accepted=False, reason="Player has already submitted an action for this turn")
        return _ACCEPT

    if phase == Phase.AWAITING_BOTH_REPLACEMENTS:
        if not action.is_switch:
            return Verdict(accepted=False, reason="Must switch Pokemon during replacement phase")
        return _ACCEPT

    side = phase.replacement_side
    if submitting_side != side:
        return Verdict(accepted=False, reason=f"Only side {side} can act during replacement phase")
    if not action.is_switch:
        return Verdict(accepted=False, reason="Must switch Pokemon during replacement phase")
    return _ACCEPT


def can_act(phase: Phase, side: int, pending_action: BattleAction | None) -> bool:
    """True iff ``side`` may submit something right now."""
    if phase == Phase.AWAITING_BOTH_ACTIONS:
        return pending_action is None
    if phase == Phase.AWAITING_BOTH_REPLACEMENTS:
        return True
    return phase.replacement_side == side
