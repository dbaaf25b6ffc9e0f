"""Tests for per-player projections."""

import pytest

from pokebattle.core.battle import BattleAction, Phase
from pokebattle.core.moves import StatusEffect
from pokebattle.core.view import project_team, project_view
from pokebattle.errors import Unauthorized
from tests.factories import make_pokemon, make_side, make_state


def _state():
    side1 = make_side(
        roster=[make_pokemon(name="Charmander", type1="fire"), make_pokemon(name="Vulpix", type1="fire")],
        player_id="gary",
        trainer_name="Gary",
    )
    return make_state(side1=side1)


class TestProjectView:
    def test_own_team_in_full(self):
        view = project_view(_state(), "ash")
        mon = view.own_team.pokemon[0]
        assert mon.name == "Pikachu"
        assert mon.stats.spe == 90
        assert [m.name for m in mon.moves] == ["tackle", "thunderbolt"]
        assert mon.moves[1].pp == mon.moves[1].max_pp == 15

    def test_opponent_public_only(self):
        view = project_view(_state(), "ash")
        opp = view.opponent
        assert opp.trainer_name == "Gary"
        assert opp.active_pokemon.name == "Charmander"
        assert opp.team_size == 2
        assert opp.remaining_pokemon_count == 2
        assert "Vulpix" not in opp.model_dump_json()

    def test_opponent_status_and_hp_visible(self):
        state = _state()
        state.sides[1].roster[0].status = StatusEffect.BURN
        state.sides[1].roster[0].current_hp = 40
        active = project_view(state, "ash").opponent.active_pokemon
        assert active.status == StatusEffect.BURN
        assert active.current_hp == 40

    def test_remaining_count_drops_on_faint(self):
        state = _state()
        state.sides[1].roster[0].take_damage(999)
        state.phase = Phase.AWAITING_SIDE1_REPLACEMENT
        view = project_view(state, "ash")
        assert view.opponent.remaining_pokemon_count == 1
        assert view.opponent.active_pokemon.is_fainted
        assert not view.can_act
        assert project_view(state, "gary").can_act

    def test_can_act_tracks_pending_slot(self):
        state = _state()
        state.pending[1] = BattleAction.use_move(0)
        assert project_view(state, "ash").can_act
        assert not project_view(state, "gary").can_act

    def test_stranger_rejected(self):
        with pytest.raises(Unauthorized):
            project_view(_state(), "brock")


class TestProjectTeam:
    def test_team(self):
        team = project_team(_state(), "gary")
        assert team.active_index == 0
        assert [p.name for p in team.pokemon] == ["Charmander", "Vulpix"]

    def test_stranger_rejected(self):
        with pytest.raises(Unauthorized):
            project_team(_state(), "brock")
