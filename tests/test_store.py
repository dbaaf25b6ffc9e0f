"""Tests for the session stores: both must honour the same conditional-write contract."""

import pytest

from pokebattle.core.battle import BattleAction, Phase
from pokebattle.data.models import BattleSession, TurnRecord
from pokebattle.data.store import SessionStore, SqlSessionStore
from pokebattle.errors import StoreConflict
from tests.factories import make_state


@pytest.fixture(params=["memory", "sql"])
def store(request):
    return request.getfixturevalue(f"{request.param}_store")


def _session(**kwargs) -> BattleSession:
    return BattleSession(side_a_id="ash", side_b_id="gary", battle_state=make_state(), **kwargs)


class TestSessionModel:
    def test_append_turns_merges_tail(self):
        session = _session()
        session.append_turns([TurnRecord(turn_number=1, events=["a"])])
        session.append_turns([
            TurnRecord(turn_number=1, events=["b"]),
            TurnRecord(turn_number=2, events=["c"]),
        ])
        assert [t.turn_number for t in session.turn_log] == [1, 2]
        assert session.turn_log[0].events == ["a", "b"]

    def test_last_turns(self):
        session = _session()
        session.append_turns([TurnRecord(turn_number=n, events=[str(n)]) for n in (1, 2, 3)])
        assert [t.turn_number for t in session.last_turns()] == [1, 2, 3]
        assert [t.turn_number for t in session.last_turns(2)] == [2, 3]
        assert session.last_turns(10) == session.last_turns()
        assert session.last_turns(0) == []

    def test_has_player(self):
        session = _session()
        assert session.has_player("ash")
        assert not session.has_player("brock")


class TestSessionStore:
    def test_implements_protocol(self, store):
        assert isinstance(store, SessionStore)

    def test_create_and_get(self, store):
        session = _session()
        store.create(session)
        loaded = store.get(session.session_id)
        assert loaded is not None
        assert loaded.session_id == session.session_id
        assert loaded.battle_state == session.battle_state
        assert loaded.version == 0

    def test_get_missing(self, store):
        assert store.get("no-such-battle") is None

    def test_create_refuses_duplicate(self, store):
        session = _session()
        store.create(session)
        with pytest.raises(StoreConflict) as exc:
            store.create(session)
        assert exc.value.reason == "session already exists"

    def test_update_bumps_version(self, store):
        session = store.create(_session())
        session.battle_state.pending[0] = BattleAction.use_move(1)
        session.append_turns([TurnRecord(turn_number=1, events=["Pikachu used Tackle!"])])

        written = store.update(session)
        assert written.version == 1

        loaded = store.get(session.session_id)
        assert loaded.version == 1
        assert loaded.battle_state.pending[0] == BattleAction.use_move(1)
        assert loaded.turn_log[0].events == ["Pikachu used Tackle!"]

    def test_update_missing_session(self, store):
        with pytest.raises(StoreConflict) as exc:
            store.update(_session())
        assert exc.value.reason == "session does not exist"

    def test_stale_update_rejected(self, store):
        session = store.create(_session())
        first = store.get(session.session_id)
        second = store.get(session.session_id)

        first.battle_state.phase = Phase.SIDE0_VICTORY
        store.update(first)

        second.battle_state.phase = Phase.SIDE1_VICTORY
        with pytest.raises(StoreConflict) as exc:
            store.update(second)
        assert exc.value.reason == "session was modified concurrently"
        assert store.get(session.session_id).battle_state.phase == Phase.SIDE0_VICTORY


class TestMemorySessionStore:
    def test_returns_copies(self, memory_store):
        session = _session()
        memory_store.create(session)
        loaded = memory_store.get(session.session_id)
        loaded.battle_state.turn_number = 99
        assert memory_store.get(session.session_id).battle_state.turn_number == 1
        assert len(memory_store) == 1


class TestSqlSessionStore:
    def test_default_database_under_data_dir(self, config):
        store = SqlSessionStore(config)
        assert config.data_dir.exists()
        assert str(store.engine.url).endswith("battles.db")

    def test_survives_reopen(self, config):
        session = _session()
        SqlSessionStore(config).create(session)
        loaded = SqlSessionStore(config).get(session.session_id)
        assert loaded.side_b_id == "gary"
