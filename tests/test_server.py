"""Tests for the PokeBattle FastAPI server.

Uses an in-memory SQLite database behind the session store.
"""

import pytest
from fastapi.testclient import TestClient

from pokebattle.server import _get_service, app
from pokebattle.service import BattleService


# ---------------------------------------------------------------------------
# Service override
# ---------------------------------------------------------------------------


@pytest.fixture(name="client")
def client_fixture(sql_store, config, seed_source):
    """Return a TestClient whose service dependency uses the test store."""
    service = BattleService(sql_store, config=config, seed_source=seed_source)
    app.dependency_overrides[_get_service] = lambda: service
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _create_npc_battle(client: TestClient, team_id="charizard_team", opponent_id="gym_leader_easy"):
    return client.post(
        "/battles",
        json={"player_id": "ash", "player_name": "Ash", "team_id": team_id, "opponent_id": opponent_id},
    )


def _side(player_id, species, moves):
    return {
        "player_id": player_id,
        "trainer_name": player_id.capitalize(),
        "team": [{"species": species, "level": 50, "moves": moves}],
    }


def _create_pvp_battle(client: TestClient):
    resp = client.post(
        "/battles/pvp",
        json={
            "side_a": _side("ash", "pikachu", ["tackle", "thunderbolt"]),
            "side_b": _side("gary", "charmander", ["tackle", "ember"]),
        },
    )
    assert resp.status_code == 201
    return resp.json()["session_id"]


def _act(client, battle_id, player_id, action):
    return client.post(f"/battles/{battle_id}/action", json={"player_id": player_id, "action": action})


# ---------------------------------------------------------------------------
# Catalogue
# ---------------------------------------------------------------------------


class TestCatalogue:
    def test_health(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "ok"

    def test_available_teams(self, client):
        resp = client.get("/available_teams")
        assert resp.status_code == 200
        ids = [t["id"] for t in resp.json()]
        assert "charizard_team" in ids

    def test_npc_opponents(self, client):
        resp = client.get("/npc_opponents")
        assert resp.status_code == 200
        names = {o["id"]: o["name"] for o in resp.json()}
        assert names["gym_leader_medium"] == "Gym Leader Misty"


# ---------------------------------------------------------------------------
# Battles
# ---------------------------------------------------------------------------


class TestCreateBattle:
    def test_create_npc_battle(self, client):
        resp = _create_npc_battle(client)
        assert resp.status_code == 201
        data = resp.json()
        assert data["session_id"]
        assert data["view"]["phase"] == "awaiting_both_actions"
        assert data["view"]["turn_number"] == 1
        assert data["view"]["opponent"]["trainer_name"] == "Gym Leader Brock"

    def test_unknown_team(self, client):
        resp = _create_npc_battle(client, team_id="nope")
        assert resp.status_code == 400
        body = resp.json()
        assert body["error"] == "VALIDATION_ERROR"
        assert body["status_code"] == 400
        assert "Unknown team" in body["message"]

    def test_create_pvp_battle_invalid_team(self, client):
        resp = client.post(
            "/battles/pvp",
            json={"side_a": _side("ash", "pikachu", ["tackle"]), "side_b": _side("gary", "digimon", ["tackle"])},
        )
        assert resp.status_code == 400
        assert resp.json()["error"] == "VALIDATION_ERROR"


class TestBattleFlow:
    def test_pvp_turn(self, client):
        battle_id = _create_pvp_battle(client)

        resp = _act(client, battle_id, "ash", {"kind": "use_move", "move_index": 0})
        assert resp.status_code == 200
        assert resp.json()["battle_updated"] is False

        resp = _act(client, battle_id, "gary", {"kind": "use_move", "move_index": 0})
        assert resp.status_code == 200
        data = resp.json()
        assert data["success"] is True
        assert data["battle_updated"] is True
        assert data["events"]

        state = client.get(f"/battles/{battle_id}/state", params={"player_id": "ash"}).json()
        assert state["battle_id"] == battle_id
        assert state["view"]["turn_number"] == 2

        events = client.get(f"/battles/{battle_id}/events", params={"player_id": "gary"}).json()
        assert [t["turn_number"] for t in events["turns"]] == [1]

    def test_duplicate_action(self, client):
        battle_id = _create_pvp_battle(client)
        _act(client, battle_id, "ash", {"kind": "use_move", "move_index": 0})
        resp = _act(client, battle_id, "ash", {"kind": "use_move", "move_index": 1})
        assert resp.status_code == 400
        assert resp.json()["error"] == "INVALID_ACTION"

    def test_action_after_battle_over(self, client):
        battle_id = _create_npc_battle(client).json()["session_id"]
        resp = _act(client, battle_id, "ash", {"kind": "forfeit"})
        assert resp.json()["message"] == "Action processed successfully. The battle is over."

        resp = _act(client, battle_id, "ash", {"kind": "use_move", "move_index": 0})
        assert resp.status_code == 409
        assert resp.json()["error"] == "INVALID_BATTLE_STATE"

    def test_valid_actions(self, client):
        battle_id = _create_pvp_battle(client)
        resp = client.get(f"/battles/{battle_id}/valid_actions", params={"player_id": "ash"})
        assert resp.status_code == 200
        kinds = [a["kind"] for a in resp.json()["valid_actions"]]
        assert kinds == ["use_move", "use_move", "forfeit"]

    def test_team_info(self, client):
        battle_id = _create_pvp_battle(client)
        resp = client.get(f"/battles/{battle_id}/team_info", params={"player_id": "gary"})
        assert resp.status_code == 200
        assert resp.json()["team"]["pokemon"][0]["name"] == "Charmander"

    def test_events_last_turns(self, client):
        battle_id = _create_pvp_battle(client)
        for _ in range(2):
            _act(client, battle_id, "ash", {"kind": "use_move", "move_index": 0})
            _act(client, battle_id, "gary", {"kind": "use_move", "move_index": 0})
        resp = client.get(f"/battles/{battle_id}/events", params={"player_id": "ash", "last_turns": 1})
        assert [t["turn_number"] for t in resp.json()["turns"]] == [2]

    def test_negative_last_turns(self, client):
        battle_id = _create_pvp_battle(client)
        resp = client.get(f"/battles/{battle_id}/events", params={"player_id": "ash", "last_turns": -1})
        assert resp.status_code == 422


class TestErrors:
    def test_unknown_battle(self, client):
        resp = client.get("/battles/does-not-exist/state", params={"player_id": "ash"})
        assert resp.status_code == 404
        assert resp.json()["error"] == "BATTLE_NOT_FOUND"

    def test_non_participant(self, client):
        battle_id = _create_pvp_battle(client)
        resp = client.get(f"/battles/{battle_id}/state", params={"player_id": "brock"})
        assert resp.status_code == 403
        assert resp.json()["error"] == "PLAYER_NOT_AUTHORIZED"

    def test_player_id_required(self, client):
        battle_id = _create_pvp_battle(client)
        resp = client.get(f"/battles/{battle_id}/state")
        assert resp.status_code == 422
