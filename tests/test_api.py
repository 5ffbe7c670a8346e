"""
API tests for RackKeeper.

Each test builds its own app on an in-memory database so scorekeeping
sessions do not leak between tests.
"""

import pytest
from fastapi.testclient import TestClient

from rackkeeper.api.main import create_app
from rackkeeper.config import DEFAULT_CONFIG, _merge


@pytest.fixture
def client() -> TestClient:
    cfg = _merge(DEFAULT_CONFIG, {"database": {"url": "sqlite://"}})
    return TestClient(create_app(cfg))


def start(client: TestClient, game_type: str = "8ball", **extra) -> dict:
    payload = {"game_type": game_type, "player1_name": "Alice", "player2_name": "Bob", **extra}
    response = client.post("/match", json=payload)
    assert response.status_code == 201, response.text
    return response.json()["match"]


def test_health_check(client) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_no_match_yet(client) -> None:
    data = client.get("/match").json()
    assert data["status"] == "not_started"
    assert data["match"] is None


def test_eight_ball_match_flow(client) -> None:
    match = start(client, player1_target=2, player2_target=3, first_breaker=2)
    assert match["current_player"]["name"] == "Bob"

    turn = client.post("/match/end-turn").json()
    assert turn["match"]["current_player"]["name"] == "Alice"
    assert turn["match"]["current_inning"] == 2

    alice_id = match["player1"]["id"]
    client.post("/match/game-over", json={"winner_id": alice_id})
    final = client.post("/match/game-over", json={"winner_id": alice_id}).json()
    assert final["winner"]["name"] == "Alice"
    assert final["match"]["is_active"] is False

    state = client.get("/match").json()
    assert state["status"] == "completed"

    recent = client.get("/matches/recent").json()
    assert len(recent) == 1
    assert recent[0]["player1_score"] == 2

    quick = client.get(f"/matches/recent/{recent[0]['id']}/quick-start").json()
    assert quick == {"player1_name": "Alice", "player2_name": "Bob", "game_type": "8ball"}


def test_nine_ball_balls_and_turns(client) -> None:
    start(client, "9ball", player1_target=20, player2_target=20)
    assert client.post("/match/balls/0").json()["state"] == "pocketed"
    data = client.post("/match/balls/8").json()
    assert data["balls"][8] == "pocketed"

    turn = client.post("/match/end-turn").json()
    assert turn["points_earned"] == 3
    assert turn["rack_complete"] is True
    assert turn["match"]["player1_score"] == 3
    assert turn["match"]["current_player"]["name"] == "Alice"
    assert client.get("/match").json()["balls"] == ["on_table"] * 9


def test_dead_nine_ball_is_a_conflict(client) -> None:
    start(client, "9ball")
    client.post("/match/balls/8")
    client.post("/match/balls/8")
    response = client.post("/match/end-turn")
    assert response.status_code == 409
    assert "spotted" in response.json()["detail"]


def test_setup_errors(client) -> None:
    response = client.post(
        "/match", json={"game_type": "8ball", "player1_name": "Alice", "player2_name": " alice "}
    )
    assert response.status_code == 400

    start(client)
    response = client.post("/match/game-over", json={"winner_id": "nobody"})
    assert response.status_code == 400

    response = client.post("/match/balls/3")
    assert response.status_code == 200
    assert response.json()["state"] is None


def test_end_without_match_is_a_conflict(client) -> None:
    assert client.post("/match/end-turn").status_code == 409
    assert client.post("/match/end").status_code == 409


def test_cancel_and_clear(client) -> None:
    start(client, "9ball")
    state = client.delete("/match").json()
    assert state["status"] == "not_started"
    assert client.get("/matches/recent").json() == []

    start(client, "9ball")
    client.post("/match/end")
    assert len(client.get("/matches/recent").json()) == 1
    assert client.delete("/matches/recent").status_code == 204
    assert client.get("/matches/recent").json() == []


def test_quick_start_unknown_match(client) -> None:
    assert client.get("/matches/recent/nope/quick-start").status_code == 404


def test_sort_options(client) -> None:
    data = client.get("/stats/skillDifference/sort-options").json()
    assert data["default"] == "diff-asc"
    assert [o["value"] for o in data["options"]] == [
        "diff-asc", "diff-desc", "winrate-asc", "winrate-desc",
    ]
    assert client.get("/stats/bogus/sort-options").status_code == 422


def test_sort_stats(client) -> None:
    body = {
        "buckets": {
            "Jane": {"wins": 2, "losses": 1},
            "Sam": {"wins": 0, "losses": 0},
            "Lee": {"wins": 1, "losses": 3},
        },
        "mode": "winrate-desc",
    }
    data = client.post("/stats/headToHead/sort", json=body).json()
    assert data["label"] == "Win % ↓"
    assert data["next_mode"] == "name-asc"
    assert [e["key"] for e in data["entries"]] == ["Jane", "Lee", "Sam"]
    assert data["entries"][0]["win_percent"] == 67
    assert data["entries"][2]["win_percent"] is None


def test_sort_stats_falls_back_to_default_mode(client) -> None:
    body = {"buckets": {"5": {"wins": 1, "losses": 0}, "3": {"wins": 0, "losses": 1}}, "mode": "name-asc"}
    data = client.post("/stats/mySkill/sort", json=body).json()
    assert data["mode"] == "skill-asc"
    assert [e["key"] for e in data["entries"]] == ["3", "5"]


def test_skill_difference_entries_are_labelled(client) -> None:
    body = {
        "buckets": {
            "-2": {"wins": 1, "losses": 0},
            "0": {"wins": 1, "losses": 1},
            "odd": {"wins": 0, "losses": 1},
        }
    }
    data = client.post("/stats/skillDifference/sort", json=body).json()
    assert [e["label"] for e in data["entries"]] == [
        "Playing down 2 levels", "Same skill level", "odd",
    ]

    data = client.post("/stats/location/sort", json={"buckets": {"Hall": {"wins": 1, "losses": 0}}}).json()
    assert data["entries"][0]["label"] is None


def test_importing_the_api_builds_no_app() -> None:
    import rackkeeper.api.main as api_main

    assert not hasattr(api_main, "app")


def test_wrapped_promo_and_clear_all_data(client) -> None:
    assert client.get("/promo/wrapped").json() == {"viewed": False}
    assert client.post("/promo/wrapped/viewed").json() == {"viewed": True}
    assert client.get("/promo/wrapped").json() == {"viewed": True}

    start(client, "9ball")
    client.post("/match/end")
    client.app.state.stats.store_selected_player_index(1)

    assert client.delete("/data").status_code == 204
    assert client.get("/promo/wrapped").json() == {"viewed": False}
    assert client.get("/matches/recent").json() == []
    assert client.app.state.stats.get_stored_selected_player_index() == -1
