"""
Tests for the engine lifecycle: setup validation, cancellation, the bounded
recent-match history and best-effort persistence.
"""

import threading

import pytest
from sqlmodel import SQLModel

from rackkeeper.db.scorekeeper_storage import ScorekeeperStorage
from rackkeeper.db.store import KeyValueStore
from rackkeeper.engine.engine import Engine, MatchStatus
from rackkeeper.errors import InvalidSetupError, MatchNotActiveError
from rackkeeper.match import GameType, Player


def play_out(engine: Engine, name1: str, name2: str) -> str:
    p1, p2 = Player.create(name1), Player.create(name2)
    engine.create_match(GameType.EIGHT_BALL, p1, p2, p1, player1_target=1, player2_target=1)
    return engine.mark_game_over(p1.id).match.id


@pytest.mark.parametrize(
    "name1, name2",
    [("", "Bob"), ("Alice", "   "), ("Alice", "alice"), ("  Bob ", "BOB")],
)
def test_create_match_rejects_bad_names(engine, name1, name2) -> None:
    p1, p2 = Player.create(name1), Player.create(name2)
    with pytest.raises(InvalidSetupError):
        engine.create_match(GameType.EIGHT_BALL, p1, p2, p1)
    assert engine.match is None
    assert engine.status is MatchStatus.NOT_STARTED


def test_create_match_rejects_outside_breaker(engine, alice, bob) -> None:
    with pytest.raises(InvalidSetupError):
        engine.create_match(GameType.EIGHT_BALL, alice, bob, Player.create("Carol"))


def test_create_match_rejects_zero_target(engine, alice, bob) -> None:
    with pytest.raises(InvalidSetupError):
        engine.create_match(GameType.NINE_BALL, alice, bob, alice, player1_target=0)


def test_player_names_are_trimmed() -> None:
    assert Player.create("  Alice  ").name == "Alice"
    assert Player.create("Alice").id != Player.create("Alice").id


def test_default_targets(storage, alice, bob) -> None:
    engine = Engine(storage, default_target=7)
    match = engine.create_match(GameType.EIGHT_BALL, alice, bob, alice).match
    assert (match.player1_target, match.player2_target) == (7, 7)


def test_cannot_start_while_in_progress(engine, alice, bob) -> None:
    engine.create_match(GameType.EIGHT_BALL, alice, bob, alice)
    with pytest.raises(InvalidSetupError):
        engine.create_match(GameType.EIGHT_BALL, alice, bob, bob)


def test_new_match_after_completion(engine, alice, bob) -> None:
    play_out(engine, "Alice", "Bob")
    assert engine.status is MatchStatus.COMPLETED
    outcome = engine.create_match(GameType.NINE_BALL, alice, bob, bob)
    assert outcome.match.is_active
    assert engine.status is MatchStatus.IN_PROGRESS


def test_cancel_discards_without_saving(engine, alice, bob) -> None:
    engine.create_match(GameType.NINE_BALL, alice, bob, alice)
    engine.set_ball_state(0)
    engine.end_turn()
    engine.cancel_match()

    assert engine.status is MatchStatus.NOT_STARTED
    assert engine.match is None
    assert engine.ball_states() is None
    assert engine.get_recent_matches() == []
    with pytest.raises(MatchNotActiveError):
        engine.end_turn()


def test_operations_need_a_match(engine) -> None:
    with pytest.raises(MatchNotActiveError):
        engine.end_turn()
    with pytest.raises(MatchNotActiveError):
        engine.mark_game_over("x")
    with pytest.raises(MatchNotActiveError):
        engine.end_match()
    assert engine.set_ball_state(0) is None


def test_history_keeps_ten_most_recent(engine) -> None:
    ids = [play_out(engine, f"Player {i}", f"Opponent {i}") for i in range(11)]

    history = engine.get_recent_matches()
    assert len(history) == 10
    assert [r.id for r in history] == list(reversed(ids[1:]))
    assert ids[0] not in {r.id for r in history}
    assert history[0].player1.name == "Player 10"


def test_history_limit_is_configurable(storage) -> None:
    engine = Engine(storage, history_limit=3)
    for i in range(5):
        play_out(engine, f"P{i}", f"Q{i}")
    assert [r.player1.name for r in engine.get_recent_matches()] == ["P4", "P3", "P2"]


def test_quick_start_projects_names_and_type(engine) -> None:
    play_out(engine, "Alice", "Bob")
    record = engine.get_recent_matches()[0]
    assert Engine.quick_start_from_history(record) == ("Alice", "Bob", GameType.EIGHT_BALL)
    assert engine.status is MatchStatus.COMPLETED


def test_clear_history(engine) -> None:
    play_out(engine, "Alice", "Bob")
    engine.clear_history()
    assert engine.get_recent_matches() == []


class FailingStorage(ScorekeeperStorage):
    def store_recent_matches(self, matches) -> bool:
        return False


def test_save_failure_keeps_match_state(store, alice, bob) -> None:
    engine = Engine(FailingStorage(store))
    engine.create_match(GameType.EIGHT_BALL, alice, bob, alice, player1_target=1)
    outcome = engine.mark_game_over(alice.id)

    assert outcome.saved is False
    assert outcome.winner == alice
    assert not outcome.match.is_active
    assert engine.status is MatchStatus.COMPLETED


def test_snapshot_is_detached(engine, alice, bob) -> None:
    outcome = engine.create_match(GameType.EIGHT_BALL, alice, bob, alice)
    engine.end_turn()
    assert outcome.match.current_inning == 1
    assert engine.snapshot()["match"].current_inning == 2


def test_stored_names_are_trimmed(engine) -> None:
    p1, p2 = Player(id="a", name="  Alice  "), Player(id="b", name=" Bob")
    outcome = engine.create_match(GameType.EIGHT_BALL, p1, p2, p2, player1_target=1)
    assert outcome.match.player1.name == "Alice"
    assert outcome.match.current_player.name == "Bob"
    assert outcome.match.current_player is outcome.match.player2

    engine.mark_game_over("a")
    record = engine.get_recent_matches()[0]
    assert record.player1.name == "Alice"
    assert record.player2.name == "Bob"


def test_concurrent_game_results_score_once(storage) -> None:
    workers = 8
    for _ in range(25):
        engine = Engine(storage)
        p1, p2 = Player.create("Alice"), Player.create("Bob")
        engine.create_match(GameType.EIGHT_BALL, p1, p2, p1, player1_target=1, player2_target=1)

        barrier = threading.Barrier(workers)
        wins, refusals = [], []

        def record_game() -> None:
            barrier.wait()
            try:
                wins.append(engine.mark_game_over(p1.id))
            except MatchNotActiveError:
                refusals.append(True)

        threads = [threading.Thread(target=record_game) for _ in range(workers)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(wins) == 1
        assert len(refusals) == workers - 1
        assert engine.match.player1_score == 1
        assert engine.match.current_game_number == 2
        assert engine.get_recent_matches()[0].player1_score == 1


def test_broken_store_does_not_block_completion(db_engine, alice, bob) -> None:
    store = KeyValueStore(db_engine)
    engine = Engine(ScorekeeperStorage(store))
    engine.create_match(GameType.EIGHT_BALL, alice, bob, alice, player1_target=1)
    SQLModel.metadata.drop_all(db_engine)

    assert store.save("k", 1) is False
    assert store.load("k") is None
    assert store.keys() == []
    store.remove("k")

    outcome = engine.mark_game_over(alice.id)
    assert outcome.saved is False
    assert outcome.winner == alice
    assert not outcome.match.is_active
    assert engine.status is MatchStatus.COMPLETED
    assert engine.get_recent_matches() == []
