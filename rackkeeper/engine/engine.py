"""
Core scorekeeping engine for RackKeeper.

This module glues together the match model, the rules subsystem (8‑ball and
9‑ball state machines) and the recent-match history to provide the
operations the presentation layer calls: start a match, end a turn, record
a game, mark balls, and finish or abandon the match.

The engine owns exactly one match at a time.  Every operation runs under a
single lock, so concurrent callers (e.g. the API's worker threads) see each
transition whole.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, Any, List, Optional, Tuple, Union

from ..db.records import RecentMatchRecord
from ..db.scorekeeper_storage import RECENT_MATCHES_LIMIT, ScorekeeperStorage
from ..errors import GameTypeError, InvalidSetupError, MatchNotActiveError
from ..match import GameType, Match, Player
from ..rules.eightball import EightBallGame
from ..rules.nineball import BallState, NineBallGame

logger = logging.getLogger(__name__)


class MatchStatus(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


@dataclass
class Outcome:
    """Result of an engine operation."""
    match: Match
    winner: Optional[Player] = None
    points_earned: int = 0
    rack_complete: bool = False
    saved: bool = True


class Engine:
    """RackKeeper engine orchestrating rules and match history."""

    def __init__(
        self,
        storage: ScorekeeperStorage,
        history_limit: int = RECENT_MATCHES_LIMIT,
        default_target: int = 5,
    ) -> None:
        self.storage = storage
        self.history_limit = history_limit
        self.default_target = default_target
        self.match: Optional[Match] = None
        self.game: Optional[Union[EightBallGame, NineBallGame]] = None
        self.status = MatchStatus.NOT_STARTED
        self._lock = threading.Lock()

    def _init_game(self, match: Match) -> None:
        if match.game_type is GameType.EIGHT_BALL:
            self.game = EightBallGame(match)
        elif match.game_type is GameType.NINE_BALL:
            self.game = NineBallGame(match)
        else:
            raise ValueError(f"Unsupported game type: {match.game_type}")

    def _active(self) -> Match:
        if self.match is None or self.status is not MatchStatus.IN_PROGRESS:
            raise MatchNotActiveError("No match in progress")
        return self.match

    # ---------- lifecycle ----------

    def create_match(
        self,
        game_type: GameType,
        player1: Player,
        player2: Player,
        first_breaker: Player,
        player1_target: Optional[int] = None,
        player2_target: Optional[int] = None,
    ) -> Outcome:
        """
        Start a new match.  Player names are stored trimmed.

        Raises:
            InvalidSetupError: a name is blank, the names match ignoring
                case, the breaker is not one of the players, or a target is
                below 1.
        """
        name1, name2 = player1.name.strip(), player2.name.strip()
        if not name1 or not name2:
            raise InvalidSetupError("Both player names are required")
        if name1.casefold() == name2.casefold():
            raise InvalidSetupError("Player names must be different")
        if player1.id == player2.id:
            raise InvalidSetupError("Players must be distinct")
        if first_breaker.id not in (player1.id, player2.id):
            raise InvalidSetupError("The breaker must be one of the players")

        target1 = self.default_target if player1_target is None else player1_target
        target2 = self.default_target if player2_target is None else player2_target
        if target1 < 1 or target2 < 1:
            raise InvalidSetupError("Targets must be at least 1")

        player1 = replace(player1, name=name1)
        player2 = replace(player2, name=name2)
        breaker = player1 if first_breaker.id == player1.id else player2

        with self._lock:
            if self.status is MatchStatus.IN_PROGRESS:
                raise InvalidSetupError("A match is already in progress")
            match = Match(
                game_type=GameType(game_type),
                player1=player1,
                player2=player2,
                current_player=breaker,
                player1_target=target1,
                player2_target=target2,
            )
            self.match = match
            self._init_game(match)
            self.status = MatchStatus.IN_PROGRESS
            logger.info(
                "Started %s match %s: %s vs %s (race %d-%d)",
                match.game_type.value, match.id, name1, name2, target1, target2,
            )
            return Outcome(match=match.snapshot())

    def cancel_match(self) -> None:
        """Drop the current match without saving it."""
        with self._lock:
            if self.match is not None and self.status is MatchStatus.IN_PROGRESS:
                logger.info("Cancelled match %s", self.match.id)
            self.match = None
            self.game = None
            self.status = MatchStatus.NOT_STARTED

    def end_match(self) -> Outcome:
        """Finish the match now regardless of score and save it."""
        with self._lock:
            match = self._active()
            winner = match.winner()
            saved = self._finalize()
            return Outcome(match=match.snapshot(), winner=winner, saved=saved)

    # ---------- play ----------

    def end_turn(self) -> Outcome:
        with self._lock:
            match = self._active()
            result = self.game.end_turn()
            winner, saved = self._check_win()
            return Outcome(
                match=match.snapshot(),
                winner=winner,
                points_earned=result["points_earned"],
                rack_complete=result["rack_complete"],
                saved=saved,
            )

    def mark_game_over(self, winner_id: str) -> Outcome:
        with self._lock:
            match = self._active()
            if not isinstance(self.game, EightBallGame):
                raise GameTypeError("Games are only recorded in 8-ball matches")
            self.game.mark_game_over(winner_id)
            winner, saved = self._check_win()
            return Outcome(match=match.snapshot(), winner=winner, saved=saved)

    def set_ball_state(self, ball_index: int) -> Optional[BallState]:
        """Cycle a 9‑ball rack ball.  No-op without an active 9‑ball match."""
        with self._lock:
            if self.status is not MatchStatus.IN_PROGRESS or not isinstance(self.game, NineBallGame):
                return None
            return self.game.set_ball_state(ball_index)

    def _ball_states(self) -> Optional[List[BallState]]:
        if isinstance(self.game, NineBallGame):
            return list(self.game.rack.balls)
        return None

    def ball_states(self) -> Optional[List[BallState]]:
        with self._lock:
            return self._ball_states()

    # ---------- completion ----------

    def _check_win(self) -> Tuple[Optional[Player], bool]:
        winner = self.match.winner()
        if winner is None:
            return None, True
        logger.info("Match %s won by %s", self.match.id, winner.name)
        return winner, self._finalize()

    def _finalize(self) -> bool:
        match = self.match
        match.is_active = False
        self.status = MatchStatus.COMPLETED

        record = RecentMatchRecord.from_match(match)
        history = [record] + [r for r in self.storage.get_stored_recent_matches() if r.id != record.id]
        saved = self.storage.store_recent_matches(history[: self.history_limit])
        if not saved:
            logger.warning("Match %s finished but could not be saved to history", match.id)
        return saved

    # ---------- history ----------

    def get_recent_matches(self) -> List[RecentMatchRecord]:
        return self.storage.get_stored_recent_matches()

    def clear_history(self) -> None:
        with self._lock:
            self.storage.clear_scorekeeper_data()

    @staticmethod
    def quick_start_from_history(record: RecentMatchRecord) -> Tuple[str, str, GameType]:
        """Names and game type to prefill a new match from a past one."""
        return record.player1.name, record.player2.name, record.game_type

    def snapshot(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "status": self.status,
                "match": self.match.snapshot() if self.match is not None else None,
                "balls": self._ball_states(),
            }
