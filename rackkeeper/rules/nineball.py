"""
APA 9‑Ball scorekeeping rules.

In APA 9‑ball, each ball pocketed is worth one point, except the 9‑ball
which is worth two.  The scorekeeper marks balls as pocketed or dead while
a player is at the table and settles the points when the turn ends.  A
pocketed 9‑ball finishes the rack: the balls are re-racked and the same
player breaks again.
"""

from enum import Enum
from typing import Dict, Any, List

from ..errors import BallIndexError, IllegalTurnEndError
from ..match import GameType, Match

RACK_SIZE = 9
NINE_BALL_INDEX = RACK_SIZE - 1
NINE_BALL_POINTS = 2


class BallState(str, Enum):
    ON_TABLE = "on_table"
    POCKETED = "pocketed"
    DEAD = "dead"
    ALREADY_POCKETED = "already_pocketed"
    ALREADY_DEAD = "already_dead"


# Balls scored in an earlier turn stay frozen until the rack is reset.
_NEXT_STATE = {
    BallState.ON_TABLE: BallState.POCKETED,
    BallState.POCKETED: BallState.DEAD,
    BallState.DEAD: BallState.ON_TABLE,
}

_SETTLED_STATE = {
    BallState.POCKETED: BallState.ALREADY_POCKETED,
    BallState.DEAD: BallState.ALREADY_DEAD,
}


class NineBallRack:
    """State of the nine object balls, indexed 0..8 (ball number - 1)."""

    def __init__(self) -> None:
        self.balls: List[BallState] = [BallState.ON_TABLE] * RACK_SIZE

    def reset(self) -> None:
        self.balls = [BallState.ON_TABLE] * RACK_SIZE

    def cycle(self, index: int) -> BallState:
        if not 0 <= index < RACK_SIZE:
            raise BallIndexError(f"Ball index must be between 0 and {RACK_SIZE - 1}, got {index}")
        state = self.balls[index]
        if state in _NEXT_STATE:
            self.balls[index] = _NEXT_STATE[state]
        return self.balls[index]

    def points(self) -> int:
        total = 0
        for index, state in enumerate(self.balls):
            if state is BallState.POCKETED:
                total += NINE_BALL_POINTS if index == NINE_BALL_INDEX else 1
        return total

    def nine_ball_pocketed(self) -> bool:
        return self.balls[NINE_BALL_INDEX] is BallState.POCKETED

    def nine_ball_dead(self) -> bool:
        return self.balls[NINE_BALL_INDEX] is BallState.DEAD

    def settle(self) -> None:
        self.balls = [_SETTLED_STATE.get(state, state) for state in self.balls]

    def as_list(self) -> List[str]:
        return [state.value for state in self.balls]


class NineBallGame:
    """Applies 9‑ball ball marking and turn settlement to a match."""

    game_type = GameType.NINE_BALL

    def __init__(self, match: Match) -> None:
        self.match = match
        self.rack = NineBallRack()

    def set_ball_state(self, ball_index: int) -> BallState:
        """Cycle a ball OnTable -> Pocketed -> Dead -> OnTable."""
        return self.rack.cycle(ball_index)

    def end_turn(self) -> Dict[str, Any]:
        """
        Settle the current player's turn.

        Pocketed balls score for the player at the table.  If the 9‑ball went
        down the rack is reset and that player stays at the table; otherwise
        scored balls are frozen and the other player comes up.

        Raises:
            IllegalTurnEndError: the 9‑ball is marked dead.  It must be
                spotted instead, so the table is left untouched.
        """
        if self.rack.nine_ball_dead():
            raise IllegalTurnEndError("9-ball cannot be marked dead; it must be spotted")

        points = self.rack.points()
        rack_complete = self.rack.nine_ball_pocketed()
        self.match.add_score(self.match.current_player, points)

        if rack_complete:
            self.rack.reset()
        else:
            self.rack.settle()
            self.match.toggle_player()
        self.match.current_inning += 1
        return {"points_earned": points, "rack_complete": rack_complete}
