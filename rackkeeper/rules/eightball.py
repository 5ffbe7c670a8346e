"""
APA 8‑Ball scorekeeping rules.

In 8‑ball each player races to a number of *games* set by their skill
level.  The scorekeeper does not follow individual shots: a turn simply
passes the table to the other player, and the winner of each game is
entered explicitly when the 8‑ball drops.
"""

from typing import Dict, Any

from ..errors import InvalidWinnerError
from ..match import GameType, Match


class EightBallGame:
    """Applies 8‑ball turn and game transitions to a match."""

    game_type = GameType.EIGHT_BALL

    def __init__(self, match: Match) -> None:
        self.match = match

    def end_turn(self) -> Dict[str, Any]:
        """Pass the table to the other player.  Scores do not change."""
        self.match.toggle_player()
        self.match.current_inning += 1
        return {"points_earned": 0, "rack_complete": False}

    def mark_game_over(self, winner_id: str) -> None:
        """
        Record a game won by ``winner_id``.

        The winner gets one game, the game counter advances and the inning
        count restarts for the next rack.
        """
        winner = self.match.player_by_id(winner_id)
        if winner is None:
            raise InvalidWinnerError(f"Player {winner_id!r} is not in this match")

        self.match.add_score(winner, 1)
        self.match.current_game_number += 1
        self.match.current_inning = 1
