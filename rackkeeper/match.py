"""
Match data model shared by the rules and the engine.

A `Match` is the aggregate root of a scorekeeping session: two players, a
game type, per-player scores and race targets, and the turn counters.  The
rules classes mutate it; the engine snapshots it for callers.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Optional


class GameType(str, Enum):
    EIGHT_BALL = "8ball"
    NINE_BALL = "9ball"


@dataclass(frozen=True)
class Player:
    id: str
    name: str

    @classmethod
    def create(cls, name: str) -> "Player":
        """Create a player with a fresh id and a trimmed name."""
        return cls(id=uuid.uuid4().hex, name=name.strip())


@dataclass
class Match:
    game_type: GameType
    player1: Player
    player2: Player
    current_player: Player
    player1_target: int = 5
    player2_target: int = 5
    player1_score: int = 0
    player2_score: int = 0
    current_game_number: int = 1
    current_inning: int = 1
    is_active: bool = True
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def player_by_id(self, player_id: str) -> Optional[Player]:
        for player in (self.player1, self.player2):
            if player.id == player_id:
                return player
        return None

    def other_player(self, player: Player) -> Player:
        return self.player2 if player.id == self.player1.id else self.player1

    def toggle_player(self) -> None:
        self.current_player = self.other_player(self.current_player)

    def add_score(self, player: Player, points: int) -> None:
        if player.id == self.player1.id:
            self.player1_score += points
        else:
            self.player2_score += points

    def winner(self) -> Optional[Player]:
        """Return the player whose score has reached their target, if any."""
        if self.player1_score >= self.player1_target:
            return self.player1
        if self.player2_score >= self.player2_target:
            return self.player2
        return None

    def snapshot(self) -> "Match":
        return replace(self)
