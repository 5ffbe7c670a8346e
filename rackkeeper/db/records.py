"""
Serialized match history records.

A `RecentMatchRecord` is a frozen snapshot of a concluded match.  Records
carry a schema version; `migrate_record` upgrades documents written in the
older camelCase layout (games won/games to win, targets optional) before
validation.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict

from ..match import GameType, Match

SCHEMA_VERSION = 2
LEGACY_DEFAULT_TARGET = 5


class PlayerRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str


class RecentMatchRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    schema_version: int = SCHEMA_VERSION
    id: str
    game_type: GameType
    player1: PlayerRecord
    player2: PlayerRecord
    player1_score: int
    player2_score: int
    player1_target: int
    player2_target: int
    current_game_number: int
    current_player: PlayerRecord
    current_inning: int
    created_at: str  # ISO-8601
    is_active: bool

    @classmethod
    def from_match(cls, match: Match) -> "RecentMatchRecord":
        def player(p):
            return PlayerRecord(id=p.id, name=p.name)

        return cls(
            id=match.id,
            game_type=match.game_type,
            player1=player(match.player1),
            player2=player(match.player2),
            player1_score=match.player1_score,
            player2_score=match.player2_score,
            player1_target=match.player1_target,
            player2_target=match.player2_target,
            current_game_number=match.current_game_number,
            current_player=player(match.current_player),
            current_inning=match.current_inning,
            created_at=match.created_at.isoformat(),
            is_active=match.is_active,
        )

    @property
    def created(self) -> datetime:
        return datetime.fromisoformat(self.created_at.replace("Z", "+00:00"))


def _from_v1(data: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "schema_version": 2,
        "id": data["id"],
        "game_type": data["gameType"],
        "player1": data["player1"],
        "player2": data["player2"],
        "player1_score": data.get("player1GamesWon", 0),
        "player2_score": data.get("player2GamesWon", 0),
        "player1_target": data.get("player1GamesToWin") or LEGACY_DEFAULT_TARGET,
        "player2_target": data.get("player2GamesToWin") or LEGACY_DEFAULT_TARGET,
        "current_game_number": data.get("currentGame", 1),
        "current_player": data["currentPlayer"],
        "current_inning": data.get("currentInning", 1),
        "created_at": data["createdAt"],
        "is_active": data.get("isActive", False),
    }


_MIGRATIONS = {1: _from_v1}


def migrate_record(data: Dict[str, Any]) -> Dict[str, Any]:
    """Upgrade a stored record dict to SCHEMA_VERSION.

    Documents without a ``schema_version`` key are the original layout
    (version 1).
    """
    version = data.get("schema_version", 1)
    while version < SCHEMA_VERSION:
        data = _MIGRATIONS[version](data)
        version = data["schema_version"]
    return data
