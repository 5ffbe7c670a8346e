"""Request and response schemas for the RackKeeper API."""

from datetime import datetime
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict

from ..engine.engine import MatchStatus
from ..match import GameType
from ..rules.nineball import BallState
from ..stats.models import WinLoss
from ..stats.sorting import Category, SortMode


class PlayerOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str


class MatchOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    game_type: GameType
    player1: PlayerOut
    player2: PlayerOut
    player1_score: int
    player2_score: int
    player1_target: int
    player2_target: int
    current_game_number: int
    current_player: PlayerOut
    current_inning: int
    created_at: datetime
    is_active: bool


class MatchCreate(BaseModel):
    """Setup form for a new match."""
    game_type: GameType
    player1_name: str
    player2_name: str
    first_breaker: Literal[1, 2] = 1
    player1_target: Optional[int] = None
    player2_target: Optional[int] = None


class OutcomeOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    match: MatchOut
    winner: Optional[PlayerOut] = None
    points_earned: int = 0
    rack_complete: bool = False
    saved: bool = True


class StateOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    status: MatchStatus
    match: Optional[MatchOut] = None
    balls: Optional[List[BallState]] = None


class GameOverIn(BaseModel):
    winner_id: str


class BallOut(BaseModel):
    ball_index: int
    state: Optional[BallState] = None
    balls: Optional[List[BallState]] = None


class QuickStartOut(BaseModel):
    player1_name: str
    player2_name: str
    game_type: GameType


class SortOptionOut(BaseModel):
    value: SortMode
    label: str


class SortOptionsOut(BaseModel):
    category: Category
    options: List[SortOptionOut]
    default: SortMode


class SortRequest(BaseModel):
    buckets: Dict[str, WinLoss]
    mode: Optional[SortMode] = None


class SortedEntry(BaseModel):
    key: str
    label: Optional[str] = None
    wins: int
    losses: int
    win_percent: Optional[int] = None


class SortResponse(BaseModel):
    mode: SortMode
    label: str
    next_mode: SortMode
    entries: List[SortedEntry]
