"""
Pydantic models for league stats reports.

The league service returns pre-aggregated win/loss buckets keyed by
category (location, opponent, skill level, ...).  Field names are camelCase
on the wire.
"""

from typing import Dict, Optional
from enum import Enum

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class WinLoss(_CamelModel):
    wins: int = 0
    losses: int = 0

    @property
    def matches(self) -> int:
        return self.wins + self.losses


class Streak(_CamelModel):
    count: int
    season: str


class Trend(str, Enum):
    UP = "UP"
    DOWN = "DOWN"
    STABLE = "STABLE"


class PlayerStats(_CamelModel):
    name: str
    overall: WinLoss = WinLoss()
    by_location: Dict[str, WinLoss] = {}
    by_season: Dict[str, WinLoss] = {}
    by_position: Dict[str, WinLoss] = {}
    score_distribution: Dict[str, int] = {}
    by_innings: Dict[str, WinLoss] = {}
    by_team_situation: Dict[str, WinLoss] = {}
    head_to_head: Dict[str, WinLoss] = {}
    by_my_skill: Dict[str, WinLoss] = {}
    by_opponent_skill: Dict[str, WinLoss] = {}
    by_skill_difference: Dict[str, WinLoss] = {}
    current_streak: Optional[int] = None
    longest_win_streak: Optional[Streak] = None
    longest_loss_streak: Optional[Streak] = None
    last3_matches: Optional[WinLoss] = None
    last5_matches: Optional[WinLoss] = None
    last10_matches: Optional[WinLoss] = None
    trending: Optional[Trend] = None
