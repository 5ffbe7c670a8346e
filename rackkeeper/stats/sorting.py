"""
Sorting of win/loss buckets for the stats cards.

Each stats category has a fixed cycle of sort options; tapping the sort
button moves to the next one.  Sorting is stable, so entries that compare
equal keep the order the league service returned them in.

Zero-match buckets (0 wins, 0 losses) have a win rate of 0.0.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Mapping, Optional, Tuple

import numpy as np

from .models import WinLoss


class Category(str, Enum):
    LOCATION = "location"
    POSITION = "position"
    HEAD_TO_HEAD = "headToHead"
    MY_SKILL = "mySkill"
    OPPONENT_SKILL = "opponentSkill"
    SKILL_DIFFERENCE = "skillDifference"


class SortMode(str, Enum):
    NAME_ASC = "name-asc"
    NAME_DESC = "name-desc"
    MATCHES_ASC = "matches-asc"
    MATCHES_DESC = "matches-desc"
    WINRATE_ASC = "winrate-asc"
    WINRATE_DESC = "winrate-desc"
    POSITION_ASC = "position-asc"
    POSITION_DESC = "position-desc"
    SKILL_ASC = "skill-asc"
    SKILL_DESC = "skill-desc"
    DIFF_ASC = "diff-asc"
    DIFF_DESC = "diff-desc"


@dataclass(frozen=True)
class SortOption:
    value: SortMode
    label: str


_WINRATE = [
    SortOption(SortMode.WINRATE_ASC, "Win % ↑"),
    SortOption(SortMode.WINRATE_DESC, "Win % ↓"),
]
_SKILL = [
    SortOption(SortMode.SKILL_ASC, "Skill ↑"),
    SortOption(SortMode.SKILL_DESC, "Skill ↓"),
    *_WINRATE,
]

SORT_OPTIONS: Dict[Category, List[SortOption]] = {
    Category.LOCATION: [
        SortOption(SortMode.NAME_ASC, "Name A-Z"),
        SortOption(SortMode.NAME_DESC, "Name Z-A"),
        *_WINRATE,
    ],
    Category.POSITION: [
        SortOption(SortMode.POSITION_ASC, "Position ↑"),
        SortOption(SortMode.POSITION_DESC, "Position ↓"),
        *_WINRATE,
    ],
    Category.HEAD_TO_HEAD: [
        SortOption(SortMode.NAME_ASC, "Name A-Z"),
        SortOption(SortMode.NAME_DESC, "Name Z-A"),
        SortOption(SortMode.MATCHES_ASC, "Matches ↑"),
        SortOption(SortMode.MATCHES_DESC, "Matches ↓"),
        *_WINRATE,
    ],
    Category.MY_SKILL: _SKILL,
    Category.OPPONENT_SKILL: _SKILL,
    Category.SKILL_DIFFERENCE: [
        SortOption(SortMode.DIFF_ASC, "Difference ↑"),
        SortOption(SortMode.DIFF_DESC, "Difference ↓"),
        *_WINRATE,
    ],
}

_NUMERIC_MODES = {
    SortMode.POSITION_ASC, SortMode.POSITION_DESC,
    SortMode.SKILL_ASC, SortMode.SKILL_DESC,
    SortMode.DIFF_ASC, SortMode.DIFF_DESC,
}
_DESCENDING = {
    SortMode.NAME_DESC, SortMode.MATCHES_DESC, SortMode.WINRATE_DESC,
    SortMode.POSITION_DESC, SortMode.SKILL_DESC, SortMode.DIFF_DESC,
}


def default_sort(category: Category) -> SortMode:
    return SORT_OPTIONS[Category(category)][0].value


def cycle_sort(category: Category, current: Optional[SortMode]) -> SortMode:
    """Return the option after ``current``, wrapping to the first."""
    options = SORT_OPTIONS[Category(category)]
    values = [opt.value for opt in options]
    if current not in values:
        return values[0]
    return values[(values.index(current) + 1) % len(values)]


def sort_label(category: Category, current: Optional[SortMode]) -> str:
    options = SORT_OPTIONS[Category(category)]
    for opt in options:
        if opt.value == current:
            return opt.label
    return options[0].label


def win_rates(wins: np.ndarray, losses: np.ndarray) -> np.ndarray:
    """Element-wise wins / (wins + losses), 0.0 where there are no matches."""
    totals = wins + losses
    out = np.zeros(len(totals), dtype=np.float64)
    np.divide(wins, totals, out=out, where=totals > 0)
    return out


def _parse_int(key: str) -> float:
    try:
        return float(int(key.strip()))
    except ValueError:
        return math.nan


def sort_entries(
    buckets: Mapping[str, WinLoss], mode: SortMode
) -> List[Tuple[str, WinLoss]]:
    """
    Order ``buckets`` by ``mode``.

    Name modes compare case-insensitively.  Position, skill and difference
    modes compare the key as an integer; keys that are not integers go last
    in both directions.
    """
    mode = SortMode(mode)
    items = list(buckets.items())
    if not items:
        return []

    keys = [k for k, _ in items]
    descending = mode in _DESCENDING

    if mode in (SortMode.NAME_ASC, SortMode.NAME_DESC):
        order = sorted(range(len(keys)), key=lambda i: keys[i].casefold(), reverse=descending)
        return [items[i] for i in order]

    wins = np.array([v.wins for _, v in items], dtype=np.float64)
    losses = np.array([v.losses for _, v in items], dtype=np.float64)

    if mode in (SortMode.MATCHES_ASC, SortMode.MATCHES_DESC):
        values = wins + losses
    elif mode in (SortMode.WINRATE_ASC, SortMode.WINRATE_DESC):
        values = win_rates(wins, losses)
    elif mode in _NUMERIC_MODES:
        values = np.array([_parse_int(k) for k in keys], dtype=np.float64)
    else:
        raise ValueError(f"Unsupported sort mode: {mode}")

    # Negating keeps NaN as NaN, and argsort places NaN last.
    order = np.argsort(-values if descending else values, kind="stable")
    return [items[i] for i in order]


def win_percent(wins: int, losses: int) -> Optional[int]:
    """Win percentage rounded half up, or None with no matches played."""
    total = wins + losses
    if total == 0:
        return None
    return int(math.floor(wins * 100 / total + 0.5))


def skill_difference_label(key: str) -> str:
    """Describe a skill difference key; keys that are not integers pass through."""
    try:
        diff = int(key.strip())
    except ValueError:
        return key
    if diff == 0:
        return "Same skill level"
    levels = abs(diff)
    plural = "s" if levels > 1 else ""
    direction = "up" if diff > 0 else "down"
    return f"Playing {direction} {levels} level{plural}"
