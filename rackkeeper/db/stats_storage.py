"""
Local cache of league stats.

Holds the list of followed players with their last fetched stats, the date
each player's report was refreshed, the selected player, and raw league
reports cached per member and season for a limited time.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, List, Optional

from pydantic import ValidationError

from ..stats.models import PlayerStats
from .store import KeyValueStore

logger = logging.getLogger(__name__)

STATS_NAMESPACE = "stats-storage"
PLAYERS_KEY = "players"
PLAYER_REPORT_DATES_KEY = "player_report_dates"
SELECTED_PLAYER_INDEX_KEY = "selected_player_index"
REPORT_CACHE_PREFIX = "report_cache_"
DEFAULT_CACHE_SECONDS = 24 * 60 * 60


def report_cache_key(member_id: str, season: Optional[str] = None) -> str:
    return f"{REPORT_CACHE_PREFIX}{member_id}_{season or 'all'}"


class StatsStorage:
    def __init__(
        self,
        store: KeyValueStore,
        cache_seconds: float = DEFAULT_CACHE_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.store = store
        self.cache_seconds = cache_seconds
        self.clock = clock

    # ---------- players ----------

    def store_players(self, players: List[PlayerStats]) -> bool:
        payload = [p.model_dump(mode="json", by_alias=True) for p in players]
        return self.store.save(PLAYERS_KEY, payload)

    def get_stored_players(self) -> List[PlayerStats]:
        raw = self.store.load(PLAYERS_KEY)
        if not isinstance(raw, list):
            return []
        try:
            return [PlayerStats.model_validate(p) for p in raw]
        except ValidationError as e:
            logger.error("Failed to read stored players: %s", e)
            return []

    def store_player_report_dates(self, dates: Dict[str, str]) -> bool:
        return self.store.save(PLAYER_REPORT_DATES_KEY, dates)

    def get_stored_player_report_dates(self) -> Dict[str, str]:
        raw = self.store.load(PLAYER_REPORT_DATES_KEY)
        return raw if isinstance(raw, dict) else {}

    def store_selected_player_index(self, index: int) -> bool:
        return self.store.save(SELECTED_PLAYER_INDEX_KEY, index)

    def get_stored_selected_player_index(self) -> int:
        raw = self.store.load(SELECTED_PLAYER_INDEX_KEY)
        return raw if isinstance(raw, int) else -1

    def has_stats_data(self) -> bool:
        return self.store.contains(PLAYERS_KEY)

    # ---------- report cache ----------

    def get_cached_report(self, member_id: str, season: Optional[str] = None) -> Optional[Any]:
        """Return a cached report, or None when absent or expired.

        Expired entries are deleted on read.
        """
        key = report_cache_key(member_id, season)
        cached = self.store.load(key)
        if not isinstance(cached, dict) or "timestamp" not in cached:
            return None

        if self.clock() - cached["timestamp"] < self.cache_seconds:
            return cached.get("data")

        logger.debug("Report cache expired for %s", key)
        self.store.remove(key)
        return None

    def cache_report(self, member_id: str, season: Optional[str], data: Any) -> bool:
        key = report_cache_key(member_id, season)
        return self.store.save(key, {"timestamp": self.clock(), "data": data})

    def clear_player_cache(self, member_id: str) -> None:
        for key in self.store.keys(f"{REPORT_CACHE_PREFIX}{member_id}_"):
            self.store.remove(key)

    def clear_stats_data(self) -> None:
        self.store.remove(PLAYERS_KEY)
        self.store.remove(PLAYER_REPORT_DATES_KEY)
        self.store.remove(SELECTED_PLAYER_INDEX_KEY)
        for key in self.store.keys(REPORT_CACHE_PREFIX):
            self.store.remove(key)
