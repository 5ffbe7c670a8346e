"""Local storage for RackKeeper."""

from .models import StoredValue
from .records import RecentMatchRecord, PlayerRecord
from .store import KeyValueStore, create_db_engine
from .scorekeeper_storage import ScorekeeperStorage
from .stats_storage import StatsStorage
from .promo_storage import WrappedPromoStorage

__all__ = [
    "StoredValue",
    "RecentMatchRecord",
    "PlayerRecord",
    "KeyValueStore",
    "create_db_engine",
    "ScorekeeperStorage",
    "StatsStorage",
    "WrappedPromoStorage",
]
