"""Recent match history kept in the local key/value store."""

from __future__ import annotations

import logging
from typing import List

from pydantic import ValidationError

from .records import RecentMatchRecord, migrate_record
from .store import KeyValueStore

logger = logging.getLogger(__name__)

RECENT_MATCHES_KEY = "recent_matches"
RECENT_MATCHES_LIMIT = 10


class ScorekeeperStorage:
    def __init__(self, store: KeyValueStore) -> None:
        self.store = store

    def store_recent_matches(self, matches: List[RecentMatchRecord]) -> bool:
        payload = [m.model_dump(mode="json") for m in matches]
        return self.store.save(RECENT_MATCHES_KEY, payload)

    def get_stored_recent_matches(self) -> List[RecentMatchRecord]:
        """Load history most-recent first, migrating older records.

        Entries that fail validation are skipped.
        """
        raw = self.store.load(RECENT_MATCHES_KEY)
        if not isinstance(raw, list):
            return []

        records: List[RecentMatchRecord] = []
        for item in raw:
            try:
                records.append(RecentMatchRecord.model_validate(migrate_record(item)))
            except (ValidationError, KeyError, TypeError, AttributeError) as e:
                logger.warning("Skipping unreadable recent match record: %s", e)
        return records

    def clear_scorekeeper_data(self) -> None:
        self.store.remove(RECENT_MATCHES_KEY)
