"""Flags recording whether a year-in-review ("wrapped") promo has been seen."""

from .store import KeyValueStore

PROMO_NAMESPACE = "wrapped-promo-storage"
DEFAULT_WRAPPED_YEAR = 2025


def wrapped_viewed_key(year: int) -> str:
    return f"wrapped_{year}_viewed"


class WrappedPromoStorage:
    def __init__(self, store: KeyValueStore, year: int = DEFAULT_WRAPPED_YEAR) -> None:
        self.store = store
        self.year = year

    def has_viewed_wrapped(self) -> bool:
        return self.store.load(wrapped_viewed_key(self.year)) is True

    def mark_wrapped_viewed(self) -> bool:
        """Mark the promo as seen; it stays seen until data is cleared."""
        return self.store.save(wrapped_viewed_key(self.year), True)

    def clear_wrapped_promo_data(self) -> None:
        self.store.remove(wrapped_viewed_key(self.year))
