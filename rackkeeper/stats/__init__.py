"""League stats models and sorting."""

from .models import PlayerStats, WinLoss
from .sorting import Category, SortMode, SortOption, cycle_sort, sort_entries, sort_label

__all__ = [
    "PlayerStats",
    "WinLoss",
    "Category",
    "SortMode",
    "SortOption",
    "cycle_sort",
    "sort_entries",
    "sort_label",
]
