"""Advanced vehicle search: filtering, live filter state, saved searches, stats."""

from .filter_state import FilterState
from .predicates import filter_vehicles, matches
from .saved_searches import (
    InMemorySearchStorage,
    JsonFileSearchStorage,
    SavedSearchRegistry,
    SavedSearchStorage,
)
from .stats import summarize

__all__ = [
    "FilterState",
    "InMemorySearchStorage",
    "JsonFileSearchStorage",
    "SavedSearchRegistry",
    "SavedSearchStorage",
    "filter_vehicles",
    "matches",
    "summarize",
]
