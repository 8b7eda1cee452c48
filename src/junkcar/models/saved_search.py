"""Saved search model: a named, persisted filter snapshot."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from .filters import FilterSpecification


class SavedSearch(BaseModel):
    """A named filter snapshot.

    Never edited in place: renaming or changing filters means deleting the
    entry and saving a new one.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    name: str
    filters: FilterSpecification
    created_at: str
