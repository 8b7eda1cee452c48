"""Filter specification models for advanced vehicle search.

A FilterSpecification is an immutable snapshot: every change produces a new
instance, so saved searches and memoized views can hold on to one safely.
The JSON layout (camelCase keys, null for "no constraint") is shared with the
saved-search store.
"""

from __future__ import annotations

from typing import Any, Literal, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel, to_snake

from ..errors import ValidationError
from .vehicle import VehicleStatus

ALL = "all"
NO_TITLE = "no-title"

_FROZEN = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class PriceRange(BaseModel):
    """Inclusive price bounds; an empty string leaves that side open."""

    model_config = _FROZEN

    min: str = ""
    max: str = ""

    @property
    def is_active(self) -> bool:
        return bool(self.min or self.max)


class DateRange(BaseModel):
    """Inclusive creation-date bounds as YYYY-MM-DD strings."""

    model_config = _FROZEN

    start_date: str = ""
    end_date: str = ""

    @property
    def is_active(self) -> bool:
        return bool(self.start_date or self.end_date)


class FilterSpecification(BaseModel):
    """Declarative description of which vehicles to show.

    The default instance constrains nothing and matches every vehicle.
    """

    model_config = _FROZEN

    search_term: str = ""
    status: Union[Literal["all"], VehicleStatus] = ALL
    paperwork: str = ALL
    price_range: PriceRange = PriceRange()
    date_range: DateRange = DateRange()
    has_images: Optional[bool] = None
    has_documents: Optional[bool] = None

    def has_active_filters(self) -> bool:
        """Whether any field differs from its "no constraint" default."""
        return bool(
            self.search_term.strip()
            or self.status != ALL
            or self.paperwork != ALL
            or self.price_range.is_active
            or self.date_range.is_active
            or self.has_images is not None
            or self.has_documents is not None
        )

    def merged(
        self, changes: Union["FilterSpecification", Mapping[str, Any]]
    ) -> "FilterSpecification":
        """Return a new specification with ``changes`` applied.

        Args:
            changes: A full specification (replaces this one) or a partial
                mapping using snake_case or camelCase keys. Nested price and
                date ranges may themselves be partial.

        Returns:
            The updated specification.

        Raises:
            ValidationError: If a key names no filter field.
        """
        if isinstance(changes, FilterSpecification):
            return changes

        data = self.model_dump()
        for key, value in changes.items():
            name = _field_name(key, FilterSpecification)
            if name in ("price_range", "date_range") and isinstance(value, Mapping):
                nested = dict(data[name])
                for sub_key, sub_value in value.items():
                    nested[_field_name(sub_key, type(getattr(self, name)))] = sub_value
                data[name] = nested
            elif name in ("price_range", "date_range") and isinstance(value, BaseModel):
                data[name] = value.model_dump()
            else:
                data[name] = value
        return FilterSpecification.model_validate(data)

    def to_json_dict(self) -> dict:
        """Serialize to the camelCase wire layout."""
        return self.model_dump(mode="json", by_alias=True)


def _field_name(key: str, model: type) -> str:
    """Map a camelCase or snake_case key to a field name of ``model``."""
    name = to_snake(key)
    if name not in model.model_fields:
        raise ValidationError(f"Unknown filter field: {key}")
    return name
