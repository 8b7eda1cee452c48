"""Vehicle data models for inventory tracking."""

from __future__ import annotations

from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class VehicleStatus(str, Enum):
    """Lifecycle status of a vehicle in the yard."""

    YARD = "yard"
    SOLD = "sold"
    PICK_YOUR_PART = "pick-your-part"
    SA_RECYCLING = "sa-recycling"


class VehicleDocument(BaseModel):
    """A document (title, bill of sale, scan) attached to a vehicle."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    name: str
    url: str
    size: Optional[int] = None


class Vehicle(BaseModel):
    """A vehicle record as stored in the vehicles table.

    Accepts both database rows (snake_case columns) and the client's
    camelCase JSON layout. Prices and dates are kept as the raw strings the
    store returns; parsing happens where they are used.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    year: str = ""
    make: str = ""
    model: str = ""
    vehicle_id: str = ""
    license_plate: Optional[str] = None
    status: VehicleStatus = VehicleStatus.YARD

    # Paperwork
    title_present: bool = False
    bill_of_sale: bool = False
    paperwork: Optional[str] = None
    paperwork_other: Optional[str] = None

    # Purchase / sale
    seller_name: Optional[str] = None
    purchase_date: Optional[str] = None
    purchase_price: Optional[str] = None
    destination: Optional[str] = None
    buyer_name: Optional[str] = None
    buyer_first_name: Optional[str] = None
    buyer_last_name: Optional[str] = None
    sale_date: Optional[str] = None
    sale_price: Optional[str] = None
    notes: Optional[str] = None

    created_at: Optional[str] = None

    car_images: List[str] = Field(default_factory=list)
    documents: List[VehicleDocument] = Field(default_factory=list)

    @field_validator("id", "year", "make", "model", "vehicle_id", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> str:
        """Coerce numeric/null columns (e.g. an integer year) to strings."""
        if v is None:
            return ""
        return str(v)

    @field_validator(
        "license_plate",
        "paperwork",
        "paperwork_other",
        "seller_name",
        "purchase_date",
        "purchase_price",
        "destination",
        "buyer_name",
        "buyer_first_name",
        "buyer_last_name",
        "sale_date",
        "sale_price",
        "notes",
        "created_at",
        mode="before",
    )
    @classmethod
    def blank_to_none(cls, v: Any) -> Optional[str]:
        """Treat empty strings as absent; numeric prices become strings."""
        if v is None:
            return None
        v = str(v)
        return v if v.strip() else None

    @field_validator("status", mode="before")
    @classmethod
    def default_status(cls, v: Any) -> Any:
        """Rows without a status are in the yard."""
        return v or VehicleStatus.YARD

    @field_validator("title_present", "bill_of_sale", mode="before")
    @classmethod
    def null_to_false(cls, v: Any) -> bool:
        """Null flags mean the paperwork is absent."""
        return bool(v)

    @field_validator("car_images", "documents", mode="before")
    @classmethod
    def null_to_empty(cls, v: Any) -> Any:
        """Null or non-list JSON columns become empty lists."""
        return v if isinstance(v, list) else []

    @property
    def buyer_full_name(self) -> str:
        """Buyer first and last name joined, empty when neither is known."""
        return " ".join(p for p in (self.buyer_first_name, self.buyer_last_name) if p)

    @property
    def has_images(self) -> bool:
        return len(self.car_images) > 0

    @property
    def has_documents(self) -> bool:
        return len(self.documents) > 0

    @property
    def display_name(self) -> str:
        """Year make model, e.g. "2004 Honda Civic"."""
        return " ".join(p for p in (self.year, self.make, self.model) if p)


class SoldDetails(BaseModel):
    """Buyer and sale details recorded when a vehicle is sold."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    buyer_first_name: str
    buyer_last_name: str
    sale_price: str
    sale_date: str

    @property
    def buyer_name(self) -> str:
        return f"{self.buyer_first_name} {self.buyer_last_name}".strip()
