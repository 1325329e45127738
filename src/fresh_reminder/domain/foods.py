"""Domain models for tracked food items."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class FoodRecord:
    """Represents a food item stored in the collection."""

    id: str
    user_email: str | None
    name: str | None
    quantity: object | None
    category: str | None
    expiry_date: datetime | None
    added_date: datetime | None
    note: dict[str, object] | None = None


@dataclass(frozen=True)
class FoodDraft:
    """Client-supplied fields for an insert or a full replace."""

    user_email: str | None
    name: str | None
    quantity: object | None
    category: str | None
    expiry_date: datetime | None
    added_date: datetime | None


@dataclass(frozen=True)
class UpdateOutcome:
    """Counts reported by the store for an update."""

    matched_count: int
    modified_count: int
    upserted_id: str | None = None


@dataclass(frozen=True)
class InsertOutcome:
    """Identifier assigned by the store for an insert."""

    inserted_id: str
