"""Request and response models for the foods API."""

from __future__ import annotations

from datetime import datetime  # noqa: TC003
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from fresh_reminder.domain.expiry import ensure_utc
from fresh_reminder.domain.foods import FoodDraft

if TYPE_CHECKING:
    from fresh_reminder.domain.foods import FoodRecord, InsertOutcome, UpdateOutcome


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FoodIn(_CamelModel):
    """Body for creating or fully replacing a food.

    Dates accept ISO-8601 strings; a bare date is midnight UTC.
    """

    user_email: str | None = None
    name: str | None = None
    quantity: Any = None
    category: str | None = None
    expiry_date: datetime | None = None
    added_date: datetime | None = None

    @field_validator("expiry_date", "added_date")
    @classmethod
    def _coerce_utc(cls, value: datetime | None) -> datetime | None:
        return ensure_utc(value) if value is not None else None

    def to_draft(self, user_email: str | None = None) -> FoodDraft:
        """Convert to a domain draft, optionally overriding the owner."""
        return FoodDraft(
            user_email=user_email if user_email is not None else self.user_email,
            name=self.name,
            quantity=self.quantity,
            category=self.category,
            expiry_date=self.expiry_date,
            added_date=self.added_date,
        )


class FoodOut(_CamelModel):
    """A stored food as returned to clients."""

    id: str = Field(alias="_id")
    user_email: str | None = None
    name: str | None = None
    quantity: Any = None
    category: str | None = None
    expiry_date: datetime | None = None
    added_date: datetime | None = None
    note: dict[str, Any] | None = None

    @classmethod
    def from_record(cls, record: FoodRecord) -> FoodOut:
        return cls(
            id=record.id,
            user_email=record.user_email,
            name=record.name,
            quantity=record.quantity,
            category=record.category,
            expiry_date=record.expiry_date,
            added_date=record.added_date,
            note=record.note,
        )


class InsertAck(_CamelModel):
    """Acknowledgment for an insert."""

    acknowledged: bool = True
    inserted_id: str

    @classmethod
    def from_outcome(cls, outcome: InsertOutcome) -> InsertAck:
        return cls(inserted_id=outcome.inserted_id)


class UpdateAck(_CamelModel):
    """Acknowledgment for a replace or a note patch."""

    acknowledged: bool = True
    matched_count: int
    modified_count: int
    upserted_count: int = 0
    upserted_id: str | None = None

    @classmethod
    def from_outcome(cls, outcome: UpdateOutcome) -> UpdateAck:
        return cls(
            matched_count=outcome.matched_count,
            modified_count=outcome.modified_count,
            upserted_count=1 if outcome.upserted_id else 0,
            upserted_id=outcome.upserted_id,
        )


class DeleteAck(_CamelModel):
    """Acknowledgment for a delete."""

    acknowledged: bool = True
    deleted_count: int
