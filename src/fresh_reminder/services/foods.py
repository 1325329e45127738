"""Services for tracked food items."""

from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime, tzinfo
from typing import Protocol

from fresh_reminder.domain.errors import FoodNotFound, Forbidden
from fresh_reminder.domain.expiry import ExpiryWindow, expiry_window
from fresh_reminder.domain.foods import (
    FoodDraft,
    FoodRecord,
    InsertOutcome,
    UpdateOutcome,
)
from fresh_reminder.domain.identity import VerifiedIdentity


class FoodRepository(Protocol):
    """Persistence interface for food records."""

    async def list_foods(self, user_email: str | None) -> list[FoodRecord]:
        """Return all foods, or only those owned by ``user_email``."""

    async def get_food(self, food_id: str) -> FoodRecord | None:
        """Return a food by id, if present."""

    async def insert_food(self, draft: FoodDraft) -> InsertOutcome:
        """Insert a new food and return its id."""

    async def replace_food(
        self, food_id: str, draft: FoodDraft, created_at: datetime
    ) -> UpdateOutcome:
        """Overwrite a food's fields, creating it when missing.

        The owner is only written on creation. A draft without an added date
        keeps the stored one, and a created food is stamped with ``created_at``.
        """

    async def set_note(self, food_id: str, note: dict[str, object]) -> UpdateOutcome:
        """Replace the note sub-document of a food."""

    async def delete_food(self, food_id: str) -> int:
        """Delete a food and return the number of removed records."""

    async def list_expiring(self, window: ExpiryWindow, limit: int) -> list[FoodRecord]:
        """Return up to ``limit`` foods expiring inside the window, soonest first."""


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class FoodService:
    """Application service for food records."""

    repository: FoodRepository
    expiry_window_days: int = 5
    expiry_result_limit: int = 6
    expiry_zone: tzinfo = UTC
    clock: Callable[[], datetime] = field(default=_utc_now)

    async def list_foods(self, user_email: str | None = None) -> list[FoodRecord]:
        """List foods, filtered by owner when an email is given."""
        return await self.repository.list_foods(user_email or None)

    async def get_food(self, food_id: str) -> FoodRecord:
        """Return a food or raise FoodNotFound."""
        food = await self.repository.get_food(food_id)
        if food is None:
            raise FoodNotFound
        return food

    async def create_food(self, draft: FoodDraft) -> InsertOutcome:
        """Insert a food, stamping the added date when the client omitted it."""
        if draft.added_date is None:
            draft = replace(draft, added_date=self.clock())
        return await self.repository.insert_food(draft)

    async def replace_food(self, food_id: str, draft: FoodDraft) -> UpdateOutcome:
        """Replace a food's fields, creating the food when the id is unused.

        An omitted added date keeps the stored value; a created food gets now.
        """
        outcome = await self.repository.replace_food(food_id, draft, self.clock())
        if outcome.matched_count == 0 and outcome.upserted_id is None:
            raise FoodNotFound
        return outcome

    async def patch_note(
        self, food_id: str, note: dict[str, object]
    ) -> UpdateOutcome:
        """Overwrite the note of an existing food."""
        outcome = await self.repository.set_note(food_id, note)
        if outcome.matched_count == 0:
            raise FoodNotFound
        return outcome

    async def delete_food(self, food_id: str) -> int:
        """Delete an existing food."""
        deleted = await self.repository.delete_food(food_id)
        if deleted == 0:
            raise FoodNotFound
        return deleted

    async def expiring_soon(self, now: datetime | None = None) -> list[FoodRecord]:
        """Return the soonest-expiring foods inside the rolling window."""
        window = expiry_window(
            now or self.clock(), self.expiry_window_days, self.expiry_zone
        )
        return await self.repository.list_expiring(window, self.expiry_result_limit)

    async def ensure_owner(self, identity: VerifiedIdentity, food_id: str) -> None:
        """Reject callers that do not own an existing food.

        Missing foods pass so a replace can still create them.
        """
        food = await self.repository.get_food(food_id)
        if food is None:
            return
        if identity.email is None or food.user_email != identity.email:
            raise Forbidden

