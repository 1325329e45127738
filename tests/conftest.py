"""Shared test fixtures."""

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from fresh_reminder.api.app import create_app
from fresh_reminder.config import Settings
from fresh_reminder.containers import AppContainer
from fresh_reminder.domain.errors import Unauthorized
from fresh_reminder.domain.expiry import ExpiryWindow, ensure_utc
from fresh_reminder.domain.foods import (
    FoodDraft,
    FoodRecord,
    InsertOutcome,
    UpdateOutcome,
)
from fresh_reminder.domain.identity import VerifiedIdentity
from fresh_reminder.services.access import AccessService, IdentityProvider
from fresh_reminder.services.foods import FoodRepository, FoodService

FIXED_NOW = datetime(2025, 1, 10, 12, 0, tzinfo=UTC)

ALICE = VerifiedIdentity(subject="user-alice", email="alice@example.com")
BOB = VerifiedIdentity(subject="user-bob", email="bob@example.com")
NO_EMAIL = VerifiedIdentity(subject="user-phone-only", email=None)


def make_food(**overrides: object) -> FoodRecord:
    """Build a food record with a fresh id and sensible defaults."""
    fields: dict[str, object] = {
        "id": str(ObjectId()),
        "user_email": ALICE.email,
        "name": "Milk",
        "quantity": 1,
        "category": "dairy",
        "expiry_date": FIXED_NOW,
        "added_date": FIXED_NOW,
        "note": None,
    }
    fields.update(overrides)
    return FoodRecord(**fields)  # type: ignore[arg-type]


def _record_from_draft(food_id: str, draft: FoodDraft) -> FoodRecord:
    return FoodRecord(
        id=food_id,
        user_email=draft.user_email,
        name=draft.name,
        quantity=draft.quantity,
        category=draft.category,
        expiry_date=draft.expiry_date,
        added_date=draft.added_date,
    )


@dataclass
class InMemoryFoodRepository(FoodRepository):
    """In-memory food repository for tests."""

    foods: dict[str, FoodRecord] = field(default_factory=dict)

    def seed(self, *records: FoodRecord) -> None:
        for record in records:
            self.foods[record.id] = record

    async def list_foods(self, user_email: str | None) -> list[FoodRecord]:
        return [
            food
            for food in self.foods.values()
            if user_email is None or food.user_email == user_email
        ]

    async def get_food(self, food_id: str) -> FoodRecord | None:
        return self.foods.get(food_id)

    async def insert_food(self, draft: FoodDraft) -> InsertOutcome:
        food_id = str(ObjectId())
        self.foods[food_id] = _record_from_draft(food_id, draft)
        return InsertOutcome(inserted_id=food_id)

    async def replace_food(
        self, food_id: str, draft: FoodDraft, created_at: datetime
    ) -> UpdateOutcome:
        current = self.foods.get(food_id)
        if current is None:
            if draft.added_date is None:
                draft = replace(draft, added_date=created_at)
            self.foods[food_id] = _record_from_draft(food_id, draft)
            return UpdateOutcome(matched_count=0, modified_count=0, upserted_id=food_id)
        updated = replace(
            current,
            name=draft.name,
            quantity=draft.quantity,
            category=draft.category,
            expiry_date=draft.expiry_date,
            added_date=draft.added_date or current.added_date,
        )
        self.foods[food_id] = updated
        return UpdateOutcome(matched_count=1, modified_count=int(updated != current))

    async def set_note(self, food_id: str, note: dict[str, object]) -> UpdateOutcome:
        current = self.foods.get(food_id)
        if current is None:
            return UpdateOutcome(matched_count=0, modified_count=0)
        self.foods[food_id] = replace(current, note=note)
        return UpdateOutcome(matched_count=1, modified_count=int(current.note != note))

    async def delete_food(self, food_id: str) -> int:
        return 1 if self.foods.pop(food_id, None) is not None else 0

    async def list_expiring(self, window: ExpiryWindow, limit: int) -> list[FoodRecord]:
        matching = [
            food
            for food in self.foods.values()
            if food.expiry_date is not None
            and window.start <= ensure_utc(food.expiry_date) <= window.end
        ]
        matching.sort(key=lambda food: food.expiry_date or FIXED_NOW)
        return matching[:limit]


@dataclass
class FakeIdentityProvider(IdentityProvider):
    """Maps known tokens to identities and records every verification."""

    tokens: dict[str, VerifiedIdentity] = field(default_factory=dict)
    calls: list[str] = field(default_factory=list)

    async def verify_token(self, token: str) -> VerifiedIdentity:
        self.calls.append(token)
        identity = self.tokens.get(token)
        if identity is None:
            raise Unauthorized
        return identity


def auth(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        mongo_uri="mongodb://localhost:27017",
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
        log_level="INFO",
    )


@pytest.fixture()
def food_repository() -> InMemoryFoodRepository:
    return InMemoryFoodRepository()


@pytest.fixture()
def identity_provider() -> FakeIdentityProvider:
    return FakeIdentityProvider(
        tokens={"alice-token": ALICE, "bob-token": BOB, "no-email-token": NO_EMAIL}
    )


@pytest.fixture()
def food_service(food_repository: InMemoryFoodRepository) -> FoodService:
    return FoodService(repository=food_repository, clock=lambda: FIXED_NOW)


@pytest.fixture()
def lifecycle() -> list[str]:
    return []


@pytest.fixture()
def container(
    settings: Settings,
    food_service: FoodService,
    identity_provider: FakeIdentityProvider,
    lifecycle: list[str],
) -> AppContainer:
    async def ping_store() -> None:
        lifecycle.append("ping")

    async def close_resources() -> None:
        lifecycle.append("close")

    return AppContainer(
        settings=settings,
        food_service=food_service,
        access_service=AccessService(identity_provider),
        ping_store=ping_store,
        close_resources=close_resources,
    )


@pytest.fixture()
def client(container: AppContainer) -> TestClient:
    return TestClient(create_app(container))
