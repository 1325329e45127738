"""MongoDB-backed food repository."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, TypeVar

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ASCENDING, AsyncMongoClient
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.errors import ConnectionFailure, PyMongoError
from pymongo.server_api import ServerApi

from fresh_reminder.domain.errors import StoreFailure, StoreUnavailable
from fresh_reminder.domain.expiry import ExpiryWindow, ensure_utc
from fresh_reminder.domain.foods import (
    FoodDraft,
    FoodRecord,
    InsertOutcome,
    UpdateOutcome,
)
from fresh_reminder.services.foods import FoodRepository
from fresh_reminder.services.retry import RetryPolicy, retry_async

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Connection-level failures: AutoReconnect, NetworkTimeout and
# ServerSelectionTimeoutError all derive from ConnectionFailure.
_TRANSIENT_ERRORS: tuple[type[BaseException], ...] = (ConnectionFailure,)
_SINGLE_ATTEMPT = RetryPolicy(attempts=1)


def create_mongo_client(uri: str) -> AsyncMongoClient:
    """Create the shared store client pinned to Stable API v1."""
    return AsyncMongoClient(
        uri,
        server_api=ServerApi("1", strict=True, deprecation_errors=True),
        tz_aware=True,
    )


async def ping(client: AsyncMongoClient) -> None:
    """Round-trip a ping command to confirm the deployment is reachable."""
    await client.admin.command("ping")


@dataclass
class MongoFoodRepository(FoodRepository):
    """MongoDB implementation for food persistence."""

    collection: AsyncCollection
    retry_policy: RetryPolicy = field(default_factory=RetryPolicy)

    async def list_foods(self, user_email: str | None) -> list[FoodRecord]:
        """Return all foods, or only those owned by ``user_email``."""
        query: dict[str, object] = {}
        if user_email:
            query["userEmail"] = user_email
        documents = await self._run(
            "list foods", lambda: self.collection.find(query).to_list()
        )
        return [_parse_food(document) for document in documents]

    async def get_food(self, food_id: str) -> FoodRecord | None:
        """Return a food by id, if present."""
        object_id = _object_id(food_id)
        if object_id is None:
            return None
        document = await self._run(
            "get food", lambda: self.collection.find_one({"_id": object_id})
        )
        if document is None:
            return None
        return _parse_food(document)

    async def insert_food(self, draft: FoodDraft) -> InsertOutcome:
        """Insert a food document and return its id."""
        document = {"userEmail": draft.user_email, **_descriptive_document(draft)}
        result = await self._run(
            "insert food",
            lambda: self.collection.insert_one(document),
            repeatable=False,
        )
        return InsertOutcome(inserted_id=str(result.inserted_id))

    async def replace_food(
        self, food_id: str, draft: FoodDraft, created_at: datetime
    ) -> UpdateOutcome:
        """Overwrite descriptive fields, creating the food when missing.

        The owner email is only written when the upsert creates the document.
        Without a client added date the stored one is kept, and a created
        document gets ``created_at``.
        """
        object_id = _object_id(food_id)
        if object_id is None:
            return UpdateOutcome(matched_count=0, modified_count=0)
        descriptive = _descriptive_document(draft)
        on_insert: dict[str, object] = {"userEmail": draft.user_email}
        if draft.added_date is None:
            del descriptive["addedDate"]
            on_insert["addedDate"] = created_at
        update = {"$set": descriptive, "$setOnInsert": on_insert}
        result = await self._run(
            "replace food",
            lambda: self.collection.update_one(
                {"_id": object_id}, update, upsert=True
            ),
        )
        return _update_outcome(result)

    async def set_note(self, food_id: str, note: dict[str, object]) -> UpdateOutcome:
        """Replace the note sub-document wholesale."""
        object_id = _object_id(food_id)
        if object_id is None:
            return UpdateOutcome(matched_count=0, modified_count=0)
        result = await self._run(
            "patch food note",
            lambda: self.collection.update_one(
                {"_id": object_id}, {"$set": {"note": note}}
            ),
        )
        return _update_outcome(result)

    async def delete_food(self, food_id: str) -> int:
        """Delete a food and return the number of removed documents."""
        object_id = _object_id(food_id)
        if object_id is None:
            return 0
        result = await self._run(
            "delete food",
            lambda: self.collection.delete_one({"_id": object_id}),
            repeatable=False,
        )
        return int(result.deleted_count)

    async def list_expiring(self, window: ExpiryWindow, limit: int) -> list[FoodRecord]:
        """Return foods expiring inside the window, soonest first."""
        query = {"expiryDate": {"$gte": window.start, "$lte": window.end}}
        documents = await self._run(
            "list expiring foods",
            lambda: self.collection.find(query)
            .sort("expiryDate", ASCENDING)
            .limit(limit)
            .to_list(),
        )
        return [_parse_food(document) for document in documents]

    async def _run(
        self,
        description: str,
        operation: Callable[[], Awaitable[T]],
        repeatable: bool = True,
    ) -> T:
        """Run a store call, translating driver errors.

        Only repeatable calls are retried here; inserts and deletes rely on
        the driver's retryable writes.
        """
        policy = self.retry_policy if repeatable else _SINGLE_ATTEMPT
        try:
            return await retry_async(
                operation,
                policy=policy,
                retry_on=_TRANSIENT_ERRORS,
                description=description,
            )
        except ConnectionFailure as exc:
            raise StoreUnavailable from exc
        except PyMongoError as exc:
            logger.exception("Store call failed: %s", description)
            raise StoreFailure from exc


def _object_id(food_id: str) -> ObjectId | None:
    try:
        return ObjectId(food_id)
    except (InvalidId, TypeError):
        return None


def _descriptive_document(draft: FoodDraft) -> dict[str, object]:
    return {
        "name": draft.name,
        "quantity": draft.quantity,
        "category": draft.category,
        "expiryDate": draft.expiry_date,
        "addedDate": draft.added_date,
    }


def _update_outcome(result: Any) -> UpdateOutcome:
    upserted_id = result.upserted_id
    return UpdateOutcome(
        matched_count=int(result.matched_count),
        modified_count=int(result.modified_count),
        upserted_id=str(upserted_id) if upserted_id is not None else None,
    )


def _parse_datetime(value: object) -> datetime | None:
    """Parse stored dates, including legacy documents that kept strings."""
    if isinstance(value, datetime):
        return ensure_utc(value)
    if isinstance(value, str) and value:
        try:
            return ensure_utc(datetime.fromisoformat(value))
        except ValueError:
            return None
    return None


def _parse_food(document: dict[str, Any]) -> FoodRecord:
    """Parse a food document into a domain model."""
    note = document.get("note")
    return FoodRecord(
        id=str(document["_id"]),
        user_email=document.get("userEmail"),
        name=document.get("name"),
        quantity=document.get("quantity"),
        category=document.get("category"),
        expiry_date=_parse_datetime(document.get("expiryDate")),
        added_date=_parse_datetime(document.get("addedDate")),
        note=note if isinstance(note, dict) else None,
    )
