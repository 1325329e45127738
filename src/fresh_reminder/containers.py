"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from zoneinfo import ZoneInfo

from supabase import create_client

from fresh_reminder.adapters.mongo_food_repository import (
    MongoFoodRepository,
    create_mongo_client,
    ping,
)
from fresh_reminder.adapters.supabase_identity_provider import (
    SupabaseIdentityProvider,
)
from fresh_reminder.config import Settings
from fresh_reminder.services.access import AccessService
from fresh_reminder.services.foods import FoodService
from fresh_reminder.services.retry import RetryPolicy


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    food_service: FoodService
    access_service: AccessService
    ping_store: Callable[[], Awaitable[None]]
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    mongo_client = create_mongo_client(resolved_settings.mongo_uri)
    collection = mongo_client[resolved_settings.mongo_db_name][
        resolved_settings.mongo_collection
    ]
    food_repository = MongoFoodRepository(
        collection=collection,
        retry_policy=RetryPolicy(
            attempts=resolved_settings.store_retry_attempts,
            initial_delay=resolved_settings.store_retry_delay_sec,
        ),
    )
    food_service = FoodService(
        repository=food_repository,
        expiry_window_days=resolved_settings.expiry_window_days,
        expiry_result_limit=resolved_settings.expiry_result_limit,
        expiry_zone=ZoneInfo(resolved_settings.expiry_timezone),
    )
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    access_service = AccessService(SupabaseIdentityProvider(supabase_client))

    async def ping_store() -> None:
        await ping(mongo_client)

    async def close_resources() -> None:
        await mongo_client.close()

    return AppContainer(
        settings=resolved_settings,
        food_service=food_service,
        access_service=access_service,
        ping_store=ping_store,
        close_resources=close_resources,
    )
