"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from fresh_reminder.api.foods import router as foods_router
from fresh_reminder.app_logging import configure_logging
from fresh_reminder.config import parse_cors_origins
from fresh_reminder.containers import AppContainer
from fresh_reminder.domain.errors import FreshReminderError


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        try:
            await app.state.container.ping_store()
            logger.info("Pinged the food store")
        except Exception:
            logger.exception("Failed to ping the food store")
        yield
        await app.state.container.close_resources()

    app = FastAPI(title="Fresh Reminder API", lifespan=lifespan)
    app.state.container = container

    app.add_middleware(
        CORSMiddleware,
        allow_origins=parse_cors_origins(container.settings.cors_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(foods_router)

    @app.exception_handler(FreshReminderError)
    async def handle_domain_error(
        request: Request, exc: FreshReminderError
    ) -> JSONResponse:
        return JSONResponse(status_code=exc.http_status, content=exc.to_dict())

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "Unhandled error on %s %s",
            request.method,
            request.url.path,
            exc_info=exc,
        )
        return JSONResponse(
            status_code=500, content={"message": "internal server error"}
        )

    @app.get("/", response_class=PlainTextResponse)
    async def root() -> str:
        """Liveness text."""
        return "Food Server is running"

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app
