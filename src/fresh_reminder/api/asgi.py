"""ASGI entrypoint for the fresh reminder API."""

from fresh_reminder.api.app import create_app
from fresh_reminder.containers import build_container

app = create_app(build_container())
