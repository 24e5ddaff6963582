"""ASGI entrypoint for the mood engine API."""

from mood_engine.api.app import create_app
from mood_engine.containers import build_container

app = create_app(build_container())
