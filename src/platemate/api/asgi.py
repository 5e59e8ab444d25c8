"""ASGI entrypoint for the PlateMate API."""

from platemate.api.app import create_app
from platemate.containers import build_container

app = create_app(build_container())
