"""ASGI entrypoint for the Eat What API."""

from eat_what.api.app import create_app
from eat_what.containers import build_container

app = create_app(build_container())
