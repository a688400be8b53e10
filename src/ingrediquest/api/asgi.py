"""ASGI entrypoint for the IngrediQuest API."""

from ingrediquest.api.app import create_app
from ingrediquest.containers import build_container

app = create_app(build_container())
