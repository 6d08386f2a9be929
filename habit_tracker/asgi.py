"""ASGI entrypoint: ``uvicorn habit_tracker.asgi:app``."""

from .application import create_app

app = create_app()

__all__ = ["app", "create_app"]
