"""ASGI entry point: ``uvicorn events_service.asgi:app``."""

from .api import create_application

app = create_application()
