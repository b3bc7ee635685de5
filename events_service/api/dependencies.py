"""FastAPI dependencies shared by the routes."""

from fastapi import Request

from ..config.settings import Settings
from ..db import EventStore

def get_settings(request: Request) -> Settings:
    return request.app.state.settings

def get_event_store(request: Request) -> EventStore:
    """Event store bound to the database connected at startup."""
    return EventStore(request.app.state.database)
