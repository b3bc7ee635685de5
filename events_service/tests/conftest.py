"""Shared fixtures: an application wired to a throwaway SQLite database."""

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from events_service.api import create_application
from events_service.config.settings import Settings
from events_service.db import EventStore

# Smallest valid PNG header is enough; the service does not inspect file contents
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64

@pytest.fixture
def settings(tmp_path):
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'events_test.db'}",
        db_name='events_test',
        upload_dir=tmp_path / 'uploads',
        max_file_size=1024,
        is_production=False,
        cors_origins=[],
    )

@pytest.fixture
def app(settings):
    return create_application(settings)

@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client

@pytest.fixture
def store(client, app):
    return EventStore(app.state.database)

@pytest.fixture
def event_form():
    """Form fields for a valid event, as a browser would send them."""
    return {
        'name': 'Python Meetup',
        'tagline': 'Talks and pizza',
        'schedule': '2025-03-14T18:00:00Z',
        'description': 'Monthly meetup for Python developers',
        'moderator': 'Alex',
        'category': 'tech',
        'sub_category': 'python',
        'rigor_rank': '3',
        'attendees': '["u1", "u2"]',
    }

def image_file(name='poster.png', content=PNG_BYTES, content_type='image/png'):
    return {'image': (name, content, content_type)}

def make_event_fields(index=0, **overrides):
    """Typed fields for inserting straight into the store."""
    now = datetime.now(timezone.utc)
    fields = {
        'type': 'event',
        'uid': 18,
        'name': f'Event {index}',
        'tagline': 'tagline',
        'schedule': datetime(2025, 1, 1, tzinfo=timezone.utc) + timedelta(days=index),
        'description': 'description',
        'image': f'uploads/image-{index}.png',
        'moderator': 'moderator',
        'category': 'category',
        'sub_category': 'sub_category',
        'rigor_rank': 1,
        'attendees': [],
        'created_at': now,
        'updated_at': now,
    }
    fields.update(overrides)
    return fields
