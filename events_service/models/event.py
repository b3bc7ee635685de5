"""Event model definition."""

import uuid
from typing import Dict, Any
from sqlalchemy import Column, Integer, String, Text, DateTime, JSON, Uuid

from .base import Base
from ..utils.identifiers import to_external_id
from ..utils.timezone import ensure_utc, now_utc, to_iso

EVENT_TYPE = 'event'

class EventRecord(Base):
    """
    Model for a stored event.

    Fields:
        id: Unique identifier, assigned on insert and never changed
        type: Kind tag, always 'event'
        uid: Identifier of the creating user
        name: Event name
        tagline: Short tagline
        schedule: When the event takes place
        description: Event description
        image: Storage path of the uploaded event image
        moderator: Name of the moderator
        category: Event category
        sub_category: Event sub-category
        rigor_rank: Integer rigor rank
        attendees: Ordered list of attendee user IDs
        created_at: When the event was created
        updated_at: When the event was last modified
    """
    __tablename__ = 'events'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    type = Column(String, nullable=False, default=EVENT_TYPE)
    uid = Column(Integer)
    name = Column(String, nullable=False)
    tagline = Column(String, nullable=False)
    schedule = Column(DateTime(timezone=True), nullable=False, index=True)
    description = Column(Text, nullable=False)
    image = Column(String, nullable=False)
    moderator = Column(String, nullable=False)
    category = Column(String, nullable=False)
    sub_category = Column(String, nullable=False)
    rigor_rank = Column(Integer, nullable=False)
    attendees = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), nullable=False, default=now_utc)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=now_utc)

    # Columns a caller may change through an update
    UPDATABLE_FIELDS = (
        'uid', 'name', 'tagline', 'schedule', 'description', 'image',
        'moderator', 'category', 'sub_category', 'rigor_rank', 'attendees',
    )

    def __init__(self, **kwargs):
        """Initialize EventRecord with the given attributes."""
        for key in ('schedule', 'created_at', 'updated_at'):
            if kwargs.get(key) is not None:
                kwargs[key] = ensure_utc(kwargs[key])

        super().__init__(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-ready dictionary."""
        return {
            'id': to_external_id(self.id) if self.id else None,
            'type': self.type,
            'uid': self.uid,
            'name': self.name,
            'tagline': self.tagline,
            'schedule': to_iso(self.schedule),
            'description': self.description,
            'image': self.image,
            'moderator': self.moderator,
            'category': self.category,
            'sub_category': self.sub_category,
            'rigor_rank': self.rigor_rank,
            'attendees': list(self.attendees or []),
            'created_at': to_iso(self.created_at),
            'updated_at': to_iso(self.updated_at),
        }

    def __str__(self) -> str:
        """String representation."""
        return f"EventRecord(id={self.id}, name={self.name}, schedule={self.schedule})"
