"""Persistence operations for events.

Every method works in its own transaction and returns plain dictionaries, so
nothing handed back to a route is bound to a closed session.
"""

import logging
import uuid
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, func, select

from .db_core import Database, ConnectionError
from ..models.event import EventRecord

logger = logging.getLogger(__name__)

class EventStore:
    """Record store for the ``events`` table."""

    def __init__(self, database: Database):
        if not database.is_connected:
            raise ConnectionError("Database not initialized. Call connect() first.")
        self.database = database

    def find_by_id(self, event_id: uuid.UUID) -> Optional[Dict[str, Any]]:
        """Get a single event, or None if no event has this ID."""
        with self.database.session() as session:
            record = session.get(EventRecord, event_id)
            return record.to_dict() if record else None

    def count(self) -> int:
        """Count all stored events."""
        with self.database.session() as session:
            return session.scalar(select(func.count()).select_from(EventRecord))

    def find_page(self, offset: int, limit: int) -> List[Dict[str, Any]]:
        """Get one page of events, latest schedule first."""
        with self.database.session() as session:
            records = session.scalars(
                select(EventRecord)
                .order_by(EventRecord.schedule.desc())
                .offset(offset)
                .limit(limit)
            ).all()
            return [record.to_dict() for record in records]

    def insert(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        """Insert a new event and return it with its assigned ID."""
        with self.database.session() as session:
            record = EventRecord(**fields)
            session.add(record)
            session.flush()
            logger.info(f"Inserted event {record.id}")
            return record.to_dict()

    def update(self, event_id: uuid.UUID, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Apply a partial update and return the updated event.

        Only the keys present in ``changes`` are written. The row is locked for
        the duration of the transaction where the backend supports it.

        Returns:
            The event after the update, or None if no event has this ID
        """
        with self.database.session() as session:
            record = session.get(EventRecord, event_id, with_for_update=True)
            if record is None:
                return None

            for key, value in changes.items():
                setattr(record, key, value)
            session.flush()
            logger.info(f"Updated event {event_id}: {', '.join(sorted(changes))}")
            return record.to_dict()

    def delete(self, event_id: uuid.UUID) -> bool:
        """Delete an event. Returns False if nothing was removed."""
        with self.database.session() as session:
            result = session.execute(delete(EventRecord).where(EventRecord.id == event_id))
            deleted = result.rowcount > 0
            if deleted:
                logger.info(f"Deleted event {event_id}")
            return deleted
