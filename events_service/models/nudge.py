"""Nudge model definition.

A nudge is a promotional notification attached to an event. Only the model and
its status rules live here; delivery is done by an external process that is
expected to call ``mark_sent()`` once a nudge has gone out.
"""

from datetime import datetime
from enum import Enum
from typing import Optional, Dict, Any
from dataclasses import dataclass, field

from ..utils.timezone import ensure_utc, now_utc, to_iso

class NudgeStatus(str, Enum):
    PENDING = 'pending'
    SENT = 'sent'
    CANCELLED = 'cancelled'

class NudgeStateError(ValueError):
    """Raised on a status change that is not allowed."""
    pass

@dataclass
class Nudge:
    """
    Nudge model.

    Fields:
        event_id: External ID of the event being promoted
        title: Headline of the nudge
        image: Storage path of the cover image
        icon: Storage path of the icon
        schedule_start: When the nudge may start being delivered
        schedule_end: When delivery stops
        invitation: One-line marketing copy
        description: Longer body text
        status: Delivery status; only pending nudges can change
        id: Unique identifier (optional until stored)
        created_at: When the nudge was created
    """
    event_id: str
    title: str
    image: str
    icon: str
    schedule_start: datetime
    schedule_end: datetime
    invitation: str
    description: Optional[str] = None
    status: NudgeStatus = NudgeStatus.PENDING
    id: Optional[str] = None
    created_at: datetime = field(default_factory=now_utc)

    def __post_init__(self):
        self.schedule_start = ensure_utc(self.schedule_start)
        self.schedule_end = ensure_utc(self.schedule_end)
        self.status = NudgeStatus(self.status)
        if self.schedule_end < self.schedule_start:
            raise ValueError("schedule_end must not be before schedule_start")

    @property
    def is_final(self) -> bool:
        return self.status is not NudgeStatus.PENDING

    def _transition(self, target: NudgeStatus) -> None:
        if self.is_final:
            raise NudgeStateError(
                f"Cannot change nudge status from '{self.status.value}' to '{target.value}'"
            )
        self.status = target

    def mark_sent(self) -> None:
        """Record that the delivery process sent this nudge."""
        self._transition(NudgeStatus.SENT)

    def cancel(self) -> None:
        """Cancel a nudge that has not been sent yet."""
        self._transition(NudgeStatus.CANCELLED)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'event_id': self.event_id,
            'title': self.title,
            'image': self.image,
            'icon': self.icon,
            'schedule_start': to_iso(self.schedule_start),
            'schedule_end': to_iso(self.schedule_end),
            'invitation': self.invitation,
            'description': self.description,
            'status': self.status.value,
            'created_at': to_iso(self.created_at),
        }
