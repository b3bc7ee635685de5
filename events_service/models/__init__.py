"""Models package initialization."""

from .base import Base
from .event import EventRecord, EVENT_TYPE
from .nudge import Nudge, NudgeStatus, NudgeStateError

__all__ = ['Base', 'EventRecord', 'EVENT_TYPE', 'Nudge', 'NudgeStatus', 'NudgeStateError']
