"""Conversion between external event ID strings and internal UUIDs.

Malformed IDs are reported as ``None`` so callers can answer with a 400
instead of letting the lookup blow up into a 500.
"""

import re
import uuid
from typing import Optional

# Plain 32 hex digits, or the canonical 8-4-4-4-12 form
_ID_PATTERN = re.compile(
    r'^(?:[0-9a-f]{32}|[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12})$',
    re.IGNORECASE
)

def is_valid_id(value) -> bool:
    """Check whether a value looks like an event ID."""
    return isinstance(value, str) and bool(_ID_PATTERN.match(value))

def to_internal_id(value) -> Optional[uuid.UUID]:
    """
    Convert an external ID string to the store's UUID type.

    Returns:
        The UUID, or None if the value is not a well-formed ID. Never raises.
    """
    if not is_valid_id(value):
        return None
    try:
        return uuid.UUID(value)
    except (ValueError, TypeError, AttributeError):
        return None

def to_external_id(value: uuid.UUID) -> str:
    """Render an internal ID in canonical hyphenated form."""
    return str(value)
