"""Validation of normalized event records."""

from datetime import datetime
from typing import Any, Dict, Iterable

from ..errors import ValidationError
from .normalize import INTEGER_FIELDS

# Integer columns are 32-bit signed
INT_MIN = -2**31
INT_MAX = 2**31 - 1

REQUIRED_FIELDS = (
    'name',
    'tagline',
    'schedule',
    'description',
    'moderator',
    'category',
    'sub_category',
    'rigor_rank',
)

def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str) and not value.strip():
        return True
    return False

def validate_required_fields(data: Dict[str, Any], required_fields: Iterable[str]) -> None:
    """
    Check that every required field is present and not blank.

    All missing fields are reported together.

    Raises:
        ValidationError: If any field is missing or blank
    """
    missing_fields = [field for field in required_fields if _is_missing(data.get(field))]

    if missing_fields:
        raise ValidationError(f"Missing required fields: {', '.join(missing_fields)}")

def require_image(data: Dict[str, Any]) -> None:
    """Creating an event needs an uploaded image."""
    if not data.get('image'):
        raise ValidationError("Event image is required")

def validate_event_data(event_data: Dict[str, Any], is_update: bool = False) -> None:
    """
    Validate a normalized event record.

    Create requires every field in REQUIRED_FIELDS. Update only checks the
    shape of the fields that are present.

    Raises:
        ValidationError: On the first shape problem, or with the full list of
            missing fields
    """
    if not is_update:
        validate_required_fields(event_data, REQUIRED_FIELDS)

    for field in INTEGER_FIELDS:
        if field not in event_data:
            continue
        value = event_data[field]
        if isinstance(value, bool) or not isinstance(value, int) or not INT_MIN <= value <= INT_MAX:
            raise ValidationError(f"{field} must be a valid integer")

    if 'schedule' in event_data and not isinstance(event_data['schedule'], datetime):
        raise ValidationError("schedule must be a valid date/time")

    if 'attendees' in event_data and not isinstance(event_data['attendees'], list):
        raise ValidationError("attendees must be an array of user IDs")
