"""Type normalization for event input.

Form submissions arrive as strings. ``normalize_event_input`` turns them into
the types the event model stores. Integer and date fields that fail to parse
are not rejected here: they are replaced by an ``InvalidValue`` marker and the
validator decides what to do with them. Only a malformed ``attendees`` JSON
string is rejected straight away.
"""

import json
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Mapping, Optional, Union

from ..errors import ValidationError
from ..utils.timezone import ensure_utc

INTEGER_FIELDS = ('rigor_rank', 'uid')
OPTIONAL_FIELDS = ('uid',)
DATETIME_FIELDS = ('schedule',)
TEXT_FIELDS = ('name', 'tagline', 'description', 'moderator', 'category', 'sub_category')
FILE_FIELDS = ('image',)

_INT_PATTERN = re.compile(r'^\s*[+-]?\d+\s*$')

@dataclass(frozen=True)
class InvalidValue:
    """Marker left in place of a value that could not be parsed."""
    raw: Any

def parse_int(value: Any) -> Union[int, InvalidValue]:
    """Parse an integer from an int or a decimal string."""
    if isinstance(value, bool):
        return InvalidValue(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and _INT_PATTERN.match(value):
        try:
            return int(value)
        except ValueError:
            # Longer than the interpreter's int conversion limit
            return InvalidValue(value)
    return InvalidValue(value)

def parse_datetime(value: Any) -> Union[datetime, InvalidValue]:
    """Parse an ISO-8601 date or date-time. Naive values are taken as UTC."""
    if not isinstance(value, (str, datetime)):
        return InvalidValue(value)

    try:
        if isinstance(value, datetime):
            return ensure_utc(value)
        text = value.strip()
        if text.endswith(('Z', 'z')):
            text = text[:-1] + '+00:00'
        return ensure_utc(datetime.fromisoformat(text))
    except (ValueError, OverflowError):
        # OverflowError: the offset pushes the moment outside datetime's range
        return InvalidValue(value)

def parse_attendees(value: Any) -> Any:
    """
    Decode attendees sent as a JSON string.

    Raises:
        ValidationError: If the string is not valid JSON
    """
    if not isinstance(value, str):
        return value
    if not value.strip():
        return []
    try:
        return json.loads(value)
    except json.JSONDecodeError:
        raise ValidationError("Invalid attendees format. Must be a JSON array")

def _single(value: Any) -> Any:
    # Repeated form keys arrive as lists; the last one wins for scalar fields
    if isinstance(value, list):
        return value[-1] if value else None
    return value

def _is_blank(value: Any) -> bool:
    return isinstance(value, str) and not value.strip()

def normalize_event_input(
    raw: Mapping[str, Any],
    uploaded_files: Optional[Mapping[str, str]] = None,
    partial: bool = False
) -> Dict[str, Any]:
    """
    Build a typed event record from raw request input.

    Args:
        raw: Body fields as parsed from the form or JSON payload
        uploaded_files: Field name to stored path for files saved by the upload layer
        partial: True for updates; absent fields are then left out instead of defaulted

    Returns:
        A dict holding only known event fields. Fields absent from ``raw`` are
        absent from the result, except ``attendees`` which defaults to an
        empty list when not partial.

    Raises:
        ValidationError: If attendees is a string that is not valid JSON
    """
    record: Dict[str, Any] = {}

    if partial:
        # null in an update means "not provided"
        raw = {key: value for key, value in raw.items() if value is not None}

    for name in TEXT_FIELDS:
        if name in raw:
            value = _single(raw[name])
            record[name] = value if value is None or isinstance(value, str) else str(value)

    for name in INTEGER_FIELDS:
        if name in raw:
            value = _single(raw[name])
            if value is None or _is_blank(value):
                # A blank uid means "not given"; a blank rigor_rank is reported as missing
                if name not in OPTIONAL_FIELDS:
                    record[name] = value
                continue
            record[name] = parse_int(value)

    for name in DATETIME_FIELDS:
        if name in raw:
            value = _single(raw[name])
            record[name] = value if value is None or _is_blank(value) else parse_datetime(value)

    if 'attendees' in raw and raw['attendees'] is not None:
        record['attendees'] = parse_attendees(raw['attendees'])
    elif not partial:
        record['attendees'] = []

    # File references only ever come from the upload layer, never from body text
    for name in FILE_FIELDS:
        if uploaded_files and uploaded_files.get(name):
            record[name] = uploaded_files[name]

    return record
