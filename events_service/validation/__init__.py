"""Normalization, validation and pagination of caller input."""

from .normalize import InvalidValue, normalize_event_input, parse_int, parse_datetime
from .validate import validate_event_data, validate_required_fields, require_image, REQUIRED_FIELDS
from .pagination import Pagination, resolve_pagination

__all__ = [
    'InvalidValue',
    'normalize_event_input',
    'parse_int',
    'parse_datetime',
    'validate_event_data',
    'validate_required_fields',
    'require_image',
    'REQUIRED_FIELDS',
    'Pagination',
    'resolve_pagination',
]
