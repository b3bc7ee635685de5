"""Pagination parameter handling."""

from dataclasses import dataclass
from typing import Any

from ..errors import ValidationError
from .normalize import InvalidValue, parse_int

DEFAULT_LIMIT = 10
DEFAULT_PAGE = 1
MAX_LIMIT = 100
# Largest offset a 64-bit OFFSET clause accepts
MAX_OFFSET = 2**63 - 1

@dataclass(frozen=True)
class Pagination:
    limit: int
    page: int
    offset: int

def _parse_or_default(value: Any, default: int) -> int:
    if value is None:
        return default
    parsed = parse_int(value)
    return default if isinstance(parsed, InvalidValue) else parsed

def resolve_pagination(limit: Any = None, page: Any = None) -> Pagination:
    """
    Turn raw ``limit``/``page`` query values into an offset/limit pair.

    Unparsable or missing values fall back to limit=10 and page=1.

    Raises:
        ValidationError: If limit is outside 1..100, page is below 1, or the
            resulting offset does not fit a 64-bit integer
    """
    parsed_limit = _parse_or_default(limit, DEFAULT_LIMIT)
    parsed_page = _parse_or_default(page, DEFAULT_PAGE)

    if parsed_limit < 1 or parsed_limit > MAX_LIMIT:
        raise ValidationError(f"Limit must be between 1 and {MAX_LIMIT}")

    if parsed_page < 1:
        raise ValidationError("Page must be greater than 0")

    offset = (parsed_page - 1) * parsed_limit
    if offset > MAX_OFFSET:
        raise ValidationError("Page is out of range")

    return Pagination(
        limit=parsed_limit,
        page=parsed_page,
        offset=offset
    )
