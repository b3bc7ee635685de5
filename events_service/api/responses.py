"""Success envelopes returned by the routes."""

import math
from typing import Any, Dict, List, Optional

from ..validation import Pagination

def success(data: Any = None, message: Optional[str] = None, **extra: Any) -> Dict[str, Any]:
    """Wrap a payload as ``{"success": true, ...}``."""
    body: Dict[str, Any] = {"success": True}
    if message:
        body["message"] = message
    if data is not None:
        body["data"] = data
    body.update(extra)
    return body

def pagination_metadata(pagination: Pagination, total: int) -> Dict[str, Any]:
    total_pages = math.ceil(total / pagination.limit)
    return {
        "currentPage": pagination.page,
        "totalPages": total_pages,
        "totalEvents": total,
        "eventsPerPage": pagination.limit,
        "hasNextPage": pagination.page < total_pages,
        "hasPrevPage": pagination.page > 1,
    }

def paginated(items: List[Dict[str, Any]], pagination: Pagination, total: int) -> Dict[str, Any]:
    return success(items, pagination=pagination_metadata(pagination, total))
