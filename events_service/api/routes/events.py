"""Events router module."""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query, Request

from ..dependencies import get_event_store, get_settings
from ..responses import paginated, success
from ..uploads import discard_uploads, read_request_data
from ...config.settings import Settings
from ...db import EventStore
from ...errors import APIError, NotFoundError, ValidationError
from ...models.event import EVENT_TYPE, EventRecord
from ...utils.identifiers import to_internal_id
from ...utils.timezone import now_utc
from ...validation import (
    normalize_event_input,
    require_image,
    resolve_pagination,
    validate_event_data,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["events"])

# Creator assigned when the request does not name one
DEFAULT_UID = 18

def parse_event_id(event_id: str):
    """Map an external ID to the store's type, answering 400 for malformed IDs."""
    internal_id = to_internal_id(event_id)
    if internal_id is None:
        raise ValidationError("Invalid event ID format")
    return internal_id

@router.get("/events")
async def get_events(
    event_id: Optional[str] = Query(None, alias="id"),
    list_type: Optional[str] = Query(None, alias="type"),
    limit: Optional[str] = None,
    page: Optional[str] = None,
    store: EventStore = Depends(get_event_store)
):
    """Get one event with ?id=, or a page of the latest events with ?type=latest."""
    if event_id:
        return get_event_by_id(event_id, store)

    if list_type == 'latest':
        return get_latest_events(list_type, limit, page, store)

    raise ValidationError(
        "Invalid query parameters. Use either ?id=<event_id> or ?type=latest&limit=<n>&page=<n>"
    )

def get_event_by_id(event_id: Optional[str], store: EventStore) -> Dict[str, Any]:
    if not event_id:
        raise ValidationError("Event ID is required")

    event = store.find_by_id(parse_event_id(event_id))
    if event is None:
        raise NotFoundError()

    return success(event)

def get_latest_events(
    list_type: Optional[str],
    limit: Optional[str],
    page: Optional[str],
    store: EventStore
) -> Dict[str, Any]:
    if list_type != 'latest':
        raise ValidationError("Invalid type parameter. Use type=latest")

    pagination = resolve_pagination(limit, page)

    # Count and page are separate queries; the total may drift under concurrent writes
    total = store.count()
    events = store.find_page(pagination.offset, pagination.limit)

    return paginated(events, pagination, total)

@router.post("/events", status_code=201)
async def create_event(
    request: Request,
    store: EventStore = Depends(get_event_store),
    settings: Settings = Depends(get_settings)
):
    """Create an event from a multipart form carrying one image file."""
    body, files = await read_request_data(request, settings, file_fields=('image',))

    try:
        event_data = normalize_event_input(
            body,
            uploaded_files={field: stored.path for field, stored in files.items()}
        )
        require_image(event_data)
        validate_event_data(event_data, is_update=False)
    except APIError:
        discard_uploads(files.values())
        raise

    now = now_utc()
    event_data['type'] = EVENT_TYPE
    event_data['uid'] = event_data.get('uid') or DEFAULT_UID
    event_data['created_at'] = now
    event_data['updated_at'] = now

    try:
        event = store.insert(event_data)
    except Exception:
        discard_uploads(files.values())
        raise
    logger.info(f"Created event {event['id']} ({event['name']})")

    return success(event, message="Event created successfully")

@router.put("/events/{event_id}")
async def update_event(
    event_id: str,
    request: Request,
    store: EventStore = Depends(get_event_store),
    settings: Settings = Depends(get_settings)
):
    """Apply a partial update. Only the supplied fields change."""
    internal_id = parse_event_id(event_id)
    body, files = await read_request_data(request, settings, file_fields=('image',))

    try:
        if not body and not files:
            raise ValidationError("No update data provided")

        changes = normalize_event_input(
            body,
            uploaded_files={field: stored.path for field, stored in files.items()},
            partial=True
        )
        validate_event_data(changes, is_update=True)
    except APIError:
        discard_uploads(files.values())
        raise

    changes = {key: value for key, value in changes.items() if key in EventRecord.UPDATABLE_FIELDS}
    changes['updated_at'] = now_utc()

    try:
        event = store.update(internal_id, changes)
    except Exception:
        discard_uploads(files.values())
        raise
    if event is None:
        discard_uploads(files.values())
        raise NotFoundError()

    return success(event, message="Event updated successfully")

@router.delete("/events/{event_id}")
async def delete_event(
    event_id: str,
    store: EventStore = Depends(get_event_store)
):
    """
    Delete an event.

    The event's image file stays in the upload directory.
    """
    if not store.delete(parse_event_id(event_id)):
        raise NotFoundError()

    return success({"deletedId": event_id}, message="Event deleted successfully")
