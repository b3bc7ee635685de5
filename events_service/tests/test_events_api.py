import uuid
from pathlib import Path

import pytest

from events_service.db import EventStore, SessionError

from events_service.tests.conftest import image_file, make_event_fields

EVENTS_URL = '/api/v3/app/events'

def create_event(client, form, files=None):
    return client.post(EVENTS_URL, data=form, files=files if files is not None else image_file())

# Create

def test_create_event(client, event_form, settings):
    response = create_event(client, event_form)

    assert response.status_code == 201
    body = response.json()
    assert body['success'] is True
    assert body['message'] == 'Event created successfully'

    event = body['data']
    assert uuid.UUID(event['id'])
    assert event['type'] == 'event'
    assert event['uid'] == 18
    assert event['rigor_rank'] == 3
    assert event['attendees'] == ['u1', 'u2']
    assert event['schedule'] == '2025-03-14T18:00:00+00:00'
    assert event['created_at'] == event['updated_at']
    assert Path(event['image']).parent == Path(settings.upload_dir)
    assert Path(event['image']).exists()

def test_create_keeps_given_uid_and_defaults_attendees(client, event_form):
    event_form['uid'] = '7'
    del event_form['attendees']

    event = create_event(client, event_form).json()['data']

    assert event['uid'] == 7
    assert event['attendees'] == []

def test_create_without_image_is_rejected(client, event_form):
    response = create_event(client, event_form, files={})

    assert response.status_code == 400
    assert response.json() == {'success': False, 'error': 'Event image is required'}

def test_create_reports_every_missing_field(client):
    response = create_event(client, {'name': 'Half an event', 'moderator': ' '})

    assert response.status_code == 400
    assert response.json()['error'] == (
        'Missing required fields: tagline, schedule, description, moderator, '
        'category, sub_category, rigor_rank'
    )

def test_create_rejects_bad_attendees_json(client, event_form):
    event_form['attendees'] = 'not json'

    response = create_event(client, event_form)

    assert response.status_code == 400
    assert response.json()['error'] == 'Invalid attendees format. Must be a JSON array'

def test_create_rejects_bad_rigor_rank_and_schedule(client, event_form):
    response = create_event(client, {**event_form, 'rigor_rank': 'very'})
    assert response.status_code == 400
    assert response.json()['error'] == 'rigor_rank must be a valid integer'

    response = create_event(client, {**event_form, 'schedule': 'someday'})
    assert response.status_code == 400
    assert response.json()['error'] == 'schedule must be a valid date/time'

def test_rejected_create_leaves_no_file_behind(client, event_form, settings):
    create_event(client, {**event_form, 'schedule': 'someday'})

    assert list(Path(settings.upload_dir).iterdir()) == []

def test_create_rejects_rigor_rank_too_large_for_column(client, event_form, settings):
    response = create_event(client, {**event_form, 'rigor_rank': '99999999999999999999'})

    assert response.status_code == 400
    assert response.json()['error'] == 'rigor_rank must be a valid integer'
    assert list(Path(settings.upload_dir).iterdir()) == []

@pytest.mark.parametrize("schedule", ['9999-12-31T23:59:59-01:00', '0001-01-01T00:00:00+01:00'])
def test_create_rejects_schedule_outside_datetime_range(client, event_form, schedule):
    response = create_event(client, {**event_form, 'schedule': schedule})

    assert response.status_code == 400
    assert response.json()['error'] == 'schedule must be a valid date/time'

def test_failed_insert_leaves_no_file_behind(client, event_form, settings, monkeypatch):
    def broken(self, fields):
        raise SessionError("Database session error: disk I/O error")

    monkeypatch.setattr(EventStore, 'insert', broken)

    response = create_event(client, event_form)

    assert response.status_code == 500
    assert list(Path(settings.upload_dir).iterdir()) == []

def test_create_rejects_non_image_upload(client, event_form):
    response = create_event(client, event_form, files=image_file('notes.txt', b'hello', 'text/plain'))

    assert response.status_code == 400
    assert response.json()['error'].startswith('Only image files are allowed')

def test_create_rejects_oversized_upload(client, event_form, settings):
    big = b'x' * (settings.max_file_size + 1)

    response = create_event(client, event_form, files=image_file(content=big))

    assert response.status_code == 400
    assert response.json()['error'].startswith('File size too large')

def test_create_rejects_unexpected_file_field(client, event_form):
    files = {'avatar': ('me.png', b'\x89PNG', 'image/png')}

    response = create_event(client, event_form, files=files)

    assert response.status_code == 400
    assert response.json()['error'] == 'Too many files or unexpected field name'

def test_create_from_json_body_still_needs_image(client):
    response = client.post(EVENTS_URL, json={'name': 'x'})

    assert response.status_code == 400
    assert response.json()['error'] == 'Event image is required'

# Read one

def test_get_event_by_id(client, event_form):
    created = create_event(client, event_form).json()['data']

    response = client.get(EVENTS_URL, params={'id': created['id']})

    assert response.status_code == 200
    assert response.json() == {'success': True, 'data': created}

def test_get_event_with_malformed_id_is_client_error(client):
    response = client.get(EVENTS_URL, params={'id': 'not-an-id'})

    assert response.status_code == 400
    assert response.json() == {'success': False, 'error': 'Invalid event ID format'}

def test_get_missing_event_is_not_found(client):
    response = client.get(EVENTS_URL, params={'id': str(uuid.uuid4())})

    assert response.status_code == 404
    assert response.json() == {'success': False, 'error': 'Event not found'}

def test_get_without_query_is_rejected(client):
    response = client.get(EVENTS_URL)

    assert response.status_code == 400
    assert response.json()['error'].startswith('Invalid query parameters')

def test_get_with_unknown_type_is_rejected(client):
    response = client.get(EVENTS_URL, params={'type': 'oldest'})

    assert response.status_code == 400

# List

def test_list_pagination_metadata(client, store):
    for index in range(47):
        store.insert(make_event_fields(index))

    response = client.get(EVENTS_URL, params={'type': 'latest', 'limit': '5', 'page': '2'})

    assert response.status_code == 200
    body = response.json()
    assert body['pagination'] == {
        'currentPage': 2,
        'totalPages': 10,
        'totalEvents': 47,
        'eventsPerPage': 5,
        'hasNextPage': True,
        'hasPrevPage': True,
    }
    # Latest schedule first: page 2 holds events 41..37
    assert [event['name'] for event in body['data']] == [f'Event {i}' for i in range(41, 36, -1)]

def test_list_last_page(client, store):
    for index in range(12):
        store.insert(make_event_fields(index))

    body = client.get(EVENTS_URL, params={'type': 'latest', 'page': '2'}).json()

    assert len(body['data']) == 2
    assert body['pagination']['hasNextPage'] is False
    assert body['pagination']['hasPrevPage'] is True

def test_list_empty_store(client):
    body = client.get(EVENTS_URL, params={'type': 'latest'}).json()

    assert body['data'] == []
    assert body['pagination']['totalPages'] == 0
    assert body['pagination']['hasNextPage'] is False

def test_list_rejects_out_of_range_limit(client):
    response = client.get(EVENTS_URL, params={'type': 'latest', 'limit': '101'})

    assert response.status_code == 400
    assert response.json()['error'] == 'Limit must be between 1 and 100'

def test_list_rejects_page_beyond_offset_range(client):
    response = client.get(EVENTS_URL, params={'type': 'latest', 'page': '99999999999999999999'})

    assert response.status_code == 400
    assert response.json() == {'success': False, 'error': 'Page is out of range'}

def test_list_defaults_for_garbage_parameters(client):
    body = client.get(EVENTS_URL, params={'type': 'latest', 'limit': 'lots', 'page': 'first'}).json()

    assert body['pagination']['currentPage'] == 1
    assert body['pagination']['eventsPerPage'] == 10

# Update

def test_update_changes_only_supplied_fields(client, event_form):
    created = create_event(client, event_form).json()['data']

    response = client.put(f"{EVENTS_URL}/{created['id']}", data={'tagline': 'Now with more pizza'})

    assert response.status_code == 200
    body = response.json()
    assert body['message'] == 'Event updated successfully'
    updated = body['data']
    assert updated['tagline'] == 'Now with more pizza'
    assert updated['name'] == created['name']
    assert updated['attendees'] == created['attendees']
    assert updated['image'] == created['image']
    assert updated['created_at'] == created['created_at']
    assert updated['updated_at'] >= created['updated_at']

def test_update_converts_types(client, event_form):
    created = create_event(client, event_form).json()['data']

    updated = client.put(
        f"{EVENTS_URL}/{created['id']}",
        data={'rigor_rank': '9', 'attendees': '["u3"]', 'schedule': '2026-01-01T10:00:00Z'}
    ).json()['data']

    assert updated['rigor_rank'] == 9
    assert updated['attendees'] == ['u3']
    assert updated['schedule'] == '2026-01-01T10:00:00+00:00'

def test_update_replaces_image(client, event_form):
    created = create_event(client, event_form).json()['data']

    response = client.put(f"{EVENTS_URL}/{created['id']}", files=image_file('new.png'))

    assert response.status_code == 200
    updated = response.json()['data']
    assert updated['image'] != created['image']
    assert Path(updated['image']).exists()

def test_update_ignores_immutable_fields(client, event_form):
    created = create_event(client, event_form).json()['data']

    updated = client.put(
        f"{EVENTS_URL}/{created['id']}",
        json={'id': str(uuid.uuid4()), 'type': 'nudge', 'created_at': '2000-01-01', 'name': 'Renamed'}
    ).json()['data']

    assert updated['id'] == created['id']
    assert updated['type'] == 'event'
    assert updated['created_at'] == created['created_at']
    assert updated['name'] == 'Renamed'

def test_update_with_empty_body_is_rejected(client, event_form):
    created = create_event(client, event_form).json()['data']

    response = client.put(f"{EVENTS_URL}/{created['id']}")

    assert response.status_code == 400
    assert response.json()['error'] == 'No update data provided'

def test_update_validates_supplied_fields(client, event_form):
    created = create_event(client, event_form).json()['data']

    response = client.put(f"{EVENTS_URL}/{created['id']}", data={'rigor_rank': 'max'})

    assert response.status_code == 400
    assert response.json()['error'] == 'rigor_rank must be a valid integer'

def test_update_rejects_rigor_rank_too_large_for_column(client, event_form):
    created = create_event(client, event_form).json()['data']

    response = client.put(f"{EVENTS_URL}/{created['id']}", data={'rigor_rank': '99999999999999999999'})

    assert response.status_code == 400
    assert response.json()['error'] == 'rigor_rank must be a valid integer'

def test_failed_update_removes_new_upload(client, event_form, settings, monkeypatch):
    created = create_event(client, event_form).json()['data']

    def broken(self, event_id, changes):
        raise SessionError("Database session error: disk I/O error")

    monkeypatch.setattr(EventStore, 'update', broken)

    response = client.put(f"{EVENTS_URL}/{created['id']}", files=image_file('new.png'))

    assert response.status_code == 500
    assert list(Path(settings.upload_dir).iterdir()) == [Path(created['image'])]

def test_update_missing_event_is_not_found(client):
    response = client.put(f"{EVENTS_URL}/{uuid.uuid4()}", data={'name': 'Ghost'})

    assert response.status_code == 404

def test_update_malformed_id_is_client_error(client):
    response = client.put(f"{EVENTS_URL}/not-an-id", data={'name': 'Ghost'})

    assert response.status_code == 400
    assert response.json()['error'] == 'Invalid event ID format'

# Delete

def test_delete_event_keeps_image_file(client, event_form):
    created = create_event(client, event_form).json()['data']

    response = client.delete(f"{EVENTS_URL}/{created['id']}")

    assert response.status_code == 200
    assert response.json() == {
        'success': True,
        'message': 'Event deleted successfully',
        'data': {'deletedId': created['id']},
    }
    assert client.get(EVENTS_URL, params={'id': created['id']}).status_code == 404
    assert Path(created['image']).exists()

def test_delete_missing_event_is_not_found(client):
    response = client.delete(f"{EVENTS_URL}/{uuid.uuid4()}")

    assert response.status_code == 404
    assert response.json()['error'] == 'Event not found'

def test_delete_malformed_id_is_client_error(client):
    assert client.delete(f"{EVENTS_URL}/12345").status_code == 400
