import logging

from django.contrib import messages

from core.api import Pagination, api_request
from core.filters import sort_by_number

logger = logging.getLogger(__name__)

ROOM_STATUSES = [
    ('available', 'Available'),
    ('occupied', 'Occupied'),
    ('maintenance', 'Maintenance'),
    ('cleaning', 'Cleaning'),
    ('reserved', 'Reserved'),
    ('out_of_order', 'Out of order'),
]

ROOM_FILTERS = (
    'status', 'floor', 'building', 'view', 'is_smoking_allowed', 'is_accessible',
    'room_type', 'has_smart_lock', 'sort', 'limit', 'page',
)

ROOM_PAGE_SIZE = 10


def split_amenities(text):
    """'wifi, minibar ,, tv' -> ['wifi', 'minibar', 'tv']"""
    if isinstance(text, (list, tuple)):
        return [str(item).strip() for item in text if str(item).strip()]
    return [item.strip() for item in (text or '').split(',') if item.strip()]


def get_rooms(request, filters=None):
    """
    Fetch one page of rooms, ordered by room number.

    Returns:
        tuple: (rooms, Pagination) where missing counters fall back to
        page 1, limit 10 and the number of rooms returned
    """
    response = api_request(request, '/rooms', params=filters)
    rooms = response.items
    if not (filters or {}).get('sort'):
        rooms = sort_by_number(rooms, 'number', 'asc')
    return rooms, Pagination.from_response(response, default_limit=ROOM_PAGE_SIZE)


def get_room(request, room_id):
    return api_request(request, f'/rooms/{room_id}')


def create_room(request, data):
    response = api_request(request, '/rooms', 'POST', data)
    if response.ok:
        messages.success(request, 'Room created successfully')
    return response


def update_room(request, room_id, data):
    response = api_request(request, f'/rooms/{room_id}', 'PUT', data)
    if response.ok:
        messages.success(request, 'Room updated successfully')
    return response


def delete_room(request, room_id):
    response = api_request(request, f'/rooms/{room_id}', 'DELETE')
    if response.ok:
        messages.success(request, 'Room deleted successfully')
    return response


def update_room_status(request, room_id, status):
    response = api_request(request, f'/rooms/{room_id}/status', 'PATCH', {'status': status})
    if response.ok:
        messages.success(request, f"Room status changed to {status.replace('_', ' ')}")
    return response


def get_room_stats(request):
    """
    Returns:
        dict: total plus one counter per room status; empty when unavailable
    """
    response = api_request(request, '/rooms/stats', notify=False)
    return response.data if isinstance(response.data, dict) else {}


def connect_rooms(request, room_ids):
    """
    Link rooms into a connecting set.

    Returns:
        tuple: (success, message) with the API's own message when it sends one
    """
    response = api_request(request, '/rooms/connect', 'POST', {'roomIds': list(room_ids)})
    if response.ok:
        message = _message(response, 'Rooms connected successfully')
        messages.success(request, message)
        return True, message
    return False, response.error


def disconnect_rooms(request, room_id, disconnect_from_id):
    response = api_request(request, '/rooms/disconnect', 'POST', {
        'roomId': room_id,
        'disconnectFromId': disconnect_from_id,
    })
    if response.ok:
        message = _message(response, 'Rooms disconnected successfully')
        messages.success(request, message)
        return True, message
    return False, response.error


def get_available_rooms(request, start_date, end_date, filters=None):
    """Rooms free between two dates; an empty list when the lookup fails."""
    params = dict(filters or {})
    params.update({'startDate': start_date, 'endDate': end_date})
    response = api_request(request, '/rooms/available', params=params)
    return response.items if response.ok else []


def get_room_types(request):
    return api_request(request, '/room-types').items


def get_room_type(request, room_type_id):
    return api_request(request, f'/room-types/{room_type_id}')


def create_room_type(request, data):
    response = api_request(request, '/room-types', 'POST', data)
    if response.ok:
        messages.success(request, 'Room type created successfully')
    return response


def update_room_type(request, room_type_id, data):
    response = api_request(request, f'/room-types/{room_type_id}', 'PUT', data)
    if response.ok:
        messages.success(request, 'Room type updated successfully')
    return response


def delete_room_type(request, room_type_id):
    response = api_request(request, f'/room-types/{room_type_id}', 'DELETE')
    if response.ok:
        messages.success(request, 'Room type deleted successfully')
    return response


def get_room_type_stats(request):
    return api_request(request, '/room-types/stats', notify=False).items


def _message(response, default):
    if isinstance(response.payload, dict) and response.payload.get('message'):
        return response.payload['message']
    return default
