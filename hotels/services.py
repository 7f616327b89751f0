import logging

from django.contrib import messages

from core.api import Pagination, api_request

logger = logging.getLogger(__name__)

HOTEL_FILTERS = ('type', 'active', 'chainCode', 'isHeadquarters', 'page')

# Wizard steps in the order the API numbers them (1-based)
SETUP_STEPS = [
    ('basic', 'Basic information'),
    ('contact', 'Contact details'),
    ('branding', 'Branding'),
    ('financial', 'Financial'),
    ('operational', 'Operations'),
    ('features', 'Features'),
]

HOTEL_ACCESS_LEVELS = [
    ('read', 'Read'),
    ('write', 'Write'),
    ('admin', 'Admin'),
]


def get_hotels(request, filters=None):
    """
    Returns:
        tuple: (hotels, Pagination)
    """
    response = api_request(request, '/hotels', params=filters)
    return response.items, Pagination.from_response(response)


def get_hotel(request, hotel_id, include_branches=False):
    params = {'includeBranches': True} if include_branches else None
    response = api_request(request, f'/hotels/{hotel_id}', params=params)
    return response.data if response.ok and isinstance(response.data, dict) else None


def create_hotel(request, data):
    response = api_request(request, '/hotels', 'POST', data)
    if response.ok:
        logger.info('Hotel %s created', data.get('code'))
        messages.success(request, f"Hotel {data.get('name')} created successfully")
    return response


def update_hotel(request, hotel_id, data):
    response = api_request(request, f'/hotels/{hotel_id}', 'PUT', data)
    if response.ok:
        messages.success(request, 'Hotel updated successfully')
    return response


def delete_hotel(request, hotel_id):
    response = api_request(request, f'/hotels/{hotel_id}', 'DELETE')
    if response.ok:
        logger.info('Hotel %s deleted', hotel_id)
        messages.success(request, 'Hotel deleted successfully')
    return response


def initialize_setup(request, hotel_id):
    """Start the setup wizard; the API creates the configuration and the step list."""
    response = api_request(request, f'/hotels/{hotel_id}/setup/initialize', 'POST')
    if response.ok:
        messages.success(request, 'Hotel setup started')
    return response


def get_setup_status(request, hotel_id):
    """
    Wizard progress of a hotel.

    Returns:
        dict: setupInitiated, setupCompleted, currentStep and steps; empty when
        the API has nothing for the hotel
    """
    response = api_request(request, f'/hotels/{hotel_id}/setup/status', notify=False)
    return response.data if response.ok and isinstance(response.data, dict) else {}


def update_setup_step(request, hotel_id, step, data):
    response = api_request(request, f'/configuration/{hotel_id}/setup/{step}', 'PUT', {'data': data})
    if response.ok:
        messages.success(request, f'{step_label(step)} saved')
    return response


def step_label(step):
    if 1 <= step <= len(SETUP_STEPS):
        return SETUP_STEPS[step - 1][1]
    return f'Step {step}'


def completed_steps(status):
    """Numbers of the wizard steps the API reports as done."""
    return {entry.get('step') for entry in status.get('steps') or [] if entry.get('completed')}


def get_user_hotel_access(request, user_id):
    """The user's hotel grants, read from the user record."""
    response = api_request(request, f'/users/{user_id}')
    if not response.ok or not isinstance(response.data, dict):
        return None, []
    grants = response.data.get('accessible_hotels')
    return response.data, grants if isinstance(grants, list) else []


def add_user_hotel_access(request, user_id, hotel_id, access_level, role_id=None):
    payload = {'hotelId': hotel_id, 'accessLevel': access_level}
    if role_id:
        payload['roleId'] = role_id
    response = api_request(request, f'/users/{user_id}/hotels', 'POST', payload)
    if response.ok:
        messages.success(request, 'Hotel access granted')
    return response


def remove_user_hotel_access(request, user_id, hotel_id):
    response = api_request(request, f'/users/{user_id}/hotels/{hotel_id}', 'DELETE')
    if response.ok:
        messages.success(request, 'Hotel access removed')
    return response


def set_default_hotel(request, user_id, hotel_id):
    response = api_request(request, f'/users/{user_id}/default-hotel/{hotel_id}', 'PUT')
    if response.ok:
        messages.success(request, 'Default hotel updated')
    return response
