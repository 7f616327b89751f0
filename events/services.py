import logging

from django.contrib import messages

from core.api import api_request
from core.filters import match_choice, search, sort_by_number

logger = logging.getLogger(__name__)

SERVICE_CATEGORIES = [
    ('catering', 'Catering'),
    ('decoration', 'Decoration'),
    ('equipment', 'Equipment'),
    ('entertainment', 'Entertainment'),
    ('staffing', 'Staffing'),
    ('photography', 'Photography'),
    ('transportation', 'Transportation'),
    ('security', 'Security'),
    ('cleaning', 'Cleaning'),
    ('other', 'Other'),
]

PRICE_TYPES = [
    ('flat', 'Flat rate'),
    ('per_person', 'Per person'),
    ('per_hour', 'Per hour'),
    ('per_day', 'Per day'),
    ('fixed', 'Fixed'),
    ('custom', 'Custom'),
]

SERVICE_STATUSES = [
    ('active', 'Active'),
    ('inactive', 'Inactive'),
    ('seasonal', 'Seasonal'),
]

# bulk action -> status it sets
BULK_ACTIONS = {
    'activate': 'active',
    'deactivate': 'inactive',
    'seasonal': 'seasonal',
}

SEARCH_FIELDS = ('name', 'description', 'subcategory')


def _services_from(response):
    data = response.data
    if isinstance(data, dict) and isinstance(data.get('services'), list):
        return data['services']
    return response.items


def _service_from(response):
    data = response.data
    if isinstance(data, dict) and isinstance(data.get('service'), dict):
        return data['service']
    return data


def get_services(request, hotel_id=None):
    """Every event service, optionally for one hotel."""
    response = api_request(request, '/events/services', params={'hotel': hotel_id})
    return _services_from(response) if response.ok else []


def get_service(request, service_id):
    response = api_request(request, f'/events/services/{service_id}')
    return _service_from(response) if response.ok else None


def create_service(request, data):
    response = api_request(request, '/events/services', 'POST', data)
    if response.ok:
        messages.success(request, 'Service created successfully')
    return response


def update_service(request, service_id, data):
    response = api_request(request, f'/events/services/{service_id}', 'PUT', data)
    if response.ok:
        messages.success(request, 'Service updated successfully')
    return response


def delete_service(request, service_id, name=None):
    response = api_request(request, f'/events/services/{service_id}', 'DELETE')
    if response.ok:
        messages.success(request, f'Service "{name}" deleted successfully' if name else 'Service deleted successfully')
    return response


def get_services_by_category(request, category):
    response = api_request(request, f'/events/services/category/{category}')
    return _services_from(response) if response.ok else []


def bulk_update_services(request, service_ids, action):
    """
    Set the status of several services at once.

    Args:
        service_ids: ids of the selected services
        action: one of BULK_ACTIONS

    Returns:
        int or None: number of services updated, None when nothing was sent or the call failed
    """
    status = BULK_ACTIONS.get(action)
    if not status or not service_ids:
        return None
    logger.info('Bulk %s on %d event services', action, len(service_ids))
    payload = {'serviceIds': list(service_ids), 'updateData': {'status': status}}
    response = api_request(request, '/events/services/bulk-update', 'PATCH', payload)
    if not response.ok:
        return None
    data = response.data if isinstance(response.data, dict) else {}
    updated = data.get('modifiedCount', data.get('updated', len(service_ids)))
    messages.success(request, f'Updated {updated} services successfully')
    return updated


def filter_services(services, query='', status='all', category='all', price_type='all', provider='all', price_sort=''):
    """
    Narrow the fetched services the way the list screen's controls do.

    Args:
        query: matched against name, description and subcategory
        status, category, price_type: "all" or blank keeps everything
        provider: "internal", "external" or "all"
        price_sort: "asc" or "desc" by price, anything else keeps the API order

    Returns:
        list: matching services
    """
    def provider_matches(service):
        if provider == 'internal':
            return not service.get('isExternalService')
        if provider == 'external':
            return bool(service.get('isExternalService'))
        return True

    matches = [
        service for service in search(services, query, SEARCH_FIELDS)
        if match_choice(service.get('status'), status)
        and match_choice(service.get('category'), category)
        and match_choice(service.get('priceType'), price_type)
        and provider_matches(service)
    ]
    return sort_by_number(matches, 'price', price_sort)
