import logging

from django.contrib import messages

from core.api import api_request

logger = logging.getLogger(__name__)

HOTEL_TYPES = [
    ('hotel', 'Hotel'),
    ('resort', 'Resort'),
    ('motel', 'Motel'),
    ('boutique', 'Boutique'),
    ('apartment', 'Serviced apartment'),
]

ACCESS_LEVELS = [
    ('view', 'View only'),
    ('edit', 'Edit'),
    ('admin', 'Admin'),
    ('full', 'Full access'),
]

SYNC_SECTIONS = [
    ('branding', 'Branding'),
    ('documentPrefixes', 'Document prefixes'),
    ('systemSettings', 'System settings'),
]

DOCUMENT_PREFIXES = ('invoice', 'receipt', 'booking', 'guest')

SYNC_LOG_PAGE_SIZE = 20


def get_chains(request):
    return api_request(request, '/chains').items


def get_chain(request, chain_code):
    response = api_request(request, f'/chains/{chain_code}')
    return response.data if response.ok and isinstance(response.data, dict) else None


def create_chain(request, data):
    """
    Create a chain together with its headquarters hotel and shared configuration.

    Returns:
        ApiResponse: data carries headquarters and sharedConfiguration
    """
    response = api_request(request, '/chains', 'POST', data)
    if response.ok:
        logger.info('Chain %s created', data.get('chainCode'))
        messages.success(request, f"Chain {data.get('name')} created successfully")
    return response


def update_shared_configuration(request, chain_code, data):
    response = api_request(request, f'/chains/{chain_code}/configuration', 'PUT', data)
    if response.ok:
        messages.success(request, 'Shared configuration updated')
    return response


def add_hotel(request, chain_code, data):
    response = api_request(request, f'/chains/{chain_code}/hotels', 'POST', data)
    if response.ok:
        messages.success(request, f"Hotel {data.get('name')} added to the chain")
    return response


def remove_hotel(request, chain_code, hotel_id):
    response = api_request(request, f'/chains/{chain_code}/hotels/{hotel_id}', 'DELETE')
    if response.ok:
        messages.success(request, 'Hotel removed from the chain')
    return response


def get_chain_statistics(request, chain_code):
    response = api_request(request, f'/chains/{chain_code}/statistics', notify=False)
    return response.data if response.ok and isinstance(response.data, dict) else {}


def get_chain_users(request, chain_code):
    """Users with access across the chain, each with its per-hotel access."""
    return api_request(request, f'/cross-hotel/chains/{chain_code}/users', notify=False).items


def grant_chain_access(request, chain_code, user_id, access_level):
    payload = {'userId': user_id, 'accessLevel': access_level}
    response = api_request(request, f'/cross-hotel/chains/{chain_code}/users', 'POST', payload)
    if response.ok:
        data = response.data if isinstance(response.data, dict) else {}
        messages.success(request, f"Access granted to {data.get('hotelCount', 0)} hotels")
    return response


def revoke_chain_access(request, chain_code, user_id):
    response = api_request(request, f'/cross-hotel/chains/{chain_code}/users/{user_id}', 'DELETE')
    if response.ok:
        data = response.data if isinstance(response.data, dict) else {}
        messages.success(request, f"Access revoked from {data.get('hotelsAffected', 0)} hotels")
    return response


def sync_configuration(request, chain_code, sections, target_hotels=None):
    """
    Push shared configuration sections from the chain to its hotels.

    Args:
        sections: names from SYNC_SECTIONS
        target_hotels: hotel ids; None or empty syncs every hotel of the chain

    Returns:
        ApiResponse: data carries syncLog and syncId
    """
    payload = {
        'syncAll': not target_hotels,
        'targetHotels': list(target_hotels or []),
        'configSections': list(sections),
    }
    response = api_request(request, f'/data-sync/chains/{chain_code}/configuration', 'POST', payload)
    if response.ok:
        logger.info('Configuration sync started for chain %s: %s', chain_code, ', '.join(sections))
        messages.success(request, 'Configuration synchronized successfully')
    return response


def sync_id(response):
    data = response.data if isinstance(response.data, dict) else {}
    return data.get('syncId') or (data.get('syncLog') or {}).get('_id')


def get_sync_logs(request, chain_code, page=1, limit=SYNC_LOG_PAGE_SIZE):
    return api_request(request, f'/data-sync/chains/{chain_code}/logs', params={'page': page, 'limit': limit})


def get_sync_log(request, sync_id):
    response = api_request(request, f'/data-sync/logs/{sync_id}')
    return response.data if response.ok and isinstance(response.data, dict) else None
