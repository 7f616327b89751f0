import base64
import logging

from django.contrib import messages

from core.api import api_request
from core.auth import current_hotel_id

logger = logging.getLogger(__name__)

# Sections a hotel can take from its chain instead of configuring itself
INHERITABLE_SECTIONS = [
    ('branding', 'Branding'),
    ('financial', 'Financial'),
    ('operational', 'Operational'),
    ('features', 'Features'),
    ('notifications', 'Notifications'),
    ('banking', 'Banking'),
    ('document_templates', 'Document templates'),
    ('legal', 'Legal'),
]

DOCUMENT_TYPES = [
    ('invoice', 'Invoice'),
    ('receipt', 'Receipt'),
    ('quotation', 'Quotation'),
    ('folio', 'Folio'),
]

ADDRESS_PARTS = ('street', 'line1', 'city', 'state', 'postal_code', 'postalCode', 'country')


def hotel_for(request, hotel_id=None):
    """The hotel a configuration screen works on: explicit id, ?hotel= or the user's primary hotel."""
    return hotel_id or request.GET.get('hotel') or current_hotel_id(request)


def _configuration_from(response):
    data = response.data
    if isinstance(data, dict) and isinstance(data.get('configuration'), dict):
        return data['configuration']
    return data if isinstance(data, dict) else None


def get_configuration(request, hotel_id, notify=True):
    response = api_request(request, f'/configuration/{hotel_id}', notify=notify)
    return _configuration_from(response) if response.ok else None


def create_configuration(request, data):
    response = api_request(request, '/configuration', 'POST', data)
    if response.ok:
        messages.success(request, 'Hotel configuration created successfully')
    return response


def update_configuration(request, hotel_id, data):
    response = api_request(request, f'/configuration/{hotel_id}', 'PUT', data)
    if response.ok:
        messages.success(request, 'Configuration updated successfully')
    return response


def get_effective_configuration(request, hotel_id):
    """
    Configuration resolved against the chain.

    Returns:
        dict: effectiveConfiguration, hotelConfiguration, chainConfiguration and
        inheritanceSettings as the API sends them, empty when the call fails
    """
    response = api_request(request, f'/hotels/{hotel_id}/effective-config')
    return response.data if response.ok and isinstance(response.data, dict) else {}


def update_chain_settings(request, hotel_id, settings_data):
    response = api_request(request, f'/hotels/{hotel_id}/chain-settings', 'PUT', settings_data)
    if response.ok:
        messages.success(request, 'Chain settings updated')
    return response


def sync_from_chain(request, hotel_id):
    response = api_request(request, f'/hotels/{hotel_id}/sync-from-chain', 'POST')
    if response.ok:
        logger.info('Hotel %s synced from its chain', hotel_id)
        messages.success(request, 'Configuration synced from chain')
    return response


def update_inheritance(request, hotel_id, inheritance):
    """
    Choose which sections follow the chain.

    Args:
        inheritance: dict of section name -> bool, see INHERITABLE_SECTIONS
    """
    response = api_request(
        request, f'/configuration/{hotel_id}/inheritance', 'PUT', {'chainInheritance': inheritance},
    )
    if response.ok:
        messages.success(request, 'Inheritance settings updated')
    return response


def update_branding(request, hotel_id, branding):
    response = api_request(request, f'/configuration/{hotel_id}/branding', 'PUT', branding)
    if response.ok:
        messages.success(request, 'Branding updated')
    return response


def update_banking(request, hotel_id, banking):
    response = api_request(request, f'/configuration/{hotel_id}/banking', 'PUT', banking)
    if response.ok:
        messages.success(request, 'Banking information updated')
    return response


def generate_document_number(request, hotel_id, document_type):
    """
    Reserve the next number in a document series.

    Returns:
        str or None: the generated number
    """
    response = api_request(request, f'/configuration/{hotel_id}/generate-number/{document_type}', 'POST')
    if not response.ok:
        return None
    data = response.data
    if isinstance(data, dict):
        return data.get('documentNumber') or data.get('number')
    return data


def get_document_data(request, hotel_id, notify=True):
    response = api_request(request, f'/configuration/{hotel_id}/document-data', notify=notify)
    return response.data if response.ok and isinstance(response.data, dict) else {}


def get_document_settings(request, hotel_id):
    response = api_request(request, f'/hotels/{hotel_id}/document-settings')
    return response.data if response.ok and isinstance(response.data, dict) else {}


def image_data_url(upload):
    """Encode an uploaded image as the base64 data URL the branding endpoint stores."""
    content_type = getattr(upload, 'content_type', None) or 'image/png'
    encoded = base64.b64encode(upload.read()).decode('ascii')
    return f'data:{content_type};base64,{encoded}'


def format_address(address):
    if isinstance(address, str):
        return address
    if not isinstance(address, dict):
        return ''
    return ', '.join(str(address[part]) for part in ADDRESS_PARTS if address.get(part))


def contact_lines(request):
    """
    Address, phone and email of the current hotel for document headers.

    Returns:
        list: non-empty lines, [] when no hotel is selected or the API has no data
    """
    hotel_id = current_hotel_id(request)
    if not hotel_id:
        return []
    data = get_document_data(request, hotel_id, notify=False)
    phone = data.get('phone')
    email = data.get('email')
    lines = [
        format_address(data.get('address')),
        f'Tel: {phone}' if phone else '',
        f'Email: {email}' if email else '',
    ]
    return [line for line in lines if line]
