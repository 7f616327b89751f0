import logging

from django.contrib import messages

from core.api import api_request

logger = logging.getLogger(__name__)

GUEST_FILTERS = (
    'search', 'email', 'phone', 'nationality', 'vip', 'blacklisted',
    'loyalty_member', 'loyalty_tier', 'page', 'limit', 'sort',
)

LOYALTY_TIERS = [
    ('standard', 'Standard'),
    ('silver', 'Silver'),
    ('gold', 'Gold'),
    ('platinum', 'Platinum'),
]


def get_guests(request, filters=None):
    """
    Fetch one page of guests.

    Args:
        filters: any of GUEST_FILTERS; vip, blacklisted and loyalty_member
            may be booleans

    Returns:
        ApiResponse: .items holds the guests; count, total and pagination sit
        in the payload
    """
    return api_request(request, '/guests', params=filters)


def get_guest(request, guest_id):
    return api_request(request, f'/guests/{guest_id}')


def get_guest_bookings(request, guest_id):
    """Stay history of a guest, newest first as the API sorts it."""
    return api_request(request, f'/guests/{guest_id}/bookings', notify=False).items


def create_guest(request, data):
    response = api_request(request, '/guests', 'POST', data)
    if response.ok:
        messages.success(request, 'Guest created successfully')
    return response


def update_guest(request, guest_id, data):
    response = api_request(request, f'/guests/{guest_id}', 'PUT', data)
    if response.ok:
        messages.success(request, 'Guest updated successfully')
    return response


def delete_guest(request, guest_id):
    response = api_request(request, f'/guests/{guest_id}', 'DELETE')
    if response.ok:
        messages.success(request, 'Guest deleted successfully')
    return response


def update_guest_loyalty(request, guest_id, loyalty):
    """
    Update loyalty membership.

    Args:
        loyalty: member, points, tier and membership_number; omitted keys stay as they are
    """
    response = api_request(request, f'/guests/{guest_id}/loyalty', 'PATCH', loyalty)
    if response.ok:
        messages.success(request, 'Loyalty program updated')
    return response


def toggle_vip_status(request, guest_id):
    response = api_request(request, f'/guests/{guest_id}/vip', 'PATCH')
    if response.ok:
        vip = response.data.get('vip') if isinstance(response.data, dict) else None
        messages.success(request, 'Guest marked as VIP' if vip else 'VIP status removed')
    return response


def toggle_blacklist_status(request, guest_id, blacklisted, reason=None):
    """
    Add a guest to the blacklist or take them off it.

    Raises:
        ValueError: blacklisting without a reason
    """
    if blacklisted and not (reason or '').strip():
        raise ValueError('A reason is required to blacklist a guest.')
    payload = {'blacklisted': blacklisted}
    if reason:
        payload['reason'] = reason.strip()
    response = api_request(request, f'/guests/{guest_id}/blacklist', 'PATCH', payload)
    if response.ok:
        messages.success(request, 'Guest blacklisted' if blacklisted else 'Guest removed from blacklist')
    return response


def get_guest_stats(request):
    """
    Returns:
        dict: totalGuests, vipGuests, blacklistedGuests, loyaltyMembers,
        loyaltyTiers, nationalityDistribution, recentGuests
    """
    response = api_request(request, '/guests/stats', notify=False)
    return response.data if isinstance(response.data, dict) else {}
