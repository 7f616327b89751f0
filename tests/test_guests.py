import pytest
from django.urls import reverse

from guests.forms import GuestForm
from guests.services import toggle_blacklist_status
from .conftest import message_texts

GUEST = {
    '_id': 'g1',
    'full_name': 'Ann Lee',
    'email': 'ann@example.com',
    'phone': '+27 21 555 0101',
    'vip': False,
    'blacklisted': False,
    'loyalty_program': {'member': True, 'tier': 'gold', 'points': 1200},
}


def test_blacklisting_needs_a_reason(api_request_factory, fake_api):
    request = api_request_factory()

    with pytest.raises(ValueError):
        toggle_blacklist_status(request, 'g1', True, '   ')

    assert not fake_api.calls


def test_lifting_blacklist_needs_no_reason(api_request_factory, fake_api):
    fake_api.add('PATCH', '/guests/g1/blacklist', {'data': dict(GUEST, blacklisted=False)})
    request = api_request_factory()

    response = toggle_blacklist_status(request, 'g1', False)

    assert response.ok
    assert fake_api.last('PATCH', '/guests/g1/blacklist')['json'] == {'blacklisted': False}


def test_guest_form_nests_address_and_drops_blanks():
    form = GuestForm({
        'full_name': 'Ann Lee', 'email': 'ann@example.com', 'phone': '555',
        'address_city': 'Cape Town', 'address_country': 'South Africa',
        'tags': 'late arrival, quiet room,', 'dob': '1990-04-02',
    })

    assert form.is_valid(), form.errors
    payload = form.to_payload()
    assert payload['address'] == {'city': 'Cape Town', 'country': 'South Africa'}
    assert payload['tags'] == ['late arrival', 'quiet room']
    assert payload['dob'] == '1990-04-02'
    assert 'company' not in payload
    assert 'notes' not in payload


def test_guest_form_rejects_half_an_emergency_contact():
    form = GuestForm({'full_name': 'Ann Lee', 'email': 'ann@example.com', 'phone': '555', 'emergency_name': 'Tom'})

    assert not form.is_valid()


def test_guest_list_passes_filters_and_shows_counters(staff_client, fake_api):
    fake_api.add('GET', '/guests', {'data': [GUEST], 'pagination': {'page': 1, 'totalPages': 1}, 'count': 1})
    fake_api.add('GET', '/guests/stats', {'data': {'totalGuests': 12, 'vipGuests': 3, 'loyaltyMembers': 5, 'blacklistedGuests': 1}})

    response = staff_client.get(reverse('guests:guest_list'), {'search': 'ann', 'vip': 'true', 'nationality': ''})

    assert response.status_code == 200
    assert fake_api.last('GET', '/guests')['params'] == {'search': 'ann', 'vip': 'true'}
    assert ('VIP', 3) in response.context['stats']
    assert 'Ann Lee' in response.content.decode()


def test_toggle_vip_reports_new_state(staff_client, fake_api):
    fake_api.add('PATCH', '/guests/g1/vip', {'data': dict(GUEST, vip=True)})

    response = staff_client.post(reverse('guests:guest_toggle_vip', args=['g1']))

    assert response.url == reverse('guests:guest_detail', args=['g1'])
    assert message_texts(response) == ['Guest marked as VIP']


def test_toggle_vip_is_post_only(staff_client, fake_api):
    response = staff_client.get(reverse('guests:guest_toggle_vip', args=['g1']))

    assert response.status_code == 405


def test_blacklist_view_sends_reason(staff_client, fake_api):
    fake_api.add('GET', '/guests/g1', {'data': GUEST})
    fake_api.add('PATCH', '/guests/g1/blacklist', {'data': dict(GUEST, blacklisted=True)})

    response = staff_client.post(reverse('guests:guest_blacklist', args=['g1']), {'reason': 'Damaged property'})

    assert response.url == reverse('guests:guest_detail', args=['g1'])
    assert fake_api.last('PATCH', '/guests/g1/blacklist')['json'] == {'blacklisted': True, 'reason': 'Damaged property'}
    assert 'Guest blacklisted' in message_texts(response)


def test_missing_guest_goes_back_to_list(staff_client, fake_api):
    fake_api.add('GET', '/guests/zz', {'success': False, 'message': 'Guest not found'}, status=404)

    response = staff_client.get(reverse('guests:guest_detail', args=['zz']))

    assert response.url == reverse('guests:guest_list')
    assert message_texts(response) == ['Guest not found']


def test_editing_a_guest_clears_emptied_fields(staff_client, fake_api):
    fake_api.add('GET', '/guests/g1', {'data': dict(GUEST, notes='Late arrival', nationality='ZA')})
    fake_api.add('PUT', '/guests/g1', {'data': GUEST})

    response = staff_client.post(reverse('guests:guest_edit', args=['g1']), {
        'full_name': 'Ann Lee', 'email': 'ann@example.com', 'phone': '+27 21 555 0101', 'notes': '',
    })

    assert response.url == reverse('guests:guest_detail', args=['g1'])
    body = fake_api.last('PUT', '/guests/g1')['json']
    assert body['notes'] is None
    assert body['nationality'] is None
    assert body['address']['city'] is None
    assert body['full_name'] == 'Ann Lee'
