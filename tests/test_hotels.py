from django.urls import reverse

from hotels.forms import OperationalStepForm
from hotels.services import completed_steps
from .conftest import message_texts

HOTELS = [
    {'_id': 'h1', 'name': 'Harbour View', 'code': 'HV-CPT', 'type': 'hotel', 'isHeadquarters': True, 'active': True},
    {'_id': 'h2', 'name': 'Harbour Annex', 'code': 'HV-ANX', 'type': 'hotel', 'parentHotel': {'_id': 'h1'}, 'active': True},
]

ANNEX = dict(HOTELS[1], description='Across the street', chainCode='HV', starRating=3)

CONTACT_STEP = {
    'street': '1 Dock Road', 'city': 'Cape Town', 'state': 'Western Cape', 'postal_code': '8001',
    'country': 'South Africa', 'phone_primary': '+27 21 000 0000', 'email_primary': 'desk@harbour.example',
}


def test_hotels_are_admin_only(staff_client, fake_api):
    response = staff_client.get(reverse('hotels:hotel_list'))

    assert response.url == reverse('reservations:dashboard')
    assert not fake_api.calls


def test_hotel_list_passes_filters(admin_client, fake_api):
    fake_api.add('GET', '/hotels', {'data': HOTELS, 'pagination': {'page': 1, 'totalPages': 1}})

    response = admin_client.get(reverse('hotels:hotel_list') + '?type=resort&active=true&chainCode=')

    assert response.status_code == 200
    assert fake_api.last('GET', '/hotels')['params'] == {'type': 'resort', 'active': 'true'}
    assert 'Harbour Annex' in response.content.decode()


def test_new_hotel(admin_client, fake_api):
    fake_api.add('GET', '/hotels', {'data': HOTELS})
    fake_api.add('POST', '/hotels', {'data': {'_id': 'h9'}}, status=201)

    response = admin_client.post(reverse('hotels:hotel_new'), {
        'name': 'Harbour Lodge', 'code': 'HV-LDG', 'type': 'resort', 'starRating': '4',
        'parentHotel': 'h1', 'active': 'on',
    })

    assert response.url == reverse('hotels:hotel_detail', args=['h9'])
    assert fake_api.last('POST', '/hotels')['json'] == {
        'name': 'Harbour Lodge', 'code': 'HV-LDG', 'type': 'resort', 'starRating': 4,
        'parentHotel': 'h1', 'isHeadquarters': False, 'active': True,
    }
    assert 'Hotel Harbour Lodge created successfully' in message_texts(response)


def test_edit_hotel_prefills_and_clears_emptied_fields(admin_client, fake_api):
    fake_api.add('GET', '/hotels', {'data': HOTELS})
    fake_api.add('GET', '/hotels/h2', {'data': ANNEX})
    fake_api.add('PUT', '/hotels/h2', {'data': ANNEX})

    form_page = admin_client.get(reverse('hotels:hotel_edit', args=['h2']))
    response = admin_client.post(reverse('hotels:hotel_edit', args=['h2']), {
        'name': 'Harbour Annex', 'code': 'HV-ANX', 'type': 'hotel', 'starRating': '3',
        'description': '', 'chainCode': 'HV', 'parentHotel': 'h1', 'active': 'on',
    })

    initial = form_page.context['form'].initial
    assert initial['parentHotel'] == 'h1'
    assert initial['description'] == 'Across the street'
    assert [choice for choice, _ in form_page.context['form'].fields['parentHotel'].choices] == ['', 'h1']
    assert response.url == reverse('hotels:hotel_detail', args=['h2'])
    body = fake_api.last('PUT', '/hotels/h2')['json']
    assert body['description'] is None
    assert body['parentCompany'] is None
    assert body['chainCode'] == 'HV'
    assert 'Hotel updated successfully' in message_texts(response)


def test_delete_hotel(admin_client, fake_api):
    fake_api.add('GET', '/hotels/h2', {'data': ANNEX})
    fake_api.add('DELETE', '/hotels/h2', {'success': True})

    response = admin_client.post(reverse('hotels:hotel_delete', args=['h2']))

    assert response.url == reverse('hotels:hotel_list')
    assert fake_api.calls_to('DELETE', '/hotels/h2')
    assert 'Hotel deleted successfully' in message_texts(response)


def test_hotel_detail_shows_setup_progress(admin_client, fake_api):
    fake_api.add('GET', '/hotels/h1', {'data': dict(HOTELS[0], branches=[HOTELS[1], {'name': 'Unlinked'}])})
    fake_api.add('GET', '/hotels/h1/setup/status', {'data': {
        'setupInitiated': True, 'setupCompleted': False, 'currentStep': 3,
        'steps': [{'step': 1, 'completed': True}, {'step': 2, 'completed': True}, {'step': 3, 'completed': False}],
    }})

    response = admin_client.get(reverse('hotels:hotel_detail', args=['h1']))

    assert fake_api.last('GET', '/hotels/h1')['params'] == {'includeBranches': 'true'}
    assert [step['completed'] for step in response.context['steps']] == [True, True, False, False, False, False]
    content = response.content.decode()
    assert reverse('hotels:setup_step', args=['h1', 3]) in content
    assert 'Harbour Annex' in content


def test_completed_steps_ignores_missing_list():
    assert completed_steps({}) == set()
    assert completed_steps({'steps': [{'step': 4, 'completed': True}, {'step': 5}]}) == {4}


def test_start_setup(admin_client, fake_api):
    fake_api.add('POST', '/hotels/h1/setup/initialize', {'data': {'setupWizard': {'currentStep': 1}}})

    response = admin_client.post(reverse('hotels:setup_start', args=['h1']))

    assert response.url == reverse('hotels:setup_step', args=['h1', 1])
    assert 'Hotel setup started' in message_texts(response)


def test_setup_step_saves_and_moves_on(admin_client, fake_api):
    fake_api.add('GET', '/hotels/h1', {'data': HOTELS[0]})
    fake_api.add('PUT', '/configuration/h1/setup/2', {'data': {'currentStep': 3}})

    response = admin_client.post(reverse('hotels:setup_step', args=['h1', 2]), CONTACT_STEP)

    assert response.url == reverse('hotels:setup_step', args=['h1', 3])
    assert fake_api.last('PUT', '/configuration/h1/setup/2')['json'] == {'data': {'contact': {
        'address': {
            'street': '1 Dock Road', 'city': 'Cape Town', 'state': 'Western Cape',
            'postal_code': '8001', 'country': 'South Africa',
        },
        'phone': {'primary': '+27 21 000 0000'},
        'email': {'primary': 'desk@harbour.example'},
    }}}
    assert 'Contact details saved' in message_texts(response)


def test_first_setup_step_starts_from_hotel_name(admin_client, fake_api):
    fake_api.add('GET', '/hotels/h1', {'data': HOTELS[0]})

    response = admin_client.get(reverse('hotels:setup_step', args=['h1', 1]))

    assert response.context['form'].initial == {'name': 'Harbour View'}
    assert response.context['step_label'] == 'Basic information'


def test_last_setup_step_finishes(admin_client, fake_api):
    fake_api.add('GET', '/hotels/h1', {'data': HOTELS[0]})
    fake_api.add('PUT', '/configuration/h1/setup/6', {'data': {'isCompleted': True}})

    response = admin_client.post(reverse('hotels:setup_step', args=['h1', 6]), {'online_booking': 'on'})

    assert response.url == reverse('hotels:hotel_detail', args=['h1'])
    assert fake_api.last('PUT', '/configuration/h1/setup/6')['json'] == {'data': {'features': {
        'online_booking': True, 'mobile_checkin': False, 'keyless_entry': False,
        'loyalty_program': False, 'multi_language': False, 'payment_gateway': False,
    }}}
    assert message_texts(response) == ['Features saved', 'Hotel setup completed']


def test_unknown_setup_step(admin_client, fake_api):
    response = admin_client.get(reverse('hotels:setup_step', args=['h1', 7]))

    assert response.url == reverse('hotels:hotel_detail', args=['h1'])
    assert message_texts(response) == ['Setup has no step 7.']
    assert not fake_api.calls


def test_operational_step_sends_times_as_text():
    form = OperationalStepForm({
        'check_in_time': '14:00', 'check_out_time': '10:30', 'time_zone': 'Africa/Johannesburg',
        'date_format': 'DD/MM/YYYY', 'time_format': '24h',
        'cancellation_policy': 'Free cancellation up to 48 hours before arrival.',
    })

    assert form.is_valid(), form.errors
    data = form.to_data()['operational']
    assert data['check_in_time'] == '14:00'
    assert data['check_out_time'] == '10:30'


def _access_routes(fake_api):
    fake_api.add('GET', '/users/u7', {'data': {
        '_id': 'u7', 'full_name': 'Lee Night', 'email': 'lee@example.com',
        'accessible_hotels': [
            {'hotel': {'_id': 'h1', 'name': 'Harbour View'}, 'access_level': 'admin', 'isDefault': True},
            {'hotel': 'h2', 'access_level': 'read'},
            {'hotel': None, 'access_level': 'read'},
        ],
    }})
    fake_api.add('GET', '/hotels', {'data': HOTELS})
    fake_api.add('GET', '/roles', {'data': [{'_id': 'r1', 'name': 'Front Desk'}]})


def test_user_access_lists_grants(admin_client, fake_api):
    _access_routes(fake_api)

    response = admin_client.get(reverse('hotels:user_access', args=['u7']))

    grants = response.context['grants']
    assert [(grant['hotel_id'], grant['hotel_label']) for grant in grants] == [('h1', 'Harbour View'), ('h2', 'h2')]
    assert reverse('hotels:user_default_hotel', args=['u7', 'h2']) in response.content.decode()


def test_grant_hotel_access(admin_client, fake_api):
    _access_routes(fake_api)
    fake_api.add('POST', '/users/u7/hotels', {'data': {'hotelAccess': {'hotel': 'h2'}}}, status=201)

    response = admin_client.post(reverse('hotels:user_access', args=['u7']), {
        'hotel': 'h2', 'access_level': 'write', 'role': 'r1',
    })

    assert response.url == reverse('hotels:user_access', args=['u7'])
    assert fake_api.last('POST', '/users/u7/hotels')['json'] == {'hotelId': 'h2', 'accessLevel': 'write', 'roleId': 'r1'}
    assert 'Hotel access granted' in message_texts(response)


def test_remove_hotel_access(admin_client, fake_api):
    fake_api.add('DELETE', '/users/u7/hotels/h2', {'success': True})

    response = admin_client.post(reverse('hotels:user_access_remove', args=['u7', 'h2']))

    assert response.url == reverse('hotels:user_access', args=['u7'])
    assert fake_api.calls_to('DELETE', '/users/u7/hotels/h2')
    assert 'Hotel access removed' in message_texts(response)


def test_set_default_hotel(admin_client, fake_api):
    fake_api.add('PUT', '/users/u7/default-hotel/h2', {'data': {'_id': 'u7'}})

    response = admin_client.post(reverse('hotels:user_default_hotel', args=['u7', 'h2']))

    assert response.url == reverse('hotels:user_access', args=['u7'])
    assert 'Default hotel updated' in message_texts(response)
