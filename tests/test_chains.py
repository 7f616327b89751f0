from django.urls import reverse

from chains.forms import SharedConfigurationForm
from chains.services import sync_configuration, sync_id
from .conftest import message_texts

CHAIN = {
    'name': 'Harbour Group',
    'chainCode': 'HV',
    'hotels': [
        {'_id': 'h1', 'name': 'Harbour View', 'code': 'HV-CPT'},
        {'id': 'h2', 'name': 'Harbour Annex', 'code': 'HV-ANX'},
    ],
}


def test_sync_every_hotel_when_none_selected(api_request_factory, fake_api):
    fake_api.add('POST', '/data-sync/chains/HV/configuration', {'data': {'syncId': 'sync-1'}})

    response = sync_configuration(api_request_factory(), 'HV', ['branding', 'systemSettings'])

    assert sync_id(response) == 'sync-1'
    assert fake_api.last('POST', '/data-sync/chains/HV/configuration')['json'] == {
        'syncAll': True, 'targetHotels': [], 'configSections': ['branding', 'systemSettings'],
    }


def test_sync_id_falls_back_to_log():
    class Response:
        data = {'syncLog': {'_id': 'log-7'}}

    assert sync_id(Response()) == 'log-7'


def test_shared_configuration_payload():
    form = SharedConfigurationForm({
        'primaryColor': '#101010', 'secondaryColor': '#f0f0f0', 'accentColor': '#ff9900',
        'primaryFont': 'Lato', 'secondaryFont': 'Inter', 'dateFormat': 'DD/MM/YYYY', 'timeFormat': '24h',
        'currency': 'ZAR', 'timezone': 'Africa/Johannesburg', 'language': 'en',
        'override_branding': 'on', 'prefix_invoice': 'HVI',
    })

    assert form.is_valid(), form.errors
    payload = form.to_payload()
    assert payload['branding']['font'] == {'primary': 'Lato', 'secondary': 'Inter'}
    assert payload['documentPrefixes'] == {'invoice': {'prefix': 'HVI'}}
    assert payload['systemSettings']['currency'] == {'code': 'ZAR', 'symbol': 'R'}
    assert payload['overrideSettings'] == {'branding': True, 'documentPrefixes': False, 'systemSettings': False}


def test_chains_are_admin_only(staff_client, fake_api):
    response = staff_client.get(reverse('chains:chain_list'))

    assert response.url == reverse('reservations:dashboard')
    assert message_texts(response) == ['You do not have access to the administration area.']
    assert not fake_api.calls


def test_chain_list(admin_client, fake_api):
    fake_api.add('GET', '/chains', {'data': [CHAIN]})

    response = admin_client.get(reverse('chains:chain_list'))

    assert response.status_code == 200
    assert 'Harbour Group' in response.content.decode()


def test_create_chain(admin_client, fake_api):
    fake_api.add('POST', '/chains', {'data': {'headquarters': {'_id': 'h1'}}}, status=201)

    response = admin_client.post(reverse('chains:chain_new'), {
        'name': 'Harbour Group', 'chainCode': 'HV', 'code': 'HV-CPT', 'type': 'hotel', 'starRating': '4',
    })

    assert response.url == reverse('chains:chain_detail', args=['HV'])
    assert fake_api.last('POST', '/chains')['json'] == {
        'name': 'Harbour Group', 'chainCode': 'HV', 'code': 'HV-CPT', 'type': 'hotel', 'starRating': 4,
    }
    assert 'Chain Harbour Group created successfully' in message_texts(response)


def test_chain_code_is_validated(admin_client, fake_api):
    response = admin_client.post(reverse('chains:chain_new'), {
        'name': 'Harbour Group', 'chainCode': 'HV GROUP', 'code': 'HV-CPT', 'type': 'hotel', 'starRating': '0',
    })

    assert response.status_code == 200
    assert not fake_api.calls_to('POST', '/chains')


def test_sync_selected_hotels_opens_log(admin_client, fake_api):
    fake_api.add('GET', '/chains/HV', {'data': CHAIN})
    fake_api.add('POST', '/data-sync/chains/HV/configuration', {'data': {'syncLog': {'_id': 'log-9'}}})

    response = admin_client.post(reverse('chains:chain_sync', args=['HV']), {
        'sections': ['documentPrefixes'], 'target_hotels': ['h2'],
    })

    assert response.url == reverse('chains:sync_log_detail', args=['HV', 'log-9'])
    assert fake_api.last('POST', '/data-sync/chains/HV/configuration')['json'] == {
        'syncAll': False, 'targetHotels': ['h2'], 'configSections': ['documentPrefixes'],
    }


def test_sync_needs_a_section(admin_client, fake_api):
    fake_api.add('GET', '/chains/HV', {'data': CHAIN})

    response = admin_client.post(reverse('chains:chain_sync', args=['HV']), {'target_hotels': ['h1']})

    assert response.status_code == 200
    assert 'Select at least one configuration section.' in response.content.decode()


def test_grant_access(admin_client, fake_api):
    fake_api.add('GET', '/users', {'data': [{'_id': 'u7', 'full_name': 'Lee Night', 'email': 'lee@example.com'}]})
    fake_api.add('POST', '/cross-hotel/chains/HV/users', {'data': {'hotelCount': 2}})

    response = admin_client.post(reverse('chains:user_grant', args=['HV']), {'user': 'u7', 'access_level': 'edit'})

    assert response.url == reverse('chains:chain_detail', args=['HV'])
    assert fake_api.last('GET', '/users')['params'] == {'page': '1', 'limit': '100'}
    assert fake_api.last('POST', '/cross-hotel/chains/HV/users')['json'] == {'userId': 'u7', 'accessLevel': 'edit'}
    assert 'Access granted to 2 hotels' in message_texts(response)


def test_sync_log_list_pages(admin_client, fake_api):
    fake_api.add('GET', '/data-sync/chains/HV/logs', {
        'data': [{'_id': 'log-9', 'status': 'completed', 'configSections': ['branding']}],
        'pagination': {'page': 2, 'limit': 20, 'totalPages': 3},
    })

    response = admin_client.get(reverse('chains:sync_log_list', args=['HV']), {'page': '2'})

    assert response.status_code == 200
    assert fake_api.last('GET', '/data-sync/chains/HV/logs')['params'] == {'page': '2', 'limit': '20'}
    pagination = response.context['pagination']
    assert pagination.has_previous and pagination.has_next


def test_chain_list_hotel_count_fallbacks(admin_client, fake_api):
    fake_api.add('GET', '/chains', {'data': [
        dict(CHAIN, stats={'totalHotels': 7}),
        dict(CHAIN, name='Bare Group', chainCode='BG'),
    ]})

    response = admin_client.get(reverse('chains:chain_list'))

    content = response.content.decode()
    assert response.status_code == 200
    assert '<td>7</td>' in content
    assert '<td>0</td>' in content
