from django.urls import reverse

from events.forms import EventServiceForm
from events.services import bulk_update_services, filter_services
from .conftest import message_texts

SERVICES = [
    {'_id': 's1', 'name': 'Buffet lunch', 'category': 'catering', 'priceType': 'per_person', 'price': 25, 'status': 'active'},
    {'_id': 's2', 'name': 'String quartet', 'category': 'entertainment', 'priceType': 'per_hour', 'price': 300,
     'status': 'seasonal', 'isExternalService': True, 'externalProvider': {'name': 'Cape Strings'}},
    {'_id': 's3', 'name': 'Projector', 'description': 'HD projector with screen', 'category': 'equipment',
     'priceType': 'per_day', 'price': 80, 'status': 'inactive'},
    {'_id': 's4', 'name': 'Wedding cake', 'category': 'catering', 'subcategory': 'desserts', 'priceType': 'fixed',
     'price': 150, 'status': 'active', 'isExternalService': True},
]


def _ids(services):
    return [service['_id'] for service in services]


def test_search_covers_description_and_subcategory():
    assert _ids(filter_services(SERVICES, query='SCREEN')) == ['s3']
    assert _ids(filter_services(SERVICES, query='dessert')) == ['s4']


def test_filters_combine():
    assert _ids(filter_services(SERVICES, category='catering', status='active')) == ['s1', 's4']
    assert _ids(filter_services(SERVICES, provider='external')) == ['s2', 's4']
    assert _ids(filter_services(SERVICES, provider='internal', price_type='per_day')) == ['s3']


def test_price_sort():
    assert _ids(filter_services(SERVICES, price_sort='desc')) == ['s2', 's4', 's3', 's1']
    assert _ids(filter_services(SERVICES, price_sort='')) == ['s1', 's2', 's3', 's4']


def test_bulk_update_payload_and_count(api_request_factory, fake_api):
    fake_api.add('PATCH', '/events/services/bulk-update', {'data': {'modifiedCount': 2}})
    request = api_request_factory()

    updated = bulk_update_services(request, ['s1', 's3'], 'deactivate')

    assert updated == 2
    assert fake_api.last('PATCH', '/events/services/bulk-update')['json'] == {
        'serviceIds': ['s1', 's3'], 'updateData': {'status': 'inactive'},
    }
    assert [str(m) for m in request._messages] == ['Updated 2 services successfully']


def test_bulk_update_without_selection_sends_nothing(api_request_factory, fake_api):
    assert bulk_update_services(api_request_factory(), [], 'activate') is None
    assert not fake_api.calls


def test_custom_price_needs_details():
    form = EventServiceForm({
        'name': 'Gala dinner', 'category': 'catering', 'price': '0', 'priceType': 'custom',
        'minimumQuantity': 1, 'leadTime': 24, 'setupTime': 30, 'cleanupTime': 30, 'status': 'active',
    })

    assert not form.is_valid()
    assert 'customPriceDetails' in form.errors


def test_external_service_payload():
    form = EventServiceForm({
        'name': 'DJ set', 'category': 'entertainment', 'price': '450', 'priceType': 'flat',
        'minimumQuantity': 1, 'leadTime': 48, 'setupTime': 60, 'cleanupTime': 30, 'status': 'active',
        'isExternalService': 'on', 'provider_name': 'Beat Box', 'provider_commission': '12.5',
    })

    assert form.is_valid(), form.errors
    payload = form.to_payload('h1')
    assert payload['price'] == 450.0
    assert payload['hotel'] == 'h1'
    assert payload['externalProvider'] == {'name': 'Beat Box', 'commissionRate': 12.5}
    assert 'provider_name' not in payload


def test_service_list_filters_and_counts(staff_client, fake_api):
    fake_api.add('GET', '/events/services', {'success': True, 'data': {'services': SERVICES}})

    response = staff_client.get(reverse('events:service_list'), {'category': 'catering'})

    assert response.status_code == 200
    assert fake_api.last('GET', '/events/services')['params'] == {'hotel': 'h1'}
    assert _ids(response.context['page_obj'].object_list) == ['s1', 's4']
    assert response.context['stats'] == [('Total services', 4), ('Active', 2), ('Internal', 2), ('External', 2)]


def test_bulk_action_from_list(staff_client, fake_api):
    fake_api.add('GET', '/events/services', {'data': {'services': SERVICES}})
    fake_api.add('PATCH', '/events/services/bulk-update', {'data': {'modifiedCount': 1}})

    response = staff_client.post(reverse('events:service_list'), {'action': 'seasonal', 'service_ids': ['s3']})

    assert response.status_code == 302
    assert fake_api.last('PATCH', '/events/services/bulk-update')['json']['updateData'] == {'status': 'seasonal'}
    assert 'Updated 1 services successfully' in message_texts(response)


def test_delete_names_the_service(staff_client, fake_api):
    fake_api.add('GET', '/events/services/s1', {'data': {'service': SERVICES[0]}})
    fake_api.add('DELETE', '/events/services/s1', {'success': True, 'message': 'Deleted'})

    response = staff_client.post(reverse('events:service_delete', args=['s1']))

    assert response.url == reverse('events:service_list')
    assert message_texts(response) == ['Service "Buffet lunch" deleted successfully']


def test_services_without_price_type_or_category_render(staff_client, fake_api):
    bare = {'_id': 's5', 'name': 'Room hire', 'price': 500, 'status': 'active'}
    fake_api.add('GET', '/events/services', {'data': {'services': [bare]}})
    fake_api.add('GET', '/events/services/s5', {'data': {'service': bare}})

    listing = staff_client.get(reverse('events:service_list'))
    detail = staff_client.get(reverse('events:service_detail', args=['s5']))

    assert listing.status_code == 200
    assert '$500.00' in listing.content.decode()
    assert detail.status_code == 200
    assert '$500.00' in detail.content.decode()
