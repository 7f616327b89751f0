import httpx
import pytest

from core.api import ApiClient, ApiError, ApiResponse, Pagination, api_request
from core.auth import ACCESS_TOKEN_KEY, SessionExpired


def test_unwraps_data_envelope(fake_api):
    fake_api.add('GET', '/bookings/b1', {'success': True, 'data': {'_id': 'b1', 'status': 'confirmed'}})

    response = ApiClient().request('/bookings/b1')

    assert response.ok
    assert response.status_code == 200
    assert response.data == {'_id': 'b1', 'status': 'confirmed'}
    assert response.payload['success'] is True


def test_body_without_data_member_is_returned_whole(fake_api):
    fake_api.add('GET', '/events/services', {'services': [{'_id': 's1'}]})

    response = ApiClient().request('/events/services')

    assert response.data == {'services': [{'_id': 's1'}]}


def test_error_message_comes_from_body(fake_api):
    fake_api.add('POST', '/bookings', {'success': False, 'message': 'Room is not available'}, status=409)

    response = ApiClient(token='t').request('/bookings', 'POST', {'room': 'r1'})

    assert not response.ok
    assert response.error == 'Room is not available'
    assert response.status_code == 409
    assert response.data is None


def test_error_without_message_uses_default(fake_api):
    fake_api.add('GET', '/rooms', lambda request: httpx.Response(500, text='boom'))

    response = ApiClient().request('/rooms')

    assert response.error == 'An error occurred'
    assert response.status_code == 500


def test_network_failure_is_reported_not_raised(fake_api, monkeypatch):
    def refuse(request):
        raise httpx.ConnectError('Connection refused', request=request)

    monkeypatch.setattr('core.api.build_transport', lambda: httpx.MockTransport(refuse))

    response = ApiClient().request('/rooms')

    assert response.error == 'Connection refused'
    assert response.status_code == 0


def test_query_params_are_cleaned_and_token_sent(fake_api):
    fake_api.add('GET', '/guests', {'data': []})

    ApiClient(token='abc').request('/guests', params={'search': 'ann', 'vip': True, 'nationality': '', 'tier': None})

    call = fake_api.last('GET', '/guests')
    assert call['params'] == {'search': 'ann', 'vip': 'true'}
    assert call['headers']['authorization'] == 'Bearer abc'


def test_get_requests_carry_no_body(fake_api):
    fake_api.add('GET', '/rooms', {'data': []})

    ApiClient().request('/rooms', 'GET', {'ignored': True})

    assert fake_api.last('GET', '/rooms')['json'] is None


def test_items_reads_either_envelope():
    assert ApiResponse(data=[{'_id': 1}]).items == [{'_id': 1}]
    assert ApiResponse(data={'data': [{'_id': 2}]}).items == [{'_id': 2}]
    assert ApiResponse(data={'_id': 3}).items == []


def test_raise_for_error():
    assert ApiResponse(data={'ok': 1}).raise_for_error() == {'ok': 1}
    with pytest.raises(ApiError) as excinfo:
        ApiResponse(error='Nope', status_code=403).raise_for_error()
    assert excinfo.value.status_code == 403


def test_pagination_reads_top_level_counters():
    response = ApiResponse(
        data=[{}, {}],
        payload={'data': [{}, {}], 'total': 45, 'pagination': {'page': 2, 'limit': 20, 'totalPages': 3}},
    )

    pagination = Pagination.from_response(response)

    assert (pagination.page, pagination.limit, pagination.total_pages, pagination.total) == (2, 20, 3, 45)
    assert pagination.has_previous and pagination.has_next


def test_pagination_defaults():
    pagination = Pagination.from_response(ApiResponse(data=[{}], payload={'data': [{}]}), default_limit=10)

    assert (pagination.page, pagination.limit, pagination.total_pages, pagination.total) == (1, 10, 1, 1)
    assert not pagination.has_previous and not pagination.has_next


def test_api_request_refreshes_once_on_401(fake_api, api_request_factory):
    def bookings(request):
        if request.headers['authorization'] == 'Bearer access-2':
            return httpx.Response(200, json={'data': [{'_id': 'b1'}]})
        return httpx.Response(401, json={'message': 'Token expired'})

    fake_api.add('GET', '/bookings', bookings)
    fake_api.add('POST', '/auth/refresh-token', {'data': {'accessToken': 'access-2'}})
    request = api_request_factory()

    response = api_request(request, '/bookings')

    assert response.ok
    assert response.items == [{'_id': 'b1'}]
    assert request.session[ACCESS_TOKEN_KEY] == 'access-2'
    assert fake_api.last('POST', '/auth/refresh-token')['json'] == {'refreshToken': 'refresh-1'}
    assert len(fake_api.calls_to('GET', '/bookings')) == 2


def test_api_request_raises_when_refresh_fails(fake_api, api_request_factory):
    fake_api.add('GET', '/bookings', {'message': 'Token expired'}, status=401)
    fake_api.add('POST', '/auth/refresh-token', {'message': 'Invalid refresh token'}, status=401)
    request = api_request_factory()

    with pytest.raises(SessionExpired):
        api_request(request, '/bookings')

    assert ACCESS_TOKEN_KEY not in request.session


def test_api_request_posts_error_message(fake_api, api_request_factory):
    fake_api.add('DELETE', '/rooms/r1', {'message': 'Room has active bookings'}, status=400)
    request = api_request_factory()

    response = api_request(request, '/rooms/r1', 'DELETE')

    assert response.error == 'Room has active bookings'
    assert [str(m) for m in request._messages] == ['Room has active bookings']


def test_api_request_can_stay_quiet(fake_api, api_request_factory):
    fake_api.add('GET', '/rooms/stats', {'message': 'Forbidden'}, status=403)
    request = api_request_factory()

    api_request(request, '/rooms/stats', notify=False)

    assert list(request._messages) == []
