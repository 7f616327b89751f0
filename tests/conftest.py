import json

import httpx
import pytest
from django.contrib.messages.storage.session import SessionStorage
from django.contrib.sessions.backends.cache import SessionStore
from django.test import RequestFactory

from core import api
from core.auth import set_tokens

API_PREFIX = '/api'

STAFF_USER = {
    '_id': 'u1',
    'full_name': 'Dana Front',
    'email': 'dana@example.com',
    'role': {'name': 'Front Desk', 'permissions': [{'key': 'booking.view'}]},
    'primaryHotel': {'id': 'h1', 'name': 'Harbour View'},
}

ADMIN_USER = dict(STAFF_USER, _id='u0', full_name='Sam Admin', role={'name': 'Super Admin', 'permissions': []})


class FakeApi:
    """Route table answering the REST calls made through core.api."""

    def __init__(self):
        self.routes = {}
        self.calls = []

    def add(self, method, path, body=None, status=200):
        """Register a reply; body may be a callable taking the httpx request."""
        self.routes[(method.upper(), path)] = (status, body)

    def handler(self, request):
        path = request.url.path
        if path.startswith(API_PREFIX):
            path = path[len(API_PREFIX):]
        payload = json.loads(request.content) if request.content else None
        self.calls.append({
            'method': request.method,
            'path': path,
            'params': dict(request.url.params),
            'json': payload,
            'headers': request.headers,
        })
        route = self.routes.get((request.method, path))
        if route is None:
            return httpx.Response(404, json={'success': False, 'message': f'No route for {request.method} {path}'})
        status, body = route
        if callable(body):
            body = body(request)
        if isinstance(body, httpx.Response):
            return body
        return httpx.Response(status, json=body)

    def calls_to(self, method, path):
        return [call for call in self.calls if call['method'] == method and call['path'] == path]

    def last(self, method, path):
        calls = self.calls_to(method, path)
        assert calls, f'{method} {path} was never called'
        return calls[-1]


@pytest.fixture
def fake_api(monkeypatch, settings):
    settings.HOTEL_API_URL = 'http://api.test/api'
    fake = FakeApi()
    monkeypatch.setattr(api, 'build_transport', lambda: httpx.MockTransport(fake.handler))
    return fake


def _sign_in(client, user):
    session = client.session
    set_tokens(session, 'access-1', 'refresh-1', user)
    session.save()
    return client


@pytest.fixture
def staff_client(client, fake_api):
    return _sign_in(client, STAFF_USER)


@pytest.fixture
def admin_client(client, fake_api):
    return _sign_in(client, ADMIN_USER)


@pytest.fixture
def api_request_factory():
    """Build a bare request with a session and message storage, for calling services directly."""
    def make(user=STAFF_USER, access_token='access-1', refresh_token='refresh-1'):
        request = RequestFactory().get('/')
        request.session = SessionStore()
        if user is not None:
            set_tokens(request.session, access_token, refresh_token, user)
        request._messages = SessionStorage(request)
        return request
    return make


def message_texts(response):
    return [str(message) for message in response.wsgi_request._messages]
