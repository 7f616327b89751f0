import logging

import httpx
from django.conf import settings
from django.contrib import messages

from .filters import clean_params

logger = logging.getLogger(__name__)

DEFAULT_ERROR = 'An error occurred'


class ApiError(Exception):
    """A REST call failed and the caller asked for exception flow."""

    def __init__(self, message, status_code=None, payload=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload


class ApiResponse:
    """
    Outcome of one REST call.

    data is the unwrapped body (the "data" member when the API sends one),
    error is the message to show staff, payload keeps the whole decoded body
    for pagination and counters.
    """

    def __init__(self, data=None, error=None, status_code=None, payload=None):
        self.data = data
        self.error = error
        self.status_code = status_code
        self.payload = payload

    def __repr__(self):
        return f"<ApiResponse status={self.status_code} error={self.error!r}>"

    @property
    def ok(self):
        return self.error is None

    @property
    def items(self):
        """The list carried by the response, whichever envelope the API used."""
        data = self.data
        if isinstance(data, list):
            return data
        if isinstance(data, dict) and isinstance(data.get('data'), list):
            return data['data']
        return []

    def raise_for_error(self):
        if self.error is not None:
            raise ApiError(self.error, self.status_code, self.payload)
        return self.data


class Pagination:
    """Page counters read from a list response, with the listing defaults."""

    def __init__(self, page=1, limit=20, total_pages=1, total=0):
        self.page = page
        self.limit = limit
        self.total_pages = total_pages
        self.total = total

    @classmethod
    def from_response(cls, response, default_limit=None):
        default_limit = default_limit or settings.BACKOFFICE_PAGE_SIZE
        payload = response.payload if isinstance(response.payload, dict) else {}
        info = payload.get('pagination')
        if not info and isinstance(payload.get('data'), dict):
            info = payload['data'].get('pagination')
        info = info or {}
        return cls(
            page=info.get('page') or 1,
            limit=info.get('limit') or default_limit,
            total_pages=info.get('totalPages') or 1,
            total=payload.get('total') or info.get('total') or len(response.items),
        )

    @property
    def has_previous(self):
        return self.page > 1

    @property
    def has_next(self):
        return self.page < self.total_pages


def build_transport():
    """Transport for new clients; None lets httpx open real connections."""
    return None


class ApiClient:
    """Thin JSON client for the hotel REST API."""

    def __init__(self, base_url=None, token=None, timeout=None, transport=None):
        self.base_url = (base_url or settings.HOTEL_API_URL).rstrip('/')
        self.token = token
        self.timeout = timeout if timeout is not None else settings.HOTEL_API_TIMEOUT
        self.transport = transport if transport is not None else build_transport()

    def headers(self):
        headers = {'Content-Type': 'application/json'}
        if self.token:
            headers['Authorization'] = f'Bearer {self.token}'
        return headers

    def request(self, endpoint, method='GET', data=None, params=None):
        """
        Send one request and shape the reply.

        Args:
            endpoint: path below the API base URL, e.g. "/bookings/42"
            method: HTTP verb
            data: JSON body, ignored for GET
            params: query filters, cleaned with clean_params

        Returns:
            ApiResponse: never raises for HTTP or network failures
        """
        method = method.upper()
        url = f'{self.base_url}{endpoint}'
        kwargs = {'headers': self.headers(), 'params': clean_params(params)}
        if data is not None and method != 'GET':
            kwargs['json'] = data

        logger.debug('%s %s', method, url)
        try:
            with httpx.Client(transport=self.transport, timeout=self.timeout) as client:
                response = client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            message = str(exc) or DEFAULT_ERROR
            logger.warning('%s %s failed: %s', method, url, message)
            return ApiResponse(error=message, status_code=0)

        body = _decode(response)
        if response.is_error:
            message = DEFAULT_ERROR
            if isinstance(body, dict) and body.get('message'):
                message = body['message']
            logger.warning('%s %s returned %s: %s', method, url, response.status_code, message)
            return ApiResponse(error=message, status_code=response.status_code, payload=body)

        data = body
        if isinstance(body, dict) and body.get('data'):
            data = body['data']
        return ApiResponse(data=data, status_code=response.status_code, payload=body)


def get_client(request):
    """Client carrying the access token of the signed-in staff member."""
    from .auth import ACCESS_TOKEN_KEY
    return ApiClient(token=request.session.get(ACCESS_TOKEN_KEY))


def api_request(request, endpoint, method='GET', data=None, params=None, notify=True):
    """
    Call the API on behalf of the signed-in staff member.

    A 401 on an authenticated call triggers one token refresh and one retry.
    If the refresh fails the session is cleared and SessionExpired propagates
    so the middleware can send the user back to the login page. With notify
    set, any remaining error is posted as an error message.
    """
    from .auth import ACCESS_TOKEN_KEY, SessionExpired, clear_tokens, refresh_access_token

    response = get_client(request).request(endpoint, method, data, params)
    if response.status_code == 401 and request.session.get(ACCESS_TOKEN_KEY):
        if not refresh_access_token(request):
            clear_tokens(request.session)
            raise SessionExpired(response.error)
        response = get_client(request).request(endpoint, method, data, params)

    if response.error and notify:
        messages.error(request, response.error)
    return response


def _decode(response):
    try:
        return response.json()
    except ValueError:
        return None
