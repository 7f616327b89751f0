import logging

from django.contrib import messages

from .api import ApiClient, ApiError, api_request, get_client

logger = logging.getLogger(__name__)

ACCESS_TOKEN_KEY = 'access_token'
REFRESH_TOKEN_KEY = 'refresh_token'
USER_KEY = 'user'

ADMIN_ROLE = 'super admin'
ADMIN_PERMISSIONS = ('system.super.admin', 'system.manage.all')
ADMIN_PERMISSION_PREFIX = 'hotel.manage'


class SessionExpired(Exception):
    """The access token was rejected and the refresh token could not replace it."""


def set_tokens(session, access_token, refresh_token, user):
    session[ACCESS_TOKEN_KEY] = access_token
    session[REFRESH_TOKEN_KEY] = refresh_token
    session[USER_KEY] = user


def clear_tokens(session):
    for key in (ACCESS_TOKEN_KEY, REFRESH_TOKEN_KEY, USER_KEY):
        session.pop(key, None)


def is_authenticated(request):
    return bool(request.session.get(ACCESS_TOKEN_KEY))


def current_user(request):
    return request.session.get(USER_KEY)


def current_hotel_id(request):
    """Primary hotel of the signed-in user, or None when no hotel access is set."""
    user = current_user(request) or {}
    hotel = user.get('primaryHotel') or {}
    return hotel.get('id') or hotel.get('_id')


def role_name(user):
    role = (user or {}).get('role')
    if isinstance(role, dict):
        return role.get('name') or ''
    return role or ''


def user_permissions(user):
    """Permission keys granted directly or through the role."""
    user = user or {}
    keys = []
    role = user.get('role')
    sources = list(user.get('permissions') or [])
    if isinstance(role, dict):
        sources.extend(role.get('permissions') or [])
    for permission in sources:
        key = permission.get('key') if isinstance(permission, dict) else permission
        if key and key not in keys:
            keys.append(key)
    return keys


def is_admin(user):
    if not user:
        return False
    if role_name(user).lower() == ADMIN_ROLE:
        return True
    return any(
        key in ADMIN_PERMISSIONS or key.startswith(ADMIN_PERMISSION_PREFIX)
        for key in user_permissions(user)
    )


def _store_session(request, data):
    request.session.cycle_key()
    set_tokens(request.session, data.get('accessToken'), data.get('refreshToken'), data.get('user'))


def login(request, email, password):
    """
    Exchange credentials for tokens and open the staff session.

    Raises:
        ApiError: the API refused the credentials or was unreachable
    """
    response = ApiClient().request('/auth/login', 'POST', {'email': email, 'password': password})
    if response.error or not response.data:
        raise ApiError(response.error or 'Login failed', response.status_code)
    _store_session(request, response.data)
    messages.success(request, 'Login successful')
    return response.data.get('user')


def register(request, data):
    response = ApiClient().request('/auth/register', 'POST', data)
    if response.error or not response.data:
        raise ApiError(response.error or 'Registration failed', response.status_code)
    _store_session(request, response.data)
    messages.success(request, 'Registration successful. Please verify your email.')
    return response.data.get('user')


def logout(request):
    """Tell the API to end the session, then forget the tokens whatever it answered."""
    if is_authenticated(request):
        response = get_client(request).request('/auth/logout', 'POST')
        if response.error:
            logger.info('Logout call failed: %s', response.error)
    clear_tokens(request.session)
    messages.success(request, 'Logged out successfully')


def forgot_password(request, email):
    ApiClient().request('/auth/forgot-password', 'POST', {'email': email}).raise_for_error()
    messages.success(request, 'Password reset email sent')
    return True


def reset_password(request, token, password):
    ApiClient().request(f'/auth/reset-password/{token}', 'POST', {'password': password}).raise_for_error()
    messages.success(request, 'Password reset successful')
    return True


def change_password(request, current_password, new_password):
    payload = {'currentPassword': current_password, 'newPassword': new_password}
    api_request(request, '/auth/change-password', 'POST', payload, notify=False).raise_for_error()
    messages.success(request, 'Password changed successfully')
    return True


def refresh_access_token(request):
    """
    Swap the refresh token for a new access token.

    The refresh token itself is kept. When the reply carries the user it
    replaces the cached copy.

    Returns:
        bool: True when a new access token was stored
    """
    refresh_token = request.session.get(REFRESH_TOKEN_KEY)
    if not refresh_token:
        return False

    response = ApiClient().request('/auth/refresh-token', 'POST', {'refreshToken': refresh_token})
    if response.error or not isinstance(response.data, dict) or not response.data.get('accessToken'):
        logger.info('Token refresh rejected: %s', response.error)
        return False

    request.session[ACCESS_TOKEN_KEY] = response.data['accessToken']
    if response.data.get('user'):
        request.session[USER_KEY] = response.data['user']
    return True


def check_auth(request):
    """
    Confirm the session against /auth/me, refreshing the token once if needed.

    Returns:
        bool: True while the session is usable; tokens are cleared otherwise
    """
    if not is_authenticated(request):
        return False

    response = get_client(request).request('/auth/me')
    if response.error or not response.data:
        if refresh_access_token(request):
            return True
        clear_tokens(request.session)
        return False

    request.session[USER_KEY] = response.data
    return True
