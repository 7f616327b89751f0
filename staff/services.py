import logging

from django.contrib import messages

from core.api import api_request

logger = logging.getLogger(__name__)

USER_STATUSES = [('active', 'Active'), ('inactive', 'Inactive')]


# Users

def get_users(request, page=1, limit=None, notify=True):
    return api_request(request, '/users', params={'page': page, 'limit': limit}, notify=notify)


def get_user(request, user_id):
    response = api_request(request, f'/users/{user_id}')
    return response.data if response.ok and isinstance(response.data, dict) else None


def create_user(request, data):
    response = api_request(request, '/users', 'POST', data)
    if response.ok:
        messages.success(request, f"User {data.get('full_name')} created successfully")
    return response


def update_user(request, user_id, data):
    response = api_request(request, f'/users/{user_id}', 'PUT', data)
    if response.ok:
        messages.success(request, 'User updated successfully')
    return response


def delete_user(request, user_id):
    response = api_request(request, f'/users/{user_id}', 'DELETE')
    if response.ok:
        messages.success(request, 'User deleted successfully')
    return response


def reset_user_password(request, user_id, new_password):
    response = api_request(request, f'/users/{user_id}/reset-password', 'POST', {'newPassword': new_password})
    if response.ok:
        logger.info('Password reset for user %s', user_id)
        messages.success(request, 'Password reset successfully')
    return response


def get_user_hotel_count(request, user_id):
    response = api_request(request, f'/users/{user_id}/hotels/count', notify=False)
    if response.ok and isinstance(response.data, dict):
        return response.data.get('count', 0)
    return 0


def get_user_chains(request, user_id):
    """Chains the user can reach, each with chainCode, name and accessLevel."""
    return api_request(request, f'/users/{user_id}/chains', notify=False).items


# Roles

def get_roles(request):
    return api_request(request, '/roles').items


def get_role(request, role_id):
    response = api_request(request, f'/roles/{role_id}')
    return response.data if response.ok and isinstance(response.data, dict) else None


def create_role(request, data):
    response = api_request(request, '/roles', 'POST', data)
    if response.ok:
        messages.success(request, f"Role {data.get('name')} created successfully")
    return response


def update_role(request, role_id, data):
    response = api_request(request, f'/roles/{role_id}', 'PUT', data)
    if response.ok:
        messages.success(request, 'Role updated successfully')
    return response


def delete_role(request, role_id):
    response = api_request(request, f'/roles/{role_id}', 'DELETE')
    if response.ok:
        messages.success(request, 'Role deleted successfully')
    return response


# Permissions

def get_permissions(request):
    return api_request(request, '/permissions').items


def get_permission(request, permission_id):
    response = api_request(request, f'/permissions/{permission_id}')
    return response.data if response.ok and isinstance(response.data, dict) else None


def create_permission(request, data):
    response = api_request(request, '/permissions', 'POST', data)
    if response.ok:
        messages.success(request, f"Permission {data.get('key')} created successfully")
    return response


def update_permission(request, permission_id, data):
    response = api_request(request, f'/permissions/{permission_id}', 'PUT', data)
    if response.ok:
        messages.success(request, 'Permission updated successfully')
    return response


def delete_permission(request, permission_id):
    response = api_request(request, f'/permissions/{permission_id}', 'DELETE')
    if response.ok:
        messages.success(request, 'Permission deleted successfully')
    return response


def group_permissions(permissions):
    """
    Group permission keys by their first segment ("invoice.view" -> "invoice").

    Returns:
        list: (group, permissions) pairs sorted by group name
    """
    groups = {}
    for permission in permissions:
        key = permission.get('key') or ''
        groups.setdefault(key.split('.')[0] or 'other', []).append(permission)
    return sorted(groups.items())
