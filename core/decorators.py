from functools import wraps
from urllib.parse import urlencode

from django.contrib import messages
from django.shortcuts import redirect
from django.urls import reverse

from .auth import current_user, is_admin, is_authenticated


def login_redirect(request):
    """Send the visitor to the login page, remembering where they were going."""
    url = reverse('accounts:login')
    return redirect(f"{url}?{urlencode({'next': request.get_full_path()})}")


def api_login_required(view_func):
    """
    Only let through requests that carry an API access token in the session.
    """
    @wraps(view_func)
    def _wrapped_view(request, *args, **kwargs):
        if not is_authenticated(request):
            return login_redirect(request)
        return view_func(request, *args, **kwargs)
    return _wrapped_view


def admin_required(view_func):
    """
    Restrict a view to super admins and holders of system or hotel management permissions.
    Signed-in staff without those rights go back to the dashboard.
    """
    @wraps(view_func)
    def _wrapped_view(request, *args, **kwargs):
        if not is_authenticated(request):
            return login_redirect(request)
        if not is_admin(current_user(request)):
            messages.error(request, 'You do not have access to the administration area.')
            return redirect('reservations:dashboard')
        return view_func(request, *args, **kwargs)
    return _wrapped_view
