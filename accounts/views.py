import logging

from django.contrib import messages
from django.shortcuts import redirect, render
from django.urls import reverse
from django.utils.http import url_has_allowed_host_and_scheme
from django.views.decorators.http import require_http_methods, require_POST

from core import auth
from core.api import ApiError
from core.decorators import api_login_required
from .forms import ChangePasswordForm, ForgotPasswordForm, LoginForm, RegisterForm, ResetPasswordForm

logger = logging.getLogger(__name__)


def _next_url(request):
    next_url = request.POST.get('next') or request.GET.get('next')
    if next_url and url_has_allowed_host_and_scheme(next_url, allowed_hosts={request.get_host()}):
        return next_url
    return None


@require_http_methods(["GET", "POST"])
def login_view(request):
    """Sign in against the hotel API and go back to the page that asked for it."""
    if auth.is_authenticated(request):
        return redirect(_next_url(request) or 'reservations:dashboard')

    if request.method == 'POST':
        form = LoginForm(request.POST)
        if form.is_valid():
            try:
                auth.login(request, form.cleaned_data['email'], form.cleaned_data['password'])
            except ApiError as exc:
                logger.info('Login refused for %s: %s', form.cleaned_data['email'], exc.message)
                messages.error(request, exc.message)
            else:
                return redirect(_next_url(request) or 'reservations:dashboard')
    else:
        form = LoginForm()

    return render(request, 'accounts/login.html', {'form': form, 'next': _next_url(request) or ''})


@require_POST
def logout_view(request):
    """Logout view."""
    auth.logout(request)
    return redirect('accounts:login')


@require_http_methods(["GET", "POST"])
def register_view(request):
    if request.method == 'POST':
        form = RegisterForm(request.POST)
        if form.is_valid():
            try:
                auth.register(request, form.to_payload())
            except ApiError as exc:
                messages.error(request, exc.message)
            else:
                return redirect('reservations:dashboard')
    else:
        form = RegisterForm()
    return render(request, 'accounts/public_form.html', {
        'form': form, 'title': 'Create an account', 'submit_label': 'Register',
    })


@require_http_methods(["GET", "POST"])
def forgot_password_view(request):
    if request.method == 'POST':
        form = ForgotPasswordForm(request.POST)
        if form.is_valid():
            try:
                auth.forgot_password(request, form.cleaned_data['email'])
            except ApiError as exc:
                messages.error(request, exc.message)
            else:
                return redirect('accounts:login')
    else:
        form = ForgotPasswordForm()
    return render(request, 'accounts/public_form.html', {
        'form': form, 'title': 'Forgot password', 'submit_label': 'Send reset link',
        'intro': 'Enter the email address of your account and we will send you a reset link.',
    })


@require_http_methods(["GET", "POST"])
def reset_password_view(request, token):
    if request.method == 'POST':
        form = ResetPasswordForm(request.POST)
        if form.is_valid():
            try:
                auth.reset_password(request, token, form.cleaned_data['password'])
            except ApiError as exc:
                messages.error(request, exc.message)
            else:
                return redirect('accounts:login')
    else:
        form = ResetPasswordForm()
    return render(request, 'accounts/public_form.html', {
        'form': form, 'title': 'Choose a new password', 'submit_label': 'Reset password',
    })


@api_login_required
@require_http_methods(["GET", "POST"])
def change_password_view(request):
    if request.method == 'POST':
        form = ChangePasswordForm(request.POST)
        if form.is_valid():
            try:
                auth.change_password(request, form.cleaned_data['current_password'], form.cleaned_data['new_password'])
            except ApiError as exc:
                messages.error(request, exc.message)
            else:
                return redirect('accounts:profile')
    else:
        form = ChangePasswordForm()
    return render(request, 'core/form_page.html', {
        'form': form, 'title': 'Change password', 'submit_label': 'Change password',
        'cancel_url': reverse('accounts:profile'),
    })


@api_login_required
def profile_view(request):
    """Profile of the signed-in staff member, reloaded from the API."""
    if not auth.check_auth(request):
        messages.warning(request, 'Your session has expired. Please sign in again.')
        return redirect('accounts:login')
    user = auth.current_user(request)
    return render(request, 'accounts/profile.html', {
        'profile': user,
        'role': auth.role_name(user),
        'permissions': auth.user_permissions(user),
    })
