from django.shortcuts import redirect, render
from django.urls import reverse

from core.api import Pagination
from core.decorators import admin_required
from . import services
from .forms import (
    PermissionForm, RoleForm, UserForm, UserPasswordResetForm, initial_from_role, initial_from_user,
)


# Users

@admin_required
def user_list(request):
    response = services.get_users(request, page=request.GET.get('page') or 1)
    return render(request, 'staff/user_list.html', {
        'users': response.items,
        'pagination': Pagination.from_response(response),
    })


def _load_user(request, user_id):
    return services.get_user(request, user_id)


@admin_required
def user_detail(request, user_id):
    """User account with the hotels and chains it can reach."""
    user = _load_user(request, user_id)
    if user is None:
        return redirect('staff:user_list')
    return render(request, 'staff/user_detail.html', {
        'staff_user': user,
        'hotel_count': services.get_user_hotel_count(request, user_id),
        'chains': services.get_user_chains(request, user_id),
    })


@admin_required
def user_new(request):
    roles = services.get_roles(request)
    if request.method == 'POST':
        form = UserForm(request.POST, roles=roles)
        if form.is_valid():
            response = services.create_user(request, form.to_payload())
            if response.ok:
                user_id = response.data.get('_id') if isinstance(response.data, dict) else None
                if user_id:
                    return redirect('staff:user_detail', user_id=user_id)
                return redirect('staff:user_list')
    else:
        form = UserForm(roles=roles)
    return render(request, 'core/form_page.html', {
        'form': form, 'title': 'New user', 'submit_label': 'Create user',
        'cancel_url': reverse('staff:user_list'),
    })


@admin_required
def user_edit(request, user_id):
    user = _load_user(request, user_id)
    if user is None:
        return redirect('staff:user_list')
    roles = services.get_roles(request)
    if request.method == 'POST':
        form = UserForm(request.POST, roles=roles, editing=True)
        if form.is_valid() and services.update_user(request, user_id, form.to_payload()).ok:
            return redirect('staff:user_detail', user_id=user_id)
    else:
        form = UserForm(initial=initial_from_user(user), roles=roles, editing=True)
    return render(request, 'core/form_page.html', {
        'form': form, 'title': f"Edit {user.get('full_name', 'user')}",
        'cancel_url': reverse('staff:user_detail', args=[user_id]),
    })


@admin_required
def user_delete(request, user_id):
    user = _load_user(request, user_id)
    if user is None:
        return redirect('staff:user_list')
    if request.method == 'POST':
        if services.delete_user(request, user_id).ok:
            return redirect('staff:user_list')
    return render(request, 'core/confirm_page.html', {
        'title': 'Delete user',
        'question': f"Delete the account of {user.get('full_name')} ({user.get('email')})?",
        'submit_label': 'Delete',
        'cancel_url': reverse('staff:user_detail', args=[user_id]),
    })


@admin_required
def user_reset_password(request, user_id):
    user = _load_user(request, user_id)
    if user is None:
        return redirect('staff:user_list')
    if request.method == 'POST':
        form = UserPasswordResetForm(request.POST)
        if form.is_valid():
            response = services.reset_user_password(request, user_id, form.cleaned_data['new_password'])
            if response.ok:
                return redirect('staff:user_detail', user_id=user_id)
    else:
        form = UserPasswordResetForm()
    return render(request, 'core/form_page.html', {
        'form': form, 'title': f"Reset password: {user.get('full_name', '')}",
        'submit_label': 'Reset password',
        'cancel_url': reverse('staff:user_detail', args=[user_id]),
    })


# Roles

@admin_required
def role_list(request):
    return render(request, 'staff/role_list.html', {'roles': services.get_roles(request)})


@admin_required
def role_new(request):
    permissions = services.get_permissions(request)
    if request.method == 'POST':
        form = RoleForm(request.POST, permissions=permissions)
        if form.is_valid() and services.create_role(request, form.to_payload()).ok:
            return redirect('staff:role_list')
    else:
        form = RoleForm(permissions=permissions)
    return render(request, 'core/form_page.html', {
        'form': form, 'title': 'New role', 'submit_label': 'Create role',
        'cancel_url': reverse('staff:role_list'),
    })


@admin_required
def role_edit(request, role_id):
    role = services.get_role(request, role_id)
    if role is None:
        return redirect('staff:role_list')
    permissions = services.get_permissions(request)
    if request.method == 'POST':
        form = RoleForm(request.POST, permissions=permissions)
        if form.is_valid() and services.update_role(request, role_id, form.to_payload()).ok:
            return redirect('staff:role_list')
    else:
        form = RoleForm(initial=initial_from_role(role), permissions=permissions)
    return render(request, 'core/form_page.html', {
        'form': form, 'title': f"Edit role {role.get('name', '')}",
        'cancel_url': reverse('staff:role_list'),
    })


@admin_required
def role_delete(request, role_id):
    role = services.get_role(request, role_id)
    if role is None:
        return redirect('staff:role_list')
    if request.method == 'POST':
        if services.delete_role(request, role_id).ok:
            return redirect('staff:role_list')
    return render(request, 'core/confirm_page.html', {
        'title': 'Delete role',
        'question': f"Delete the role {role.get('name')}? Users holding it lose its permissions.",
        'submit_label': 'Delete',
        'cancel_url': reverse('staff:role_list'),
    })


# Permissions

@admin_required
def permission_list(request):
    return render(request, 'staff/permission_list.html', {
        'groups': services.group_permissions(services.get_permissions(request)),
    })


@admin_required
def permission_new(request):
    if request.method == 'POST':
        form = PermissionForm(request.POST)
        if form.is_valid() and services.create_permission(request, form.cleaned_data).ok:
            return redirect('staff:permission_list')
    else:
        form = PermissionForm()
    return render(request, 'core/form_page.html', {
        'form': form, 'title': 'New permission', 'submit_label': 'Create permission',
        'cancel_url': reverse('staff:permission_list'),
    })


@admin_required
def permission_edit(request, permission_id):
    permission = services.get_permission(request, permission_id)
    if permission is None:
        return redirect('staff:permission_list')
    if request.method == 'POST':
        form = PermissionForm(request.POST)
        if form.is_valid() and services.update_permission(request, permission_id, form.cleaned_data).ok:
            return redirect('staff:permission_list')
    else:
        form = PermissionForm(initial={'key': permission.get('key'), 'description': permission.get('description')})
    return render(request, 'core/form_page.html', {
        'form': form, 'title': f"Edit permission {permission.get('key', '')}",
        'cancel_url': reverse('staff:permission_list'),
    })


@admin_required
def permission_delete(request, permission_id):
    permission = services.get_permission(request, permission_id)
    if permission is None:
        return redirect('staff:permission_list')
    if request.method == 'POST':
        if services.delete_permission(request, permission_id).ok:
            return redirect('staff:permission_list')
    return render(request, 'core/confirm_page.html', {
        'title': 'Delete permission',
        'question': f"Delete {permission.get('key')}? Roles holding it lose it.",
        'submit_label': 'Delete',
        'cancel_url': reverse('staff:permission_list'),
    })
