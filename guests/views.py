from django.contrib import messages
from django.shortcuts import redirect, render
from django.urls import reverse
from django.views.decorators.http import require_POST

from core.api import Pagination
from core.decorators import api_login_required
from core.filters import query_filters
from . import services
from .forms import BlacklistForm, GuestFilterForm, GuestForm, LoyaltyForm, initial_from_guest


@api_login_required
def guest_list(request):
    """Guests with API filters and the guest counters."""
    filters = query_filters(request, ('search', 'nationality', 'vip', 'blacklisted', 'loyalty_tier', 'page'))
    response = services.get_guests(request, filters)
    stats = services.get_guest_stats(request)
    context = {
        'filter_form': GuestFilterForm(request.GET or None),
        'guests': response.items,
        'pagination': Pagination.from_response(response),
        'stats': [
            ('Total guests', stats.get('totalGuests', 0)),
            ('VIP', stats.get('vipGuests', 0)),
            ('Loyalty members', stats.get('loyaltyMembers', 0)),
            ('Blacklisted', stats.get('blacklistedGuests', 0)),
        ] if stats else [],
    }
    return render(request, 'guests/guest_list.html', context)


def _load_guest(request, guest_id):
    response = services.get_guest(request, guest_id)
    return response.data if response.ok and isinstance(response.data, dict) else None


@api_login_required
def guest_detail(request, guest_id):
    guest = _load_guest(request, guest_id)
    if guest is None:
        return redirect('guests:guest_list')
    return render(request, 'guests/guest_detail.html', {
        'guest': guest,
        'bookings': services.get_guest_bookings(request, guest_id),
    })


@api_login_required
def guest_new(request):
    if request.method == 'POST':
        form = GuestForm(request.POST)
        if form.is_valid():
            response = services.create_guest(request, form.to_payload())
            if response.ok:
                guest_id = response.data.get('_id') if isinstance(response.data, dict) else None
                if guest_id:
                    return redirect('guests:guest_detail', guest_id=guest_id)
                return redirect('guests:guest_list')
    else:
        form = GuestForm()
    return render(request, 'core/form_page.html', {
        'form': form, 'title': 'New guest', 'submit_label': 'Create guest',
        'cancel_url': reverse('guests:guest_list'),
    })


@api_login_required
def guest_edit(request, guest_id):
    guest = _load_guest(request, guest_id)
    if guest is None:
        return redirect('guests:guest_list')
    if request.method == 'POST':
        form = GuestForm(request.POST, editing=True)
        if form.is_valid() and services.update_guest(request, guest_id, form.to_payload()).ok:
            return redirect('guests:guest_detail', guest_id=guest_id)
    else:
        form = GuestForm(initial=initial_from_guest(guest), editing=True)
    return render(request, 'core/form_page.html', {
        'form': form, 'title': f"Edit {guest.get('full_name', 'guest')}",
        'cancel_url': reverse('guests:guest_detail', args=[guest_id]),
    })


@api_login_required
def guest_delete(request, guest_id):
    guest = _load_guest(request, guest_id)
    if guest is None:
        return redirect('guests:guest_list')
    if request.method == 'POST':
        if services.delete_guest(request, guest_id).ok:
            return redirect('guests:guest_list')
    return render(request, 'core/confirm_page.html', {
        'title': 'Delete guest',
        'question': f"Delete {guest.get('full_name')}? Their booking history stays with the bookings.",
        'submit_label': 'Delete',
        'cancel_url': reverse('guests:guest_detail', args=[guest_id]),
    })


@api_login_required
def guest_loyalty(request, guest_id):
    guest = _load_guest(request, guest_id)
    if guest is None:
        return redirect('guests:guest_list')
    if request.method == 'POST':
        form = LoyaltyForm(request.POST)
        if form.is_valid() and services.update_guest_loyalty(request, guest_id, form.to_payload()).ok:
            return redirect('guests:guest_detail', guest_id=guest_id)
    else:
        loyalty = guest.get('loyalty_program') or {}
        form = LoyaltyForm(initial={
            'member': loyalty.get('member', False),
            'points': loyalty.get('points', 0),
            'tier': loyalty.get('tier') or 'standard',
            'membership_number': loyalty.get('membership_number', ''),
        })
    return render(request, 'core/form_page.html', {
        'form': form, 'title': f"Loyalty program: {guest.get('full_name', '')}",
        'cancel_url': reverse('guests:guest_detail', args=[guest_id]),
    })


@api_login_required
@require_POST
def guest_toggle_vip(request, guest_id):
    services.toggle_vip_status(request, guest_id)
    return redirect('guests:guest_detail', guest_id=guest_id)


@api_login_required
def guest_blacklist(request, guest_id):
    """Blacklist a guest with a reason, or lift an existing blacklist."""
    guest = _load_guest(request, guest_id)
    if guest is None:
        return redirect('guests:guest_list')

    if guest.get('blacklisted'):
        if request.method == 'POST':
            services.toggle_blacklist_status(request, guest_id, False)
            return redirect('guests:guest_detail', guest_id=guest_id)
        return render(request, 'core/confirm_page.html', {
            'title': 'Remove from blacklist',
            'question': f"Remove {guest.get('full_name')} from the blacklist?",
            'submit_label': 'Remove',
            'cancel_url': reverse('guests:guest_detail', args=[guest_id]),
        })

    if request.method == 'POST':
        form = BlacklistForm(request.POST)
        if form.is_valid():
            try:
                response = services.toggle_blacklist_status(request, guest_id, True, form.cleaned_data['reason'])
            except ValueError as exc:
                messages.error(request, str(exc))
            else:
                if response.ok:
                    return redirect('guests:guest_detail', guest_id=guest_id)
    else:
        form = BlacklistForm()
    return render(request, 'core/confirm_page.html', {
        'title': 'Blacklist guest',
        'question': f"Blacklist {guest.get('full_name')}? New bookings will be refused.",
        'form': form,
        'submit_label': 'Blacklist',
        'cancel_url': reverse('guests:guest_detail', args=[guest_id]),
    })
