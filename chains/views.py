from django.shortcuts import redirect, render
from django.urls import reverse

from core.api import Pagination
from core.decorators import admin_required
from staff.services import get_users
from . import services
from .forms import (
    ChainForm, GrantAccessForm, HotelForm, SharedConfigurationForm, SyncForm,
    initial_from_shared_configuration,
)


@admin_required
def chain_list(request):
    return render(request, 'chains/chain_list.html', {'chains': services.get_chains(request)})


@admin_required
def chain_new(request):
    """Create a chain with its headquarters hotel."""
    if request.method == 'POST':
        form = ChainForm(request.POST)
        if form.is_valid():
            payload = form.to_payload()
            if services.create_chain(request, payload).ok:
                return redirect('chains:chain_detail', chain_code=payload['chainCode'])
    else:
        form = ChainForm()
    return render(request, 'core/form_page.html', {
        'form': form, 'title': 'New hotel chain', 'submit_label': 'Create chain',
        'intro': 'A headquarters hotel is created together with the chain.',
        'cancel_url': reverse('chains:chain_list'),
    })


def _chain_hotels(chain, statistics=None):
    hotels = chain.get('hotels') or (statistics or {}).get('hotels') or []
    return [dict(hotel, _id=hotel.get('_id') or hotel.get('id')) for hotel in hotels]


@admin_required
def chain_detail(request, chain_code):
    """Chain overview: statistics, hotels, shared configuration and chain-wide users."""
    chain = services.get_chain(request, chain_code)
    if chain is None:
        return redirect('chains:chain_list')
    statistics = services.get_chain_statistics(request, chain_code)
    return render(request, 'chains/chain_detail.html', {
        'chain': chain,
        'chain_code': chain_code,
        'hotels': _chain_hotels(chain, statistics),
        'chain_users': services.get_chain_users(request, chain_code),
        'stats': [
            ('Hotels', statistics.get('totalHotels', 0)),
            ('Active hotels', statistics.get('activeHotels', 0)),
            ('Rooms', statistics.get('totalRooms', 0)),
            ('Active bookings', statistics.get('activeBookings', 0)),
            ('Guests', statistics.get('totalGuests', 0)),
        ] if statistics else [],
    })


@admin_required
def chain_configuration(request, chain_code):
    chain = services.get_chain(request, chain_code)
    if chain is None:
        return redirect('chains:chain_list')
    if request.method == 'POST':
        form = SharedConfigurationForm(request.POST)
        if form.is_valid() and services.update_shared_configuration(request, chain_code, form.to_payload()).ok:
            return redirect('chains:chain_detail', chain_code=chain_code)
    else:
        form = SharedConfigurationForm(initial=initial_from_shared_configuration(chain.get('sharedConfiguration')))
    return render(request, 'core/form_page.html', {
        'form': form, 'title': f"Shared configuration: {chain.get('name', chain_code)}",
        'cancel_url': reverse('chains:chain_detail', args=[chain_code]),
    })


@admin_required
def hotel_add(request, chain_code):
    chain = services.get_chain(request, chain_code)
    if chain is None:
        return redirect('chains:chain_list')
    hotels = _chain_hotels(chain)
    if request.method == 'POST':
        form = HotelForm(request.POST, hotels=hotels)
        if form.is_valid() and services.add_hotel(request, chain_code, form.to_payload()).ok:
            return redirect('chains:chain_detail', chain_code=chain_code)
    else:
        form = HotelForm(hotels=hotels)
    return render(request, 'core/form_page.html', {
        'form': form, 'title': f"Add hotel to {chain.get('name', chain_code)}", 'submit_label': 'Add hotel',
        'cancel_url': reverse('chains:chain_detail', args=[chain_code]),
    })


@admin_required
def hotel_remove(request, chain_code, hotel_id):
    if request.method == 'POST':
        services.remove_hotel(request, chain_code, hotel_id)
        return redirect('chains:chain_detail', chain_code=chain_code)
    return render(request, 'core/confirm_page.html', {
        'title': 'Remove hotel',
        'question': 'Remove this hotel from the chain? It keeps its own data but stops following the chain.',
        'submit_label': 'Remove',
        'cancel_url': reverse('chains:chain_detail', args=[chain_code]),
    })


@admin_required
def user_grant(request, chain_code):
    users = get_users(request, limit=100).items
    if request.method == 'POST':
        form = GrantAccessForm(request.POST, users=users)
        if form.is_valid():
            response = services.grant_chain_access(
                request, chain_code, form.cleaned_data['user'], form.cleaned_data['access_level'],
            )
            if response.ok:
                return redirect('chains:chain_detail', chain_code=chain_code)
    else:
        form = GrantAccessForm(users=users)
    return render(request, 'core/form_page.html', {
        'form': form, 'title': 'Grant chain access', 'submit_label': 'Grant access',
        'intro': 'The access level applies to every hotel in the chain.',
        'cancel_url': reverse('chains:chain_detail', args=[chain_code]),
    })


@admin_required
def user_revoke(request, chain_code, user_id):
    if request.method == 'POST':
        services.revoke_chain_access(request, chain_code, user_id)
        return redirect('chains:chain_detail', chain_code=chain_code)
    return render(request, 'core/confirm_page.html', {
        'title': 'Revoke chain access',
        'question': 'Revoke this user\'s access to every hotel in the chain?',
        'submit_label': 'Revoke',
        'cancel_url': reverse('chains:chain_detail', args=[chain_code]),
    })


@admin_required
def chain_sync(request, chain_code):
    chain = services.get_chain(request, chain_code)
    if chain is None:
        return redirect('chains:chain_list')
    hotels = _chain_hotels(chain)
    if request.method == 'POST':
        form = SyncForm(request.POST, hotels=hotels)
        if form.is_valid():
            response = services.sync_configuration(
                request, chain_code, form.cleaned_data['sections'], form.cleaned_data['target_hotels'],
            )
            if response.ok:
                sync_id = services.sync_id(response)
                if sync_id:
                    return redirect('chains:sync_log_detail', chain_code=chain_code, sync_id=sync_id)
                return redirect('chains:sync_log_list', chain_code=chain_code)
    else:
        form = SyncForm(hotels=hotels)
    return render(request, 'core/form_page.html', {
        'form': form, 'title': f"Sync configuration: {chain.get('name', chain_code)}",
        'submit_label': 'Synchronize',
        'intro': 'The selected sections are overwritten in the target hotels unless they override them.',
        'cancel_url': reverse('chains:chain_detail', args=[chain_code]),
    })


@admin_required
def sync_log_list(request, chain_code):
    response = services.get_sync_logs(request, chain_code, page=request.GET.get('page') or 1)
    return render(request, 'chains/sync_log_list.html', {
        'chain_code': chain_code,
        'logs': response.items,
        'pagination': Pagination.from_response(response, services.SYNC_LOG_PAGE_SIZE),
    })


@admin_required
def sync_log_detail(request, chain_code, sync_id):
    log = services.get_sync_log(request, sync_id)
    if log is None:
        return redirect('chains:sync_log_list', chain_code=chain_code)
    return render(request, 'chains/sync_log_detail.html', {'chain_code': chain_code, 'log': log})
