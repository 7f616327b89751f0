from django.contrib import messages
from django.shortcuts import redirect, render
from django.urls import reverse
from django.views.decorators.http import require_POST

from core.decorators import admin_required
from core.filters import query_filters
from staff.services import get_roles
from . import services
from .forms import SETUP_FORMS, HotelAccessForm, HotelFilterForm, HotelForm, initial_from_hotel

CHOICES_LIMIT = 200


@admin_required
def hotel_list(request):
    filters = query_filters(request, services.HOTEL_FILTERS)
    hotels, pagination = services.get_hotels(request, filters)
    return render(request, 'hotels/hotel_list.html', {
        'hotels': hotels,
        'pagination': pagination,
        'filter_form': HotelFilterForm(request.GET or None),
    })


def _parent_choices(request, exclude=None):
    hotels, _ = services.get_hotels(request, {'limit': CHOICES_LIMIT})
    return [hotel for hotel in hotels if hotel.get('_id') != exclude]


@admin_required
def hotel_new(request):
    parents = _parent_choices(request)
    if request.method == 'POST':
        form = HotelForm(request.POST, hotels=parents)
        if form.is_valid():
            response = services.create_hotel(request, form.to_payload())
            if response.ok:
                hotel_id = response.data.get('_id') if isinstance(response.data, dict) else None
                if hotel_id:
                    return redirect('hotels:hotel_detail', hotel_id=hotel_id)
                return redirect('hotels:hotel_list')
    else:
        form = HotelForm(hotels=parents)
    return render(request, 'core/form_page.html', {
        'form': form, 'title': 'New hotel', 'submit_label': 'Create hotel',
        'cancel_url': reverse('hotels:hotel_list'),
    })


@admin_required
def hotel_detail(request, hotel_id):
    """Hotel record with its branches and setup progress."""
    hotel = services.get_hotel(request, hotel_id, include_branches=True)
    if hotel is None:
        return redirect('hotels:hotel_list')
    status = services.get_setup_status(request, hotel_id)
    done = services.completed_steps(status)
    return render(request, 'hotels/hotel_detail.html', {
        'hotel': hotel,
        'hotel_id': hotel_id,
        'status': status,
        'steps': [
            {'number': number, 'label': label, 'completed': number in done}
            for number, (_, label) in enumerate(services.SETUP_STEPS, start=1)
        ],
    })


@admin_required
def hotel_edit(request, hotel_id):
    hotel = services.get_hotel(request, hotel_id)
    if hotel is None:
        return redirect('hotels:hotel_list')
    parents = _parent_choices(request, exclude=hotel_id)
    if request.method == 'POST':
        form = HotelForm(request.POST, hotels=parents, editing=True)
        if form.is_valid() and services.update_hotel(request, hotel_id, form.to_payload()).ok:
            return redirect('hotels:hotel_detail', hotel_id=hotel_id)
    else:
        form = HotelForm(initial=initial_from_hotel(hotel), hotels=parents, editing=True)
    return render(request, 'core/form_page.html', {
        'form': form, 'title': f"Edit {hotel.get('name', 'hotel')}",
        'cancel_url': reverse('hotels:hotel_detail', args=[hotel_id]),
    })


@admin_required
def hotel_delete(request, hotel_id):
    hotel = services.get_hotel(request, hotel_id)
    if hotel is None:
        return redirect('hotels:hotel_list')
    if request.method == 'POST' and services.delete_hotel(request, hotel_id).ok:
        return redirect('hotels:hotel_list')
    return render(request, 'core/confirm_page.html', {
        'title': 'Delete hotel',
        'question': f"Delete {hotel.get('name')}? Its configuration and staff access go with it.",
        'submit_label': 'Delete',
        'cancel_url': reverse('hotels:hotel_detail', args=[hotel_id]),
    })


@admin_required
@require_POST
def setup_start(request, hotel_id):
    if services.initialize_setup(request, hotel_id).ok:
        return redirect('hotels:setup_step', hotel_id=hotel_id, step=1)
    return redirect('hotels:hotel_detail', hotel_id=hotel_id)


@admin_required
def setup_step(request, hotel_id, step):
    """One page of the setup wizard; saving moves on to the next step."""
    if not 1 <= step <= len(SETUP_FORMS):
        messages.error(request, f'Setup has no step {step}.')
        return redirect('hotels:hotel_detail', hotel_id=hotel_id)
    hotel = services.get_hotel(request, hotel_id)
    if hotel is None:
        return redirect('hotels:hotel_list')
    form_class = SETUP_FORMS[step - 1]
    if request.method == 'POST':
        form = form_class(request.POST)
        if form.is_valid() and services.update_setup_step(request, hotel_id, step, form.to_data()).ok:
            if step < len(SETUP_FORMS):
                return redirect('hotels:setup_step', hotel_id=hotel_id, step=step + 1)
            messages.success(request, 'Hotel setup completed')
            return redirect('hotels:hotel_detail', hotel_id=hotel_id)
    else:
        form = form_class(initial={'name': hotel.get('name')} if step == 1 else None)
    return render(request, 'hotels/setup_step.html', {
        'form': form,
        'hotel': hotel,
        'hotel_id': hotel_id,
        'step': step,
        'step_label': services.step_label(step),
        'steps': [label for _, label in services.SETUP_STEPS],
        'is_last': step == len(SETUP_FORMS),
    })


def _grant_rows(grants):
    """Grants with the hotel id and name pulled out; the API sends the hotel populated or as a bare id."""
    rows = []
    for grant in grants:
        hotel = grant.get('hotel')
        if isinstance(hotel, dict):
            hotel_id, label = hotel.get('_id') or hotel.get('id'), hotel.get('name')
        else:
            hotel_id, label = hotel, hotel
        if hotel_id:
            rows.append(dict(grant, hotel_id=hotel_id, hotel_label=label or hotel_id))
    return rows


@admin_required
def user_access(request, user_id):
    """Hotels a user can work in, with a form to grant one more."""
    user, grants = services.get_user_hotel_access(request, user_id)
    if user is None:
        return redirect('staff:user_list')
    hotels, _ = services.get_hotels(request, {'limit': CHOICES_LIMIT})
    if request.method == 'POST':
        form = HotelAccessForm(request.POST, hotels=hotels, roles=get_roles(request))
        if form.is_valid():
            cd = form.cleaned_data
            response = services.add_user_hotel_access(request, user_id, cd['hotel'], cd['access_level'], cd.get('role'))
            if response.ok:
                return redirect('hotels:user_access', user_id=user_id)
    else:
        form = HotelAccessForm(hotels=hotels, roles=get_roles(request))
    return render(request, 'hotels/user_access.html', {
        'staff_user': user,
        'user_id': user_id,
        'grants': _grant_rows(grants),
        'form': form,
    })


@admin_required
def user_access_remove(request, user_id, hotel_id):
    if request.method == 'POST':
        services.remove_user_hotel_access(request, user_id, hotel_id)
        return redirect('hotels:user_access', user_id=user_id)
    return render(request, 'core/confirm_page.html', {
        'title': 'Remove hotel access',
        'question': 'Remove this user\'s access to the hotel?',
        'submit_label': 'Remove',
        'cancel_url': reverse('hotels:user_access', args=[user_id]),
    })


@admin_required
@require_POST
def user_default_hotel(request, user_id, hotel_id):
    services.set_default_hotel(request, user_id, hotel_id)
    return redirect('hotels:user_access', user_id=user_id)
