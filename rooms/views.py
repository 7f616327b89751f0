from django.shortcuts import redirect, render
from django.urls import reverse
from django.views.decorators.http import require_POST

from core.decorators import api_login_required
from core.filters import query_filters
from . import services
from .forms import (
    AvailabilityForm, ConnectRoomsForm, RoomFilterForm, RoomForm, RoomStatusForm, RoomTypeForm,
    initial_from_room, initial_from_room_type,
)

ALL_ROOMS_LIMIT = 500


@api_login_required
def room_list(request):
    """Rooms with status counters and filters."""
    room_types = services.get_room_types(request)
    filters = query_filters(request, ('status', 'room_type', 'floor', 'building', 'is_accessible', 'page'))
    filters.setdefault('limit', services.ROOM_PAGE_SIZE)
    rooms, pagination = services.get_rooms(request, filters)
    stats = services.get_room_stats(request)
    context = {
        'filter_form': RoomFilterForm(request.GET or None, room_types=room_types),
        'rooms': rooms,
        'pagination': pagination,
        'stats': [(label, stats.get(key, 0)) for key, label in [('total', 'Total')] + services.ROOM_STATUSES] if stats else [],
    }
    return render(request, 'rooms/room_list.html', context)


def _load_room(request, room_id):
    response = services.get_room(request, room_id)
    return response.data if response.ok and isinstance(response.data, dict) else None


@api_login_required
def room_detail(request, room_id):
    room = _load_room(request, room_id)
    if room is None:
        return redirect('rooms:room_list')
    connected = []
    for other in room.get('connected_rooms') or []:
        if isinstance(other, dict):
            connected.append({'id': other.get('_id'), 'number': other.get('number')})
        else:
            connected.append({'id': other, 'number': other})
    return render(request, 'rooms/room_detail.html', {
        'room': room,
        'connected': connected,
        'status_form': RoomStatusForm(initial={'status': room.get('status')}),
    })


@api_login_required
def room_new(request):
    room_types = services.get_room_types(request)
    if request.method == 'POST':
        form = RoomForm(request.POST, room_types=room_types)
        if form.is_valid() and services.create_room(request, form.to_payload()).ok:
            return redirect('rooms:room_list')
    else:
        form = RoomForm(room_types=room_types)
    return render(request, 'core/form_page.html', {
        'form': form, 'title': 'New room', 'submit_label': 'Create room',
        'cancel_url': reverse('rooms:room_list'),
    })


@api_login_required
def room_edit(request, room_id):
    room = _load_room(request, room_id)
    if room is None:
        return redirect('rooms:room_list')
    room_types = services.get_room_types(request)
    if request.method == 'POST':
        form = RoomForm(request.POST, room_types=room_types, editing=True)
        if form.is_valid() and services.update_room(request, room_id, form.to_payload()).ok:
            return redirect('rooms:room_detail', room_id=room_id)
    else:
        form = RoomForm(initial=initial_from_room(room), room_types=room_types, editing=True)
    return render(request, 'core/form_page.html', {
        'form': form, 'title': f"Edit room {room.get('number')}",
        'cancel_url': reverse('rooms:room_detail', args=[room_id]),
    })


@api_login_required
def room_delete(request, room_id):
    room = _load_room(request, room_id)
    if room is None:
        return redirect('rooms:room_list')
    if request.method == 'POST' and services.delete_room(request, room_id).ok:
        return redirect('rooms:room_list')
    return render(request, 'core/confirm_page.html', {
        'title': 'Delete room',
        'question': f"Delete room {room.get('number')}?",
        'submit_label': 'Delete',
        'cancel_url': reverse('rooms:room_detail', args=[room_id]),
    })


@api_login_required
@require_POST
def room_status(request, room_id):
    form = RoomStatusForm(request.POST)
    if form.is_valid():
        services.update_room_status(request, room_id, form.cleaned_data['status'])
    return redirect('rooms:room_detail', room_id=room_id)


@api_login_required
def room_connect(request):
    """Pick rooms to join into a connecting set."""
    rooms, _ = services.get_rooms(request, {'limit': ALL_ROOMS_LIMIT})
    if request.method == 'POST':
        form = ConnectRoomsForm(request.POST, rooms=rooms)
        if form.is_valid():
            success, _message = services.connect_rooms(request, form.cleaned_data['rooms'])
            if success:
                return redirect('rooms:room_list')
    else:
        form = ConnectRoomsForm(initial={'rooms': request.GET.getlist('room')}, rooms=rooms)
    return render(request, 'core/form_page.html', {
        'form': form, 'title': 'Connect rooms', 'submit_label': 'Connect',
        'cancel_url': reverse('rooms:room_list'),
    })


@api_login_required
@require_POST
def room_disconnect(request, room_id):
    other_id = request.POST.get('disconnect_from')
    if other_id:
        services.disconnect_rooms(request, room_id, other_id)
    return redirect('rooms:room_detail', room_id=room_id)


@api_login_required
def room_availability(request):
    """Rooms free over a date range."""
    form = AvailabilityForm(request.GET or None)
    rooms = None
    if form.is_valid():
        rooms = services.get_available_rooms(
            request,
            form.cleaned_data['start_date'].isoformat(),
            form.cleaned_data['end_date'].isoformat(),
            query_filters(request, ('room_type', 'floor', 'building')),
        )
    return render(request, 'rooms/room_availability.html', {'form': form, 'rooms': rooms})


@api_login_required
def room_type_list(request):
    room_types = services.get_room_types(request)
    stats = {row.get('_id'): row for row in services.get_room_type_stats(request) if isinstance(row, dict)}
    rows = []
    for room_type in room_types:
        row_stats = stats.get(room_type.get('_id')) or stats.get(room_type.get('name')) or {}
        rows.append({'room_type': room_type, 'stats': row_stats})
    return render(request, 'rooms/room_type_list.html', {'rows': rows})


def _load_room_type(request, room_type_id):
    response = services.get_room_type(request, room_type_id)
    return response.data if response.ok and isinstance(response.data, dict) else None


@api_login_required
def room_type_detail(request, room_type_id):
    room_type = _load_room_type(request, room_type_id)
    if room_type is None:
        return redirect('rooms:room_type_list')
    rooms, _ = services.get_rooms(request, {'room_type': room_type_id, 'limit': ALL_ROOMS_LIMIT})
    return render(request, 'rooms/room_type_detail.html', {'room_type': room_type, 'rooms': rooms})


@api_login_required
def room_type_new(request):
    if request.method == 'POST':
        form = RoomTypeForm(request.POST)
        if form.is_valid() and services.create_room_type(request, form.to_payload()).ok:
            return redirect('rooms:room_type_list')
    else:
        form = RoomTypeForm()
    return render(request, 'core/form_page.html', {
        'form': form, 'title': 'New room type', 'submit_label': 'Create room type',
        'cancel_url': reverse('rooms:room_type_list'),
    })


@api_login_required
def room_type_edit(request, room_type_id):
    room_type = _load_room_type(request, room_type_id)
    if room_type is None:
        return redirect('rooms:room_type_list')
    if request.method == 'POST':
        form = RoomTypeForm(request.POST, editing=True)
        if form.is_valid() and services.update_room_type(request, room_type_id, form.to_payload()).ok:
            return redirect('rooms:room_type_detail', room_type_id=room_type_id)
    else:
        form = RoomTypeForm(initial=initial_from_room_type(room_type), editing=True)
    return render(request, 'core/form_page.html', {
        'form': form, 'title': f"Edit {room_type.get('name')}",
        'cancel_url': reverse('rooms:room_type_detail', args=[room_type_id]),
    })


@api_login_required
def room_type_delete(request, room_type_id):
    room_type = _load_room_type(request, room_type_id)
    if room_type is None:
        return redirect('rooms:room_type_list')
    if request.method == 'POST' and services.delete_room_type(request, room_type_id).ok:
        return redirect('rooms:room_type_list')
    return render(request, 'core/confirm_page.html', {
        'title': 'Delete room type',
        'question': f"Delete the room type {room_type.get('name')}?",
        'submit_label': 'Delete',
        'cancel_url': reverse('rooms:room_type_detail', args=[room_type_id]),
    })
