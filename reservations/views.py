import calendar
from datetime import date, timedelta

from django.contrib import messages
from django.shortcuts import redirect, render
from django.urls import reverse
from django.views.decorators.http import require_POST

from core.api import Pagination
from core.decorators import api_login_required
from core.filters import query_filters, search
from core.formatting import parse_date
from guests.services import get_guests
from rooms.services import get_room_stats
from . import services
from .forms import (
    BookingFilterForm, BookingForm, BookingUpdateForm, CancelBookingForm, RoomSearchForm,
    initial_from_booking,
)

GUEST_CHOICES_LIMIT = 200


@api_login_required
def dashboard(request):
    """Dashboard view showing today's arrivals, departures and statistics."""
    today = date.today()
    calendar_feed = services.get_booking_calendar(request, today.isoformat(), (today + timedelta(days=1)).isoformat())
    arrivals, departures = services.split_today(calendar_feed, today)
    stats = services.get_booking_stats(request, today.isoformat(), today.isoformat())
    totals = stats.get('totals') or {}
    room_stats = get_room_stats(request)
    in_house = [b for b in calendar_feed if b.get('status') == 'checked_in']
    context = {
        'today': today,
        'arrivals': arrivals,
        'departures': departures,
        'in_house_count': len(in_house),
        'totals': totals,
        'by_status': stats.get('byStatus') or [],
        'room_stats': room_stats,
    }
    return render(request, 'reservations/dashboard.html', context)


@api_login_required
def booking_list(request):
    """List bookings with server-side filters and a free-text search over the page."""
    filter_form = BookingFilterForm(request.GET or None)
    filters = query_filters(request, ('status', 'payment_status', 'booking_source', 'start_date', 'end_date', 'page'))
    filters.setdefault('sort', '-createdAt')
    response = services.get_bookings(request, filters)
    bookings = search(response.items, request.GET.get('q'), services.SEARCH_FIELDS)
    context = {
        'filter_form': filter_form,
        'bookings': bookings,
        'pagination': Pagination.from_response(response),
        'query': request.GET.get('q', ''),
    }
    return render(request, 'reservations/booking_list.html', context)


def _guest_options(request):
    return get_guests(request, {'limit': GUEST_CHOICES_LIMIT, 'blacklisted': False}).items


@api_login_required
def booking_new(request):
    """
    New booking: pick dates, then a free room and a guest.

    The room list always comes from the dates being booked, on GET from the
    search form and on POST from the submitted booking itself.
    """
    rooms = []
    quote = None
    source = request.POST if request.method == 'POST' else request.GET
    search_form = RoomSearchForm(source if source.get('check_in') else None)
    if search_form.is_valid():
        rooms = services.get_available_rooms(request, {
            'check_in': search_form.cleaned_data['check_in'].isoformat(),
            'check_out': search_form.cleaned_data['check_out'].isoformat(),
            'capacity': search_form.cleaned_data.get('capacity'),
        })

    guests = _guest_options(request)
    if request.method == 'POST':
        form = BookingForm(request.POST, guests=guests, rooms=rooms)
        if form.is_valid():
            cd = form.cleaned_data
            room_type = form.selected_room().get('room_type') or {}
            quote = services.quote_booking(
                room_type.get('base_price'), cd['check_in'], cd['check_out'], cd.get('tax_rate'), cd.get('discount'),
            )
            response = services.create_booking(request, form.to_payload(quote))
            if response.ok:
                booking_id = response.data.get('_id') if isinstance(response.data, dict) else None
                if booking_id:
                    return redirect('reservations:booking_detail', booking_id=booking_id)
                return redirect('reservations:booking_list')
    else:
        initial = {}
        if search_form.is_bound and search_form.is_valid():
            initial = {
                'check_in': search_form.cleaned_data['check_in'],
                'check_out': search_form.cleaned_data['check_out'],
            }
        form = BookingForm(initial=initial, guests=guests, rooms=rooms)

    if search_form.is_bound and search_form.is_valid() and not rooms:
        messages.info(request, 'No rooms are available for the selected dates.')

    context = {
        'search_form': search_form,
        'form': form,
        'rooms': rooms,
        'quotes': _room_quotes(rooms, search_form),
        'quote': quote,
    }
    return render(request, 'reservations/booking_form.html', context)


def _room_quotes(rooms, search_form):
    if not search_form.is_bound or not search_form.is_valid():
        return []
    cd = search_form.cleaned_data
    return [
        {'room': room, 'quote': services.quote_booking((room.get('room_type') or {}).get('base_price'), cd['check_in'], cd['check_out'])}
        for room in rooms
    ]


def _load_booking(request, booking_id):
    response = services.get_booking(request, booking_id)
    return response.data if response.ok and isinstance(response.data, dict) else None


@api_login_required
def booking_detail(request, booking_id):
    booking = _load_booking(request, booking_id)
    if booking is None:
        return redirect('reservations:booking_list')
    return render(request, 'reservations/booking_detail.html', {
        'booking': booking,
        'nights': services.quote_booking(0, booking.get('check_in'), booking.get('check_out'))['nights'],
    })


@api_login_required
def booking_edit(request, booking_id):
    """Edit an existing booking."""
    booking = _load_booking(request, booking_id)
    if booking is None:
        return redirect('reservations:booking_list')
    initial = initial_from_booking(booking)

    check_in = parse_date(request.POST.get('check_in')) or initial['check_in']
    check_out = parse_date(request.POST.get('check_out')) or initial['check_out']
    rooms = []
    if check_in and check_out and check_out > check_in:
        rooms = services.get_available_rooms(request, {'check_in': check_in.isoformat(), 'check_out': check_out.isoformat()})
    current_room = booking.get('room')
    if isinstance(current_room, dict) and current_room.get('_id') not in {room.get('_id') for room in rooms}:
        rooms = [current_room] + rooms

    guests = _guest_options(request)
    current_guest = booking.get('guest')
    if isinstance(current_guest, dict) and current_guest.get('_id') not in {guest.get('_id') for guest in guests}:
        guests = [current_guest] + guests

    if request.method == 'POST':
        form = BookingUpdateForm(request.POST, guests=guests, rooms=rooms)
        if form.is_valid():
            cd = form.cleaned_data
            room_type = form.selected_room().get('room_type') or {}
            quote = services.quote_booking(
                room_type.get('base_price'), cd['check_in'], cd['check_out'], cd.get('tax_rate'), cd.get('discount'),
            )
            if services.update_booking(request, booking_id, form.to_payload(quote)).ok:
                return redirect('reservations:booking_detail', booking_id=booking_id)
    else:
        form = BookingUpdateForm(initial=initial, guests=guests, rooms=rooms)

    return render(request, 'reservations/booking_edit.html', {'form': form, 'booking': booking})


@api_login_required
def booking_cancel(request, booking_id):
    """Cancel a booking; a reason is required."""
    booking = _load_booking(request, booking_id)
    if booking is None:
        return redirect('reservations:booking_list')
    if request.method == 'POST':
        form = CancelBookingForm(request.POST)
        if form.is_valid():
            if services.cancel_booking(request, booking_id, form.cleaned_data['reason']).ok:
                return redirect('reservations:booking_detail', booking_id=booking_id)
    else:
        form = CancelBookingForm()
    guest = booking.get('guest') or {}
    return render(request, 'core/confirm_page.html', {
        'title': f"Cancel booking {booking.get('confirmation_number', '')}",
        'question': f"Cancel the booking for {guest.get('full_name', 'this guest')}?",
        'form': form,
        'submit_label': 'Cancel booking',
        'cancel_url': reverse('reservations:booking_detail', args=[booking_id]),
    })


@api_login_required
@require_POST
def booking_check_in(request, booking_id):
    services.check_in_booking(request, booking_id)
    return redirect('reservations:booking_detail', booking_id=booking_id)


@api_login_required
@require_POST
def booking_check_out(request, booking_id):
    services.check_out_booking(request, booking_id)
    return redirect('reservations:booking_detail', booking_id=booking_id)


@api_login_required
def booking_calendar(request):
    """Month grid of stays from the calendar feed."""
    today = date.today()
    month = request.GET.get('month', today.strftime('%Y-%m'))
    try:
        year, month_num = map(int, month.split('-'))
        first_day = date(year, month_num, 1)
    except ValueError:
        first_day = today.replace(day=1)
    last_day = first_day.replace(day=calendar.monthrange(first_day.year, first_day.month)[1])

    bookings = services.get_booking_calendar(request, first_day.isoformat(), last_day.isoformat())
    stays = []
    for booking in bookings:
        start = parse_date(booking.get('check_in'))
        end = parse_date(booking.get('check_out'))
        if start and end:
            stays.append((start, end, booking))

    weeks = []
    for week in calendar.Calendar().monthdatescalendar(first_day.year, first_day.month):
        days = []
        for day in week:
            days.append({
                'date': day,
                'in_month': day.month == first_day.month,
                'bookings': [booking for start, end, booking in stays if start <= day < end],
            })
        weeks.append(days)

    previous_month = (first_day - timedelta(days=1)).replace(day=1)
    next_month = last_day + timedelta(days=1)
    context = {
        'weeks': weeks,
        'month_start': first_day,
        'previous_month': previous_month.strftime('%Y-%m'),
        'next_month': next_month.strftime('%Y-%m'),
        'today': today,
    }
    return render(request, 'reservations/booking_calendar.html', context)
