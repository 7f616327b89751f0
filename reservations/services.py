import logging
from decimal import Decimal

from django.contrib import messages

from core.api import api_request
from core.formatting import cents, nights_between, parse_date, to_decimal

logger = logging.getLogger(__name__)

BOOKING_STATUSES = [
    ('confirmed', 'Confirmed'),
    ('checked_in', 'Checked in'),
    ('checked_out', 'Checked out'),
    ('cancelled', 'Cancelled'),
    ('no_show', 'No show'),
]

PAYMENT_STATUSES = [
    ('pending', 'Pending'),
    ('partial', 'Partial'),
    ('paid', 'Paid'),
    ('refunded', 'Refunded'),
]

BOOKING_SOURCES = [
    ('direct', 'Direct'),
    ('website', 'Website'),
    ('phone', 'Phone'),
    ('email', 'Email'),
    ('walk_in', 'Walk-in'),
    ('agent', 'Agent'),
    ('ota', 'OTA'),
    ('other', 'Other'),
]

BOOKING_FILTERS = ('guest', 'room', 'status', 'payment_status', 'start_date', 'end_date', 'booking_source', 'page', 'limit', 'sort')

# Fields the free-text box on the booking list looks through
SEARCH_FIELDS = ('guest.full_name', 'confirmation_number', 'guest.email', 'guest.phone', 'room.number')


def get_bookings(request, filters=None):
    """
    Fetch one page of bookings.

    Args:
        request: current request (carries the session token)
        filters: any of BOOKING_FILTERS; blanks are dropped

    Returns:
        ApiResponse: .items holds the bookings, pagination sits in the payload
    """
    return api_request(request, '/bookings', params=filters)


def get_booking(request, booking_id):
    return api_request(request, f'/bookings/{booking_id}')


def create_booking(request, data):
    response = api_request(request, '/bookings', 'POST', data)
    if response.ok:
        messages.success(request, 'Booking created successfully')
    return response


def update_booking(request, booking_id, data):
    """Save changes to a booking; data may carry modification_notes for the audit trail."""
    response = api_request(request, f'/bookings/{booking_id}', 'PUT', data)
    if response.ok:
        messages.success(request, 'Booking updated successfully')
    return response


def cancel_booking(request, booking_id, reason):
    response = api_request(request, f'/bookings/{booking_id}/cancel', 'PATCH', {'cancellation_reason': reason})
    if response.ok:
        messages.success(request, 'Booking cancelled successfully')
    return response


def check_in_booking(request, booking_id):
    response = api_request(request, f'/bookings/{booking_id}/check-in', 'PATCH')
    if response.ok:
        messages.success(request, 'Guest checked in successfully')
    return response


def check_out_booking(request, booking_id):
    response = api_request(request, f'/bookings/{booking_id}/check-out', 'PATCH')
    if response.ok:
        messages.success(request, 'Guest checked out successfully')
    return response


def get_available_rooms(request, filters):
    """
    Rooms free for a stay.

    Args:
        filters: check_in and check_out are required; room_type, capacity,
            floor, building and view narrow the search

    Returns:
        list: available rooms, empty when the call failed
    """
    response = api_request(request, '/bookings/available-rooms', params=filters)
    return response.items


def get_booking_stats(request, start_date=None, end_date=None):
    """
    Booking counters for a period.

    Returns:
        dict: byStatus, bySource, daily and totals (totalBookings,
        totalRevenue, avgBookingValue); empty when the call failed
    """
    response = api_request(request, '/bookings/stats', params={'start_date': start_date, 'end_date': end_date})
    return response.data if isinstance(response.data, dict) else {}


def get_booking_calendar(request, start_date, end_date):
    response = api_request(request, '/bookings/calendar', params={'start_date': start_date, 'end_date': end_date})
    return response.items


def quote_booking(base_price, check_in, check_out, tax_rate=0, discount=0):
    """
    Price a stay the way the booking form shows it.

    nights = whole days between the dates, room = base price x nights,
    tax = room x rate / 100, total = room + tax - discount (never below zero).

    Returns:
        dict: nights, room_total, tax_amount, discount, total_amount as Decimal
    """
    nights = nights_between(check_in, check_out)
    room_total = to_decimal(base_price) * nights
    tax_amount = room_total * to_decimal(tax_rate) / Decimal('100')
    discount = to_decimal(discount)
    total = max(Decimal('0'), room_total + tax_amount - discount)
    return {
        'nights': nights,
        'room_total': cents(room_total),
        'tax_amount': cents(tax_amount),
        'discount': cents(discount),
        'total_amount': cents(total),
    }


def split_today(bookings, today):
    """
    Arrivals and departures for a day out of a calendar feed.

    Returns:
        tuple: (arrivals still to check in, departures still in house)
    """
    arrivals = [b for b in bookings if parse_date(b.get('check_in')) == today and b.get('status') == 'confirmed']
    departures = [b for b in bookings if parse_date(b.get('check_out')) == today and b.get('status') == 'checked_in']
    return arrivals, departures
