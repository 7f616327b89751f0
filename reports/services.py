from datetime import date, timedelta

from core.formatting import format_currency, format_date, parse_date
from invoices.services import get_invoice_stats
from payments.services import get_payment_stats
from reservations.services import get_booking_stats, get_bookings
from rooms.services import get_room_stats

REPORT_MODES = [
    ('daily', 'Daily'),
    ('weekly', 'Weekly'),
    ('monthly', 'Monthly'),
    ('custom', 'Custom range'),
]
MODE_LABELS = dict(REPORT_MODES)

# Bookings listed in a report, ordered by arrival
REPORT_BOOKING_LIMIT = 100


def resolve_range(mode, anchor=None, start=None, end=None):
    """
    Turn a report mode and its dates into an inclusive date range.

    mode:
      - daily   (default) the anchor date alone
      - weekly  Monday to Sunday around the anchor date
      - monthly calendar month of the anchor date
      - custom  explicit start and end, end never before start

    Returns:
        tuple: (mode, start_date, end_date); unknown modes fall back to daily
    """
    anchor = parse_date(anchor) or date.today()
    if mode == 'weekly':
        start_date = anchor - timedelta(days=anchor.weekday())
        end_date = start_date + timedelta(days=6)
    elif mode == 'monthly':
        start_date = anchor.replace(day=1)
        if start_date.month == 12:
            next_month = start_date.replace(year=start_date.year + 1, month=1)
        else:
            next_month = start_date.replace(month=start_date.month + 1)
        end_date = next_month - timedelta(days=1)
    elif mode == 'custom':
        start_date = parse_date(start) or anchor
        end_date = parse_date(end) or start_date
        if end_date < start_date:
            end_date = start_date
    else:
        mode = 'daily'
        start_date = end_date = anchor
    return mode, start_date, end_date


def range_label(start_date, end_date):
    if start_date == end_date:
        return start_date.strftime('%b %d, %Y')
    return f"{start_date.strftime('%b %d, %Y')} to {end_date.strftime('%b %d, %Y')}"


def occupancy_rate(room_stats):
    """Share of rooms currently occupied, in percent."""
    total = room_stats.get('total') or 0
    if room_stats.get('occupancyRate') is not None:
        return float(room_stats['occupancyRate'])
    return (room_stats.get('occupied', 0) / total * 100) if total else 0.0


def breakdown(rows):
    """(label, count, amount) tuples from a stats breakdown such as byStatus or byMethod."""
    return [
        (row.get('_id') or 'unknown', row.get('count', 0), row.get('total', row.get('amount')))
        for row in rows or [] if isinstance(row, dict)
    ]


def build_report(request, mode, start_date, end_date):
    """
    Gather booking, invoice and payment figures for one reporting period.

    Returns:
        dict: period description, totals per area, breakdowns, the bookings
        arriving in the period and the summary rows shown on every output
    """
    start, end = start_date.isoformat(), end_date.isoformat()
    booking_stats = get_booking_stats(request, start, end)
    invoice_totals = get_invoice_stats(request, start, end).get('totals') or {}
    payment_stats = get_payment_stats(request, start, end)
    payment_totals = payment_stats.get('totals') or {}
    booking_totals = booking_stats.get('totals') or {}
    room_stats = get_room_stats(request)
    bookings = get_bookings(request, {
        'start_date': start, 'end_date': end, 'limit': REPORT_BOOKING_LIMIT, 'sort': 'check_in',
    }).items

    occupancy = occupancy_rate(room_stats)
    summary = [
        ('Bookings', str(booking_totals.get('totalBookings', 0))),
        ('Booking revenue', format_currency(booking_totals.get('totalRevenue'))),
        ('Average booking value', format_currency(booking_totals.get('avgBookingValue'))),
        ('Invoices issued', str(invoice_totals.get('totalInvoices', 0))),
        ('Invoiced', format_currency(invoice_totals.get('totalAmount'))),
        ('Outstanding', format_currency(invoice_totals.get('totalOutstanding'))),
        ('Payments received', str(payment_totals.get('totalPayments', 0))),
        ('Amount received', format_currency(payment_totals.get('totalAmount'))),
        ('Rooms', str(room_stats.get('total', 0))),
        ('Current occupancy', f'{occupancy:.1f}%'),
    ]
    return {
        'mode': mode,
        'mode_label': MODE_LABELS.get(mode, 'Daily'),
        'start_date': start_date,
        'end_date': end_date,
        'date_label': range_label(start_date, end_date),
        'summary': summary,
        'by_status': breakdown(booking_stats.get('byStatus')),
        'by_source': breakdown(booking_stats.get('bySource')),
        'by_method': breakdown(payment_stats.get('byMethod')),
        'bookings': bookings,
        'occupancy_rate': round(occupancy, 1),
    }


def booking_rows(bookings):
    """Room, confirmation, guest, check-in and check-out of each booking for the exports."""
    rows = []
    for booking in bookings:
        room = booking.get('room') or {}
        guest = booking.get('guest') or {}
        rows.append([
            f"Room {room.get('number', '-')}" if isinstance(room, dict) else str(room),
            booking.get('confirmation_number') or '-',
            guest.get('full_name', '-') if isinstance(guest, dict) else str(guest),
            format_date(booking.get('check_in'), '%Y-%m-%d'),
            format_date(booking.get('check_out'), '%Y-%m-%d'),
            booking.get('status') or '-',
        ])
    return rows
