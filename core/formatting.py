from datetime import date, datetime
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from dateutil import parser as date_parser

CENT = Decimal('0.01')

CURRENCY_SYMBOLS = {
    'USD': '$',
    'EUR': '€',
    'GBP': '£',
    'ZAR': 'R',
    'NGN': '₦',
    'KES': 'KSh',
    'GHS': 'GH₵',
}

PRICE_TYPE_SUFFIXES = {
    'per_person': ' / person',
    'per_hour': ' / hour',
    'per_day': ' / day',
    'custom': ' (custom)',
}


def parse_datetime(value):
    """
    Parse a timestamp as the API sends it ("2025-03-01T14:00:00.000Z").

    Returns:
        datetime or None when the value is empty or unreadable
    """
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    try:
        return date_parser.isoparse(str(value))
    except (ValueError, OverflowError):
        try:
            return date_parser.parse(str(value))
        except (ValueError, OverflowError):
            return None


def parse_date(value):
    parsed = parse_datetime(value)
    return parsed.date() if parsed else None


def nights_between(check_in, check_out):
    """Whole days between two dates; 0 when either is missing or the range is reversed."""
    start = parse_date(check_in)
    end = parse_date(check_out)
    if not start or not end:
        return 0
    return max(0, (end - start).days)


def to_decimal(value, default=Decimal('0')):
    if value is None or value == '':
        return default
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return default


def cents(value):
    """Decimal rounded half-up to cents."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def money(value):
    """Round to cents and hand back a float the JSON encoder accepts."""
    return float(cents(value))


def format_currency(amount, currency='USD'):
    amount = cents(amount)
    symbol = CURRENCY_SYMBOLS.get((currency or 'USD').upper())
    sign = '-' if amount < 0 else ''
    if symbol:
        return f'{sign}{symbol}{abs(amount):,.2f}'
    return f'{sign}{abs(amount):,.2f} {currency}'


def format_price(price, price_type=None):
    """Price with its billing unit, e.g. "$12.50 / person"."""
    formatted = format_currency(price)
    return formatted + PRICE_TYPE_SUFFIXES.get(price_type or '', '')


def format_date(value, fmt='%b %d, %Y'):
    parsed = parse_datetime(value)
    if not parsed:
        return 'N/A'
    return parsed.strftime(fmt)
