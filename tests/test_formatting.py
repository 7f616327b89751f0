from datetime import date, datetime
from decimal import Decimal

import pytest

from core import badges
from core.filters import clean_params, compact, match_choice, search, sort_by_number
from core.formatting import cents, format_currency, format_date, format_price, money, nights_between, parse_datetime


@pytest.mark.parametrize('amount, currency, expected', [
    (1234.5, 'USD', '$1,234.50'),
    ('99.999', 'EUR', '€100.00'),
    (-12, 'ZAR', '-R12.00'),
    (None, 'USD', '$0.00'),
    (12, 'XOF', '12.00 XOF'),
])
def test_format_currency(amount, currency, expected):
    assert format_currency(amount, currency) == expected


def test_format_price_adds_billing_unit():
    assert format_price('12.5', 'per_person') == '$12.50 / person'
    assert format_price(300, 'fixed') == '$300.00'


def test_money_rounds_half_up():
    assert money('10.005') == 10.01
    assert money(None) == 0.0
    assert cents(Decimal('5.025')) == Decimal('5.03')


def test_parse_datetime_handles_api_timestamps():
    parsed = parse_datetime('2025-03-01T14:00:00.000Z')
    assert (parsed.year, parsed.month, parsed.day, parsed.hour) == (2025, 3, 1, 14)
    assert parse_datetime(date(2025, 3, 1)) == datetime(2025, 3, 1)
    assert parse_datetime('not a date') is None
    assert parse_datetime('') is None


def test_format_date_falls_back_to_na():
    assert format_date('2025-03-01') == 'Mar 01, 2025'
    assert format_date(None) == 'N/A'


def test_nights_between():
    assert nights_between('2025-03-01', '2025-03-04') == 3
    assert nights_between('2025-03-04', '2025-03-01') == 0
    assert nights_between(None, '2025-03-01') == 0


def test_clean_params_drops_blanks_and_stringifies():
    params = clean_params({
        'status': 'confirmed', 'guest': '', 'room': None, 'ids': [], 'vip': False,
        'start_date': date(2025, 1, 2), 'min': Decimal('10.50'),
    })
    assert params == {'status': 'confirmed', 'vip': 'false', 'start_date': '2025-01-02', 'min': '10.50'}


def test_compact_is_recursive():
    payload = {'name': 'Ann', 'phone': '', 'address': {'city': '', 'country': None}, 'tags': ['vip', ''], 'vip': False}
    assert compact(payload) == {'name': 'Ann', 'tags': ['vip', ''], 'vip': False}


def test_compact_can_send_blanks_as_null():
    payload = {'name': 'Ann', 'notes': '', 'address': {'city': '', 'country': 'ZA'}, 'tags': ['vip', '']}
    assert compact(payload, clear_blank=True) == {
        'name': 'Ann', 'notes': None, 'address': {'city': None, 'country': 'ZA'}, 'tags': ['vip', ''],
    }


GUESTS = [
    {'full_name': 'Ann Lee', 'email': 'ann@example.com', 'room': {'number': '101'}, 'score': 3},
    {'full_name': 'Bob Stone', 'email': 'bob@example.com', 'room': {'number': '202'}, 'score': 10},
    {'full_name': 'Cara Diaz', 'email': 'cara@example.com', 'room': None, 'score': None},
]


def test_search_matches_dotted_fields_case_insensitively():
    assert search(GUESTS, 'ANN', ('full_name',)) == [GUESTS[0]]
    assert search(GUESTS, '202', ('full_name', 'room.number')) == [GUESTS[1]]
    assert search(GUESTS, '  ', ('full_name',)) == GUESTS


def test_match_choice_treats_all_as_any():
    assert match_choice('active', 'all')
    assert match_choice('active', '')
    assert match_choice('active', 'active')
    assert not match_choice('inactive', 'active')


def test_sort_by_number():
    assert [g['score'] for g in sort_by_number(GUESTS, 'score', 'desc')] == [10, 3, None]
    assert [g['score'] for g in sort_by_number(GUESTS, 'score', 'asc')] == [None, 3, 10]
    assert sort_by_number(GUESTS, 'score', '') == GUESTS


def test_badge_normalizes_status_spelling():
    for status in ('Partially Paid', 'partially-paid', 'partially_paid'):
        assert badges.badge(status)['variant'] == 'info'
    assert badges.badge('checked_in') == {'variant': 'success', 'label': 'Checked in', 'icon': 'log-in'}


def test_unknown_status_gets_outline_badge():
    assert badges.badge('mystery') == {'variant': 'outline', 'label': 'Mystery', 'icon': 'clock'}


def test_category_badge():
    assert badges.category_badge('catering')['variant'] == 'amber'
    assert badges.category_badge('unheard_of')['variant'] == 'muted'
