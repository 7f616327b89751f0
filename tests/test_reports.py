from datetime import date
from io import BytesIO

import pytest
from django.urls import reverse
from openpyxl import load_workbook

from reports.services import breakdown, occupancy_rate, range_label, resolve_range

BOOKING = {
    '_id': 'b1',
    'confirmation_number': 'BK-1001',
    'guest': {'full_name': 'Ann Lee'},
    'room': {'number': '101'},
    'check_in': '2025-06-04T00:00:00.000Z',
    'check_out': '2025-06-06T00:00:00.000Z',
    'status': 'confirmed',
}


@pytest.mark.parametrize('mode, anchor, start, end, expected', [
    ('daily', '2025-06-04', None, None, ('daily', date(2025, 6, 4), date(2025, 6, 4))),
    ('weekly', '2025-06-04', None, None, ('weekly', date(2025, 6, 2), date(2025, 6, 8))),
    ('monthly', '2025-02-14', None, None, ('monthly', date(2025, 2, 1), date(2025, 2, 28))),
    ('monthly', '2025-12-31', None, None, ('monthly', date(2025, 12, 1), date(2025, 12, 31))),
    ('custom', None, '2025-06-10', '2025-06-01', ('custom', date(2025, 6, 10), date(2025, 6, 10))),
    ('custom', None, '2025-06-01', '2025-06-10', ('custom', date(2025, 6, 1), date(2025, 6, 10))),
    ('yearly', '2025-06-04', None, None, ('daily', date(2025, 6, 4), date(2025, 6, 4))),
])
def test_resolve_range(mode, anchor, start, end, expected):
    assert resolve_range(mode, anchor, start, end) == expected


def test_range_label():
    assert range_label(date(2025, 6, 4), date(2025, 6, 4)) == 'Jun 04, 2025'
    assert range_label(date(2025, 6, 2), date(2025, 6, 8)) == 'Jun 02, 2025 to Jun 08, 2025'


def test_occupancy_rate():
    assert occupancy_rate({'total': 8, 'occupied': 2}) == 25.0
    assert occupancy_rate({'total': 8, 'occupied': 2, 'occupancyRate': 40}) == 40.0
    assert occupancy_rate({}) == 0.0


def test_breakdown_rows():
    assert breakdown([{'_id': 'confirmed', 'count': 3, 'total': 900}, {'count': 1}, 'junk']) == [
        ('confirmed', 3, 900), ('unknown', 1, None),
    ]


def _report_api(fake_api):
    fake_api.add('GET', '/bookings/stats', {'data': {
        'totals': {'totalBookings': 3, 'totalRevenue': 1250, 'avgBookingValue': 416.67},
        'byStatus': [{'_id': 'confirmed', 'count': 2, 'total': 800}, {'_id': 'checked_in', 'count': 1, 'total': 450}],
        'bySource': [{'_id': 'direct', 'count': 3}],
    }})
    fake_api.add('GET', '/invoices/stats', {'data': {'totals': {'totalInvoices': 2, 'totalAmount': 900, 'totalOutstanding': 150}}})
    fake_api.add('GET', '/payments/stats', {'data': {
        'totals': {'totalPayments': 2, 'totalAmount': 750},
        'byMethod': [{'_id': 'cash', 'count': 1, 'total': 300}],
    }})
    fake_api.add('GET', '/rooms/stats', {'data': {'total': 10, 'occupied': 4}})
    fake_api.add('GET', '/bookings', {'data': [BOOKING]})


def test_weekly_report_on_screen(staff_client, fake_api):
    _report_api(fake_api)

    response = staff_client.get(reverse('reports:stats_report'), {'mode': 'weekly', 'date': '2025-06-04'})

    assert response.status_code == 200
    assert response.context['date_label'] == 'Jun 02, 2025 to Jun 08, 2025'
    assert response.context['occupancy_rate'] == 40.0
    assert ('Booking revenue', '$1,250.00') in response.context['summary']
    assert fake_api.last('GET', '/bookings/stats')['params'] == {'start_date': '2025-06-02', 'end_date': '2025-06-08'}
    assert fake_api.last('GET', '/invoices/stats')['params'] == {'startDate': '2025-06-02', 'endDate': '2025-06-08'}
    assert fake_api.last('GET', '/bookings')['params']['sort'] == 'check_in'
    assert 'BK-1001' in response.content.decode()


def test_pdf_export(staff_client, fake_api):
    _report_api(fake_api)

    response = staff_client.get(reverse('reports:stats_report'), {'date': '2025-06-04', 'export': 'pdf'})

    assert response['Content-Type'] == 'application/pdf'
    assert response['Content-Disposition'] == 'attachment; filename="daily_report_2025-06-04_2025-06-04.pdf"'
    assert response.content.startswith(b'%PDF')


def test_excel_export(staff_client, fake_api):
    _report_api(fake_api)

    response = staff_client.get(reverse('reports:stats_report'), {
        'mode': 'monthly', 'date': '2025-06-04', 'export': 'excel',
    })

    assert response['Content-Type'] == 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
    assert 'monthly_report_2025-06-01_2025-06-30.xlsx' in response['Content-Disposition']
    ws = load_workbook(BytesIO(response.content)).active
    assert ws.title == 'Monthly Report'
    assert ws['A1'].value == 'Monthly Report - Jun 01, 2025 to Jun 30, 2025'
    values = [cell.value for row in ws.iter_rows() for cell in row]
    assert 'BK-1001' in values
    assert 'Current occupancy' in values
