from decimal import Decimal

from django.urls import reverse

from invoices.forms import RecordPaymentForm
from invoices.services import balance_due, calculate_totals, serialize_totals
from .conftest import message_texts

INVOICE = {
    '_id': 'i1',
    'invoiceNumber': 'INV-0042',
    'guest': {'_id': 'g1', 'full_name': 'Ann Lee', 'email': 'ann@example.com'},
    'status': 'Issued',
    'currency': 'USD',
    'dueDate': '2025-07-01T00:00:00.000Z',
    'items': [{'description': 'Room 101, 3 nights', 'quantity': 3, 'unitPrice': 100, 'total': 300}],
    'taxes': [{'name': 'VAT', 'rate': 15, 'amount': 45}],
    'subtotal': 300,
    'total': 345,
    'amountPaid': 100,
}

ITEMS = [
    {'description': 'Room', 'quantity': 3, 'unitPrice': 100, 'taxable': True},
    {'description': 'Minibar', 'quantity': 1, 'unitPrice': 20, 'taxable': False},
]


def test_taxes_only_apply_to_taxable_items():
    totals = calculate_totals(ITEMS, taxes=[{'name': 'VAT', 'rate': 15}])

    assert totals['subtotal'] == Decimal('320')
    assert totals['taxTotal'] == Decimal('45')
    assert totals['total'] == Decimal('365')


def test_percentage_and_fixed_discounts():
    totals = calculate_totals(ITEMS, discounts=[
        {'name': 'Loyalty', 'type': 'percentage', 'value': 10},
        {'name': 'Voucher', 'type': 'fixed', 'value': 5},
    ])

    assert [d['amount'] for d in totals['discounts']] == [Decimal('32'), Decimal('5')]
    assert totals['discountTotal'] == Decimal('37')
    assert totals['total'] == Decimal('283')


def test_serialized_totals_are_rounded_floats():
    totals = calculate_totals(
        [{'description': 'Tea', 'quantity': 3, 'unitPrice': '1.115'}],
        taxes=[{'name': 'VAT', 'rate': '7.5'}],
    )

    data = serialize_totals(totals)

    assert data['items'][0]['total'] == 3.35
    assert data['taxes'][0] == {'name': 'VAT', 'rate': 7.5, 'amount': 0.25}
    assert data['total'] == 3.6


def test_balance_due():
    assert balance_due(INVOICE) == Decimal('245.00')
    assert balance_due({'balance': '-3'}) == Decimal('0')
    assert balance_due({'total': 50, 'amountPaid': 80}) == Decimal('0')


def test_payment_cannot_exceed_balance():
    form = RecordPaymentForm({'amountPaid': '250', 'paymentMethod': 'cash'}, balance=Decimal('245.00'))

    assert not form.is_valid()
    assert 'amountPaid' in form.errors


def _invoice_post(**extra):
    data = {
        'guest': 'g1', 'currency': 'USD', 'status': 'Draft', 'dueDate': '2025-07-01',
        'isBillingAddressSameAsGuest': 'on',
        'items-TOTAL_FORMS': '2', 'items-INITIAL_FORMS': '0',
        'items-0-description': 'Room', 'items-0-quantity': '3', 'items-0-unitPrice': '100', 'items-0-taxable': 'on',
        'items-1-description': 'Minibar', 'items-1-quantity': '1', 'items-1-unitPrice': '20',
        'taxes-TOTAL_FORMS': '1', 'taxes-INITIAL_FORMS': '0',
        'taxes-0-name': 'VAT', 'taxes-0-rate': '15',
        'discounts-TOTAL_FORMS': '2', 'discounts-INITIAL_FORMS': '0',
        'discounts-0-name': 'Loyalty', 'discounts-0-type': 'percentage', 'discounts-0-value': '10',
        'discounts-1-name': 'Voucher', 'discounts-1-type': 'fixed', 'discounts-1-value': '5',
    }
    data.update(extra)
    return data


def _form_options(fake_api):
    fake_api.add('GET', '/guests', {'data': [{'_id': 'g1', 'full_name': 'Ann Lee'}]})
    fake_api.add('GET', '/bookings', {'data': []})


def test_new_invoice_posts_computed_totals(staff_client, fake_api):
    _form_options(fake_api)
    fake_api.add('POST', '/invoices', {'data': {'_id': 'i9'}}, status=201)

    response = staff_client.post(reverse('invoices:invoice_new'), _invoice_post())

    assert response.url == reverse('invoices:invoice_detail', args=['i9'])
    body = fake_api.last('POST', '/invoices')['json']
    assert body['subtotal'] == 320.0
    assert body['taxTotal'] == 45.0
    assert body['discountTotal'] == 37.0
    assert body['total'] == 328.0
    assert body['items'][1]['taxable'] is False
    assert body['dueDate'] == '2025-07-01'
    assert 'booking' not in body
    assert 'billingAddress' not in body
    assert 'Invoice created successfully' in message_texts(response)


def test_preview_prices_without_saving(staff_client, fake_api):
    _form_options(fake_api)

    response = staff_client.post(reverse('invoices:invoice_new'), _invoice_post(preview='1'))

    assert response.status_code == 200
    assert response.context['totals']['total'] == Decimal('328')
    assert not fake_api.calls_to('POST', '/invoices')


def test_separate_billing_address_is_required(staff_client, fake_api):
    _form_options(fake_api)

    response = staff_client.post(reverse('invoices:invoice_new'), _invoice_post(isBillingAddressSameAsGuest=''))

    assert response.status_code == 200
    assert 'Enter a billing address or bill to the guest address.' in response.content.decode()
    assert not fake_api.calls_to('POST', '/invoices')


def test_invoice_pdf(staff_client, fake_api):
    fake_api.add('GET', '/invoices/i1', {'data': INVOICE})
    fake_api.add('GET', '/configuration/h1/document-data', {'data': {
        'address': {'street': '1 Beach Rd', 'city': 'Cape Town'}, 'phone': '021 555 0100',
    }})

    response = staff_client.get(reverse('invoices:invoice_pdf', args=['i1']))

    assert response['Content-Type'] == 'application/pdf'
    assert response['Content-Disposition'] == 'attachment; filename="invoice_INV-0042.pdf"'
    assert response.content.startswith(b'%PDF')


def test_invoices_without_currency_render_in_dollars(staff_client, fake_api):
    invoice = {key: value for key, value in INVOICE.items() if key != 'currency'}
    fake_api.add('GET', '/invoices', {'data': [invoice]})
    fake_api.add('GET', '/invoices/i1', {'data': invoice})

    listing = staff_client.get(reverse('invoices:invoice_list'))
    detail = staff_client.get(reverse('invoices:invoice_detail', args=['i1']))

    assert listing.status_code == 200
    assert '$345.00' in listing.content.decode()
    assert detail.status_code == 200
    assert detail.context['currency_code'] == 'USD'
    assert '$245.00' in detail.content.decode()


def test_edit_invoice_allows_any_status_and_clears_notes(staff_client, fake_api):
    _form_options(fake_api)
    fake_api.add('GET', '/invoices/i1', {'data': dict(INVOICE, notes='Call before sending')})
    fake_api.add('PUT', '/invoices/i1', {'data': INVOICE})

    response = staff_client.post(reverse('invoices:invoice_edit', args=['i1']), _invoice_post(status='Partially Paid', notes=''))

    assert response.url == reverse('invoices:invoice_detail', args=['i1'])
    body = fake_api.last('PUT', '/invoices/i1')['json']
    assert body['status'] == 'Partially Paid'
    assert body['notes'] is None
    assert body['total'] == 328.0
    assert 'Invoice updated successfully' in message_texts(response)


def test_edit_invoice_prefills_lines(staff_client, fake_api):
    _form_options(fake_api)
    fake_api.add('GET', '/invoices/i1', {'data': INVOICE})

    response = staff_client.get(reverse('invoices:invoice_edit', args=['i1']))

    assert response.status_code == 200
    items = response.context['formsets']['items']
    assert items.initial == [{'description': 'Room 101, 3 nights', 'quantity': 3, 'unitPrice': 100, 'taxable': None}]
    assert response.context['form'].initial['status'] == 'Issued'


def test_issue_invoice(staff_client, fake_api):
    fake_api.add('PATCH', '/invoices/i1/issue', {'data': dict(INVOICE, status='Issued')})

    response = staff_client.post(reverse('invoices:invoice_issue', args=['i1']))

    assert response.url == reverse('invoices:invoice_detail', args=['i1'])
    assert fake_api.calls_to('PATCH', '/invoices/i1/issue')
    assert 'Invoice issued successfully' in message_texts(response)


def test_cancel_invoice_sends_reason(staff_client, fake_api):
    fake_api.add('GET', '/invoices/i1', {'data': INVOICE})
    fake_api.add('PATCH', '/invoices/i1/cancel', {'data': dict(INVOICE, status='Cancelled')})

    response = staff_client.post(reverse('invoices:invoice_cancel', args=['i1']), {'reason': 'Duplicate invoice'})

    assert response.url == reverse('invoices:invoice_detail', args=['i1'])
    assert fake_api.last('PATCH', '/invoices/i1/cancel')['json'] == {'reason': 'Duplicate invoice'}
    assert 'Invoice cancelled successfully' in message_texts(response)


def test_email_invoice(staff_client, fake_api):
    fake_api.add('GET', '/invoices/i1', {'data': INVOICE})
    fake_api.add('POST', '/invoices/i1/email', {'success': True})

    form_page = staff_client.get(reverse('invoices:invoice_email', args=['i1']))
    response = staff_client.post(reverse('invoices:invoice_email', args=['i1']), {'email': 'ann@example.com', 'message': ''})

    assert form_page.context['form'].initial == {'email': 'ann@example.com'}
    assert response.url == reverse('invoices:invoice_detail', args=['i1'])
    assert fake_api.last('POST', '/invoices/i1/email')['json'] == {'email': 'ann@example.com'}
    assert 'Invoice sent by email successfully' in message_texts(response)
