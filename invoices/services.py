import logging
from decimal import Decimal

from django.contrib import messages

from core.api import Pagination, api_request
from core.formatting import cents, money, to_decimal

logger = logging.getLogger(__name__)

INVOICE_STATUSES = [
    ('Draft', 'Draft'),
    ('Issued', 'Issued'),
    ('Partially Paid', 'Partially paid'),
    ('Paid', 'Paid'),
    ('Cancelled', 'Cancelled'),
    ('Overdue', 'Overdue'),
]

# A new invoice starts in one of these
NEW_INVOICE_STATUSES = INVOICE_STATUSES[:2]

DISCOUNT_TYPES = [('percentage', 'Percentage'), ('fixed', 'Fixed amount')]

INVOICE_FILTERS = ('guest', 'booking', 'status', 'minAmount', 'maxAmount', 'startDate', 'endDate', 'page', 'limit', 'sort')

HUNDRED = Decimal('100')


def calculate_totals(items, taxes=(), discounts=()):
    """
    Work out every amount on an invoice.

    Each item total is quantity x unitPrice. Taxes apply to the sum of the
    taxable items only; a percentage discount applies to the subtotal and a
    fixed discount is taken as is.

    Args:
        items: dicts with quantity, unitPrice and taxable
        taxes: dicts with name and rate (percent)
        discounts: dicts with name, type ("percentage" or "fixed") and value

    Returns:
        dict: items, taxes and discounts with their computed amounts, plus
        subtotal, taxTotal, discountTotal and total, all as Decimal
    """
    priced_items = []
    subtotal = Decimal('0')
    taxable_amount = Decimal('0')
    for item in items:
        total = to_decimal(item.get('quantity')) * to_decimal(item.get('unitPrice'))
        priced_items.append(dict(item, total=total))
        subtotal += total
        if item.get('taxable', True):
            taxable_amount += total

    priced_taxes = []
    tax_total = Decimal('0')
    for tax in taxes:
        amount = taxable_amount * to_decimal(tax.get('rate')) / HUNDRED
        priced_taxes.append(dict(tax, amount=amount))
        tax_total += amount

    priced_discounts = []
    discount_total = Decimal('0')
    for discount in discounts:
        value = to_decimal(discount.get('value'))
        if discount.get('type') == 'percentage':
            amount = subtotal * value / HUNDRED
        else:
            amount = value
        priced_discounts.append(dict(discount, amount=amount))
        discount_total += amount

    return {
        'items': priced_items,
        'taxes': priced_taxes,
        'discounts': priced_discounts,
        'subtotal': subtotal,
        'taxTotal': tax_total,
        'discountTotal': discount_total,
        'total': subtotal + tax_total - discount_total,
    }


def serialize_totals(totals):
    """Round every amount to cents and make the totals JSON-ready."""
    return {
        'items': [
            dict(item, quantity=float(to_decimal(item.get('quantity'))), unitPrice=money(item.get('unitPrice')), total=money(item['total']))
            for item in totals['items']
        ],
        'taxes': [
            dict(tax, rate=float(to_decimal(tax.get('rate'))), amount=money(tax['amount']))
            for tax in totals['taxes']
        ],
        'discounts': [
            dict(discount, value=money(discount.get('value')), amount=money(discount['amount']))
            for discount in totals['discounts']
        ],
        'subtotal': money(totals['subtotal']),
        'taxTotal': money(totals['taxTotal']),
        'discountTotal': money(totals['discountTotal']),
        'total': money(totals['total']),
    }


def balance_due(invoice):
    """Outstanding amount of an invoice as the API reports it, never negative."""
    if invoice.get('balance') is not None:
        return max(Decimal('0'), cents(invoice['balance']))
    outstanding = to_decimal(invoice.get('total')) - to_decimal(invoice.get('amountPaid'))
    return max(Decimal('0'), cents(outstanding))


def get_invoices(request, filters=None):
    """
    Returns:
        tuple: (invoices, Pagination)
    """
    response = api_request(request, '/invoices', params=filters)
    return response.items, Pagination.from_response(response)


def get_invoice(request, invoice_id):
    return api_request(request, f'/invoices/{invoice_id}')


def create_invoice(request, data):
    response = api_request(request, '/invoices', 'POST', data)
    if response.ok:
        messages.success(request, 'Invoice created successfully')
    return response


def update_invoice(request, invoice_id, data):
    response = api_request(request, f'/invoices/{invoice_id}', 'PUT', data)
    if response.ok:
        messages.success(request, 'Invoice updated successfully')
    return response


def delete_invoice(request, invoice_id):
    response = api_request(request, f'/invoices/{invoice_id}', 'DELETE')
    if response.ok:
        messages.success(request, 'Invoice deleted successfully')
    return response


def issue_invoice(request, invoice_id):
    response = api_request(request, f'/invoices/{invoice_id}/issue', 'PATCH')
    if response.ok:
        messages.success(request, 'Invoice issued successfully')
    return response


def cancel_invoice(request, invoice_id, reason):
    response = api_request(request, f'/invoices/{invoice_id}/cancel', 'PATCH', {'reason': reason})
    if response.ok:
        messages.success(request, 'Invoice cancelled successfully')
    return response


def record_payment(request, invoice_id, data):
    """
    Record money received against an invoice.

    Args:
        data: amountPaid, paymentMethod, and optionally paymentDate and reference
    """
    response = api_request(request, f'/invoices/{invoice_id}/payment', 'PATCH', data)
    if response.ok:
        messages.success(request, 'Payment recorded successfully')
    return response


def send_invoice_email(request, invoice_id, data):
    response = api_request(request, f'/invoices/{invoice_id}/email', 'POST', data)
    if response.ok:
        messages.success(request, 'Invoice sent by email successfully')
    return response


def get_invoice_stats(request, start_date=None, end_date=None):
    """
    Returns:
        dict: byStatus, daily and totals (totalInvoices, totalAmount,
        totalPaid, totalOutstanding, avgInvoiceValue); empty when unavailable
    """
    response = api_request(request, '/invoices/stats', params={'startDate': start_date, 'endDate': end_date}, notify=False)
    return response.data if isinstance(response.data, dict) else {}
