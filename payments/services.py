import logging

from django.contrib import messages

from core.api import Pagination, api_request
from core.formatting import cents, money, to_decimal

logger = logging.getLogger(__name__)

PAYMENT_STATUSES = [
    ('Pending', 'Pending'),
    ('Completed', 'Completed'),
    ('Failed', 'Failed'),
    ('Refunded', 'Refunded'),
    ('Partially Refunded', 'Partially refunded'),
]

PAYMENT_METHODS = [
    ('cash', 'Cash'),
    ('credit_card', 'Credit card'),
    ('debit_card', 'Debit card'),
    ('bank_transfer', 'Bank transfer'),
    ('mobile_money', 'Mobile money'),
    ('online', 'Online'),
    ('paypal', 'PayPal'),
]

# payment method -> detail block the API expects for it
METHOD_DETAILS = {
    'credit_card': 'cardDetails',
    'debit_card': 'cardDetails',
    'bank_transfer': 'bankDetails',
    'mobile_money': 'mobileMoneyDetails',
    'online': 'onlinePaymentDetails',
    'paypal': 'onlinePaymentDetails',
}

PAYMENT_FILTERS = ('guest', 'invoice', 'booking', 'method', 'status', 'minAmount', 'maxAmount', 'startDate', 'endDate', 'page', 'limit', 'sort')


def method_details(method, details):
    """
    Keep only the detail block that belongs to the payment method.

    Args:
        method: payment method key, e.g. "credit_card"
        details: mapping of block name -> dict, e.g. {"cardDetails": {...}, "bankDetails": {...}}

    Returns:
        dict: at most one block; cash has none
    """
    block = METHOD_DETAILS.get(method)
    if not block or not details.get(block):
        return {}
    return {block: details[block]}


def validate_refund(payment, amount):
    """
    Check a refund amount against what was paid.

    Raises:
        ValueError: the amount is not positive or exceeds the amount paid
    """
    amount = to_decimal(amount)
    paid = to_decimal(payment.get('amountPaid'))
    if amount <= 0:
        raise ValueError('The refund amount must be greater than zero.')
    if amount > paid:
        raise ValueError(f'The refund amount cannot exceed the amount paid ({cents(paid)}).')
    return amount


def get_payments(request, filters=None):
    """
    Returns:
        tuple: (payments, Pagination) with counters read from data.pagination
    """
    response = api_request(request, '/payments', params=filters)
    return response.items, Pagination.from_response(response)


def get_payment(request, payment_id):
    return api_request(request, f'/payments/{payment_id}')


def create_payment(request, data):
    response = api_request(request, '/payments', 'POST', data)
    if response.ok:
        messages.success(request, 'Payment created successfully')
    return response


def update_payment(request, payment_id, data):
    response = api_request(request, f'/payments/{payment_id}', 'PUT', data)
    if response.ok:
        messages.success(request, 'Payment updated successfully')
    return response


def delete_payment(request, payment_id):
    response = api_request(request, f'/payments/{payment_id}', 'DELETE')
    if response.ok:
        messages.success(request, 'Payment deleted successfully')
    return response


def process_refund(request, payment, amount, reason=None, refund_reference=None):
    """
    Refund part or all of a payment.

    Raises:
        ValueError: see validate_refund
    """
    amount = validate_refund(payment, amount)
    payload = {'amount': money(amount)}
    if reason:
        payload['reason'] = reason
    if refund_reference:
        payload['refundReference'] = refund_reference
    response = api_request(request, f"/payments/{payment['_id']}/refund", 'PATCH', payload)
    if response.ok:
        messages.success(request, 'Refund processed successfully')
    return response


def issue_receipt(request, payment_id):
    response = api_request(request, f'/payments/{payment_id}/receipt', 'PATCH')
    if response.ok:
        messages.success(request, 'Receipt issued successfully')
    return response


def send_receipt_email(request, payment_id, data):
    response = api_request(request, f'/payments/{payment_id}/email', 'POST', data)
    if response.ok:
        messages.success(request, 'Receipt sent by email successfully')
    return response


def get_payment_stats(request, start_date=None, end_date=None):
    """
    Returns:
        dict: byMethod, byStatus, daily and totals (totalPayments,
        totalAmount, avgPaymentValue); empty when unavailable
    """
    response = api_request(request, '/payments/stats', params={'startDate': start_date, 'endDate': end_date}, notify=False)
    return response.data if isinstance(response.data, dict) else {}
