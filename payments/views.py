from django.contrib import messages
from django.shortcuts import redirect, render
from django.urls import reverse
from django.views.decorators.http import require_POST

from configuration.services import contact_lines
from core.decorators import api_login_required
from core.filters import query_filters
from core.formatting import format_currency
from guests.services import get_guests
from invoices.services import get_invoices
from reservations.services import get_bookings
from . import services
from .documents import render_receipt_pdf
from .forms import PaymentFilterForm, PaymentForm, PaymentUpdateForm, RefundForm, SendReceiptForm, initial_from_payment

CHOICES_LIMIT = 200


@api_login_required
def payment_list(request):
    """Payments with filters and the payment totals."""
    filters = query_filters(request, ('method', 'status', 'minAmount', 'maxAmount', 'startDate', 'endDate', 'page'))
    filters.setdefault('sort', '-createdAt')
    payments, pagination = services.get_payments(request, filters)
    stats = services.get_payment_stats(request, filters.get('startDate'), filters.get('endDate'))
    totals = stats.get('totals') or {}
    context = {
        'filter_form': PaymentFilterForm(request.GET or None),
        'payments': payments,
        'pagination': pagination,
        'stats': [
            ('Payments', totals.get('totalPayments', 0)),
            ('Received', format_currency(totals.get('totalAmount'))),
            ('Average payment', format_currency(totals.get('avgPaymentValue'))),
        ] if totals else [],
    }
    return render(request, 'payments/payment_list.html', context)


@api_login_required
def payment_new(request):
    guests = get_guests(request, {'limit': CHOICES_LIMIT}).items
    invoices, _ = get_invoices(request, {'limit': CHOICES_LIMIT, 'sort': '-createdAt'})
    bookings = get_bookings(request, {'limit': CHOICES_LIMIT, 'sort': '-createdAt'}).items
    options = {'guests': guests, 'invoices': invoices, 'bookings': bookings}
    if request.method == 'POST':
        form = PaymentForm(request.POST, **options)
        if form.is_valid():
            response = services.create_payment(request, form.to_payload())
            if response.ok:
                payment_id = response.data.get('_id') if isinstance(response.data, dict) else None
                if payment_id:
                    return redirect('payments:payment_detail', payment_id=payment_id)
                return redirect('payments:payment_list')
    else:
        initial = {key: request.GET[key] for key in ('guest', 'invoice', 'booking') if request.GET.get(key)}
        form = PaymentForm(initial=initial, **options)
    return render(request, 'core/form_page.html', {
        'form': form, 'title': 'New payment', 'submit_label': 'Record payment',
        'cancel_url': reverse('payments:payment_list'),
    })


def _load_payment(request, payment_id):
    response = services.get_payment(request, payment_id)
    return response.data if response.ok and isinstance(response.data, dict) else None


@api_login_required
def payment_detail(request, payment_id):
    payment = _load_payment(request, payment_id)
    if payment is None:
        return redirect('payments:payment_list')
    return render(request, 'payments/payment_detail.html', {
        'payment': payment,
        'currency_code': payment.get('currency') or 'USD',
    })


@api_login_required
def payment_edit(request, payment_id):
    payment = _load_payment(request, payment_id)
    if payment is None:
        return redirect('payments:payment_list')
    if request.method == 'POST':
        form = PaymentUpdateForm(request.POST)
        if form.is_valid() and services.update_payment(request, payment_id, form.to_payload()).ok:
            return redirect('payments:payment_detail', payment_id=payment_id)
    else:
        form = PaymentUpdateForm(initial=initial_from_payment(payment))
    return render(request, 'core/form_page.html', {
        'form': form, 'title': f"Edit payment {payment.get('paymentNumber', '')}",
        'cancel_url': reverse('payments:payment_detail', args=[payment_id]),
    })


@api_login_required
def payment_delete(request, payment_id):
    payment = _load_payment(request, payment_id)
    if payment is None:
        return redirect('payments:payment_list')
    if request.method == 'POST' and services.delete_payment(request, payment_id).ok:
        return redirect('payments:payment_list')
    return render(request, 'core/confirm_page.html', {
        'title': 'Delete payment',
        'question': f"Delete payment {payment.get('paymentNumber', '')} of {format_currency(payment.get('amountPaid'), payment.get('currency'))}?",
        'submit_label': 'Delete',
        'cancel_url': reverse('payments:payment_detail', args=[payment_id]),
    })


@api_login_required
def payment_refund(request, payment_id):
    """Refund up to the amount paid."""
    payment = _load_payment(request, payment_id)
    if payment is None:
        return redirect('payments:payment_list')
    if request.method == 'POST':
        form = RefundForm(request.POST, payment=payment)
        if form.is_valid():
            cd = form.cleaned_data
            try:
                response = services.process_refund(request, payment, cd['amount'], cd.get('reason'), cd.get('refundReference'))
            except ValueError as exc:
                messages.error(request, str(exc))
            else:
                if response.ok:
                    return redirect('payments:payment_detail', payment_id=payment_id)
    else:
        form = RefundForm(initial={'amount': payment.get('amountPaid')}, payment=payment)
    return render(request, 'core/form_page.html', {
        'form': form, 'title': f"Refund payment {payment.get('paymentNumber', '')}",
        'intro': f"Amount paid: {format_currency(payment.get('amountPaid'), payment.get('currency'))}",
        'submit_label': 'Process refund',
        'cancel_url': reverse('payments:payment_detail', args=[payment_id]),
    })


@api_login_required
@require_POST
def payment_issue_receipt(request, payment_id):
    services.issue_receipt(request, payment_id)
    return redirect('payments:payment_detail', payment_id=payment_id)


@api_login_required
def payment_email(request, payment_id):
    payment = _load_payment(request, payment_id)
    if payment is None:
        return redirect('payments:payment_list')
    if request.method == 'POST':
        form = SendReceiptForm(request.POST)
        if form.is_valid() and services.send_receipt_email(request, payment_id, form.to_payload()).ok:
            return redirect('payments:payment_detail', payment_id=payment_id)
    else:
        form = SendReceiptForm(initial={'email': (payment.get('guest') or {}).get('email')})
    return render(request, 'core/form_page.html', {
        'form': form, 'title': 'Email receipt', 'submit_label': 'Send',
        'cancel_url': reverse('payments:payment_detail', args=[payment_id]),
    })


@api_login_required
def payment_receipt_pdf(request, payment_id):
    payment = _load_payment(request, payment_id)
    if payment is None:
        return redirect('payments:payment_list')
    return render_receipt_pdf(payment, contact_lines(request))
