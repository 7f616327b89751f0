from django.shortcuts import redirect, render
from django.urls import reverse
from django.views.decorators.http import require_POST

from configuration.services import contact_lines
from core.decorators import api_login_required
from core.filters import query_filters
from core.formatting import format_currency
from guests.services import get_guests
from reservations.services import get_bookings
from . import services
from .documents import render_invoice_pdf
from .forms import (
    CancelInvoiceForm, InvoiceFilterForm, InvoiceForm, RecordPaymentForm, SendEmailForm,
    build_formsets, formset_rows, initial_from_invoice,
)

CHOICES_LIMIT = 200


@api_login_required
def invoice_list(request):
    """Invoices with filters and the invoice totals."""
    filters = query_filters(request, ('status', 'minAmount', 'maxAmount', 'startDate', 'endDate', 'page'))
    filters.setdefault('sort', '-createdAt')
    invoices, pagination = services.get_invoices(request, filters)
    stats = services.get_invoice_stats(request, filters.get('startDate'), filters.get('endDate'))
    totals = stats.get('totals') or {}
    context = {
        'filter_form': InvoiceFilterForm(request.GET or None),
        'invoices': invoices,
        'pagination': pagination,
        'stats': [
            ('Invoices', totals.get('totalInvoices', 0)),
            ('Invoiced', format_currency(totals.get('totalAmount'))),
            ('Paid', format_currency(totals.get('totalPaid'))),
            ('Outstanding', format_currency(totals.get('totalOutstanding'))),
        ] if totals else [],
    }
    return render(request, 'invoices/invoice_list.html', context)


def _form_options(request):
    guests = get_guests(request, {'limit': CHOICES_LIMIT}).items
    bookings = get_bookings(request, {'limit': CHOICES_LIMIT, 'sort': '-createdAt'}).items
    return guests, bookings


def _save_invoice(request, form, formsets, invoice_id=None):
    """
    Validate header and lines, price them, and send them to the API.

    Returns:
        tuple: (saved response or None, computed totals or None)
    """
    if not form.is_valid() or not all(formset.is_valid() for formset in formsets.values()):
        return None, None
    totals = services.calculate_totals(
        formset_rows(formsets['items']), formset_rows(formsets['taxes']), formset_rows(formsets['discounts']),
    )
    if 'preview' in request.POST:
        return None, totals
    payload = form.to_payload(services.serialize_totals(totals))
    if invoice_id:
        response = services.update_invoice(request, invoice_id, payload)
    else:
        response = services.create_invoice(request, payload)
    return (response if response.ok else None), totals


@api_login_required
def invoice_new(request):
    """New invoice; the Preview button prices the lines without saving."""
    guests, bookings = _form_options(request)
    totals = None
    if request.method == 'POST':
        form = InvoiceForm(request.POST, guests=guests, bookings=bookings)
        formsets = build_formsets(request.POST)
        response, totals = _save_invoice(request, form, formsets)
        if response is not None:
            invoice_id = response.data.get('_id') if isinstance(response.data, dict) else None
            if invoice_id:
                return redirect('invoices:invoice_detail', invoice_id=invoice_id)
            return redirect('invoices:invoice_list')
    else:
        initial = {}
        if request.GET.get('booking'):
            initial['booking'] = request.GET['booking']
        if request.GET.get('guest'):
            initial['guest'] = request.GET['guest']
        form = InvoiceForm(initial=initial, guests=guests, bookings=bookings)
        formsets = build_formsets()
    return render(request, 'invoices/invoice_form.html', {
        'form': form, 'formsets': formsets, 'totals': totals, 'title': 'New invoice',
        'cancel_url': reverse('invoices:invoice_list'),
    })


def _load_invoice(request, invoice_id):
    response = services.get_invoice(request, invoice_id)
    return response.data if response.ok and isinstance(response.data, dict) else None


@api_login_required
def invoice_detail(request, invoice_id):
    invoice = _load_invoice(request, invoice_id)
    if invoice is None:
        return redirect('invoices:invoice_list')
    return render(request, 'invoices/invoice_detail.html', {
        'invoice': invoice,
        'balance': services.balance_due(invoice),
        'currency_code': invoice.get('currency') or 'USD',
    })


@api_login_required
def invoice_edit(request, invoice_id):
    invoice = _load_invoice(request, invoice_id)
    if invoice is None:
        return redirect('invoices:invoice_list')
    guests, bookings = _form_options(request)
    totals = None
    if request.method == 'POST':
        form = InvoiceForm(request.POST, guests=guests, bookings=bookings, editing=True)
        formsets = build_formsets(request.POST)
        response, totals = _save_invoice(request, form, formsets, invoice_id)
        if response is not None:
            return redirect('invoices:invoice_detail', invoice_id=invoice_id)
    else:
        form = InvoiceForm(initial=initial_from_invoice(invoice), guests=guests, bookings=bookings, editing=True)
        formsets = build_formsets(invoice=invoice)
    return render(request, 'invoices/invoice_form.html', {
        'form': form, 'formsets': formsets, 'totals': totals,
        'title': f"Edit invoice {invoice.get('invoiceNumber', '')}",
        'cancel_url': reverse('invoices:invoice_detail', args=[invoice_id]),
    })


@api_login_required
def invoice_delete(request, invoice_id):
    invoice = _load_invoice(request, invoice_id)
    if invoice is None:
        return redirect('invoices:invoice_list')
    if request.method == 'POST' and services.delete_invoice(request, invoice_id).ok:
        return redirect('invoices:invoice_list')
    return render(request, 'core/confirm_page.html', {
        'title': 'Delete invoice',
        'question': f"Delete invoice {invoice.get('invoiceNumber')}?",
        'submit_label': 'Delete',
        'cancel_url': reverse('invoices:invoice_detail', args=[invoice_id]),
    })


@api_login_required
@require_POST
def invoice_issue(request, invoice_id):
    services.issue_invoice(request, invoice_id)
    return redirect('invoices:invoice_detail', invoice_id=invoice_id)


@api_login_required
def invoice_cancel(request, invoice_id):
    invoice = _load_invoice(request, invoice_id)
    if invoice is None:
        return redirect('invoices:invoice_list')
    if request.method == 'POST':
        form = CancelInvoiceForm(request.POST)
        if form.is_valid() and services.cancel_invoice(request, invoice_id, form.cleaned_data['reason']).ok:
            return redirect('invoices:invoice_detail', invoice_id=invoice_id)
    else:
        form = CancelInvoiceForm()
    return render(request, 'core/confirm_page.html', {
        'title': f"Cancel invoice {invoice.get('invoiceNumber', '')}",
        'question': 'Cancelled invoices can no longer be paid.',
        'form': form,
        'submit_label': 'Cancel invoice',
        'cancel_url': reverse('invoices:invoice_detail', args=[invoice_id]),
    })


@api_login_required
def invoice_payment(request, invoice_id):
    """Record a payment; the amount may not exceed the balance."""
    invoice = _load_invoice(request, invoice_id)
    if invoice is None:
        return redirect('invoices:invoice_list')
    balance = services.balance_due(invoice)
    if request.method == 'POST':
        form = RecordPaymentForm(request.POST, balance=balance)
        if form.is_valid() and services.record_payment(request, invoice_id, form.to_payload()).ok:
            return redirect('invoices:invoice_detail', invoice_id=invoice_id)
    else:
        form = RecordPaymentForm(initial={'amountPaid': balance}, balance=balance)
    return render(request, 'core/form_page.html', {
        'form': form, 'title': f"Record payment for {invoice.get('invoiceNumber', '')}",
        'submit_label': 'Record payment',
        'cancel_url': reverse('invoices:invoice_detail', args=[invoice_id]),
    })


@api_login_required
def invoice_email(request, invoice_id):
    invoice = _load_invoice(request, invoice_id)
    if invoice is None:
        return redirect('invoices:invoice_list')
    if request.method == 'POST':
        form = SendEmailForm(request.POST)
        if form.is_valid() and services.send_invoice_email(request, invoice_id, form.to_payload()).ok:
            return redirect('invoices:invoice_detail', invoice_id=invoice_id)
    else:
        form = SendEmailForm(initial={'email': (invoice.get('guest') or {}).get('email')})
    return render(request, 'core/form_page.html', {
        'form': form, 'title': f"Email invoice {invoice.get('invoiceNumber', '')}",
        'submit_label': 'Send',
        'cancel_url': reverse('invoices:invoice_detail', args=[invoice_id]),
    })


@api_login_required
def invoice_pdf(request, invoice_id):
    invoice = _load_invoice(request, invoice_id)
    if invoice is None:
        return redirect('invoices:invoice_list')
    return render_invoice_pdf(invoice, contact_lines(request))
