from decimal import Decimal

from django import forms
from django.forms import formset_factory

from core.filters import compact
from core.formatting import CURRENCY_SYMBOLS, parse_date
from .services import DISCOUNT_TYPES, INVOICE_STATUSES, NEW_INVOICE_STATUSES

CURRENCIES = [(code, code) for code in CURRENCY_SYMBOLS]

PAYMENT_METHODS = [
    ('cash', 'Cash'),
    ('credit_card', 'Credit card'),
    ('debit_card', 'Debit card'),
    ('bank_transfer', 'Bank transfer'),
    ('mobile_money', 'Mobile money'),
    ('online', 'Online'),
]

BILLING_FIELDS = {
    'billing_line1': 'line1',
    'billing_line2': 'line2',
    'billing_city': 'city',
    'billing_state': 'state',
    'billing_postal_code': 'postalCode',
    'billing_country': 'country',
}

COMPANY_FIELDS = {
    'company_name': 'name',
    'company_tax_id': 'taxId',
    'company_contact': 'contactPerson',
    'company_email': 'email',
    'company_phone': 'phone',
}


class InvoiceFilterForm(forms.Form):
    status = forms.ChoiceField(required=False, choices=[('', 'All')] + INVOICE_STATUSES)
    minAmount = forms.DecimalField(required=False, label='Min amount')
    maxAmount = forms.DecimalField(required=False, label='Max amount')
    startDate = forms.DateField(required=False, label='From', widget=forms.DateInput(attrs={'type': 'date'}))
    endDate = forms.DateField(required=False, label='To', widget=forms.DateInput(attrs={'type': 'date'}))


class InvoiceItemForm(forms.Form):
    description = forms.CharField(max_length=200)
    quantity = forms.DecimalField(min_value=0, decimal_places=2, initial=1)
    unitPrice = forms.DecimalField(min_value=0, decimal_places=2, label='Unit price')
    taxable = forms.BooleanField(required=False, initial=True)


class InvoiceTaxForm(forms.Form):
    name = forms.CharField(max_length=60)
    rate = forms.DecimalField(min_value=0, max_value=100, decimal_places=3, label='Rate (%)')


class InvoiceDiscountForm(forms.Form):
    name = forms.CharField(max_length=60)
    type = forms.ChoiceField(choices=DISCOUNT_TYPES)
    value = forms.DecimalField(min_value=0, decimal_places=2)

    def clean(self):
        cleaned_data = super().clean()
        if cleaned_data.get('type') == 'percentage' and (cleaned_data.get('value') or 0) > 100:
            raise forms.ValidationError('A percentage discount cannot exceed 100%.')
        return cleaned_data


InvoiceItemFormSet = formset_factory(InvoiceItemForm, extra=1, min_num=1, validate_min=True, can_delete=True)
InvoiceTaxFormSet = formset_factory(InvoiceTaxForm, extra=1, can_delete=True)
InvoiceDiscountFormSet = formset_factory(InvoiceDiscountForm, extra=1, can_delete=True)


def build_formsets(data=None, invoice=None):
    """Item, tax and discount formsets, bound to POST data or filled from an invoice."""
    invoice = invoice or {}
    return {
        'items': InvoiceItemFormSet(data, prefix='items', initial=[
            {key: item.get(key) for key in ('description', 'quantity', 'unitPrice', 'taxable')}
            for item in invoice.get('items') or []
        ] or None),
        'taxes': InvoiceTaxFormSet(data, prefix='taxes', initial=[
            {key: tax.get(key) for key in ('name', 'rate')} for tax in invoice.get('taxes') or []
        ] or None),
        'discounts': InvoiceDiscountFormSet(data, prefix='discounts', initial=[
            {key: discount.get(key) for key in ('name', 'type', 'value')} for discount in invoice.get('discounts') or []
        ] or None),
    }


def formset_rows(formset):
    """Cleaned rows of a valid formset, leaving out blank extras and deleted rows."""
    rows = []
    for form in formset.forms:
        if not form.has_changed() or not form.cleaned_data or form.cleaned_data.get('DELETE'):
            continue
        row = dict(form.cleaned_data)
        row.pop('DELETE', None)
        rows.append(row)
    return rows


class InvoiceForm(forms.Form):
    """Invoice header; lines, taxes and discounts come from the formsets."""
    guest = forms.ChoiceField()
    booking = forms.ChoiceField(required=False)
    currency = forms.ChoiceField(choices=CURRENCIES, initial='USD')
    status = forms.ChoiceField(choices=NEW_INVOICE_STATUSES, initial='Draft')
    dueDate = forms.DateField(label='Due date', widget=forms.DateInput(attrs={'type': 'date'}))
    paymentTerms = forms.CharField(max_length=200, required=False, label='Payment terms')
    paymentInstructions = forms.CharField(required=False, label='Payment instructions', widget=forms.Textarea(attrs={'rows': 2}))
    notes = forms.CharField(required=False, widget=forms.Textarea(attrs={'rows': 2}))
    isBillingAddressSameAsGuest = forms.BooleanField(required=False, initial=True, label="Bill to the guest's address")
    billing_line1 = forms.CharField(max_length=200, required=False, label='Address line 1')
    billing_line2 = forms.CharField(max_length=200, required=False, label='Address line 2')
    billing_city = forms.CharField(max_length=100, required=False, label='City')
    billing_state = forms.CharField(max_length=100, required=False, label='State')
    billing_postal_code = forms.CharField(max_length=20, required=False, label='Postal code')
    billing_country = forms.CharField(max_length=100, required=False, label='Country')
    isCompanyBilling = forms.BooleanField(required=False, label='Bill a company')
    company_name = forms.CharField(max_length=150, required=False, label='Company name')
    company_tax_id = forms.CharField(max_length=60, required=False, label='Company tax ID')
    company_contact = forms.CharField(max_length=150, required=False, label='Contact person')
    company_email = forms.EmailField(required=False, label='Company email')
    company_phone = forms.CharField(max_length=30, required=False, label='Company phone')

    def __init__(self, *args, **kwargs):
        guests = kwargs.pop('guests', [])
        bookings = kwargs.pop('bookings', [])
        self.editing = kwargs.pop('editing', False)
        super().__init__(*args, **kwargs)
        self.fields['guest'].choices = [('', '-- Select a guest --')] + [
            (guest.get('_id'), guest.get('full_name')) for guest in guests
        ]
        self.fields['booking'].choices = [('', '-- No booking --')] + [
            (booking.get('_id'), f"{booking.get('confirmation_number')} ({(booking.get('guest') or {}).get('full_name', '')})")
            for booking in bookings
        ]
        if self.editing:
            self.fields['status'].choices = INVOICE_STATUSES

    def clean(self):
        cleaned_data = super().clean()
        if not cleaned_data.get('isBillingAddressSameAsGuest'):
            if not cleaned_data.get('billing_line1') or not cleaned_data.get('billing_city'):
                raise forms.ValidationError('Enter a billing address or bill to the guest address.')
        if cleaned_data.get('isCompanyBilling') and not cleaned_data.get('company_name'):
            raise forms.ValidationError('Company billing needs a company name.')
        return cleaned_data

    def to_payload(self, totals):
        """Header fields merged with serialized totals, billing and company blocks nested."""
        cd = self.cleaned_data
        payload = {
            'guest': cd['guest'],
            'booking': cd.get('booking') or None,
            'currency': cd['currency'],
            'status': cd['status'],
            'dueDate': cd['dueDate'].isoformat(),
            'paymentTerms': cd.get('paymentTerms'),
            'paymentInstructions': cd.get('paymentInstructions'),
            'notes': cd.get('notes'),
            'isBillingAddressSameAsGuest': cd.get('isBillingAddressSameAsGuest', False),
            'isCompanyBilling': cd.get('isCompanyBilling', False),
        }
        if not cd.get('isBillingAddressSameAsGuest'):
            payload['billingAddress'] = {key: cd.get(name) for name, key in BILLING_FIELDS.items()}
        if cd.get('isCompanyBilling'):
            payload['companyDetails'] = {key: cd.get(name) for name, key in COMPANY_FIELDS.items()}
        payload.update(totals)
        return compact(payload, clear_blank=self.editing)


def initial_from_invoice(invoice):
    guest = invoice.get('guest')
    booking = invoice.get('booking')
    initial = {
        'guest': guest.get('_id') if isinstance(guest, dict) else guest,
        'booking': booking.get('_id') if isinstance(booking, dict) else booking,
        'currency': invoice.get('currency') or 'USD',
        'status': invoice.get('status') or 'Draft',
        'dueDate': parse_date(invoice.get('dueDate')),
        'paymentTerms': invoice.get('paymentTerms'),
        'paymentInstructions': invoice.get('paymentInstructions'),
        'notes': invoice.get('notes'),
        'isBillingAddressSameAsGuest': invoice.get('isBillingAddressSameAsGuest', True),
        'isCompanyBilling': invoice.get('isCompanyBilling', False),
    }
    for name, key in BILLING_FIELDS.items():
        initial[name] = (invoice.get('billingAddress') or {}).get(key)
    for name, key in COMPANY_FIELDS.items():
        initial[name] = (invoice.get('companyDetails') or {}).get(key)
    return initial


class RecordPaymentForm(forms.Form):
    amountPaid = forms.DecimalField(min_value=Decimal('0.01'), decimal_places=2, label='Amount')
    paymentMethod = forms.ChoiceField(choices=PAYMENT_METHODS, label='Method')
    paymentDate = forms.DateField(required=False, label='Date', widget=forms.DateInput(attrs={'type': 'date'}))
    reference = forms.CharField(max_length=100, required=False)

    def __init__(self, *args, **kwargs):
        self.balance = kwargs.pop('balance', None)
        super().__init__(*args, **kwargs)

    def clean_amountPaid(self):
        amount = self.cleaned_data['amountPaid']
        if self.balance is not None and amount > self.balance:
            raise forms.ValidationError(f'The amount cannot exceed the balance of {self.balance}.')
        return amount

    def to_payload(self):
        cd = self.cleaned_data
        return compact({
            'amountPaid': float(cd['amountPaid']),
            'paymentMethod': cd['paymentMethod'],
            'paymentDate': cd['paymentDate'].isoformat() if cd.get('paymentDate') else None,
            'reference': cd.get('reference'),
        })


class SendEmailForm(forms.Form):
    email = forms.EmailField(required=False, help_text="Leave blank to use the guest's email")
    message = forms.CharField(required=False, widget=forms.Textarea(attrs={'rows': 3}))

    def to_payload(self):
        return compact(dict(self.cleaned_data))


class CancelInvoiceForm(forms.Form):
    reason = forms.CharField(widget=forms.Textarea(attrs={'rows': 3}))
