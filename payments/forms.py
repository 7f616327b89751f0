from decimal import Decimal

from django import forms

from core.filters import compact
from core.formatting import CURRENCY_SYMBOLS, money, parse_date
from .services import METHOD_DETAILS, PAYMENT_METHODS, PAYMENT_STATUSES, method_details, validate_refund

CARD_TYPES = [('', '--'), ('visa', 'Visa'), ('mastercard', 'Mastercard'), ('amex', 'American Express'), ('other', 'Other')]

# flat form field -> (detail block, key in that block)
DETAIL_FIELDS = {
    'card_type': ('cardDetails', 'cardType'),
    'card_last4': ('cardDetails', 'last4'),
    'card_expiry_month': ('cardDetails', 'expiryMonth'),
    'card_expiry_year': ('cardDetails', 'expiryYear'),
    'card_holder': ('cardDetails', 'cardholderName'),
    'bank_name': ('bankDetails', 'bankName'),
    'bank_account_number': ('bankDetails', 'accountNumber'),
    'bank_routing_number': ('bankDetails', 'routingNumber'),
    'bank_account_name': ('bankDetails', 'accountName'),
    'mobile_provider': ('mobileMoneyDetails', 'provider'),
    'mobile_phone': ('mobileMoneyDetails', 'phoneNumber'),
    'mobile_transaction_id': ('mobileMoneyDetails', 'transactionId'),
    'online_provider': ('onlinePaymentDetails', 'provider'),
    'online_payment_id': ('onlinePaymentDetails', 'paymentId'),
    'online_payer_email': ('onlinePaymentDetails', 'payerEmail'),
}

# detail block -> fields that must be filled when that block applies
REQUIRED_DETAILS = {
    'cardDetails': ('card_last4', 'card_holder'),
    'bankDetails': ('bank_name',),
    'mobileMoneyDetails': ('mobile_provider', 'mobile_phone'),
    'onlinePaymentDetails': ('online_provider',),
}


class PaymentFilterForm(forms.Form):
    method = forms.ChoiceField(required=False, choices=[('', 'All')] + PAYMENT_METHODS)
    status = forms.ChoiceField(required=False, choices=[('', 'All')] + PAYMENT_STATUSES)
    minAmount = forms.DecimalField(required=False, label='Min amount')
    maxAmount = forms.DecimalField(required=False, label='Max amount')
    startDate = forms.DateField(required=False, label='From', widget=forms.DateInput(attrs={'type': 'date'}))
    endDate = forms.DateField(required=False, label='To', widget=forms.DateInput(attrs={'type': 'date'}))


class PaymentDetailsMixin(forms.Form):
    """Method-specific fields; only the block matching the method is validated and sent."""
    card_type = forms.ChoiceField(choices=CARD_TYPES, required=False)
    card_last4 = forms.RegexField(regex=r'^\d{4}$', required=False, label='Card last 4 digits')
    card_expiry_month = forms.CharField(max_length=2, required=False, label='Expiry month')
    card_expiry_year = forms.CharField(max_length=4, required=False, label='Expiry year')
    card_holder = forms.CharField(max_length=150, required=False, label='Cardholder name')
    bank_name = forms.CharField(max_length=150, required=False)
    bank_account_number = forms.CharField(max_length=60, required=False, label='Account number')
    bank_routing_number = forms.CharField(max_length=60, required=False, label='Routing number')
    bank_account_name = forms.CharField(max_length=150, required=False, label='Account name')
    mobile_provider = forms.CharField(max_length=60, required=False, label='Mobile money provider')
    mobile_phone = forms.CharField(max_length=30, required=False, label='Mobile number')
    mobile_transaction_id = forms.CharField(max_length=100, required=False, label='Mobile transaction ID')
    online_provider = forms.CharField(max_length=60, required=False, label='Online provider')
    online_payment_id = forms.CharField(max_length=100, required=False, label='Online payment ID')
    online_payer_email = forms.EmailField(required=False, label='Payer email')

    def clean(self):
        cleaned_data = super().clean()
        block = METHOD_DETAILS.get(cleaned_data.get('method'))
        for name in REQUIRED_DETAILS.get(block, ()):
            if not cleaned_data.get(name):
                self.add_error(name, 'Required for this payment method.')
        return cleaned_data

    def detail_blocks(self):
        details = {}
        for name, (block, key) in DETAIL_FIELDS.items():
            details.setdefault(block, {})[key] = self.cleaned_data.get(name)
        return method_details(self.cleaned_data.get('method'), compact(details))


class PaymentForm(PaymentDetailsMixin):
    guest = forms.ChoiceField()
    invoice = forms.ChoiceField(required=False)
    booking = forms.ChoiceField(required=False)
    amountPaid = forms.DecimalField(min_value=Decimal('0.01'), decimal_places=2, label='Amount')
    method = forms.ChoiceField(choices=PAYMENT_METHODS)
    currency = forms.ChoiceField(choices=[(code, code) for code in CURRENCY_SYMBOLS], initial='USD')
    transactionReference = forms.CharField(max_length=100, required=False, label='Transaction reference')
    paidAt = forms.DateField(required=False, label='Paid on', widget=forms.DateInput(attrs={'type': 'date'}))
    isDeposit = forms.BooleanField(required=False, label='Deposit')
    notes = forms.CharField(required=False, widget=forms.Textarea(attrs={'rows': 2}))

    field_order = ['guest', 'invoice', 'booking', 'amountPaid', 'method', 'currency', 'transactionReference', 'paidAt', 'isDeposit']

    def __init__(self, *args, **kwargs):
        guests = kwargs.pop('guests', [])
        invoices = kwargs.pop('invoices', [])
        bookings = kwargs.pop('bookings', [])
        super().__init__(*args, **kwargs)
        self.fields['guest'].choices = [('', '-- Select a guest --')] + [(g.get('_id'), g.get('full_name')) for g in guests]
        self.fields['invoice'].choices = [('', '-- No invoice --')] + [
            (i.get('_id'), f"{i.get('invoiceNumber')} ({i.get('status')})") for i in invoices
        ]
        self.fields['booking'].choices = [('', '-- No booking --')] + [
            (b.get('_id'), b.get('confirmation_number')) for b in bookings
        ]

    def to_payload(self):
        cd = self.cleaned_data
        payload = {
            'guest': cd['guest'],
            'invoice': cd.get('invoice') or None,
            'booking': cd.get('booking') or None,
            'amountPaid': money(cd['amountPaid']),
            'method': cd['method'],
            'currency': cd['currency'],
            'transactionReference': cd.get('transactionReference'),
            'paidAt': cd['paidAt'].isoformat() if cd.get('paidAt') else None,
            'isDeposit': cd.get('isDeposit', False),
            'notes': cd.get('notes'),
        }
        payload.update(self.detail_blocks())
        return compact(payload)


class PaymentUpdateForm(PaymentDetailsMixin):
    method = forms.ChoiceField(choices=PAYMENT_METHODS)
    status = forms.ChoiceField(choices=PAYMENT_STATUSES)
    transactionReference = forms.CharField(max_length=100, required=False, label='Transaction reference')
    paidAt = forms.DateField(required=False, label='Paid on', widget=forms.DateInput(attrs={'type': 'date'}))
    notes = forms.CharField(required=False, widget=forms.Textarea(attrs={'rows': 2}))

    field_order = ['method', 'status', 'transactionReference', 'paidAt']

    def to_payload(self):
        cd = self.cleaned_data
        payload = {
            'method': cd['method'],
            'status': cd['status'],
            'transactionReference': cd.get('transactionReference'),
            'paidAt': cd['paidAt'].isoformat() if cd.get('paidAt') else None,
            'notes': cd.get('notes'),
        }
        payload.update(self.detail_blocks())
        return compact(payload, clear_blank=True)


def initial_from_payment(payment):
    initial = {
        'method': payment.get('method'),
        'status': payment.get('status'),
        'transactionReference': payment.get('transactionReference'),
        'paidAt': parse_date(payment.get('paidAt')),
        'notes': payment.get('notes'),
    }
    for name, (block, key) in DETAIL_FIELDS.items():
        initial[name] = (payment.get(block) or {}).get(key)
    return initial


class RefundForm(forms.Form):
    amount = forms.DecimalField(decimal_places=2)
    reason = forms.CharField(required=False, widget=forms.Textarea(attrs={'rows': 2}))
    refundReference = forms.CharField(max_length=100, required=False, label='Refund reference')

    def __init__(self, *args, **kwargs):
        self.payment = kwargs.pop('payment')
        super().__init__(*args, **kwargs)

    def clean_amount(self):
        try:
            validate_refund(self.payment, self.cleaned_data['amount'])
        except ValueError as exc:
            raise forms.ValidationError(str(exc))
        return self.cleaned_data['amount']


class SendReceiptForm(forms.Form):
    email = forms.EmailField(required=False, help_text="Leave blank to use the guest's email")
    message = forms.CharField(required=False, widget=forms.Textarea(attrs={'rows': 3}))

    def to_payload(self):
        return compact(dict(self.cleaned_data))
