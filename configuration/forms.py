from django import forms

from core.filters import compact
from core.formatting import CURRENCY_SYMBOLS
from .services import DOCUMENT_TYPES, INHERITABLE_SECTIONS

CARD_TYPES = [
    ('visa', 'Visa'),
    ('mastercard', 'Mastercard'),
    ('amex', 'American Express'),
    ('discover', 'Discover'),
]

COLOR_INPUT = forms.TextInput(attrs={'type': 'color'})


class ConfigurationForm(forms.Form):
    """General hotel configuration, used both to create and to update it."""
    name = forms.CharField(max_length=120)
    legal_name = forms.CharField(max_length=160, required=False)
    tax_id = forms.CharField(max_length=60, required=False, label='Tax ID')
    phone = forms.CharField(max_length=40, required=False)
    email = forms.EmailField(required=False)
    website = forms.URLField(required=False)
    street = forms.CharField(max_length=160, required=False)
    city = forms.CharField(max_length=80, required=False)
    state = forms.CharField(max_length=80, required=False)
    postal_code = forms.CharField(max_length=20, required=False)
    country = forms.CharField(max_length=80, required=False)
    currency = forms.ChoiceField(choices=[(code, code) for code in CURRENCY_SYMBOLS], initial='USD')
    check_in_time = forms.TimeField(initial='15:00', widget=forms.TimeInput(attrs={'type': 'time'}))
    check_out_time = forms.TimeField(initial='11:00', widget=forms.TimeInput(attrs={'type': 'time'}))
    time_zone = forms.CharField(max_length=60, initial='UTC')
    cancellation_policy = forms.CharField(required=False, widget=forms.Textarea(attrs={'rows': 3}))

    def to_payload(self, hotel_id=None):
        cd = self.cleaned_data
        currency = cd['currency']
        payload = {
            'hotel': hotel_id,
            'name': cd['name'],
            'legal_name': cd['legal_name'] or cd['name'],
            'tax_id': cd['tax_id'],
            'contact': {
                'phone': {'primary': cd['phone']},
                'email': {'primary': cd['email']},
                'website': cd['website'],
                'address': {
                    part: cd[part] for part in ('street', 'city', 'state', 'postal_code', 'country')
                },
            },
            'financial': {
                'currency': {'code': currency, 'symbol': CURRENCY_SYMBOLS.get(currency, currency)},
            },
            'operational': {
                'check_in_time': cd['check_in_time'].strftime('%H:%M'),
                'check_out_time': cd['check_out_time'].strftime('%H:%M'),
                'time_zone': cd['time_zone'],
                'cancellation_policy': cd['cancellation_policy'],
            },
        }
        return compact(payload)


def initial_from_configuration(config):
    contact = config.get('contact') or {}
    address = contact.get('address') or {}
    financial = config.get('financial') or {}
    operational = config.get('operational') or {}
    initial = {
        'name': config.get('name'),
        'legal_name': config.get('legal_name'),
        'tax_id': config.get('tax_id'),
        'phone': (contact.get('phone') or {}).get('primary'),
        'email': (contact.get('email') or {}).get('primary'),
        'website': contact.get('website'),
        'currency': (financial.get('currency') or {}).get('code') or 'USD',
        'check_in_time': operational.get('check_in_time') or '15:00',
        'check_out_time': operational.get('check_out_time') or '11:00',
        'time_zone': operational.get('time_zone') or 'UTC',
        'cancellation_policy': operational.get('cancellation_policy'),
    }
    initial.update({part: address.get(part) for part in ('street', 'city', 'state', 'postal_code', 'country')})
    return initial


class BrandingForm(forms.Form):
    logo = forms.ImageField(required=False, help_text='Uploading a logo replaces the logo URL.')
    logo_url = forms.URLField(required=False, label='Logo URL')
    favicon_url = forms.URLField(required=False, label='Favicon URL')
    primary_color = forms.CharField(max_length=7, initial='#1a73e8', widget=COLOR_INPUT)
    secondary_color = forms.CharField(max_length=7, initial='#f8f9fa', widget=COLOR_INPUT)
    accent_color = forms.CharField(max_length=7, initial='#fbbc04', widget=COLOR_INPUT)

    def to_payload(self, logo_data_url=None):
        cd = dict(self.cleaned_data)
        cd.pop('logo')
        if logo_data_url:
            cd['logo_url'] = logo_data_url
        return compact(cd)


def initial_from_branding(branding):
    branding = branding or {}
    return {
        'logo_url': branding.get('logo_url') if not str(branding.get('logo_url', '')).startswith('data:') else '',
        'favicon_url': branding.get('favicon_url'),
        'primary_color': branding.get('primary_color') or '#1a73e8',
        'secondary_color': branding.get('secondary_color') or '#f8f9fa',
        'accent_color': branding.get('accent_color') or '#fbbc04',
    }


class BankingForm(forms.Form):
    bank_name = forms.CharField(max_length=120)
    account_name = forms.CharField(max_length=120)
    account_number = forms.CharField(max_length=40)
    routing_number = forms.CharField(max_length=40, required=False)
    swift_code = forms.CharField(max_length=20, required=False, label='SWIFT code')
    accepted_cards = forms.MultipleChoiceField(
        required=False, choices=CARD_TYPES, widget=forms.CheckboxSelectMultiple,
    )
    accepts_cards = forms.BooleanField(required=False, label='Online / card payments')
    accepts_cash = forms.BooleanField(required=False, label='Cash payments')
    accepts_bank_transfer = forms.BooleanField(required=False, label='Bank transfers')

    def to_payload(self):
        cd = self.cleaned_data
        account = {
            field: cd[field]
            for field in ('bank_name', 'account_name', 'account_number', 'routing_number', 'swift_code')
        }
        return {
            'accounts': [compact(account)],
            'payment_methods': {
                'accepted_cards': cd['accepted_cards'],
                'accepts_cards': cd['accepts_cards'],
                'accepts_cash': cd['accepts_cash'],
                'accepts_bank_transfer': cd['accepts_bank_transfer'],
            },
        }


def initial_from_banking(banking):
    banking = banking or {}
    accounts = banking.get('accounts') or [{}]
    initial = dict(accounts[0])
    initial.update(banking.get('payment_methods') or {})
    return initial


class InheritanceForm(forms.Form):
    """One checkbox per section: checked means the hotel follows its chain."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        for section, label in INHERITABLE_SECTIONS:
            self.fields[section] = forms.BooleanField(required=False, label=f'{label} from chain')

    def to_payload(self):
        return {section: self.cleaned_data[section] for section, _ in INHERITABLE_SECTIONS}


class GenerateNumberForm(forms.Form):
    document_type = forms.ChoiceField(choices=DOCUMENT_TYPES)
