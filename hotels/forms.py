from django import forms

from chains.forms import COLOR_INPUT, DATE_FORMATS, TIME_FORMATS, HotelForm as ChainHotelForm
from chains.services import HOTEL_TYPES
from core.filters import compact
from core.formatting import CURRENCY_SYMBOLS
from .services import HOTEL_ACCESS_LEVELS

FLAG_CHOICES = [('', 'Any'), ('true', 'Yes'), ('false', 'No')]
TIME_INPUT = forms.TimeInput(attrs={'type': 'time'})


class HotelFilterForm(forms.Form):
    type = forms.ChoiceField(required=False, choices=[('', 'All')] + HOTEL_TYPES)
    active = forms.ChoiceField(required=False, choices=FLAG_CHOICES)
    isHeadquarters = forms.ChoiceField(required=False, choices=FLAG_CHOICES, label='Headquarters')
    chainCode = forms.CharField(required=False, label='Chain code')


class HotelForm(ChainHotelForm):
    """A hotel on its own, with the chain fields set by hand."""
    chainCode = forms.CharField(max_length=20, required=False, label='Chain code')
    parentCompany = forms.CharField(max_length=120, required=False, label='Parent company')
    isHeadquarters = forms.BooleanField(required=False, label='Headquarters')
    active = forms.BooleanField(required=False, initial=True)

    def __init__(self, *args, **kwargs):
        self.editing = kwargs.pop('editing', False)
        super().__init__(*args, **kwargs)

    def to_payload(self):
        return compact(dict(self.cleaned_data), clear_blank=self.editing)


def initial_from_hotel(hotel):
    parent = hotel.get('parentHotel')
    initial = {key: hotel.get(key) for key in HotelForm.base_fields if key in hotel}
    initial['parentHotel'] = parent.get('_id') if isinstance(parent, dict) else parent
    return initial


class BasicStepForm(forms.Form):
    name = forms.CharField(max_length=120, min_length=2, label='Hotel name')
    legal_name = forms.CharField(max_length=160, min_length=2, label='Legal name')
    tax_id = forms.CharField(max_length=60, required=False, label='Tax ID')

    def to_data(self):
        return compact(dict(self.cleaned_data))


class ContactStepForm(forms.Form):
    street = forms.CharField(max_length=160)
    city = forms.CharField(max_length=80)
    state = forms.CharField(max_length=80)
    postal_code = forms.CharField(max_length=20)
    country = forms.CharField(max_length=80)
    phone_primary = forms.CharField(max_length=40, label='Primary phone')
    phone_secondary = forms.CharField(max_length=40, required=False, label='Secondary phone')
    email_primary = forms.EmailField(label='Primary email')
    email_secondary = forms.EmailField(required=False, label='Secondary email')
    email_support = forms.EmailField(required=False, label='Support email')
    website = forms.URLField(required=False)

    def to_data(self):
        cd = self.cleaned_data
        return {'contact': compact({
            'address': {key: cd[key] for key in ('street', 'city', 'state', 'postal_code', 'country')},
            'phone': {'primary': cd['phone_primary'], 'secondary': cd.get('phone_secondary')},
            'email': {
                'primary': cd['email_primary'],
                'secondary': cd.get('email_secondary'),
                'support': cd.get('email_support'),
            },
            'website': cd.get('website'),
        })}


class BrandingStepForm(forms.Form):
    primary_color = forms.CharField(max_length=7, initial='#1a73e8', widget=COLOR_INPUT, label='Primary color')
    secondary_color = forms.CharField(max_length=7, initial='#f8f9fa', widget=COLOR_INPUT, label='Secondary color')
    accent_color = forms.CharField(max_length=7, initial='#fbbc04', widget=COLOR_INPUT, label='Accent color')
    logo_url = forms.URLField(required=False, label='Logo URL')
    favicon_url = forms.URLField(required=False, label='Favicon URL')

    def to_data(self):
        return {'branding': compact(dict(self.cleaned_data))}


class FinancialStepForm(forms.Form):
    currency = forms.ChoiceField(choices=[(code, code) for code in CURRENCY_SYMBOLS], initial='USD')
    position = forms.ChoiceField(choices=[('before', 'Before the amount'), ('after', 'After the amount')], label='Symbol position')
    prefix_invoice = forms.CharField(max_length=10, initial='INV', label='Invoice prefix')
    prefix_receipt = forms.CharField(max_length=10, initial='RCT', label='Receipt prefix')
    prefix_quotation = forms.CharField(max_length=10, initial='QUO', label='Quotation prefix')
    prefix_folio = forms.CharField(max_length=10, initial='FOL', label='Folio prefix')

    def to_data(self):
        cd = self.cleaned_data
        currency = cd['currency']
        return {'financial': {
            'currency': {'code': currency, 'symbol': CURRENCY_SYMBOLS.get(currency, currency), 'position': cd['position']},
            'document_prefixes': {
                document: cd[f'prefix_{document}'] for document in ('invoice', 'receipt', 'quotation', 'folio')
            },
        }}


class OperationalStepForm(forms.Form):
    check_in_time = forms.TimeField(initial='14:00', widget=TIME_INPUT, label='Check-in time')
    check_out_time = forms.TimeField(initial='11:00', widget=TIME_INPUT, label='Check-out time')
    time_zone = forms.CharField(max_length=60, initial='UTC')
    date_format = forms.ChoiceField(choices=DATE_FORMATS)
    time_format = forms.ChoiceField(choices=TIME_FORMATS)
    cancellation_policy = forms.CharField(min_length=10, widget=forms.Textarea(attrs={'rows': 3}))

    def to_data(self):
        cd = dict(self.cleaned_data)
        cd['check_in_time'] = cd['check_in_time'].strftime('%H:%M')
        cd['check_out_time'] = cd['check_out_time'].strftime('%H:%M')
        return {'operational': cd}


class FeaturesStepForm(forms.Form):
    online_booking = forms.BooleanField(required=False, initial=True)
    mobile_checkin = forms.BooleanField(required=False, initial=True, label='Mobile check-in')
    keyless_entry = forms.BooleanField(required=False)
    loyalty_program = forms.BooleanField(required=False)
    multi_language = forms.BooleanField(required=False, label='Multiple languages')
    payment_gateway = forms.BooleanField(required=False, initial=True)

    def to_data(self):
        return {'features': dict(self.cleaned_data)}


# One form per wizard step, in step order
SETUP_FORMS = [
    BasicStepForm,
    ContactStepForm,
    BrandingStepForm,
    FinancialStepForm,
    OperationalStepForm,
    FeaturesStepForm,
]


class HotelAccessForm(forms.Form):
    hotel = forms.ChoiceField()
    access_level = forms.ChoiceField(choices=HOTEL_ACCESS_LEVELS, initial='read', label='Access level')
    role = forms.ChoiceField(required=False, help_text='Leave blank to keep the user\'s own role')

    def __init__(self, *args, **kwargs):
        hotels = kwargs.pop('hotels', [])
        roles = kwargs.pop('roles', [])
        super().__init__(*args, **kwargs)
        self.fields['hotel'].choices = [('', '-- Select a hotel --')] + [
            (h.get('_id'), f"{h.get('name')} ({h.get('code')})") for h in hotels
        ]
        self.fields['role'].choices = [('', '-- Same role --')] + [(r.get('_id'), r.get('name')) for r in roles]
