from django import forms

from core.filters import compact
from core.formatting import CURRENCY_SYMBOLS
from .services import ACCESS_LEVELS, DOCUMENT_PREFIXES, HOTEL_TYPES, SYNC_SECTIONS

STAR_RATINGS = [(0, 'Not applicable')] + [(n, f'{n} star{"s" if n > 1 else ""}') for n in range(1, 6)]
FONTS = [(name, name) for name in ('Inter', 'Roboto', 'Open Sans', 'Montserrat', 'Lato')]
DATE_FORMATS = [(fmt, fmt) for fmt in ('MM/DD/YYYY', 'DD/MM/YYYY', 'YYYY-MM-DD', 'DD.MM.YYYY')]
TIME_FORMATS = [('12h', '12-hour (AM/PM)'), ('24h', '24-hour')]
COLOR_INPUT = forms.TextInput(attrs={'type': 'color'})
CODE_FIELD = {'regex': r'^[A-Za-z0-9_-]+$', 'error_messages': {'invalid': 'Letters, digits, "-" and "_" only.'}}


class HotelForm(forms.Form):
    """A hotel inside a chain; also the headquarters when a chain is created."""
    name = forms.CharField(max_length=120)
    code = forms.RegexField(max_length=20, **CODE_FIELD)
    description = forms.CharField(required=False, widget=forms.Textarea(attrs={'rows': 2}))
    type = forms.ChoiceField(choices=HOTEL_TYPES, initial='hotel')
    starRating = forms.TypedChoiceField(choices=STAR_RATINGS, coerce=int, initial=0, label='Star rating')

    def __init__(self, *args, **kwargs):
        hotels = kwargs.pop('hotels', None)
        super().__init__(*args, **kwargs)
        if hotels is not None:
            self.fields['parentHotel'] = forms.ChoiceField(
                required=False, label='Parent hotel',
                choices=[('', '-- None --')] + [(h.get('_id'), h.get('name')) for h in hotels],
            )

    def to_payload(self):
        return compact(dict(self.cleaned_data))


class ChainForm(HotelForm):
    chainCode = forms.RegexField(max_length=20, label='Chain code', **CODE_FIELD)

    field_order = ['name', 'chainCode', 'code', 'description', 'type', 'starRating']

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields['code'].label = 'Headquarters code'


class SharedConfigurationForm(forms.Form):
    primaryColor = forms.CharField(max_length=7, initial='#1a73e8', widget=COLOR_INPUT, label='Primary color')
    secondaryColor = forms.CharField(max_length=7, initial='#f8f9fa', widget=COLOR_INPUT, label='Secondary color')
    accentColor = forms.CharField(max_length=7, initial='#fbbc04', widget=COLOR_INPUT, label='Accent color')
    primaryFont = forms.ChoiceField(choices=FONTS, initial='Inter', label='Primary font')
    secondaryFont = forms.ChoiceField(choices=FONTS, initial='Inter', label='Secondary font')
    dateFormat = forms.ChoiceField(choices=DATE_FORMATS, label='Date format')
    timeFormat = forms.ChoiceField(choices=TIME_FORMATS, label='Time format')
    currency = forms.ChoiceField(choices=[(code, code) for code in CURRENCY_SYMBOLS], initial='USD')
    timezone = forms.CharField(max_length=60, initial='UTC')
    language = forms.CharField(max_length=10, initial='en')
    override_branding = forms.BooleanField(required=False, label='Hotels may override branding')
    override_documentPrefixes = forms.BooleanField(required=False, label='Hotels may override document prefixes')
    override_systemSettings = forms.BooleanField(required=False, label='Hotels may override system settings')

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        for document in DOCUMENT_PREFIXES:
            self.fields[f'prefix_{document}'] = forms.CharField(
                max_length=10, required=False, label=f'{document.capitalize()} prefix',
            )

    def to_payload(self):
        cd = self.cleaned_data
        currency = cd['currency']
        return {
            'branding': {
                'primaryColor': cd['primaryColor'],
                'secondaryColor': cd['secondaryColor'],
                'accentColor': cd['accentColor'],
                'font': {'primary': cd['primaryFont'], 'secondary': cd['secondaryFont']},
            },
            'documentPrefixes': {
                document: {'prefix': cd[f'prefix_{document}']}
                for document in DOCUMENT_PREFIXES if cd.get(f'prefix_{document}')
            },
            'systemSettings': {
                'dateFormat': cd['dateFormat'],
                'timeFormat': cd['timeFormat'],
                'currency': {'code': currency, 'symbol': CURRENCY_SYMBOLS.get(currency, currency)},
                'timezone': cd['timezone'],
                'language': cd['language'],
            },
            'overrideSettings': {
                section: cd[f'override_{section}'] for section, _ in SYNC_SECTIONS
            },
        }


def initial_from_shared_configuration(config):
    config = config or {}
    branding = config.get('branding') or {}
    font = branding.get('font') or {}
    system = config.get('systemSettings') or {}
    overrides = config.get('overrideSettings') or {}
    initial = {
        'primaryColor': branding.get('primaryColor'),
        'secondaryColor': branding.get('secondaryColor'),
        'accentColor': branding.get('accentColor'),
        'primaryFont': font.get('primary'),
        'secondaryFont': font.get('secondary'),
        'dateFormat': system.get('dateFormat'),
        'timeFormat': system.get('timeFormat'),
        'currency': (system.get('currency') or {}).get('code'),
        'timezone': system.get('timezone'),
        'language': system.get('language'),
    }
    for section, _ in SYNC_SECTIONS:
        initial[f'override_{section}'] = bool(overrides.get(section))
    for document, prefix in (config.get('documentPrefixes') or {}).items():
        initial[f'prefix_{document}'] = (prefix or {}).get('prefix')
    return {key: value for key, value in initial.items() if value is not None}


class GrantAccessForm(forms.Form):
    user = forms.ChoiceField()
    access_level = forms.ChoiceField(choices=ACCESS_LEVELS, initial='view')

    def __init__(self, *args, **kwargs):
        users = kwargs.pop('users', [])
        super().__init__(*args, **kwargs)
        self.fields['user'].choices = [('', '-- Select a user --')] + [
            (u.get('_id'), f"{u.get('full_name')} ({u.get('email')})") for u in users
        ]


class SyncForm(forms.Form):
    sections = forms.MultipleChoiceField(
        choices=SYNC_SECTIONS, initial=[key for key, _ in SYNC_SECTIONS], widget=forms.CheckboxSelectMultiple,
        error_messages={'required': 'Select at least one configuration section.'},
    )
    target_hotels = forms.MultipleChoiceField(
        required=False, widget=forms.CheckboxSelectMultiple, help_text='Leave empty to sync every hotel.',
    )

    def __init__(self, *args, **kwargs):
        hotels = kwargs.pop('hotels', [])
        super().__init__(*args, **kwargs)
        self.fields['target_hotels'].choices = [(h.get('_id'), h.get('name')) for h in hotels]
