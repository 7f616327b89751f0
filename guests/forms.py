from django import forms

from core.filters import compact
from core.formatting import parse_date
from .services import LOYALTY_TIERS

GENDERS = [('', '-- Not set --'), ('male', 'Male'), ('female', 'Female'), ('other', 'Other')]
ID_TYPES = [
    ('', '-- Not set --'),
    ('passport', 'Passport'),
    ('national_id', 'National ID'),
    ('drivers_license', "Driver's license"),
    ('other', 'Other'),
]
FLAG_CHOICES = [('', 'All'), ('true', 'Yes'), ('false', 'No')]

# flat form field -> (nested object, key in that object)
NESTED_FIELDS = {
    'address_street': ('address', 'street'),
    'address_city': ('address', 'city'),
    'address_state': ('address', 'state'),
    'address_postal_code': ('address', 'postal_code'),
    'address_country': ('address', 'country'),
    'emergency_name': ('emergency_contact', 'name'),
    'emergency_relationship': ('emergency_contact', 'relationship'),
    'emergency_phone': ('emergency_contact', 'phone'),
    'company_name': ('company', 'name'),
    'company_position': ('company', 'position'),
}


class GuestFilterForm(forms.Form):
    search = forms.CharField(required=False, widget=forms.TextInput(attrs={'placeholder': 'Name, email or phone'}))
    nationality = forms.CharField(required=False)
    vip = forms.ChoiceField(required=False, choices=FLAG_CHOICES, label='VIP')
    blacklisted = forms.ChoiceField(required=False, choices=FLAG_CHOICES)
    loyalty_tier = forms.ChoiceField(required=False, choices=[('', 'All')] + LOYALTY_TIERS)


class GuestForm(forms.Form):
    """Guest profile; address, emergency contact and company are edited as flat fields."""
    full_name = forms.CharField(max_length=150)
    email = forms.EmailField()
    phone = forms.CharField(max_length=30)
    gender = forms.ChoiceField(choices=GENDERS, required=False)
    dob = forms.DateField(required=False, label='Date of birth', widget=forms.DateInput(attrs={'type': 'date'}))
    nationality = forms.CharField(max_length=80, required=False)
    id_type = forms.ChoiceField(choices=ID_TYPES, required=False, label='ID type')
    id_number = forms.CharField(max_length=60, required=False, label='ID number')
    id_expiry = forms.DateField(required=False, label='ID expiry', widget=forms.DateInput(attrs={'type': 'date'}))
    address_street = forms.CharField(max_length=200, required=False, label='Street')
    address_city = forms.CharField(max_length=100, required=False, label='City')
    address_state = forms.CharField(max_length=100, required=False, label='State/Province')
    address_postal_code = forms.CharField(max_length=20, required=False, label='Postal code')
    address_country = forms.CharField(max_length=100, required=False, label='Country')
    emergency_name = forms.CharField(max_length=150, required=False, label='Emergency contact name')
    emergency_relationship = forms.CharField(max_length=60, required=False, label='Relationship')
    emergency_phone = forms.CharField(max_length=30, required=False, label='Emergency contact phone')
    company_name = forms.CharField(max_length=150, required=False, label='Company')
    company_position = forms.CharField(max_length=100, required=False, label='Position')
    tags = forms.CharField(required=False, help_text='Comma separated')
    vip = forms.BooleanField(required=False, label='VIP')
    notes = forms.CharField(required=False, widget=forms.Textarea(attrs={'rows': 3}))

    def __init__(self, *args, **kwargs):
        self.editing = kwargs.pop('editing', False)
        super().__init__(*args, **kwargs)

    def clean(self):
        cleaned_data = super().clean()
        emergency = [cleaned_data.get(key) for key in ('emergency_name', 'emergency_phone')]
        if any(emergency) and not all(emergency):
            raise forms.ValidationError('An emergency contact needs both a name and a phone number.')
        return cleaned_data

    def to_payload(self):
        cd = self.cleaned_data
        payload = {}
        for name, value in cd.items():
            if name in NESTED_FIELDS:
                group, key = NESTED_FIELDS[name]
                payload.setdefault(group, {})[key] = value
            elif name in ('dob', 'id_expiry'):
                payload[name] = value.isoformat() if value else None
            elif name == 'tags':
                payload[name] = [tag.strip() for tag in (value or '').split(',') if tag.strip()]
            else:
                payload[name] = value
        return compact(payload, clear_blank=self.editing)


def initial_from_guest(guest):
    initial = {key: guest.get(key) for key in ('full_name', 'email', 'phone', 'gender', 'nationality', 'id_type', 'id_number', 'notes')}
    initial['dob'] = parse_date(guest.get('dob'))
    initial['id_expiry'] = parse_date(guest.get('id_expiry'))
    initial['vip'] = bool(guest.get('vip'))
    initial['tags'] = ', '.join(guest.get('tags') or [])
    for name, (group, key) in NESTED_FIELDS.items():
        initial[name] = (guest.get(group) or {}).get(key)
    return initial


class LoyaltyForm(forms.Form):
    member = forms.BooleanField(required=False, label='Loyalty member')
    points = forms.IntegerField(min_value=0, required=False)
    tier = forms.ChoiceField(choices=LOYALTY_TIERS)
    membership_number = forms.CharField(max_length=60, required=False)

    def to_payload(self):
        return compact(dict(self.cleaned_data))


class BlacklistForm(forms.Form):
    reason = forms.CharField(widget=forms.Textarea(attrs={'rows': 3}))
