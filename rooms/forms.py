from django import forms

from core.filters import compact
from core.formatting import money
from .services import ROOM_STATUSES, split_amenities

ROOM_CATEGORIES = [
    ('standard', 'Standard'),
    ('deluxe', 'Deluxe'),
    ('suite', 'Suite'),
    ('executive', 'Executive'),
    ('family', 'Family'),
    ('presidential', 'Presidential'),
]

FLAG_CHOICES = [('', 'Any'), ('true', 'Yes'), ('false', 'No')]


class RoomFilterForm(forms.Form):
    status = forms.ChoiceField(required=False, choices=[('', 'All')] + ROOM_STATUSES)
    room_type = forms.ChoiceField(required=False, choices=[('', 'All')])
    floor = forms.CharField(required=False)
    building = forms.CharField(required=False)
    is_accessible = forms.ChoiceField(required=False, choices=FLAG_CHOICES, label='Accessible')

    def __init__(self, *args, **kwargs):
        room_types = kwargs.pop('room_types', [])
        super().__init__(*args, **kwargs)
        self.fields['room_type'].choices = [('', 'All')] + [(rt.get('_id'), rt.get('name')) for rt in room_types]


class RoomForm(forms.Form):
    """Form for creating/editing rooms."""
    number = forms.CharField(max_length=10, label='Room number')
    floor = forms.CharField(max_length=10)
    building = forms.CharField(max_length=60, required=False)
    room_type = forms.ChoiceField()
    status = forms.ChoiceField(choices=ROOM_STATUSES, initial='available')
    view = forms.CharField(max_length=60, required=False)
    is_smoking_allowed = forms.BooleanField(required=False, label='Smoking allowed')
    is_accessible = forms.BooleanField(required=False, label='Accessible')
    has_smart_lock = forms.BooleanField(required=False, label='Smart lock')
    amenities = forms.CharField(required=False, help_text='Comma separated, e.g. wifi, minibar, tv')
    notes = forms.CharField(required=False, widget=forms.Textarea(attrs={'rows': 3}))

    def __init__(self, *args, **kwargs):
        room_types = kwargs.pop('room_types', [])
        self.editing = kwargs.pop('editing', False)
        super().__init__(*args, **kwargs)
        self.fields['room_type'].choices = [('', '-- Select a room type --')] + [
            (rt.get('_id'), rt.get('name')) for rt in room_types
        ]

    def to_payload(self):
        cd = dict(self.cleaned_data)
        cd['amenities'] = split_amenities(cd.get('amenities'))
        return compact(cd, clear_blank=self.editing)


def initial_from_room(room):
    room_type = room.get('room_type')
    initial = {key: room.get(key) for key in RoomForm.base_fields if key not in ('room_type', 'amenities')}
    initial['room_type'] = room_type.get('_id') if isinstance(room_type, dict) else room_type
    initial['amenities'] = ', '.join(room.get('amenities') or [])
    return initial


class RoomStatusForm(forms.Form):
    status = forms.ChoiceField(choices=ROOM_STATUSES)


class ConnectRoomsForm(forms.Form):
    rooms = forms.MultipleChoiceField(widget=forms.CheckboxSelectMultiple, help_text='Pick at least two rooms')

    def __init__(self, *args, **kwargs):
        rooms = kwargs.pop('rooms', [])
        super().__init__(*args, **kwargs)
        self.fields['rooms'].choices = [(room.get('_id'), f"Room {room.get('number')}") for room in rooms]

    def clean_rooms(self):
        rooms = self.cleaned_data['rooms']
        if len(rooms) < 2:
            raise forms.ValidationError('Select at least two rooms to connect.')
        return rooms


class AvailabilityForm(forms.Form):
    start_date = forms.DateField(widget=forms.DateInput(attrs={'type': 'date'}))
    end_date = forms.DateField(widget=forms.DateInput(attrs={'type': 'date'}))

    def clean(self):
        cleaned_data = super().clean()
        start = cleaned_data.get('start_date')
        end = cleaned_data.get('end_date')
        if start and end and end <= start:
            raise forms.ValidationError('End date must be after start date.')
        return cleaned_data


class RoomTypeForm(forms.Form):
    name = forms.CharField(max_length=100)
    category = forms.ChoiceField(choices=ROOM_CATEGORIES)
    base_price = forms.DecimalField(min_value=0, decimal_places=2)
    max_occupancy = forms.IntegerField(min_value=1, initial=2)
    description = forms.CharField(required=False, widget=forms.Textarea(attrs={'rows': 3}))
    amenities = forms.CharField(required=False, help_text='Comma separated')

    def __init__(self, *args, **kwargs):
        self.editing = kwargs.pop('editing', False)
        super().__init__(*args, **kwargs)

    def to_payload(self):
        cd = dict(self.cleaned_data)
        cd['base_price'] = money(cd['base_price'])
        cd['amenities'] = split_amenities(cd.get('amenities'))
        return compact(cd, clear_blank=self.editing)


def initial_from_room_type(room_type):
    initial = {key: room_type.get(key) for key in ('name', 'category', 'base_price', 'max_occupancy', 'description')}
    initial['amenities'] = ', '.join(room_type.get('amenities') or [])
    return initial
