from django import forms

from core.filters import compact
from core.formatting import money, parse_date
from .services import BOOKING_SOURCES, BOOKING_STATUSES, PAYMENT_STATUSES

PAYMENT_METHODS = [
    ('', '-- Not set --'),
    ('cash', 'Cash'),
    ('credit_card', 'Credit card'),
    ('debit_card', 'Debit card'),
    ('bank_transfer', 'Bank transfer'),
    ('mobile_money', 'Mobile money'),
    ('online', 'Online'),
]


def _any(choices):
    return [('', 'All')] + list(choices)


class BookingFilterForm(forms.Form):
    q = forms.CharField(required=False, label='Search', widget=forms.TextInput(attrs={'placeholder': 'Guest, confirmation no., email, phone, room'}))
    status = forms.ChoiceField(required=False, choices=_any(BOOKING_STATUSES))
    payment_status = forms.ChoiceField(required=False, choices=_any(PAYMENT_STATUSES))
    booking_source = forms.ChoiceField(required=False, choices=_any(BOOKING_SOURCES), label='Source')
    start_date = forms.DateField(required=False, widget=forms.DateInput(attrs={'type': 'date'}))
    end_date = forms.DateField(required=False, widget=forms.DateInput(attrs={'type': 'date'}))


class RoomSearchForm(forms.Form):
    """Dates used to look up free rooms before booking."""
    check_in = forms.DateField(widget=forms.DateInput(attrs={'class': 'form-control', 'type': 'date'}))
    check_out = forms.DateField(widget=forms.DateInput(attrs={'class': 'form-control', 'type': 'date'}))
    capacity = forms.IntegerField(required=False, min_value=1)

    def clean(self):
        cleaned_data = super().clean()
        check_in = cleaned_data.get('check_in')
        check_out = cleaned_data.get('check_out')
        if check_in and check_out and check_out <= check_in:
            raise forms.ValidationError('Check-out date must be after check-in date.')
        return cleaned_data


class BookingForm(forms.Form):
    """Form for creating/editing bookings."""
    clear_blank = False

    guest = forms.ChoiceField()
    room = forms.ChoiceField()
    check_in = forms.DateField(widget=forms.DateInput(attrs={'class': 'form-control', 'type': 'date'}))
    check_out = forms.DateField(widget=forms.DateInput(attrs={'class': 'form-control', 'type': 'date'}))
    number_of_guests = forms.IntegerField(min_value=1, initial=1)
    booking_source = forms.ChoiceField(choices=BOOKING_SOURCES, initial='direct')
    payment_status = forms.ChoiceField(choices=PAYMENT_STATUSES, initial='pending')
    payment_method = forms.ChoiceField(choices=PAYMENT_METHODS, required=False)
    tax_rate = forms.DecimalField(min_value=0, max_value=100, decimal_places=2, required=False, initial=0)
    discount = forms.DecimalField(min_value=0, decimal_places=2, required=False, initial=0)
    discount_reason = forms.CharField(max_length=200, required=False)
    special_requests = forms.CharField(required=False, widget=forms.Textarea(attrs={'class': 'form-control', 'rows': 3}))

    def __init__(self, *args, **kwargs):
        guests = kwargs.pop('guests', [])
        rooms = kwargs.pop('rooms', [])
        super().__init__(*args, **kwargs)
        self.rooms = {room.get('_id'): room for room in rooms}
        self.fields['guest'].choices = [('', '-- Select a guest --')] + [
            (guest.get('_id'), f"{guest.get('full_name')} ({guest.get('email') or guest.get('phone') or 'no contact'})")
            for guest in guests
        ]
        self.fields['room'].choices = [('', '-- Select a room --')] + [
            (room.get('_id'), _room_label(room)) for room in rooms
        ]

    def clean(self):
        cleaned_data = super().clean()
        check_in = cleaned_data.get('check_in')
        check_out = cleaned_data.get('check_out')
        if check_in and check_out and check_out <= check_in:
            raise forms.ValidationError('Check-out date must be after check-in date.')
        return cleaned_data

    def selected_room(self):
        return self.rooms.get(self.cleaned_data.get('room')) or {}

    def to_payload(self, quote):
        cd = self.cleaned_data
        return compact({
            'guest': cd['guest'],
            'room': cd['room'],
            'check_in': cd['check_in'].isoformat(),
            'check_out': cd['check_out'].isoformat(),
            'number_of_guests': cd['number_of_guests'],
            'booking_source': cd['booking_source'],
            'payment_status': cd['payment_status'],
            'payment_method': cd.get('payment_method'),
            'total_amount': money(quote['total_amount']),
            'tax_rate': money(cd.get('tax_rate') or 0),
            'discount': money(cd.get('discount') or 0),
            'discount_reason': cd.get('discount_reason'),
            'special_requests': cd.get('special_requests'),
        }, clear_blank=self.clear_blank)


class BookingUpdateForm(BookingForm):
    clear_blank = True

    status = forms.ChoiceField(choices=BOOKING_STATUSES)
    modification_notes = forms.CharField(required=False, widget=forms.Textarea(attrs={'class': 'form-control', 'rows': 2}))

    def to_payload(self, quote):
        payload = super().to_payload(quote)
        payload['status'] = self.cleaned_data['status']
        if self.cleaned_data.get('modification_notes'):
            payload['modification_notes'] = self.cleaned_data['modification_notes']
        return payload


class CancelBookingForm(forms.Form):
    reason = forms.CharField(label='Cancellation reason', widget=forms.Textarea(attrs={'class': 'form-control', 'rows': 3}))


def _room_label(room):
    room_type = room.get('room_type') or {}
    label = f"Room {room.get('number')}"
    if room_type.get('name'):
        label += f" - {room_type['name']}"
    if room_type.get('base_price') is not None:
        label += f" ({room_type['base_price']}/night)"
    return label


def initial_from_booking(booking):
    """Form initial data for an existing booking as the API returns it."""
    guest = booking.get('guest') or {}
    room = booking.get('room') or {}
    return {
        'guest': guest.get('_id') if isinstance(guest, dict) else guest,
        'room': room.get('_id') if isinstance(room, dict) else room,
        'check_in': parse_date(booking.get('check_in')),
        'check_out': parse_date(booking.get('check_out')),
        'number_of_guests': booking.get('number_of_guests') or 1,
        'booking_source': booking.get('booking_source') or 'direct',
        'payment_status': booking.get('payment_status') or 'pending',
        'payment_method': booking.get('payment_method') or '',
        'tax_rate': booking.get('tax_rate') or 0,
        'discount': booking.get('discount') or 0,
        'discount_reason': booking.get('discount_reason') or '',
        'special_requests': booking.get('special_requests') or '',
        'status': booking.get('status') or 'confirmed',
    }
