from django import forms

from core.filters import compact
from core.formatting import money
from .services import BULK_ACTIONS, PRICE_TYPES, SERVICE_CATEGORIES, SERVICE_STATUSES

PROVIDERS = [('all', 'All providers'), ('internal', 'Internal'), ('external', 'External')]
PRICE_SORTS = [('', 'Default order'), ('asc', 'Price: low to high'), ('desc', 'Price: high to low')]

EXTERNAL_PROVIDER_FIELDS = {
    'provider_name': 'name',
    'provider_contact': 'contactPerson',
    'provider_phone': 'phone',
    'provider_email': 'email',
    'provider_contract': 'contractDetails',
    'provider_commission': 'commissionRate',
}


class ServiceFilterForm(forms.Form):
    q = forms.CharField(required=False, label='Search')
    status = forms.ChoiceField(required=False, choices=[('all', 'All')] + SERVICE_STATUSES)
    category = forms.ChoiceField(required=False, choices=[('all', 'All')] + SERVICE_CATEGORIES)
    price_type = forms.ChoiceField(required=False, choices=[('all', 'All')] + PRICE_TYPES, label='Price type')
    provider = forms.ChoiceField(required=False, choices=PROVIDERS)
    sort = forms.ChoiceField(required=False, choices=PRICE_SORTS)


class BulkActionForm(forms.Form):
    action = forms.ChoiceField(choices=[(key, key.capitalize()) for key in BULK_ACTIONS])
    service_ids = forms.MultipleChoiceField(error_messages={'required': 'Select at least one service.'})

    def __init__(self, *args, **kwargs):
        service_ids = kwargs.pop('service_ids', [])
        super().__init__(*args, **kwargs)
        self.fields['service_ids'].choices = [(service_id, service_id) for service_id in service_ids]


class EventServiceForm(forms.Form):
    name = forms.CharField(max_length=120)
    description = forms.CharField(required=False, widget=forms.Textarea(attrs={'rows': 3}))
    category = forms.ChoiceField(choices=[('', '-- Select category --')] + SERVICE_CATEGORIES)
    subcategory = forms.CharField(max_length=80, required=False)
    price = forms.DecimalField(min_value=0, decimal_places=2)
    priceType = forms.ChoiceField(choices=PRICE_TYPES, initial='flat', label='Price type')
    customPriceDetails = forms.CharField(required=False, label='Custom price details')
    minimumQuantity = forms.IntegerField(min_value=1, initial=1, label='Minimum quantity')
    maximumQuantity = forms.IntegerField(min_value=1, required=False, label='Maximum quantity')
    leadTime = forms.IntegerField(min_value=0, initial=24, label='Lead time (hours)')
    duration = forms.IntegerField(min_value=0, required=False, label='Duration (minutes)')
    setupTime = forms.IntegerField(min_value=0, initial=30, label='Setup time (minutes)')
    cleanupTime = forms.IntegerField(min_value=0, initial=30, label='Cleanup time (minutes)')
    status = forms.ChoiceField(choices=SERVICE_STATUSES, initial='active')
    isExternalService = forms.BooleanField(required=False, label='Provided by an external company')
    provider_name = forms.CharField(required=False, label='Provider name')
    provider_contact = forms.CharField(required=False, label='Contact person')
    provider_phone = forms.CharField(required=False, label='Provider phone')
    provider_email = forms.EmailField(required=False, label='Provider email')
    provider_contract = forms.CharField(required=False, label='Contract details')
    provider_commission = forms.DecimalField(min_value=0, max_value=100, required=False, label='Commission (%)')

    def __init__(self, *args, **kwargs):
        self.editing = kwargs.pop('editing', False)
        super().__init__(*args, **kwargs)

    def clean(self):
        cleaned_data = super().clean()
        if cleaned_data.get('priceType') == 'custom' and not cleaned_data.get('customPriceDetails'):
            self.add_error('customPriceDetails', 'Describe how a custom price is worked out.')
        if cleaned_data.get('isExternalService') and not cleaned_data.get('provider_name'):
            self.add_error('provider_name', 'External services need a provider name.')
        minimum = cleaned_data.get('minimumQuantity')
        maximum = cleaned_data.get('maximumQuantity')
        if minimum and maximum and maximum < minimum:
            self.add_error('maximumQuantity', 'Maximum quantity cannot be below the minimum.')
        return cleaned_data

    def to_payload(self, hotel_id=None):
        cd = dict(self.cleaned_data)
        provider = {target: cd.pop(source) for source, target in EXTERNAL_PROVIDER_FIELDS.items()}
        cd['price'] = money(cd['price'])
        if cd['isExternalService']:
            if provider['commissionRate'] is not None:
                provider['commissionRate'] = money(provider['commissionRate'])
            cd['externalProvider'] = provider
        if hotel_id:
            cd['hotel'] = hotel_id
        return compact(cd, clear_blank=self.editing)


def initial_from_service(service):
    provider = service.get('externalProvider') or {}
    initial = {field: service.get(field) for field in EventServiceForm.base_fields if field in service}
    for source, target in EXTERNAL_PROVIDER_FIELDS.items():
        initial[source] = provider.get(target)
    return initial
