from django.contrib import messages
from django.shortcuts import redirect, render
from django.urls import reverse
from django.views.decorators.http import require_POST

from core.decorators import api_login_required
from . import services
from .forms import (
    BankingForm, BrandingForm, ConfigurationForm, GenerateNumberForm, InheritanceForm,
    initial_from_banking, initial_from_branding, initial_from_configuration,
)


def flatten(data, prefix=''):
    """Nested configuration dict as (dotted key, value) rows for display."""
    rows = []
    for key, value in (data or {}).items():
        name = f'{prefix}{key}'
        if isinstance(value, dict):
            rows.extend(flatten(value, f'{name}.'))
        elif isinstance(value, list):
            rows.append((name, ', '.join(str(v) for v in value if not isinstance(v, dict)) or f'{len(value)} entries'))
        else:
            rows.append((name, value))
    return rows


def _no_hotel(request):
    messages.error(request, 'No hotel is linked to your account.')
    return redirect('reservations:dashboard')


@api_login_required
def overview(request):
    """Effective configuration of the hotel, section by section, with its inheritance flags."""
    hotel_id = services.hotel_for(request)
    if not hotel_id:
        return _no_hotel(request)

    configuration = services.get_configuration(request, hotel_id, notify=False)
    effective = services.get_effective_configuration(request, hotel_id) if configuration else {}
    resolved = effective.get('effectiveConfiguration') or configuration or {}
    inheritance = effective.get('inheritanceSettings') or (configuration or {}).get('chainInheritance') or {}
    sections = [
        {
            'key': key,
            'label': label,
            'inherited': bool(inheritance.get(key)),
            'rows': flatten(resolved.get(key)),
        }
        for key, label in services.INHERITABLE_SECTIONS
    ]
    return render(request, 'configuration/overview.html', {
        'hotel_id': hotel_id,
        'configuration': configuration,
        'sections': sections,
        'has_chain': bool(effective.get('chainConfiguration')),
        'document_settings': flatten(services.get_document_settings(request, hotel_id)) if configuration else [],
        'number_form': GenerateNumberForm(),
    })


@api_login_required
def configuration_edit(request):
    """Create the hotel configuration, or update the general section of an existing one."""
    hotel_id = services.hotel_for(request)
    if not hotel_id:
        return _no_hotel(request)
    configuration = services.get_configuration(request, hotel_id, notify=False)

    if request.method == 'POST':
        form = ConfigurationForm(request.POST)
        if form.is_valid():
            if configuration:
                response = services.update_configuration(request, hotel_id, form.to_payload())
            else:
                response = services.create_configuration(request, form.to_payload(hotel_id))
            if response.ok:
                return redirect('configuration:overview')
    else:
        form = ConfigurationForm(initial=initial_from_configuration(configuration) if configuration else None)
    return render(request, 'core/form_page.html', {
        'form': form,
        'title': 'Hotel configuration' if configuration else 'Create hotel configuration',
        'cancel_url': reverse('configuration:overview'),
    })


def _section_page(request, title, form):
    return render(request, 'core/form_page.html', {
        'form': form, 'title': title, 'cancel_url': reverse('configuration:overview'),
    })


@api_login_required
def branding_edit(request):
    hotel_id = services.hotel_for(request)
    if not hotel_id:
        return _no_hotel(request)
    if request.method == 'POST':
        form = BrandingForm(request.POST, request.FILES)
        if form.is_valid():
            logo = form.cleaned_data.get('logo')
            payload = form.to_payload(services.image_data_url(logo) if logo else None)
            if services.update_branding(request, hotel_id, payload).ok:
                return redirect('configuration:overview')
    else:
        configuration = services.get_configuration(request, hotel_id) or {}
        form = BrandingForm(initial=initial_from_branding(configuration.get('branding')))
    return _section_page(request, 'Branding', form)


@api_login_required
def banking_edit(request):
    hotel_id = services.hotel_for(request)
    if not hotel_id:
        return _no_hotel(request)
    if request.method == 'POST':
        form = BankingForm(request.POST)
        if form.is_valid() and services.update_banking(request, hotel_id, form.to_payload()).ok:
            return redirect('configuration:overview')
    else:
        configuration = services.get_configuration(request, hotel_id) or {}
        form = BankingForm(initial=initial_from_banking(configuration.get('banking')))
    return _section_page(request, 'Banking', form)


@api_login_required
def inheritance_edit(request):
    hotel_id = services.hotel_for(request)
    if not hotel_id:
        return _no_hotel(request)
    if request.method == 'POST':
        form = InheritanceForm(request.POST)
        if form.is_valid() and services.update_inheritance(request, hotel_id, form.to_payload()).ok:
            return redirect('configuration:overview')
    else:
        configuration = services.get_configuration(request, hotel_id) or {}
        form = InheritanceForm(initial=configuration.get('chainInheritance') or {})
    return _section_page(request, 'Chain inheritance', form)


@api_login_required
@require_POST
def generate_number(request):
    hotel_id = services.hotel_for(request)
    form = GenerateNumberForm(request.POST)
    if hotel_id and form.is_valid():
        document_type = form.cleaned_data['document_type']
        number = services.generate_document_number(request, hotel_id, document_type)
        if number:
            messages.success(request, f'Next {document_type} number: {number}')
    return redirect('configuration:overview')


@api_login_required
@require_POST
def sync_from_chain(request):
    hotel_id = services.hotel_for(request)
    if hotel_id:
        services.sync_from_chain(request, hotel_id)
    return redirect('configuration:overview')
