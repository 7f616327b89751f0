from django.shortcuts import redirect, render
from django.urls import reverse

from core.auth import current_hotel_id
from core.decorators import api_login_required
from core.filters import paginate
from . import services
from .forms import BulkActionForm, EventServiceForm, ServiceFilterForm, initial_from_service


def _hotel(request):
    return request.GET.get('hotel') or current_hotel_id(request)


@api_login_required
def service_list(request):
    """Event services with search, filters, price sort and bulk status changes."""
    hotel_id = _hotel(request)
    all_services = services.get_services(request, hotel_id)

    if request.method == 'POST':
        bulk_form = BulkActionForm(request.POST, service_ids=[s.get('_id') for s in all_services])
        if bulk_form.is_valid():
            services.bulk_update_services(
                request, bulk_form.cleaned_data['service_ids'], bulk_form.cleaned_data['action'],
            )
            return redirect(request.get_full_path())
    else:
        bulk_form = BulkActionForm()

    filter_form = ServiceFilterForm(request.GET or None)
    criteria = filter_form.cleaned_data if filter_form.is_valid() else {}
    matches = services.filter_services(
        all_services,
        query=criteria.get('q'),
        status=criteria.get('status'),
        category=criteria.get('category'),
        price_type=criteria.get('price_type'),
        provider=criteria.get('provider') or 'all',
        price_sort=criteria.get('sort'),
    )
    external = sum(1 for s in all_services if s.get('isExternalService'))
    return render(request, 'events/service_list.html', {
        'filter_form': filter_form,
        'bulk_form': bulk_form,
        'page_obj': paginate(request, matches),
        'match_count': len(matches),
        'stats': [
            ('Total services', len(all_services)),
            ('Active', sum(1 for s in all_services if s.get('status') == 'active')),
            ('Internal', len(all_services) - external),
            ('External', external),
        ],
    })


@api_login_required
def service_category(request, category):
    """Services of one category, straight from the category endpoint."""
    return render(request, 'events/service_category.html', {
        'category': category,
        'services': services.get_services_by_category(request, category),
    })


def _load_service(request, service_id):
    service = services.get_service(request, service_id)
    return service if isinstance(service, dict) else None


@api_login_required
def service_detail(request, service_id):
    service = _load_service(request, service_id)
    if service is None:
        return redirect('events:service_list')
    return render(request, 'events/service_detail.html', {'service': service})


@api_login_required
def service_new(request):
    if request.method == 'POST':
        form = EventServiceForm(request.POST)
        if form.is_valid():
            response = services.create_service(request, form.to_payload(_hotel(request)))
            if response.ok:
                return redirect('events:service_list')
    else:
        form = EventServiceForm()
    return render(request, 'core/form_page.html', {
        'form': form, 'title': 'New event service', 'submit_label': 'Create service',
        'cancel_url': reverse('events:service_list'),
    })


@api_login_required
def service_edit(request, service_id):
    service = _load_service(request, service_id)
    if service is None:
        return redirect('events:service_list')
    if request.method == 'POST':
        form = EventServiceForm(request.POST, editing=True)
        if form.is_valid() and services.update_service(request, service_id, form.to_payload()).ok:
            return redirect('events:service_detail', service_id=service_id)
    else:
        form = EventServiceForm(initial=initial_from_service(service), editing=True)
    return render(request, 'core/form_page.html', {
        'form': form, 'title': f"Edit {service.get('name', 'service')}",
        'cancel_url': reverse('events:service_detail', args=[service_id]),
    })


@api_login_required
def service_delete(request, service_id):
    service = _load_service(request, service_id)
    if service is None:
        return redirect('events:service_list')
    if request.method == 'POST':
        if services.delete_service(request, service_id, service.get('name')).ok:
            return redirect('events:service_list')
    return render(request, 'core/confirm_page.html', {
        'title': 'Delete service',
        'question': f"Delete \"{service.get('name')}\"? This cannot be undone.",
        'submit_label': 'Delete',
        'cancel_url': reverse('events:service_detail', args=[service_id]),
    })
