from django.urls import path, include
from django.views.generic import RedirectView

urlpatterns = [
    path('', RedirectView.as_view(pattern_name='reservations:dashboard', permanent=False)),
    path('auth/', include('accounts.urls')),
    path('reservations/', include('reservations.urls')),
    path('guests/', include('guests.urls')),
    path('rooms/', include('rooms.urls')),
    path('invoices/', include('invoices.urls')),
    path('payments/', include('payments.urls')),
    path('events/', include('events.urls')),
    path('configuration/', include('configuration.urls')),
    path('admin/hotels/', include('hotels.urls')),
    path('admin/chains/', include('chains.urls')),
    path('admin/staff/', include('staff.urls')),
    path('reports/', include('reports.urls')),
]
