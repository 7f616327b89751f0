from django.urls import path
from . import views

app_name = 'configuration'

urlpatterns = [
    path('', views.overview, name='overview'),
    path('edit/', views.configuration_edit, name='configuration_edit'),
    path('branding/', views.branding_edit, name='branding_edit'),
    path('banking/', views.banking_edit, name='banking_edit'),
    path('inheritance/', views.inheritance_edit, name='inheritance_edit'),
    path('generate-number/', views.generate_number, name='generate_number'),
    path('sync/', views.sync_from_chain, name='sync_from_chain'),
]
