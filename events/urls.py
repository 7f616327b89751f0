from django.urls import path
from . import views

app_name = 'events'

urlpatterns = [
    path('services/', views.service_list, name='service_list'),
    path('services/new/', views.service_new, name='service_new'),
    path('services/category/<str:category>/', views.service_category, name='service_category'),
    path('services/<str:service_id>/', views.service_detail, name='service_detail'),
    path('services/<str:service_id>/edit/', views.service_edit, name='service_edit'),
    path('services/<str:service_id>/delete/', views.service_delete, name='service_delete'),
]
