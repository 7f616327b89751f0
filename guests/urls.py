from django.urls import path
from . import views

app_name = 'guests'

urlpatterns = [
    path('', views.guest_list, name='guest_list'),
    path('new/', views.guest_new, name='guest_new'),
    path('<str:guest_id>/', views.guest_detail, name='guest_detail'),
    path('<str:guest_id>/edit/', views.guest_edit, name='guest_edit'),
    path('<str:guest_id>/delete/', views.guest_delete, name='guest_delete'),
    path('<str:guest_id>/loyalty/', views.guest_loyalty, name='guest_loyalty'),
    path('<str:guest_id>/vip/', views.guest_toggle_vip, name='guest_toggle_vip'),
    path('<str:guest_id>/blacklist/', views.guest_blacklist, name='guest_blacklist'),
]
