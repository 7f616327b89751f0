from django.urls import path
from . import views

app_name = 'rooms'

urlpatterns = [
    path('', views.room_list, name='room_list'),
    path('new/', views.room_new, name='room_new'),
    path('connect/', views.room_connect, name='room_connect'),
    path('availability/', views.room_availability, name='room_availability'),
    path('types/', views.room_type_list, name='room_type_list'),
    path('types/new/', views.room_type_new, name='room_type_new'),
    path('types/<str:room_type_id>/', views.room_type_detail, name='room_type_detail'),
    path('types/<str:room_type_id>/edit/', views.room_type_edit, name='room_type_edit'),
    path('types/<str:room_type_id>/delete/', views.room_type_delete, name='room_type_delete'),
    path('<str:room_id>/', views.room_detail, name='room_detail'),
    path('<str:room_id>/edit/', views.room_edit, name='room_edit'),
    path('<str:room_id>/delete/', views.room_delete, name='room_delete'),
    path('<str:room_id>/status/', views.room_status, name='room_status'),
    path('<str:room_id>/disconnect/', views.room_disconnect, name='room_disconnect'),
]
