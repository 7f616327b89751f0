from django.urls import path
from . import views

app_name = 'hotels'

urlpatterns = [
    path('', views.hotel_list, name='hotel_list'),
    path('new/', views.hotel_new, name='hotel_new'),
    path('users/<str:user_id>/', views.user_access, name='user_access'),
    path('users/<str:user_id>/<str:hotel_id>/remove/', views.user_access_remove, name='user_access_remove'),
    path('users/<str:user_id>/<str:hotel_id>/default/', views.user_default_hotel, name='user_default_hotel'),
    path('<str:hotel_id>/', views.hotel_detail, name='hotel_detail'),
    path('<str:hotel_id>/edit/', views.hotel_edit, name='hotel_edit'),
    path('<str:hotel_id>/delete/', views.hotel_delete, name='hotel_delete'),
    path('<str:hotel_id>/setup/', views.setup_start, name='setup_start'),
    path('<str:hotel_id>/setup/<int:step>/', views.setup_step, name='setup_step'),
]
