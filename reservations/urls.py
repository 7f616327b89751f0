from django.urls import path
from . import views

app_name = 'reservations'

urlpatterns = [
    path('', views.dashboard, name='dashboard'),
    path('bookings/', views.booking_list, name='booking_list'),
    path('bookings/new/', views.booking_new, name='booking_new'),
    path('bookings/calendar/', views.booking_calendar, name='booking_calendar'),
    path('bookings/<str:booking_id>/', views.booking_detail, name='booking_detail'),
    path('bookings/<str:booking_id>/edit/', views.booking_edit, name='booking_edit'),
    path('bookings/<str:booking_id>/cancel/', views.booking_cancel, name='booking_cancel'),
    path('bookings/<str:booking_id>/check-in/', views.booking_check_in, name='booking_check_in'),
    path('bookings/<str:booking_id>/check-out/', views.booking_check_out, name='booking_check_out'),
]
