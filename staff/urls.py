from django.urls import path
from . import views

app_name = 'staff'

urlpatterns = [
    path('users/', views.user_list, name='user_list'),
    path('users/new/', views.user_new, name='user_new'),
    path('users/<str:user_id>/', views.user_detail, name='user_detail'),
    path('users/<str:user_id>/edit/', views.user_edit, name='user_edit'),
    path('users/<str:user_id>/delete/', views.user_delete, name='user_delete'),
    path('users/<str:user_id>/reset-password/', views.user_reset_password, name='user_reset_password'),
    path('roles/', views.role_list, name='role_list'),
    path('roles/new/', views.role_new, name='role_new'),
    path('roles/<str:role_id>/edit/', views.role_edit, name='role_edit'),
    path('roles/<str:role_id>/delete/', views.role_delete, name='role_delete'),
    path('permissions/', views.permission_list, name='permission_list'),
    path('permissions/new/', views.permission_new, name='permission_new'),
    path('permissions/<str:permission_id>/edit/', views.permission_edit, name='permission_edit'),
    path('permissions/<str:permission_id>/delete/', views.permission_delete, name='permission_delete'),
]
