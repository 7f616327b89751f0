from django.urls import path
from . import views

app_name = 'chains'

urlpatterns = [
    path('', views.chain_list, name='chain_list'),
    path('new/', views.chain_new, name='chain_new'),
    path('<str:chain_code>/', views.chain_detail, name='chain_detail'),
    path('<str:chain_code>/configuration/', views.chain_configuration, name='chain_configuration'),
    path('<str:chain_code>/hotels/add/', views.hotel_add, name='hotel_add'),
    path('<str:chain_code>/hotels/<str:hotel_id>/remove/', views.hotel_remove, name='hotel_remove'),
    path('<str:chain_code>/users/grant/', views.user_grant, name='user_grant'),
    path('<str:chain_code>/users/<str:user_id>/revoke/', views.user_revoke, name='user_revoke'),
    path('<str:chain_code>/sync/', views.chain_sync, name='chain_sync'),
    path('<str:chain_code>/sync-logs/', views.sync_log_list, name='sync_log_list'),
    path('<str:chain_code>/sync-logs/<str:sync_id>/', views.sync_log_detail, name='sync_log_detail'),
]
