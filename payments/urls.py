from django.urls import path
from . import views

app_name = 'payments'

urlpatterns = [
    path('', views.payment_list, name='payment_list'),
    path('new/', views.payment_new, name='payment_new'),
    path('<str:payment_id>/', views.payment_detail, name='payment_detail'),
    path('<str:payment_id>/edit/', views.payment_edit, name='payment_edit'),
    path('<str:payment_id>/delete/', views.payment_delete, name='payment_delete'),
    path('<str:payment_id>/refund/', views.payment_refund, name='payment_refund'),
    path('<str:payment_id>/receipt/', views.payment_issue_receipt, name='payment_issue_receipt'),
    path('<str:payment_id>/receipt.pdf', views.payment_receipt_pdf, name='payment_receipt_pdf'),
    path('<str:payment_id>/email/', views.payment_email, name='payment_email'),
]
