from django.urls import path
from . import views

app_name = 'invoices'

urlpatterns = [
    path('', views.invoice_list, name='invoice_list'),
    path('new/', views.invoice_new, name='invoice_new'),
    path('<str:invoice_id>/', views.invoice_detail, name='invoice_detail'),
    path('<str:invoice_id>/edit/', views.invoice_edit, name='invoice_edit'),
    path('<str:invoice_id>/delete/', views.invoice_delete, name='invoice_delete'),
    path('<str:invoice_id>/issue/', views.invoice_issue, name='invoice_issue'),
    path('<str:invoice_id>/cancel/', views.invoice_cancel, name='invoice_cancel'),
    path('<str:invoice_id>/payment/', views.invoice_payment, name='invoice_payment'),
    path('<str:invoice_id>/email/', views.invoice_email, name='invoice_email'),
    path('<str:invoice_id>/pdf/', views.invoice_pdf, name='invoice_pdf'),
]
