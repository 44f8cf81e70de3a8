from django.urls import path

from . import views

app_name = "billing"

urlpatterns = [
    path("invoices/", views.invoice_list, name="invoice_list"),
    path("invoices/<int:pk>/", views.invoice_detail, name="invoice_detail"),
    path("invoices/<int:pk>/status/", views.invoice_status, name="invoice_status"),
    path(
        "invoices/from-slip/<str:slip_type>/<int:slip_id>/",
        views.invoice_create_from_slip,
        name="invoice_from_slip",
    ),
    path("invoices/grouped/<str:slip_type>/", views.invoice_create_grouped, name="invoice_grouped"),
    path("quotes/", views.quote_list, name="quote_list"),
    path("quotes/new/", views.quote_create, name="quote_create"),
    path("quotes/<int:pk>/status/", views.quote_status, name="quote_status"),
    path("quotes/<int:pk>/convert/", views.quote_convert, name="quote_convert"),
    path("credit-notes/", views.credit_note_list, name="credit_note_list"),
    path("credit-notes/new/", views.credit_note_create, name="credit_note_create"),
    path("credit-notes/<int:pk>/status/", views.credit_note_status, name="credit_note_status"),
    path("pdf/<str:document_type>/<int:pk>/", views.document_pdf, name="pdf"),
]
