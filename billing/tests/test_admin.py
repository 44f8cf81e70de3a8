"""Issued documents cannot be edited from the admin."""

import pytest
from django.contrib import admin
from django.urls import reverse

from billing import services
from billing.admin import ClientInvoiceAdmin, ClientQuoteAdmin, CreditNoteAdmin
from billing.models import ClientInvoice, ClientQuote, CreditNote, InvoiceStatus


@pytest.mark.django_db
class TestIssuedDocumentAdmin:
    def _editable_fields(self, admin_class, model, obj, rf, admin_user):
        request = rf.get("/")
        request.user = admin_user
        return list(admin_class(model, admin.site).get_form(request, obj).base_fields)

    def test_invoice_has_no_editable_field(self, rf, admin_user, transport_slip):
        invoice = services.create_invoice_from_slip(transport_slip)
        assert self._editable_fields(ClientInvoiceAdmin, ClientInvoice, invoice, rf, admin_user) == []

    def test_quote_has_no_editable_field(self, rf, admin_user, client_company):
        quote = services.create_quote(client_company, "Transport Lyon / Lille", "100")
        assert self._editable_fields(ClientQuoteAdmin, ClientQuote, quote, rf, admin_user) == []

    def test_credit_note_has_no_editable_field(self, rf, admin_user, client_company):
        credit_note = services.create_credit_note("Erreur de tarif", "10", client=client_company)
        assert self._editable_fields(CreditNoteAdmin, CreditNote, credit_note, rf, admin_user) == []

    def test_change_page_shows_status_read_only(self, admin_client, transport_slip):
        invoice = services.create_invoice_from_slip(transport_slip)
        response = admin_client.get(reverse("admin:billing_clientinvoice_change", args=[invoice.pk]))
        assert response.status_code == 200
        assert 'name="statut"' not in response.content.decode()
        invoice.refresh_from_db()
        assert invoice.statut == InvoiceStatus.PENDING

    def test_documents_cannot_be_added_or_deleted(self, rf, admin_user, transport_slip):
        invoice = services.create_invoice_from_slip(transport_slip)
        request = rf.get("/")
        request.user = admin_user
        model_admin = ClientInvoiceAdmin(ClientInvoice, admin.site)
        assert model_admin.has_add_permission(request) is False
        assert model_admin.has_delete_permission(request, invoice) is False
