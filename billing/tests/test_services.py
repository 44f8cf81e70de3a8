"""Tests for issuing invoices, quotes and credit notes."""

import logging
from decimal import Decimal

import pytest
from django.core.files.storage import default_storage
from django.utils import timezone

from billing import services
from billing.exceptions import DocumentValidationError, InvalidStatusTransition
from billing.models import (
    ClientInvoice,
    CreditNoteStatus,
    DocumentType,
    InvoiceKind,
    InvoiceSlipReference,
    InvoiceStatus,
    NumberSequence,
    QuoteStatus,
)
from billing.numbering import bucket_prefix
from slips.models import SlipType


def prefix(document_type):
    return bucket_prefix(document_type, timezone.localdate())


@pytest.mark.django_db
class TestInvoiceFromSlip:
    def test_invoice_amounts_and_number(self, transport_slip, billing_user):
        invoice = services.create_invoice_from_slip(transport_slip, user=billing_user)
        assert invoice.numero == f"{prefix(DocumentType.INVOICE)}-01"
        assert invoice.montant_ht == Decimal("100.00")
        assert invoice.tva_rate == Decimal("20")
        assert invoice.tva == Decimal("20.00")
        assert invoice.montant_ttc == Decimal("120.00")
        assert invoice.kind == InvoiceKind.SINGLE
        assert invoice.statut == InvoiceStatus.PENDING
        assert invoice.transport_slip == transport_slip
        assert invoice.client == transport_slip.client
        assert invoice.created_by == billing_user
        assert invoice.date_emission == timezone.localdate()

    def test_pdf_is_stored_and_linked(self, transport_slip):
        invoice = services.create_invoice_from_slip(transport_slip)
        assert invoice.lien_pdf == f"invoices/invoice-{invoice.numero}.pdf"
        with default_storage.open(invoice.lien_pdf, "rb") as fh:
            assert fh.read().startswith(b"%PDF")

    def test_freight_slip_billed_at_selling_price(self, freight_slip):
        invoice = services.create_invoice_from_slip(freight_slip)
        assert invoice.freight_slip == freight_slip
        assert invoice.transport_slip is None
        assert invoice.montant_ht == Decimal("910.00")
        assert invoice.montant_ttc == Decimal("1092.00")

    def test_client_vat_rate_is_used(self, make_transport_slip, other_client):
        slip = make_transport_slip("100.00", client=other_client)
        invoice = services.create_invoice_from_slip(slip)
        assert invoice.tva_rate == Decimal("5.5")
        assert invoice.tva == Decimal("5.50")

    def test_consecutive_invoices_are_numbered_in_order(self, make_transport_slip):
        numbers = [services.create_invoice_from_slip(make_transport_slip()).numero for _ in range(3)]
        p = prefix(DocumentType.INVOICE)
        assert numbers == [f"{p}-01", f"{p}-02", f"{p}-03"]

    def test_slip_cannot_be_invoiced_twice(self, transport_slip):
        services.create_invoice_from_slip(transport_slip)
        with pytest.raises(DocumentValidationError, match="déjà facturé"):
            services.create_invoice_from_slip(transport_slip)
        assert ClientInvoice.objects.count() == 1

    def test_slip_without_client_is_rejected(self, make_transport_slip):
        slip = make_transport_slip()
        slip.client = None
        slip.save()
        with pytest.raises(DocumentValidationError, match="pas de client"):
            services.create_invoice_from_slip(slip)

    def test_reference_row_records_the_slip(self, transport_slip):
        invoice = services.create_invoice_from_slip(transport_slip)
        ref = InvoiceSlipReference.objects.get(invoice=invoice)
        assert (ref.slip_type, ref.slip_id) == (SlipType.TRANSPORT, transport_slip.pk)
        assert services.invoice_exists_for_slip(transport_slip) is True

    def test_failed_issue_does_not_consume_a_number(self, transport_slip, monkeypatch, caplog):
        original = services.store_document_pdf

        def storage_down(document):
            raise OSError("storage unavailable")

        monkeypatch.setattr(services, "store_document_pdf", storage_down)
        monkeypatch.setattr(logging.getLogger("billing"), "propagate", True)
        with caplog.at_level(logging.WARNING, logger="billing.services"), pytest.raises(OSError):
            services.create_invoice_from_slip(transport_slip)
        (warning,) = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert "Facture generation aborted" in warning.getMessage()
        assert "storage unavailable" in warning.getMessage()
        assert not ClientInvoice.objects.exists()
        assert not NumberSequence.objects.filter(prefix=prefix(DocumentType.INVOICE)).exists()

        monkeypatch.setattr(services, "store_document_pdf", original)
        invoice = services.create_invoice_from_slip(transport_slip)
        assert invoice.numero == f"{prefix(DocumentType.INVOICE)}-01"

    def test_get_invoice_by_number(self, transport_slip):
        invoice = services.create_invoice_from_slip(transport_slip)
        assert services.get_invoice_by_number(f" {invoice.numero} ") == invoice
        assert services.get_invoice_by_number("F0001-99") is None


@pytest.mark.django_db
class TestGroupedInvoice:
    def test_totals_and_slip_references(self, make_transport_slip, billing_user):
        slips = [
            make_transport_slip("100.00", order_number="PO-1"),
            make_transport_slip("250.50"),
            make_transport_slip("49.50", goods_description="Palettes"),
        ]
        invoice = services.create_grouped_invoice(slips, user=billing_user)

        assert invoice.kind == InvoiceKind.GROUPED
        assert invoice.montant_ht == Decimal("400.00")
        assert invoice.tva == Decimal("80.00")
        assert invoice.montant_ttc == Decimal("480.00")
        assert invoice.transport_slip is None
        assert invoice.metadata["slip_type"] == "transport"
        refs = invoice.grouped_slips
        assert [r["number"] for r in refs] == [s.number for s in slips]
        assert refs[0]["order_number"] == "PO-1"
        assert refs[1]["order_number"] is None
        assert refs[1]["amount"] == "250.50"
        assert refs[2]["description"] == "Palettes"
        assert invoice.slip_references.count() == 3

    def test_grouped_slips_cannot_be_invoiced_again(self, make_transport_slip):
        first, second = make_transport_slip(), make_transport_slip()
        services.create_grouped_invoice([first, second])
        with pytest.raises(DocumentValidationError, match="déjà facturé"):
            services.create_invoice_from_slip(second)
        with pytest.raises(DocumentValidationError, match="déjà facturé"):
            services.create_grouped_invoice([first, make_transport_slip()])

    def test_rejected_group_leaves_numbering_untouched(self, make_transport_slip):
        invoiced = make_transport_slip()
        services.create_invoice_from_slip(invoiced)
        with pytest.raises(DocumentValidationError):
            services.create_grouped_invoice([make_transport_slip(), invoiced])
        next_invoice = services.create_invoice_from_slip(make_transport_slip())
        assert next_invoice.numero == f"{prefix(DocumentType.INVOICE)}-02"

    def test_empty_selection(self):
        with pytest.raises(DocumentValidationError, match="Aucun bordereau"):
            services.create_grouped_invoice([])

    def test_slips_must_share_a_client(self, make_transport_slip, other_client):
        with pytest.raises(DocumentValidationError, match="même client"):
            services.create_grouped_invoice([make_transport_slip(), make_transport_slip(client=other_client)])

    def test_slips_must_share_a_type(self, transport_slip, freight_slip):
        with pytest.raises(DocumentValidationError, match="même type"):
            services.create_grouped_invoice([transport_slip, freight_slip])


@pytest.mark.django_db
class TestQuotes:
    def test_create_quote(self, client_company, billing_user):
        quote = services.create_quote(client_company, "  Navette Lyon / Lille  ", "1000", user=billing_user)
        assert quote.numero == f"{prefix(DocumentType.QUOTE)}-01"
        assert quote.description == "Navette Lyon / Lille"
        assert quote.tva == Decimal("200.00")
        assert quote.montant_ttc == Decimal("1200.00")
        assert quote.statut == QuoteStatus.PENDING
        assert quote.lien_pdf == f"quotes/quote-{quote.numero}.pdf"

    def test_explicit_vat_rate_overrides_client(self, client_company):
        quote = services.create_quote(client_company, "Transport", "200", tva_rate=10)
        assert quote.tva == Decimal("20.00")

    def test_description_is_required(self, client_company):
        with pytest.raises(DocumentValidationError, match="description"):
            services.create_quote(client_company, "   ", "200")

    def test_client_is_required(self):
        with pytest.raises(DocumentValidationError, match="client"):
            services.create_quote(None, "Transport", "200")

    def test_quotes_and_invoices_are_numbered_separately(self, client_company, transport_slip):
        services.create_invoice_from_slip(transport_slip)
        quote = services.create_quote(client_company, "Transport", "200")
        assert quote.numero == f"{prefix(DocumentType.QUOTE)}-01"


@pytest.mark.django_db
class TestConvertQuote:
    def test_conversion_copies_amounts(self, client_company, billing_user):
        quote = services.create_quote(client_company, "Transport exceptionnel", "2300", tva_rate=20)
        invoice = services.convert_quote_to_invoice(quote, user=billing_user)
        quote.refresh_from_db()

        assert invoice.kind == InvoiceKind.FROM_QUOTE
        assert invoice.numero == f"{prefix(DocumentType.INVOICE)}-01"
        assert (invoice.montant_ht, invoice.tva, invoice.montant_ttc) == (
            quote.montant_ht,
            quote.tva,
            quote.montant_ttc,
        )
        assert invoice.metadata["quote_numero"] == quote.numero
        assert quote.statut == QuoteStatus.INVOICED
        assert quote.invoice == invoice

    def test_quote_is_invoiced_once(self, client_company):
        quote = services.create_quote(client_company, "Transport", "100")
        services.convert_quote_to_invoice(quote)
        with pytest.raises(DocumentValidationError, match="déjà facturé"):
            services.convert_quote_to_invoice(quote)

    def test_refused_quote_cannot_be_invoiced(self, client_company):
        quote = services.create_quote(client_company, "Transport", "100")
        services.change_status(quote, QuoteStatus.REFUSED)
        with pytest.raises(DocumentValidationError, match="refusé"):
            services.convert_quote_to_invoice(quote)
        assert not ClientInvoice.objects.exists()


@pytest.mark.django_db
class TestCreditNotes:
    def test_credit_note_against_invoice(self, make_transport_slip, other_client, billing_user):
        invoice = services.create_invoice_from_slip(make_transport_slip("100.00", client=other_client))
        credit_note = services.create_credit_note("Retard de livraison", "50", invoice=invoice, user=billing_user)

        assert credit_note.numero == f"{prefix(DocumentType.CREDIT_NOTE)}-001"
        assert credit_note.client == other_client
        assert credit_note.invoice == invoice
        assert credit_note.tva_rate == invoice.tva_rate
        assert credit_note.tva == Decimal("2.75")
        assert credit_note.montant_ttc == Decimal("52.75")
        assert credit_note.statut == CreditNoteStatus.ISSUED
        assert credit_note.lien_pdf == f"credit-notes/credit-note-{credit_note.numero}.pdf"

    def test_credit_note_for_client_only(self, client_company):
        credit_note = services.create_credit_note("Geste commercial", "30", client=client_company)
        assert credit_note.invoice is None
        assert credit_note.tva == Decimal("6.00")

    def test_amount_above_invoice_is_rejected(self, transport_slip):
        invoice = services.create_invoice_from_slip(transport_slip)
        with pytest.raises(DocumentValidationError, match="dépasser"):
            services.create_credit_note("Erreur", "100.01", invoice=invoice)

    def test_partial_credit_note_may_exceed_invoice(self, transport_slip):
        invoice = services.create_invoice_from_slip(transport_slip)
        credit_note = services.create_credit_note("Litige", "150", invoice=invoice, is_partial=True)
        assert credit_note.is_partial is True
        assert credit_note.montant_ht == Decimal("150.00")

    @pytest.mark.parametrize("amount", ["0", "-20"])
    def test_amount_must_be_positive(self, client_company, amount):
        with pytest.raises(DocumentValidationError, match="supérieur à 0"):
            services.create_credit_note("Erreur", amount, client=client_company)

    def test_motif_is_required(self, client_company):
        with pytest.raises(DocumentValidationError, match="motif"):
            services.create_credit_note("", "20", client=client_company)

    def test_invoice_or_client_is_required(self):
        with pytest.raises(DocumentValidationError, match="soit une facture, soit un client"):
            services.create_credit_note("Erreur", "20")

    def test_rejected_credit_note_consumes_no_number(self, client_company):
        with pytest.raises(DocumentValidationError):
            services.create_credit_note("Erreur", "0", client=client_company)
        credit_note = services.create_credit_note("Erreur", "10", client=client_company)
        assert credit_note.numero.endswith("-001")


@pytest.mark.django_db
class TestChangeStatus:
    def test_invoice_paid_and_back(self, transport_slip):
        invoice = services.create_invoice_from_slip(transport_slip)
        services.change_status(invoice, InvoiceStatus.PAID)
        invoice.refresh_from_db()
        assert invoice.statut == InvoiceStatus.PAID
        services.change_status(invoice, InvoiceStatus.PENDING)
        invoice.refresh_from_db()
        assert invoice.statut == InvoiceStatus.PENDING

    def test_marking_paid_changes_nothing_else(self, transport_slip):
        invoice = services.create_invoice_from_slip(transport_slip)
        before = (invoice.numero, invoice.montant_ttc, invoice.lien_pdf)
        services.change_status(invoice, InvoiceStatus.PAID)
        invoice.refresh_from_db()
        assert (invoice.numero, invoice.montant_ttc, invoice.lien_pdf) == before

    def test_same_status_is_not_a_transition(self, transport_slip):
        invoice = services.create_invoice_from_slip(transport_slip)
        with pytest.raises(InvalidStatusTransition, match="Cannot transition"):
            services.change_status(invoice, InvoiceStatus.PENDING)

    def test_unknown_status_is_rejected(self, client_company):
        quote = services.create_quote(client_company, "Transport", "100")
        with pytest.raises(ValueError):
            services.change_status(quote, "archive")

    def test_invoiced_quote_is_final(self, client_company):
        quote = services.create_quote(client_company, "Transport", "100")
        services.convert_quote_to_invoice(quote)
        quote.refresh_from_db()
        for status in (QuoteStatus.PENDING, QuoteStatus.ACCEPTED, QuoteStatus.REFUSED):
            with pytest.raises(InvalidStatusTransition):
                services.change_status(quote, status)

    def test_quote_cannot_be_marked_invoiced_by_hand(self, client_company):
        quote = services.create_quote(client_company, "Transport", "100")
        services.change_status(quote, QuoteStatus.ACCEPTED)
        with pytest.raises(InvalidStatusTransition):
            services.change_status(quote, QuoteStatus.INVOICED)
        quote.refresh_from_db()
        assert quote.statut == QuoteStatus.ACCEPTED

        invoice = services.convert_quote_to_invoice(quote)
        quote.refresh_from_db()
        assert (quote.statut, quote.invoice) == (QuoteStatus.INVOICED, invoice)

    def test_validation_failure_is_logged(self, client_company, monkeypatch, caplog):
        monkeypatch.setattr(logging.getLogger("billing"), "propagate", True)
        with caplog.at_level(logging.WARNING, logger="billing.services"), pytest.raises(DocumentValidationError):
            services.create_quote(client_company, "  ", "100")
        assert any("Devis generation aborted" in r.getMessage() for r in caplog.records)

    def test_refused_quote_can_be_reopened(self, client_company):
        quote = services.create_quote(client_company, "Transport", "100")
        services.change_status(quote, QuoteStatus.REFUSED)
        with pytest.raises(InvalidStatusTransition):
            services.change_status(quote, QuoteStatus.INVOICED)
        services.change_status(quote, QuoteStatus.ACCEPTED)
        quote.refresh_from_db()
        assert quote.statut == QuoteStatus.ACCEPTED

    def test_credit_note_booking(self, client_company):
        credit_note = services.create_credit_note("Erreur", "10", client=client_company)
        services.change_status(credit_note, CreditNoteStatus.BOOKED)
        credit_note.refresh_from_db()
        assert credit_note.statut == CreditNoteStatus.BOOKED
