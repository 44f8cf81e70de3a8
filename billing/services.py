"""
Document issuing — invoices, quotes and credit notes.

Every issuing function runs as a single transaction:

    1. validate input (DocumentValidationError before any write)
    2. allocate the number (billing.numbering, locked counter row)
    3. compute amounts (billing.amounts)
    4. insert the row, render and store the PDF, record lien_pdf

Any failure rolls the whole thing back, including the number increment.
Errors are never swallowed here; views turn BillingError into a message.
"""

import functools
import logging

from django.db import transaction
from django.utils import timezone

from slips.models import SlipType

from .amounts import Amounts, compute_amounts, to_decimal, validate_credit_note_amount
from .exceptions import DocumentValidationError, InvalidStatusTransition
from .models import (
    ClientInvoice,
    ClientQuote,
    CreditNote,
    CreditNoteStatus,
    DocumentType,
    InvoiceKind,
    InvoiceSlipReference,
    InvoiceStatus,
    QuoteStatus,
)
from .numbering import next_document_number
from .pdf import store_document_pdf

logger = logging.getLogger(__name__)

# Valid status transitions per document type, checked by change_status().
# A quote only reaches "facture" through convert_quote_to_invoice()
ALLOWED_TRANSITIONS = {
    DocumentType.INVOICE: {
        InvoiceStatus.PENDING: {InvoiceStatus.PAID},
        InvoiceStatus.PAID: {InvoiceStatus.PENDING},
    },
    DocumentType.QUOTE: {
        QuoteStatus.PENDING: {QuoteStatus.ACCEPTED, QuoteStatus.REFUSED},
        QuoteStatus.ACCEPTED: {QuoteStatus.PENDING, QuoteStatus.REFUSED},
        QuoteStatus.REFUSED: {QuoteStatus.PENDING, QuoteStatus.ACCEPTED},
        QuoteStatus.INVOICED: set(),
    },
    DocumentType.CREDIT_NOTE: {
        CreditNoteStatus.ISSUED: {CreditNoteStatus.BOOKED},
        CreditNoteStatus.BOOKED: {CreditNoteStatus.ISSUED},
    },
}

SLIP_FIELDS = {
    SlipType.TRANSPORT: "transport_slip",
    SlipType.FREIGHT: "freight_slip",
}


def logs_aborted_generation(document_type):
    """Log a warning naming the document type when an issuing call fails, then re-raise."""

    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except Exception as exc:
                logger.warning("%s generation aborted in %s: %s", document_type.label, func.__name__, exc)
                raise

        return wrapper

    return decorator


def _issue(model, *, client, amounts, user=None, date_emission=None, **fields):
    """Number, insert and render one document. Caller holds the transaction."""
    document = model.objects.create(
        numero=next_document_number(model.document_type),
        client=client,
        date_emission=date_emission or timezone.localdate(),
        montant_ht=amounts.montant_ht,
        tva_rate=amounts.tva_rate,
        tva=amounts.tva,
        montant_ttc=amounts.montant_ttc,
        created_by=user,
        **fields,
    )
    document.lien_pdf = store_document_pdf(document)
    document.save(update_fields=["lien_pdf", "updated_at"])
    logger.info(
        "Issued %s %s for client %s (TTC %s)",
        model.document_type.label,
        document.numero,
        client.pk,
        document.montant_ttc,
    )
    return document


def _reload(model, pk):
    return model.objects.select_related("client").get(pk=pk)


# ---------------------------------------------------------------------------
# Invoices
# ---------------------------------------------------------------------------

def invoice_exists_for_slip(slip):
    """True if the slip is already billed, alone or in a grouped invoice."""
    direct = ClientInvoice.objects.filter(**{SLIP_FIELDS[slip.slip_type]: slip}).exists()
    return direct or InvoiceSlipReference.objects.filter(slip_type=slip.slip_type, slip_id=slip.pk).exists()


def _lock_slips(slips):
    """Re-read the slips with a row lock so two requests cannot bill the same slip."""
    model = type(slips[0])
    locked = model.objects.select_for_update().select_related("client").in_bulk([s.pk for s in slips])
    return [locked[s.pk] for s in slips]


def _ensure_not_invoiced(slip):
    if invoice_exists_for_slip(slip):
        raise DocumentValidationError(f"Le bordereau {slip.number} est déjà facturé")


@logs_aborted_generation(DocumentType.INVOICE)
def create_invoice_from_slip(slip, user=None):
    """Issue the invoice for one slip, billed at the slip's selling price."""
    if slip.client_id is None:
        raise DocumentValidationError(f"Le bordereau {slip.number} n'a pas de client")

    with transaction.atomic():
        (slip,) = _lock_slips([slip])
        _ensure_not_invoiced(slip)
        client = slip.client
        amounts = compute_amounts(slip.billable_amount, client.effective_tva_rate)
        invoice = _issue(
            ClientInvoice,
            client=client,
            amounts=amounts,
            user=user,
            kind=InvoiceKind.SINGLE,
            lien_cmr=slip.cmr_file.name or "",
            **{SLIP_FIELDS[slip.slip_type]: slip},
        )
        InvoiceSlipReference.objects.create(invoice=invoice, slip_type=slip.slip_type, slip_id=slip.pk)
    return _reload(ClientInvoice, invoice.pk)


@logs_aborted_generation(DocumentType.INVOICE)
def create_grouped_invoice(slips, user=None):
    """Issue one invoice covering several slips of the same type and client."""
    slips = list(slips)
    if not slips:
        raise DocumentValidationError("Aucun bordereau sélectionné")
    if len({type(s) for s in slips}) > 1:
        raise DocumentValidationError("Les bordereaux doivent être du même type")
    client_id = slips[0].client_id
    if client_id is None or any(s.client_id != client_id for s in slips):
        raise DocumentValidationError("Tous les bordereaux doivent appartenir au même client")

    slip_type = slips[0].slip_type
    with transaction.atomic():
        slips = _lock_slips(slips)
        for slip in slips:
            _ensure_not_invoiced(slip)

        client = slips[0].client
        total_ht = sum((to_decimal(s.billable_amount) for s in slips), start=to_decimal(0))
        amounts = compute_amounts(total_ht, client.effective_tva_rate)
        references = [
            {
                "id": slip.pk,
                "number": slip.number,
                "amount": str(slip.billable_amount),
                "order_number": slip.order_number or None,
                "loading_date": slip.loading_date.isoformat(),
                "description": slip.goods_description,
            }
            for slip in slips
        ]
        invoice = _issue(
            ClientInvoice,
            client=client,
            amounts=amounts,
            user=user,
            kind=InvoiceKind.GROUPED,
            metadata={"slip_type": slip_type.value, "slips": references},
        )
        InvoiceSlipReference.objects.bulk_create(
            [InvoiceSlipReference(invoice=invoice, slip_type=slip_type, slip_id=slip.pk) for slip in slips]
        )
    return _reload(ClientInvoice, invoice.pk)


def get_invoice_by_number(numero):
    """Invoice with this number, or None."""
    return ClientInvoice.objects.select_related("client").filter(numero=numero.strip()).first()


# ---------------------------------------------------------------------------
# Quotes
# ---------------------------------------------------------------------------

@logs_aborted_generation(DocumentType.QUOTE)
def create_quote(client, description, montant_ht, tva_rate=None, date_emission=None, user=None):
    """Issue a quote. The VAT rate defaults to the client's."""
    if client is None:
        raise DocumentValidationError("Le client est obligatoire")
    if not (description or "").strip():
        raise DocumentValidationError("La description est obligatoire")
    if tva_rate is None:
        tva_rate = client.effective_tva_rate
    amounts = compute_amounts(montant_ht, tva_rate)

    with transaction.atomic():
        quote = _issue(
            ClientQuote,
            client=client,
            amounts=amounts,
            user=user,
            date_emission=date_emission,
            description=description.strip(),
        )
    return _reload(ClientQuote, quote.pk)


@logs_aborted_generation(DocumentType.INVOICE)
def convert_quote_to_invoice(quote, user=None):
    """Invoice a quote at its quoted amounts and mark it 'facture'."""
    with transaction.atomic():
        quote = ClientQuote.objects.select_for_update().select_related("client").get(pk=quote.pk)
        if quote.invoice_id or quote.statut == QuoteStatus.INVOICED:
            raise DocumentValidationError(f"Le devis {quote.numero} est déjà facturé")
        if quote.statut == QuoteStatus.REFUSED:
            raise DocumentValidationError(f"Le devis {quote.numero} a été refusé")

        amounts = Amounts(quote.montant_ht, quote.tva_rate, quote.tva, quote.montant_ttc)
        invoice = _issue(
            ClientInvoice,
            client=quote.client,
            amounts=amounts,
            user=user,
            kind=InvoiceKind.FROM_QUOTE,
            metadata={"quote_id": quote.pk, "quote_numero": quote.numero, "description": quote.description},
        )
        quote.invoice = invoice
        quote.statut = QuoteStatus.INVOICED
        quote.save(update_fields=["invoice", "statut", "updated_at"])
    return _reload(ClientInvoice, invoice.pk)


# ---------------------------------------------------------------------------
# Credit notes
# ---------------------------------------------------------------------------

@logs_aborted_generation(DocumentType.CREDIT_NOTE)
def create_credit_note(motif, montant_ht, invoice=None, client=None, is_partial=False, user=None):
    """
    Issue a credit note against an invoice, or directly to a client.

    Linked to an invoice, the client and VAT rate come from that invoice and
    the amount may not exceed the invoice's montant_ht unless `is_partial`.
    """
    if not (motif or "").strip():
        raise DocumentValidationError("Le motif est obligatoire")
    if invoice is not None:
        client = invoice.client
        tva_rate = invoice.tva_rate
    elif client is not None:
        tva_rate = client.effective_tva_rate
    else:
        raise DocumentValidationError("Vous devez spécifier soit une facture, soit un client")

    base = validate_credit_note_amount(montant_ht, invoice=invoice, is_partial=is_partial)
    amounts = compute_amounts(base, tva_rate)

    with transaction.atomic():
        credit_note = _issue(
            CreditNote,
            client=client,
            amounts=amounts,
            user=user,
            invoice=invoice,
            motif=motif.strip(),
            is_partial=is_partial,
        )
    return _reload(CreditNote, credit_note.pk)


# ---------------------------------------------------------------------------
# Status changes
# ---------------------------------------------------------------------------

def change_status(document, new_status):
    """
    Move a document to `new_status`, enforcing the per-type transition table.

    A direct single-field update; marking an invoice paid has no other effect.
    """
    allowed = ALLOWED_TRANSITIONS[document.document_type].get(document.statut, set())
    if new_status not in allowed:
        raise InvalidStatusTransition(
            f"Cannot transition {document.numero} from '{document.statut}' to '{new_status}'. "
            f"Allowed: {sorted(str(s) for s in allowed)}"
        )
    old_status = document.statut
    document.statut = new_status
    document.save(update_fields=["statut", "updated_at"])
    logger.info("%s %s: %s → %s", document.document_type.label, document.numero, old_status, new_status)
    return document
