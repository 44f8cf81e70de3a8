"""
PDF artifacts for billing documents — HTML templates rendered by WeasyPrint.

The rendered file is written once, at issue time, to default_storage
(local disk or S3 via django-storages). Its storage path is kept on the
document as `lien_pdf`; downloads stream that file and never re-render.
"""

import re
from datetime import date, timedelta
from decimal import Decimal

from django.conf import settings
from django.core.files.base import ContentFile
from django.core.files.storage import default_storage
from django.template.loader import render_to_string

from .models import DocumentType, InvoiceKind, Setting

TEMPLATES = {
    DocumentType.INVOICE: "billing/pdf/invoice.html",
    DocumentType.QUOTE: "billing/pdf/quote.html",
    DocumentType.CREDIT_NOTE: "billing/pdf/credit_note.html",
}

FILE_KINDS = {
    DocumentType.INVOICE: "invoice",
    DocumentType.QUOTE: "quote",
    DocumentType.CREDIT_NOTE: "credit-note",
}


def pdf_filename(document_type, numero):
    """'invoice-F2406-01.pdf'; any non-alphanumeric character becomes '-'."""
    return f"{FILE_KINDS[DocumentType(document_type)]}-{re.sub(r'[^a-zA-Z0-9]', '-', numero)}.pdf"


def pdf_path(document):
    prefix = settings.BILLING_PDF_STORAGE_PREFIX[document.document_type.value]
    return f"{prefix}/{pdf_filename(document.document_type, document.numero)}"


def document_lines(document):
    """Table rows printed on the document: description, reference, date, amount."""
    doc_type = document.document_type
    if doc_type == DocumentType.QUOTE:
        return [{"description": document.description, "amount": document.montant_ht}]

    if doc_type == DocumentType.CREDIT_NOTE:
        if document.invoice_id:
            description = f"Avoir sur facture {document.invoice.numero}"
        else:
            description = f"Avoir client {document.client.nom}"
        return [{"description": description, "amount": -document.montant_ht}]

    if document.kind == InvoiceKind.GROUPED:
        return [
            {
                "reference": ref["number"],
                "order_number": ref.get("order_number") or "-",
                "date": date.fromisoformat(ref["loading_date"]) if ref.get("loading_date") else None,
                "description": ref.get("description") or "Transport",
                "amount": Decimal(ref["amount"]),
            }
            for ref in document.grouped_slips
        ]

    slip = document.slip
    if slip is None:
        description = document.metadata.get("description") or "Prestation de transport"
        return [{"description": description, "amount": document.montant_ht}]
    return [
        {
            "reference": slip.number,
            "order_number": slip.order_number,
            "date": slip.loading_date,
            "description": slip.invoice_description(),
            "amount": document.montant_ht,
        }
    ]


def _html_to_pdf(html, base_url=None):
    from weasyprint import HTML

    return HTML(string=html, base_url=base_url).write_pdf()


def render_document_pdf(document):
    """Render `document` to PDF bytes."""
    sign = -1 if document.document_type == DocumentType.CREDIT_NOTE else 1
    context = {
        "document": document,
        "client": document.client,
        "company": Setting.company_info(),
        "lines": document_lines(document),
        "totals": {
            "montant_ht": sign * document.montant_ht,
            "tva": sign * document.tva,
            "montant_ttc": sign * document.montant_ttc,
        },
        "payment_term_days": settings.BILLING_PAYMENT_TERM_DAYS,
        "due_date": document.date_emission + timedelta(days=settings.BILLING_PAYMENT_TERM_DAYS),
    }
    html = render_to_string(TEMPLATES[document.document_type], context)
    return _html_to_pdf(html, base_url=settings.BASE_URL)


def store_document_pdf(document):
    """Render and store the document's PDF, replacing any file at the same path."""
    path = pdf_path(document)
    if default_storage.exists(path):
        default_storage.delete(path)
    return default_storage.save(path, ContentFile(render_document_pdf(document)))
