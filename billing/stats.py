"""Receivables statistics over client invoices."""

from datetime import timedelta
from decimal import Decimal

from django.conf import settings
from django.utils import timezone

from .models import ClientInvoice, InvoiceStatus


def unpaid_invoice_stats(start=None, end=None, today=None):
    """
    Unpaid invoices issued in [start, end] and the overdue subset.

    An invoice is overdue once date_emission + BILLING_PAYMENT_TERM_DAYS is
    before `today`.
    """
    today = today or timezone.localdate()
    term = timedelta(days=settings.BILLING_PAYMENT_TERM_DAYS)

    invoices = ClientInvoice.objects.filter(statut=InvoiceStatus.PENDING)
    if start:
        invoices = invoices.filter(date_emission__gte=start)
    if end:
        invoices = invoices.filter(date_emission__lte=end)

    stats = {
        "unpaid_count": 0,
        "unpaid_total": Decimal("0"),
        "overdue_count": 0,
        "overdue_total": Decimal("0"),
    }
    for date_emission, montant_ttc in invoices.values_list("date_emission", "montant_ttc"):
        stats["unpaid_count"] += 1
        stats["unpaid_total"] += montant_ttc
        if date_emission + term < today:
            stats["overdue_count"] += 1
            stats["overdue_total"] += montant_ttc
    return stats


def overdue_invoices(today=None):
    """Unpaid invoices past their due date, oldest first."""
    today = today or timezone.localdate()
    cutoff = today - timedelta(days=settings.BILLING_PAYMENT_TERM_DAYS)
    return (
        ClientInvoice.objects.filter(statut=InvoiceStatus.PENDING, date_emission__lt=cutoff)
        .select_related("client")
        .order_by("date_emission", "numero")
    )
