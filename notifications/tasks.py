"""
Celery scheduled tasks for automated notifications.

Tasks check the `notification_email_enabled` Setting before sending and
are registered in CELERY_BEAT_SCHEDULE (settings.py), run via celery-beat.

Schedule:
  08:00  send_overdue_invoice_summary
"""

import logging

from celery import shared_task
from django.conf import settings
from django.core.mail import send_mail
from django.utils import timezone

from billing.models import Setting
from billing.stats import overdue_invoices, unpaid_invoice_stats
from dashboard.templatetags.fr_filters import date_fr, euros
from slips.stats import disputes_by_client

logger = logging.getLogger(__name__)


def _email_enabled():
    return Setting.get("notification_email_enabled", "0") == "1"


def _email_recipient():
    return Setting.get("notification_email_recipient", "").strip()


def _send_email(subject, body):
    """Send an email to the configured recipient. Returns True when sent."""
    recipient = _email_recipient()
    if not recipient:
        logger.info("No notification_email_recipient configured, skipping %r", subject)
        return False
    try:
        send_mail(
            subject=subject,
            message=body,
            from_email=settings.DEFAULT_FROM_EMAIL,
            recipient_list=[recipient],
        )
    except Exception as exc:
        logger.warning("Email send failed (subject=%r): %s", subject, exc)
        return False
    return True


def build_overdue_summary(today=None):
    """Plain-text body of the daily receivables summary."""
    today = today or timezone.localdate()
    stats = unpaid_invoice_stats(today=today)
    overdue = list(overdue_invoices(today=today))
    disputes = disputes_by_client(start=today.replace(day=1), end=today)

    lines = [
        f"Synthèse des impayés au {date_fr(today)}",
        "",
        f"Factures en attente : {stats['unpaid_count']} ({euros(stats['unpaid_total'])} TTC)",
        f"Dont en retard : {stats['overdue_count']} ({euros(stats['overdue_total'])} TTC)",
    ]
    if overdue:
        lines.append("")
        for invoice in overdue:
            lines.append(
                f"  {invoice.numero}  {invoice.client.nom}  "
                f"émise le {date_fr(invoice.date_emission)}  {euros(invoice.montant_ttc)}"
            )
    if disputes["disputes"]:
        lines += ["", "Litiges du mois :"]
        for row in disputes["disputes"]:
            lines.append(f"  {row['client_nom']} : {row['count']}")
    lines += ["", f"{settings.BASE_URL}/billing/invoices/?statut=en_attente"]
    return "\n".join(lines)


@shared_task(name="notifications.tasks.send_overdue_invoice_summary")
def send_overdue_invoice_summary():
    """E-mail the unpaid/overdue invoice summary to the back office."""
    if not _email_enabled():
        return "disabled"

    today = timezone.localdate()
    sent = _send_email(f"[FreightDesk] Impayés au {date_fr(today)}", build_overdue_summary(today))
    return f"overdue_summary {'sent' if sent else 'skipped'}: {today}"
