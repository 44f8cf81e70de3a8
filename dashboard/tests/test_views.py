"""Tests for the dashboard page and the demo data command."""

from datetime import timedelta

import pytest
from django.core.management import call_command
from django.urls import reverse
from django.utils import timezone

from billing import services
from billing.models import ClientInvoice, ClientQuote, CreditNote
from clients.models import Client
from slips.models import SlipStatus, TransportSlip
from slips.services import update_slip_status


@pytest.mark.django_db
class TestDashboard:
    def test_requires_login(self, client):
        assert client.get(reverse("dashboard:home")).status_code == 302

    def test_root_redirects_to_dashboard(self, client, exploit_user):
        client.force_login(exploit_user)
        response = client.get("/")
        assert response.status_code == 302
        assert response.url == reverse("dashboard:home")

    def test_shows_receivables_and_disputes(self, client, billing_user, make_transport_slip):
        overdue = services.create_invoice_from_slip(make_transport_slip("100.00"))
        ClientInvoice.objects.filter(pk=overdue.pk).update(
            date_emission=timezone.localdate() - timedelta(days=45)
        )
        services.create_invoice_from_slip(make_transport_slip("50.00"))
        update_slip_status(make_transport_slip(loading_date=timezone.localdate()), SlipStatus.DISPUTE)

        client.force_login(billing_user)
        response = client.get(reverse("dashboard:home"))
        assert response.status_code == 200
        assert response.context["all_time_stats"]["unpaid_count"] == 2
        assert response.context["all_time_stats"]["overdue_count"] == 1
        assert response.context["invoice_stats"]["unpaid_count"] == 1
        assert [i.pk for i in response.context["overdue_invoices"]] == [overdue.pk]
        assert response.context["dispute_stats"]["total_clients_with_dispute"] == 1

    def test_custom_period(self, client, billing_user):
        client.force_login(billing_user)
        response = client.get(reverse("dashboard:home"), {"start": "2024-06-01", "end": "2024-06-30"})
        assert response.context["start"].isoformat() == "2024-06-01"
        assert response.context["end"].isoformat() == "2024-06-30"

    def test_invalid_period_falls_back_to_current_month(self, client, billing_user):
        client.force_login(billing_user)
        response = client.get(reverse("dashboard:home"), {"start": "2024-02-30", "end": "nope"})
        today = timezone.localdate()
        assert response.context["start"] == today.replace(day=1)
        assert response.context["end"] == today


@pytest.mark.django_db
class TestCreateDemoData:
    def test_seeds_through_services(self):
        call_command("create_demo_data")
        assert Client.objects.filter(nom__startswith="[Demo]").count() == 4
        assert TransportSlip.objects.count() == 6
        assert ClientInvoice.objects.count() == 4
        assert ClientQuote.objects.count() == 2
        assert CreditNote.objects.count() == 1
        assert all(invoice.lien_pdf for invoice in ClientInvoice.objects.all())

    def test_reset_then_reseed(self):
        call_command("create_demo_data")
        call_command("create_demo_data", "--reset")
        assert ClientInvoice.objects.count() == 4
        assert Client.objects.filter(nom__startswith="[Demo]").count() == 4
