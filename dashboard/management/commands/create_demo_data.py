"""
Management command: create_demo_data

Seeds the database with a small French transport brokerage so the
dashboard, slip lists and billing pages have content to display.
Documents are issued through the billing services, so they get real
numbers and PDFs.

Usage:
    python manage.py create_demo_data          # add demo data
    python manage.py create_demo_data --reset  # wipe demo slips/documents first, then add
"""

from datetime import timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

User = get_user_model()

DEMO_PREFIX = "[Demo]"


class Command(BaseCommand):
    help = "Seed database with demo users, clients, suppliers, slips and billing documents"

    def add_arguments(self, parser):
        parser.add_argument(
            "--reset",
            action="store_true",
            help="Delete existing demo clients with their slips and documents before seeding",
        )

    def handle(self, *args, **options):
        if options["reset"]:
            self._reset()

        users = self._get_or_create_staff()
        clients = self._create_clients(users["admin"])
        fournisseurs = self._create_fournisseurs(users["admin"])
        transport, freight = self._create_slips(clients, fournisseurs, users["exploitation1"])
        self._issue_documents(clients, transport, freight, users["facturation1"])
        self.stdout.write(self.style.SUCCESS("Demo data created successfully."))

    # -------------------------------------------------------------------------

    @transaction.atomic
    def _reset(self):
        from billing.models import ClientInvoice, ClientQuote, CreditNote
        from clients.models import Client, Fournisseur
        from slips.models import FreightSlip, TransportSlip

        demo_clients = Client.objects.filter(nom__startswith=DEMO_PREFIX)
        CreditNote.objects.filter(client__in=demo_clients).delete()
        ClientQuote.objects.filter(client__in=demo_clients).delete()
        invoices = ClientInvoice.objects.filter(client__in=demo_clients)
        invoices.delete()
        TransportSlip.objects.filter(client__in=demo_clients).delete()
        FreightSlip.objects.filter(client__in=demo_clients).delete()
        demo_clients.delete()
        Fournisseur.objects.filter(nom__startswith=DEMO_PREFIX).delete()
        self.stdout.write("  Reset: cleared demo clients, suppliers, slips and documents.")

    def _get_or_create_staff(self):
        """Return (or create) one user per role."""
        from accounts.models import Role

        users = {}
        specs = [
            ("admin", "Nadia", "Mazan", Role.ADMIN),
            ("exploitation1", "Julien", "Roux", Role.EXPLOITATION),
            ("facturation1", "Claire", "Vidal", Role.FACTURATION),
        ]
        for username, first, last, role in specs:
            user, created = User.objects.get_or_create(
                username=username,
                defaults=dict(first_name=first, last_name=last, role=role),
            )
            if created:
                user.set_password("demo1234")
                user.save()
                self.stdout.write(f"  Created user: {username}")
            users[username] = user
        return users

    def _create_clients(self, admin):
        from clients.models import BillingPreference, Client

        specs = [
            # (nom, email, preference, tva_rate, order number required)
            ("Logistique Rhône SAS", "compta@logistique-rhone.fr", BillingPreference.MONTHLY, None, True),
            ("Bois & Matériaux du Sud", "factures@bms.fr", BillingPreference.PER_TRANSPORT, None, False),
            ("Frigo Express", "admin@frigo-express.fr", BillingPreference.WEEKLY, Decimal("20"), False),
            ("Export Iberica SL", "billing@iberica.es", BillingPreference.PER_TRANSPORT, Decimal("0"), False),
        ]
        clients = []
        for nom, email, preference, tva_rate, order_required in specs:
            client, _ = Client.objects.get_or_create(
                nom=f"{DEMO_PREFIX} {nom}",
                defaults=dict(
                    email=email,
                    preference_facturation=preference,
                    tva_rate=tva_rate,
                    numero_commande_requis=order_required,
                    adresse_facturation="12 rue de la République\n69002 Lyon",
                    created_by=admin,
                ),
            )
            clients.append(client)
        self.stdout.write(f"  Clients: {len(clients)}")
        return clients

    def _create_fournisseurs(self, admin):
        from clients.models import Fournisseur

        names = ["Transports Martin", "TRL Affrètement"]
        fournisseurs = [
            Fournisseur.objects.get_or_create(nom=f"{DEMO_PREFIX} {nom}", defaults=dict(created_by=admin))[0]
            for nom in names
        ]
        self.stdout.write(f"  Fournisseurs: {len(fournisseurs)}")
        return fournisseurs

    def _create_slips(self, clients, fournisseurs, operator):
        from slips.models import SlipStatus
        from slips.services import create_freight_slip, create_transport_slip

        today = timezone.localdate()
        routes = [
            ("Entrepôt A, 5 avenue Jean Jaurès, 69007 Lyon", "Client B, 14 quai de la Joliette, 13002 Marseille"),
            ("Scierie, route de Mende, 48000 Mende", "Chantier, 3 rue Garibaldi, 69003 Lyon"),
            ("Plateforme froid, ZI Nord, 38070 Saint-Quentin-Fallavier", "Hypermarché, 1 place du Marché, 42000 Saint-Étienne"),
        ]

        transport = []
        # (client idx, route idx, price, days ago, status)
        for ci, ri, price, days_ago, status in [
            (0, 0, "850.00", 40, SlipStatus.DELIVERED),
            (0, 2, "420.00", 20, SlipStatus.DELIVERED),
            (0, 0, "860.00", 12, SlipStatus.DELIVERED),
            (1, 1, "610.50", 8, SlipStatus.DISPUTE),
            (2, 2, "390.00", 2, SlipStatus.LOADED),
            (2, 2, "390.00", 0, SlipStatus.WAITING),
        ]:
            loading, delivery = routes[ri]
            transport.append(
                create_transport_slip(
                    created_by=operator,
                    client=clients[ci],
                    loading_date=today - timedelta(days=days_ago),
                    loading_address=loading,
                    delivery_address=delivery,
                    price=Decimal(price),
                    status=status,
                    order_number=f"PO-{1000 + len(transport)}" if clients[ci].numero_commande_requis else "",
                )
            )

        freight = []
        # (client idx, route idx, purchase, selling, days ago, status)
        for ci, ri, purchase, selling, days_ago, status in [
            (1, 1, "700.00", "910.00", 35, SlipStatus.DELIVERED),
            (3, 0, "1450.00", "1800.00", 15, SlipStatus.DISPUTE),
            (3, 2, "500.00", "640.00", 4, SlipStatus.DELIVERED),
        ]:
            loading, delivery = routes[ri]
            freight.append(
                create_freight_slip(
                    created_by=operator,
                    client=clients[ci],
                    fournisseur=fournisseurs[len(freight) % len(fournisseurs)],
                    loading_date=today - timedelta(days=days_ago),
                    loading_address=loading,
                    delivery_address=delivery,
                    purchase_price=Decimal(purchase),
                    selling_price=Decimal(selling),
                    status=status,
                )
            )

        self.stdout.write(f"  Slips: {len(transport)} transport, {len(freight)} freight")
        return transport, freight

    def _issue_documents(self, clients, transport, freight, biller):
        from billing.models import InvoiceStatus, QuoteStatus
        from billing.services import (
            change_status,
            convert_quote_to_invoice,
            create_credit_note,
            create_grouped_invoice,
            create_invoice_from_slip,
            create_quote,
        )

        grouped = create_grouped_invoice(transport[:3], user=biller)
        single = create_invoice_from_slip(freight[0], user=biller)
        change_status(single, InvoiceStatus.PAID)
        create_invoice_from_slip(freight[2], user=biller)

        accepted = create_quote(
            clients[2], "Navette hebdomadaire frigorifique – octobre", Decimal("1560.00"), user=biller
        )
        change_status(accepted, QuoteStatus.ACCEPTED)
        convert_quote_to_invoice(accepted, user=biller)
        create_quote(clients[1], "Transport exceptionnel de charpentes", Decimal("2300.00"), user=biller)

        create_credit_note(
            "Retard de livraison – remise commerciale",
            Decimal("60.00"),
            invoice=grouped,
            is_partial=True,
            user=biller,
        )
        self.stdout.write("  Documents: 4 invoices, 2 quotes, 1 credit note")
