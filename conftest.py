"""
Pytest configuration and shared fixtures.
"""

import datetime
from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model

User = get_user_model()

FAKE_PDF = b"%PDF-1.4 test"


@pytest.fixture(autouse=True)
def isolated_documents(settings, tmp_path, monkeypatch):
    """Store generated files under tmp_path and skip the WeasyPrint render."""
    settings.MEDIA_ROOT = str(tmp_path / "media")
    monkeypatch.setattr("billing.pdf._html_to_pdf", lambda html, base_url=None: FAKE_PDF)


@pytest.fixture
def admin_staff(db):
    from accounts.models import Role

    return User.objects.create_user(
        username="direction",
        password="testpass123",
        role=Role.ADMIN,
        first_name="Nadia",
        last_name="Mazan",
    )


@pytest.fixture
def billing_user(db):
    from accounts.models import Role

    return User.objects.create_user(
        username="facturation",
        password="testpass123",
        role=Role.FACTURATION,
    )


@pytest.fixture
def exploit_user(db):
    from accounts.models import Role

    return User.objects.create_user(
        username="exploitation",
        password="testpass123",
        role=Role.EXPLOITATION,
    )


@pytest.fixture
def client_company(db, admin_staff):
    from clients.models import Client

    return Client.objects.create(
        nom="Logistique Rhône SAS",
        email="compta@logistique-rhone.fr",
        adresse_facturation="5 avenue Jean Jaurès\n69007 Lyon",
        created_by=admin_staff,
    )


@pytest.fixture
def other_client(db):
    from clients.models import Client

    return Client.objects.create(nom="Frigo Express", tva_rate=Decimal("5.5"))


@pytest.fixture
def fournisseur(db):
    from clients.models import Fournisseur

    return Fournisseur.objects.create(nom="Transports Martin")


@pytest.fixture
def transport_slip(db, client_company, exploit_user):
    from slips.services import create_transport_slip

    return create_transport_slip(
        created_by=exploit_user,
        client=client_company,
        loading_date=datetime.date(2024, 6, 3),
        loading_address="Entrepôt A, 5 avenue Jean Jaurès, 69007 Lyon",
        delivery_address="Client B, 14 quai de la Joliette, 13002 Marseille",
        price=Decimal("100.00"),
        order_number="PO-1001",
    )


@pytest.fixture
def freight_slip(db, client_company, fournisseur, exploit_user):
    from slips.services import create_freight_slip

    return create_freight_slip(
        created_by=exploit_user,
        client=client_company,
        fournisseur=fournisseur,
        loading_date=datetime.date(2024, 6, 5),
        loading_address="Scierie, route de Mende, 48000 Mende",
        delivery_address="Chantier, 3 rue Garibaldi, 69003 Lyon",
        purchase_price=Decimal("700.00"),
        selling_price=Decimal("910.00"),
    )


@pytest.fixture
def make_transport_slip(db, client_company, exploit_user):
    """Factory for extra transport slips; defaults to client_company."""
    from slips.services import create_transport_slip

    def make(price="100.00", client=None, **fields):
        fields.setdefault("loading_date", datetime.date(2024, 6, 10))
        fields.setdefault("loading_address", "Dépôt, 1 rue du Port, 69007 Lyon")
        fields.setdefault("delivery_address", "Magasin, 2 rue Nationale, 59000 Lille")
        return create_transport_slip(
            created_by=exploit_user,
            client=client or client_company,
            price=Decimal(price),
            **fields,
        )

    return make
