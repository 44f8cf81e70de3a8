"""Initial slips models: TransportSlip, FreightSlip and SlipNumberConfig."""

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models

import slips.models

STATUS_CHOICES = [
    ("waiting", "En attente"),
    ("loaded", "Chargé"),
    ("delivered", "Livré"),
    ("dispute", "Litige"),
]


def slip_fields(related):
    """Columns shared by both slip tables (abstract Slip)."""
    return [
        ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
        (
            "number",
            models.CharField(
                editable=False,
                help_text="Attribué automatiquement, ex. 2026 0042",
                max_length=30,
                unique=True,
                verbose_name="Numéro",
            ),
        ),
        (
            "status",
            models.CharField(
                choices=STATUS_CHOICES, db_index=True, default="waiting", max_length=10, verbose_name="Statut"
            ),
        ),
        ("loading_date", models.DateField(verbose_name="Date de chargement")),
        ("loading_address", models.TextField(verbose_name="Adresse de chargement")),
        ("loading_contact", models.CharField(blank=True, max_length=150, verbose_name="Contact chargement")),
        ("delivery_date", models.DateField(blank=True, null=True, verbose_name="Date de livraison")),
        ("delivery_address", models.TextField(verbose_name="Adresse de livraison")),
        ("delivery_contact", models.CharField(blank=True, max_length=150, verbose_name="Contact livraison")),
        ("goods_description", models.CharField(blank=True, max_length=255, verbose_name="Marchandise")),
        (
            "weight",
            models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True, verbose_name="Poids (kg)"),
        ),
        (
            "volume",
            models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True, verbose_name="Volume (m³)"),
        ),
        ("vehicle_type", models.CharField(blank=True, max_length=50, verbose_name="Type de véhicule")),
        ("instructions", models.TextField(blank=True, verbose_name="Instructions")),
        ("observations", models.TextField(blank=True, verbose_name="Observations")),
        ("order_number", models.CharField(blank=True, max_length=50, verbose_name="N° de commande client")),
        (
            "cmr_file",
            models.FileField(blank=True, upload_to=slips.models.cmr_upload_path, verbose_name="CMR signé"),
        ),
        ("created_at", models.DateTimeField(auto_now_add=True)),
        ("updated_at", models.DateTimeField(auto_now=True)),
        (
            "client",
            models.ForeignKey(
                blank=True,
                null=True,
                on_delete=django.db.models.deletion.PROTECT,
                related_name=f"{related}s",
                to="clients.client",
                verbose_name="Client",
            ),
        ),
        (
            "created_by",
            models.ForeignKey(
                blank=True,
                null=True,
                on_delete=django.db.models.deletion.SET_NULL,
                related_name=f"created_{related}s",
                to=settings.AUTH_USER_MODEL,
                verbose_name="Créé par",
            ),
        ),
    ]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("clients", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="TransportSlip",
            fields=slip_fields("transportslip")
            + [
                ("price", models.DecimalField(decimal_places=2, default=0, max_digits=10, verbose_name="Prix HT")),
                ("kilometers", models.PositiveIntegerField(blank=True, null=True, verbose_name="Kilomètres")),
                (
                    "price_per_km",
                    models.DecimalField(
                        blank=True, decimal_places=3, max_digits=8, null=True, verbose_name="Prix au km"
                    ),
                ),
            ],
            options={
                "verbose_name": "Bordereau transport",
                "verbose_name_plural": "Bordereaux transport",
                "ordering": ["-created_at"],
                "abstract": False,
            },
        ),
        migrations.CreateModel(
            name="FreightSlip",
            fields=slip_fields("freightslip")
            + [
                (
                    "purchase_price",
                    models.DecimalField(decimal_places=2, default=0, max_digits=10, verbose_name="Prix d'achat HT"),
                ),
                (
                    "selling_price",
                    models.DecimalField(
                        blank=True, decimal_places=2, max_digits=10, null=True, verbose_name="Prix de vente HT"
                    ),
                ),
                (
                    "margin",
                    models.DecimalField(
                        decimal_places=2, default=0, editable=False, max_digits=10, verbose_name="Marge"
                    ),
                ),
                (
                    "margin_rate",
                    models.DecimalField(
                        decimal_places=2, default=0, editable=False, max_digits=7, verbose_name="Taux de marge (%)"
                    ),
                ),
                (
                    "supplier_invoice_received",
                    models.BooleanField(default=False, verbose_name="Facture fournisseur reçue"),
                ),
                ("supplier_invoice_paid", models.BooleanField(default=False, verbose_name="Facture fournisseur payée")),
                (
                    "fournisseur",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="freight_slips",
                        to="clients.fournisseur",
                        verbose_name="Fournisseur",
                    ),
                ),
            ],
            options={
                "verbose_name": "Bordereau affrètement",
                "verbose_name_plural": "Bordereaux affrètement",
                "ordering": ["-created_at"],
                "abstract": False,
            },
        ),
        migrations.CreateModel(
            name="SlipNumberConfig",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "type",
                    models.CharField(
                        choices=[("transport", "Transport"), ("freight", "Affrètement")],
                        max_length=10,
                        unique=True,
                        verbose_name="Type",
                    ),
                ),
                ("prefix", models.CharField(max_length=10, verbose_name="Préfixe")),
                ("current_number", models.PositiveIntegerField(default=0, verbose_name="Dernier numéro")),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Numérotation des bordereaux",
                "verbose_name_plural": "Numérotation des bordereaux",
            },
        ),
    ]
