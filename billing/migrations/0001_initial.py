"""Initial billing models: invoices, quotes, credit notes, counters and settings."""

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


def document_fields(related):
    """Columns shared by every issued document (abstract BillingDocument)."""
    return [
        ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
        ("numero", models.CharField(editable=False, max_length=20, unique=True, verbose_name="Numéro")),
        ("date_emission", models.DateField(verbose_name="Date d'émission")),
        ("montant_ht", models.DecimalField(decimal_places=2, max_digits=12, verbose_name="Montant HT")),
        ("tva_rate", models.DecimalField(decimal_places=2, max_digits=5, verbose_name="Taux de TVA (%)")),
        ("tva", models.DecimalField(decimal_places=2, max_digits=12, verbose_name="TVA")),
        ("montant_ttc", models.DecimalField(decimal_places=2, max_digits=12, verbose_name="Montant TTC")),
        ("lien_pdf", models.CharField(blank=True, max_length=255, verbose_name="PDF")),
        ("created_at", models.DateTimeField(auto_now_add=True)),
        ("updated_at", models.DateTimeField(auto_now=True)),
        (
            "client",
            models.ForeignKey(
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
                verbose_name="Émis par",
            ),
        ),
    ]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("clients", "0001_initial"),
        ("slips", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="NumberSequence",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "document_type",
                    models.CharField(
                        choices=[("invoice", "Facture"), ("quote", "Devis"), ("credit_note", "Avoir")],
                        max_length=20,
                        verbose_name="Type",
                    ),
                ),
                ("prefix", models.CharField(max_length=10, verbose_name="Préfixe")),
                ("current_number", models.PositiveIntegerField(default=0, verbose_name="Dernier numéro")),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Compteur de numérotation",
                "verbose_name_plural": "Compteurs de numérotation",
                "ordering": ["-prefix", "document_type"],
                "constraints": [
                    models.UniqueConstraint(fields=("document_type", "prefix"), name="unique_sequence_per_bucket"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Setting",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("key", models.CharField(max_length=100, unique=True, verbose_name="Clé")),
                ("value", models.TextField(verbose_name="Valeur")),
                ("description", models.CharField(blank=True, max_length=255, verbose_name="Description")),
            ],
            options={
                "verbose_name": "Paramètre",
                "verbose_name_plural": "Paramètres",
            },
        ),
        migrations.CreateModel(
            name="ClientInvoice",
            fields=document_fields("clientinvoice")
            + [
                (
                    "kind",
                    models.CharField(
                        choices=[
                            ("facture", "Facture"),
                            ("facture_groupee", "Facture groupée"),
                            ("facture_devis", "Facture sur devis"),
                        ],
                        default="facture",
                        max_length=20,
                        verbose_name="Type",
                    ),
                ),
                ("lien_cmr", models.CharField(blank=True, max_length=255, verbose_name="CMR")),
                (
                    "statut",
                    models.CharField(
                        choices=[("en_attente", "En attente"), ("paye", "Payée")],
                        db_index=True,
                        default="en_attente",
                        max_length=20,
                        verbose_name="Statut",
                    ),
                ),
                ("metadata", models.JSONField(blank=True, default=dict)),
                (
                    "transport_slip",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="invoices",
                        to="slips.transportslip",
                        verbose_name="Bordereau transport",
                    ),
                ),
                (
                    "freight_slip",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="invoices",
                        to="slips.freightslip",
                        verbose_name="Bordereau affrètement",
                    ),
                ),
            ],
            options={
                "verbose_name": "Facture",
                "verbose_name_plural": "Factures",
                "ordering": ["-created_at"],
                "abstract": False,
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("transport_slip__isnull", True), ("freight_slip__isnull", True), _connector="OR"),
                        name="invoice_single_source_slip",
                    ),
                ],
                "indexes": [
                    models.Index(fields=["statut", "date_emission"], name="invoice_statut_date_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="InvoiceSlipReference",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "slip_type",
                    models.CharField(choices=[("transport", "Transport"), ("freight", "Affrètement")], max_length=10),
                ),
                ("slip_id", models.PositiveBigIntegerField()),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "invoice",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="slip_references",
                        to="billing.clientinvoice",
                    ),
                ),
            ],
            options={
                "verbose_name": "Bordereau facturé",
                "verbose_name_plural": "Bordereaux facturés",
                "constraints": [
                    models.UniqueConstraint(fields=("slip_type", "slip_id"), name="unique_invoiced_slip"),
                ],
            },
        ),
        migrations.CreateModel(
            name="ClientQuote",
            fields=document_fields("clientquote")
            + [
                ("description", models.TextField(verbose_name="Description")),
                (
                    "statut",
                    models.CharField(
                        choices=[
                            ("en_attente", "En attente"),
                            ("accepte", "Accepté"),
                            ("refuse", "Refusé"),
                            ("facture", "Facturé"),
                        ],
                        db_index=True,
                        default="en_attente",
                        max_length=20,
                        verbose_name="Statut",
                    ),
                ),
                (
                    "invoice",
                    models.OneToOneField(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="source_quote",
                        to="billing.clientinvoice",
                        verbose_name="Facture",
                    ),
                ),
            ],
            options={
                "verbose_name": "Devis",
                "verbose_name_plural": "Devis",
                "ordering": ["-created_at"],
                "abstract": False,
            },
        ),
        migrations.CreateModel(
            name="CreditNote",
            fields=document_fields("creditnote")
            + [
                ("motif", models.TextField(verbose_name="Motif")),
                ("is_partial", models.BooleanField(default=False, verbose_name="Avoir partiel")),
                (
                    "statut",
                    models.CharField(
                        choices=[("emis", "Émis"), ("comptabilise", "Comptabilisé")],
                        db_index=True,
                        default="emis",
                        max_length=20,
                        verbose_name="Statut",
                    ),
                ),
                (
                    "invoice",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="credit_notes",
                        to="billing.clientinvoice",
                        verbose_name="Facture d'origine",
                    ),
                ),
            ],
            options={
                "verbose_name": "Avoir",
                "verbose_name_plural": "Avoirs",
                "ordering": ["-created_at"],
                "abstract": False,
            },
        ),
    ]
