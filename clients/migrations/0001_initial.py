"""Initial clients models: Client, AccountingContact and Fournisseur."""

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Client",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("nom", models.CharField(max_length=200, verbose_name="Nom")),
                ("email", models.EmailField(blank=True, max_length=254, verbose_name="E-mail")),
                ("telephone", models.CharField(blank=True, max_length=30, verbose_name="Téléphone")),
                ("adresse_facturation", models.TextField(blank=True, verbose_name="Adresse de facturation")),
                (
                    "preference_facturation",
                    models.CharField(
                        choices=[
                            ("mensuelle", "Mensuelle"),
                            ("hebdomadaire", "Hebdomadaire"),
                            ("par_transport", "Par transport"),
                        ],
                        default="par_transport",
                        max_length=20,
                        verbose_name="Préférence de facturation",
                    ),
                ),
                (
                    "tva_rate",
                    models.DecimalField(
                        blank=True,
                        decimal_places=2,
                        help_text="Vide = taux par défaut",
                        max_digits=5,
                        null=True,
                        verbose_name="Taux de TVA (%)",
                    ),
                ),
                ("numero_commande_requis", models.BooleanField(default=False, verbose_name="N° de commande requis")),
                ("siret", models.CharField(blank=True, max_length=14, verbose_name="SIRET")),
                ("numero_tva", models.CharField(blank=True, max_length=20, verbose_name="N° TVA intracom.")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="created_clients",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Client",
                "verbose_name_plural": "Clients",
                "ordering": ["nom"],
                "indexes": [
                    models.Index(fields=["nom"], name="client_nom_idx"),
                    models.Index(fields=["siret"], name="client_siret_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="AccountingContact",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("nom", models.CharField(max_length=100, verbose_name="Nom")),
                ("prenom", models.CharField(blank=True, max_length=100, verbose_name="Prénom")),
                ("email", models.EmailField(blank=True, max_length=254, verbose_name="E-mail")),
                ("telephone", models.CharField(blank=True, max_length=30, verbose_name="Téléphone")),
                (
                    "client",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="accounting_contacts",
                        to="clients.client",
                    ),
                ),
            ],
            options={
                "verbose_name": "Contact comptabilité",
                "verbose_name_plural": "Contacts comptabilité",
                "ordering": ["nom", "prenom"],
            },
        ),
        migrations.CreateModel(
            name="Fournisseur",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("nom", models.CharField(max_length=200, verbose_name="Nom")),
                ("contact_nom", models.CharField(blank=True, max_length=150, verbose_name="Contact")),
                ("email", models.EmailField(blank=True, max_length=254, verbose_name="E-mail")),
                ("telephone", models.CharField(blank=True, max_length=30, verbose_name="Téléphone")),
                (
                    "conditions_paiement",
                    models.CharField(blank=True, max_length=100, verbose_name="Conditions de paiement"),
                ),
                ("siret", models.CharField(blank=True, max_length=14, verbose_name="SIRET")),
                ("numero_tva", models.CharField(blank=True, max_length=20, verbose_name="N° TVA intracom.")),
                (
                    "tva_rate",
                    models.DecimalField(
                        blank=True, decimal_places=2, max_digits=5, null=True, verbose_name="Taux de TVA (%)"
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="created_fournisseurs",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Fournisseur",
                "verbose_name_plural": "Fournisseurs",
                "ordering": ["nom"],
            },
        ),
    ]
