"""
Client and supplier (fournisseur) models.

Clients are billed through invoices, quotes and credit notes; their VAT
rate drives every amount computation. Suppliers carry out freight slips
subcontracted by the brokerage.
"""

from decimal import Decimal

from django.conf import settings
from django.db import models


class BillingPreference(models.TextChoices):
    MONTHLY = "mensuelle", "Mensuelle"
    WEEKLY = "hebdomadaire", "Hebdomadaire"
    PER_TRANSPORT = "par_transport", "Par transport"


class Client(models.Model):
    """A customer company."""

    nom = models.CharField(max_length=200, verbose_name="Nom")
    email = models.EmailField(blank=True, verbose_name="E-mail")
    telephone = models.CharField(max_length=30, blank=True, verbose_name="Téléphone")
    adresse_facturation = models.TextField(blank=True, verbose_name="Adresse de facturation")
    preference_facturation = models.CharField(
        max_length=20,
        choices=BillingPreference.choices,
        default=BillingPreference.PER_TRANSPORT,
        verbose_name="Préférence de facturation",
    )
    tva_rate = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        null=True,
        blank=True,
        verbose_name="Taux de TVA (%)",
        help_text="Vide = taux par défaut",
    )
    numero_commande_requis = models.BooleanField(
        default=False, verbose_name="N° de commande requis"
    )
    siret = models.CharField(max_length=14, blank=True, verbose_name="SIRET")
    numero_tva = models.CharField(max_length=20, blank=True, verbose_name="N° TVA intracom.")
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="created_clients",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Client"
        verbose_name_plural = "Clients"
        ordering = ["nom"]
        indexes = [
            models.Index(fields=["nom"], name="client_nom_idx"),
            models.Index(fields=["siret"], name="client_siret_idx"),
        ]

    def __str__(self):
        return self.nom

    @property
    def effective_tva_rate(self):
        """Client's VAT rate, or the configured default when unset."""
        if self.tva_rate is None:
            return Decimal(settings.BILLING_DEFAULT_TVA_RATE)
        return self.tva_rate


class AccountingContact(models.Model):
    """A client's accounting department contact."""

    client = models.ForeignKey(Client, on_delete=models.CASCADE, related_name="accounting_contacts")
    nom = models.CharField(max_length=100, verbose_name="Nom")
    prenom = models.CharField(max_length=100, blank=True, verbose_name="Prénom")
    email = models.EmailField(blank=True, verbose_name="E-mail")
    telephone = models.CharField(max_length=30, blank=True, verbose_name="Téléphone")

    class Meta:
        verbose_name = "Contact comptabilité"
        verbose_name_plural = "Contacts comptabilité"
        ordering = ["nom", "prenom"]

    def __str__(self):
        return f"{self.prenom} {self.nom}".strip()


class Fournisseur(models.Model):
    """A subcontracted carrier."""

    nom = models.CharField(max_length=200, verbose_name="Nom")
    contact_nom = models.CharField(max_length=150, blank=True, verbose_name="Contact")
    email = models.EmailField(blank=True, verbose_name="E-mail")
    telephone = models.CharField(max_length=30, blank=True, verbose_name="Téléphone")
    conditions_paiement = models.CharField(
        max_length=100, blank=True, verbose_name="Conditions de paiement"
    )
    siret = models.CharField(max_length=14, blank=True, verbose_name="SIRET")
    numero_tva = models.CharField(max_length=20, blank=True, verbose_name="N° TVA intracom.")
    tva_rate = models.DecimalField(
        max_digits=5, decimal_places=2, null=True, blank=True, verbose_name="Taux de TVA (%)"
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="created_fournisseurs",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Fournisseur"
        verbose_name_plural = "Fournisseurs"
        ordering = ["nom"]

    def __str__(self):
        return self.nom
