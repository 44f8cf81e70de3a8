"""
Slip models — one record per transport or freight (affrètement) job.

Transport slips are run with the brokerage's own vehicles and billed at
`price`. Freight slips are subcontracted to a Fournisseur; the brokerage
buys at `purchase_price`, bills at `selling_price` and keeps the margin.
Either kind is the source of at most one client invoice, directly or via
a grouped invoice.
"""

from decimal import Decimal

from django.conf import settings
from django.db import models

from billing.amounts import compute_freight_margin


class SlipStatus(models.TextChoices):
    WAITING = "waiting", "En attente"
    LOADED = "loaded", "Chargé"
    DELIVERED = "delivered", "Livré"
    DISPUTE = "dispute", "Litige"


class SlipType(models.TextChoices):
    TRANSPORT = "transport", "Transport"
    FREIGHT = "freight", "Affrètement"


def cmr_upload_path(instance, filename):
    return f"slips/{instance.slip_type}/{instance.number.replace(' ', '-')}/{filename}"


class Slip(models.Model):
    """Fields shared by transport and freight slips."""

    slip_type = None

    number = models.CharField(
        max_length=30,
        unique=True,
        editable=False,
        verbose_name="Numéro",
        help_text="Attribué automatiquement, ex. 2026 0042",
    )
    status = models.CharField(
        max_length=10,
        choices=SlipStatus.choices,
        default=SlipStatus.WAITING,
        db_index=True,
        verbose_name="Statut",
    )
    client = models.ForeignKey(
        "clients.Client",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="%(class)ss",
        verbose_name="Client",
    )

    loading_date = models.DateField(verbose_name="Date de chargement")
    loading_address = models.TextField(verbose_name="Adresse de chargement")
    loading_contact = models.CharField(max_length=150, blank=True, verbose_name="Contact chargement")
    delivery_date = models.DateField(null=True, blank=True, verbose_name="Date de livraison")
    delivery_address = models.TextField(verbose_name="Adresse de livraison")
    delivery_contact = models.CharField(max_length=150, blank=True, verbose_name="Contact livraison")

    goods_description = models.CharField(max_length=255, blank=True, verbose_name="Marchandise")
    weight = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True, verbose_name="Poids (kg)")
    volume = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True, verbose_name="Volume (m³)")
    vehicle_type = models.CharField(max_length=50, blank=True, verbose_name="Type de véhicule")
    instructions = models.TextField(blank=True, verbose_name="Instructions")
    observations = models.TextField(blank=True, verbose_name="Observations")
    order_number = models.CharField(max_length=50, blank=True, verbose_name="N° de commande client")
    cmr_file = models.FileField(upload_to=cmr_upload_path, blank=True, verbose_name="CMR signé")

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="created_%(class)ss",
        verbose_name="Créé par",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
        ordering = ["-created_at"]

    def __str__(self):
        client = self.client.nom if self.client_id else "sans client"
        return f"{self.number} — {client}"

    @property
    def billable_amount(self):
        raise NotImplementedError

    @property
    def loading_city(self):
        return extract_city(self.loading_address)

    @property
    def delivery_city(self):
        return extract_city(self.delivery_address)

    def invoice_description(self):
        """Line label printed on the invoice for this slip."""
        if self.goods_description:
            return self.goods_description
        return f"TRANSPORT ALL IN – {self.loading_city} / {self.delivery_city}"


class TransportSlip(Slip):
    slip_type = SlipType.TRANSPORT

    price = models.DecimalField(max_digits=10, decimal_places=2, default=0, verbose_name="Prix HT")
    kilometers = models.PositiveIntegerField(null=True, blank=True, verbose_name="Kilomètres")
    price_per_km = models.DecimalField(
        max_digits=8, decimal_places=3, null=True, blank=True, verbose_name="Prix au km"
    )

    class Meta(Slip.Meta):
        verbose_name = "Bordereau transport"
        verbose_name_plural = "Bordereaux transport"

    @property
    def billable_amount(self):
        return self.price


class FreightSlip(Slip):
    slip_type = SlipType.FREIGHT

    fournisseur = models.ForeignKey(
        "clients.Fournisseur",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="freight_slips",
        verbose_name="Fournisseur",
    )
    purchase_price = models.DecimalField(
        max_digits=10, decimal_places=2, default=0, verbose_name="Prix d'achat HT"
    )
    selling_price = models.DecimalField(
        max_digits=10, decimal_places=2, null=True, blank=True, verbose_name="Prix de vente HT"
    )
    margin = models.DecimalField(max_digits=10, decimal_places=2, default=0, editable=False, verbose_name="Marge")
    margin_rate = models.DecimalField(
        max_digits=7, decimal_places=2, default=0, editable=False, verbose_name="Taux de marge (%)"
    )
    supplier_invoice_received = models.BooleanField(default=False, verbose_name="Facture fournisseur reçue")
    supplier_invoice_paid = models.BooleanField(default=False, verbose_name="Facture fournisseur payée")

    class Meta(Slip.Meta):
        verbose_name = "Bordereau affrètement"
        verbose_name_plural = "Bordereaux affrètement"

    def save(self, *args, **kwargs):
        self.margin, self.margin_rate = compute_freight_margin(self.purchase_price, self.selling_price)
        update_fields = kwargs.get("update_fields")
        if update_fields is not None and {"purchase_price", "selling_price"} & set(update_fields):
            kwargs["update_fields"] = set(update_fields) | {"margin", "margin_rate"}
        super().save(*args, **kwargs)

    @property
    def billable_amount(self):
        return self.selling_price or Decimal("0")


class SlipNumberConfig(models.Model):
    """Running counter for slip numbers, one row per slip type."""

    type = models.CharField(max_length=10, choices=SlipType.choices, unique=True, verbose_name="Type")
    prefix = models.CharField(max_length=10, verbose_name="Préfixe")
    current_number = models.PositiveIntegerField(default=0, verbose_name="Dernier numéro")
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Numérotation des bordereaux"
        verbose_name_plural = "Numérotation des bordereaux"

    def __str__(self):
        return f"{self.get_type_display()}: {self.prefix} {self.current_number:04d}"


def extract_city(address):
    """
    City from an address written as "Company, Street, PostalCode City".

    Falls back to "Ville" when the address has fewer than three parts.
    """
    parts = (address or "").split(",")
    if len(parts) >= 3:
        words = parts[-1].strip().split(" ")
        return " ".join(words[1:]) or "Ville"
    return "Ville"
