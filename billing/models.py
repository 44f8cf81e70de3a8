"""
Billing models — client invoices, quotes and credit notes.

CRITICAL: document numbers (numero) are allocated by billing.numbering
from a locked NumberSequence row, inside the same transaction that inserts
the document. Numbers are unique and strictly increasing per
(type, year, month) bucket, e.g. F2406-01, D2406-01, A2406-001.

Issued documents are never edited structurally: only `statut` changes,
through billing.services.change_status.
"""

from django.conf import settings
from django.db import models


class DocumentType(models.TextChoices):
    INVOICE = "invoice", "Facture"
    QUOTE = "quote", "Devis"
    CREDIT_NOTE = "credit_note", "Avoir"


class InvoiceStatus(models.TextChoices):
    PENDING = "en_attente", "En attente"
    PAID = "paye", "Payée"


class QuoteStatus(models.TextChoices):
    PENDING = "en_attente", "En attente"
    ACCEPTED = "accepte", "Accepté"
    REFUSED = "refuse", "Refusé"
    INVOICED = "facture", "Facturé"


class CreditNoteStatus(models.TextChoices):
    ISSUED = "emis", "Émis"
    BOOKED = "comptabilise", "Comptabilisé"


class InvoiceKind(models.TextChoices):
    SINGLE = "facture", "Facture"
    GROUPED = "facture_groupee", "Facture groupée"
    FROM_QUOTE = "facture_devis", "Facture sur devis"


class NumberSequence(models.Model):
    """
    Last number issued in one (document type, YYMM bucket).

    Example: document_type="invoice", prefix="F2406", current_number=3
    → the next invoice of June 2024 is F2406-04.
    """

    document_type = models.CharField(max_length=20, choices=DocumentType.choices, verbose_name="Type")
    prefix = models.CharField(max_length=10, verbose_name="Préfixe")
    current_number = models.PositiveIntegerField(default=0, verbose_name="Dernier numéro")
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Compteur de numérotation"
        verbose_name_plural = "Compteurs de numérotation"
        ordering = ["-prefix", "document_type"]
        constraints = [
            models.UniqueConstraint(fields=["document_type", "prefix"], name="unique_sequence_per_bucket"),
        ]

    def __str__(self):
        return f"{self.prefix} → {self.current_number}"


class BillingDocument(models.Model):
    """Fields shared by invoices, quotes and credit notes."""

    document_type = None

    numero = models.CharField(max_length=20, unique=True, editable=False, verbose_name="Numéro")
    client = models.ForeignKey(
        "clients.Client",
        on_delete=models.PROTECT,
        related_name="%(class)ss",
        verbose_name="Client",
    )
    date_emission = models.DateField(verbose_name="Date d'émission")
    montant_ht = models.DecimalField(max_digits=12, decimal_places=2, verbose_name="Montant HT")
    tva_rate = models.DecimalField(max_digits=5, decimal_places=2, verbose_name="Taux de TVA (%)")
    tva = models.DecimalField(max_digits=12, decimal_places=2, verbose_name="TVA")
    montant_ttc = models.DecimalField(max_digits=12, decimal_places=2, verbose_name="Montant TTC")
    lien_pdf = models.CharField(max_length=255, blank=True, verbose_name="PDF")
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="created_%(class)ss",
        verbose_name="Émis par",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.numero} — {self.client}"


class ClientInvoice(BillingDocument):
    document_type = DocumentType.INVOICE

    kind = models.CharField(
        max_length=20, choices=InvoiceKind.choices, default=InvoiceKind.SINGLE, verbose_name="Type"
    )
    transport_slip = models.ForeignKey(
        "slips.TransportSlip",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="invoices",
        verbose_name="Bordereau transport",
    )
    freight_slip = models.ForeignKey(
        "slips.FreightSlip",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="invoices",
        verbose_name="Bordereau affrètement",
    )
    lien_cmr = models.CharField(max_length=255, blank=True, verbose_name="CMR")
    statut = models.CharField(
        max_length=20,
        choices=InvoiceStatus.choices,
        default=InvoiceStatus.PENDING,
        db_index=True,
        verbose_name="Statut",
    )
    metadata = models.JSONField(default=dict, blank=True)

    class Meta(BillingDocument.Meta):
        verbose_name = "Facture"
        verbose_name_plural = "Factures"
        constraints = [
            models.CheckConstraint(
                condition=models.Q(transport_slip__isnull=True) | models.Q(freight_slip__isnull=True),
                name="invoice_single_source_slip",
            ),
        ]
        indexes = [
            models.Index(fields=["statut", "date_emission"], name="invoice_statut_date_idx"),
        ]

    @property
    def slip(self):
        return self.transport_slip or self.freight_slip

    @property
    def grouped_slips(self):
        """Slip references of a grouped invoice, as stored at issue time."""
        return self.metadata.get("slips", [])


class InvoiceSlipReference(models.Model):
    """Links a grouped invoice to each slip it covers. A slip is invoiced at most once."""

    invoice = models.ForeignKey(ClientInvoice, on_delete=models.CASCADE, related_name="slip_references")
    slip_type = models.CharField(
        max_length=10,
        choices=[("transport", "Transport"), ("freight", "Affrètement")],
    )
    slip_id = models.PositiveBigIntegerField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = "Bordereau facturé"
        verbose_name_plural = "Bordereaux facturés"
        constraints = [
            models.UniqueConstraint(fields=["slip_type", "slip_id"], name="unique_invoiced_slip"),
        ]

    def __str__(self):
        return f"{self.invoice.numero} ← {self.slip_type} #{self.slip_id}"


class ClientQuote(BillingDocument):
    document_type = DocumentType.QUOTE

    description = models.TextField(verbose_name="Description")
    statut = models.CharField(
        max_length=20,
        choices=QuoteStatus.choices,
        default=QuoteStatus.PENDING,
        db_index=True,
        verbose_name="Statut",
    )
    invoice = models.OneToOneField(
        ClientInvoice,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="source_quote",
        verbose_name="Facture",
    )

    class Meta(BillingDocument.Meta):
        verbose_name = "Devis"
        verbose_name_plural = "Devis"


class CreditNote(BillingDocument):
    document_type = DocumentType.CREDIT_NOTE

    invoice = models.ForeignKey(
        ClientInvoice,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="credit_notes",
        verbose_name="Facture d'origine",
    )
    motif = models.TextField(verbose_name="Motif")
    is_partial = models.BooleanField(default=False, verbose_name="Avoir partiel")
    statut = models.CharField(
        max_length=20,
        choices=CreditNoteStatus.choices,
        default=CreditNoteStatus.ISSUED,
        db_index=True,
        verbose_name="Statut",
    )

    class Meta(BillingDocument.Meta):
        verbose_name = "Avoir"
        verbose_name_plural = "Avoirs"


class Setting(models.Model):
    """
    Key-value store for company configuration printed on documents.

    Examples: nom_societe, adresse, code_postal, ville, siret, numero_tva,
    telephone, email, rib_banque, rib_iban, rib_bic, mentions_legales,
    notification_email_enabled, notification_email_recipient
    """

    key = models.CharField(max_length=100, unique=True, verbose_name="Clé")
    value = models.TextField(verbose_name="Valeur")
    description = models.CharField(max_length=255, blank=True, verbose_name="Description")

    class Meta:
        verbose_name = "Paramètre"
        verbose_name_plural = "Paramètres"

    def __str__(self):
        return f"{self.key} = {self.value[:50]}"

    @classmethod
    def get(cls, key, default=""):
        try:
            return cls.objects.get(key=key).value
        except cls.DoesNotExist:
            return default

    @classmethod
    def company_info(cls):
        """Company identity block for document headers and footers."""
        keys = [
            "nom_societe", "adresse", "code_postal", "ville", "siret", "numero_tva",
            "telephone", "email", "rib_banque", "rib_iban", "rib_bic", "mentions_legales",
        ]
        values = dict(cls.objects.filter(key__in=keys).values_list("key", "value"))
        info = {key: values.get(key, "") for key in keys}
        info["nom_societe"] = info["nom_societe"] or "MZN TRANSPORT"
        return info
