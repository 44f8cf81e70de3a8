from django.contrib import admin
from unfold.admin import ModelAdmin, TabularInline

from .models import ClientInvoice, ClientQuote, CreditNote, InvoiceSlipReference, NumberSequence, Setting

ISSUED_FIELDS = (
    "numero",
    "client",
    "date_emission",
    "montant_ht",
    "tva_rate",
    "tva",
    "montant_ttc",
    "statut",
    "lien_pdf",
    "created_by",
    "created_at",
)


class IssuedDocumentAdmin(ModelAdmin):
    """Issued documents are read-only here; statuses change through billing.services.change_status."""

    list_filter = ("statut", "date_emission")
    search_fields = ("numero", "client__nom")
    date_hierarchy = "date_emission"
    readonly_fields = ISSUED_FIELDS

    def has_add_permission(self, request):
        # Documents are issued through billing.services only
        return False

    def has_delete_permission(self, request, obj=None):
        return False


class InvoiceSlipReferenceInline(TabularInline):
    model = InvoiceSlipReference
    extra = 0
    readonly_fields = ("slip_type", "slip_id", "created_at")
    can_delete = False


@admin.register(ClientInvoice)
class ClientInvoiceAdmin(IssuedDocumentAdmin):
    list_display = ("numero", "kind", "client", "date_emission", "montant_ht", "montant_ttc", "statut")
    list_filter = ("statut", "kind", "date_emission")
    readonly_fields = ISSUED_FIELDS + ("kind", "transport_slip", "freight_slip", "metadata", "lien_cmr")
    inlines = [InvoiceSlipReferenceInline]


@admin.register(ClientQuote)
class ClientQuoteAdmin(IssuedDocumentAdmin):
    list_display = ("numero", "client", "date_emission", "montant_ht", "montant_ttc", "statut", "invoice")
    readonly_fields = ISSUED_FIELDS + ("description", "invoice")


@admin.register(CreditNote)
class CreditNoteAdmin(IssuedDocumentAdmin):
    list_display = ("numero", "client", "invoice", "date_emission", "montant_ht", "montant_ttc", "statut")
    readonly_fields = ISSUED_FIELDS + ("motif", "invoice", "is_partial")


@admin.register(NumberSequence)
class NumberSequenceAdmin(ModelAdmin):
    list_display = ("prefix", "document_type", "current_number", "updated_at")
    list_filter = ("document_type",)
    readonly_fields = ("document_type", "prefix", "current_number", "updated_at")

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(Setting)
class SettingAdmin(ModelAdmin):
    list_display = ("key", "value", "description")
    search_fields = ("key", "description")
