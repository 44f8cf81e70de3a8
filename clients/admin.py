from django.contrib import admin
from unfold.admin import ModelAdmin, TabularInline

from .models import AccountingContact, Client, Fournisseur


class AccountingContactInline(TabularInline):
    model = AccountingContact
    extra = 0


@admin.register(Client)
class ClientAdmin(ModelAdmin):
    list_display = ("nom", "email", "telephone", "preference_facturation", "tva_rate", "created_at")
    list_filter = ("preference_facturation", "numero_commande_requis")
    search_fields = ("nom", "email", "siret", "numero_tva")
    readonly_fields = ("created_at", "updated_at")
    inlines = [AccountingContactInline]

    fieldsets = (
        ("Identité", {"fields": ("nom", "email", "telephone")}),
        (
            "Facturation",
            {
                "fields": (
                    "adresse_facturation",
                    "preference_facturation",
                    "tva_rate",
                    "numero_commande_requis",
                    "siret",
                    "numero_tva",
                ),
            },
        ),
        ("Suivi", {"fields": ("created_by", "created_at", "updated_at"), "classes": ["collapse"]}),
    )


@admin.register(Fournisseur)
class FournisseurAdmin(ModelAdmin):
    list_display = ("nom", "contact_nom", "email", "telephone", "conditions_paiement")
    search_fields = ("nom", "contact_nom", "email", "siret")
    readonly_fields = ("created_at", "updated_at")
