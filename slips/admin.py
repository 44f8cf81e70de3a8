from django.contrib import admin
from unfold.admin import ModelAdmin

from .models import FreightSlip, SlipNumberConfig, TransportSlip
from .services import create_freight_slip, create_transport_slip

SLIP_FIELDSETS = (
    ("Bordereau", {"fields": ("number", "status", "client", "order_number")}),
    (
        "Chargement / livraison",
        {
            "fields": (
                ("loading_date", "loading_contact"),
                "loading_address",
                ("delivery_date", "delivery_contact"),
                "delivery_address",
            ),
        },
    ),
    (
        "Marchandise",
        {"fields": ("goods_description", ("weight", "volume"), "vehicle_type", "instructions", "observations")},
    ),
    ("Documents", {"fields": ("cmr_file",)}),
)


class SlipAdmin(ModelAdmin):
    list_filter = ("status", "loading_date")
    search_fields = ("number", "client__nom", "order_number", "goods_description")
    date_hierarchy = "loading_date"
    readonly_fields = ("number", "created_by", "created_at", "updated_at")
    create_slip = None

    def save_model(self, request, obj, form, change):
        if change:
            super().save_model(request, obj, form, change)
            return
        # New slips get their number from the locked counter
        fields = dict(form.cleaned_data)
        if not fields.get("cmr_file"):
            fields.pop("cmr_file", None)
        created = type(self).create_slip(created_by=request.user, **fields)
        obj.pk = created.pk
        obj.number = created.number


@admin.register(TransportSlip)
class TransportSlipAdmin(SlipAdmin):
    list_display = ("number", "client", "loading_date", "loading_address", "price", "status")
    fieldsets = SLIP_FIELDSETS + (("Tarif", {"fields": ("price", "kilometers", "price_per_km")}),)
    create_slip = staticmethod(create_transport_slip)


@admin.register(FreightSlip)
class FreightSlipAdmin(SlipAdmin):
    list_display = (
        "number", "client", "fournisseur", "loading_date", "purchase_price", "selling_price", "margin", "status"
    )
    list_filter = ("status", "loading_date", "supplier_invoice_received", "supplier_invoice_paid")
    readonly_fields = SlipAdmin.readonly_fields + ("margin", "margin_rate")
    fieldsets = SLIP_FIELDSETS + (
        (
            "Affrètement",
            {
                "fields": (
                    "fournisseur",
                    ("purchase_price", "selling_price"),
                    ("margin", "margin_rate"),
                    ("supplier_invoice_received", "supplier_invoice_paid"),
                ),
            },
        ),
    )
    create_slip = staticmethod(create_freight_slip)


@admin.register(SlipNumberConfig)
class SlipNumberConfigAdmin(ModelAdmin):
    list_display = ("type", "prefix", "current_number", "updated_at")
    readonly_fields = ("current_number", "updated_at")
