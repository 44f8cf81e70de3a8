from decimal import Decimal

from django import forms
from django.utils import timezone

from accounts.forms import TailwindFormMixin
from clients.models import Client

from .services import get_invoice_by_number


class QuoteForm(TailwindFormMixin, forms.Form):
    client = forms.ModelChoiceField(queryset=Client.objects.all(), label="Client")
    date_emission = forms.DateField(
        label="Date d'émission",
        initial=timezone.localdate,
        widget=forms.DateInput(attrs={"type": "date"}),
    )
    description = forms.CharField(label="Description", widget=forms.Textarea(attrs={"rows": 4}))
    montant_ht = forms.DecimalField(label="Montant HT", max_digits=12, decimal_places=2, min_value=Decimal("0"))
    tva_rate = forms.DecimalField(
        label="Taux de TVA (%)",
        max_digits=5,
        decimal_places=2,
        min_value=Decimal("0"),
        required=False,
        help_text="Vide = taux du client",
    )


class CreditNoteForm(TailwindFormMixin, forms.Form):
    invoice_numero = forms.CharField(
        label="N° de facture", max_length=20, required=False, help_text="ex. F2406-03"
    )
    client = forms.ModelChoiceField(
        queryset=Client.objects.all(),
        label="Client",
        required=False,
        help_text="Pour un avoir sans facture d'origine",
    )
    motif = forms.CharField(label="Motif", widget=forms.Textarea(attrs={"rows": 3}))
    montant_ht = forms.DecimalField(label="Montant HT", max_digits=12, decimal_places=2)
    is_partial = forms.BooleanField(label="Avoir partiel", required=False)

    def clean_invoice_numero(self):
        numero = self.cleaned_data["invoice_numero"].strip()
        if not numero:
            return None
        invoice = get_invoice_by_number(numero)
        if invoice is None:
            raise forms.ValidationError(f"Facture {numero} introuvable")
        return invoice

    def clean(self):
        cleaned = super().clean()
        if not cleaned.get("invoice_numero") and not cleaned.get("client") and not self.errors:
            raise forms.ValidationError("Vous devez spécifier soit une facture, soit un client")
        return cleaned
