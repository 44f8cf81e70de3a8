"""Billing views — invoices, quotes and credit notes, plus stored PDF downloads."""

from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.core.exceptions import PermissionDenied
from django.core.files.storage import default_storage
from django.db.models import Q
from django.http import FileResponse, Http404
from django.shortcuts import get_object_or_404, redirect, render
from django.views.decorators.http import require_POST

from accounts.mixins import owned_by_user, role_required
from accounts.models import Role
from slips.services import slip_model

from . import services
from .exceptions import BillingError
from .forms import CreditNoteForm, QuoteForm
from .models import (
    ClientInvoice,
    ClientQuote,
    CreditNote,
    CreditNoteStatus,
    DocumentType,
    InvoiceStatus,
    QuoteStatus,
)

DOCUMENT_MODELS = {
    DocumentType.INVOICE: ClientInvoice,
    DocumentType.QUOTE: ClientQuote,
    DocumentType.CREDIT_NOTE: CreditNote,
}


def _search(queryset, request):
    q = request.GET.get("q", "").strip()
    if q:
        queryset = queryset.filter(Q(numero__icontains=q) | Q(client__nom__icontains=q))
    statut = request.GET.get("statut", "")
    if statut:
        queryset = queryset.filter(statut=statut)
    return queryset, q, statut


# ---------------------------------------------------------------------------
# Invoices
# ---------------------------------------------------------------------------

@role_required(Role.FACTURATION)
def invoice_list(request):
    invoices = ClientInvoice.objects.select_related("client").order_by("-created_at")
    invoices, q, statut = _search(invoices, request)
    return render(
        request,
        "billing/invoice_list.html",
        {"invoices": invoices, "q": q, "statut": statut, "statuses": InvoiceStatus.choices},
    )


@role_required(Role.FACTURATION)
def invoice_detail(request, pk):
    invoice = get_object_or_404(
        ClientInvoice.objects.select_related("client", "transport_slip", "freight_slip", "created_by"),
        pk=pk,
    )
    return render(request, "billing/invoice_detail.html", {"invoice": invoice, "statuses": InvoiceStatus.choices})


@role_required(Role.FACTURATION)
@require_POST
def invoice_create_from_slip(request, slip_type, slip_id):
    slip = get_object_or_404(slip_model(slip_type), pk=slip_id)
    try:
        invoice = services.create_invoice_from_slip(slip, user=request.user)
    except BillingError as exc:
        messages.error(request, str(exc))
        return redirect("slips:list", slip_type=slip_type)
    messages.success(request, f"Facture {invoice.numero} créée")
    return redirect("billing:invoice_detail", pk=invoice.pk)


@role_required(Role.FACTURATION)
@require_POST
def invoice_create_grouped(request, slip_type):
    model = slip_model(slip_type)
    ids = [pk for pk in request.POST.getlist("slip_ids") if pk.isdigit()]
    slips = list(model.objects.filter(pk__in=ids).order_by("loading_date", "number"))
    try:
        invoice = services.create_grouped_invoice(slips, user=request.user)
    except BillingError as exc:
        messages.error(request, str(exc))
        return redirect("slips:list", slip_type=slip_type)
    messages.success(request, f"Facture groupée {invoice.numero} créée ({len(slips)} bordereaux)")
    return redirect("billing:invoice_detail", pk=invoice.pk)


@role_required(Role.FACTURATION)
@require_POST
def invoice_status(request, pk):
    invoice = get_object_or_404(ClientInvoice, pk=pk)
    try:
        services.change_status(invoice, request.POST.get("statut", ""))
    except BillingError as exc:
        messages.error(request, str(exc))
    return redirect("billing:invoice_detail", pk=pk)


# ---------------------------------------------------------------------------
# Quotes
# ---------------------------------------------------------------------------

@login_required
def quote_list(request):
    quotes = owned_by_user(ClientQuote.objects.select_related("client"), request.user)
    quotes, q, statut = _search(quotes.order_by("-created_at"), request)
    return render(
        request,
        "billing/quote_list.html",
        {
            "quotes": quotes,
            "q": q,
            "statut": statut,
            "statuses": QuoteStatus.choices,
            "manual_statuses": [c for c in QuoteStatus.choices if c[0] != QuoteStatus.INVOICED],
        },
    )


@login_required
def quote_create(request):
    if request.method == "POST":
        form = QuoteForm(request.POST)
        if form.is_valid():
            data = form.cleaned_data
            try:
                quote = services.create_quote(
                    client=data["client"],
                    description=data["description"],
                    montant_ht=data["montant_ht"],
                    tva_rate=data["tva_rate"],
                    date_emission=data["date_emission"],
                    user=request.user,
                )
            except BillingError as exc:
                form.add_error(None, str(exc))
            else:
                messages.success(request, f"Devis {quote.numero} créé")
                return redirect("billing:quote_list")
    else:
        form = QuoteForm()
    return render(request, "billing/form.html", {"form": form, "action": "Nouveau devis"})


@login_required
@require_POST
def quote_status(request, pk):
    quote = get_object_or_404(owned_by_user(ClientQuote.objects.all(), request.user), pk=pk)
    try:
        services.change_status(quote, request.POST.get("statut", ""))
    except BillingError as exc:
        messages.error(request, str(exc))
    return redirect("billing:quote_list")


@role_required(Role.FACTURATION)
@require_POST
def quote_convert(request, pk):
    quote = get_object_or_404(ClientQuote, pk=pk)
    try:
        invoice = services.convert_quote_to_invoice(quote, user=request.user)
    except BillingError as exc:
        messages.error(request, str(exc))
        return redirect("billing:quote_list")
    messages.success(request, f"Devis {quote.numero} facturé : {invoice.numero}")
    return redirect("billing:invoice_detail", pk=invoice.pk)


# ---------------------------------------------------------------------------
# Credit notes
# ---------------------------------------------------------------------------

@role_required(Role.FACTURATION)
def credit_note_list(request):
    credit_notes = CreditNote.objects.select_related("client", "invoice").order_by("-created_at")
    credit_notes, q, statut = _search(credit_notes, request)
    return render(
        request,
        "billing/credit_note_list.html",
        {"credit_notes": credit_notes, "q": q, "statut": statut, "statuses": CreditNoteStatus.choices},
    )


@role_required(Role.FACTURATION)
def credit_note_create(request):
    if request.method == "POST":
        form = CreditNoteForm(request.POST)
        if form.is_valid():
            data = form.cleaned_data
            try:
                credit_note = services.create_credit_note(
                    motif=data["motif"],
                    montant_ht=data["montant_ht"],
                    invoice=data["invoice_numero"],
                    client=data["client"],
                    is_partial=data["is_partial"],
                    user=request.user,
                )
            except BillingError as exc:
                form.add_error(None, str(exc))
            else:
                messages.success(request, f"Avoir {credit_note.numero} créé")
                return redirect("billing:credit_note_list")
    else:
        form = CreditNoteForm(initial={"invoice_numero": request.GET.get("invoice", "")})
    return render(request, "billing/form.html", {"form": form, "action": "Nouvel avoir"})


@role_required(Role.FACTURATION)
@require_POST
def credit_note_status(request, pk):
    credit_note = get_object_or_404(CreditNote, pk=pk)
    try:
        services.change_status(credit_note, request.POST.get("statut", ""))
    except BillingError as exc:
        messages.error(request, str(exc))
    return redirect("billing:credit_note_list")


# ---------------------------------------------------------------------------
# PDF
# ---------------------------------------------------------------------------

@login_required
def document_pdf(request, document_type, pk):
    """Stream the PDF stored when the document was issued."""
    try:
        document_type = DocumentType(document_type)
    except ValueError:
        raise Http404("Type de document inconnu") from None

    if document_type == DocumentType.QUOTE:
        queryset = owned_by_user(ClientQuote.objects.all(), request.user)
    elif request.user.can_bill:
        queryset = DOCUMENT_MODELS[document_type].objects.all()
    else:
        raise PermissionDenied

    document = get_object_or_404(queryset, pk=pk)
    if not document.lien_pdf or not default_storage.exists(document.lien_pdf):
        raise Http404("Aucun PDF disponible pour ce document")
    return FileResponse(
        default_storage.open(document.lien_pdf, "rb"),
        content_type="application/pdf",
        filename=f"{document.numero}.pdf",
    )
