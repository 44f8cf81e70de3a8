"""Slip views — per-type list with invoicing state, status updates."""

from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.db.models import Q
from django.shortcuts import get_object_or_404, redirect, render
from django.views.decorators.http import require_POST

from billing.models import InvoiceSlipReference

from .models import SlipStatus
from .services import parse_slip_type, update_slip_status, visible_slips


@login_required
def slip_list(request, slip_type):
    slip_type = parse_slip_type(slip_type)
    slips = visible_slips(slip_type, request.user)

    status = request.GET.get("status", "")
    if status:
        slips = slips.filter(status=status)
    q = request.GET.get("q", "").strip()
    if q:
        slips = slips.filter(Q(number__icontains=q) | Q(client__nom__icontains=q) | Q(order_number__icontains=q))
    start = request.GET.get("start")
    end = request.GET.get("end")
    if start:
        slips = slips.filter(loading_date__gte=start)
    if end:
        slips = slips.filter(loading_date__lte=end)

    invoiced_ids = set(
        InvoiceSlipReference.objects.filter(slip_type=slip_type).values_list("slip_id", flat=True)
    )
    return render(
        request,
        "slips/list.html",
        {
            "slips": slips,
            "slip_type": slip_type,
            "invoiced_ids": invoiced_ids,
            "statuses": SlipStatus.choices,
            "status": status,
            "q": q,
        },
    )


@login_required
@require_POST
def slip_status(request, slip_type, pk):
    slip = get_object_or_404(visible_slips(parse_slip_type(slip_type), request.user), pk=pk)
    try:
        update_slip_status(slip, request.POST.get("status", ""))
    except ValueError as exc:
        messages.error(request, str(exc))
    return redirect("slips:list", slip_type=slip_type)
