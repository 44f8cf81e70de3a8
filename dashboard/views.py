"""Back-office dashboard — receivables, overdue invoices and disputes."""

from django.contrib.auth.decorators import login_required
from django.shortcuts import render
from django.utils import timezone
from django.utils.dateparse import parse_date

from billing.stats import overdue_invoices, unpaid_invoice_stats
from slips.stats import disputes_by_client


def _period(request, today):
    """Period from ?start=&end= (ISO dates), defaulting to the current month."""
    start = parse_date(request.GET.get("start") or "") or today.replace(day=1)
    end = parse_date(request.GET.get("end") or "") or today
    return start, end


@login_required
def dashboard(request):
    today = timezone.localdate()
    try:
        start, end = _period(request, today)
    except ValueError:
        start, end = today.replace(day=1), today

    return render(
        request,
        "dashboard/home.html",
        {
            "start": start,
            "end": end,
            "today": today,
            "invoice_stats": unpaid_invoice_stats(start, end, today=today),
            "all_time_stats": unpaid_invoice_stats(today=today),
            "overdue_invoices": overdue_invoices(today=today)[:10],
            "dispute_stats": disputes_by_client(start, end),
        },
    )
