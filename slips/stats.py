"""Dispute statistics across transport and freight slips."""

from django.db.models import Count

from .models import FreightSlip, SlipStatus, TransportSlip


def disputes_by_client(start=None, end=None):
    """
    Count slips in dispute per client over an optional loading-date period.

    Returns {"disputes": [{client_id, client_nom, count}, ...],
             "total_clients_with_dispute": n}, sorted by count descending.
    """
    per_client = {}
    for model in (TransportSlip, FreightSlip):
        qs = model.objects.filter(status=SlipStatus.DISPUTE, client__isnull=False)
        if start:
            qs = qs.filter(loading_date__gte=start)
        if end:
            qs = qs.filter(loading_date__lte=end)
        for row in qs.values("client_id", "client__nom").annotate(count=Count("id")):
            entry = per_client.setdefault(
                row["client_id"],
                {"client_id": row["client_id"], "client_nom": row["client__nom"] or "Inconnu", "count": 0},
            )
            entry["count"] += row["count"]

    disputes = sorted(per_client.values(), key=lambda d: (-d["count"], d["client_nom"]))
    return {"disputes": disputes, "total_clients_with_dispute": len(disputes)}
